from dataclasses import FrozenInstanceError

import pytest

from glacierup.config import Config
from glacierup.logwriter import CSV, LogWriter
from glacierup.state import AppState


def test_snapshot_ignores_later_edits(tmp_path):
    config = Config(str(tmp_path))
    config.set_access_key("AC")
    config.set_vault_key("photos")
    config.set_log_type_index(CSV)
    state = AppState.from_config(config)
    config.set_vault_key("other")
    assert state.vault == "photos"
    assert state.access_key == "AC"
    assert state.secret_key == ""
    assert state.directory == str(tmp_path)
    with pytest.raises(FrozenInstanceError):
        state.vault = "other"


def test_overrides(tmp_path):
    state = AppState.from_config(Config(str(tmp_path)), logging_enabled=False)
    assert state.log_writer() is None
    assert state.missing() == ["access key", "secret key", "vault"]


def test_log_writer_follows_log_type(state):
    writer = state.log_writer()
    assert isinstance(writer, LogWriter)
    assert writer.path.endswith("Glacier.log")


def test_client_for_region(state):
    client = state.client()
    assert client.region.name == "US_WEST_2"
