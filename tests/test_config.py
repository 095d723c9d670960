import os

import pytest

from glacierup.config import PROPERTIES_FILE_NAME, Config, resolve_directory
from glacierup.exceptions import ConfigDirectoryError


@pytest.fixture
def properties_dir(tmp_path):
    (tmp_path / PROPERTIES_FILE_NAME).write_text(
        "#Properties\n"
        "accessKey=TEST_ACCESS\n"
        "secretKey=TEST_SECRET\n"
        "vaultKey=TEST_VAULT\n"
        "logType=1\n"
        "locationSet=3\n"
        "windowWidth=640\n"
    )
    return str(tmp_path)


def test_loads_properties_file(properties_dir):
    config = Config(properties_dir)
    assert config.access_key == "TEST_ACCESS"
    assert config.secret_key == "TEST_SECRET"
    assert config.vault_key == "TEST_VAULT"
    assert config.log_type_index == 1
    assert config.location_index == 3


def test_subset_of_keys_uses_defaults(tmp_path):
    (tmp_path / PROPERTIES_FILE_NAME).write_text("vaultKey=  padded  \nlogType=2\n")
    config = Config(str(tmp_path))
    assert config.vault_key == "padded"
    assert config.log_type_index == 2
    assert config.access_key is None
    assert config.secret_key is None
    assert config.location_index == 0


def test_getters_have_sensible_defaults(tmp_path):
    config = Config(str(tmp_path))
    assert config.log_type_index == 0
    assert config.location_index == 0
    assert config.vault_key is None
    assert config.secret_key is None
    assert config.access_key is None


def test_bare_key_keeps_other_values(tmp_path):
    (tmp_path / PROPERTIES_FILE_NAME).write_text(
        "accessKey=AK\nsecretKey=SE\nwindowState\n! a comment\nlocationSet=2\n"
    )
    config = Config(str(tmp_path))
    assert config.access_key == "AK"
    assert config.secret_key == "SE"
    assert config.location_index == 2
    assert config["windowState"] is None


def test_bare_key_is_saved_as_empty_value(tmp_path):
    (tmp_path / PROPERTIES_FILE_NAME).write_text("accessKey=AK\nwindowState\n")
    config = Config(str(tmp_path))
    config.set_vault_key("VA")
    assert config.save() is True
    contents = (tmp_path / PROPERTIES_FILE_NAME).read_text().splitlines()
    assert "windowState=" in contents
    assert "accessKey=AK" in contents
    assert Config(str(tmp_path)).vault_key == "VA"


def test_non_numeric_index_defaults_to_zero(tmp_path):
    (tmp_path / PROPERTIES_FILE_NAME).write_text("locationSet=three\n")
    assert Config(str(tmp_path)).location_index == 0


def test_path_joins_directory_and_file_name(properties_dir):
    config = Config(properties_dir)
    assert config.path == os.path.join(properties_dir, PROPERTIES_FILE_NAME)


def test_resolve_uses_working_dir_when_file_present(properties_dir, tmp_path_factory):
    home = tmp_path_factory.mktemp("home")
    assert resolve_directory(properties_dir, str(home / ".sagu")) == properties_dir
    assert not (home / ".sagu").exists()


def test_resolve_creates_home_dir(tmp_path_factory):
    working = tmp_path_factory.mktemp("working")
    home = tmp_path_factory.mktemp("home") / ".sagu"
    assert resolve_directory(str(working), str(home)) == str(home)
    assert home.is_dir()


def test_resolve_fails_when_home_cannot_be_created(tmp_path):
    working = tmp_path / "working"
    working.mkdir()
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(ConfigDirectoryError):
        resolve_directory(str(working), str(blocker / ".sagu"))


def test_constructor_falls_back_to_home(tmp_path_factory):
    working = tmp_path_factory.mktemp("working")
    home = tmp_path_factory.mktemp("home") / ".sagu"
    home.mkdir()
    (home / PROPERTIES_FILE_NAME).write_text("accessKey=TEST\n")
    config = Config(working_dir=str(working), home_dir=str(home))
    assert config.directory == str(home)
    assert config.access_key == "TEST"


def test_setters_change_values_and_report_it(properties_dir):
    config = Config(properties_dir)
    assert config.set_access_key("AC") is True
    assert config.set_secret_key("SE") is True
    assert config.set_vault_key("VA") is True
    assert config.set_location_index(1) is True
    assert config.set_log_type_index(2) is True

    assert config.access_key == "AC"
    assert config.secret_key == "SE"
    assert config.vault_key == "VA"
    assert config.location_index == 1
    assert config.log_type_index == 2

    assert config.set_access_key("AC") is False
    assert config.set_secret_key("SE") is False
    assert config.set_vault_key("VA") is False
    assert config.set_location_index(1) is False
    assert config.set_log_type_index(2) is False


def test_setters_sanitize_none(properties_dir):
    config = Config(properties_dir)
    assert config.set_access_key(None) is True
    assert config.set_secret_key(None) is True
    assert config.set_vault_key(None) is True

    assert config.access_key == ""
    assert config.secret_key == ""
    assert config.vault_key == ""

    assert config.set_access_key(None) is False
    assert config.set_secret_key("") is False
    assert config.set_vault_key(None) is False


def test_none_on_unset_key_is_unchanged(tmp_path):
    config = Config(str(tmp_path))
    assert config.set_vault_key(None) is False
    assert config.vault_key is None


def test_setters_trim_strings(properties_dir):
    config = Config(properties_dir)
    assert config.set_access_key(" AC ") is True
    assert config.set_secret_key(" SE ") is True
    assert config.set_vault_key(" VA ") is True

    assert config.access_key == "AC"
    assert config.secret_key == "SE"
    assert config.vault_key == "VA"

    assert config.set_access_key("AC ") is False
    assert config.set_secret_key("SE") is False
    assert config.set_vault_key("  VA") is False


def test_save_round_trip(tmp_path):
    config = Config(str(tmp_path))
    config.set_access_key("AC")
    config.set_secret_key("SE")
    config.set_vault_key("VA")
    config.set_location_index(3)
    config.set_log_type_index(4)
    assert config.save() is True

    contents = (tmp_path / PROPERTIES_FILE_NAME).read_text().splitlines()
    assert "accessKey=AC" in contents
    assert "locationSet=3" in contents

    reloaded = Config(str(tmp_path))
    assert reloaded.access_key == "AC"
    assert reloaded.secret_key == "SE"
    assert reloaded.vault_key == "VA"
    assert reloaded.location_index == 3
    assert reloaded.log_type_index == 4


def test_save_preserves_unknown_keys(properties_dir):
    config = Config(properties_dir)
    config.set_vault_key("OTHER")
    config.save()
    reloaded = Config(properties_dir)
    assert reloaded["windowWidth"] == "640"
    assert reloaded.vault_key == "OTHER"


def test_save_failure_is_reported_not_raised(tmp_path):
    config = Config(str(tmp_path / "missing"))
    config.set_access_key("AC")
    assert config.save() is False
