"""Shared pytest fixtures."""

import os

import pytest

from glacierup.logwriter import TEXT
from glacierup.state import AppState

from .fakes import FakeGlacier, Sleeper


@pytest.fixture
def glacier():
    return FakeGlacier(vaults=["photos", "taxes"])


@pytest.fixture
def sleeper():
    return Sleeper()


@pytest.fixture
def state(tmp_path):
    return AppState(
        access_key="AKIDEXAMPLE",
        secret_key="secret",
        vault="photos",
        region_index=1,
        log_type=TEXT,
        directory=str(tmp_path),
    )


@pytest.fixture
def make_files(tmp_path):
    """
    Returns a function creating files of the given sizes, returning their
    real paths in order.
    """

    def make(*sizes):
        folder = tmp_path / "upload"
        folder.mkdir(exist_ok=True)
        paths = []
        for i, size in enumerate(sizes):
            path = folder / ("file%s.bin" % i)
            path.write_bytes(b"x" * size)
            paths.append(os.path.realpath(str(path)))
        return paths

    return make
