from __future__ import annotations

import pytest

from shift_hours.core import paths


@pytest.fixture(autouse=True)
def app_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    monkeypatch.setenv(paths.HOME_ENV_VAR, str(home))
    paths.set_app_data_directory(home)
    yield home
    paths.reset_app_data_directory()
