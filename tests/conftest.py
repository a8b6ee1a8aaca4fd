import json
import logging

import pytest

from bidicaster.config import update_config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point BIDICASTER at an empty directory so a developer's own config never leaks into tests."""
    monkeypatch.setenv("BIDICASTER", str(tmp_path))
    update_config()
    yield tmp_path
    logging.getLogger("bidicaster").setLevel(logging.NOTSET)


@pytest.fixture
def write_config(isolated_config):
    def _write(**values):
        path = isolated_config / "Bidicaster_config.json"
        path.write_text(json.dumps(values), encoding="utf-8")
        update_config()
        return path
    return _write
