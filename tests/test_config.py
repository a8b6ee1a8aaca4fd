import logging

from bidicaster.config import add_config_dependencies, conformance_data_path, get_config, update_config
from bidicaster.display import get_base_level, resolve, shape


def test_missing_file_gives_empty_config():
    assert get_config() == {}
    assert conformance_data_path() is None


def test_default_direction(write_config):
    assert get_base_level("abc") == 0
    write_config(default_direction="rtl")
    assert get_base_level("abc") == 1
    # Explicit arguments still win.
    assert get_base_level("abc", "ltr") == 0


def test_mirror_switch(write_config):
    assert resolve("א(") == ")א"
    write_config(mirror=False)
    assert resolve("א(") == "(א"


def test_shaping_defaults(write_config):
    assert shape("12") == "12"
    write_config(shaping={"digits": "en2an"})
    assert shape("12") == "\u0661\u0662"
    assert shape("12", digits="noop") == "12"


def test_update_clears_cached_defaults(write_config, isolated_config):
    write_config(default_direction="rtl")
    assert get_base_level("abc") == 1
    (isolated_config / "Bidicaster_config.json").unlink()
    update_config()
    assert get_base_level("abc") == 0


def test_log_level(write_config):
    write_config(log_level="debug")
    assert logging.getLogger("bidicaster").level == logging.DEBUG


def test_conformance_data_path(write_config, isolated_config):
    write_config(conformance_data="$BIDICASTER/BidiCharacterTest.txt")
    assert conformance_data_path() == isolated_config / "BidiCharacterTest.txt"


def test_registered_caches_are_cleared(write_config):
    cache = {"stale": True}
    add_config_dependencies(cache)
    write_config(mirror=True)
    assert cache == {}
    assert get_config() == {"mirror": True}
