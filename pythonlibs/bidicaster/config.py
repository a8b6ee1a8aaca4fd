"""
Submodule for loading the optional JSON file that sets bidicaster's defaults.

The file is JSON, found through the BIDICASTER environment variable. Every key is optional:

    {
        "default_direction": "auto",
        "mirror": true,
        "log_level": "DEBUG",
        "conformance_data": "$BIDICASTER/BidiCharacterTest.txt",
        "shaping": {"letters": "shape", "digits": "en2an", "length": "fixed_spaces_near"}
    }
"""

import logging
from json import load as json_load
from os.path import expandvars
from pathlib import Path

CONFIG_PATHSTRING = "$BIDICASTER/Bidicaster_config.json"

_CONFIG_ = {}

def __get_config__()-> dict:
    """Read the config file straight from disk, bypassing the module cache.
    get_config() is what everything else should call.

    Returns:
        dict: Parsed file contents, or an empty dict when there's no file.
    """
    cfg = {}
    filepath = Path(expandvars(CONFIG_PATHSTRING))
    if filepath.is_file():
        with filepath.open(encoding="utf-8") as file:
            cfg = json_load(file)
    return cfg

__CONFIG_DEPENDENCIES__ = []

def add_config_dependencies( *args ):
    """Register caches derived from config values. update_config() empties each of
    them, so the next lookup rebuilds it from the fresh file (bidicaster.display keeps
    its call defaults in one of these).

    Args:
        *args: Objects with a clear() method, usually dicts.
    """
    for dep in args:
        __CONFIG_DEPENDENCIES__.append(dep)

def update_config():
    """Re-read the config file and clear every registered cache.
    A log_level key also sets the level of the bidicaster logger.
    """
    _CONFIG_.clear()
    for dependency in __CONFIG_DEPENDENCIES__:
        dependency.clear()
    _CONFIG_.update(__get_config__())
    level = _CONFIG_.get("log_level")
    if level:
        logging.getLogger("bidicaster").setLevel(str(level).upper())

def get_config() -> (dict):
    """The cached config, read from disk on first use."""
    if not _CONFIG_:
        update_config()
    return _CONFIG_

def conformance_data_path():
    """Path to a BidiCharacterTest.txt file, if the config names one."""
    path = get_config().get("conformance_data")
    if not path:
        return None
    return Path(expandvars(path)).expanduser()
