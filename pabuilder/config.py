import os
from dataclasses import dataclass, replace
from typing import Optional

import toml
from packaging.version import InvalidVersion, Version

from .cli_logger import logger
from .errors import MalformedInputError
from .models import PORTAUDIO_SOURCE, SourceArchive

CONFIG_FILE = "pabuilder.toml"
SECTION = "portaudio"

FORCE_BUILD_ENV_VAR = "PORTAUDIO_ONLY_STATIC"
OUT_DIR_ENV_VAR = "OUT_DIR"
DEFAULT_OUT_DIR = os.path.join("target", "portaudio")


@dataclass(frozen=True)
class Settings:
    archive: SourceArchive = PORTAUDIO_SOURCE
    package: str = "portaudio-2.0"
    min_version: str = "19"
    fetch_tool: Optional[str] = None
    output_dir: Optional[str] = None
    force_build: bool = False
    platform: Optional[str] = None


def load_config(path="."):
    config_path = os.path.join(path, CONFIG_FILE)
    if os.path.exists(config_path):
        logger.info(f"Loading configuration from {config_path}")
        try:
            with open(config_path, "r") as f:
                return toml.load(f)
        except toml.TomlDecodeError as e:
            logger.error(f"Error decoding TOML file at {config_path}: {e}")
            logger.info("Please check the file's format for syntax errors.")
        except IOError as e:
            logger.error(f"Error reading configuration file at {config_path}: {e}")
    return {}

def save_config(config, path="."):
    config_path = os.path.join(path, CONFIG_FILE)
    logger.info(f"Saving configuration to {config_path}")
    try:
        with open(config_path, "w") as f:
            toml.dump(config, f)
        return True
    except IOError as e:
        logger.error(f"Error saving configuration to {config_path}: {e}")
        return False


def _validate_min_version(value):
    try:
        Version(value)
    except InvalidVersion as e:
        raise MalformedInputError(f"Invalid min_version '{value}' in {CONFIG_FILE}") from e
    return value


def build_settings(conf=None, environ=None, **overrides):
    """
    Merge built-in defaults, ``pabuilder.toml`` and the environment.

    Keyword overrides (from the CLI) win; ``None`` means "not given".
    """
    environ = os.environ if environ is None else environ
    section = (conf or {}).get(SECTION, {})

    archive = replace(
        PORTAUDIO_SOURCE,
        url=section.get("url") or PORTAUDIO_SOURCE.url,
        local_filename=section.get("archive") or PORTAUDIO_SOURCE.local_filename,
        extracted_folder_name=section.get("folder") or PORTAUDIO_SOURCE.extracted_folder_name,
        sha256=overrides.pop("sha256", None) or section.get("sha256") or None,
    )
    settings = Settings(
        archive=archive,
        package=section.get("package") or Settings.package,
        min_version=_validate_min_version(str(section.get("min_version") or Settings.min_version)),
        fetch_tool=section.get("fetch_tool") or None,
        output_dir=environ.get(OUT_DIR_ENV_VAR) or DEFAULT_OUT_DIR,
    )
    given = {key: value for key, value in overrides.items() if value not in (None, False)}
    return replace(settings, **given)
