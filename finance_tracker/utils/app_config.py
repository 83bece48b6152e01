"""Pre-DB bootstrap configuration.

Stores settings that must be known before opening the DB (db_folder,
log_level, log_file). Config lives in ~/.finance-tracker/config.json, or under
$FINANCE_TRACKER_HOME when set.
"""
import json
import os
from pathlib import Path

from finance_tracker.utils.constants import DB_FILE
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)


def config_dir() -> Path:
    override = os.getenv("FINANCE_TRACKER_HOME")
    return Path(override) if override else Path.home() / ".finance-tracker"


def config_file() -> Path:
    return config_dir() / "config.json"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    path = config_file()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    path = config_file()
    tmp = path.with_suffix(".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, path)
    except OSError as exc:
        logger.error("Could not save config %s: %s", path, exc)
        tmp.unlink(missing_ok=True)


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def set_db_folder(path: str | None) -> None:
    """Update db_folder in config and save."""
    config = load_config()
    if path is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = path
    save_config(config)


def get_log_level() -> str | None:
    return load_config().get("log_level")


def get_log_file() -> str | None:
    """config["log_file"], relative paths resolved against the config dir."""
    log_file = load_config().get("log_file")
    if not log_file:
        return None
    path = Path(log_file).expanduser()
    return str(path if path.is_absolute() else config_dir() / path)


def database_path(db_folder: str | None = None) -> str:
    if db_folder:
        return os.path.join(db_folder, DB_FILE)
    return DB_FILE
