import os
from pathlib import Path

DEFAULT_BASE_CLASS = "PackageMetadata"


def get_log_level() -> str:
    return os.getenv("NGX_PATCHER_LOG_LEVEL", "WARNING").upper()


def get_base_class() -> str:
    """Name of the class every package metadata service extends."""
    return os.getenv("NGX_PATCHER_BASE_CLASS", DEFAULT_BASE_CLASS)


def get_root() -> Path:
    return Path(os.getenv("NGX_PATCHER_ROOT", "."))
