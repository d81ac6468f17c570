"""I/O utilities (configuration loading)."""

from .settings import (
    DEFAULT_SETTINGS_PATH,
    PathLike,
    find_project_root,
    load_settings,
)

__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "PathLike",
    "find_project_root",
    "load_settings",
]
