"""PageCrop package."""

from pagecrop.async_runner import run_async
from pagecrop.exceptions import (
    AsyncExecutionError,
    DependencyError,
    DocumentLoadError,
    PackageError,
    RebuildError,
    SelectionError,
    SessionBusyError,
    SettingsError,
)
from pagecrop.logging import configure_logging, get_logger
from pagecrop.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("pagecrop")

__all__ = [
    "AsyncExecutionError",
    "DependencyError",
    "DocumentLoadError",
    "PackageError",
    "RebuildError",
    "SelectionError",
    "SessionBusyError",
    "Settings",
    "SettingsError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "run_async",
]
