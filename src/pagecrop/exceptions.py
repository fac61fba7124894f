"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


# Errors raised inside `with` blocks stay mutable: contextlib assigns `__traceback__`.


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(eq=False)
class DocumentLoadError(PackageError):
    """Raised when source bytes cannot be parsed as a PDF document."""

    message: str = "Failed to load PDF. Please try uploading again."

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(eq=False)
class SelectionError(PackageError):
    """Raised when a page set or crop rectangle is rejected before rebuilding."""

    message: str
    offending_value: int | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(eq=False)
class RebuildError(PackageError):
    """Raised when copying pages or saving the rebuilt document fails."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(eq=False)
class SessionBusyError(PackageError):
    """Raised when a rebuild is requested while another one is in flight."""

    message: str = "A document is already being processed"

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
