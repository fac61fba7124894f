"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Self

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagecrop.exceptions import SettingsError

logger = logging.getLogger(__name__)

PDF_POINTS_PER_INCH = 72.0


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "pagecrop"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    crop_left_pad_pt: float = Field(
        default=30.0,
        ge=0.0,
        validation_alias="CROP_LEFT_PAD_PT",
        description="Points subtracted from the left edge of every crop box.",
    )
    crop_right_shrink_pt: float = Field(
        default=1.0,
        ge=0.0,
        validation_alias="CROP_RIGHT_SHRINK_PT",
        description="Points removed from the exact crop width on the right edge.",
    )
    screen_dpi: float = Field(
        default=96.0,
        gt=0.0,
        validation_alias="SCREEN_DPI",
        description="Reference display DPI used for pixel to point conversion.",
    )
    min_selection_px: float = Field(
        default=10.0,
        ge=0.0,
        validation_alias="MIN_SELECTION_PX",
        description="Selections must exceed this size on both axes to lock.",
    )
    handle_size_px: float = Field(
        default=10.0,
        ge=0.0,
        validation_alias="HANDLE_SIZE_PX",
        description="Side of the square hit box centered on each resize handle.",
    )

    min_scale: float = Field(default=0.5, gt=0.0, validation_alias="MIN_SCALE")
    max_scale: float = Field(default=2.0, gt=0.0, validation_alias="MAX_SCALE")
    zoom_step: float = Field(default=0.1, gt=0.0, validation_alias="ZOOM_STEP")
    default_scale: float = Field(default=1.0, gt=0.0, validation_alias="DEFAULT_SCALE")

    cropped_prefix: str = Field(default="cropped-", validation_alias="CROPPED_PREFIX")
    removed_prefix: str = Field(default="modified-", validation_alias="REMOVED_PREFIX")
    default_document_name: str = Field(default="document.pdf", validation_alias="DEFAULT_DOCUMENT_NAME")

    save_garbage: int = Field(
        default=3,
        ge=0,
        le=4,
        validation_alias="SAVE_GARBAGE",
        description="Garbage collection level used when serializing rebuilt documents.",
    )
    save_deflate: bool = Field(
        default=True,
        validation_alias="SAVE_DEFLATE",
        description="Compress streams when serializing rebuilt documents.",
    )

    @model_validator(mode="after")
    def _check_zoom_bounds(self) -> Self:
        """Validate zoom policy consistency.

        Raises:
            ValueError: If the default scale is outside the zoom bounds.

        Returns:
            Self: Validated settings.
        """
        if self.min_scale > self.max_scale:
            raise ValueError("MIN_SCALE must not exceed MAX_SCALE")
        if not self.min_scale <= self.default_scale <= self.max_scale:
            raise ValueError("DEFAULT_SCALE must lie within [MIN_SCALE, MAX_SCALE]")
        return self

    @property
    def pixels_per_point(self) -> float:
        """Return display pixels per PDF point at scale 1.0."""
        return self.screen_dpi / PDF_POINTS_PER_INCH


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            ensure_env_file_exists()
            try:
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
