"""Page-set validation models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PageSetValidation(BaseModel):
    """Outcome of validating a page range expression against a page count."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ok: bool
    offending_value: int | None = None
    message: str | None = None
