"""
Manual overrides for duplicate resolution.

Example file::

    {
      "skip": ["loc-123"],
      "duplicates": [
        {"keep": "loc-1", "delete": ["loc-2"], "reason": "Same shop, old listing"}
      ]
    }
"""

from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from location_pipeline.exceptions import ConfigurationError


class DuplicateOverride(BaseModel):
    keep: str
    delete: list[str] = Field(default_factory=list)
    reason: str | None = None


class Overrides(BaseModel):
    # Locations that never take part in duplicate resolution
    skip: list[str] = Field(default_factory=list)

    # Human decisions that replace the computed keep/delete split
    duplicates: list[DuplicateOverride] = Field(default_factory=list)

    def is_skipped(self, location_id: str) -> bool:
        return location_id in self.skip

    def pinned_keeps(self) -> set[str]:
        return {pinned.keep for pinned in self.duplicates}

    def pinned_for(self, location_ids: set[str]) -> DuplicateOverride | None:
        """First pinned resolution whose ``keep`` id is among ``location_ids``."""
        for pinned in self.duplicates:
            if pinned.keep in location_ids:
                return pinned
        return None


def load_overrides(path: Path | None) -> Overrides:
    """Load an overrides file; no path means no overrides.

    Raises:
        ConfigurationError: if the file cannot be read or does not validate
    """
    if path is None:
        return Overrides()

    try:
        overrides = Overrides.model_validate_json(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise ConfigurationError(f"Invalid overrides file {path}: {e}") from e
    logger.info(
        f"Loaded overrides: {len(overrides.skip)} skipped, "
        f"{len(overrides.duplicates)} pinned resolutions"
    )
    return overrides
