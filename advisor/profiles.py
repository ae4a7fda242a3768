"""Category scoring profiles.

Each category has a JSON document with the weights applied to the scoring
factors and the brand and keyword point tables used by the ranker::

    {
      "weights": {"quality": 1.2, "brand": 1.5},
      "brands": {"samsung": 10},
      "positiveKeywords": {"5g": 5},
      "negativeKeywords": {"usado": -15}
    }

Profiles are read once and never modified afterwards, so a single store can
be shared by concurrent analyses.
"""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Union

from . import config
from .models import CategoryProfile

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "default"


def load_profiles(directory: Union[str, Path]) -> dict[str, CategoryProfile]:
    """Read every ``*.json`` profile in ``directory``.

    Unreadable documents are logged and skipped. The returned mapping always
    has a ``default`` entry.
    """
    profiles: dict[str, CategoryProfile] = {}
    path = Path(directory)

    if not path.is_dir():
        logger.warning("Profiles directory not found: %s", path)
    else:
        for file in sorted(path.glob("*.json")):
            key = file.stem.lower()
            try:
                with open(file, encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("profile document must be a JSON object")
                profiles[key] = CategoryProfile.from_dict(key, data)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.error("Skipping profile %s: %s", file.name, e)

    if DEFAULT_CATEGORY not in profiles:
        logger.warning("No default profile found, using neutral weights")
        profiles[DEFAULT_CATEGORY] = CategoryProfile.neutral(DEFAULT_CATEGORY)

    logger.info("Loaded %d category profiles", len(profiles))
    return profiles


class ProfileStore:
    """Read-only lookup of category profiles with a ``default`` fallback."""

    def __init__(self, profiles: Mapping[str, CategoryProfile]):
        self._profiles = dict(profiles)
        if DEFAULT_CATEGORY not in self._profiles:
            self._profiles[DEFAULT_CATEGORY] = CategoryProfile.neutral(
                DEFAULT_CATEGORY
            )

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "ProfileStore":
        return cls(load_profiles(directory))

    def get_profile(self, category: str | None) -> CategoryProfile:
        key = (category or DEFAULT_CATEGORY).strip().lower()
        return self._profiles.get(key, self._profiles[DEFAULT_CATEGORY])

    def categories(self) -> list[str]:
        return sorted(self._profiles)

    def known_brands(self) -> set[str]:
        brands = set()
        for profile in self._profiles.values():
            brands.update(profile.brands)
        return brands


@lru_cache(maxsize=1)
def default_store() -> ProfileStore:
    """Store built from ``PROFILES_DIR`` on first use."""
    return ProfileStore.from_directory(config.PROFILES_DIR)


def get_profile(category: str | None) -> CategoryProfile:
    return default_store().get_profile(category)
