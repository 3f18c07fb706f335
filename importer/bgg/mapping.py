"""
Translation of BGG taxonomy strings into the catalog's vocabulary.
"""

from enum import Enum
from typing import Optional


class ThingKind(str, Enum):
    GAME = "boardgame"
    EXPANSION = "boardgameexpansion"


class LinkKind(str, Enum):
    EXPANDS = "expands"
    CONTAINS = "contains"
    REIMPLEMENTS = "reimplements"
    # The linked games reimplement this one; stored reversed as REIMPLEMENTS
    REIMPLEMENTED_BY = "reimplemented_by"
    INTEGRATES_WITH = "integrates_with"


#: Substrings of BGG family rank names ("strategygames", "familygames", ...)
#: and the game type each one maps to
FAMILY_TYPE_PATTERNS = (
    ("abstract", "abstract"),
    ("family", "family"),
    ("party", "party"),
    ("strategy", "strategy"),
    ("thematic", "thematic"),
)


def map_family_rank_name_to_type(name: Optional[str]) -> Optional[str]:
    """
    Return the game type for a BGG family rank name, or None when the family
    is not one the catalog tracks.
    """
    if not name:
        return None
    lowered = name.lower()
    for pattern, game_type in FAMILY_TYPE_PATTERNS:
        if pattern in lowered:
            return game_type
    return None


def classify_link_type(link_type: Optional[str], inbound: bool) -> Optional[LinkKind]:
    """
    Classify a ``<link>`` element of a BGG thing.

    Expansion and compilation links are only meaningful when marked inbound
    (this item is the expansion or the compilation); the outbound side is
    recorded when the other game is imported.
    """
    if link_type == "boardgameexpansion":
        return LinkKind.EXPANDS if inbound else None
    if link_type == "boardgamecompilation":
        return LinkKind.CONTAINS if inbound else None
    if link_type == "boardgameimplementation":
        return LinkKind.REIMPLEMENTS if inbound else LinkKind.REIMPLEMENTED_BY
    if link_type == "boardgameintegration":
        return LinkKind.INTEGRATES_WITH
    return None
