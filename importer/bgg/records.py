from dataclasses import dataclass, field
from typing import Optional

from .mapping import LinkKind


def empty_links() -> dict[LinkKind, list[int]]:
    return {kind: [] for kind in LinkKind}


@dataclass(frozen=True)
class SearchItem:
    bgg_id: int
    kind: str
    name: str
    year_published: Optional[int] = None


@dataclass(frozen=True)
class SearchResult:
    total: int
    items: list[SearchItem] = field(default_factory=list)

    @property
    def ids(self) -> list[int]:
        return [item.bgg_id for item in self.items]


@dataclass(frozen=True)
class RankedType:
    name: str
    rank: Optional[int] = None


@dataclass
class ExternalRecord:
    """
    One BGG thing as parsed from the ``thing`` endpoint.

    Numeric fields are None when BGG omits them, which is distinct from a
    reported zero.
    """

    bgg_id: int
    kind: str
    name: str
    year_published: Optional[int] = None
    min_players: Optional[int] = None
    max_players: Optional[int] = None
    min_playing_time: Optional[int] = None
    max_playing_time: Optional[int] = None
    playing_time: Optional[int] = None
    rating: Optional[float] = None
    user_ratings_count: Optional[int] = None
    complexity: Optional[float] = None
    types: list[RankedType] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    mechanics: list[str] = field(default_factory=list)
    links: dict[LinkKind, list[int]] = field(default_factory=empty_links)

    @property
    def related_ids(self) -> list[int]:
        """Every linked BGG id across all link kinds, without duplicates."""
        return list(
            dict.fromkeys(bgg_id for ids in self.links.values() for bgg_id in ids)
        )
