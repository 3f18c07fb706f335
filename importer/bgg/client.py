import functools
from logging import getLogger
from typing import Iterable, Optional
from urllib.parse import urljoin
from xml.etree.ElementTree import ParseError

import defusedxml.ElementTree as ET
import requests
from defusedxml import DefusedXmlException
from django.conf import settings

from catalog.logging import CatalogLogger
from importer.exceptions import (
    BggApiError,
    BggParseError,
    BggTimeoutError,
    InvalidArgumentError,
)

from .mapping import classify_link_type, map_family_rank_name_to_type
from .records import ExternalRecord, RankedType, SearchItem, SearchResult

#: The thing endpoint refuses batches larger than this
MAX_IDS_PER_REQUEST = 20

DEFAULT_SEARCH_TYPES = "boardgame,boardgameexpansion"

logger = getLogger(__name__)
structured_logger = CatalogLogger.get_logger(__name__)


class BggClient:
    """
    Client for the two BGG XML API2 read endpoints the importer needs:
    ``search`` and ``thing``.

    Connection settings default to ``settings.BGG_API``. One requests session
    is kept per client so connections are pooled across calls.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        open_timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        config = settings.BGG_API
        self.base_url = base_url or config["BASE_URL"]
        if not self.base_url.endswith("/"):
            self.base_url += "/"
        self.timeout = (
            open_timeout if open_timeout is not None else config["OPEN_TIMEOUT"],
            timeout if timeout is not None else config["TIMEOUT"],
        )

        self.session = session or requests.Session()
        token = token if token is not None else config.get("TOKEN")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def search(
        self, query: str, thing_type: Optional[str] = None, exact: bool = False
    ):
        """
        Search BGG by name.

        Only items with a primary name are returned; BGG also lists items
        which merely match one of their alternate names.

        Raises:
            InvalidArgumentError: If the query is blank.
            BggTimeoutError, BggApiError, BggParseError: On request failures.
        """
        if not query or not query.strip():
            raise InvalidArgumentError("Search query cannot be blank")

        root = self._get(
            "search",
            {
                "query": query,
                "type": thing_type or DEFAULT_SEARCH_TYPES,
                "exact": 1 if exact else 0,
            },
        )

        items = []
        for item in root.findall("item"):
            name = item.find("name[@type='primary']")
            if name is None:
                continue
            items.append(
                SearchItem(
                    bgg_id=_item_id(item),
                    kind=item.get("type"),
                    name=name.get("value"),
                    year_published=_int_value(item, "yearpublished"),
                )
            )

        return SearchResult(
            total=_to_int(root.get("total")) or len(items), items=items
        )

    def get_details(
        self, ids: Iterable[int], min_user_ratings: int = 0
    ) -> list[ExternalRecord]:
        """
        Fetch full records for up to 20 BGG ids in one request.

        Records with fewer than ``min_user_ratings`` user ratings are left
        out of the result.

        Raises:
            InvalidArgumentError: If no ids or more than 20 ids are given.
            BggTimeoutError, BggApiError, BggParseError: On request failures.
        """
        ids = list(ids)
        if not ids:
            raise InvalidArgumentError("At least one BGG id is required")
        if len(ids) > MAX_IDS_PER_REQUEST:
            raise InvalidArgumentError(
                f"Cannot request more than {MAX_IDS_PER_REQUEST} BGG ids at once"
            )

        root = self._get(
            "thing", {"id": ",".join(str(i) for i in ids), "stats": 1}
        )

        records = []
        for item in root.findall("item"):
            record = self._parse_thing(item)
            if (record.user_ratings_count or 0) < min_user_ratings:
                logger.debug(
                    "Skipping BGG %s (%s): %s user ratings is below %s",
                    record.bgg_id,
                    record.name,
                    record.user_ratings_count,
                    min_user_ratings,
                )
                continue
            records.append(record)
        return records

    def _get(self, path, params):
        url = urljoin(self.base_url, path)
        logger.debug("Requesting %s with %s", url, params)

        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.Timeout as exc:
            raise BggTimeoutError(f"Request to BGG API timed out: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            raise BggApiError(f"BGG API request failed: {exc}") from exc

        try:
            root = ET.fromstring(resp.content)
        except (ParseError, DefusedXmlException) as exc:
            raise BggParseError(f"Failed to parse BGG API response: {exc}") from exc

        if root.tag != "items":
            raise BggParseError("Invalid XML response structure")

        return root

    def _parse_thing(self, item) -> ExternalRecord:
        bgg_id = _item_id(item)
        name = item.find("name[@type='primary']")

        record = ExternalRecord(
            bgg_id=bgg_id,
            kind=item.get("type"),
            name=name.get("value") if name is not None else None,
            year_published=_int_value(item, "yearpublished"),
            min_players=_int_value(item, "minplayers"),
            max_players=_int_value(item, "maxplayers"),
            min_playing_time=_int_value(item, "minplaytime"),
            max_playing_time=_int_value(item, "maxplaytime"),
            playing_time=_int_value(item, "playingtime"),
            categories=_link_values(item, "boardgamecategory"),
            mechanics=_link_values(item, "boardgamemechanic"),
        )

        ratings = item.find("statistics/ratings")
        if ratings is not None:
            record.user_ratings_count = _int_value(ratings, "usersrated")
            record.rating = _rounded_value(ratings, "average")
            record.complexity = _rounded_value(ratings, "averageweight")
            record.types = self._parse_family_ranks(ratings, bgg_id)

        for link in item.findall("link"):
            kind = classify_link_type(link.get("type"), link.get("inbound") == "true")
            linked_id = _to_int(link.get("id"))
            if kind is not None and linked_id is not None:
                record.links[kind].append(linked_id)

        return record

    def _parse_family_ranks(self, ratings, bgg_id) -> list[RankedType]:
        types = []
        for rank in ratings.findall("ranks/rank[@type='family']"):
            family_name = rank.get("name")
            game_type = map_family_rank_name_to_type(family_name)
            if game_type is None:
                structured_logger.warning(
                    "Ignoring unrecognized BGG family rank.",
                    event_code="bgg_family_rank_unmapped",
                    reason=f"No game type matches the family name {family_name!r}.",
                    reason_code="unknown_family",
                    bgg_id=bgg_id,
                    family_name=family_name,
                )
                continue
            # "Not Ranked" and other non-positive values have no position
            position = _to_int(rank.get("value"))
            if position is not None and position < 1:
                position = None
            types.append(RankedType(name=game_type, rank=position))
        return types


def _to_int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _item_id(item) -> int:
    bgg_id = _to_int(item.get("id"))
    if bgg_id is None:
        raise BggParseError(f"Item without a valid id: {item.get('id')!r}")
    return bgg_id


def _int_value(element, tag) -> Optional[int]:
    child = element.find(tag)
    if child is None:
        return None
    return _to_int(child.get("value"))


def _rounded_value(element, tag) -> Optional[float]:
    child = element.find(tag)
    if child is None:
        return None
    try:
        return round(float(child.get("value")), 2)
    except (TypeError, ValueError):
        return None


def _link_values(item, link_type) -> list[str]:
    return [
        link.get("value")
        for link in item.findall(f"link[@type='{link_type}']")
        if link.get("value")
    ]


@functools.lru_cache(maxsize=None)
def default_client() -> BggClient:
    """The process-wide client, so HTTP connections are pooled across imports."""
    return BggClient()
