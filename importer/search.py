from dataclasses import dataclass, field
from typing import Optional

from catalog.logging import CatalogLogger
from catalog.models import Game

from .bgg.client import MAX_IDS_PER_REQUEST, BggClient, default_client
from .exceptions import BggClientError, GameImportError
from .games import GameImporter
from .tasks.games import import_bgg_games_task

structured_logger = CatalogLogger.get_logger(__name__)


@dataclass
class SearchImportSummary:
    total_found: int = 0
    imported_immediately: list[Game] = field(default_factory=list)
    enqueued_count: int = 0
    enqueued_ids: list[int] = field(default_factory=list)


class SearchImporter:
    """
    Imports the results of a BGG name search.

    The first page of results is imported while the caller waits so it can be
    shown right away. The rest of the results, together with any linked games
    which are not in the catalog yet, are handed to a background task.
    """

    def __init__(
        self,
        client: Optional[BggClient] = None,
        importer: Optional[GameImporter] = None,
    ):
        self.client = client or default_client()
        self.importer = importer or GameImporter(client=self.client)

    def import_from_search(self, query: str) -> SearchImportSummary:
        try:
            search_result = self.client.search(query)
        except BggClientError as exc:
            raise GameImportError(
                f"Failed to import games from BGG search: {exc}"
            ) from exc

        bgg_ids = list(dict.fromkeys(search_result.ids))
        if not bgg_ids:
            return SearchImportSummary()

        immediate_ids = bgg_ids[:MAX_IDS_PER_REQUEST]
        deferred_ids = bgg_ids[MAX_IDS_PER_REQUEST:]

        result = self.importer.import_by_ids(immediate_ids, force_update=False)

        imported_game_ids = [
            entry["game_id"] for entry in result.imported if entry.get("game_id")
        ]
        games_by_id = Game.objects.with_taxonomy().in_bulk(imported_game_ids)
        imported_games = [
            games_by_id[pk] for pk in imported_game_ids if pk in games_by_id
        ]

        background_ids = list(dict.fromkeys(deferred_ids + result.related_ids))
        if background_ids:
            import_bgg_games_task.delay(background_ids)

        structured_logger.info(
            "Imported BGG search results.",
            event_code="bgg_search_imported",
            query=query,
            total_found=len(bgg_ids),
            imported_count=len(imported_games),
            enqueued_count=len(background_ids),
            failed_count=len(result.failed),
        )

        return SearchImportSummary(
            total_found=len(bgg_ids),
            imported_immediately=imported_games,
            enqueued_count=len(background_ids),
            enqueued_ids=background_ids,
        )
