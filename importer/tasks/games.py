"""
Background import of BGG ids which did not fit in a search's first page.
"""

from logging import getLogger
from typing import Iterable, Optional

from celery.utils.time import get_exponential_backoff_interval

from catalog.celery import app
from catalog.logging import CatalogLogger
from importer.bgg.client import MAX_IDS_PER_REQUEST
from importer.exceptions import GameImportError
from importer.games import BatchImportResult, GameImporter

#: Base delay in seconds before retrying after BGG was unavailable
RETRY_BACKOFF = 60
RETRY_BACKOFF_MAX = 60 * 60
MAX_RETRIES = 3

logger = getLogger(__name__)
structured_logger = CatalogLogger.get_logger(__name__)


def chunked(items: list, size: int):
    for start in range(0, len(items), size):
        yield items[start : start + size]


def import_bgg_games(
    bgg_ids: Iterable, importer: Optional[GameImporter] = None
) -> BatchImportResult:
    """
    Import any number of BGG ids in batches of 20, refreshing games which
    already exist.
    """
    bgg_ids = list(dict.fromkeys(int(i) for i in bgg_ids))
    if not bgg_ids:
        structured_logger.warning(
            "BGG import job started without any ids.",
            event_code="bgg_import_job_empty",
            reason="No BGG ids were given.",
            reason_code="no_ids",
        )
        return BatchImportResult()

    importer = importer or GameImporter()
    result = BatchImportResult()

    for chunk in chunked(bgg_ids, MAX_IDS_PER_REQUEST):
        result.extend(importer.import_by_ids(chunk, force_update=True))

    log_summary(bgg_ids, result)
    return result


def log_summary(bgg_ids, result: BatchImportResult) -> None:
    counts = result.counts

    logger.info("=" * 80)
    logger.info(
        "BGG import of %d ids finished: %d imported, %d updated, %d skipped, "
        "%d failed",
        len(bgg_ids),
        counts["imported"],
        counts["updated"],
        counts["skipped"],
        counts["failed"],
    )
    for status in ("imported", "updated", "skipped"):
        for entry in getattr(result, status):
            logger.info(
                "  %s BGG %s: %s (game %s)",
                status,
                entry["bgg_id"],
                entry.get("name"),
                entry.get("game_id"),
            )
    for entry in result.failed:
        logger.warning("  failed BGG %s: %s", entry["bgg_id"], entry["error"])
    logger.info("=" * 80)

    structured_logger.info(
        "Finished BGG import job.",
        event_code="bgg_import_job_finished",
        requested_count=len(bgg_ids),
        **counts,
    )


@app.task(bind=True, ignore_result=True, acks_late=True, max_retries=MAX_RETRIES)
def import_bgg_games_task(self, bgg_ids):
    """
    Import a list of BGG ids in the background.

    Failures caused by BGG being slow or unavailable are retried with
    exponential backoff. Any other import failure would repeat on retry, so
    it is logged and the job is dropped.
    """
    try:
        result = import_bgg_games(bgg_ids)
    except GameImportError as exc:
        if exc.transient:
            retries = self.request.retries
            structured_logger.warning(
                "BGG was unavailable, retrying import job.",
                event_code="bgg_import_job_retry",
                reason=str(exc),
                reason_code="bgg_unavailable",
                retries=retries,
                id_count=len(bgg_ids),
            )
            raise self.retry(
                exc=exc,
                countdown=get_exponential_backoff_interval(
                    factor=RETRY_BACKOFF,
                    retries=retries,
                    maximum=RETRY_BACKOFF_MAX,
                    full_jitter=True,
                ),
            )

        structured_logger.error(
            "Discarding BGG import job.",
            event_code="bgg_import_job_discarded",
            reason=str(exc),
            reason_code="import_failed",
            id_count=len(bgg_ids),
        )
        return None

    return {"requested": len(bgg_ids), "counts": result.counts, **result.as_dict()}
