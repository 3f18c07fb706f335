"""
Reconciliation of BGG records with the catalog.

GameImporter is the only code which writes Game rows and their BGG
associations. Every record is reconciled inside its own transaction so a
failing record never leaves a partial game behind, and the unique bgg_id on
BggGameAssociation is what keeps two concurrent imports of the same id from
producing two games.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from catalog.logging import CatalogLogger
from catalog.models import (
    GENERAL,
    Game,
    GameCategory,
    GameGameType,
    GameRelation,
    GameType,
)

from .bgg.client import MAX_IDS_PER_REQUEST, BggClient, default_client
from .bgg.mapping import LinkKind, ThingKind
from .bgg.records import ExternalRecord, RankedType
from .exceptions import (
    BggClientError,
    GameImportError,
    InvalidArgumentError,
    UnknownKindError,
)
from .models import BggGameAssociation

#: Popularity floor applied to batch and search imports. Direct single-id
#: imports have none.
DEFAULT_MIN_USER_RATINGS = 1000

NOT_FOUND = "Not found on BGG"
ALREADY_IMPORTED = "Already imported"

RELATION_TYPES = {
    LinkKind.EXPANDS: GameRelation.RelationType.EXPANDS,
    LinkKind.CONTAINS: GameRelation.RelationType.CONTAINS,
    LinkKind.REIMPLEMENTS: GameRelation.RelationType.REIMPLEMENTS,
    LinkKind.INTEGRATES_WITH: GameRelation.RelationType.INTEGRATES_WITH,
}

structured_logger = CatalogLogger.get_logger(__name__)


class DuplicateImportError(GameImportError):
    """Another import created the association for this BGG id first."""


class ImportStatus(str, Enum):
    IMPORTED = "imported"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass
class ReconcileOutcome:
    status: ImportStatus
    game: Game


@dataclass
class BatchImportResult:
    imported: list[dict] = field(default_factory=list)
    updated: list[dict] = field(default_factory=list)
    skipped: list[dict] = field(default_factory=list)
    failed: list[dict] = field(default_factory=list)
    related_ids: list[int] = field(default_factory=list)

    def extend(self, other: "BatchImportResult") -> None:
        self.imported.extend(other.imported)
        self.updated.extend(other.updated)
        self.skipped.extend(other.skipped)
        self.failed.extend(other.failed)
        self.related_ids = list(dict.fromkeys(self.related_ids + other.related_ids))

    @property
    def counts(self) -> dict[str, int]:
        return {
            "imported": len(self.imported),
            "updated": len(self.updated),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
        }

    def as_dict(self) -> dict:
        return {
            "imported": self.imported,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "related_ids": self.related_ids,
        }


class GameImporter:
    def __init__(self, client: Optional[BggClient] = None):
        self.client = client or default_client()

    def import_by_ids(
        self, bgg_ids: Iterable[int], dry_run=False, force_update=False
    ) -> BatchImportResult:
        """
        Import up to 20 BGG ids with a single detail request.

        A failure reconciling one record is reported in ``failed`` and does
        not stop the rest of the batch. ``related_ids`` lists the linked BGG
        ids which have not been imported yet.

        Raises:
            InvalidArgumentError: If more than 20 distinct ids are given.
            GameImportError: If the BGG request itself fails.
        """
        bgg_ids = list(dict.fromkeys(int(i) for i in bgg_ids))
        if len(bgg_ids) > MAX_IDS_PER_REQUEST:
            raise InvalidArgumentError(
                f"Cannot import more than {MAX_IDS_PER_REQUEST} BGG ids at once"
            )

        result = BatchImportResult()
        if not bgg_ids:
            return result

        try:
            records = self.client.get_details(
                bgg_ids, min_user_ratings=DEFAULT_MIN_USER_RATINGS
            )
        except BggClientError as exc:
            raise GameImportError(f"Failed to import games from BGG: {exc}") from exc

        if not records:
            result.failed = [{"bgg_id": i, "error": NOT_FOUND} for i in bgg_ids]
            return result

        found_ids = set()
        candidate_ids = {}

        for record in records:
            found_ids.add(record.bgg_id)
            candidate_ids.update(dict.fromkeys(record.related_ids))

            try:
                outcome = self.reconcile(
                    record, dry_run=dry_run, force_update=force_update
                )
            except Exception as exc:
                structured_logger.error(
                    "Unable to import game from BGG.",
                    event_code="bgg_game_import_failed",
                    reason=str(exc),
                    reason_code="reconcile_failed",
                    bgg_id=record.bgg_id,
                    game_name=record.name,
                )
                result.failed.append(
                    {
                        "bgg_id": record.bgg_id,
                        "name": record.name,
                        "error": f"{exc.__class__.__name__}: {exc}",
                    }
                )
                continue

            entry = import_entry(record.bgg_id, outcome.game)
            if outcome.status is ImportStatus.IMPORTED:
                result.imported.append(entry)
            elif outcome.status is ImportStatus.UPDATED:
                result.updated.append(entry)
            else:
                entry["reason"] = ALREADY_IMPORTED
                result.skipped.append(entry)

        for bgg_id in bgg_ids:
            if bgg_id not in found_ids:
                result.failed.append({"bgg_id": bgg_id, "error": NOT_FOUND})

        if candidate_ids:
            associated = set(
                BggGameAssociation.objects.filter(
                    bgg_id__in=candidate_ids
                ).values_list("bgg_id", flat=True)
            )
            result.related_ids = [i for i in candidate_ids if i not in associated]

        return result

    def import_by_id(self, bgg_id: int, dry_run=False, force_update=False):
        """
        Import a single BGG id regardless of how many ratings it has.

        Returns the Game, or None when BGG has nothing for the id.
        """
        try:
            records = self.client.get_details([bgg_id], min_user_ratings=0)
            if not records:
                return None
            return self.reconcile(
                records[0], dry_run=dry_run, force_update=force_update
            ).game
        except (BggClientError, GameImportError) as exc:
            raise GameImportError(
                f"Failed to import game {bgg_id} from BGG: {exc}"
            ) from exc

    def import_from_search(
        self, query: str, min_user_ratings=DEFAULT_MIN_USER_RATINGS, dry_run=False
    ) -> list[Game]:
        """
        Import the first page of a BGG name search and return its games.

        Games which were imported before are returned as they are.
        """
        try:
            search_result = self.client.search(query)
            bgg_ids = search_result.ids[:MAX_IDS_PER_REQUEST]
            if not bgg_ids:
                return []
            records = self.client.get_details(
                bgg_ids, min_user_ratings=min_user_ratings
            )
            return [self.reconcile(record, dry_run=dry_run).game for record in records]
        except (BggClientError, GameImportError) as exc:
            raise GameImportError(
                f"Failed to import games from BGG search for {query!r}: {exc}"
            ) from exc

    def reconcile(
        self, record: ExternalRecord, dry_run=False, force_update=False
    ) -> ReconcileOutcome:
        """
        Create or update the Game for one BGG record.

        An existing association means the game is left alone unless
        ``force_update`` is set, in which case it is refreshed in place. In a
        dry run nothing is written and the returned Game is unsaved.

        Raises:
            UnknownKindError: If the record is not a game or an expansion.
            GameImportError: If the data fails validation or cannot be saved.
        """
        if record.kind not in {kind.value for kind in ThingKind}:
            raise UnknownKindError(f"Unknown game type: {record.kind}")

        if dry_run:
            return self._reconcile(record, dry_run=True, force_update=force_update)

        try:
            return self._reconcile_atomically(record, force_update)
        except DuplicateImportError:
            association = self._find_association(record.bgg_id)
            if association is None:
                raise

            structured_logger.warning(
                "BGG id was imported by another worker.",
                event_code="bgg_import_race",
                reason="The association was created between lookup and insert.",
                reason_code="duplicate_association",
                association=association,
            )
            if not force_update:
                return ReconcileOutcome(ImportStatus.SKIPPED, association.game)
            return self._reconcile_atomically(record, force_update=True)

    def _reconcile_atomically(self, record, force_update):
        try:
            with transaction.atomic():
                return self._reconcile(
                    record, dry_run=False, force_update=force_update
                )
        except IntegrityError as exc:
            raise GameImportError(
                f"Failed to save BGG {record.bgg_id}: {exc}"
            ) from exc

    def _reconcile(self, record, *, dry_run, force_update):
        association = self._find_association(record.bgg_id)
        if association is not None and not force_update:
            return ReconcileOutcome(ImportStatus.SKIPPED, association.game)

        is_new = association is None
        game = Game() if is_new else association.game
        status = ImportStatus.IMPORTED if is_new else ImportStatus.UPDATED

        assign_scalar_fields(game, record)
        category_names = list(dict.fromkeys(record.categories)) or [GENERAL]
        ranked_types = unique_ranked_types(record.types) or [RankedType(GENERAL)]

        if dry_run:
            game.pending_game_categories = [
                GameCategory.objects.filter(name=name).first()
                or GameCategory(name=name)
                for name in category_names
            ]
            game.pending_game_types = [
                GameType.objects.filter(name=ranked.name).first()
                or GameType(name=ranked.name)
                for ranked in ranked_types
            ]
            game.pending_type_ranks = {
                ranked.name: ranked.rank for ranked in ranked_types
            }
            return ReconcileOutcome(status, game)

        try:
            game.full_clean()
        except ValidationError as exc:
            raise GameImportError(
                f"Invalid data for BGG {record.bgg_id}: {exc}"
            ) from exc

        game.save()

        if is_new:
            try:
                association = BggGameAssociation.objects.create(
                    game=game, bgg_id=record.bgg_id
                )
            except IntegrityError as exc:
                raise DuplicateImportError(
                    f"BGG {record.bgg_id} was imported concurrently"
                ) from exc

        game.game_categories.set(
            [GameCategory.objects.get_or_create(name=name)[0] for name in category_names]
        )
        self._assign_game_types(game, ranked_types)
        self._create_relations(game, record)

        structured_logger.info(
            "Imported game from BGG." if is_new else "Updated game from BGG.",
            event_code=f"bgg_game_{status.value}",
            association=association,
        )

        return ReconcileOutcome(status, game)

    def _find_association(self, bgg_id) -> Optional[BggGameAssociation]:
        return (
            BggGameAssociation.objects.select_related("game")
            .filter(bgg_id=bgg_id)
            .first()
        )

    def _assign_game_types(self, game, ranked_types):
        game_types = {
            ranked.name: GameType.objects.get_or_create(name=ranked.name)[0]
            for ranked in ranked_types
        }

        GameGameType.objects.filter(game=game).exclude(
            game_type__in=game_types.values()
        ).delete()

        for ranked in ranked_types:
            GameGameType.objects.update_or_create(
                game=game,
                game_type=game_types[ranked.name],
                defaults={"rank": ranked.rank},
            )

    def _create_relations(self, game, record):
        relation_logger = structured_logger.bind(game=game, bgg_id=record.bgg_id)

        for kind, target_ids in record.links.items():
            if not target_ids:
                continue
            kind = LinkKind(kind)

            targets = {
                association.bgg_id: association.game
                for association in BggGameAssociation.objects.select_related(
                    "game"
                ).filter(bgg_id__in=target_ids)
            }

            for target_id in target_ids:
                other = targets.get(target_id)
                if other is None:
                    relation_logger.warning(
                        "Skipping relation to a game which has not been imported.",
                        event_code="bgg_relation_target_missing",
                        reason="No association exists for the linked BGG id.",
                        reason_code="relation_target_missing",
                        target_bgg_id=target_id,
                        link_kind=kind.value,
                    )
                    continue
                if other.pk == game.pk:
                    continue

                if kind is LinkKind.REIMPLEMENTED_BY:
                    source, target = other, game
                    relation_type = GameRelation.RelationType.REIMPLEMENTS
                else:
                    source, target = game, other
                    relation_type = RELATION_TYPES[kind]

                relation, created = GameRelation.objects.get_or_create(
                    source_game=source, target_game=target, relation_type=relation_type
                )
                if created:
                    relation_logger.debug(
                        "Created game relation.",
                        event_code="bgg_relation_created",
                        relation=relation,
                    )


def assign_scalar_fields(game: Game, record: ExternalRecord) -> None:
    game.name = record.name
    game.year_published = record.year_published
    game.min_players = record.min_players
    game.max_players = record.max_players
    game.min_playing_time = record.min_playing_time
    game.max_playing_time = record.max_playing_time
    game.rating = to_decimal(record.rating)
    game.rating_count = record.user_ratings_count
    game.difficulty_score = to_decimal(record.complexity)


def unique_ranked_types(ranked_types: Iterable[RankedType]) -> list[RankedType]:
    """Keep the first rank seen for each type name."""
    seen = {}
    for ranked in ranked_types:
        seen.setdefault(ranked.name, ranked)
    return list(seen.values())


def to_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(round(value, 2)))


def import_entry(bgg_id, game) -> dict:
    return {
        "bgg_id": bgg_id,
        "game_id": game.pk,
        "name": game.name,
        "rating": float(game.rating) if game.rating is not None else None,
        "year_published": game.year_published,
    }
