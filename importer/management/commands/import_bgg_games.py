from django.core.management.base import BaseCommand, CommandError

from importer.bgg.client import MAX_IDS_PER_REQUEST
from importer.exceptions import GameImportError, InvalidArgumentError
from importer.games import GameImporter
from importer.search import SearchImporter
from importer.tasks.games import chunked, import_bgg_games_task


class Command(BaseCommand):
    help = "Import board games from BoardGameGeek by id or by name search"

    def add_arguments(self, parser):
        source = parser.add_mutually_exclusive_group(required=True)
        source.add_argument("--ids", nargs="+", type=int, help="BGG ids to import")
        source.add_argument("--search", help="Name to search BGG for")

        parser.add_argument(
            "--force-update",
            action="store_true",
            help="Refresh games which were already imported",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be imported without saving anything",
        )
        parser.add_argument(
            "--background",
            action="store_true",
            help="Queue the ids for the Celery worker instead of importing now",
        )

    def handle(self, *, ids, search, force_update, dry_run, background, **kwargs):
        try:
            if search:
                self.import_search(search, dry_run=dry_run)
            elif background:
                import_bgg_games_task.delay(ids)
                self.stdout.write(f"Queued {len(set(ids))} BGG ids for import")
            else:
                self.import_ids(ids, force_update=force_update, dry_run=dry_run)
        except (GameImportError, InvalidArgumentError) as exc:
            raise CommandError(str(exc)) from exc

    def import_search(self, query, *, dry_run):
        if dry_run:
            games = GameImporter().import_from_search(query, dry_run=True)
            for game in games:
                self.stdout.write(f"Would import {game.name} ({game.year_published})")
            return

        summary = SearchImporter().import_from_search(query)
        self.stdout.write(
            f"Found {summary.total_found} games, imported "
            f"{len(summary.imported_immediately)}, queued {summary.enqueued_count}"
        )
        for game in summary.imported_immediately:
            self.stdout.write(f"  {game.pk}: {game.name}")

    def import_ids(self, ids, *, force_update, dry_run):
        importer = GameImporter()
        for chunk in chunked(list(dict.fromkeys(ids)), MAX_IDS_PER_REQUEST):
            result = importer.import_by_ids(
                chunk, dry_run=dry_run, force_update=force_update
            )
            for status in ("imported", "updated", "skipped"):
                for entry in getattr(result, status):
                    self.stdout.write(f"{status}: BGG {entry['bgg_id']} {entry['name']}")
            for entry in result.failed:
                self.stderr.write(f"failed: BGG {entry['bgg_id']} {entry['error']}")
