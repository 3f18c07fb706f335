from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest

from importer.tasks.games import import_bgg_games_task

from .models import BggGameAssociation


@admin.action(description="Refresh from BGG")
def refresh_from_bgg(
    modeladmin: admin.ModelAdmin,
    request: HttpRequest,
    queryset: QuerySet[BggGameAssociation],
) -> None:
    """
    Queue a background import of the selected BGG ids, updating their games
    in place.
    """
    bgg_ids = list(queryset.values_list("bgg_id", flat=True))
    import_bgg_games_task.delay(bgg_ids)
    messages.add_message(
        request, messages.INFO, "Queued refresh of %d games" % len(bgg_ids)
    )


@admin.register(BggGameAssociation)
class BggGameAssociationAdmin(admin.ModelAdmin):
    list_display = ("bgg_id", "game", "created")
    search_fields = ("=bgg_id", "game__name")
    raw_id_fields = ("game",)
    readonly_fields = ("created",)
    actions = (refresh_from_bgg,)
