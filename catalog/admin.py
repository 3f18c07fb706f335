from django.contrib import admin
from django.db.models import Count

from .models import Game, GameCategory, GameGameType, GameRelation, GameType


class GameGameTypeInline(admin.TabularInline):
    model = GameGameType
    extra = 0
    autocomplete_fields = ("game_type",)


@admin.register(Game)
class GameAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "year_published",
        "min_players",
        "max_players",
        "rating",
        "rating_count",
        "difficulty_score",
    )
    list_filter = ("game_types", "game_categories")
    search_fields = ("name",)
    filter_horizontal = ("game_categories",)
    inlines = (GameGameTypeInline,)
    readonly_fields = ("created_on", "updated_on")


class TaxonomyAdmin(admin.ModelAdmin):
    list_display = ("name", "game_count")
    search_fields = ("name",)

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(game_count=Count("games"))

    @admin.display(ordering="game_count")
    def game_count(self, obj):
        return obj.game_count


admin.site.register(GameType, TaxonomyAdmin)
admin.site.register(GameCategory, TaxonomyAdmin)


@admin.register(GameRelation)
class GameRelationAdmin(admin.ModelAdmin):
    list_display = ("source_game", "relation_type", "target_game", "created_on")
    list_filter = ("relation_type",)
    search_fields = ("source_game__name", "target_game__name")
    raw_id_fields = ("source_game", "target_game")
