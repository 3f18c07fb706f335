from decimal import Decimal

from catalog.models import (
    Game,
    GameCategory,
    GameGameType,
    GameRelation,
    GameType,
)


def create_game_type(*, name="strategy"):
    # The default types are seeded by a data migration
    return GameType.objects.get_or_create(name=name)[0]


def create_game_category(*, name="Economic"):
    return GameCategory.objects.get_or_create(name=name)[0]


def create_game(
    *,
    name="Catan",
    year_published=1995,
    min_players=3,
    max_players=4,
    min_playing_time=60,
    max_playing_time=120,
    rating=Decimal("7.12"),
    rating_count=120000,
    difficulty_score=Decimal("2.31"),
    game_types=("strategy",),
    game_categories=("Economic",),
    do_save=True,
    **kwargs,
):
    game = Game(
        name=name,
        year_published=year_published,
        min_players=min_players,
        max_players=max_players,
        min_playing_time=min_playing_time,
        max_playing_time=max_playing_time,
        rating=rating,
        rating_count=rating_count,
        difficulty_score=difficulty_score,
        **kwargs,
    )
    game.full_clean()
    if do_save:
        game.save()
        for type_name in game_types:
            GameGameType.objects.create(
                game=game, game_type=create_game_type(name=type_name)
            )
        game.game_categories.set(
            [create_game_category(name=category) for category in game_categories]
        )
    return game


def create_relation(
    *, source_game, target_game, relation_type=GameRelation.RelationType.EXPANDS
):
    return GameRelation.objects.create(
        source_game=source_game, target_game=target_game, relation_type=relation_type
    )
