from typing import Optional

from ninja import Schema


class GameOut(Schema):
    id: int  # noqa: A003
    name: str
    year_published: int
    game_types: list[str]
    game_categories: list[str]
    min_players: int
    max_players: int
    min_playing_time: Optional[int] = None
    max_playing_time: Optional[int] = None
    rating: Optional[float] = None
    rating_count: Optional[int] = None
    difficulty_score: Optional[float] = None

    @staticmethod
    def resolve_game_types(obj):
        return [game_type.name for game_type in obj.game_types.all()]

    @staticmethod
    def resolve_game_categories(obj):
        return [category.name for category in obj.game_categories.all()]


class RelatedGameOut(Schema):
    id: int  # noqa: A003
    name: str
    year_published: int


class GameDetailOut(GameOut):
    bgg_id: Optional[int] = None
    expansions: list[RelatedGameOut]

    @staticmethod
    def resolve_expansions(obj):
        return list(obj.expansions.order_by("year_published", "name"))


class GameListOut(Schema):
    board_games: list[GameOut]
    total: int


class SearchImportIn(Schema):
    query: str


class SearchImportOut(Schema):
    total_found: int
    imported_immediately: list[GameOut]
    enqueued_count: int
    enqueued_ids: list[int]
