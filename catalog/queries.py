"""
Read-side lookups over the catalog used by the JSON API.
"""

from typing import Iterable, Optional

from .exceptions import InvalidQueryError
from .models import Game


def parse_id_list(value: str) -> list[int]:
    """
    Parse a comma separated list of game ids, ignoring anything which is not
    a positive integer.

    Raises:
        InvalidQueryError: If no usable id remains.
    """
    ids = []
    for part in value.split(","):
        try:
            game_id = int(part)
        except ValueError:
            continue
        if game_id > 0:
            ids.append(game_id)
    if not ids:
        raise InvalidQueryError("No valid IDs provided")
    return list(dict.fromkeys(ids))


def parse_name_list(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def fetch_games(
    ids: Optional[Iterable[int]] = None,
    player_count: Optional[int] = None,
    max_playing_time: Optional[int] = None,
    game_types: Optional[Iterable[str]] = None,
    min_rating=None,
):
    games = Game.objects.with_taxonomy()

    if ids is not None:
        games = games.filter(pk__in=list(ids))
    if player_count is not None:
        games = games.for_player_count(player_count)
    if max_playing_time is not None:
        games = games.max_playing_time_within(max_playing_time)
    if game_types:
        games = games.with_game_types(list(game_types))
    if min_rating is not None:
        games = games.min_rating(min_rating)

    return games


def search_games(
    name: Optional[str],
    player_count: Optional[int] = None,
    playing_time: Optional[int] = None,
    max_playing_time: Optional[int] = None,
    min_playing_time: Optional[int] = None,
):
    """
    Case-insensitive search by name, narrowed by the optional filters.

    Raises:
        InvalidQueryError: If the name is blank.
    """
    if not name or not name.strip():
        raise InvalidQueryError("Name parameter cannot be empty")

    games = Game.objects.with_taxonomy().name_contains(name.strip())

    if player_count is not None:
        games = games.for_player_count(player_count)
    if playing_time is not None:
        games = games.for_playing_time(playing_time)
    if max_playing_time is not None:
        games = games.max_playing_time_within(max_playing_time)
    if min_playing_time is not None:
        games = games.min_playing_time_at_least(min_playing_time)

    return games
