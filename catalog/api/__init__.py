from typing import Optional

from django.shortcuts import get_object_or_404
from ninja import NinjaAPI, Router
from ninja.errors import HttpError

from catalog.exceptions import InvalidQueryError
from catalog.logging import CatalogLogger
from catalog.models import Game
from catalog.queries import fetch_games, parse_id_list, parse_name_list, search_games
from importer.exceptions import GameImportError, InvalidArgumentError
from importer.games import GameImporter
from importer.search import SearchImporter

from .schemas import (
    GameDetailOut,
    GameListOut,
    SearchImportIn,
    SearchImportOut,
)

structured_logger = CatalogLogger.get_logger(__name__)

api = NinjaAPI(version=None, urls_namespace="api")

board_games = Router(tags=["board games"])


@board_games.get("/", response=GameListOut)
def list_board_games(
    request,
    ids: Optional[str] = None,
    player_count: Optional[int] = None,
    max_playing_time: Optional[int] = None,
    game_types: Optional[str] = None,
    min_rating: Optional[float] = None,
):
    """Games by id list and/or filters."""
    try:
        games = fetch_games(
            ids=parse_id_list(ids) if ids is not None else None,
            player_count=player_count,
            max_playing_time=max_playing_time,
            game_types=parse_name_list(game_types),
            min_rating=min_rating,
        )
    except InvalidQueryError as exc:
        raise HttpError(400, str(exc)) from exc

    games = list(games)
    return {"board_games": games, "total": len(games)}


@board_games.get("/search", response=GameListOut)
def search_board_games(
    request,
    name: Optional[str] = None,
    player_count: Optional[int] = None,
    playing_time: Optional[int] = None,
    max_playing_time: Optional[int] = None,
    min_playing_time: Optional[int] = None,
):
    """Case-insensitive name search with optional filters."""
    try:
        games = search_games(
            name,
            player_count=player_count,
            playing_time=playing_time,
            max_playing_time=max_playing_time,
            min_playing_time=min_playing_time,
        )
    except InvalidQueryError as exc:
        raise HttpError(400, str(exc)) from exc

    games = list(games)
    return {"board_games": games, "total": len(games)}


@board_games.get("/{game_id}", response=GameDetailOut)
def board_game_detail(request, game_id: int):
    return get_object_or_404(Game.objects.with_taxonomy(), pk=game_id)


bgg = Router(tags=["bgg"])


@bgg.post("/import", response=SearchImportOut)
def import_from_bgg_search(request, payload: SearchImportIn):
    """
    Import the first page of a BGG search now and queue the rest.
    """
    try:
        return SearchImporter().import_from_search(payload.query)
    except InvalidArgumentError as exc:
        raise HttpError(400, str(exc)) from exc
    except GameImportError as exc:
        structured_logger.error(
            "BGG search import failed.",
            event_code="bgg_search_import_failed",
            reason=str(exc),
            reason_code="bgg_import_failed",
            query=payload.query,
        )
        raise HttpError(502, str(exc)) from exc


@bgg.post("/import/{bgg_id}", response=GameDetailOut)
def import_bgg_game(request, bgg_id: int, force_update: bool = False):
    try:
        game = GameImporter().import_by_id(bgg_id, force_update=force_update)
    except GameImportError as exc:
        structured_logger.error(
            "BGG game import failed.",
            event_code="bgg_game_import_request_failed",
            reason=str(exc),
            reason_code="bgg_import_failed",
            bgg_id=bgg_id,
        )
        raise HttpError(502, str(exc)) from exc

    if game is None:
        raise HttpError(404, f"Game {bgg_id} was not found on BGG")

    return Game.objects.with_taxonomy().get(pk=game.pk)


api.add_router("/board-games", board_games)
api.add_router("/bgg", bgg)
