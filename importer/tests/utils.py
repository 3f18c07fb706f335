from catalog.tests.utils import create_game
from importer.bgg.mapping import LinkKind, ThingKind
from importer.bgg.records import ExternalRecord, RankedType, empty_links
from importer.models import BggGameAssociation


def create_association(*, bgg_id, game=None, **kwargs):
    # kwargs are passed to create_game when no game is given
    if game is None:
        game = create_game(**kwargs)
    return BggGameAssociation.objects.create(game=game, bgg_id=bgg_id)


def make_record(bgg_id=13, *, links=None, **kwargs):
    """An ExternalRecord shaped like the BGG data for Catan."""
    record_links = empty_links()
    for kind, ids in (links or {}).items():
        record_links[LinkKind(kind)] = list(ids)

    fields = {
        "kind": ThingKind.GAME.value,
        "name": "Catan",
        "year_published": 1995,
        "min_players": 3,
        "max_players": 4,
        "min_playing_time": 60,
        "max_playing_time": 120,
        "playing_time": 120,
        "rating": 7.12,
        "user_ratings_count": 120000,
        "complexity": 2.31,
        "types": [RankedType("strategy", 400), RankedType("family", 100)],
        "categories": ["Economic", "Negotiation"],
        "mechanics": ["Dice Rolling", "Trading"],
    }
    fields.update(kwargs)
    return ExternalRecord(bgg_id=bgg_id, links=record_links, **fields)
