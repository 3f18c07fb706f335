from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.test import TestCase

from catalog.models import (
    DEFAULT_GAME_TYPES,
    Game,
    GameGameType,
    GameRelation,
    GameType,
)
from importer.models import BggGameAssociation

from .utils import create_game, create_relation


class GameTypeTests(TestCase):
    def test_default_types_are_seeded(self):
        self.assertTrue(
            set(DEFAULT_GAME_TYPES).issubset(
                GameType.objects.values_list("name", flat=True)
            )
        )

    def test_names_are_unique(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            GameType.objects.create(name="strategy")


class GameTests(TestCase):
    def test_str(self):
        self.assertEqual(str(create_game(do_save=False)), "Catan")

    def test_player_range_is_validated(self):
        with self.assertRaises(ValidationError) as context:
            create_game(min_players=4, max_players=2, do_save=False)
        self.assertIn("max_players", context.exception.message_dict)

    def test_playing_time_range_is_validated(self):
        with self.assertRaises(ValidationError) as context:
            create_game(min_playing_time=90, max_playing_time=30, do_save=False)
        self.assertIn("max_playing_time", context.exception.message_dict)

    def test_open_playing_time_range(self):
        create_game(min_playing_time=None, max_playing_time=30, do_save=False)
        create_game(min_playing_time=30, max_playing_time=None, do_save=False)

    def test_value_bounds(self):
        for overrides in (
            {"min_players": 0},
            {"min_playing_time": 0},
            {"year_published": 0},
            {"rating": Decimal("10.01")},
            {"rating": Decimal("-0.5")},
            {"difficulty_score": Decimal("5.10")},
        ):
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValidationError):
                    create_game(do_save=False, **overrides)

    def test_rating_of_ten_is_allowed(self):
        game = create_game(rating=Decimal("10.00"))
        game.refresh_from_db()
        self.assertEqual(game.rating, Decimal("10"))

    def test_player_range_constraint(self):
        game = create_game()
        game.max_players = 1
        with self.assertRaises(IntegrityError), transaction.atomic():
            game.save()

    def test_taxonomy(self):
        game = create_game(game_types=("strategy", "family"), game_categories=("Economic",))

        self.assertEqual(
            [game_type.name for game_type in game.game_types.all()],
            ["family", "strategy"],
        )
        self.assertEqual(
            [category.name for category in game.game_categories.all()], ["Economic"]
        )

    def test_type_rank_must_be_positive(self):
        game = create_game(game_types=())
        with self.assertRaises(IntegrityError), transaction.atomic():
            GameGameType.objects.create(
                game=game, game_type=GameType.objects.get(name="party"), rank=0
            )

    def test_bgg_id(self):
        game = create_game()
        self.assertIsNone(game.bgg_id)

        BggGameAssociation.objects.create(game=game, bgg_id=13)
        self.assertEqual(game.bgg_id, 13)

    def test_queryset_filters(self):
        catan = create_game()
        codenames = create_game(
            name="Codenames",
            year_published=2015,
            min_players=2,
            max_players=8,
            min_playing_time=15,
            max_playing_time=15,
            rating=Decimal("7.6"),
            game_types=("party",),
        )

        self.assertEqual(list(Game.objects.name_contains("CAT")), [catan])
        self.assertEqual(list(Game.objects.for_player_count(6)), [codenames])
        self.assertEqual(list(Game.objects.for_playing_time(90)), [catan])
        self.assertEqual(list(Game.objects.max_playing_time_within(30)), [codenames])
        self.assertEqual(list(Game.objects.min_playing_time_at_least(60)), [catan])
        self.assertEqual(
            list(Game.objects.with_game_types(["party", "family"])), [codenames]
        )
        self.assertEqual(list(Game.objects.min_rating(7.5)), [codenames])


class GameRelationTests(TestCase):
    def setUp(self):
        self.catan = create_game()
        self.seafarers = create_game(name="Catan: Seafarers", year_published=1997)

    def test_expansion_accessors(self):
        create_relation(source_game=self.seafarers, target_game=self.catan)

        self.assertEqual(list(self.catan.expansions), [self.seafarers])
        self.assertEqual(list(self.seafarers.base_games), [self.catan])
        self.assertEqual(list(self.catan.base_games), [])

    def test_other_accessors(self):
        big_box = create_game(name="Catan Big Box")
        card_game = create_game(name="Catan Card Game")
        histories = create_game(name="Catan Histories")
        create_relation(
            source_game=big_box,
            target_game=self.catan,
            relation_type=GameRelation.RelationType.CONTAINS,
        )
        create_relation(
            source_game=card_game,
            target_game=self.catan,
            relation_type=GameRelation.RelationType.REIMPLEMENTS,
        )
        create_relation(
            source_game=histories,
            target_game=self.catan,
            relation_type=GameRelation.RelationType.INTEGRATES_WITH,
        )

        self.assertEqual(list(big_box.contained_games), [self.catan])
        self.assertEqual(list(self.catan.containers), [big_box])
        self.assertEqual(list(self.catan.reimplementations), [card_game])
        self.assertEqual(list(card_game.reimplemented_games), [self.catan])
        self.assertEqual(list(histories.integrated_games), [self.catan])

    def test_relations_are_unique(self):
        create_relation(source_game=self.seafarers, target_game=self.catan)
        with self.assertRaises(IntegrityError), transaction.atomic():
            create_relation(source_game=self.seafarers, target_game=self.catan)

    def test_same_pair_with_different_types(self):
        create_relation(source_game=self.seafarers, target_game=self.catan)
        create_relation(
            source_game=self.seafarers,
            target_game=self.catan,
            relation_type=GameRelation.RelationType.INTEGRATES_WITH,
        )
        self.assertEqual(GameRelation.objects.count(), 2)

    def test_self_relation_is_rejected(self):
        relation = GameRelation(source_game=self.catan, target_game=self.catan)
        relation.relation_type = GameRelation.RelationType.EXPANDS
        with self.assertRaises(ValidationError):
            relation.full_clean()
        with self.assertRaises(IntegrityError), transaction.atomic():
            relation.save()

    def test_deleting_a_game_removes_its_relations(self):
        create_relation(source_game=self.seafarers, target_game=self.catan)
        self.catan.delete()
        self.assertFalse(GameRelation.objects.exists())
