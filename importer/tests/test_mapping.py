from django.test import SimpleTestCase

from importer.bgg.mapping import (
    LinkKind,
    classify_link_type,
    map_family_rank_name_to_type,
)


class FamilyRankMappingTests(SimpleTestCase):
    def test_known_families(self):
        for family_name, expected in (
            ("abstracts", "abstract"),
            ("familygames", "family"),
            ("partygames", "party"),
            ("strategygames", "strategy"),
            ("thematic", "thematic"),
            ("StrategyGames", "strategy"),
        ):
            with self.subTest(family_name=family_name):
                self.assertEqual(map_family_rank_name_to_type(family_name), expected)

    def test_unknown_families(self):
        for family_name in ("wargames", "childrensgames", "cgs", "", None):
            with self.subTest(family_name=family_name):
                self.assertIsNone(map_family_rank_name_to_type(family_name))


class LinkClassificationTests(SimpleTestCase):
    def test_expansion_links(self):
        self.assertEqual(classify_link_type("boardgameexpansion", True), LinkKind.EXPANDS)
        self.assertIsNone(classify_link_type("boardgameexpansion", False))

    def test_compilation_links(self):
        self.assertEqual(
            classify_link_type("boardgamecompilation", True), LinkKind.CONTAINS
        )
        self.assertIsNone(classify_link_type("boardgamecompilation", False))

    def test_implementation_links(self):
        self.assertEqual(
            classify_link_type("boardgameimplementation", True), LinkKind.REIMPLEMENTS
        )
        self.assertEqual(
            classify_link_type("boardgameimplementation", False),
            LinkKind.REIMPLEMENTED_BY,
        )

    def test_integration_links_in_both_directions(self):
        for inbound in (True, False):
            with self.subTest(inbound=inbound):
                self.assertEqual(
                    classify_link_type("boardgameintegration", inbound),
                    LinkKind.INTEGRATES_WITH,
                )

    def test_other_links_are_ignored(self):
        for link_type in ("boardgamecategory", "boardgamemechanic", "", None):
            with self.subTest(link_type=link_type):
                self.assertIsNone(classify_link_type(link_type, True))
