import warnings
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from django.test import TestCase

from catalog.logging import CatalogLogger


class CatalogLoggerTests(TestCase):
    def setUp(self):
        self.mock_structlog_logger = MagicMock()
        self.logger = CatalogLogger(self.mock_structlog_logger)

    def test_debug_logs_with_event(self):
        self.logger.debug("debug msg", event_code="debug_event", key1="value1")
        self.mock_structlog_logger.debug.assert_called_once()
        args, kwargs = self.mock_structlog_logger.debug.call_args
        self.assertEqual(args[0], "debug msg")
        self.assertEqual(kwargs["event_code"], "debug_event")
        self.assertEqual(kwargs["key1"], "value1")

    def test_info_logs_with_event(self):
        self.logger.info("info msg", event_code="info_event", key2="value2")
        args, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(args[0], "info msg")
        self.assertEqual(kwargs["event_code"], "info_event")
        self.assertEqual(kwargs["key2"], "value2")

    def test_warning_requires_reason_and_reason_code(self):
        with self.assertRaises(TypeError):
            self.logger.warning(
                "warning msg", event_code="warn_event", reason="only_reason"
            )

        self.logger.warning(
            "warning msg",
            event_code="warn_event",
            reason="test reason",
            reason_code="warn_code",
        )
        args, kwargs = self.mock_structlog_logger.warning.call_args
        self.assertEqual(kwargs["reason"], "test reason")
        self.assertEqual(kwargs["reason_code"], "warn_code")

    def test_error_requires_reason_and_reason_code(self):
        with self.assertRaises(TypeError):
            self.logger.error(
                "error msg", event_code="error_event", reason_code="only_code"
            )

        self.logger.error(
            "error msg",
            event_code="error_event",
            reason="error reason",
            reason_code="error_code",
        )
        self.mock_structlog_logger.error.assert_called_once()

    def test_missing_event_raises(self):
        with self.assertRaises(ValueError):
            self.logger.info("msg", event_code=None)

    def test_empty_message_raises(self):
        for message in (None, ""):
            with self.subTest(message=message):
                with self.assertRaises(ValueError):
                    self.logger.log("info", message, event_code="event")

    def test_empty_reason_raises(self):
        with self.assertRaises(ValueError):
            self.logger.log(
                "warning", "bad", event_code="something", reason="", reason_code="fail"
            )

        with self.assertRaises(ValueError):
            self.logger.log(
                "error", "bad", event_code="something", reason="fail", reason_code=None
            )

    def test_game_extractor(self):
        game = SimpleNamespace(pk=7, name="Catan")
        self.logger.info("msg", event_code="event", game=game)
        _, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["game_id"], 7)
        self.assertEqual(kwargs["game_name"], "Catan")
        self.assertNotIn("game", kwargs)

    def test_association_extractor_includes_game(self):
        association = SimpleNamespace(
            bgg_id=13, game=SimpleNamespace(pk=7, name="Catan")
        )
        self.logger.info("msg", event_code="event", association=association)
        _, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["bgg_id"], 13)
        self.assertEqual(kwargs["game_id"], 7)
        self.assertEqual(kwargs["game_name"], "Catan")

    def test_relation_extractor(self):
        relation = SimpleNamespace(
            pk=3, relation_type="expands", source_game_id=8, target_game_id=7
        )
        self.logger.debug("msg", event_code="event", relation=relation)
        _, kwargs = self.mock_structlog_logger.debug.call_args
        self.assertEqual(kwargs["relation_id"], 3)
        self.assertEqual(kwargs["relation_type"], "expands")
        self.assertEqual(kwargs["source_game_id"], 8)
        self.assertEqual(kwargs["target_game_id"], 7)

    def test_explicit_key_overrides_extracted(self):
        association = SimpleNamespace(bgg_id=13, game=None)
        self.logger.info(
            "msg", event_code="event", association=association, bgg_id=926
        )
        _, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["bgg_id"], 926)

    def test_register_extractor(self):
        self.logger.register_extractor("thing", lambda o: {"thing_id": o.id})
        self.logger.info("msg", event_code="event", thing=SimpleNamespace(id=42))
        _, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["thing_id"], 42)

    def test_unregister_extractor(self):
        self.logger.register_extractor("thing", lambda o: {"thing_id": 1})
        self.logger.unregister_extractor("thing")
        self.assertNotIn("thing", self.logger._extractors)

    def test_register_extractor_warns_on_default_override(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            self.logger.register_extractor("game", lambda o: {"game_id": 1})

        self.assertTrue(
            any("chained default extractors" in str(w.message) for w in caught)
        )

    def test_none_values_are_skipped(self):
        self.logger.info(
            "msg", event_code="event", game=SimpleNamespace(pk=None, name="x"), extra=None
        )
        _, kwargs = self.mock_structlog_logger.info.call_args
        self.assertNotIn("game_id", kwargs)
        self.assertNotIn("extra", kwargs)
        self.assertEqual(kwargs["game_name"], "x")

    def test_bind(self):
        bound = self.logger.bind(game=SimpleNamespace(pk=7, name="Catan"), job="refresh")
        self.assertIsInstance(bound, CatalogLogger)

        bound.info("msg", event_code="event", job="override")

        _, kwargs = self.mock_structlog_logger.info.call_args
        self.assertEqual(kwargs["game_id"], 7)
        self.assertEqual(kwargs["job"], "override")
        self.assertNotIn("game", kwargs)

    def test_get_logger_uses_structlog(self):
        with patch("catalog.logging.structlog.get_logger") as mock_get_logger:
            logger = CatalogLogger.get_logger("importer.games")

        mock_get_logger.assert_called_once_with("structlog.importer.games")
        self.assertIsInstance(logger, CatalogLogger)
        self.assertEqual(logger._logger, mock_get_logger.return_value)
