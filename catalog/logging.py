import warnings
from types import MappingProxyType
from typing import Any, Callable, Optional

import structlog

# Default global registry for semantic context extractors
_DEFAULT_EXTRACTORS: dict[str, Callable[[Any], dict[str, Any]]] = {}


def _register_default_extractor(
    context_key: str, extractor_function: Callable[[Any], dict[str, Any]]
):
    _DEFAULT_EXTRACTORS[context_key] = extractor_function


# Chained extractors must be registered after the ones they call,
# so game comes before association and relation
_register_default_extractor(
    "game",
    lambda game: {
        "game_id": getattr(game, "pk", None),
        "game_name": getattr(game, "name", None),
    },
)

_register_default_extractor(
    "association",
    lambda association: {
        **_DEFAULT_EXTRACTORS["game"](getattr(association, "game", None)),
        "bgg_id": getattr(association, "bgg_id", None),
    },
)

_register_default_extractor(
    "relation",
    lambda relation: {
        "relation_id": getattr(relation, "pk", None),
        "relation_type": getattr(relation, "relation_type", None),
        "source_game_id": getattr(relation, "source_game_id", None),
        "target_game_id": getattr(relation, "target_game_id", None),
    },
)

# Freeze default extractors to prevent mutation
_DEFAULT_EXTRACTORS = MappingProxyType(_DEFAULT_EXTRACTORS)


class CatalogLogger:
    """
    A structured logging wrapper around structlog used by the catalog and the
    BGG importer.

    Every entry needs a message and an ``event_code``. Warnings and errors
    also need ``reason`` and ``reason_code`` so failures can be grouped
    without parsing the message text.

    Usage:
    -----

        ```python
        structured_logger = CatalogLogger.get_logger(__name__)

        structured_logger.info(
            "Imported game from BGG.",
            event_code="bgg_game_imported",
            game=game,
            bgg_id=13,
        )

        structured_logger.warning(
            "Relation target has not been imported yet.",
            event_code="bgg_relation_target_missing",
            reason="No association exists for the linked BGG id.",
            reason_code="relation_target_missing",
            game=game,
            bgg_id=822,
        )
        ```

    Special Context Expansion:
    --------------------------

    Some context keys are expanded into plain fields at log time:

    - `game` -> `game_id`, `game_name`
    - `association` -> `bgg_id`, `game_id`, `game_name`
    - `relation` -> `relation_id`, `relation_type`, `source_game_id`,
      `target_game_id`

    Explicit values (e.g. `bgg_id=...`) override extracted ones and fields
    whose value is `None` are left out of the entry.

    `register_extractor()` adds or overrides an extractor for one logger
    instance. Chained defaults (`association` -> `game`) keep using the
    global `game` extractor even when a logger overrides it.
    """

    def __init__(self, logger, context: Optional[dict[str, Any]] = None):
        self._logger = logger
        self._context = context or {}
        self._extractors = _DEFAULT_EXTRACTORS.copy()

    @classmethod
    def get_logger(cls, name: str) -> "CatalogLogger":
        """
        Build a CatalogLogger on top of the structlog logger
        ``structlog.<name>``.
        """
        return cls(structlog.get_logger(f"structlog.{name}"))

    def register_extractor(
        self, key: str, extractor: Callable[[Any], dict[str, Any]]
    ) -> None:
        """Register a context extractor for this logger instance only."""
        self._extractors[key] = extractor
        if key in _DEFAULT_EXTRACTORS:
            warnings.warn(
                f"Extractor for '{key}' registered but chained default extractors "
                f"will keep using the original one.",
                UserWarning,
                stacklevel=2,
            )

    def unregister_extractor(self, key: str) -> None:
        self._extractors.pop(key, None)

    def log(
        self,
        level: str,
        message: str,
        *,
        event_code: str,
        reason: Optional[str] = None,
        reason_code: Optional[str] = None,
        **context: Any,
    ) -> None:
        """
        Emit a structured log entry. Normally called through one of the level
        methods (debug, info, warning, error).

        Args:
            level (str): Logging level ('debug', 'info', 'warning', 'error').
            message (str): Human-readable log message.
            event_code (str): Short machine-readable identifier.
            reason (str, optional): Human-readable failure reason (required for
                warnings/errors).
            reason_code (str, optional): Short identifier for the reason
                (required for warnings/errors).
            context (Any): Additional structured context.

        Raises:
            ValueError: If required fields are missing for the given level.
        """
        if not message:
            raise ValueError("Log message is required.")
        if not event_code:
            raise ValueError("Structured logs must include an 'event_code' field.")
        if level in ("warning", "error") and (not reason or not reason_code):
            raise ValueError(
                "Warnings and errors must include both 'reason' and 'reason_code'."
            )

        context_data = {"event_code": event_code}
        if reason:
            context_data["reason"] = reason
        if reason_code:
            context_data["reason_code"] = reason_code

        bound_context = self._context

        for context_key, extractor_function in self._extractors.items():
            context_object = context.pop(context_key, bound_context.get(context_key))
            if context_object is not None:
                for key, value in extractor_function(context_object).items():
                    if value is not None:
                        context_data.setdefault(key, value)

        for key, value in bound_context.items():
            if key not in self._extractors and key not in context and value is not None:
                context_data[key] = value

        # Explicit values win over extracted and bound ones
        for key, value in context.items():
            if value is not None:
                context_data[key] = value

        getattr(self._logger, level)(message, **context_data)

    def debug(self, message: str, *, event_code: str, **kwargs):
        self.log("debug", message, event_code=event_code, **kwargs)

    def info(self, message: str, *, event_code: str, **kwargs):
        self.log("info", message, event_code=event_code, **kwargs)

    def warning(
        self, message: str, *, event_code: str, reason: str, reason_code: str, **kwargs
    ):
        """Emit a warning-level structured log. Requires reason and reason_code."""
        self.log(
            "warning",
            message,
            event_code=event_code,
            reason=reason,
            reason_code=reason_code,
            **kwargs,
        )

    def error(
        self, message: str, *, event_code: str, reason: str, reason_code: str, **kwargs
    ):
        """Emit an error-level structured log. Requires reason and reason_code."""
        self.log(
            "error",
            message,
            event_code=event_code,
            reason=reason,
            reason_code=reason_code,
            **kwargs,
        )

    def bind(self, **kwargs: Any) -> "CatalogLogger":
        """
        Return a new CatalogLogger with additional context bound to every
        entry it emits. Bound objects with extractors are expanded at log
        time.
        """
        new_context = self._context.copy()
        new_context.update(kwargs)
        return CatalogLogger(self._logger, context=new_context)
