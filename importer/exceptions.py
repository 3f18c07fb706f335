class BggClientError(Exception):
    """
    Base class for failures talking to the BoardGameGeek XML API.

    Client errors never leave the importer as-is: GameImporter wraps them in
    GameImportError with the operation and ids or query that were being
    processed.
    """


class BggTimeoutError(BggClientError):
    """The BGG API did not answer within the configured timeouts."""


class BggApiError(BggClientError):
    """The BGG API answered with an error status or the transport failed."""


class BggParseError(BggClientError):
    """The BGG API answered with a body that is not the expected XML."""


class InvalidArgumentError(ValueError):
    """
    A caller precondition was violated: a blank search query, or a batch of
    BGG ids that is empty or larger than the API allows.
    """


class GameImportError(Exception):
    """
    Raised when importing or reconciling a BGG record fails.

    The underlying error, if any, is chained as ``__cause__``.
    """

    #: Client errors which are worth retrying later
    TRANSIENT_CAUSES = (BggTimeoutError, BggApiError)

    @property
    def transient(self):
        cause = self.__cause__
        if isinstance(cause, GameImportError):
            return cause.transient
        return isinstance(cause, self.TRANSIENT_CAUSES)


class UnknownKindError(GameImportError):
    """A BGG record is neither a base game nor an expansion."""
