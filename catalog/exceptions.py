class InvalidQueryError(ValueError):
    """A catalog lookup was given parameters it cannot use."""
