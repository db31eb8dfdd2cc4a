"""Exceptions raised while building map graphs."""


class GraphConstructionError(ValueError):
    """The inputs cannot be turned into a consistent graph."""
