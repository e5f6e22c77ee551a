# /vectorkg/errors.py


class GraphStoreError(Exception):
    """Base class for every failure reported by the graph store."""


class DimensionMismatch(GraphStoreError, ValueError):
    """A vector's length differs from the store's configured embedding dimension."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected a vector of length {expected}, got {actual}")


class ConfigMismatch(GraphStoreError, ValueError):
    """A store was asked to build with a config other than the one it holds."""


class StoreIOError(GraphStoreError, OSError):
    """The persisted store could not be read or written."""


class ParseError(GraphStoreError, ValueError):
    """Persisted content is malformed, incomplete or internally inconsistent."""
