"""
Base exception hierarchy for volspace.

All custom exceptions inherit from VolspaceError to enable precise error handling
while maintaining compatibility with standard Python exceptions.
"""


class VolspaceError(Exception):
    """Base exception for all volspace errors."""

    pass


class ValidationError(VolspaceError, ValueError):
    """Raised when input validation fails."""

    pass


class ConfigError(VolspaceError, ValueError):
    """Raised when configuration values are invalid."""

    pass


class DimensionMismatchError(ValidationError):
    """Raised when entities of different dimensionality are combined."""

    def __init__(self, expected: int, actual: int, context: str = "operation"):
        self.expected = expected
        self.actual = actual
        self.context = context
        message = (
            f"Dimensionality mismatch in {context}: "
            f"expected {expected}, got {actual}"
        )
        super().__init__(message)


class NonInvertibleError(VolspaceError, ArithmeticError):
    """Raised when an affine transform's linear part cannot be inverted."""

    def __init__(self, determinant: float, reason: str | None = None):
        self.determinant = determinant
        message = f"Affine transform is not invertible (determinant={determinant:.6g})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SpaceTagMismatchError(VolspaceError, TypeError):
    """Raised when a coordinate tagged for one space is used where another is required."""

    def __init__(self, expected: str, actual: str | None, context: str = "operation"):
        self.expected = expected
        self.actual = actual
        self.context = context
        got = f"'{actual}'" if actual is not None else "an untagged value"
        message = f"Coordinate space mismatch in {context}: expected '{expected}', got {got}"
        super().__init__(message)


class BackendNotAvailableError(VolspaceError, KeyError):
    """Raised when a matrix backend name is not registered."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        message = (
            f"Unknown matrix backend '{name}'. "
            f"Available backends: {', '.join(available)}"
        )
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return self.args[0]
