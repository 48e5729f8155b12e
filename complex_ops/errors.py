"""
Error types for complex-ops
"""


class ComplexOpsError(Exception):
    """Base exception for complex-ops errors."""
    pass


class ConfigurationError(ComplexOpsError, ValueError):
    """Raised when the operation selection is invalid (unknown, conflicting,
    or missing/unexpected second operand)."""
    pass


class InputConversionError(ComplexOpsError, ValueError):
    """Raised when an operand cannot be converted to a complex number."""

    def __init__(self, value, reason: str = None):
        self.value = value
        message = f"Cannot convert {value!r} to a complex number"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ComputationError(ComplexOpsError, ArithmeticError):
    """Raised when the underlying complex primitive fails."""
    pass
