"""
complex-ops: unary and binary operations on complex numbers
"""

from .core import Config, ComplexResult, configure_logging, format_result, to_complex
from .errors import ComplexOpsError, ComputationError, ConfigurationError, InputConversionError
from .operations import (
    BatchItem,
    Operation,
    Operations,
    Selector,
    apply,
    apply_batch,
    dispatch,
)

__version__ = "0.1.0"

__all__ = [
    'Config',
    'ComplexResult',
    'Operation',
    'Operations',
    'Selector',
    'BatchItem',
    'apply',
    'apply_batch',
    'dispatch',
    'configure_logging',
    'format_result',
    'to_complex',
    'ComplexOpsError',
    'ComputationError',
    'ConfigurationError',
    'InputConversionError',
]

# Aliases for convenience
power = Selector.power
logarithm = Selector.logarithm
