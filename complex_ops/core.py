"""
complex-ops core module
Configuration, operand coercion and result rendering
"""

import json
import logging
import math
import numbers
import sys
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union

import numpy as np

from .errors import ConfigurationError, InputConversionError

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ('text', 'json')

Number = Union[complex, float, int, np.number]
Result = Union[np.complex128, float]

_handler = logging.StreamHandler(sys.stderr)
_handler.setFormatter(logging.Formatter('%(levelname)-8s %(name)s: %(message)s'))


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Attach a stderr handler to the package logger

    Args:
        verbose: Log at DEBUG instead of WARNING

    Returns:
        The package logger
    """
    package_logger = logging.getLogger('complex_ops')
    if _handler not in package_logger.handlers:
        package_logger.addHandler(_handler)
    # follow sys.stderr if it has been replaced since the last call
    _handler.setStream(sys.stderr)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return package_logger


class Config:
    """Configuration for complex-ops output"""

    def __init__(self, precision: int = 6, output_format: str = 'text',
                 verbose: bool = False):
        """
        Initialize configuration

        Args:
            precision: Digits after the decimal point in text output
            output_format: 'text' or 'json'
            verbose: Enable verbose logging
        """
        if precision < 0:
            raise ConfigurationError(f"Precision must be non-negative, got {precision}")
        if output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unknown output format: {output_format} (expected one of {', '.join(OUTPUT_FORMATS)})"
            )

        self.precision = precision
        self.output_format = output_format
        self.verbose = verbose

        if self.verbose:
            self.print_config()

    def print_config(self):
        """Log current configuration"""
        logger.info("complex-ops configuration:")
        logger.info(f"  Precision: {self.precision}")
        logger.info(f"  Output format: {self.output_format}")
        logger.info(f"  NumPy: {np.__version__}")

    def __repr__(self) -> str:
        return (f"Config(precision={self.precision}, "
                f"output_format='{self.output_format}', verbose={self.verbose})")


def _parse_complex_string(text: str) -> np.complex128:
    """Parse '2', '2+3j', '2+3i', '2,3' or '(2, 3)'"""
    text = text.strip()
    if not text:
        raise InputConversionError(text, "empty string")

    inner = text[1:-1] if text.startswith('(') and text.endswith(')') else text
    if ',' in inner:
        parts = inner.split(',')
        if len(parts) != 2:
            raise InputConversionError(text, "a pair needs exactly two components")
        try:
            return np.complex128(complex(float(parts[0]), float(parts[1])))
        except ValueError as exc:
            raise InputConversionError(text, str(exc)) from exc

    compact = text.replace(' ', '')
    # mathematical 'i' suffix, but leave 'inf' alone
    if compact.endswith('i') and not compact.lower().endswith('inf'):
        compact = compact[:-1] + 'j'
    try:
        return np.complex128(complex(compact))
    except ValueError as exc:
        raise InputConversionError(text, "not a real or complex number") from exc


def to_complex(value: Any) -> np.complex128:
    """
    Coerce an operand to a complex number

    Accepts complex values, real numbers (including Decimal and Fraction),
    numeric strings ('2', '2+3j', '2+3i', '2,3') and (real, imaginary) pairs.

    Args:
        value: Operand to convert

    Returns:
        The operand as numpy.complex128

    Raises:
        InputConversionError: If the operand is not convertible
    """
    if isinstance(value, (bool, np.bool_)):
        raise InputConversionError(value, "booleans are not numbers")
    if isinstance(value, numbers.Real):
        return np.complex128(complex(float(value), 0.0))
    if isinstance(value, numbers.Complex):
        return np.complex128(complex(value))
    if isinstance(value, str):
        return _parse_complex_string(value)
    if isinstance(value, (tuple, list)) and len(value) == 2:
        re_part, im_part = value
        if isinstance(re_part, (bool, np.bool_)) or isinstance(im_part, (bool, np.bool_)):
            raise InputConversionError(value, "booleans are not numbers")
        try:
            return np.complex128(complex(float(re_part), float(im_part)))
        except (TypeError, ValueError) as exc:
            raise InputConversionError(value, str(exc)) from exc

    if isinstance(value, numbers.Number):
        # Decimal is a Number but not registered as Real
        try:
            return np.complex128(complex(float(value), 0.0))
        except (TypeError, ValueError) as exc:
            raise InputConversionError(value, str(exc)) from exc

    raise InputConversionError(value, f"unsupported type {type(value).__name__}")


@dataclass(frozen=True)
class ComplexResult:
    """Rectangular and polar view of a complex value"""
    real: float
    imaginary: float
    magnitude: float
    phase: float

    @classmethod
    def from_value(cls, value: Number) -> 'ComplexResult':
        z = np.complex128(value)
        return cls(
            real=float(z.real),
            imaginary=float(z.imag),
            magnitude=float(np.abs(z)),
            phase=float(np.angle(z)),
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def format_complex(value: Number, precision: int = 6) -> str:
    """Render a complex value as 'a+bj'"""
    z = np.complex128(value)
    sign = '-' if np.signbit(z.imag) else '+'
    return f"{z.real:.{precision}f}{sign}{abs(z.imag):.{precision}f}j"


def _json_number(x: float) -> Union[float, str]:
    """Non-finite floats become 'inf', '-inf' or 'nan' so the output stays valid JSON"""
    return x if math.isfinite(x) else str(x)


def _json_view(value: Number) -> Dict[str, Union[float, str]]:
    return {key: _json_number(x) for key, x in ComplexResult.from_value(value).to_dict().items()}


def format_result(result: Result, config: Config,
                  value: Optional[Number] = None,
                  operation: Optional[str] = None) -> str:
    """
    Render a dispatch result

    Scalar results (magnitude) render as a bare number; complex results
    carry real, imaginary, magnitude and phase.

    Args:
        result: Value returned by the dispatcher
        config: Output configuration
        value: Primary operand, included in JSON output and batch text lines
        operation: Operation name, included in JSON output

    Returns:
        Rendered string
    """
    p = config.precision
    scalar = not isinstance(result, (complex, np.complexfloating))

    if config.output_format == 'json':
        payload = {}
        if value is not None:
            payload['input'] = _json_view(value)
        if operation is not None:
            payload['operation'] = operation
        payload['result'] = _json_number(float(result)) if scalar else _json_view(result)
        return json.dumps(payload, allow_nan=False)

    if scalar:
        text = f"{float(result):.{p}f}"
    else:
        view = ComplexResult.from_value(result)
        text = (f"{format_complex(result, p)}  "
                f"real={view.real:.{p}f} imaginary={view.imaginary:.{p}f} "
                f"magnitude={view.magnitude:.{p}f} phase={view.phase:.{p}f}")

    if value is not None:
        return f"{format_complex(value, p)} -> {text}"
    return text


def format_error(error: Exception, config: Config,
                 value: Any = None, operation: Optional[str] = None) -> str:
    """Render a per-item failure in the configured output format"""
    if config.output_format == 'json':
        payload = {}
        if value is not None:
            payload['input'] = str(value).strip()
        if operation is not None:
            payload['operation'] = operation
        payload['error'] = {'type': type(error).__name__, 'message': str(error)}
        return json.dumps(payload, allow_nan=False)
    prefix = f"{str(value).strip()}: " if value is not None else ""
    return f"{prefix}error: {error}"
