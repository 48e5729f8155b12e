"""
complex-ops operations
Operation selectors and dispatch to NumPy complex primitives
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, TextIO, Union

import numpy as np

from .core import Result, to_complex
from .errors import ComplexOpsError, ComputationError, ConfigurationError

logger = logging.getLogger(__name__)


class Operation(Enum):
    """Operations that can be applied to a complex number"""
    CONJUGATE = 'conjugate'
    RECIPROCAL = 'reciprocal'
    NEGATE = 'negate'
    ABS = 'abs'
    ACOS = 'acos'
    ASIN = 'asin'
    ATAN = 'atan'
    COS = 'cos'
    COSH = 'cosh'
    EXP = 'exp'
    LOG10 = 'log10'
    SIN = 'sin'
    SINH = 'sinh'
    SQRT = 'sqrt'
    TAN = 'tan'
    TANH = 'tanh'
    POW = 'pow'
    LOG = 'log'

    @property
    def is_binary(self) -> bool:
        """Whether the operation takes a second operand"""
        return self in BINARY_OPERATIONS

    @classmethod
    def parse(cls, name: Union[str, 'Operation']) -> 'Operation':
        """Resolve an operation from a member or a case-insensitive name"""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            names = ', '.join(op.value for op in cls)
            raise ConfigurationError(f"Unknown operation: {name} (expected one of {names})") from None


BINARY_OPERATIONS = frozenset({Operation.POW, Operation.LOG})
DEFAULT_OPERATION = Operation.CONJUGATE


@dataclass(frozen=True)
class Selector:
    """
    An operation together with its second operand

    Pow and Log selectors always carry a complex argument; every other
    selector carries none. Invalid combinations cannot be constructed.
    """
    operation: Operation = DEFAULT_OPERATION
    argument: Optional[np.complex128] = None

    def __post_init__(self):
        operation = Operation.parse(self.operation)
        object.__setattr__(self, 'operation', operation)

        if operation.is_binary:
            if self.argument is None:
                raise ConfigurationError(f"Operation '{operation.value}' requires a second operand")
            object.__setattr__(self, 'argument', to_complex(self.argument))
        elif self.argument is not None:
            raise ConfigurationError(f"Operation '{operation.value}' does not take a second operand")

    @classmethod
    def power(cls, exponent: Any) -> 'Selector':
        return cls(Operation.POW, exponent)

    @classmethod
    def logarithm(cls, base: Any) -> 'Selector':
        return cls(Operation.LOG, base)

    def __str__(self) -> str:
        if self.argument is None:
            return self.operation.value
        return f"{self.operation.value}({self.argument})"


class Operations:
    """Primitives that NumPy does not expose directly"""

    @staticmethod
    def reciprocal(z: np.complex128) -> np.complex128:
        if z == 0:
            raise ZeroDivisionError("zero has no multiplicative inverse")
        return np.reciprocal(z)

    @staticmethod
    def magnitude(z: np.complex128) -> float:
        # the only operation with a real result
        return float(np.abs(z))

    @staticmethod
    def log_base(z: np.complex128, base: np.complex128) -> np.complex128:
        """Logarithm of z in an arbitrary complex base"""
        return np.log(z) / np.log(base)


UNARY_PRIMITIVES: Dict[Operation, Callable[[np.complex128], Result]] = {
    Operation.CONJUGATE: np.conjugate,
    Operation.RECIPROCAL: Operations.reciprocal,
    Operation.NEGATE: np.negative,
    Operation.ABS: Operations.magnitude,
    Operation.ACOS: np.arccos,
    Operation.ASIN: np.arcsin,
    Operation.ATAN: np.arctan,
    Operation.COS: np.cos,
    Operation.COSH: np.cosh,
    Operation.EXP: np.exp,
    Operation.LOG10: np.log10,
    Operation.SIN: np.sin,
    Operation.SINH: np.sinh,
    Operation.SQRT: np.sqrt,
    Operation.TAN: np.tan,
    Operation.TANH: np.tanh,
}

BINARY_PRIMITIVES: Dict[Operation, Callable[[np.complex128, np.complex128], np.complex128]] = {
    Operation.POW: np.power,
    Operation.LOG: Operations.log_base,
}


def dispatch(value: Any, selector: Selector) -> Result:
    """
    Apply a selector to a complex operand

    Args:
        value: Primary operand (anything accepted by to_complex)
        selector: Operation and its second operand

    Returns:
        numpy.complex128 result, or a float for Abs

    Raises:
        InputConversionError: If the operand is not convertible
        ComputationError: If the primitive raises (reciprocal of zero)
    """
    z = to_complex(value)
    operation = selector.operation

    try:
        # inf and nan results are returned as-is
        with np.errstate(all='ignore'):
            if operation.is_binary:
                result = BINARY_PRIMITIVES[operation](z, selector.argument)
            else:
                result = UNARY_PRIMITIVES[operation](z)
    except (ZeroDivisionError, OverflowError) as exc:
        raise ComputationError(f"{selector} of {z} failed: {exc}") from exc

    if operation is not Operation.ABS:
        result = np.complex128(result)

    logger.debug(f"{selector}: {z} -> {result}")
    return result


def apply(value: Any, operation: Union[str, Operation] = DEFAULT_OPERATION,
          argument: Any = None) -> Result:
    """
    Apply an operation to a complex operand

    Args:
        value: Primary operand
        operation: Operation member or name (default: conjugate)
        argument: Second operand, required for pow and log only

    Returns:
        numpy.complex128 result, or a float for abs
    """
    return dispatch(value, Selector(operation, argument))


@dataclass(frozen=True)
class BatchItem:
    """Outcome for one operand of a batch"""
    value: Any
    result: Optional[Result] = None
    error: Optional[ComplexOpsError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def apply_batch(values: Iterable[Any], selector: Selector) -> List[BatchItem]:
    """
    Apply one selector to each operand independently

    A failing operand is recorded on its own item and does not stop the
    rest of the batch. Output order matches input order.
    """
    items = []
    for value in values:
        try:
            items.append(BatchItem(value, result=dispatch(value, selector)))
        except ComplexOpsError as exc:
            logger.info(f"{selector} failed for {value!r}: {exc}")
            items.append(BatchItem(value, error=exc))

    failed = sum(1 for item in items if not item.ok)
    logger.info(f"Batch {selector}: {len(items)} operands, {failed} failed")
    return items


def read_operands(stream: TextIO) -> Iterator[str]:
    """Yield operands from a text stream, one per line, skipping blanks and '#' comments"""
    for line in stream:
        line = line.strip()
        if line and not line.startswith('#'):
            yield line
