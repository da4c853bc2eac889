import decimal
import logging
import numbers
from typing import TypeVar, Generic

import numpy

__all__ = [
    'OutOfRangeError',
    'UnitInterval',
]


logger = logging.getLogger(__name__)

_Self = TypeVar('_Self')
_Value = TypeVar('_Value')


class OutOfRangeError(ValueError):
    """Raised when a value outside [0, 1] is wrapped by a raising constructor."""

    def __init__(self, value):
        super().__init__(value)
        self.value = value


def _check_value_type(value) -> None:
    # bool is an Integral, but its complement would silently become an int.
    if isinstance(value, bool) or not isinstance(value, numbers.Number):
        raise TypeError(f"Unsupported unit interval value type: {type(value).__name__}")


def _is_nan(value) -> bool:
    try:
        return bool(value != value)
    except decimal.InvalidOperation:
        # Signaling Decimal NaN refuses even equality comparison.
        return True


def _in_range(value) -> bool:
    if _is_nan(value):
        return False
    value_type = type(value)
    return bool(value_type(0) <= value <= value_type(1))


def _unwrap(other):
    if isinstance(other, UnitInterval):
        return other._value
    if isinstance(other, numbers.Number):
        return other
    return NotImplemented


class UnitInterval(Generic[_Value]):
    """A numeric value guaranteed to lie in the closed range [0, 1].

    The wrapped value can be any number that orders against its own zero and
    one: float, int, Fraction, Decimal, numpy.float32 or numpy.float64. The
    range is checked once, at construction. Every operation that produces a
    new instance either preserves the range by construction (multiplication,
    complement, precision conversion, sampling) or goes back through the
    range check and can fail (the checked_* methods).

    Usage:
        # Checked construction; out-of-range values yield None.
        p = UnitInterval.new(0.25)
        assert p is not None and p.get() == 0.25
        assert UnitInterval.new(1.5) is None

        # Instances are always truthy, so the walrus idiom works even for 0.
        if (q := UnitInterval.new(0.0)) is not None:
            assert q == 0.0

        # Callers that prefer an exception, or a repaired value.
        p = UnitInterval.require(0.25)  # OutOfRangeError if out of range
        assert UnitInterval.clamp(1.5) == 1.0

        # Comparison works against wrappers and raw numbers, either side.
        assert p < 0.5 and 0.5 > p and p == UnitInterval.new(0.25)

        # Closed operations.
        assert p * p == 0.0625
        assert ~p == p.complement() == 0.75

        # Operations that can leave the range are fallible.
        assert p.checked_add(0.9) is None

        # Precision conversion between float64 and float32.
        assert p.as_f32().as_f64() == p

    Init Arguments:
        value: The number to wrap. Raises OutOfRangeError if it lies outside
            [0, 1], and TypeError if it is not a supported number.
    """

    __slots__ = ('_value',)

    # Make numpy scalars return NotImplemented from their binary operators,
    # so that comparisons with a raw numpy value on the left are reflected
    # onto this class.
    __array_ufunc__ = None

    @classmethod
    def new(cls: type[_Self], value: _Value) -> None | _Self:
        """Wrap the value if it lies in [0, 1], otherwise return None."""
        _check_value_type(value)
        if not _in_range(value):
            logger.debug("Rejected out-of-range unit interval value: %r", value)
            return None
        return cls._trusted(value)

    @classmethod
    def require(cls: type[_Self], value: _Value) -> _Self:
        """Wrap the value, raising OutOfRangeError if it is not in [0, 1]."""
        return cls(value)

    @classmethod
    def clamp(cls: type[_Self], value: _Value) -> _Self:
        """Wrap the value, moving it to the nearest bound if it lies outside
        [0, 1]. NaN is clamped to zero."""
        _check_value_type(value)
        value_type = type(value)
        zero = value_type(0)
        one = value_type(1)
        if _is_nan(value):
            clamped = zero
        elif value < zero:
            clamped = zero
        elif value > one:
            clamped = one
        else:
            return cls._trusted(value)
        logger.debug("Clamped unit interval value %r to %r", value, clamped)
        return cls._trusted(clamped)

    @classmethod
    def zero(cls: type[_Self], value_type: type = float) -> _Self:
        """The lower bound, 0, in the given numeric type. This is also the
        default value of the type."""
        value = value_type(0)
        _check_value_type(value)
        return cls._trusted(value)

    @classmethod
    def one(cls: type[_Self], value_type: type = float) -> _Self:
        """The upper bound, 1, in the given numeric type."""
        value = value_type(1)
        _check_value_type(value)
        return cls._trusted(value)

    @classmethod
    def sample(cls, rng=None, dtype=numpy.float64) -> 'UnitInterval':
        """Draw a value uniformly from the closed range [0, 1]. See
        UnitIntervalDistribution for the accepted random sources."""
        from unit_interval.sampling import UnitIntervalDistribution
        return UnitIntervalDistribution(dtype).sample(rng)

    @classmethod
    def _trusted(cls: type[_Self], value: _Value) -> _Self:
        """Wrap a value without checking its range.

        Only for values that are in range by construction. Each caller states
        why its result cannot leave [0, 1]. The assertion re-checks this
        unless Python runs with -O.
        """
        assert _in_range(value), value
        result = object.__new__(cls)
        object.__setattr__(result, '_value', value)
        return result

    def __init__(self, value: _Value):
        _check_value_type(value)
        if not _in_range(value):
            raise OutOfRangeError(value)
        object.__setattr__(self, '_value', value)

    @property
    def value(self) -> _Value:
        """The wrapped value."""
        return self._value

    def get(self) -> _Value:
        """Return the wrapped value."""
        return self._value

    def as_f64(self) -> 'UnitInterval[numpy.float64]':
        """Convert the wrapped value to double precision.

        Rounding to the nearest double is monotone and both 0.0 and 1.0 are
        exactly representable, so the result stays in [0, 1]. Widening from
        single precision is exact.
        """
        return self._trusted(numpy.float64(float(self._value)))

    def as_f32(self) -> 'UnitInterval[numpy.float32]':
        """Convert the wrapped value to single precision.

        Precision may be lost, but rounding is monotone and 0.0 and 1.0 are
        exactly representable in single precision, so the result stays in
        [0, 1]. Values just below 1.0 may round up to exactly 1.0.
        """
        return self._trusted(numpy.float32(float(self._value)))

    def astype(self, dtype) -> 'UnitInterval':
        """Convert to the given floating point precision, which must be
        float32 or float64 (Python's float is float64)."""
        dtype = numpy.dtype(dtype)
        if dtype == numpy.float32:
            return self.as_f32()
        if dtype == numpy.float64:
            return self.as_f64()
        raise TypeError(f"Unsupported unit interval dtype: {dtype}")

    def complement(self: _Self) -> _Self:
        """The complement of x is 1 - x.

        If 0 <= x <= 1 then 0 <= 1 - x <= 1. In floating point, 1 - x is
        computed exactly for x in [0.5, 1] and rounds monotonically below
        that, and 1 - 0 and 1 - 1 are exact.
        """
        value = self._value
        return self._trusted(type(value)(1) - value)

    def checked_add(self, other) -> 'None | UnitInterval':
        """Return self + other if the sum lies in [0, 1], otherwise None."""
        other = self._checked_operand(other)
        return self.new(self._value + other)

    def checked_sub(self, other) -> 'None | UnitInterval':
        """Return self - other if the difference lies in [0, 1], otherwise
        None."""
        other = self._checked_operand(other)
        return self.new(self._value - other)

    def checked_div(self, other) -> 'None | UnitInterval':
        """Return self / other if the quotient lies in [0, 1], otherwise None.
        Division by zero yields None."""
        other = self._checked_operand(other)
        if other == 0:
            return None
        return self.new(self._value / other)

    def _checked_operand(self, other):
        value = _unwrap(other)
        if value is NotImplemented:
            raise TypeError(f"Unsupported operand type: {type(other).__name__}")
        return value

    def __mul__(self, other):
        if not isinstance(other, UnitInterval):
            return NotImplemented
        # Both factors lie in [0, 1], so the product does too. Under IEEE-754
        # round-to-nearest, a product no greater than 1 cannot round past
        # 1.0, and a non-negative product cannot round below 0.0.
        return self._trusted(self._value * other._value)

    def __invert__(self):
        return self.complement()

    def __eq__(self, other):
        other = _unwrap(other)
        if other is NotImplemented:
            return NotImplemented
        return bool(self._value == other)

    def __ne__(self, other):
        other = _unwrap(other)
        if other is NotImplemented:
            return NotImplemented
        return bool(self._value != other)

    def __lt__(self, other):
        other = _unwrap(other)
        if other is NotImplemented:
            return NotImplemented
        return bool(self._value < other)

    def __le__(self, other):
        other = _unwrap(other)
        if other is NotImplemented:
            return NotImplemented
        return bool(self._value <= other)

    def __gt__(self, other):
        other = _unwrap(other)
        if other is NotImplemented:
            return NotImplemented
        return bool(self._value > other)

    def __ge__(self, other):
        other = _unwrap(other)
        if other is NotImplemented:
            return NotImplemented
        return bool(self._value >= other)

    def __hash__(self) -> int:
        # Must agree with the raw value, since the two compare equal.
        return hash(self._value)

    def __float__(self) -> float:
        return float(self._value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        # Unpickling goes back through the range-checking constructor.
        return type(self), (self._value,)

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"
