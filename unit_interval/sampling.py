import random
import threading

import numpy

from unit_interval.base import UnitInterval

__all__ = [
    'UnitIntervalDistribution',
    'default_rng',
]


_local = threading.local()


def default_rng() -> numpy.random.Generator:
    """Return the calling thread's default random generator, creating it on
    first use. Generators are not shared between threads."""
    rng = getattr(_local, 'rng', None)
    if rng is None:
        rng = _local.rng = numpy.random.default_rng()
    return rng


class UnitIntervalDistribution:
    """The uniform distribution over the closed range [0, 1], for float32 or
    float64 values.

    Samples are drawn by choosing an integer k uniformly from [0, 2**p]
    inclusive, where p is the number of significand bits of the dtype, and
    returning k / 2**p. Both k and 2**p are exactly representable in the
    dtype, so the division is exact and both endpoints can be drawn. In
    particular, 1.0 is a possible sample, with probability 1 / (2**p + 1).

    The random source is injected per call: a numpy.random.Generator or a
    random.Random instance. If none is given, the calling thread's default
    generator is used.

    Usage:
        distribution = UnitIntervalDistribution(numpy.float32)
        p = distribution.sample(numpy.random.default_rng(42))
        assert 0.0 <= p <= 1.0
        batch = distribution.sample_array(1000)
        assert ((batch >= 0) & (batch <= 1)).all()

    Init Arguments:
        dtype: numpy.float32, numpy.float64, or anything numpy.dtype()
            resolves to one of them. Defaults to float64.
    """

    def __init__(self, dtype=numpy.float64):
        dtype = numpy.dtype(dtype)
        if dtype != numpy.float32 and dtype != numpy.float64:
            raise TypeError(f"Unsupported unit interval dtype: {dtype}")
        self._dtype = dtype
        self._precision = numpy.finfo(dtype).nmant + 1
        self._denominator = 2 ** self._precision

    @property
    def dtype(self) -> numpy.dtype:
        return self._dtype

    @property
    def precision(self) -> int:
        """The number of significand bits, including the implicit one."""
        return self._precision

    def sample(self, rng: numpy.random.Generator | random.Random = None) -> UnitInterval:
        """Draw a single value."""
        if rng is None:
            rng = default_rng()
        if isinstance(rng, numpy.random.Generator):
            numerator = rng.integers(0, self._denominator, endpoint=True)
        elif isinstance(rng, random.Random):
            numerator = rng.randint(0, self._denominator)
        else:
            raise TypeError(f"Unsupported random source: {type(rng).__name__}")
        scalar_type = self._dtype.type
        # 0 <= numerator <= denominator, and the quotient is exact.
        return UnitInterval._trusted(scalar_type(numerator) / scalar_type(self._denominator))

    def sample_array(self, size: int | tuple[int, ...],
                     rng: numpy.random.Generator | random.Random = None) -> numpy.ndarray:
        """Draw an array of raw values of the distribution's dtype, every
        element in [0, 1]."""
        if rng is None:
            rng = default_rng()
        if isinstance(rng, numpy.random.Generator):
            numerators = rng.integers(0, self._denominator, size=size, endpoint=True)
        elif isinstance(rng, random.Random):
            count = int(numpy.prod(size))
            numerators = numpy.fromiter((rng.randint(0, self._denominator) for _ in range(count)),
                                        dtype=numpy.int64, count=count).reshape(size)
        else:
            raise TypeError(f"Unsupported random source: {type(rng).__name__}")
        return numerators.astype(self._dtype) / self._dtype.type(self._denominator)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(numpy.{self._dtype.name})"
