"""A numeric value type restricted to the closed unit interval [0, 1]."""

from unit_interval.base import OutOfRangeError, UnitInterval
from unit_interval.sampling import UnitIntervalDistribution

__all__ = [
    'OutOfRangeError',
    'UnitInterval',
    'UnitIntervalDistribution',
]

__version__ = '0.1.0'
