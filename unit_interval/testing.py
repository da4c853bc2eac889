import logging
import random
import time

import numpy

from unit_interval.base import UnitInterval
from unit_interval.sampling import UnitIntervalDistribution

__all__ = [
    'check_invariant',
    'sample_until_one',
]


logger = logging.getLogger(__name__)


def check_invariant(x) -> bool:
    """Return True if x is a UnitInterval whose value would be accepted by
    UnitInterval.new(). Results of closed operations are expected to pass
    this check without ever having gone through it."""
    if not isinstance(x, UnitInterval):
        return False
    return UnitInterval.new(x.get()) is not None


def sample_until_one(distribution: UnitIntervalDistribution = None, max_draws: int = 2 ** 28,
                     batch_size: int = 2 ** 22,
                     rng: numpy.random.Generator | random.Random = None) -> tuple[int, float, bool]:
    """Sample from the distribution in batches until a value exactly equal to
    1.0 is drawn, or until the draw budget is spent. Log progress along the
    way. Return a tuple, (draws, seconds, found), indicating how many values
    were drawn, how long it took, and whether 1.0 turned up. This checks that
    the sampler really includes its upper endpoint; a half-open sampler will
    always exhaust the budget. By default, a float32 distribution is used,
    where each draw equals 1.0 with probability 2 ** -24, so the default
    budget of 2 ** 28 draws misses with probability around e ** -16.

    Usage:
        draws, seconds, found = sample_until_one(
            UnitIntervalDistribution(numpy.float32),
            rng=numpy.random.default_rng(0))
        assert found

    Arguments:
        distribution: The UnitIntervalDistribution to sample from; default
            is a new float32 distribution.
        max_draws: The maximum number of values to draw.
        batch_size: The number of values drawn per call to sample_array().
        rng: The random source passed on to the distribution; default is
            the calling thread's default generator.
    Return:
        A tuple, (draws, seconds, found), where draws is the number of
        values drawn up to and including the first 1.0 (or max_draws if
        none was found), seconds is the time spent sampling, and found is
        True if a value of exactly 1.0 was drawn.
    """

    assert distribution is None or isinstance(distribution, UnitIntervalDistribution)
    assert max_draws > 0 and batch_size > 0

    if distribution is None:
        distribution = UnitIntervalDistribution(numpy.float32)

    draws = 0
    found = False
    start_time = time.time()
    while draws < max_draws:
        size = min(batch_size, max_draws - draws)
        batch = distribution.sample_array(size, rng)
        assert ((batch >= 0) & (batch <= 1)).all()
        hits = numpy.flatnonzero(batch == 1)
        if hits.size:
            draws += int(hits[0]) + 1
            found = True
            break
        draws += size
        logger.info("No sample equal to 1.0 after %d draws", draws)
    end_time = time.time()

    if found:
        logger.info("Sampled 1.0 from %r after %d draws", distribution, draws)
    else:
        logger.info("Sampling budget of %d draws exhausted for %r", max_draws, distribution)
    logger.info("Total time: %.5f seconds", end_time - start_time)

    return draws, end_time - start_time, found
