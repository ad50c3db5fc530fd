import logging
import secrets

logger = logging.getLogger(__name__)

# Any object exposing getrandbits(k) (the random.SystemRandom API) can stand in for this source
_system_random = secrets.SystemRandom()


def random_scalar(n: int, rng=None) -> int:
    '''
        Uniform integer in the open interval (0, n)
            draws bit_length(n) random bits and redraws values outside of (0, n)
    '''
    if n <= 1:
        raise ValueError(f'Empty interval (0, {n})')

    rng = rng or _system_random
    bits = n.bit_length()

    while True:
        k = rng.getrandbits(bits)
        if 0 < k < n:
            return k
        logger.debug('Random scalar outside of (0, n), redrawing')
