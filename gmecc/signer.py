import logging

from gmecc.coordinate import CurvePoint, Point
from gmecc.keys import KeyPair, Signature
from gmecc.randomness import random_scalar
from gmecc.sm2 import SM2
from gmecc.sm3 import sm3_hash
from gmecc.utils import bytes_to_int, mod_inv

logger = logging.getLogger(__name__)

BUFFER_TYPES = (bytes, bytearray, memoryview)


def well_formed(public_key, signature, *buffers) -> bool:
    """Shape check of the verification inputs: a finite point, integer coordinates and r, s, bytes-like buffers"""
    if not (isinstance(public_key, CurvePoint) and isinstance(signature, Signature)):
        return False
    return (all(isinstance(v, int) and not isinstance(v, bool)
                for v in (public_key.x, public_key.y, signature.r, signature.s))
            and all(isinstance(b, BUFFER_TYPES) for b in buffers))


class SM2Signer:
    '''
        GM/T 0003.2-2012 digital signature
            sign:   e = H(Z || M), (x1, y1) = [k]g, r = (e + x1) mod n, s = (1 + d)^-1 (k - r d) mod n
            verify: t = (r + s) mod n, (x1, y1) = [s]g + [t]P, accept iff (e + x1) mod n == r
    '''

    def __init__(self, sm2: SM2, rng=None):
        self.sm2 = sm2
        self.curve = sm2.curve
        self.rng = rng

    def _hash_message(self, z: bytes, message: bytes) -> int:
        return bytes_to_int(sm3_hash(z, message))

    def sign(self, private_key: int, z: bytes, message: bytes) -> Signature:
        n = self.curve.n
        # (1 + d) must be invertible mod n
        if not 0 < private_key < n - 1:
            raise ValueError('Private key must lie in (0, n - 1)')

        e = self._hash_message(z, message)
        inv = mod_inv(1 + private_key, n)

        while True:
            k = random_scalar(n, self.rng)
            x1 = self.curve.k_point_ladder(k, self.curve.g).x

            r = (e + x1) % n
            if r == 0 or r + k == n:
                logger.debug('Degenerate r, redrawing k')
                continue

            s = inv * (k - r * private_key) % n
            if s == 0:
                logger.debug('Degenerate s, redrawing k')
                continue

            return Signature(r, s)

    def sign_with_key_pair(self, key_pair: KeyPair, message: bytes) -> Signature:
        if not key_pair.is_bound:
            raise ValueError('Key pair is not bound to an identity, Z is unknown')
        return self.sign(key_pair.private_key, key_pair.z, message)

    def verify(self, public_key: Point, z: bytes, signature: Signature, message: bytes) -> bool:
        """True iff {signature} is valid for {message} under {public_key} and {z}, never raises on bad input"""
        if not well_formed(public_key, signature, z, message):
            logger.debug('Signature rejected, malformed input')
            return False

        n = self.curve.n
        r, s = signature.r, signature.s

        if not (0 < r < n and 0 < s < n):
            return False

        if not self.curve.is_point_on_curve(public_key):
            logger.debug('Signature rejected, invalid public key')
            return False

        t = (r + s) % n
        if t == 0:
            return False

        e = self._hash_message(z, message)
        point = self.curve.add_points(self.curve.k_point(s, self.curve.g), self.curve.k_point(t, public_key))
        if point.is_identity_point():
            return False

        return (e + point.x) % n == r
