import logging
from typing import Callable

from gmecc.coordinate import Point
from gmecc.keys import KeyPair, Signature
from gmecc.randomness import random_scalar
from gmecc.short_weierstrass_ecc import ShortWeierstrassCurve
from gmecc.signer import well_formed
from gmecc.sm3 import sm3_hash
from gmecc.utils import bytes_to_int, mod_inv

logger = logging.getLogger(__name__)


class ECCSigner:
    '''
        ECDSA style signature over any short weierstrass curve
            e = leftmost bitlen(n) bits of H(M)
            sign:   (x1, y1) = [k]g, r = x1 mod n, s = k^-1 (e + r d) mod n
            verify: w = s^-1, (x1, y1) = [e w]g + [r w]P, accept iff x1 mod n == r

        {hash_func} maps the message to its digest, SM3 by default:
            >>> signer = ECCSigner(get_curve(SECP256K1), hash_func=lambda m: hashlib.sha256(m).digest())
    '''

    def __init__(self, curve: ShortWeierstrassCurve, rng=None, hash_func: Callable[[bytes], bytes] = sm3_hash):
        self.curve = curve
        self.rng = rng
        self.hash_func = hash_func

    def _hash_message(self, message: bytes) -> int:
        digest = self.hash_func(message)
        e = bytes_to_int(digest)
        excess = len(digest) * 8 - self.curve.n.bit_length()
        return e >> excess if excess > 0 else e

    def sign(self, private_key: int, message: bytes) -> Signature:
        n = self.curve.n
        if not 0 < private_key < n:
            raise ValueError('Private key must lie in (0, n)')

        e = self._hash_message(message)
        while True:
            k = random_scalar(n, self.rng)
            r = self.curve.k_point_ladder(k, self.curve.g).x % n
            if r == 0:
                logger.debug('Degenerate r, redrawing k')
                continue

            s = mod_inv(k, n) * (e + r * private_key) % n
            if s == 0:
                logger.debug('Degenerate s, redrawing k')
                continue

            return Signature(r, s)

    def sign_with_key_pair(self, key_pair: KeyPair, message: bytes) -> Signature:
        return self.sign(key_pair.private_key, message)

    def verify(self, public_key: Point, signature: Signature, message: bytes) -> bool:
        """True iff {signature} is valid for {message} under {public_key}, never raises on bad input"""
        if not well_formed(public_key, signature, message):
            logger.debug('Signature rejected, malformed input')
            return False

        n = self.curve.n
        r, s = signature.r, signature.s
        if not (0 < r < n and 0 < s < n):
            return False

        if not self.curve.is_point_on_curve(public_key):
            logger.debug('Signature rejected, invalid public key')
            return False

        w = mod_inv(s, n)
        e = self._hash_message(message)
        point = self.curve.add_points(self.curve.k_point(e * w % n, self.curve.g),
                                      self.curve.k_point(r * w % n, public_key))
        if point.is_identity_point():
            return False

        return point.x % n == r
