import struct

from gmecc.coordinate import Point
from gmecc.kdf import kdf
from gmecc.keys import KeyPair
from gmecc.short_weierstrass_ecc import ShortWeierstrassCurve
from gmecc.sm3 import sm3_hash
from gmecc.utils import int_to_bytes

# ENTL is a 16 bit count of identity bits
MAX_IDENTITY_BYTES = 0xFFFF // 8


class SM2:
    """
        SM2 context bound to one curve, shared by the signature, encryption and key agreement engines.

        Z = SM3(ENTL || ID || a || b || gx || gy || xA || yA), where ENTL is the bit length of ID as 2 bytes and the
        integers are encoded big-endian without leading zero bytes. Coordinates fed to the KDF and to the tags use
        the fixed width encoding of field_bytes.
            >>> sm2 = SM2(get_curve('sm2p256v1'))
            >>> pair = sm2.generate_key_pair(b'ALICE123@YAHOO.COM')
    """

    def __init__(self, curve: ShortWeierstrassCurve):
        self.curve = curve
        self._domain = b''.join(int_to_bytes(v) for v in (curve.a, curve.b, curve.g.x, curve.g.y))

    def generate_z(self, identity: bytes, public_key: Point) -> bytes:
        if len(identity) > MAX_IDENTITY_BYTES:
            raise ValueError(f'Identity too long: {len(identity)} bytes, at most {MAX_IDENTITY_BYTES}')
        if public_key.is_identity_point():
            raise ValueError('The point at infinity is not a public key')

        entl = struct.pack('>H', len(identity) * 8)
        return sm3_hash(entl, bytes(identity), self._domain, int_to_bytes(public_key.x), int_to_bytes(public_key.y))

    def generate_key_pair(self, identity: bytes = None, rng=None) -> KeyPair:
        key_pair = self.curve.generate_key_pair(rng)
        if identity is not None:
            key_pair = key_pair.bind(identity, self.generate_z(identity, key_pair.public_key))
        return key_pair

    def key_pair_from_private(self, d: int, identity: bytes = None) -> KeyPair:
        """Key pair of a known private key, bound to {identity} when given"""
        if not 0 < d < self.curve.n:
            raise ValueError('Private key must lie in (0, n)')

        key_pair = KeyPair(d, self.curve.k_point_ladder(d, self.curve.g))
        if identity is not None:
            key_pair = key_pair.bind(identity, self.generate_z(identity, key_pair.public_key))
        return key_pair

    def kdf(self, klen: int, *zs: bytes) -> bytes:
        return kdf(klen, *zs)

    def field_bytes(self, v: int) -> bytes:
        return int_to_bytes(v, self.curve.field_size)

    def __repr__(self):
        return f'SM2({self.curve!r})'
