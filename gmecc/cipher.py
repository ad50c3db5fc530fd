import hmac
import logging

from gmecc.coordinate import Point
from gmecc.exceptions import IntegrityCheckFailed, InvalidPointEncoding, InvalidSubgroup
from gmecc.randomness import random_scalar
from gmecc.short_weierstrass_ecc import (PC_COMPRESSED_EVEN, PC_COMPRESSED_ODD, PC_HYBRID_EVEN, PC_HYBRID_ODD,
                                         PC_UNCOMPRESSED)
from gmecc.sm2 import SM2
from gmecc.sm3 import DIGEST_SIZE, sm3_hash
from gmecc.utils import xor_bytes

logger = logging.getLogger(__name__)

# Ciphertext layouts: GM/T 0003.4-2012 orders C1 || C2 || C3, GM/T 0009 (and most libraries) C1 || C3 || C2
C1C2C3 = 'C1C2C3'
C1C3C2 = 'C1C3C2'


class SM2Cipher:
    '''
        GM/T 0003.4-2012 public key encryption
            C1 = [k]g, (x2, y2) = [k]P, t = KDF(x2 || y2, klen)
            C2 = M xor t, C3 = SM3(x2 || M || y2)
    '''

    def __init__(self, sm2: SM2, rng=None, mode: str = C1C2C3):
        if mode not in (C1C2C3, C1C3C2):
            raise ValueError(f'Unknown ciphertext mode: {mode!r}')

        self.sm2 = sm2
        self.curve = sm2.curve
        self.rng = rng
        self.mode = mode

    def _check_cofactor_multiple(self, point: Point):
        # S = [h]P must not be the point at infinity
        if self.curve.k_point(self.curve.h, point).is_identity_point():
            raise InvalidSubgroup('[h]P is the point at infinity')

    def _keystream(self, klen: int, point: Point) -> bytes:
        return self.sm2.kdf(klen, self.sm2.field_bytes(point.x), self.sm2.field_bytes(point.y))

    def _tag(self, point: Point, message: bytes) -> bytes:
        return sm3_hash(self.sm2.field_bytes(point.x), message, self.sm2.field_bytes(point.y))

    def encrypt(self, public_key: Point, message: bytes) -> bytes:
        if not message:
            raise ValueError('Cannot encrypt an empty message')

        message = bytes(message)
        self.curve.check_point(public_key)
        self._check_cofactor_multiple(public_key)

        while True:
            k = random_scalar(self.curve.n, self.rng)
            point = self.curve.k_point_ladder(k, public_key)
            if point.is_identity_point():
                logger.debug('[k]P is the point at infinity, redrawing k')
                continue

            t = self._keystream(len(message), point)
            if not any(t):
                logger.debug('All zero key stream, redrawing k')
                continue

            c1 = self.curve.serialize_point(self.curve.k_point_ladder(k, self.curve.g))
            c2 = xor_bytes(message, t)
            c3 = self._tag(point, message)
            return c1 + c2 + c3 if self.mode == C1C2C3 else c1 + c3 + c2

    def _split(self, ciphertext: bytes):
        if not ciphertext:
            raise InvalidPointEncoding('Empty ciphertext')

        pc = ciphertext[0]
        size = self.curve.field_size
        if pc in (PC_UNCOMPRESSED, PC_HYBRID_EVEN, PC_HYBRID_ODD):
            c1_len = 1 + 2 * size
        elif pc in (PC_COMPRESSED_EVEN, PC_COMPRESSED_ODD):
            c1_len = 1 + size
        else:
            raise InvalidPointEncoding(f'Unknown point prefix for C1: {pc:#04x}')

        if len(ciphertext) <= c1_len + DIGEST_SIZE:
            raise ValueError(f'Ciphertext too short: {len(ciphertext)} bytes')

        c1, rest = ciphertext[:c1_len], ciphertext[c1_len:]
        if self.mode == C1C2C3:
            return c1, rest[:-DIGEST_SIZE], rest[-DIGEST_SIZE:]
        return c1, rest[DIGEST_SIZE:], rest[:DIGEST_SIZE]

    def decrypt(self, private_key: int, ciphertext: bytes) -> bytes:
        if not 0 < private_key < self.curve.n:
            raise ValueError('Private key must lie in (0, n)')

        c1, c2, c3 = self._split(bytes(ciphertext))

        c1_point = self.curve.deserialize_point(c1)
        self._check_cofactor_multiple(c1_point)

        point = self.curve.k_point_ladder(private_key, c1_point)
        if point.is_identity_point():
            raise IntegrityCheckFailed('[d]C1 is the point at infinity')

        t = self._keystream(len(c2), point)
        if not any(t):
            raise IntegrityCheckFailed('All zero key stream')

        message = xor_bytes(c2, t)
        if not hmac.compare_digest(self._tag(point, message), c3):
            logger.debug('Decryption rejected, C3 mismatch')
            raise IntegrityCheckFailed('C3 does not match the decrypted message')

        return message
