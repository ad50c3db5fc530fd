import sys
import unittest

from gmecc.coordinate import INFINITY, CurvePoint
from gmecc.curves import DEFAULT_USER_ID
from gmecc.keys import Signature
from gmecc.signer import SM2Signer
from gmecc.sm3 import sm3_hash
from gmecc.utils import bytes_to_int
from gm_curves import (SIGN_ID, SIGN_MSG, SIGN_D, SIGN_XA, SIGN_YA, SIGN_Z, SIGN_E, SIGN_K, SIGN_R, SIGN_S,
                       FixedRandom, sm2_test_context, sm2_context)

import hypothesis.strategies as st
from hypothesis import given, settings

SLOW_SETTINGS = {}
if "--fast" in sys.argv:  # pragma: no cover
    SLOW_SETTINGS["max_examples"] = 2
else:
    SLOW_SETTINGS["max_examples"] = 10
SLOW_SETTINGS["deadline"] = None  # scalar multiplications run for tens of milliseconds


class TestSignatureKnownAnswer(unittest.TestCase):
    """GM/T 0003.2 appendix A, Fp-256 example curve"""

    def setUp(self):
        self.sm2 = sm2_test_context()
        self.pair = self.sm2.key_pair_from_private(SIGN_D, SIGN_ID)

    def test_public_key(self):
        self.assertEqual(self.pair.public_key, CurvePoint(SIGN_XA, SIGN_YA))

    def test_z(self):
        self.assertEqual(self.pair.z, bytes.fromhex(SIGN_Z))
        self.assertEqual(self.sm2.generate_z(SIGN_ID, self.pair.public_key), bytes.fromhex(SIGN_Z))
        self.assertEqual(bytes_to_int(sm3_hash(self.pair.z, SIGN_MSG)), SIGN_E)

    def test_sign(self):
        signer = SM2Signer(self.sm2, rng=FixedRandom(SIGN_K))
        sig = signer.sign(SIGN_D, bytes.fromhex(SIGN_Z), SIGN_MSG)
        self.assertEqual(sig, Signature(SIGN_R, SIGN_S))

        signer = SM2Signer(self.sm2, rng=FixedRandom(SIGN_K))
        self.assertEqual(signer.sign_with_key_pair(self.pair, SIGN_MSG), sig)

    def test_redraw_out_of_range_k(self):
        # 0 and values >= n are rejected by the scalar sampler before k is used
        signer = SM2Signer(self.sm2, rng=FixedRandom(0, self.sm2.curve.n, SIGN_K))
        self.assertEqual(signer.sign(SIGN_D, bytes.fromhex(SIGN_Z), SIGN_MSG), Signature(SIGN_R, SIGN_S))

    def test_verify(self):
        signer = SM2Signer(self.sm2)
        self.assertTrue(signer.verify(self.pair.public_key, self.pair.z, Signature(SIGN_R, SIGN_S), SIGN_MSG))


class TestSignature(unittest.TestCase):

    def setUp(self):
        self.sm2 = sm2_context()
        self.signer = SM2Signer(self.sm2)
        self.pair = self.sm2.generate_key_pair(DEFAULT_USER_ID)
        self.n = self.sm2.curve.n

    @settings(**SLOW_SETTINGS)
    @given(st.binary(max_size=200))
    def test_round_trip(self, message):
        sig = self.signer.sign_with_key_pair(self.pair, message)
        self.assertTrue(0 < sig.r < self.n and 0 < sig.s < self.n)
        self.assertTrue(self.signer.verify(self.pair.public_key, self.pair.z, sig, message))

    @settings(**SLOW_SETTINGS)
    @given(st.binary(min_size=1, max_size=100), st.data())
    def test_tampered_message(self, message, data):
        sig = self.signer.sign_with_key_pair(self.pair, message)
        i = data.draw(st.integers(min_value=0, max_value=len(message) - 1))
        tampered = message[:i] + bytes([message[i] ^ 0x01]) + message[i + 1:]
        self.assertFalse(self.signer.verify(self.pair.public_key, self.pair.z, sig, tampered))

    def test_other_identity(self):
        message = b'message digest'
        sig = self.signer.sign_with_key_pair(self.pair, message)
        other_z = self.sm2.generate_z(b'ALICE123@YAHOO.COM', self.pair.public_key)
        self.assertFalse(self.signer.verify(self.pair.public_key, other_z, sig, message))

        other = self.sm2.generate_key_pair(DEFAULT_USER_ID)
        self.assertFalse(self.signer.verify(other.public_key, self.pair.z, sig, message))

    def test_verify_never_raises(self):
        message = b'message digest'
        sig = self.signer.sign_with_key_pair(self.pair, message)
        pub, z = self.pair.public_key, self.pair.z

        for bad in (Signature(0, sig.s), Signature(sig.r, 0), Signature(self.n, sig.s), Signature(sig.r, self.n),
                    Signature(-1, sig.s), Signature(sig.r, self.n - sig.r)):  # last one makes t = 0
            self.assertFalse(self.signer.verify(pub, z, bad, message))

        self.assertFalse(self.signer.verify(INFINITY, z, sig, message))
        self.assertFalse(self.signer.verify(CurvePoint(pub.x, (pub.y + 1) % self.sm2.curve.p), z, sig, message))

        # wrong types are rejected, not raised
        self.assertFalse(self.signer.verify(None, z, sig, message))
        self.assertFalse(self.signer.verify((pub.x, pub.y), z, sig, message))
        self.assertFalse(self.signer.verify(CurvePoint(str(pub.x), pub.y), z, sig, message))
        self.assertFalse(self.signer.verify(pub, None, sig, message))
        self.assertFalse(self.signer.verify(pub, z.hex(), sig, message))
        self.assertFalse(self.signer.verify(pub, z, sig, None))
        self.assertFalse(self.signer.verify(pub, z, None, message))
        self.assertFalse(self.signer.verify(pub, z, (sig.r, sig.s), message))
        self.assertFalse(self.signer.verify(pub, z, Signature(b'\x01', sig.s), message))
        self.assertFalse(self.signer.verify(pub, z, Signature(sig.r, float(sig.s)), message))

        # bytes-like inputs other than bytes are accepted
        self.assertTrue(self.signer.verify(pub, bytearray(z), sig, memoryview(message)))

    def test_signature_encoding(self):
        sig = self.signer.sign_with_key_pair(self.pair, b'abc')
        encoded = sig.to_bytes()
        self.assertEqual(len(encoded), 64)
        self.assertEqual(Signature.from_bytes(encoded), sig)
        with self.assertRaises(ValueError):
            Signature.from_bytes(encoded[:-1])
        with self.assertRaises(ValueError):
            Signature.from_bytes(b'')

    def test_key_checks(self):
        with self.assertRaises(ValueError):
            self.signer.sign_with_key_pair(self.sm2.curve.generate_key_pair(), b'abc')
        with self.assertRaises(ValueError):
            self.signer.sign(0, self.pair.z, b'abc')
        with self.assertRaises(ValueError):
            self.signer.sign(self.n - 1, self.pair.z, b'abc')
        with self.assertRaises(ValueError):
            self.sm2.key_pair_from_private(self.n)
        with self.assertRaises(ValueError):
            self.sm2.generate_z(b'x' * 8192, self.pair.public_key)

    def test_deterministic_key_pair(self):
        again = self.sm2.key_pair_from_private(self.pair.private_key, DEFAULT_USER_ID)
        self.assertEqual(again, self.pair)


if __name__ == "__main__":
    unittest.main()
