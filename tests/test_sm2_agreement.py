import sys
import unittest
from dataclasses import replace

from gmecc.agreement import AgreementState, KeyAgreementSession, PublicInfo, SM2KeyAgreement
from gmecc.coordinate import INFINITY, CurvePoint
from gmecc.curves import DEFAULT_USER_ID
from gmecc.exceptions import KeyAgreementError
from gm_curves import (KA_ID_A, KA_ID_B, KA_KLEN, KA_DA, KA_RA, KA_DB, KA_RB, KA_K, KA_SA, KA_SB, FixedRandom,
                       sm2_test_context, sm2_context)

import hypothesis.strategies as st
from hypothesis import given, settings

SLOW_SETTINGS = {}
if "--fast" in sys.argv:  # pragma: no cover
    SLOW_SETTINGS["max_examples"] = 2
else:
    SLOW_SETTINGS["max_examples"] = 10
SLOW_SETTINGS["deadline"] = None  # scalar multiplications run for tens of milliseconds


class TestKeyAgreementKnownAnswer(unittest.TestCase):
    """GM/T 0003.3 appendix A, Fp-256 example curve, A initiates"""

    def setUp(self):
        self.sm2 = sm2_test_context()
        self.agreement = SM2KeyAgreement(self.sm2)

        self.alice = self.sm2.key_pair_from_private(KA_DA, KA_ID_A)
        self.alice_eph = self.sm2.key_pair_from_private(KA_RA)
        self.bob = self.sm2.key_pair_from_private(KA_DB, KA_ID_B)
        self.bob_eph = self.sm2.key_pair_from_private(KA_RB)

        self.alice_info = PublicInfo(True, KA_KLEN, self.alice.z, self.alice.public_key, self.alice_eph.public_key)
        self.bob_info = PublicInfo(False, KA_KLEN, self.bob.z, self.bob.public_key, self.bob_eph.public_key)

    def test_responder(self):
        result = self.agreement.generate(self.alice_info, self.bob, self.bob_eph)
        self.assertEqual(result.shared_secret, bytes.fromhex(KA_K))
        self.assertEqual(result.tag, bytes.fromhex(KA_SB))

    def test_initiator(self):
        result = self.agreement.generate(self.bob_info, self.alice, self.alice_eph)
        self.assertEqual(result.shared_secret, bytes.fromhex(KA_K))
        self.assertEqual(result.tag, bytes.fromhex(KA_SA))

    def test_peer_tags(self):
        # the initiator checks S_B, the responder checks S_A
        bob_info = replace(self.bob_info, tag=bytes.fromhex(KA_SB))
        self.agreement.generate(bob_info, self.alice, self.alice_eph)

        alice_info = replace(self.alice_info, tag=bytes.fromhex(KA_SA))
        self.agreement.generate(alice_info, self.bob, self.bob_eph)

        with self.assertRaises(KeyAgreementError):
            self.agreement.generate(replace(self.bob_info, tag=bytes.fromhex(KA_SA)), self.alice, self.alice_eph)
        with self.assertRaises(KeyAgreementError):
            self.agreement.generate(replace(self.alice_info, tag=bytes.fromhex(KA_SB)), self.bob, self.bob_eph)

    def test_sessions(self):
        agreement = SM2KeyAgreement(self.sm2, rng=FixedRandom(KA_RA, KA_RB))
        a = KeyAgreementSession(agreement, self.alice, initiator=True, key_length=KA_KLEN)
        b = KeyAgreementSession(agreement, self.bob, initiator=False, key_length=KA_KLEN)

        result_b = b.receive(a.public_info())
        self.assertIs(b.state, AgreementState.DERIVED)
        self.assertEqual(result_b.tag, bytes.fromhex(KA_SB))

        a.receive(b.public_info(include_tag=True))
        self.assertIs(a.state, AgreementState.VERIFIED)

        b.confirm(a.public_info(include_tag=True).tag)
        self.assertIs(b.state, AgreementState.VERIFIED)
        self.assertEqual(a.shared_secret, bytes.fromhex(KA_K))
        self.assertEqual(b.shared_secret, bytes.fromhex(KA_K))

    def test_secret_not_in_repr(self):
        result = self.agreement.generate(self.alice_info, self.bob, self.bob_eph)
        self.assertNotIn(KA_K.lower(), repr(result).lower())


class TestKeyAgreement(unittest.TestCase):

    def setUp(self):
        self.sm2 = sm2_context()
        self.agreement = SM2KeyAgreement(self.sm2)
        self.alice = self.sm2.generate_key_pair(b'alice@example.com')
        self.bob = self.sm2.generate_key_pair(DEFAULT_USER_ID)

    def sessions(self, key_length=16):
        return (KeyAgreementSession(self.agreement, self.alice, initiator=True, key_length=key_length),
                KeyAgreementSession(self.agreement, self.bob, initiator=False, key_length=key_length))

    @settings(**SLOW_SETTINGS)
    @given(st.integers(min_value=1, max_value=100))
    def test_initiator_confirms_first(self, key_length):
        a, b = self.sessions(key_length)

        b.receive(a.public_info())
        a.receive(b.public_info(include_tag=True))
        b.confirm(a.public_info(include_tag=True).tag)

        self.assertEqual(len(a.shared_secret), key_length)
        self.assertEqual(a.shared_secret, b.shared_secret)
        self.assertIs(a.state, AgreementState.VERIFIED)
        self.assertIs(b.state, AgreementState.VERIFIED)

    def test_responder_confirms_first(self):
        a, b = self.sessions()

        a.receive(b.public_info())
        b.receive(a.public_info(include_tag=True))
        a.confirm(b.public_info(include_tag=True).tag)

        self.assertEqual(a.shared_secret, b.shared_secret)
        self.assertIs(a.state, AgreementState.VERIFIED)
        self.assertIs(b.state, AgreementState.VERIFIED)

    def test_tags_differ_by_role(self):
        a, b = self.sessions()
        b.receive(a.public_info())
        a.receive(b.public_info())
        self.assertNotEqual(a.result.tag, b.result.tag)

    def test_wrong_tag(self):
        a, b = self.sessions()
        b.receive(a.public_info())
        a.receive(b.public_info())

        with self.assertRaises(KeyAgreementError):
            b.confirm(b.result.tag)  # own tag, not the initiator's
        self.assertIs(b.state, AgreementState.FAILED)
        with self.assertRaises(KeyAgreementError):
            b.shared_secret

    def test_role_and_length_mismatch(self):
        a, b = self.sessions()
        other_initiator = KeyAgreementSession(self.agreement, self.bob, initiator=True, key_length=16)
        with self.assertRaises(KeyAgreementError):
            a.receive(other_initiator.public_info())

        longer = KeyAgreementSession(self.agreement, self.alice, initiator=True, key_length=32)
        with self.assertRaises(KeyAgreementError):
            b.receive(longer.public_info())

    def test_out_of_order(self):
        a, b = self.sessions()
        with self.assertRaises(KeyAgreementError):
            a.public_info(include_tag=True)
        with self.assertRaises(KeyAgreementError):
            a.confirm(b'\x00' * 32)
        with self.assertRaises(KeyAgreementError):
            a.shared_secret

        a.receive(b.public_info())
        with self.assertRaises(KeyAgreementError):
            a.receive(b.public_info())

    def test_invalid_peer_points(self):
        eph = self.agreement.generate_ephemeral()
        info = self.sessions()[0].public_info()
        bad_r = CurvePoint(info.ephemeral_public_key.x, (info.ephemeral_public_key.y + 1) % self.sm2.curve.p)

        for bad in (replace(info, ephemeral_public_key=bad_r), replace(info, ephemeral_public_key=INFINITY),
                    replace(info, public_key=INFINITY)):
            with self.assertRaisesRegex(KeyAgreementError, 'curve mismatch'):
                self.agreement.generate(bad, self.bob, eph)

    def test_unbound_key_pair(self):
        with self.assertRaises(ValueError):
            KeyAgreementSession(self.agreement, self.sm2.generate_key_pair(), initiator=True, key_length=16)
        with self.assertRaises(ValueError):
            KeyAgreementSession(self.agreement, self.alice, initiator=True, key_length=0)


if __name__ == "__main__":
    unittest.main()
