"""
    GM/T 0003.3-2012 SM2 key exchange protocol.

    Both parties hold a static key pair bound to an identity (d, P, Z) and draw an ephemeral key pair (r, R):
        w  = 2^(ceil(bitlen(n) / 2) - 1)
        x_ = w + (R.x & (w - 1)),  t = (d + x_ * r) mod n
        U  = [h * t](P_peer + [x_peer]R_peer)
        K  = KDF(xU || yU || ZA || ZB, klen)
    where A is the initiator and B the responder. The confirmation tags are
        S_B = SM3(0x02 || yU || SM3(xU || ZA || ZB || RA.x || RA.y || RB.x || RB.y))   sent by the responder
        S_A = SM3(0x03 || yU || SM3(xU || ZA || ZB || RA.x || RA.y || RB.x || RB.y))   sent by the initiator
"""
import enum
import hmac
import logging
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from gmecc.coordinate import Point
from gmecc.exceptions import KeyAgreementError
from gmecc.keys import KeyPair
from gmecc.sm2 import SM2
from gmecc.sm3 import sm3_hash

logger = logging.getLogger(__name__)

RESPONDER_TAG_PREFIX = b'\x02'
INITIATOR_TAG_PREFIX = b'\x03'


@dataclass(frozen=True)
class PublicInfo:
    """What one party sends to the other"""
    initiator: bool
    key_length: int
    z: bytes
    public_key: Point
    ephemeral_public_key: Point
    tag: Optional[bytes] = None


@dataclass(frozen=True)
class AgreementResult:
    tag: bytes
    shared_secret: bytes = field(repr=False)


class Derivation(NamedTuple):
    result: AgreementResult
    expected_peer_tag: bytes


class AgreementState(enum.Enum):
    START = 'start'
    EXCHANGED = 'exchanged'
    DERIVED = 'derived'
    VERIFIED = 'verified'
    FAILED = 'failed'


class SM2KeyAgreement:

    def __init__(self, sm2: SM2, rng=None):
        self.sm2 = sm2
        self.curve = sm2.curve
        self.rng = rng

        n = self.curve.n
        self._w = 1 << ((n.bit_length() + 1) // 2 - 1)

    def generate_ephemeral(self) -> KeyPair:
        return self.curve.generate_key_pair(self.rng)

    def _truncate(self, x: int) -> int:
        # x_ = 2^w + (x & (2^w - 1))
        return self._w + (x & (self._w - 1))

    def _check_peer_point(self, point: Point):
        if point.is_identity_point() or not self.curve.is_point_on_curve(point):
            logger.debug('Key agreement rejected, peer point not on the curve: %r', point)
            raise KeyAgreementError('curve mismatch')

    def derive(self, peer: PublicInfo, key_pair: KeyPair, ephemeral: KeyPair) -> Derivation:
        '''
            Shared secret and own tag, together with the tag the peer is expected to send.
            The peer tag, if any, is not checked here, see generate.
        '''
        if not key_pair.is_bound:
            raise ValueError('Static key pair is not bound to an identity')

        self._check_peer_point(peer.ephemeral_public_key)
        self._check_peer_point(peer.public_key)

        curve = self.curve
        n = curve.n
        r_own, r_peer = ephemeral.public_key, peer.ephemeral_public_key

        t = (key_pair.private_key + self._truncate(r_own.x) * ephemeral.private_key) % n
        base = curve.add_points(peer.public_key, curve.k_point(self._truncate(r_peer.x), r_peer))
        u = curve.k_point_ladder(curve.h * t, base)
        if u.is_identity_point():
            raise KeyAgreementError('point at infinity')

        initiator = not peer.initiator
        if initiator:
            za, zb, ra, rb = key_pair.z, peer.z, r_own, r_peer
        else:
            za, zb, ra, rb = peer.z, key_pair.z, r_peer, r_own

        fb = self.sm2.field_bytes
        xu, yu = fb(u.x), fb(u.y)
        shared_secret = self.sm2.kdf(peer.key_length, xu, yu, za, zb)

        inner = sm3_hash(xu, za, zb, fb(ra.x), fb(ra.y), fb(rb.x), fb(rb.y))
        s_b = sm3_hash(RESPONDER_TAG_PREFIX, yu, inner)
        s_a = sm3_hash(INITIATOR_TAG_PREFIX, yu, inner)

        own, expected = (s_a, s_b) if initiator else (s_b, s_a)
        return Derivation(AgreementResult(own, shared_secret), expected)

    def generate(self, peer: PublicInfo, key_pair: KeyPair, ephemeral: KeyPair) -> AgreementResult:
        '''
            Run the exchange against the information received from {peer}, the role is the opposite of the peer's.
            Raises KeyAgreementError on an invalid peer point, a degenerate U or a wrong peer tag.
        '''
        result, expected = self.derive(peer, key_pair, ephemeral)
        if peer.tag is not None and not hmac.compare_digest(peer.tag, expected):
            logger.debug('Key agreement rejected, peer tag mismatch')
            raise KeyAgreementError('tag mismatch')
        return result


class KeyAgreementSession:
    '''
        One party of an exchange, enforces the order START -> EXCHANGED -> DERIVED -> VERIFIED.
        Either party may reveal its tag first:
            >>> alice = KeyAgreementSession(agreement, alice_pair, initiator=True, key_length=16)
            >>> bob = KeyAgreementSession(agreement, bob_pair, initiator=False, key_length=16)
            >>> bob.receive(alice.public_info())
            >>> alice.receive(bob.public_info(include_tag=True))
            >>> bob.confirm(alice.public_info(include_tag=True).tag)
    '''

    def __init__(self, agreement: SM2KeyAgreement, key_pair: KeyPair, initiator: bool, key_length: int):
        if not key_pair.is_bound:
            raise ValueError('Static key pair is not bound to an identity')
        if key_length <= 0:
            raise ValueError(f'Key length must be positive, got {key_length}')

        self.agreement = agreement
        self.key_pair = key_pair
        self.initiator = initiator
        self.key_length = key_length

        self.ephemeral = agreement.generate_ephemeral()
        self.state = AgreementState.START
        self._result = None
        self._expected_peer_tag = None

    @property
    def result(self) -> AgreementResult:
        if self.state not in (AgreementState.DERIVED, AgreementState.VERIFIED):
            raise KeyAgreementError(f'No result in state {self.state.name}')
        return self._result

    @property
    def shared_secret(self) -> bytes:
        return self.result.shared_secret

    def public_info(self, include_tag: bool = False) -> PublicInfo:
        tag = None
        if include_tag:
            tag = self.result.tag
        return PublicInfo(self.initiator, self.key_length, self.key_pair.z, self.key_pair.public_key,
                          self.ephemeral.public_key, tag)

    def _fail(self, reason: str):
        self.state = AgreementState.FAILED
        raise KeyAgreementError(reason)

    def receive(self, peer: PublicInfo) -> AgreementResult:
        if self.state is not AgreementState.START:
            raise KeyAgreementError(f'Cannot receive peer information in state {self.state.name}')
        if peer.initiator == self.initiator:
            self._fail('both parties claim the same role')
        if peer.key_length != self.key_length:
            self._fail(f'key length mismatch: {peer.key_length} != {self.key_length}')

        self.state = AgreementState.EXCHANGED
        try:
            self._result, self._expected_peer_tag = self.agreement.derive(peer, self.key_pair, self.ephemeral)
        except KeyAgreementError:
            self.state = AgreementState.FAILED
            raise
        self.state = AgreementState.DERIVED
        logger.debug('Key agreement derived, initiator=%s', self.initiator)

        if peer.tag is not None:
            self.confirm(peer.tag)
        return self._result

    def confirm(self, peer_tag: bytes) -> None:
        if self.state is not AgreementState.DERIVED:
            raise KeyAgreementError(f'Cannot verify a tag in state {self.state.name}')
        if not hmac.compare_digest(peer_tag, self._expected_peer_tag):
            logger.debug('Key agreement rejected, peer tag mismatch')
            self._fail('tag mismatch')
        self.state = AgreementState.VERIFIED
