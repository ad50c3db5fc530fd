import logging
from typing import List, Tuple, Union

from gmecc.coordinate import INFINITY, CurvePoint, Point
from gmecc.ecc import EllipticCurve
from gmecc.exceptions import InvalidDomainParameters, InvalidPointEncoding, InvalidSubgroup, PointNotOnCurve
from gmecc.keys import KeyPair
from gmecc.randomness import random_scalar
from gmecc.utils import byte_length, bytes_to_int, int_to_bytes, mod_inv, sqrt_mod

logger = logging.getLogger(__name__)

# Minimum field size accepted by check_curve
MIN_P = 1 << 191

# Point encoding prefixes (GM/T 0003.1 4.2.9)
PC_INFINITY = 0x00
PC_COMPRESSED_EVEN = 0x02
PC_COMPRESSED_ODD = 0x03
PC_UNCOMPRESSED = 0x04
PC_HYBRID_EVEN = 0x06
PC_HYBRID_ODD = 0x07


class ShortWeierstrassCurve(EllipticCurve):
    """
        A short weierstrass elliptic curve over the prime field F_p has the following form:
            y^2 = x^3 + ax + b  (affine)

        together with the domain parameters of its cyclic subgroup: the generator g, its order n and the
        cofactor h. Points are kept in affine coordinates, field elements are python integers in [0, p).

        An instance is immutable once constructed and can be shared read-only by every engine working on it.
        References:
        [1] Guide to elliptic curve cryptography
        [2] GM/T 0003.1-2012 Public key cryptographic algorithm SM2 based on elliptic curves, Part 1: General
    """

    def __init__(self, p: int, *coeffs: Union[List[int], int, None], g: Union[Tuple[int, int], CurvePoint],
                 n: int, h: int = 1, validate=True, **kwargs):
        # Determine if coefficients are provided directly, in a list, or as keyword arguments
        if len(coeffs) == 1 and isinstance(coeffs[0], (list, tuple)):  # case 1, like ec = Curve(p, [a, b], g=.., n=..)
            a, b = coeffs[0]
        elif len(coeffs) == 2 and all(isinstance(x, int) for x in coeffs):  # case 2, like ec = Curve(p, a, b, ...)
            a, b = coeffs
        elif 'a' in kwargs and 'b' in kwargs:  # case 3 like ec = Curve(p, a=a, b=b, ...)
            a = kwargs['a']
            b = kwargs['b']
        else:
            raise ValueError(
                "Coefficients must be provided either as list [a, b], direct integers a, b, or as separate keyword "
                "arguments a, b")

        if p <= 3 or n <= 1 or h < 1:
            raise InvalidDomainParameters(f'Malformed domain parameters: p={p}, n={n}, h={h}')

        self.p = p
        self.a = a % p
        self.b = b % p
        self.g = g if isinstance(g, CurvePoint) else CurvePoint(*g)
        self.n = n
        self.h = h

        # byte length of one encoded field element
        self.field_size = byte_length(p)

        if validate:
            self.check_curve()

    # region domain validation
    def check_curve(self):
        """Verify the domain parameters, raise InvalidDomainParameters if any check fails."""
        p, a, b = self.p, self.a, self.b

        # Discriminant of the short Weierstrass curve: Δ = -16(4a³ + 27b²)
        if (4 * pow(a, 3, p) + 27 * pow(b, 2, p)) % p == 0:
            raise InvalidDomainParameters("Invalid curve parameters; 4a^3 + 27b^2 == 0 (mod p).")

        if p < MIN_P:
            raise InvalidDomainParameters(f"Too small prime p: {p:#x}, should be at least 2^191.")

        if not self.is_point_on_curve(self.g):
            raise InvalidDomainParameters(f"Generator {self.g} is not on the curve.")

        if not self.k_point(self.n, self.g).is_identity_point():
            raise InvalidDomainParameters("Generator order does not match n: [n]g != O.")

    def is_point_on_curve(self, point: Point) -> bool:
        """
            Verify if given point is on curve, the point at infinity always is.
        """
        if point.is_identity_point():
            return True

        x, y = point.x, point.y
        if not (0 <= x < self.p and 0 <= y < self.p):
            return False

        return (y * y - (x * x * x + self.a * x + self.b)) % self.p == 0

    def check_point(self, point: Point):
        """
            Verify a (public) point: on the curve and in the subgroup generated by g.
            Raises PointNotOnCurve or InvalidSubgroup, infinity always passes.
        """
        if point.is_identity_point():
            return

        if not self.is_point_on_curve(point):
            logger.debug('Point rejected, not on the curve: %r', point)
            raise PointNotOnCurve(f"Point not on the curve: {point}")

        if not self.k_point(self.n, point).is_identity_point():
            logger.debug('Point rejected, not in the subgroup of order n: %r', point)
            raise InvalidSubgroup(f"Point not in the subgroup of order n: {point}")
    # endregion

    # region group law
    def add_points(self, p1: Point, p2: Point) -> Point:
        '''
            Add p1 and p2 on the curve in affine coord.
                P + O = P; P + (-P) = O;
                P == Q: tangent slope m = (3x^2 + a) / 2y
                else:   secant slope  m = (yP - yQ) / (xP - xQ)
        '''
        # !! Important, identity first, it carries no coordinates !!
        if p1.is_identity_point():
            return p2
        if p2.is_identity_point():
            return p1

        p = self.p
        x1, y1 = p1.x, p1.y
        x2, y2 = p2.x, p2.y

        if x1 == x2:
            if (y1 + y2) % p == 0:  # p2 == -p1, this covers doubling a point with y == 0 as well
                return INFINITY
            m = (3 * x1 * x1 + self.a) * mod_inv(2 * y1, p) % p
        else:
            m = (y1 - y2) * mod_inv(x1 - x2, p) % p

        x3 = (m * m - x1 - x2) % p
        y3 = -(y1 + m * (x3 - x1)) % p
        return CurvePoint(x3, y3)

    def double_point(self, p: Point) -> Point:
        '''
            Double p on the curve, same as adding p to itself.
        '''
        return self.add_points(p, p)

    def negate_point(self, p: Point) -> Point:
        """Return the additive inverse of the point."""
        if p.is_identity_point():
            return p
        return CurvePoint(p.x, -p.y % self.p)
    # endregion

    # region scalar multiplication
    def ladder_bits(self) -> int:
        return self.n.bit_length()

    def multiply(self, P: Point, k: int) -> Point:
        return self.k_point(k, P)

    def multiply_g(self, k: int) -> Point:
        """k*g with the double-and-add method"""
        return self.k_point(k, self.g)
    # endregion

    def generate_key_pair(self, rng=None) -> KeyPair:
        '''
            Draw the private key d uniformly in (0, n) and derive the public key [d]g
        '''
        d = random_scalar(self.n, rng)
        public_key = self.k_point_ladder(d, self.g)
        self.check_point(public_key)
        return KeyPair(d, public_key)

    def shared_point(self, private_key: int, peer_public_key: Point) -> Point:
        '''
            Cofactor ECDH shared point [h d]Q_peer, the peer key is validated first
        '''
        if not 0 < private_key < self.n:
            raise ValueError('Private key must lie in (0, n)')

        self.check_point(peer_public_key)
        shared = self.k_point_ladder(self.h * private_key, peer_public_key)
        if shared.is_identity_point():
            raise InvalidSubgroup('Shared point is the point at infinity')
        return shared

    # region point (de)serialization
    def serialize_point(self, point: Point, compress: bool = False) -> bytes:
        '''
            Point to octet string conversion
                * infinity:      00
                * compressed:    02|03 || X
                * uncompressed:  04 || X || Y
            X, Y are fixed width (byte length of p), big-endian
        '''
        if point.is_identity_point():
            return bytes([PC_INFINITY])

        X = int_to_bytes(point.x, self.field_size)
        if compress:
            pc = PC_COMPRESSED_ODD if point.y & 1 else PC_COMPRESSED_EVEN
            return bytes([pc]) + X

        return bytes([PC_UNCOMPRESSED]) + X + int_to_bytes(point.y, self.field_size)

    def deserialize_point(self, data: bytes) -> Point:
        '''
            Octet string to point conversion, accepts the infinity, compressed, uncompressed and hybrid forms.
            The decoded point is checked against the curve equation (not the subgroup, see check_point).
        '''
        if not data:
            raise InvalidPointEncoding('Empty point encoding')

        pc, body = data[0], bytes(data[1:])
        size = self.field_size

        if pc == PC_INFINITY:
            if body:
                raise InvalidPointEncoding('Trailing bytes after the infinity encoding')
            return INFINITY

        if pc in (PC_COMPRESSED_EVEN, PC_COMPRESSED_ODD):
            if len(body) != size:
                raise InvalidPointEncoding(f'Compressed point must carry {size} bytes, got {len(body)}')
            x = bytes_to_int(body)
            y = self._recover_y(x, pc & 1)
            return CurvePoint(x, y)

        if pc in (PC_UNCOMPRESSED, PC_HYBRID_EVEN, PC_HYBRID_ODD):
            if len(body) != 2 * size:
                raise InvalidPointEncoding(f'Uncompressed point must carry {2 * size} bytes, got {len(body)}')
            x, y = bytes_to_int(body[:size]), bytes_to_int(body[size:])
            if pc != PC_UNCOMPRESSED and (y & 1) != (pc & 1):
                raise InvalidPointEncoding('Hybrid prefix does not match the parity of y')
            point = CurvePoint(x, y)
            if not self.is_point_on_curve(point):
                raise PointNotOnCurve(f"Point not on the curve: {point}")
            return point

        raise InvalidPointEncoding(f'Unknown point prefix: {pc:#04x}')

    def _recover_y(self, x: int, parity: int) -> int:
        if x >= self.p:
            raise InvalidPointEncoding(f'x coordinate out of range: {x:#x}')

        alpha = (x * x * x + self.a * x + self.b) % self.p
        beta = sqrt_mod(alpha, self.p)
        if beta is None:
            raise PointNotOnCurve(f'No point on the curve with x = {x:#x}')

        # y = 0 has no odd representative
        if beta == 0 and parity:
            raise InvalidPointEncoding(f'Odd prefix for a point with y = 0, x = {x:#x}')

        return beta if beta & 1 == parity else (self.p - beta) % self.p
    # endregion

    def __eq__(self, other):
        if not isinstance(other, ShortWeierstrassCurve):
            return NotImplemented
        return self._params() == other._params()

    def __hash__(self):
        return hash(self._params())

    def _params(self):
        return self.p, self.a, self.b, self.g, self.n, self.h

    def __repr__(self):
        return f"ShortWeierstrassCurve(p={self.p:#x}, a={self.a:#x}, b={self.b:#x}, n={self.n:#x}, h={self.h})"
