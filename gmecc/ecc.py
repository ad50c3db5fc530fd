from abc import ABC, abstractmethod
from typing import Optional

from gmecc.coordinate import INFINITY, Point


class EllipticCurve(ABC):
    """
        An interface for Elliptic Curves over a prime field, including:
        * ShortWeierstrassCurve

        Sub-classes provide the group law, the scalar multiplications below are shared.
    """

    @abstractmethod
    def is_point_on_curve(self, point) -> bool:
        """Verify if a point is on the curve."""
        pass

    @abstractmethod
    def add_points(self, p1, p2):
        """Add two points on the curve."""
        pass

    @abstractmethod
    def double_point(self, p):
        """Double a point on the curve."""
        pass

    @abstractmethod
    def negate_point(self, p):
        """Additive inverse of a point."""
        pass

    def k_point(self, k: int, P: Point) -> Point:
        ''' ECSM (elliptic curve scalar multiplication) of k*P by double-and-add
                scans k from the least significant bit, running total starts at the identity
         '''
        if k < 0:
            raise ValueError(f'Scalar must be non-negative, got {k}')

        if k == 0 or P.is_identity_point():
            return INFINITY

        Q = INFINITY
        added = P

        for i in range(k.bit_length()):
            if (k >> i) & 1:
                Q = self.add_points(Q, added)
            added = self.double_point(added)

        return Q

    def k_point_ladder(self, k: int, P: Point, bits: Optional[int] = None) -> Point:
        ''' Montgomery ladder for k*P
                * one addition and one doubling per bit, whatever the bit value is
                * the loop runs over {bits} bits (default: bit length of the group order) so its length does not
                  leak the bit length of a secret k
        '''
        if k < 0:
            raise ValueError(f'Scalar must be non-negative, got {k}')

        if bits is None:
            bits = self.ladder_bits()
        bits = max(bits, k.bit_length())

        R0, R1 = INFINITY, P
        for i in range(bits - 1, -1, -1):
            if (k >> i) & 1:
                R0 = self.add_points(R0, R1)
                R1 = self.double_point(R1)
            else:
                R1 = self.add_points(R0, R1)
                R0 = self.double_point(R0)

        return R0

    def ladder_bits(self) -> int:
        return 0
