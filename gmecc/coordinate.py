from dataclasses import dataclass
from typing import Tuple, Union


class PointAtInfinity:
    '''Singleton repr. of the infinite point'''
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(PointAtInfinity, cls).__new__(cls)
        return cls._instance

    def __eq__(self, other):
        # value equality, an unpickled copy must still compare equal
        return isinstance(other, PointAtInfinity)

    def __hash__(self):
        return hash(PointAtInfinity)

    def __reduce__(self):
        return PointAtInfinity, ()

    def is_identity_point(self):
        return True

    def __repr__(self):
        return "InfinitePoint"


INFINITY = PointAtInfinity()


@dataclass(frozen=True)
class CurvePoint:
    """
        A finite point (x, y) in affine coordinates over F_p.

        Coordinates are plain python integers already reduced mod p. A CurvePoint carries no reference to its
        curve, use the curve's `check_point` / `is_point_on_curve` to validate points of unknown origin.
    """
    x: int
    y: int

    def is_identity_point(self):
        return False

    def get_affine_coords(self) -> Tuple[int, int]:
        return self.x, self.y

    def __repr__(self):
        return f"CurvePoint(x={self.x:#x}, y={self.y:#x})"


Point = Union[CurvePoint, PointAtInfinity]
