from dataclasses import dataclass, field, replace
from typing import Optional

from gmecc.coordinate import Point
from gmecc.utils import bytes_to_int, int_to_bytes


@dataclass(frozen=True)
class KeyPair:
    '''
        A private scalar d in (0, n) and its public key [d]g.
        A key pair bound to an identity also carries the identity and its Z value, see SM2.generate_z
    '''
    private_key: int = field(repr=False)
    public_key: Point
    identity: Optional[bytes] = None
    z: Optional[bytes] = None

    @property
    def is_bound(self) -> bool:
        return self.z is not None

    def bind(self, identity: bytes, z: bytes) -> 'KeyPair':
        return replace(self, identity=bytes(identity), z=bytes(z))


@dataclass(frozen=True)
class Signature:
    r: int
    s: int

    def to_bytes(self, length: int = 32) -> bytes:
        """Fixed width r || s encoding, {length} bytes each"""
        return int_to_bytes(self.r, length) + int_to_bytes(self.s, length)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Signature':
        if not data or len(data) % 2:
            raise ValueError(f'Signature encoding must hold two equal halves, got {len(data)} bytes')
        half = len(data) // 2
        return cls(bytes_to_int(data[:half]), bytes_to_int(data[half:]))
