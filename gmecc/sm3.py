"""
    GM/T 0004-2012 SM3 cryptographic hash algorithm.

    Implementation of the Chinese SM3 hash as described at https://tools.ietf.org/html/draft-shen-sm3-hash-01

    4.1 Initial value:
        IV 7380166f 4914b2b9 172442d7 da8a0600 a96f30bc 163138aa e38dee4d b0fb0e4e
    4.2 Constants:
        Tj = 79cc4519   when  0 <= j <= 15
        Tj = 7a879d8a   when 16 <= j <= 63
    4.3 Boolean functions:
        FFj(X, Y, Z) = X ^ Y ^ Z                          when  0 <= j <= 15
        FFj(X, Y, Z) = (X & Y) | (X & Z) | (Y & Z)        when 16 <= j <= 63
        GGj(X, Y, Z) = X ^ Y ^ Z                          when  0 <= j <= 15
        GGj(X, Y, Z) = (X & Y) | (~X & Z)                 when 16 <= j <= 63
    4.4 Permutations:
        P0(X) = X ^ (X <<< 9) ^ (X <<< 17)
        P1(X) = X ^ (X <<< 15) ^ (X <<< 23)
"""
import struct
from typing import Union

MASK = 0xFFFFFFFF

IV = (0x7380166F, 0x4914B2B9, 0x172442D7, 0xDA8A0600,
      0xA96F30BC, 0x163138AA, 0xE38DEE4D, 0xB0FB0E4E)

BLOCK_SIZE = 64
DIGEST_SIZE = 32


def rotl(x: int, n: int) -> int:
    n %= 32
    return ((x << n) | (x >> (32 - n))) & MASK


# Tj <<< (j mod 32), precomputed for the 64 rounds (5.3.3)
T = tuple(rotl(0x79CC4519, j) for j in range(16)) + tuple(rotl(0x7A879D8A, j) for j in range(16, 64))


def FF0(x, y, z):
    return x ^ y ^ z


def FF1(x, y, z):
    return (x & y) | (x & z) | (y & z)


def GG0(x, y, z):
    return x ^ y ^ z


def GG1(x, y, z):
    return (x & y) | (~x & z)


def P0(x):
    return x ^ rotl(x, 9) ^ rotl(x, 17)


def P1(x):
    return x ^ rotl(x, 15) ^ rotl(x, 23)


def compress(v: list, block: bytes) -> list:
    '''
        5.3 Iterative compression CF(V, B): message expansion + 64 rounds, the result is XOR-ed into V
    '''
    # 5.3.2 message expansion, 16 words -> W[0..67] (W'[j] = W[j] ^ W[j+4] is computed inline)
    w = list(struct.unpack('>16I', block))
    for j in range(16, 68):
        w.append(P1(w[j - 16] ^ w[j - 9] ^ rotl(w[j - 3], 15)) ^ rotl(w[j - 13], 7) ^ w[j - 6])

    a, b, c, d, e, f, g, h = v
    for j in range(64):
        a12 = rotl(a, 12)
        ss1 = rotl((a12 + e + T[j]) & MASK, 7)
        ss2 = ss1 ^ a12
        if j < 16:
            tt1 = (FF0(a, b, c) + d + ss2 + (w[j] ^ w[j + 4])) & MASK
            tt2 = (GG0(e, f, g) + h + ss1 + w[j]) & MASK
        else:
            tt1 = (FF1(a, b, c) + d + ss2 + (w[j] ^ w[j + 4])) & MASK
            tt2 = (GG1(e, f, g) + h + ss1 + w[j]) & MASK
        d = c
        c = rotl(b, 9)
        b = a
        a = tt1
        h = g
        g = rotl(f, 19)
        f = e
        e = P0(tt2)

    return [x ^ y for x, y in zip(v, (a, b, c, d, e, f, g, h))]


class SM3:
    '''
        Incremental SM3 hash object with the hashlib interface (update / digest / hexdigest / copy).

        Unlike hashlib objects, producing the digest finalizes the computation and resets the state, the object
        can be fed with a new message right after:
            >>> h = SM3()
            >>> h.update(b'abc')
            >>> h.hexdigest()  # '66c7f0f4...8f4ba8e0'
            >>> h.update(b'abc'); h.hexdigest()  # same value again
    '''
    name = 'sm3'
    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data: Union[bytes, bytearray, memoryview, int] = b''):
        self.reset()
        self.update(data)

    def reset(self):
        self._v = list(IV)
        self._buffer = bytearray()  # pending bytes of the current block
        self._length = 0  # total message length in bytes

    def update(self, data: Union[bytes, bytearray, memoryview, int]):
        if isinstance(data, int):
            if not 0 <= data <= 0xFF:
                raise ValueError(f'A single byte must be in [0, 255], got {data}')
            data = bytes([data])

        data = memoryview(data).cast('B')
        self._length += len(data)
        self._buffer += data

        n = len(self._buffer) - len(self._buffer) % BLOCK_SIZE
        for i in range(0, n, BLOCK_SIZE):
            self._v = compress(self._v, bytes(self._buffer[i:i + BLOCK_SIZE]))
        del self._buffer[:n]

    def _padding(self) -> bytes:
        # 5.2 padding: 1 bit, k zero bits with l + 1 + k = 448 mod 512, then l as a 64 bit big-endian integer
        zeros = (BLOCK_SIZE - 8 - (self._length + 1) % BLOCK_SIZE) % BLOCK_SIZE
        return b'\x80' + b'\x00' * zeros + struct.pack('>Q', (self._length * 8) & 0xFFFFFFFFFFFFFFFF)

    def digest(self) -> bytes:
        # the padded message is a whole number of blocks, the buffer is empty afterwards
        self.update(self._padding())
        out = struct.pack('>8I', *self._v)
        self.reset()
        return out

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> 'SM3':
        other = SM3.__new__(SM3)
        other._v = list(self._v)
        other._buffer = bytearray(self._buffer)
        other._length = self._length
        return other


def sm3_hash(*chunks: bytes) -> bytes:
    """SM3 of the concatenation of the given chunks"""
    h = SM3()
    for chunk in chunks:
        h.update(chunk)
    return h.digest()


def sm3_hexdigest(data: bytes) -> str:
    return sm3_hash(data).hex()
