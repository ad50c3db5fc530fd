import struct

from gmecc.sm3 import SM3, DIGEST_SIZE

# the 32 bit counter must not wrap (GM/T 0003.4 5.4.3)
MAX_ROUNDS = 0xFFFFFFFF


def kdf(klen: int, *zs: bytes) -> bytes:
    '''
        5.4.3 Key derivation function
            K = Ha_1 || Ha_2 || ... truncated to {klen} bytes, where Ha_i = SM3(Z || ct_i) and ct_i = i as 32 bit
            big-endian counter starting from 1. Z is the concatenation of {zs}
    '''
    if klen < 0:
        raise ValueError(f'Key length must be non-negative, got {klen}')

    rounds = -(-klen // DIGEST_SIZE)
    if rounds > MAX_ROUNDS:
        raise ValueError(f'Key length too large: {klen}')

    h = SM3()
    out = bytearray()
    for ct in range(1, rounds + 1):
        for z in zs:
            h.update(z)
        h.update(struct.pack('>I', ct))
        out += h.digest()  # digest() resets h for the next round

    return bytes(out[:klen])
