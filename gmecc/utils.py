from typing import Optional

byte_length = lambda n: (n.bit_length() + 7) // 8


def mod_inv(x: int, m: int) -> int:
    ''' Inverse of x modulo the prime m (Fermat), raises when x == 0 (mod m) '''
    x %= m
    if x == 0:
        raise ArithmeticError(f'{x} has no inverse modulo {m:#x}')
    return pow(x, m - 2, m)


def sqrt_mod(a: int, p: int) -> Optional[int]:
    '''
        Square root of a modulo an odd prime p, None if a is a non-residue.
        ref: Guide to elliptic curve cryptography, p.37 (p = 3 mod 4) and Tonelli-Shanks otherwise
    '''
    a %= p
    if a == 0:
        return 0

    # Euler's criterion
    if pow(a, (p - 1) // 2, p) != 1:
        return None

    if p % 4 == 3:
        return pow(a, (p + 1) // 4, p)

    # p - 1 = q * 2^s with q odd
    q, s = p - 1, 0
    while q % 2 == 0:
        q //= 2
        s += 1

    z = 2
    while pow(z, (p - 1) // 2, p) != p - 1:
        z += 1

    m, c, t, r = s, pow(z, q, p), pow(a, q, p), pow(a, (q + 1) // 2, p)
    while t != 1:
        i, t2 = 0, t
        while t2 != 1:
            t2 = t2 * t2 % p
            i += 1

        b = pow(c, 1 << (m - i - 1), p)
        m, c = i, b * b % p
        t, r = t * c % p, r * b % p

    return r


def int_to_bytes(n: int, length: Optional[int] = None) -> bytes:
    '''
        Big-endian unsigned encoding of n
            * length=None: natural encoding with leading zeros stripped (zero encodes to a single 0x00)
            * otherwise: fixed width, left padded with zeros
        e.g.
            >>> int_to_bytes(0x0102)  # b'\\x01\\x02'
            >>> int_to_bytes(0x0102, 4)  # b'\\x00\\x00\\x01\\x02'
    '''
    if n < 0:
        raise ValueError(f'Cannot encode negative integer: {n}')

    if length is None:
        length = max(1, byte_length(n))

    try:
        return n.to_bytes(length, 'big')
    except OverflowError:
        raise ValueError(f'Integer {n:#x} does not fit in {length} bytes') from None


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, 'big')


def xor_bytes(b1: bytes, b2: bytes) -> bytes:
    if len(b1) != len(b2):
        raise ValueError(f'Operands of different length: {len(b1)} vs {len(b2)}')
    return bytes(x ^ y for x, y in zip(b1, b2))
