class GMCryptoError(Exception):
    """Base class of every error raised by gmecc."""


class InvalidDomainParameters(GMCryptoError, ValueError):
    """Curve parameters fail 4a^3 + 27b^2 != 0 (mod p), p >= 2^191 or the generator checks."""


class PointNotOnCurve(GMCryptoError, ValueError):
    """A finite point does not satisfy y^2 = x^3 + ax + b (mod p)."""


class InvalidSubgroup(GMCryptoError, ValueError):
    """A point on the curve is not annihilated by the subgroup order n."""


class InvalidPointEncoding(GMCryptoError, ValueError):
    """Bytes that cannot be decoded into a curve point."""


class KeyAgreementError(GMCryptoError):
    """Fatal failure of one key agreement exchange (never retried automatically)."""


class IntegrityCheckFailed(GMCryptoError):
    """Decryption tag C3 did not match; no plaintext is released."""
