from typing import NamedTuple, Union

from gmecc.short_weierstrass_ecc import ShortWeierstrassCurve

# Default user identity (GM/T 0009-2012, when no identity is agreed upon)
DEFAULT_USER_ID = b'1234567812345678'


class CurveParams(NamedTuple):
    name: str
    p: int
    a: int
    b: int
    gx: int
    gy: int
    n: int
    h: int


#region SM2 recommended curve, GM/T 0003.5-2012
SM2_P256 = CurveParams(
    name='sm2p256v1',
    p=0xFFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF00000000FFFFFFFFFFFFFFFF,
    a=0xFFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF00000000FFFFFFFFFFFFFFFC,
    b=0x28E9FA9E9D9F5E344D5A9E4BCF6509A7F39789F515AB8F92DDBCBD414D940E93,
    gx=0x32C4AE2C1F1981195F9904466A39C9948FE30BBFF2660BE1715A4589334C74C7,
    gy=0xBC3736A2F4F6779C59BDCEE36B692153D0A9877CC62A474002DF32E52139F0A0,
    n=0xFFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFF7203DF6B21C6052B53BBF40939D54123,
    h=1,
)
#endregion

#region Fp-256 example curve of the GM/T 0003 appendices (worked examples, not for production use)
SM2_TEST_FP256 = CurveParams(
    name='sm2-test-fp256',
    p=0x8542D69E4C044F18E8B92435BF6FF7DE457283915C45517D722EDB8B08F1DFC3,
    a=0x787968B4FA32C3FD2417842E73BBFEFF2F3C848B6831D7E0EC65228B3937E498,
    b=0x63E4C6D3B23B0C849CF84241484BFE48F61D59A5B16BA06E6E12D1DA27C5249A,
    gx=0x421DEBD61B62EAB6746434EBC3CC315E32220B3BADD50BDC4C4E6C147FEDD43D,
    gy=0x0680512BCBB42C07D47349D2153B70C4E5D7FDFCBFA36EA1A85841B9E46E09A2,
    n=0x8542D69E4C044F18E8B92435BF6FF7DD297720630485628D5AE74EE7C32E79B7,
    h=1,
)
#endregion

#region secp256k1, SEC 2 v2 2.4.1 (for the generic ECC signer and ECDH)
SECP256K1 = CurveParams(
    name='secp256k1',
    p=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    a=0,
    b=7,
    gx=0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    gy=0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
    n=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    h=1,
)
#endregion

CURVES = {params.name: params for params in (SM2_P256, SM2_TEST_FP256, SECP256K1)}


def get_curve(curve: Union[str, CurveParams], validate: bool = True) -> ShortWeierstrassCurve:
    '''
        Build a new curve from a registered name or from explicit parameters
            >>> sm2 = get_curve('sm2p256v1')
    '''
    params = CURVES[curve] if isinstance(curve, str) else curve
    return ShortWeierstrassCurve(params.p, params.a, params.b, g=(params.gx, params.gy), n=params.n, h=params.h,
                                 validate=validate)
