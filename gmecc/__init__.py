import logging

from gmecc.agreement import AgreementResult, AgreementState, KeyAgreementSession, PublicInfo, SM2KeyAgreement
from gmecc.cipher import C1C2C3, C1C3C2, SM2Cipher
from gmecc.coordinate import INFINITY, CurvePoint, PointAtInfinity
from gmecc.curves import DEFAULT_USER_ID, SECP256K1, SM2_P256, SM2_TEST_FP256, CurveParams, get_curve
from gmecc.ecc_signer import ECCSigner
from gmecc.exceptions import (GMCryptoError, IntegrityCheckFailed, InvalidDomainParameters, InvalidPointEncoding,
                              InvalidSubgroup, KeyAgreementError, PointNotOnCurve)
from gmecc.kdf import kdf
from gmecc.keys import KeyPair, Signature
from gmecc.short_weierstrass_ecc import ShortWeierstrassCurve
from gmecc.signer import SM2Signer
from gmecc.sm2 import SM2
from gmecc.sm3 import SM3, sm3_hash, sm3_hexdigest

logging.getLogger(__name__).addHandler(logging.NullHandler())
