"""
ECDSA (secp256k1) 서명 검증 블랙박스 함수
==========================================

입력 배치 (모두 바이트 witness):

    공개키 x (32) | 공개키 y (32) | 서명 r || s (64) | 메시지 해시 (≥ 1)

출력은 하나의 불리언 witness: 유효하면 1, 아니면 0.
잘못된 서명은 **데이터 결과**이지 오류가 아니다.
범위 밖의 r, s, 곡선 위에 없는 공개키도 모두 0을 출력한다.

검증 식:
    w  = s⁻¹ mod n
    u₁ = z·w,  u₂ = r·w
    R  = u₁·G + u₂·Q
    유효 ⇔ R ≠ O 이고 R.x mod n == r

점 연산은 py_ecc.secp256k1 (야코비안 좌표)을 사용한다.
"""

from py_ecc.secp256k1 import secp256k1

from acvm.circuit import ECDSA_PUBKEY_BYTES, ECDSA_SIGNATURE_BYTES
from acvm.errors import RangeExceeded


def _is_on_curve(x, y):
    p = secp256k1.P
    if not (0 <= x < p and 0 <= y < p):
        return False
    return (y * y - x * x * x - secp256k1.A * x - secp256k1.B) % p == 0


def _message_scalar(hashed_message):
    # 해시가 32바이트보다 길면 왼쪽 256비트만 사용한다 (bits2int)
    z = int.from_bytes(hashed_message, "big")
    excess = 8 * len(hashed_message) - 256
    if excess > 0:
        z >>= excess
    return z


def verify_signature(public_key_x, public_key_y, signature, hashed_message):
    """secp256k1 ECDSA 서명을 검증한다.

    Args:
        public_key_x, public_key_y: 32바이트 big-endian 좌표
        signature: 64바이트 r || s
        hashed_message: 메시지 해시 바이트열

    Returns:
        bool: 서명 유효 여부 (예외를 발생시키지 않는다)
    """
    n = secp256k1.N
    qx = int.from_bytes(public_key_x, "big")
    qy = int.from_bytes(public_key_y, "big")
    r = int.from_bytes(signature[:32], "big")
    s = int.from_bytes(signature[32:64], "big")

    if not (1 <= r < n and 1 <= s < n):
        return False
    if not _is_on_curve(qx, qy):
        return False

    z = _message_scalar(hashed_message)
    w = pow(s, -1, n)
    u1 = z * w % n
    u2 = r * w % n
    point = secp256k1.from_jacobian(
        secp256k1.jacobian_add(
            secp256k1.jacobian_multiply(secp256k1.to_jacobian(secp256k1.G), u1),
            secp256k1.jacobian_multiply((qx, qy, 1), u2),
        )
    )
    if point == (0, 0):
        return False
    return point[0] % n == r


def _byte_string(inputs):
    for value, _ in inputs:
        if not value.fits_in_bits(8):
            raise RangeExceeded(value, 8)
    return bytes(int(value) for value, _ in inputs)


def ecdsa_secp256k1(inputs, num_outputs, field):
    data = _byte_string(inputs)
    split = 2 * ECDSA_PUBKEY_BYTES + ECDSA_SIGNATURE_BYTES
    hashed_message = data[split:]
    valid = verify_signature(
        data[:ECDSA_PUBKEY_BYTES],
        data[ECDSA_PUBKEY_BYTES: 2 * ECDSA_PUBKEY_BYTES],
        data[2 * ECDSA_PUBKEY_BYTES: split],
        hashed_message,
    )
    return [field(1 if valid else 0)]
