"""
비트/바이트 블랙박스 함수
==========================

  | 종류      | 입력         | 출력                                        |
  |-----------|--------------|---------------------------------------------|
  | RANGE     | x (n비트)    | 없음, x < 2^n 확인                          |
  | TO_BITS   | x            | n개의 비트 witness (최상위 비트 먼저)         |
  | TO_BYTES  | x            | n개의 바이트 witness (big-endian)            |
  | AND / XOR | a, b (n비트) | a ∧ b / a ⊕ b                               |

비트 분해는 FieldElement.to_bits()를 그대로 사용하므로
게이트 수준과 블랙박스 수준의 분해 결과가 어긋나지 않는다.
"""

from acvm.errors import RangeExceeded


def range_check(inputs, num_outputs, field):
    (value, num_bits), = inputs
    if not value.fits_in_bits(num_bits):
        raise RangeExceeded(value, num_bits)
    return []


def to_bits(inputs, num_outputs, field):
    """출력 개수만큼의 비트로 분해한다 (최상위 비트 먼저)."""
    (value, _), = inputs
    return [field(bit) for bit in value.to_bits(num_outputs)]


def to_bytes(inputs, num_outputs, field):
    """출력 개수만큼의 바이트로 분해한다 (big-endian)."""
    (value, _), = inputs
    if not value.fits_in_bits(8 * num_outputs):
        raise RangeExceeded(value, 8 * num_outputs)
    return [field(b) for b in int(value).to_bytes(num_outputs, "big")]


def _bitwise(inputs, field, op):
    (lhs, num_bits), (rhs, _) = inputs
    lhs_bits = lhs.to_bits(num_bits)
    rhs_bits = rhs.to_bits(num_bits)
    return [field.from_bits(op(x, y) for x, y in zip(lhs_bits, rhs_bits))]


def bitwise_and(inputs, num_outputs, field):
    return _bitwise(inputs, field, lambda x, y: x & y)


def bitwise_xor(inputs, num_outputs, field):
    return _bitwise(inputs, field, lambda x, y: x ^ y)


def pack_bytes(inputs):
    """입력들을 하나의 바이트열로 이어 붙인다.

    각 입력은 ceil(num_bits / 8) 바이트 big-endian으로 직렬화된다.
    바이트 입력(num_bits = 8)이면 입력 하나가 정확히 한 바이트가 된다.

    Raises:
        RangeExceeded: 입력 값이 자신의 num_bits를 넘을 때
    """
    packed = bytearray()
    for value, num_bits in inputs:
        if not value.fits_in_bits(num_bits):
            raise RangeExceeded(value, num_bits)
        packed.extend(int(value).to_bytes((num_bits + 7) // 8, "big"))
    return bytes(packed)
