"""
Pedersen 해시 블랙박스 함수
============================

순서 있는 체 원소 리스트 [v₀, v₁, ..., v_{k-1}]를 하나의 체 원소로 압축한다.
각 vᵢ는 128비트 limb 두 개로 나눈다:

    vᵢ = loᵢ + hiᵢ · 2^128          (loᵢ, hiᵢ < 2^128)

    P = k · H + Σᵢ (loᵢ · G₂ᵢ + hiᵢ · G₂ᵢ₊₁)      (임베디드 곡선 위)
    H(v) = P.x

  - limb은 곡선 부분군의 위수보다 작으므로 vᵢ를 스칼라로 그대로 쓸 때처럼
    v와 v + (위수)가 같은 점으로 가는 일이 없다.
  - 길이 k를 별도 생성자 H에 곱해 더하므로 [v]와 [v, 0]은 다른 값이 된다.

Gᵢ는 도메인 b"acvm.pedersen", H는 b"acvm.pedersen.length"에서 유도한
고정 생성자이므로 같은 입력은 언제나 같은 출력을 낸다 (무작위성 없음).
"""

from acvm.blackbox.curves import embedded_curve

PEDERSEN_DOMAIN = b"acvm.pedersen"
PEDERSEN_LENGTH_DOMAIN = b"acvm.pedersen.length"

LIMB_BITS = 128
LIMB_MASK = (1 << LIMB_BITS) - 1


def split_limbs(value):
    """체 원소를 (하위 128비트, 상위 비트) 정수 쌍으로 나눈다."""
    n = int(value)
    return n & LIMB_MASK, n >> LIMB_BITS


def pedersen_point(values, field):
    """k · H + Σ (loᵢ · G₂ᵢ + hiᵢ · G₂ᵢ₊₁) 를 계산한다."""
    curve = embedded_curve(field)
    generators = curve.derive_generators(PEDERSEN_DOMAIN, 2 * len(values))
    length_generator = curve.derive_generator(PEDERSEN_LENGTH_DOMAIN, 0)

    acc = curve.multiply(length_generator, len(values))
    for i, value in enumerate(values):
        lo, hi = split_limbs(value)
        acc = curve.add(acc, curve.multiply(generators[2 * i], lo))
        acc = curve.add(acc, curve.multiply(generators[2 * i + 1], hi))
    return acc


def pedersen_hash(values, field):
    """Pedersen 해시 값 (결과 점의 x 좌표).

    예시:
        >>> h = pedersen_hash([Bn254Field(1), Bn254Field(2)], Bn254Field)
    """
    x, _ = embedded_curve(field).coordinates(pedersen_point(values, field))
    return x


def pedersen(inputs, num_outputs, field):
    return [pedersen_hash([value for value, _ in inputs], field)]
