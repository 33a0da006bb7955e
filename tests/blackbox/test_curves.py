"""
acvm.blackbox.curves, acvm.blackbox.pedersen 모듈 테스트.

테스트 대상:
  - Grumpkin / Jubjub: 생성자가 곡선 위에 있음, 덧셈/스칼라 곱 성질
  - 도메인 분리 생성자 유도의 결정론성
  - FIXED_BASE_SCALAR_MUL: 항등원 표현
  - PEDERSEN: 결정론성, 입력 민감도, limb 분할, 길이 구분,
    위수만큼 차이 나는 입력 / x(P) = x(-P) 충돌 없음, 회로 안에서의 풀이
"""

import pytest
from py_ecc import bn128

from acvm.blackbox.curves import Grumpkin, Jubjub, embedded_curve, fixed_base_scalar_mul
from acvm.blackbox.pedersen import (
    PEDERSEN_DOMAIN,
    PEDERSEN_LENGTH_DOMAIN,
    pedersen,
    pedersen_hash,
    pedersen_point,
    split_limbs,
)
from acvm.builder import CircuitBuilder
from acvm.field import Bls12381Field, Bn254Field
from acvm.solver import solve


# ─────────────────────────────────────────────────────────────────────
# 곡선
# ─────────────────────────────────────────────────────────────────────

class TestEmbeddedCurve:
    """두 임베디드 곡선 공통 테스트."""

    def test_curve_per_field(self):
        assert isinstance(embedded_curve(Bn254Field), Grumpkin)
        assert isinstance(embedded_curve(Bls12381Field), Jubjub)
        assert embedded_curve(Bn254Field) is embedded_curve(Bn254Field)

    def test_generator_on_curve(self, field):
        curve = embedded_curve(field)
        assert curve.is_on_curve(curve.generator)
        assert curve.generator != curve.identity()

    def test_identity_is_neutral(self, field):
        curve = embedded_curve(field)
        g = curve.generator
        assert curve.add(g, curve.identity()) == g
        assert curve.multiply(g, 0) == curve.identity()
        assert curve.multiply(g, 1) == g

    def test_scalar_multiplication_is_additive(self, field):
        curve = embedded_curve(field)
        g = curve.generator
        lhs = curve.multiply(g, 12)
        rhs = curve.add(curve.multiply(g, 5), curve.multiply(g, 7))
        assert lhs == rhs
        assert curve.is_on_curve(lhs)

    def test_generator_order(self, field):
        curve = embedded_curve(field)
        assert curve.multiply(curve.generator, curve.order) == curve.identity()

    def test_derived_generators(self, field):
        curve = embedded_curve(field)
        generators = curve.derive_generators(b"test.domain", 3)
        assert len(set(generators)) == 3
        assert all(curve.is_on_curve(g) for g in generators)
        assert curve.derive_generator(b"test.domain", 1) == generators[1]
        assert curve.derive_generator(b"other.domain", 0) != generators[0]


class TestGrumpkin:
    """Grumpkin 고유 테스트."""

    def test_generator(self):
        x, y = Grumpkin().generator
        assert x == Bn254Field(1)
        assert y * y == Bn254Field(-16)

    def test_fixed_base_identity(self):
        assert fixed_base_scalar_mul([(Bn254Field(0), 254)], 2, Bn254Field) == [
            Bn254Field(0), Bn254Field(0)
        ]


class TestJubjub:
    """Jubjub 고유 테스트."""

    def test_parameters(self):
        curve = Jubjub()
        assert curve.a == Bls12381Field(-1)
        assert curve.d * Bls12381Field(10241) == Bls12381Field(-10240)

    def test_fixed_base_identity(self):
        assert fixed_base_scalar_mul([(Bls12381Field(0), 255)], 2, Bls12381Field) == [
            Bls12381Field(0), Bls12381Field(1)
        ]

    def test_negation(self):
        """(x, y)의 역원은 (-x, y)."""
        curve = Jubjub()
        x, y = curve.generator
        assert curve.add((x, y), (-x, y)) == curve.identity()


class TestFixedBaseScalarMul:
    """FIXED_BASE_SCALAR_MUL 테스트."""

    def test_matches_multiply(self, field):
        curve = embedded_curve(field)
        x, y = fixed_base_scalar_mul([(field(9), 254)], 2, field)
        assert (x, y) == curve.coordinates(curve.multiply(curve.generator, 9))
        assert curve.is_on_curve((x, y))


# ─────────────────────────────────────────────────────────────────────
# Pedersen
# ─────────────────────────────────────────────────────────────────────

class TestPedersen:
    """PEDERSEN 테스트."""

    def test_deterministic(self, field):
        values = [field(1), field(2)]
        assert pedersen_hash(values, field) == pedersen_hash(list(values), field)

    def test_sensitive_to_values_and_order(self, field):
        a = pedersen_hash([field(1), field(2)], field)
        assert a != pedersen_hash([field(2), field(1)], field)
        assert a != pedersen_hash([field(1), field(3)], field)

    def test_point_on_curve(self, field):
        point = pedersen_point([field(3), field(4), field(5)], field)
        assert embedded_curve(field).is_on_curve(point)

    def test_single_value(self, field):
        """H([v]) 는 1 · H + v · G₀ 의 x 좌표 (v < 2^128 이면 상위 limb = 0)."""
        curve = embedded_curve(field)
        g0 = curve.derive_generator(PEDERSEN_DOMAIN, 0)
        h = curve.derive_generator(PEDERSEN_LENGTH_DOMAIN, 0)
        x, _ = curve.coordinates(curve.add(h, curve.multiply(g0, 11)))
        assert pedersen_hash([field(11)], field) == x

    def test_split_limbs(self):
        assert split_limbs(Bn254Field(5)) == (5, 0)
        assert split_limbs(Bn254Field((7 << 128) + 9)) == (9, 7)

    def test_length_is_committed(self, field):
        assert pedersen_hash([field(1)], field) != pedersen_hash([field(1), field(0)], field)
        assert pedersen_hash([field(0)], field) != pedersen_hash([field(0), field(0)], field)

    def test_no_collision_modulo_subgroup_order(self):
        """Jubjub: v 와 v + ℓ (둘 다 BLS12-381 체 안) 은 다른 해시."""
        order = Jubjub.order
        assert 1 + order < Bls12381Field.field_modulus
        a = pedersen_hash([Bls12381Field(1)], Bls12381Field)
        b = pedersen_hash([Bls12381Field(1 + order)], Bls12381Field)
        assert a != b

    def test_no_collision_between_negated_points(self):
        """Grumpkin: (r - 1) · G 와 (q - r + 1) · G 는 서로 역원이다.

        스칼라를 그대로 쓰면 x 좌표가 같아지지만 limb 분할 후에는 다르다.
        """
        r, q = bn128.curve_order, bn128.field_modulus
        curve = Grumpkin()
        g = curve.generator
        p1, p2 = curve.multiply(g, r - 1), curve.multiply(g, q - r + 1)
        assert p1[0] == p2[0] and p1[1] == -p2[1]
        a = pedersen_hash([Bn254Field(r - 1)], Bn254Field)
        b = pedersen_hash([Bn254Field(q - r + 1)], Bn254Field)
        assert a != b

    def test_evaluator(self, field):
        values = [field(7), field(8)]
        assert pedersen([(v, 254) for v in values], 1, field) == [pedersen_hash(values, field)]

    @pytest.mark.parametrize("field_cls", [Bn254Field, Bls12381Field])
    def test_in_circuit(self, field_cls):
        builder = CircuitBuilder(field_cls)
        a, b = builder.new_witnesses(2)
        out = builder.add_pedersen([a, b])
        witness = solve(builder.build(), {a: 1, b: 2})
        assert witness[out] == pedersen_hash([field_cls(1), field_cls(2)], field_cls)
