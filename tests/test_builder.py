"""
acvm.builder 모듈 테스트.

테스트 대상:
  - witness 할당, 공개 입력 표시
  - 게이트 유형별 저장 형태 (곱셈, 덧셈, 상수)
  - 블랙박스 도우미 (range, to_bits, to_bytes, pedersen)
  - x3_plus_x_plus_5_eq_35 예제 회로
"""

import pytest

from acvm.builder import CircuitBuilder
from acvm.circuit import ArithmeticGate, BlackBoxFunc, BlackBoxFuncCall, Witness
from acvm.errors import MalformedCircuit, RangeExceeded
from acvm.field import Bls12381Field, Bn254Field as F
from acvm.gate_solver import evaluate_gate
from acvm.solver import solve
from acvm.witness_map import WitnessMap


class TestWitnessAllocation:
    """witness 할당 테스트."""

    def test_sequential_indices(self):
        builder = CircuitBuilder()
        assert builder.new_witness() == Witness(0)
        assert builder.new_witnesses(2) == [Witness(1), Witness(2)]
        assert builder.num_witnesses == 3

    def test_mark_public(self):
        builder = CircuitBuilder()
        a, b = builder.new_witnesses(2)
        builder.mark_public(b)
        circuit = builder.build()
        assert circuit.public_inputs == frozenset({b})
        assert circuit.num_witnesses == 2


class TestGates:
    """산술 게이트 형태 테스트."""

    def test_multiplication_gate(self):
        builder = CircuitBuilder()
        a, b, c = builder.new_witnesses(3)
        builder.add_multiplication_gate(a, b, c)
        gate = builder.build()[0]
        assert isinstance(gate, ArithmeticGate)
        assert evaluate_gate(gate, WitnessMap(F, {0: 3, 1: 7, 2: 21})) == F(0)
        assert evaluate_gate(gate, WitnessMap(F, {0: 3, 1: 7, 2: 20})) == F(1)

    def test_addition_gate(self):
        builder = CircuitBuilder()
        a, b, c = builder.new_witnesses(3)
        builder.add_addition_gate(a, b, c)
        gate = builder.build()[0]
        assert evaluate_gate(gate, WitnessMap(F, {0: 10, 1: 20, 2: 30})) == F(0)

    def test_constant_gate_with_output(self):
        builder = CircuitBuilder()
        a, c = builder.new_witnesses(2)
        builder.add_constant_gate(a, 5, c)
        gate = builder.build()[0]
        assert evaluate_gate(gate, WitnessMap(F, {0: 30, 1: 35})) == F(0)

    def test_constant_gate_assert_equal(self):
        builder = CircuitBuilder()
        a = builder.new_witness()
        builder.add_constant_gate(a, 35)
        assert solve(builder.build(), {}) == {0: 35}

    def test_general_gate(self):
        """2·a·b + 3·c - 1 = 0."""
        builder = CircuitBuilder()
        a, b, c = builder.new_witnesses(3)
        index = builder.add_gate(mul_terms=[(2, a, b)], linear_terms=[(3, c)], constant=-1)
        assert index == 0
        witness = solve(builder.build(), {0: 2, 1: 5})
        assert witness[c] * 3 == F(1 - 20)

    def test_gate_in_bls_field(self):
        builder = CircuitBuilder(Bls12381Field)
        a, b = builder.new_witnesses(2)
        builder.add_constant_gate(a, 1, b)
        circuit = builder.build()
        assert circuit.field is Bls12381Field
        assert type(circuit[0].constant) is Bls12381Field


class TestBlackBoxHelpers:
    """블랙박스 도우미 테스트."""

    def test_add_range(self):
        builder = CircuitBuilder()
        x = builder.new_witness()
        builder.add_range(x, 4)
        circuit = builder.build()
        assert solve(circuit, {0: 15}) == {0: 15}
        with pytest.raises(RangeExceeded):
            solve(circuit, {0: 16})

    def test_add_to_bits(self):
        builder = CircuitBuilder()
        x = builder.new_witness()
        bits = builder.add_to_bits(x, 4)
        assert bits == [Witness(1), Witness(2), Witness(3), Witness(4)]
        witness = solve(builder.build(), {0: 5})
        assert [int(witness[b]) for b in bits] == [0, 1, 0, 1]

    def test_add_to_bytes(self):
        builder = CircuitBuilder()
        x = builder.new_witness()
        limbs = builder.add_to_bytes(x, 2)
        witness = solve(builder.build(), {0: 0x1234})
        assert [int(witness[b]) for b in limbs] == [0x12, 0x34]

    def test_add_pedersen(self):
        builder = CircuitBuilder()
        a, b = builder.new_witnesses(2)
        out = builder.add_pedersen([a, b])
        call = builder.build()[0]
        assert isinstance(call, BlackBoxFuncCall)
        assert call.name is BlackBoxFunc.PEDERSEN
        assert call.outputs == (out,)

    def test_constant_input(self):
        """상수 입력을 가진 AND 호출."""
        builder = CircuitBuilder()
        x, out = builder.new_witnesses(2)
        builder.add_blackbox(BlackBoxFunc.AND, [(x, 8), (F(0x0F), 8)], [out])
        assert solve(builder.build(), {0: 0xAB})[out] == F(0x0B)

    def test_invalid_blackbox_rejected_at_build(self):
        builder = CircuitBuilder()
        x = builder.new_witness()
        builder.add_blackbox(BlackBoxFunc.AND, [(x, 8)], [])
        with pytest.raises(MalformedCircuit):
            builder.build()


class TestExampleFactory:
    """x3_plus_x_plus_5_eq_35 테스트."""

    def test_structure(self):
        circuit = CircuitBuilder.x3_plus_x_plus_5_eq_35()
        assert len(circuit) == 5
        assert circuit.num_witnesses == 5
        assert circuit.is_public(4)
        assert all(isinstance(op, ArithmeticGate) for op in circuit)

    def test_solution(self):
        circuit = CircuitBuilder.x3_plus_x_plus_5_eq_35()
        assert solve(circuit, {0: 3}) == {0: 3, 1: 9, 2: 27, 3: 30, 4: 35}
