import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from acvm.builder import CircuitBuilder
from acvm.circuit import BlackBoxFunc
from acvm.field import Bls12381Field, Bn254Field


@pytest.fixture(params=[Bn254Field, Bls12381Field], ids=["bn254", "bls12_381"])
def field(request):
    """두 체 모두에 대해 테스트를 실행하는 fixture."""
    return request.param


@pytest.fixture
def x3_circuit():
    """x³ + x + 5 = 35 예제 회로."""
    return CircuitBuilder.x3_plus_x_plus_5_eq_35()


@pytest.fixture
def chain_circuit():
    """역순으로 나열된 선형 사슬 회로.

    opcode 0: w3 = w2 + 1
    opcode 1: w2 = w1 + 1
    opcode 2: w1 = w0 + 1

    w0만 주어지면 sweep마다 하나씩 풀려 3번의 진전 sweep이 필요하다.
    """
    builder = CircuitBuilder()
    w0, w1, w2, w3 = builder.new_witnesses(4)
    builder.add_constant_gate(w2, 1, w3)
    builder.add_constant_gate(w1, 1, w2)
    builder.add_constant_gate(w0, 1, w1)
    return builder.build()


@pytest.fixture
def bits_circuit():
    """x를 3비트로 분해하는 회로 (x = w0, 비트 = w1, w2, w3)."""
    builder = CircuitBuilder()
    x = builder.new_witness()
    builder.add_to_bits(x, 3)
    return builder.build()


@pytest.fixture
def mixed_circuit():
    """산술 게이트와 블랙박스가 섞인 회로.

    opcode 0: w1 = w0 · w0
    opcode 1: SHA256([w1 (8비트)]) → w2..w33
    opcode 2: w34 = w2 + w3
    opcode 3: XOR(w2, w3) → w35
    """
    builder = CircuitBuilder()
    w0 = builder.new_witness()
    w1 = builder.new_witness()
    builder.add_multiplication_gate(w0, w0, w1)
    digest = builder.new_witnesses(32)
    builder.add_blackbox(BlackBoxFunc.SHA256, [(w1, 8)], digest)
    total = builder.new_witness()
    builder.add_addition_gate(digest[0], digest[1], total)
    mixed = builder.new_witness()
    builder.add_blackbox(BlackBoxFunc.XOR, [(digest[0], 8), (digest[1], 8)], [mixed])
    return builder.build()
