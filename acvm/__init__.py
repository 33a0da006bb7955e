"""
ACVM: 회로 witness 풀이 엔진
==============================

컴파일러가 만든 회로(산술 게이트 + 블랙박스 호출)와 부분 witness 할당을 받아
나머지 witness 값을 모두 결정하거나, 타입이 있는 오류로 실패한다.

  ┌──────────────┐   ┌──────────────┐   ┌──────────────────────┐
  │ Circuit      │──▶│ Solver       │──▶│ WitnessMap (완성)     │
  │ (불변)       │   │ sweep/graph  │   │ 또는 SolverError      │
  └──────────────┘   └──────┬───────┘   └──────────────────────┘
                            │
               ┌────────────┴────────────┐
               │ gate_solver │ blackbox  │
               └─────────────────────────┘

사용 예시:
    >>> from acvm import CircuitBuilder, solve
    >>> circuit = CircuitBuilder.x3_plus_x_plus_5_eq_35()
    >>> witness = solve(circuit, {0: 3})
"""

from acvm.errors import (
    ConfigError,
    ConflictingAssignment,
    DivisionByZero,
    MalformedCircuit,
    RangeExceeded,
    SolverError,
    Timeout,
    UnderConstrained,
    UnsatisfiedConstraint,
)
from acvm.field import FIELDS, Bls12381Field, Bn254Field, FieldElement, get_field
from acvm.circuit import (
    ArithmeticGate,
    BlackBoxFunc,
    BlackBoxFuncCall,
    Circuit,
    FunctionInput,
    LinearCombination,
    Witness,
)
from acvm.witness_map import WitnessMap
from acvm.gate_solver import OpcodeStatus, solve_gate
from acvm.config import SolverConfig
from acvm.solver import Solver, find_unsatisfied_opcodes, is_satisfied, solve
from acvm.builder import CircuitBuilder

__version__ = "0.1.0"
