"""
블랙박스 함수 라이브러리 (Black-Box Function Library)
=====================================================

산술 게이트만으로는 풀 수 없는 원시 연산들을 직접 평가한다.
종류는 BlackBoxFunc 열거형으로 닫혀 있으며, 모두 하나의 평가기 인터페이스

    evaluator(inputs, num_outputs, field) -> list[FieldElement]

를 따른다. inputs는 (값, num_bits) 쌍의 리스트이다.

  ┌───────────────────────────┬───────────────────────────────┐
  │ 종류                      │ 모듈                          │
  ├───────────────────────────┼───────────────────────────────┤
  │ RANGE, AND, XOR,          │ bits                          │
  │ TO_BITS, TO_BYTES         │                               │
  │ SHA256, BLAKE2S,          │ hashes                        │
  │ HASH_TO_FIELD             │                               │
  │ PEDERSEN                  │ pedersen                      │
  │ ECDSA_SECP256K1           │ ecdsa                         │
  │ FIXED_BASE_SCALAR_MUL     │ curves                        │
  │ MERKLE_MEMBERSHIP         │ merkle                        │
  └───────────────────────────┴───────────────────────────────┘

공통 규칙: 출력 witness에 이미 다른 값이 있으면 ConflictingAssignment.

사용 예시:
    >>> from acvm.blackbox import solve_blackbox
    >>> status = solve_blackbox(call, witness_map)
"""

import logging

from acvm.blackbox import bits, curves, ecdsa, hashes, merkle, pedersen
from acvm.circuit import BlackBoxFunc
from acvm.errors import MalformedCircuit
from acvm.gate_solver import OpcodeStatus

logger = logging.getLogger(__name__)

EVALUATORS = {
    BlackBoxFunc.RANGE: bits.range_check,
    BlackBoxFunc.AND: bits.bitwise_and,
    BlackBoxFunc.XOR: bits.bitwise_xor,
    BlackBoxFunc.TO_BITS: bits.to_bits,
    BlackBoxFunc.TO_BYTES: bits.to_bytes,
    BlackBoxFunc.SHA256: hashes.sha256,
    BlackBoxFunc.BLAKE2S: hashes.blake2s,
    BlackBoxFunc.HASH_TO_FIELD: hashes.hash_to_field,
    BlackBoxFunc.PEDERSEN: pedersen.pedersen,
    BlackBoxFunc.ECDSA_SECP256K1: ecdsa.ecdsa_secp256k1,
    BlackBoxFunc.FIXED_BASE_SCALAR_MUL: curves.fixed_base_scalar_mul,
    BlackBoxFunc.MERKLE_MEMBERSHIP: merkle.merkle_membership,
}


def _check_table(table):
    """모든 BlackBoxFunc 종류에 평가기가 하나씩 있는지 확인한다."""
    missing = set(BlackBoxFunc) - set(table)
    extra = set(table) - set(BlackBoxFunc)
    if missing or extra:
        raise RuntimeError(
            f"평가기 테이블이 BlackBoxFunc와 일치하지 않습니다 (누락: {sorted(f.value for f in missing)}, "
            f"초과: {sorted(map(str, extra))})"
        )


_check_table(EVALUATORS)


def evaluate(name, inputs, num_outputs, field):
    """블랙박스 함수를 순수하게 평가한다.

    Args:
        name: BlackBoxFunc
        inputs: (FieldElement, num_bits) 리스트
        num_outputs: 출력 witness 수
        field: 체 클래스

    Returns:
        list[FieldElement]: 길이 num_outputs의 출력 값

    Raises:
        MalformedCircuit: 평가 결과 개수가 num_outputs와 다를 때
    """
    outputs = EVALUATORS[BlackBoxFunc(name)](inputs, num_outputs, field)
    if len(outputs) != num_outputs:
        raise MalformedCircuit(
            f"{BlackBoxFunc(name).value}: 출력 witness {num_outputs}개를 선언했지만 "
            f"평가 결과는 {len(outputs)}개입니다"
        )
    return outputs


def resolve_inputs(call, witness_map):
    """호출의 입력 값을 모은다.

    Returns:
        (값, num_bits) 리스트, 또는 아직 모르는 입력 witness가 있으면 None
    """
    resolved = []
    for function_input in call.inputs:
        if function_input.is_constant:
            value = function_input.source
        else:
            value = witness_map.get(function_input.witness)
            if value is None:
                return None
        resolved.append((value, function_input.num_bits))
    return resolved


def evaluate_call(call, witness_map):
    """입력이 모두 알려진 호출의 출력 값을 계산한다 (맵은 바꾸지 않는다)."""
    inputs = resolve_inputs(call, witness_map)
    if inputs is None:
        return None
    return evaluate(call.name, inputs, len(call.outputs), witness_map.field)


def solve_blackbox(call, witness_map):
    """블랙박스 호출을 적용한다.

    Returns:
        OpcodeStatus: 입력 미정이면 PENDING, 새 출력을 썼으면 SOLVED,
                      출력이 이미 같은 값이면 SATISFIED

    Raises:
        ConflictingAssignment: 출력 witness에 다른 값이 이미 있을 때
        RangeExceeded: 분해/범위 검사 실패
    """
    outputs = evaluate_call(call, witness_map)
    if outputs is None:
        return OpcodeStatus.PENDING

    logger.debug("블랙박스 %s 평가: 출력 %d개", call.name.value, len(outputs))
    wrote = False
    for witness, value in zip(call.outputs, outputs):
        if witness_map.insert(witness, value):
            wrote = True
    return OpcodeStatus.SOLVED if wrote else OpcodeStatus.SATISFIED
