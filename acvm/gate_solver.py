"""
산술 게이트 풀이기 (Gate Solver)
=================================

하나의 ArithmeticGate와 현재 WitnessMap이 주어졌을 때:

  | 상황                                   | 결과                           |
  |----------------------------------------|--------------------------------|
  | 모든 witness가 알려짐, 값 = 0          | SATISFIED (맵 변경 없음)       |
  | 모든 witness가 알려짐, 값 ≠ 0          | UnsatisfiedConstraint          |
  | 미지수 1개, 선형으로만 등장            | SOLVED (w = -(나머지) / 계수)  |
  | 위 경우인데 계수가 0                   | DivisionByZero                 |
  | 미지수 2개 이상 / 미지수끼리의 곱      | PENDING (다음 sweep으로 연기)  |

곱 항 c·w_i·w_j에서 한쪽만 알려져 있으면 (c·w_i)·w_j는
w_j에 대한 선형 항으로 취급한다.
미지수의 제곱(w·w)처럼 근을 구해야 하는 경우는 절대 풀지 않는다.
그런 witness는 다른 opcode(예: 블랙박스 호출)가 따로 정해 주어야 한다.

예시 (a + b - 3 = 0, a = 1 알려짐):
    known = 1 - 3 = -2,  coeff(b) = 1
    b = -(-2) / 1 = 2
"""

from enum import Enum

from acvm.errors import DivisionByZero, UnsatisfiedConstraint


class OpcodeStatus(Enum):
    """opcode 하나를 적용한 결과."""

    SATISFIED = "satisfied"   # 이미 모든 값이 정해져 있고 제약을 만족함
    SOLVED = "solved"         # 새 witness 값을 맵에 기록함
    PENDING = "pending"       # 아직 풀 수 없음 (다른 opcode를 기다림)

    @property
    def is_resolved(self):
        return self is not OpcodeStatus.PENDING


def evaluate_gate(gate, witness_map):
    """게이트 다항식의 값을 계산한다.

    Returns:
        FieldElement 또는 None (참조된 witness 중 하나라도 모르면)
    """
    total = gate.constant
    for coeff, wi, wj in gate.mul_terms:
        vi, vj = witness_map.get(wi), witness_map.get(wj)
        if vi is None or vj is None:
            return None
        total = total + coeff * vi * vj
    for coeff, w in gate.linear_terms:
        v = witness_map.get(w)
        if v is None:
            return None
        total = total + coeff * v
    return total


def _partial_evaluate(gate, witness_map):
    """알려진 값을 대입해 게이트를 부분 평가한다.

    Returns:
        (known, linear, quadratic)
          known: 알려진 항들의 합 (상수 포함)
          linear: {미지 witness: 누적 계수}
          quadratic: 미지수끼리 곱해진 항이 남아 있으면 True
    """
    field = type(gate.constant)
    known = gate.constant
    linear = {}
    quadratic = False

    for coeff, wi, wj in gate.mul_terms:
        if coeff.is_zero():
            continue
        vi, vj = witness_map.get(wi), witness_map.get(wj)
        if vi is not None and vj is not None:
            known = known + coeff * vi * vj
        elif vi is not None:
            linear[wj] = linear.get(wj, field(0)) + coeff * vi
        elif vj is not None:
            linear[wi] = linear.get(wi, field(0)) + coeff * vj
        else:
            quadratic = True
            linear.setdefault(wi, field(0))
            linear.setdefault(wj, field(0))

    for coeff, w in gate.linear_terms:
        v = witness_map.get(w)
        if v is not None:
            known = known + coeff * v
        else:
            linear[w] = linear.get(w, field(0)) + coeff

    return known, linear, quadratic


def solve_gate(gate, witness_map):
    """게이트 하나를 평가하거나 대수적으로 푼다.

    풀린 값은 witness_map에 직접 기록된다.

    Returns:
        OpcodeStatus

    Raises:
        UnsatisfiedConstraint: 완전히 할당된 게이트가 0이 아닐 때
        DivisionByZero: 유일한 미지수의 계수가 0일 때
    """
    known, linear, quadratic = _partial_evaluate(gate, witness_map)

    if quadratic or len(linear) > 1:
        return OpcodeStatus.PENDING

    if not linear:
        if not known.is_zero():
            raise UnsatisfiedConstraint(
                f"게이트 값이 0이 아닙니다: {int(known)}", value=known
            )
        return OpcodeStatus.SATISFIED

    (witness, coeff), = linear.items()
    if coeff.is_zero():
        raise DivisionByZero(f"{witness}의 계수가 0이라 게이트를 풀 수 없습니다")
    witness_map.insert(witness, -known / coeff)
    return OpcodeStatus.SOLVED
