"""
ACVM 오류 분류 (Error Taxonomy)
================================

풀이 세션에서 발생할 수 있는 모든 실패를 정의한다.
어떤 실패든 세션 전체를 즉시 중단시키며, 내부에서 재시도하지 않는다.

  | 오류                   | 의미                                          |
  |------------------------|-----------------------------------------------|
  | MalformedCircuit       | 회로 구조가 잘못됨 (범위 밖 witness 등)       |
  | UnsatisfiedConstraint  | 모든 값이 알려졌는데 게이트가 0이 아님         |
  | ConflictingAssignment  | 이미 할당된 witness에 다른 값을 쓰려 함        |
  | RangeExceeded          | 값이 요구된 비트 폭을 넘음                     |
  | DivisionByZero         | 0으로 나누기 (역원 없음)                       |
  | UnderConstrained       | 주어진 입력으로 회로가 결정되지 않음           |
  | Timeout                | 호출자가 지정한 반복/시간 예산 초과            |

디버깅을 위해 각 오류는 문제가 된 opcode의 위치(opcode_index)를 가진다.
"""


class SolverError(Exception):
    """모든 풀이 오류의 기반 클래스.

    속성:
        message: 사람이 읽을 수 있는 설명
        opcode_index: 오류를 일으킨 opcode의 회로 내 위치 (알 수 없으면 None)
    """

    def __init__(self, message, opcode_index=None):
        super().__init__(message)
        self.message = message
        self.opcode_index = opcode_index

    def at_opcode(self, index):
        """opcode 위치를 기록한다. 이미 기록된 위치는 덮어쓰지 않는다."""
        if self.opcode_index is None:
            self.opcode_index = index
        return self

    def __str__(self):
        if self.opcode_index is None:
            return self.message
        return f"{self.message} (opcode #{self.opcode_index})"


class MalformedCircuit(SolverError):
    """회로 구조 검증 실패."""


class UnsatisfiedConstraint(SolverError):
    """완전히 할당된 게이트가 0으로 평가되지 않음."""

    def __init__(self, message, value=None, opcode_index=None):
        super().__init__(message, opcode_index)
        self.value = value


class ConflictingAssignment(SolverError):
    """같은 witness에 서로 다른 두 값이 할당됨."""

    def __init__(self, witness, existing, new, opcode_index=None):
        super().__init__(
            f"{witness}에 이미 {int(existing)}이(가) 할당되어 있어 "
            f"{int(new)}을(를) 쓸 수 없습니다",
            opcode_index,
        )
        self.witness = witness
        self.existing = existing
        self.new = new


class RangeExceeded(SolverError):
    """값이 num_bits 비트로 표현되지 않음."""

    def __init__(self, value, num_bits, opcode_index=None):
        super().__init__(
            f"값 {int(value)}은(는) {num_bits}비트를 초과합니다", opcode_index
        )
        self.value = value
        self.num_bits = num_bits


class DivisionByZero(SolverError, ZeroDivisionError):
    """덧셈 항등원(0)의 역원을 구하려 함."""


class UnderConstrained(SolverError):
    """고정점에 도달했지만 풀리지 않은 opcode 또는 witness가 남음.

    속성:
        unresolved: 풀리지 않은 opcode 위치 리스트
        missing: 값이 정해지지 않은 witness 리스트
    """

    def __init__(self, message, unresolved=(), missing=(), opcode_index=None):
        super().__init__(message, opcode_index)
        self.unresolved = list(unresolved)
        self.missing = list(missing)


class Timeout(SolverError):
    """호출자가 지정한 sweep 횟수 또는 시간 예산을 초과함."""

    def __init__(self, message, sweeps=0, opcode_index=None):
        super().__init__(message, opcode_index)
        self.sweeps = sweeps


class ConfigError(ValueError):
    """잘못된 설정 값 (알 수 없는 체 이름, 음수 예산 등)."""
