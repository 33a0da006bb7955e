"""
풀이 드라이버 (Solve Driver)
=============================

Circuit과 초기(부분) WitnessMap을 받아, 더 이상 진전이 없을 때까지
게이트 풀이기와 블랙박스 라이브러리를 반복 적용한다 (고정점 반복).

**종료 결과**:
  - 모든 opcode가 해결되고 모든 witness가 정해짐 → 완성된 WitnessMap 반환
  - 진전 없이 풀리지 않은 opcode/witness가 남음   → UnderConstrained
  - 어떤 opcode 적용이든 실패                     → 그 오류를 즉시 전파
    (UnsatisfiedConstraint, ConflictingAssignment, RangeExceeded,
     DivisionByZero, MalformedCircuit, 모두 opcode 위치 포함)
  - sweep 사이에 확인한 예산 초과                 → Timeout

**두 가지 전략** (관찰 가능한 결과는 동일):

  "sweep": 매 sweep마다 남은 opcode 전체를 순서대로 다시 본다.

      sweep 1:  [0] [1] [2] [3] [4]      ← 0, 2, 3 해결
      sweep 2:  [1] [4]                  ← 1 해결
      sweep 3:  [4]                      ← 진전 없음 → 종료

  "graph": witness → 의존 opcode 색인을 만들어, 방금 값이 정해진 witness에
  의존하는 opcode만 다시 본다. 같은 sweep 안에서 뒤쪽 opcode는 현재 sweep에서,
  앞쪽 opcode는 다음 sweep에서 처리하므로 평가 순서가 "sweep"과 똑같다.
  따라서 풀린 값, 발생하는 오류와 그 위치, sweep 수가 모두 일치한다.

풀이는 단일 스레드·동기식이며, 호출자의 초기 맵은 변경하지 않는다.

사용 예시:
    >>> witness = solve(circuit, {0: 1})
    >>> witness[1]
"""

import heapq
import logging
import time

from acvm.blackbox import evaluate_call, solve_blackbox
from acvm.circuit import ArithmeticGate
from acvm.config import SolverConfig
from acvm.errors import ConfigError, MalformedCircuit, SolverError, Timeout, UnderConstrained
from acvm.gate_solver import OpcodeStatus, evaluate_gate, solve_gate
from acvm.witness_map import WitnessMap

logger = logging.getLogger(__name__)


def apply_opcode(opcode, witness_map):
    """opcode 하나를 적용한다 (종류별 디스패치)."""
    if isinstance(opcode, ArithmeticGate):
        return solve_gate(opcode, witness_map)
    return solve_blackbox(opcode, witness_map)


class _Budget:
    """호출자가 지정한 sweep/시간 예산."""

    def __init__(self, max_sweeps, time_budget):
        self.max_sweeps = max_sweeps
        self.time_budget = time_budget
        self.started = time.monotonic()

    def check(self, sweeps):
        if self.max_sweeps is not None and sweeps >= self.max_sweeps:
            raise Timeout(f"sweep 예산 {self.max_sweeps}회를 초과했습니다", sweeps=sweeps)
        if self.time_budget is not None:
            elapsed = time.monotonic() - self.started
            if elapsed > self.time_budget:
                raise Timeout(
                    f"시간 예산 {self.time_budget}초를 초과했습니다 ({elapsed:.3f}초 경과)",
                    sweeps=sweeps,
                )


class Solver:
    """하나의 Circuit에 대한 witness 풀이기.

    Circuit은 읽기 전용이므로 한 Solver로 여러 초기 맵을 풀 수 있다.
    세션마다 새 WitnessMap을 만든다.

    Args:
        circuit: 풀 Circuit
        config: SolverConfig (None이면 기본값)

    Raises:
        ConfigError: config.field가 회로의 체와 다를 때
    """

    def __init__(self, circuit, config=None):
        self.circuit = circuit
        self.config = config if config is not None else SolverConfig(field=circuit.field)
        if self.config.field is not None and self.config.field is not circuit.field:
            raise ConfigError(
                f"설정의 체({self.config.field.name})가 회로의 체({circuit.field.name})와 다릅니다"
            )
        self._dependents = None
        self.sweeps = 0

    # ─────────────────────────────────────────────────────────────────
    # 공개 인터페이스
    # ─────────────────────────────────────────────────────────────────

    def solve(self, initial_witness=None):
        """모든 witness를 구한다.

        Args:
            initial_witness: WitnessMap 또는 {인덱스: 값} dict (알려진 입력)

        Returns:
            WitnessMap: 완전히 할당된 새 맵

        Raises:
            SolverError 하위 클래스 (모듈 설명 참고)
        """
        witness_map = self._initial_map(initial_witness)
        budget = _Budget(self.config.max_sweeps, self.config.time_budget)

        if self.config.strategy == "sweep":
            unresolved = self._solve_sweep(witness_map, budget)
        else:
            unresolved = self._solve_graph(witness_map, budget)

        self._finish(witness_map, unresolved)
        return witness_map

    # ─────────────────────────────────────────────────────────────────
    # 내부 구현
    # ─────────────────────────────────────────────────────────────────

    def _initial_map(self, initial_witness):
        circuit = self.circuit
        if isinstance(initial_witness, WitnessMap):
            if initial_witness.field is not circuit.field:
                raise MalformedCircuit(
                    f"초기 witness 맵의 체({initial_witness.field.name})가 "
                    f"회로의 체({circuit.field.name})와 다릅니다"
                )
            witness_map = initial_witness.copy()
        else:
            witness_map = WitnessMap(circuit.field, initial_witness)

        for witness in witness_map:
            if witness.index >= circuit.num_witnesses:
                raise MalformedCircuit(
                    f"초기 입력 {witness}이(가) 선언된 witness 수 "
                    f"{circuit.num_witnesses}를 벗어납니다"
                )
        return witness_map

    def _step(self, index, witness_map):
        try:
            return apply_opcode(self.circuit[index], witness_map)
        except SolverError as err:
            logger.debug("opcode #%d 실패: %s", index, err.message)
            raise err.at_opcode(index)

    def _solve_sweep(self, witness_map, budget):
        pending = list(range(len(self.circuit)))
        self.sweeps = 0
        while True:
            self.sweeps += 1
            still_pending = []
            for index in pending:
                if self._step(index, witness_map) is OpcodeStatus.PENDING:
                    still_pending.append(index)
            progress = len(still_pending) < len(pending)
            pending = still_pending
            logger.debug(
                "sweep %d: 남은 opcode %d개, 할당된 witness %d개",
                self.sweeps, len(pending), len(witness_map),
            )
            if not pending or not progress:
                return pending
            budget.check(self.sweeps)

    def _dependency_index(self):
        if self._dependents is None:
            dependents = {}
            for index, opcode in enumerate(self.circuit):
                for witness in opcode.witnesses():
                    dependents.setdefault(witness, []).append(index)
            self._dependents = dependents
        return self._dependents

    def _solve_graph(self, witness_map, budget):
        dependents = self._dependency_index()
        unresolved = set(range(len(self.circuit)))
        current = list(range(len(self.circuit)))
        queued = set(current)
        self.sweeps = 0

        while True:
            self.sweeps += 1
            progress = False
            next_sweep = set()
            while current:
                index = heapq.heappop(current)
                queued.discard(index)
                unknown_before = [
                    w for w in self.circuit[index].witnesses() if w not in witness_map
                ]
                status = self._step(index, witness_map)
                if status is OpcodeStatus.PENDING:
                    continue
                unresolved.discard(index)
                progress = True
                for witness in unknown_before:
                    if witness not in witness_map:
                        continue
                    for dependent in dependents.get(witness, ()):
                        if dependent not in unresolved:
                            continue
                        if dependent > index:
                            if dependent not in queued:
                                heapq.heappush(current, dependent)
                                queued.add(dependent)
                        else:
                            next_sweep.add(dependent)

            logger.debug(
                "sweep %d: 남은 opcode %d개, 할당된 witness %d개",
                self.sweeps, len(unresolved), len(witness_map),
            )
            if not unresolved or not progress:
                return sorted(unresolved)
            budget.check(self.sweeps)
            current = sorted(next_sweep)
            queued = set(current)

    def _finish(self, witness_map, unresolved):
        num_witnesses = self.circuit.num_witnesses
        if unresolved:
            raise UnderConstrained(
                f"풀 수 없는 opcode가 {len(unresolved)}개 남았습니다: {unresolved}",
                unresolved=unresolved,
                missing=witness_map.missing(num_witnesses),
                opcode_index=unresolved[0],
            )
        missing = witness_map.missing(num_witnesses)
        if missing:
            raise UnderConstrained(
                f"값이 정해지지 않은 witness가 {len(missing)}개 남았습니다: "
                f"{[w.index for w in missing]}",
                missing=missing,
            )
        logger.info(
            "풀이 완료: opcode %d개, witness %d개, sweep %d회",
            len(self.circuit), len(witness_map), self.sweeps,
        )


def solve(circuit, initial_witness=None, config=None):
    """Circuit의 witness를 구한다 (Solver의 단축 함수)."""
    return Solver(circuit, config).solve(initial_witness)


# ─────────────────────────────────────────────────────────────────────
# 결과 검사
# ─────────────────────────────────────────────────────────────────────

def find_unsatisfied_opcodes(circuit, witness_map):
    """완성된 맵을 회로에 대입해 만족하지 않는 opcode 위치를 찾는다.

    산술 게이트는 0으로 평가되어야 하고, 블랙박스 호출은 출력이
    입력으로부터 다시 계산한 값과 같아야 한다.
    값이 빠진 opcode나 평가 중 실패한 opcode도 불만족으로 센다.
    """
    unsatisfied = []
    for index, opcode in enumerate(circuit):
        if isinstance(opcode, ArithmeticGate):
            value = evaluate_gate(opcode, witness_map)
            if value is None or not value.is_zero():
                unsatisfied.append(index)
            continue
        try:
            expected = evaluate_call(opcode, witness_map)
        except SolverError:
            unsatisfied.append(index)
            continue
        if expected is None or any(
            witness_map.get(w) is None or witness_map.get(w) != v
            for w, v in zip(opcode.outputs, expected)
        ):
            unsatisfied.append(index)
    return unsatisfied


def is_satisfied(circuit, witness_map):
    """모든 opcode를 만족하고 모든 witness가 할당되었는가."""
    if witness_map.missing(circuit.num_witnesses):
        return False
    return not find_unsatisfied_opcodes(circuit, witness_map)


__all__ = [
    "Solver",
    "apply_opcode",
    "find_unsatisfied_opcodes",
    "is_satisfied",
    "solve",
]
