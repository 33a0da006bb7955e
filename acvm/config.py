"""
풀이기 설정 (Solver Configuration)
===================================

설정은 전역 상태가 아니라 solve()에 명시적으로 넘기는 값이다.

  | 항목         | 환경 변수              | 기본값   | 의미                              |
  |--------------|------------------------|----------|-----------------------------------|
  | field        | ACVM_FIELD             | None     | 회로의 체 확인용 (None = 확인 안 함) |
  | strategy     | ACVM_SOLVER_STRATEGY   | "graph"  | "graph" 또는 "sweep"              |
  | max_sweeps   | ACVM_MAX_SWEEPS        | None     | sweep 횟수 상한 (None = 무제한)    |
  | time_budget  | ACVM_TIME_BUDGET       | None     | 초 단위 시간 예산                  |

예산은 sweep 사이에서만 확인하며, 초과하면 Timeout이 발생한다.
field를 지정했는데 회로의 체와 다르면 Solver가 ConfigError를 낸다.

사용 예시:
    >>> config = SolverConfig(strategy="sweep", max_sweeps=100)
    >>> config = SolverConfig.from_env()
"""

import os

from acvm.errors import ConfigError
from acvm.field import get_field

STRATEGIES = ("graph", "sweep")

ENV_FIELD = "ACVM_FIELD"
ENV_STRATEGY = "ACVM_SOLVER_STRATEGY"
ENV_MAX_SWEEPS = "ACVM_MAX_SWEEPS"
ENV_TIME_BUDGET = "ACVM_TIME_BUDGET"


class SolverConfig:
    """풀이기 설정 값.

    Raises:
        ConfigError: 값이 유효하지 않을 때
    """

    def __init__(self, field=None, strategy="graph", max_sweeps=None, time_budget=None):
        self.field = None if field is None else get_field(field)
        if strategy not in STRATEGIES:
            raise ConfigError(f"알 수 없는 풀이 전략입니다: {strategy!r} (가능한 값: {STRATEGIES})")
        self.strategy = strategy
        if max_sweeps is not None and (isinstance(max_sweeps, bool)
                                       or not isinstance(max_sweeps, int) or max_sweeps < 1):
            raise ConfigError(f"max_sweeps는 1 이상의 정수여야 합니다: {max_sweeps!r}")
        self.max_sweeps = max_sweeps
        if time_budget is not None and time_budget <= 0:
            raise ConfigError(f"time_budget은 양수여야 합니다: {time_budget!r}")
        self.time_budget = time_budget

    @classmethod
    def from_env(cls, environ=None):
        """환경 변수에서 설정을 읽는다. 없는 항목은 기본값을 쓴다."""
        environ = os.environ if environ is None else environ
        kwargs = {}
        if ENV_FIELD in environ:
            kwargs["field"] = environ[ENV_FIELD]
        if ENV_STRATEGY in environ:
            kwargs["strategy"] = environ[ENV_STRATEGY]
        try:
            if ENV_MAX_SWEEPS in environ:
                kwargs["max_sweeps"] = int(environ[ENV_MAX_SWEEPS])
            if ENV_TIME_BUDGET in environ:
                kwargs["time_budget"] = float(environ[ENV_TIME_BUDGET])
        except ValueError as exc:
            raise ConfigError(f"환경 변수 값을 숫자로 해석할 수 없습니다: {exc}") from exc
        return cls(**kwargs)

    def __repr__(self):
        field = None if self.field is None else self.field.name
        return (
            f"SolverConfig(field={field!r}, strategy={self.strategy!r}, "
            f"max_sweeps={self.max_sweeps!r}, time_budget={self.time_budget!r})"
        )
