"""
Witness 할당 맵 (WitnessMap)
============================

풀이 세션의 유일한 가변 상태. Witness → FieldElement 매핑이며
세션 동안 단조 증가한다:
  - 한 번 할당된 값은 제거되지 않는다
  - 같은 값을 다시 쓰는 것은 아무 일도 하지 않는다
  - 다른 값을 쓰려고 하면 ConflictingAssignment

키는 Witness 또는 정수 인덱스로 줄 수 있고,
값은 FieldElement 또는 정수(맵의 체로 변환)로 줄 수 있다.
"""

from acvm.circuit import Witness
from acvm.errors import ConflictingAssignment
from acvm.field import DEFAULT_FIELD


class WitnessMap:
    """단조 증가하는 witness 부분 할당.

    Args:
        field: 값이 속한 체 클래스
        values: 초기 할당 (dict 또는 (witness, 값) 쌍의 iterable)
    """

    def __init__(self, field=DEFAULT_FIELD, values=None):
        self.field = field
        self._values = {}
        if values is not None:
            items = values.items() if hasattr(values, "items") else values
            for witness, value in items:
                self.insert(witness, value)

    def _coerce(self, value):
        if isinstance(value, self.field):
            return value
        if isinstance(value, bool):
            return self.field(int(value))
        # 다른 체의 원소는 FieldElement.__init__이 TypeError로 거부한다
        return self.field(value)

    def insert(self, witness, value):
        """witness에 value를 할당한다.

        Returns:
            bool: 새로 할당되었으면 True, 같은 값이 이미 있었으면 False

        Raises:
            ConflictingAssignment: 다른 값이 이미 할당되어 있을 때
        """
        witness = Witness(witness)
        value = self._coerce(value)
        existing = self._values.get(witness)
        if existing is None:
            self._values[witness] = value
            return True
        if existing != value:
            raise ConflictingAssignment(witness, existing, value)
        return False

    def get(self, witness, default=None):
        return self._values.get(Witness(witness), default)

    def __getitem__(self, witness):
        return self._values[Witness(witness)]

    def __contains__(self, witness):
        try:
            return Witness(witness) in self._values
        except (TypeError, ValueError):
            return False

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(sorted(self._values))

    def items(self):
        return [(w, self._values[w]) for w in sorted(self._values)]

    def values(self):
        return [self._values[w] for w in sorted(self._values)]

    def missing(self, num_witnesses):
        """0 ~ num_witnesses-1 중 아직 할당되지 않은 witness 리스트."""
        return [Witness(i) for i in range(num_witnesses) if Witness(i) not in self._values]

    def copy(self):
        clone = WitnessMap(self.field)
        clone._values = dict(self._values)
        return clone

    def to_dict(self):
        """{인덱스: 정수 값} 형태로 변환한다."""
        return {w.index: int(v) for w, v in self.items()}

    def __eq__(self, other):
        if isinstance(other, WitnessMap):
            return self.field is other.field and self._values == other._values
        if isinstance(other, dict):
            return self.to_dict() == {Witness(k).index: int(self._coerce(v)) for k, v in other.items()}
        return NotImplemented

    def __repr__(self):
        body = ", ".join(f"{w.index}: {int(v)}" for w, v in self.items())
        return f"WitnessMap({self.field.name}, {{{body}}})"
