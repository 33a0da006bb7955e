"""
회로 빌더 (Circuit Builder)
============================

프런트엔드가 코드를 낮추듯(lowering) witness를 할당하고 opcode를 차례로
덧붙여 불변 Circuit을 만든다.

**게이트 유형별 형태** (모두 "= 0" 형태로 저장):
  | 메서드                    | 제약             | 저장 형태                  |
  |---------------------------|------------------|----------------------------|
  | add_multiplication_gate   | a · b = c        | 1·a·b − c = 0              |
  | add_addition_gate         | a + b = c        | a + b − c = 0              |
  | add_constant_gate         | a + k = c        | a − c + k = 0              |
  | add_gate                  | 임의의 차수 ≤ 2  | Σ c·wi·wj + Σ c·w + k = 0  |

**예제 회로**: x³ + x + 5 = 35

  | 게이트 | 유형  | 제약                | 결과 witness |
  |--------|-------|---------------------|--------------|
  | 0      | mul   | x · x = x²          | w1           |
  | 1      | mul   | x² · x = x³         | w2           |
  | 2      | add   | x³ + x = t          | w3           |
  | 3      | add+c | t + 5 = out         | w4           |
  | 4      | const | out = 35            | -            |

사용 예시:
    >>> builder = CircuitBuilder()
    >>> x = builder.new_witness()
    >>> y = builder.new_witness()
    >>> builder.add_multiplication_gate(x, x, y)
    >>> circuit = builder.build()
"""

from acvm.circuit import (
    ArithmeticGate,
    BlackBoxFunc,
    BlackBoxFuncCall,
    Circuit,
    FunctionInput,
    LinearCombination,
    Witness,
)
from acvm.field import DEFAULT_FIELD


class CircuitBuilder:
    """Circuit을 한 opcode씩 조립한다.

    속성:
        field: 회로의 체 클래스
        opcodes: 지금까지 추가된 opcode 리스트
        num_witnesses: 지금까지 할당된 witness 수
    """

    def __init__(self, field=DEFAULT_FIELD):
        self.field = field
        self.opcodes = []
        self.num_witnesses = 0
        self.public_inputs = set()

    def _value(self, value):
        return value if isinstance(value, self.field) else self.field(value)

    def _append(self, opcode):
        self.opcodes.append(opcode)
        return len(self.opcodes) - 1

    # ─────────────────────────────────────────────────────────────────
    # witness 할당
    # ─────────────────────────────────────────────────────────────────

    def new_witness(self):
        """새 witness를 할당한다."""
        witness = Witness(self.num_witnesses)
        self.num_witnesses += 1
        return witness

    def new_witnesses(self, count):
        return [self.new_witness() for _ in range(count)]

    def mark_public(self, *witnesses):
        """witness를 공개 입력으로 표시한다."""
        for witness in witnesses:
            self.public_inputs.add(Witness(witness))

    # ─────────────────────────────────────────────────────────────────
    # 산술 게이트
    # ─────────────────────────────────────────────────────────────────

    def add_gate(self, mul_terms=(), linear_terms=(), constant=0):
        """일반 산술 게이트: Σ c·wi·wj + Σ c·w + constant = 0.

        Args:
            mul_terms: (계수, wi, wj) 튜플 리스트
            linear_terms: (계수, w) 튜플 리스트
            constant: 상수 항

        Returns:
            int: 추가된 opcode의 위치
        """
        field = self.field
        gate = ArithmeticGate(
            mul_terms=[(self._value(c), wi, wj) for c, wi, wj in mul_terms],
            linear_combination=LinearCombination(
                [(self._value(c), w) for c, w in linear_terms],
                self._value(constant),
                field=field,
            ),
            field=field,
        )
        return self._append(gate)

    def add_multiplication_gate(self, a, b, c):
        """곱셈 게이트: a · b = c."""
        return self.add_gate(mul_terms=[(1, a, b)], linear_terms=[(-1, c)])

    def add_addition_gate(self, a, b, c):
        """덧셈 게이트: a + b = c."""
        return self.add_gate(linear_terms=[(1, a), (1, b), (-1, c)])

    def add_constant_gate(self, a, constant, c=None):
        """상수 게이트.

        c가 주어지면 a + constant = c, 없으면 a = constant 를 강제한다.
        """
        if c is None:
            return self.add_gate(linear_terms=[(1, a)], constant=-self._value(constant))
        return self.add_gate(linear_terms=[(1, a), (-1, c)], constant=constant)

    # ─────────────────────────────────────────────────────────────────
    # 블랙박스 호출
    # ─────────────────────────────────────────────────────────────────

    def add_blackbox(self, name, inputs, outputs=()):
        """블랙박스 호출을 추가한다.

        Args:
            name: BlackBoxFunc 또는 그 문자열 값
            inputs: FunctionInput 또는 (source, num_bits) 튜플 리스트.
                source가 int면 witness 인덱스, 체 원소면 상수로 본다.
            outputs: 출력 witness 리스트
        """
        normalized = [
            i if isinstance(i, FunctionInput) else FunctionInput(*i) for i in inputs
        ]
        return self._append(BlackBoxFuncCall(name, normalized, outputs))

    def add_range(self, witness, num_bits):
        """witness < 2^num_bits 범위 검사."""
        return self.add_blackbox(BlackBoxFunc.RANGE, [(witness, num_bits)])

    def add_to_bits(self, witness, num_bits):
        """witness를 num_bits개의 비트 witness로 분해한다 (MSB 먼저).

        Returns:
            list[Witness]: 새로 할당된 비트 witness
        """
        bits = self.new_witnesses(num_bits)
        self.add_blackbox(BlackBoxFunc.TO_BITS, [(witness, num_bits)], bits)
        return bits

    def add_to_bytes(self, witness, num_bytes):
        """witness를 num_bytes개의 바이트 witness로 분해한다 (big-endian)."""
        limbs = self.new_witnesses(num_bytes)
        self.add_blackbox(BlackBoxFunc.TO_BYTES, [(witness, 8 * num_bytes)], limbs)
        return limbs

    def add_pedersen(self, witnesses, num_bits=None):
        """witness들의 Pedersen 해시를 새 witness로 출력한다."""
        num_bits = self.field.max_num_bits() if num_bits is None else num_bits
        output = self.new_witness()
        self.add_blackbox(BlackBoxFunc.PEDERSEN, [(w, num_bits) for w in witnesses], [output])
        return output

    def build(self):
        """불변 Circuit을 만든다 (구조 검증 포함)."""
        return Circuit(
            self.opcodes,
            self.num_witnesses,
            public_inputs=sorted(self.public_inputs),
            field=self.field,
        )

    # ─────────────────────────────────────────────────────────────────
    # 예제 회로
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def x3_plus_x_plus_5_eq_35(field=DEFAULT_FIELD):
        """예제 회로: x³ + x + 5 = 35 (해는 x = 3).

        witness 배치:
          w0 = x (입력), w1 = x², w2 = x³, w3 = x³ + x, w4 = 35 (공개)

        Returns:
            Circuit
        """
        builder = CircuitBuilder(field)
        x, x2, x3, t, out = builder.new_witnesses(5)

        # 게이트 0: x · x = x²
        builder.add_multiplication_gate(x, x, x2)
        # 게이트 1: x² · x = x³
        builder.add_multiplication_gate(x2, x, x3)
        # 게이트 2: x³ + x = t
        builder.add_addition_gate(x3, x, t)
        # 게이트 3: t + 5 = out
        builder.add_constant_gate(t, 5, out)
        # 게이트 4: out = 35
        builder.add_constant_gate(out, 35)

        builder.mark_public(out)
        return builder.build()
