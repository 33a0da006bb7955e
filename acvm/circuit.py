"""
ACVM 회로 표현 (Circuit Representation)
========================================

외부 컴파일러가 한 번 만들어 내는 불변(immutable) 구조 기술.
풀이 중에는 절대 변경되지 않으므로 여러 풀이 세션이 같은 Circuit을
안전하게 공유할 수 있다.

**구성 요소**:
  - Witness: 알려지지 않은 스칼라를 가리키는 불투명한 인덱스 핸들
  - LinearCombination: (계수, witness) 쌍의 순서 있는 리스트 + 상수
  - ArithmeticGate: 차수 ≤ 2 다항식 제약

        Σ c_k · w_i · w_j  +  Σ c_l · w_l  +  const  =  0

  - BlackBoxFuncCall: 고정된 종류(BlackBoxFunc)의 원시 연산 호출
  - Circuit: opcode(ArithmeticGate | BlackBoxFuncCall)의 순서 있는 리스트,
             전체 witness 수, 공개 입력 witness 집합

**구조 검증** (Circuit 생성 시 한 번 수행):
  - 참조된 witness 인덱스 ≥ num_witnesses 이면 MalformedCircuit
  - 블랙박스 호출의 입력/출력 개수가 종류별 규칙과 다르면 MalformedCircuit
  - 계수/상수가 회로의 체와 다르면 MalformedCircuit

사용 예시:
    >>> a, b = Witness(0), Witness(1)
    >>> gate = ArithmeticGate(linear_combination=LinearCombination(
    ...     [(F(1), a), (F(1), b)], F(-3)))     # a + b - 3 = 0
    >>> circuit = Circuit([gate], num_witnesses=2, field=F)
"""

import functools
from enum import Enum

from acvm.errors import MalformedCircuit
from acvm.field import DEFAULT_FIELD, FieldElement


@functools.total_ordering
class Witness:
    """회로의 미지 스칼라를 가리키는 인덱스 핸들.

    int나 FieldElement와 섞이지 않도록 별도의 타입으로 둔다.
    """

    __slots__ = ("index",)

    def __init__(self, index):
        if isinstance(index, Witness):
            index = index.index
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"witness 인덱스는 정수여야 합니다: {index!r}")
        if index < 0:
            raise ValueError(f"witness 인덱스는 음수일 수 없습니다: {index}")
        self.index = index

    def __eq__(self, other):
        if isinstance(other, Witness):
            return self.index == other.index
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, Witness):
            return self.index < other.index
        return NotImplemented

    def __hash__(self):
        return hash(("witness", self.index))

    def __repr__(self):
        return f"Witness({self.index})"


class LinearCombination:
    """선형 결합: Σ c_l · w_l + constant.

    속성:
        terms: (계수, Witness) 튜플의 튜플
        constant: 상수 항
    """

    def __init__(self, terms=(), constant=None, field=DEFAULT_FIELD):
        self.terms = tuple((coeff, Witness(w)) for coeff, w in terms)
        if constant is None:
            constant = field(0)
        self.constant = constant

    def witnesses(self):
        return {w for _, w in self.terms}

    def __eq__(self, other):
        if not isinstance(other, LinearCombination):
            return NotImplemented
        return self.terms == other.terms and self.constant == other.constant

    def __hash__(self):
        return hash((self.terms, self.constant))

    def __repr__(self):
        return f"LinearCombination({list(self.terms)}, {self.constant!r})"


class ArithmeticGate:
    """차수 ≤ 2 다항식 제약 게이트.

    게이트 방정식: Σ c·w_i·w_j + linear_combination = 0

    Args:
        mul_terms: (계수, w_i, w_j) 튜플 리스트 (이차 항)
        linear_combination: LinearCombination (선형 항 + 상수)
    """

    def __init__(self, mul_terms=(), linear_combination=None, field=DEFAULT_FIELD):
        self.mul_terms = tuple(
            (coeff, Witness(wi), Witness(wj)) for coeff, wi, wj in mul_terms
        )
        if linear_combination is None:
            linear_combination = LinearCombination(field=field)
        self.linear_combination = linear_combination

    @property
    def linear_terms(self):
        return self.linear_combination.terms

    @property
    def constant(self):
        return self.linear_combination.constant

    def witnesses(self):
        """게이트가 참조하는 모든 witness 집합."""
        found = self.linear_combination.witnesses()
        for _, wi, wj in self.mul_terms:
            found.add(wi)
            found.add(wj)
        return found

    def coefficients(self):
        for coeff, _, _ in self.mul_terms:
            yield coeff
        for coeff, _ in self.linear_terms:
            yield coeff
        yield self.constant

    def __eq__(self, other):
        if not isinstance(other, ArithmeticGate):
            return NotImplemented
        return (
            self.mul_terms == other.mul_terms
            and self.linear_combination == other.linear_combination
        )

    def __hash__(self):
        return hash((self.mul_terms, self.linear_combination))

    def __repr__(self):
        return f"ArithmeticGate(mul_terms={list(self.mul_terms)}, {self.linear_combination!r})"


class BlackBoxFunc(Enum):
    """블랙박스 함수 종류 (닫힌 집합).

    새 종류는 런타임 플러그인으로 추가되지 않는다.
    평가기 테이블(acvm.blackbox)은 이 열거형 전체를 빠짐없이 다룬다.
    """

    RANGE = "range"
    AND = "and"
    XOR = "xor"
    TO_BITS = "to_bits"
    TO_BYTES = "to_bytes"
    SHA256 = "sha256"
    BLAKE2S = "blake2s"
    HASH_TO_FIELD = "hash_to_field"
    PEDERSEN = "pedersen"
    ECDSA_SECP256K1 = "ecdsa_secp256k1"
    FIXED_BASE_SCALAR_MUL = "fixed_base_scalar_mul"
    MERKLE_MEMBERSHIP = "merkle_membership"


# ECDSA 입력 배치: 공개키 x(32) | 공개키 y(32) | 서명 r||s(64) | 메시지 해시(≥1)
ECDSA_PUBKEY_BYTES = 32
ECDSA_SIGNATURE_BYTES = 64
ECDSA_MIN_INPUTS = 2 * ECDSA_PUBKEY_BYTES + ECDSA_SIGNATURE_BYTES + 1

DIGEST_BYTES = 32

# 종류별 (최소 입력 수, 최대 입력 수, 최소 출력 수, 최대 출력 수); None은 제한 없음
BLACKBOX_ARITY = {
    BlackBoxFunc.RANGE: (1, 1, 0, 0),
    BlackBoxFunc.AND: (2, 2, 1, 1),
    BlackBoxFunc.XOR: (2, 2, 1, 1),
    BlackBoxFunc.TO_BITS: (1, 1, 1, None),
    BlackBoxFunc.TO_BYTES: (1, 1, 1, None),
    BlackBoxFunc.SHA256: (0, None, DIGEST_BYTES, DIGEST_BYTES),
    BlackBoxFunc.BLAKE2S: (0, None, DIGEST_BYTES, DIGEST_BYTES),
    BlackBoxFunc.HASH_TO_FIELD: (0, None, 1, 1),
    BlackBoxFunc.PEDERSEN: (1, None, 1, 1),
    BlackBoxFunc.ECDSA_SECP256K1: (ECDSA_MIN_INPUTS, None, 1, 1),
    BlackBoxFunc.FIXED_BASE_SCALAR_MUL: (1, 1, 2, 2),
    BlackBoxFunc.MERKLE_MEMBERSHIP: (3, None, 1, 1),
}


class FunctionInput:
    """블랙박스 호출의 입력 하나.

    source는 Witness 또는 상수 FieldElement이고,
    num_bits는 입력 값이 차지하는 비트 폭이다 (바이트 입력이면 8).
    """

    def __init__(self, source, num_bits):
        if isinstance(source, int) and not isinstance(source, bool):
            source = Witness(source)
        self.source = source
        self.num_bits = num_bits

    @property
    def witness(self):
        """입력이 witness면 그 Witness, 상수면 None."""
        return self.source if isinstance(self.source, Witness) else None

    @property
    def is_constant(self):
        return not isinstance(self.source, Witness)

    def __eq__(self, other):
        if not isinstance(other, FunctionInput):
            return NotImplemented
        return (
            type(self.source) is type(other.source)
            and self.source == other.source
            and self.num_bits == other.num_bits
        )

    def __hash__(self):
        return hash((self.source, self.num_bits))

    def __repr__(self):
        return f"FunctionInput({self.source!r}, num_bits={self.num_bits})"


class BlackBoxFuncCall:
    """블랙박스 함수 호출 opcode.

    속성:
        name: BlackBoxFunc 종류
        inputs: FunctionInput 튜플 (순서 있음)
        outputs: 출력 Witness 튜플 (순서 있음)
    """

    def __init__(self, name, inputs=(), outputs=()):
        self.name = BlackBoxFunc(name)
        self.inputs = tuple(
            i if isinstance(i, FunctionInput) else FunctionInput(*i) for i in inputs
        )
        self.outputs = tuple(Witness(w) for w in outputs)

    def input_witnesses(self):
        return {i.witness for i in self.inputs if i.witness is not None}

    def witnesses(self):
        return self.input_witnesses() | set(self.outputs)

    def __eq__(self, other):
        if not isinstance(other, BlackBoxFuncCall):
            return NotImplemented
        return (
            self.name == other.name
            and self.inputs == other.inputs
            and self.outputs == other.outputs
        )

    def __hash__(self):
        return hash((self.name, self.inputs, self.outputs))

    def __repr__(self):
        return (
            f"BlackBoxFuncCall({self.name.value}, inputs={list(self.inputs)}, "
            f"outputs={list(self.outputs)})"
        )


class Circuit:
    """ACVM 회로: opcode의 불변 순서 리스트와 witness 메타데이터.

    속성:
        opcodes: ArithmeticGate | BlackBoxFuncCall 튜플
        num_witnesses: 전체 witness 수 (유효 인덱스는 0 ~ num_witnesses-1)
        public_inputs: 공개 입력 Witness의 frozenset
        field: 회로 값이 속한 체 클래스

    생성 시 validate()가 한 번 실행된다.
    """

    def __init__(self, opcodes, num_witnesses, public_inputs=(), field=DEFAULT_FIELD):
        self._opcodes = tuple(opcodes)
        self._num_witnesses = num_witnesses
        self._public_inputs = frozenset(Witness(w) for w in public_inputs)
        self._field = field
        self.validate()

    @property
    def opcodes(self):
        return self._opcodes

    @property
    def num_witnesses(self):
        return self._num_witnesses

    @property
    def public_inputs(self):
        return self._public_inputs

    @property
    def field(self):
        return self._field

    def __iter__(self):
        return iter(self._opcodes)

    def __len__(self):
        return len(self._opcodes)

    def __getitem__(self, index):
        return self._opcodes[index]

    def is_public(self, witness):
        return Witness(witness) in self._public_inputs

    def witnesses(self):
        """opcode들이 참조하는 모든 witness의 정렬된 리스트."""
        found = set()
        for opcode in self._opcodes:
            found |= opcode.witnesses()
        return sorted(found)

    def __eq__(self, other):
        if not isinstance(other, Circuit):
            return NotImplemented
        return (
            self._field is other._field
            and self._num_witnesses == other._num_witnesses
            and self._public_inputs == other._public_inputs
            and self._opcodes == other._opcodes
        )

    def __hash__(self):
        return hash((self._field.name, self._num_witnesses, self._public_inputs, self._opcodes))

    def __repr__(self):
        return (
            f"Circuit({len(self._opcodes)} opcodes, num_witnesses={self._num_witnesses}, "
            f"field={self._field.name})"
        )

    # ─────────────────────────────────────────────────────────────────
    # 구조 검증
    # ─────────────────────────────────────────────────────────────────

    def validate(self):
        """구조적 정합성을 검사한다.

        Raises:
            MalformedCircuit: 규칙 위반 시 (위반한 opcode 위치 포함)
        """
        field = self._field
        if not (isinstance(field, type) and issubclass(field, FieldElement)
                and field.field_modulus is not None):
            raise MalformedCircuit(f"알 수 없는 체 타입입니다: {field!r}")
        if isinstance(self._num_witnesses, bool) or not isinstance(self._num_witnesses, int) \
                or self._num_witnesses < 0:
            raise MalformedCircuit(
                f"num_witnesses는 0 이상의 정수여야 합니다: {self._num_witnesses!r}"
            )

        for w in self._public_inputs:
            if w.index >= self._num_witnesses:
                raise MalformedCircuit(
                    f"공개 입력 {w}이(가) 선언된 witness 수 {self._num_witnesses}를 벗어납니다"
                )

        for index, opcode in enumerate(self._opcodes):
            if isinstance(opcode, ArithmeticGate):
                self._validate_gate(opcode, index)
            elif isinstance(opcode, BlackBoxFuncCall):
                self._validate_blackbox(opcode, index)
            else:
                raise MalformedCircuit(
                    f"알 수 없는 opcode 타입입니다: {type(opcode).__name__}", index
                )

    def _check_witness(self, witness, index):
        if witness.index >= self._num_witnesses:
            raise MalformedCircuit(
                f"{witness}이(가) 선언된 witness 수 {self._num_witnesses}를 벗어납니다",
                index,
            )

    def _check_value(self, value, index):
        if type(value) is not self._field:
            raise MalformedCircuit(
                f"값 {value!r}이(가) 회로의 체 {self._field.name}에 속하지 않습니다", index
            )

    def _validate_gate(self, gate, index):
        for coeff in gate.coefficients():
            self._check_value(coeff, index)
        for witness in gate.witnesses():
            self._check_witness(witness, index)

    def _validate_blackbox(self, call, index):
        min_in, max_in, min_out, max_out = BLACKBOX_ARITY[call.name]
        n_in, n_out = len(call.inputs), len(call.outputs)
        if n_in < min_in or (max_in is not None and n_in > max_in):
            raise MalformedCircuit(
                f"{call.name.value}의 입력 개수 {n_in}이(가) 올바르지 않습니다", index
            )
        if n_out < min_out or (max_out is not None and n_out > max_out):
            raise MalformedCircuit(
                f"{call.name.value}의 출력 개수 {n_out}이(가) 올바르지 않습니다", index
            )
        if len(set(call.outputs)) != n_out:
            raise MalformedCircuit(f"{call.name.value}의 출력 witness가 중복됩니다", index)

        for function_input in call.inputs:
            num_bits = function_input.num_bits
            if isinstance(num_bits, bool) or not isinstance(num_bits, int) or num_bits <= 0:
                raise MalformedCircuit(f"num_bits는 양의 정수여야 합니다: {num_bits!r}", index)
            if function_input.is_constant:
                self._check_value(function_input.source, index)
            else:
                self._check_witness(function_input.witness, index)
        for witness in call.outputs:
            self._check_witness(witness, index)

        if call.name in (BlackBoxFunc.AND, BlackBoxFunc.XOR):
            lhs, rhs = call.inputs
            if lhs.num_bits != rhs.num_bits:
                raise MalformedCircuit(
                    f"{call.name.value}의 두 피연산자 비트 폭이 다릅니다: "
                    f"{lhs.num_bits} != {rhs.num_bits}",
                    index,
                )
