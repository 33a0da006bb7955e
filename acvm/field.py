"""
ACVM 기반 모듈: 유한체(Finite Field) 원소
==========================================

회로의 모든 값은 소수 p에 대한 잉여류(residue class)이다.
p는 실행 중에 바뀌는 전역 설정이 아니라 **타입**으로 고정된다:

  | 클래스          | 이름        | p                              |
  |-----------------|-------------|--------------------------------|
  | Bn254Field      | "bn254"     | bn128 곡선 위수 (≈ 2^254)      |
  | Bls12381Field   | "bls12_381" | bls12_381 곡선 위수 (≈ 2^255)  |

py_ecc의 FQ를 상속하여 +, -, *, /, ** 연산을 제공하고,
다음을 추가로 보장한다:
  - 서로 다른 체의 원소끼리는 연산할 수 없다 (TypeError)
  - 0의 역원은 DivisionByZero를 발생시킨다 (py_ecc는 조용히 0을 반환)
  - 고정 폭 big-endian 바이트 / MSB 우선 비트열 직렬화
  - Tonelli-Shanks 제곱근 (곡선 위의 점을 만들 때 사용)

비트 분해는 블랙박스 TO_BITS와 정확히 같은 규칙을 따른다:
to_bits(n)은 길이 n, 최상위 비트가 먼저 오며,
값이 n비트를 넘으면 RangeExceeded를 발생시킨다.

사용 예시:
    >>> from acvm.field import Bn254Field as F
    >>> F(3) * F(7)          # 21
    >>> F(1) / F(3)          # 3의 모듈러 역원
    >>> F(5).to_bits(4)      # [0, 1, 0, 1]
"""

from py_ecc import bls12_381, bn128
from py_ecc.fields.field_elements import FQ

from acvm.errors import ConfigError, DivisionByZero, RangeExceeded


class FieldElement(FQ):
    """소수체 원소의 공통 기반 클래스.

    직접 인스턴스화하지 않고 Bn254Field, Bls12381Field처럼
    field_modulus와 name이 정해진 하위 클래스를 사용한다.
    """

    field_modulus = None
    name = None

    def __init__(self, val):
        if isinstance(val, FQ) and val.field_modulus != self.field_modulus:
            raise TypeError(
                f"{type(val).__name__} 원소를 {type(self).__name__}로 변환할 수 없습니다"
            )
        super().__init__(val)

    # ── 체 일치 검사 ──

    def _check_field(self, other):
        if isinstance(other, FQ) and other.field_modulus != self.field_modulus:
            raise TypeError(
                f"서로 다른 체의 원소는 함께 연산할 수 없습니다: "
                f"{type(self).__name__}, {type(other).__name__}"
            )

    def __add__(self, other):
        self._check_field(other)
        return super().__add__(other)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        self._check_field(other)
        return super().__sub__(other)

    def __rsub__(self, other):
        self._check_field(other)
        return super().__rsub__(other)

    def __mul__(self, other):
        self._check_field(other)
        return super().__mul__(other)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        self._check_field(other)
        return self * type(self)(other).inverse()

    def __rtruediv__(self, other):
        self._check_field(other)
        return type(self)(other) * self.inverse()

    def __pow__(self, exponent):
        # 음수 지수: 역원을 먼저 구한 뒤 square-and-multiply
        if exponent < 0:
            return self.inverse() ** (-exponent)
        return super().__pow__(exponent)

    def __eq__(self, other):
        if isinstance(other, FQ):
            self._check_field(other)
            return self.n == other.n
        if isinstance(other, int):
            return self.n == other % self.field_modulus
        return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.field_modulus, self.n))

    def __bool__(self):
        return self.n != 0

    # ── 체 연산 ──

    def is_zero(self):
        return self.n == 0

    def inverse(self):
        """곱셈 역원 self⁻¹.

        Raises:
            DivisionByZero: self가 덧셈 항등원(0)일 때
        """
        if self.n == 0:
            raise DivisionByZero(f"{type(self).__name__}(0)의 역원은 존재하지 않습니다")
        return type(self)(pow(self.n, -1, self.field_modulus))

    def is_square(self):
        """르장드르 기호로 이차잉여 여부를 판정한다 (0은 제곱수로 본다)."""
        if self.n == 0:
            return True
        p = self.field_modulus
        return pow(self.n, (p - 1) // 2, p) == 1

    def sqrt(self):
        """Tonelli-Shanks 제곱근.

        두 근 r, p - r 중 정수 표현이 작은 쪽을 반환한다.
        이차잉여가 아니면 None을 반환한다.

        예시:
            >>> r = Bn254Field(16).sqrt()
            >>> r * r == Bn254Field(16)  # True
        """
        if not self.is_square():
            return None
        if self.n == 0:
            return type(self)(0)

        p = self.field_modulus
        # p - 1 = q · 2^s (q는 홀수)
        q, s = p - 1, 0
        while q % 2 == 0:
            q //= 2
            s += 1
        # 비이차잉여 z 탐색
        z = 2
        while pow(z, (p - 1) // 2, p) != p - 1:
            z += 1

        m = s
        c = pow(z, q, p)
        t = pow(self.n, q, p)
        r = pow(self.n, (q + 1) // 2, p)
        while t != 1:
            i, t2 = 0, t
            while t2 != 1:
                t2 = t2 * t2 % p
                i += 1
            b = pow(c, 1 << (m - i - 1), p)
            m = i
            c = b * b % p
            t = t * c % p
            r = r * b % p

        return type(self)(min(r, p - r))

    # ── 직렬화 ──

    @classmethod
    def num_bytes(cls):
        """고정 폭 바이트 길이 (두 체 모두 32)."""
        return (cls.field_modulus.bit_length() + 7) // 8

    @classmethod
    def max_num_bits(cls):
        return cls.field_modulus.bit_length()

    def num_bits(self):
        """값을 표현하는 데 필요한 최소 비트 수."""
        return self.n.bit_length()

    def fits_in_bits(self, num_bits):
        return self.n.bit_length() <= num_bits

    def to_bytes(self):
        """고정 폭 big-endian 바이트열."""
        return self.n.to_bytes(self.num_bytes(), "big")

    @classmethod
    def from_bytes(cls, data):
        """big-endian 바이트열을 p로 나눈 나머지로 해석한다."""
        return cls(int.from_bytes(bytes(data), "big"))

    def to_bits(self, num_bits):
        """길이 num_bits의 비트 리스트 (최상위 비트 먼저).

        Raises:
            RangeExceeded: 값이 num_bits비트를 넘을 때

        예시:
            >>> Bn254Field(6).to_bits(4)  # [0, 1, 1, 0]
        """
        if not self.fits_in_bits(num_bits):
            raise RangeExceeded(self, num_bits)
        return [(self.n >> (num_bits - 1 - i)) & 1 for i in range(num_bits)]

    @classmethod
    def from_bits(cls, bits):
        """to_bits의 역연산: 최상위 비트가 먼저 오는 비트열을 재구성한다."""
        value = 0
        for bit in bits:
            bit = int(bit)
            if bit not in (0, 1):
                raise ValueError(f"비트는 0 또는 1이어야 합니다: {bit}")
            value = (value << 1) | bit
        return cls(value)


class Bn254Field(FieldElement):
    """bn128(BN254) 스칼라 필드 위의 원소."""

    field_modulus = bn128.curve_order
    name = "bn254"


class Bls12381Field(FieldElement):
    """BLS12-381 스칼라 필드 위의 원소."""

    field_modulus = bls12_381.curve_order
    name = "bls12_381"


# 지원하는 체 목록 (이름 → 클래스)
FIELDS = {cls.name: cls for cls in (Bn254Field, Bls12381Field)}

DEFAULT_FIELD = Bn254Field


def get_field(name):
    """이름으로 체 클래스를 찾는다.

    Raises:
        ConfigError: 지원하지 않는 이름일 때
    """
    if isinstance(name, type) and issubclass(name, FieldElement) and name.name in FIELDS:
        return name
    try:
        return FIELDS[name]
    except KeyError:
        raise ConfigError(
            f"지원하지 않는 체입니다: {name!r} (가능한 값: {sorted(FIELDS)})"
        ) from None
