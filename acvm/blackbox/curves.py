"""
임베디드 곡선 (Embedded Curves)
================================

Pedersen 해시와 고정 기저 스칼라 곱셈은 **회로의 체 위에서 정의된 곡선**을
사용한다. 곡선 좌표가 곧 회로의 체 원소이므로 결과를 바로 witness로 쓸 수 있다.

  | 회로 체    | 곡선      | 방정식                         | 항등원     |
  |------------|-----------|--------------------------------|------------|
  | bn254      | Grumpkin  | y² = x³ - 17                   | None       |
  | bls12_381  | Jubjub    | -x² + y² = 1 + d·x²·y²         | (0, 1)     |

  - Grumpkin: BN254의 사이클 곡선. 점 연산은 py_ecc bn128 모듈의 일반(generic)
    아핀 공식(add, multiply, is_on_curve)을 Bn254Field 좌표에 그대로 적용한다.
  - Jubjub: d = -(10240/10241). 완전(complete) twisted Edwards 덧셈 공식을 쓴다.

**생성자(generator)**:
  Grumpkin의 기본 생성자는 (1, √-16)이다 (두 근 중 작은 값).
  그 밖의 생성자는 도메인 분리된 SHA-256 try-and-increment 방식으로
  결정론적으로 유도한다:

      x = H(domain || index || counter) mod p
      y² = x³ + b 가 제곱수가 될 때까지 counter 증가

  Jubjub은 y를 해시로 고르고 x를 구한 뒤 cofactor 8을 곱해
  소수 위수 부분군으로 보낸다.
"""

import functools
import hashlib

from py_ecc import bn128

from acvm.field import Bls12381Field, Bn254Field


class EmbeddedCurve:
    """회로 체 위의 곡선 공통 인터페이스."""

    name = None
    field = None
    order = None

    def identity(self):
        raise NotImplementedError

    def add(self, p1, p2):
        raise NotImplementedError

    def multiply(self, point, scalar):
        raise NotImplementedError

    def is_on_curve(self, point):
        raise NotImplementedError

    def coordinates(self, point):
        """점을 (x, y) 체 원소 쌍으로 변환한다."""
        raise NotImplementedError

    def _point_from_seed(self, seed):
        raise NotImplementedError

    @property
    def generator(self):
        raise NotImplementedError

    @functools.lru_cache(maxsize=None)
    def derive_generator(self, domain, index):
        """domain과 index로부터 결정론적으로 생성자를 유도한다."""
        return self._point_from_seed(domain + index.to_bytes(4, "big"))

    def derive_generators(self, domain, count):
        return [self.derive_generator(domain, i) for i in range(count)]

    def _hash_candidates(self, seed):
        counter = 0
        while True:
            digest = hashlib.sha256(seed + counter.to_bytes(4, "big")).digest()
            yield self.field.from_bytes(digest)
            counter += 1


class Grumpkin(EmbeddedCurve):
    """y² = x³ - 17 (Bn254Field 위)."""

    name = "grumpkin"
    field = Bn254Field
    # 군의 위수 = BN254 기저체의 크기
    order = bn128.field_modulus

    def __init__(self):
        self.b = self.field(-17)

    def identity(self):
        return None

    def add(self, p1, p2):
        return bn128.add(p1, p2)

    def multiply(self, point, scalar):
        return bn128.multiply(point, int(scalar))

    def is_on_curve(self, point):
        return bn128.is_on_curve(point, self.b)

    def coordinates(self, point):
        # 무한원점은 (0, 0)으로 표현한다 (곡선 위의 점이 아님)
        if point is None:
            return self.field(0), self.field(0)
        return point

    @functools.cached_property
    def generator(self):
        x = self.field(1)
        return (x, (x ** 3 + self.b).sqrt())

    def _point_from_seed(self, seed):
        for x in self._hash_candidates(seed):
            y = (x ** 3 + self.b).sqrt()
            if y is not None:
                return (x, y)


class Jubjub(EmbeddedCurve):
    """-x² + y² = 1 + d·x²·y² (Bls12381Field 위)."""

    name = "jubjub"
    field = Bls12381Field
    cofactor = 8
    # 소수 위수 부분군의 위수 ℓ
    order = 6554484396890773809930967563523245729705921265872317281365359162392183254199

    def __init__(self):
        self.a = self.field(-1)
        self.d = -(self.field(10240) / self.field(10241))

    def identity(self):
        return (self.field(0), self.field(1))

    def add(self, p1, p2):
        (x1, y1), (x2, y2) = p1, p2
        t = self.d * x1 * x2 * y1 * y2
        x3 = (x1 * y2 + y1 * x2) / (1 + t)
        y3 = (y1 * y2 - self.a * x1 * x2) / (1 - t)
        return (x3, y3)

    def multiply(self, point, scalar):
        result = self.identity()
        for bit in bin(int(scalar))[2:]:
            result = self.add(result, result)
            if bit == "1":
                result = self.add(result, point)
        return result

    def is_on_curve(self, point):
        x, y = point
        xx, yy = x * x, y * y
        return self.a * xx + yy == 1 + self.d * xx * yy

    def coordinates(self, point):
        return point

    @functools.cached_property
    def generator(self):
        return self.derive_generator(b"acvm.jubjub.generator", 0)

    def _point_from_seed(self, seed):
        for y in self._hash_candidates(seed):
            yy = y * y
            x = ((yy - 1) / (1 + self.d * yy)).sqrt()
            if x is None:
                continue
            point = self.multiply((x, y), self.cofactor)
            if point != self.identity():
                return point


_CURVES = {
    Bn254Field.name: Grumpkin,
    Bls12381Field.name: Jubjub,
}


@functools.lru_cache(maxsize=None)
def embedded_curve(field):
    """회로 체에 대응하는 임베디드 곡선 인스턴스 (체마다 하나)."""
    return _CURVES[field.name]()


def fixed_base_scalar_mul(inputs, num_outputs, field):
    """scalar · G 의 (x, y) 좌표를 출력한다."""
    (scalar, _), = inputs
    curve = embedded_curve(field)
    return list(curve.coordinates(curve.multiply(curve.generator, scalar)))
