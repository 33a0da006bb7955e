"""
acvm.blackbox.ecdsa 모듈 테스트.

테스트 대상:
  - 유효한 서명 → 1
  - 서명 바이트 변조, 잘못된 메시지, 범위 밖 r/s, 곡선 밖 공개키 → 0 (오류 없음)
  - 회로 안에서의 풀이, 바이트 범위를 넘는 입력 → RangeExceeded
"""

import hashlib

import pytest
from py_ecc.secp256k1 import secp256k1

from acvm.blackbox.ecdsa import ecdsa_secp256k1, verify_signature
from acvm.builder import CircuitBuilder
from acvm.circuit import BlackBoxFunc
from acvm.errors import RangeExceeded
from acvm.field import Bn254Field as F
from acvm.solver import solve

PRIVATE_KEY = hashlib.sha256(b"acvm test key").digest()
MESSAGE_HASH = hashlib.sha256(b"hello circuit").digest()


def signed_triple():
    """(공개키 x, 공개키 y, 서명 r||s) 바이트열."""
    x, y = secp256k1.privtopub(PRIVATE_KEY)
    _, r, s = secp256k1.ecdsa_raw_sign(MESSAGE_HASH, PRIVATE_KEY)
    return (
        x.to_bytes(32, "big"),
        y.to_bytes(32, "big"),
        r.to_bytes(32, "big") + s.to_bytes(32, "big"),
    )


@pytest.fixture(scope="module")
def triple():
    return signed_triple()


class TestVerifySignature:
    """verify_signature 테스트."""

    def test_valid(self, triple):
        assert verify_signature(*triple, MESSAGE_HASH) is True

    def test_wrong_message(self, triple):
        other = hashlib.sha256(b"goodbye circuit").digest()
        assert verify_signature(*triple, other) is False

    @pytest.mark.parametrize("position", [0, 15, 31, 32, 48, 63])
    def test_mutated_signature_byte(self, triple, position):
        x, y, signature = triple
        mutated = bytearray(signature)
        mutated[position] ^= 0x01
        assert verify_signature(x, y, bytes(mutated), MESSAGE_HASH) is False

    def test_zero_r(self, triple):
        x, y, signature = triple
        assert verify_signature(x, y, bytes(32) + signature[32:], MESSAGE_HASH) is False

    def test_s_out_of_range(self, triple):
        x, y, signature = triple
        too_big = secp256k1.N.to_bytes(32, "big")
        assert verify_signature(x, y, signature[:32] + too_big, MESSAGE_HASH) is False

    def test_public_key_off_curve(self, triple):
        x, y, signature = triple
        bad_y = (int.from_bytes(y, "big") + 1).to_bytes(32, "big")
        assert verify_signature(x, bad_y, signature, MESSAGE_HASH) is False


class TestEvaluator:
    """ECDSA_SECP256K1 평가기 테스트."""

    def byte_inputs(self, data):
        return [(F(b), 8) for b in data]

    def test_valid_outputs_one(self, triple):
        data = b"".join(triple) + MESSAGE_HASH
        assert ecdsa_secp256k1(self.byte_inputs(data), 1, F) == [F(1)]

    def test_invalid_outputs_zero(self, triple):
        data = bytearray(b"".join(triple) + MESSAGE_HASH)
        data[70] ^= 0xFF
        assert ecdsa_secp256k1(self.byte_inputs(data), 1, F) == [F(0)]

    def test_non_byte_input(self, triple):
        inputs = self.byte_inputs(b"".join(triple) + MESSAGE_HASH)
        inputs[0] = (F(256), 8)
        with pytest.raises(RangeExceeded):
            ecdsa_secp256k1(inputs, 1, F)


class TestInCircuit:
    """회로 안의 서명 검증 테스트."""

    def build(self):
        builder = CircuitBuilder()
        data = builder.new_witnesses(32 + 32 + 64 + 32)
        result = builder.new_witness()
        builder.add_blackbox(BlackBoxFunc.ECDSA_SECP256K1, [(w, 8) for w in data], [result])
        return builder.build(), data, result

    def test_valid_signature(self, triple):
        circuit, data, result = self.build()
        witness = solve(circuit, dict(zip(data, b"".join(triple) + MESSAGE_HASH)))
        assert witness[result] == F(1)

    def test_mutated_signature(self, triple):
        circuit, data, result = self.build()
        values = bytearray(b"".join(triple) + MESSAGE_HASH)
        values[100] ^= 0x10
        witness = solve(circuit, dict(zip(data, values)))
        assert witness[result] == F(0)
