"""
다이제스트 해시 블랙박스 함수: SHA256, BLAKE2S, HASH_TO_FIELD
=============================================================

입력 witness들을 bits.pack_bytes 규칙으로 바이트열로 만든 뒤 해시한다.
32바이트 다이제스트는 바이트당 하나의 출력 witness로 풀어서 기록한다.
HASH_TO_FIELD는 BLAKE2s 다이제스트를 big-endian 정수로 보고 p로 나눈 나머지를
하나의 체 원소로 출력한다.
"""

import hashlib

from acvm.blackbox.bits import pack_bytes


def sha256_digest(data):
    return hashlib.sha256(data).digest()


def blake2s_digest(data):
    return hashlib.blake2s(data).digest()


def sha256(inputs, num_outputs, field):
    return [field(b) for b in sha256_digest(pack_bytes(inputs))]


def blake2s(inputs, num_outputs, field):
    return [field(b) for b in blake2s_digest(pack_bytes(inputs))]


def hash_to_field(inputs, num_outputs, field):
    return [field.from_bytes(blake2s_digest(pack_bytes(inputs)))]
