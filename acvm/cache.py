"""
풀이 결과 캐시 (Witness Cache)
===============================

같은 (회로, 초기 witness) 쌍은 항상 같은 결과를 내므로
풀이 결과를 키-값 저장소에 보관해 재사용할 수 있다.

  cache_key = SHA-256( 정규화된 JSON { circuit, initial } )

저장소는 get(key) / put(key, value) 를 가진 어떤 객체든 된다.
기본 구현 WitnessCache는 TinyDB를 사용한다:
  - path를 주지 않으면 MemoryStorage (프로세스 메모리)
  - path를 주면 JSON 파일

실패한 풀이는 캐시하지 않는다 (오류는 그대로 전파된다).

사용 예시:
    >>> cache = WitnessCache()
    >>> witness = solve_cached(circuit, {0: 3}, cache)
"""

import hashlib
import json
import logging

from tinydb import Query, TinyDB
from tinydb.storages import MemoryStorage

from acvm.serializers import (
    deserialize_witness_map,
    serialize_circuit,
    serialize_witness_map,
)
from acvm.solver import solve
from acvm.witness_map import WitnessMap

logger = logging.getLogger(__name__)

DATA = Query()


def _initial_map(circuit, initial_witness):
    if isinstance(initial_witness, WitnessMap):
        return initial_witness
    return WitnessMap(circuit.field, initial_witness)


def cache_key(circuit, initial_witness=None):
    """회로와 초기 witness에 대한 캐시 키 (16진 SHA-256)."""
    document = {
        "circuit": serialize_circuit(circuit),
        "initial": serialize_witness_map(_initial_map(circuit, initial_witness)),
    }
    encoded = json.dumps(document, sort_keys=True, separators=(",", ":")).encode()
    return hashlib.sha256(encoded).hexdigest()


class WitnessCache:
    """TinyDB 기반 풀이 결과 저장소.

    Args:
        path: JSON 파일 경로 (None이면 메모리 저장소)
        table: TinyDB 테이블 이름
    """

    def __init__(self, path=None, table="witness"):
        if path is None:
            self.db = TinyDB(storage=MemoryStorage)
        else:
            self.db = TinyDB(path)
        self.table = self.db.table(table)

    def get(self, key):
        """키에 저장된 WitnessMap, 없으면 None."""
        row = self.table.get(DATA.key == key)
        if row is None:
            return None
        return deserialize_witness_map(row["data"])

    def put(self, key, witness_map):
        self.table.upsert({"key": key, "data": serialize_witness_map(witness_map)}, DATA.key == key)

    def clear(self):
        self.table.truncate()

    def close(self):
        self.db.close()

    def __len__(self):
        return len(self.table)

    def __contains__(self, key):
        return self.table.contains(DATA.key == key)


def solve_cached(circuit, initial_witness=None, cache=None, config=None):
    """캐시를 먼저 확인하고, 없으면 풀어서 저장한다.

    Args:
        circuit: 풀 Circuit
        initial_witness: 초기 witness (WitnessMap 또는 dict)
        cache: get/put을 가진 저장소 (None이면 캐시 없이 풀이)
        config: SolverConfig

    Returns:
        WitnessMap
    """
    if cache is None:
        return solve(circuit, initial_witness, config)

    key = cache_key(circuit, initial_witness)
    cached = cache.get(key)
    if cached is not None:
        logger.debug("캐시 적중: %s", key[:16])
        return cached

    logger.debug("캐시 미스: %s", key[:16])
    witness_map = solve(circuit, initial_witness, config)
    cache.put(key, witness_map)
    return witness_map
