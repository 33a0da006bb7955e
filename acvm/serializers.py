"""
ACVM 데이터 직렬화/역직렬화 헬퍼
==================================

Circuit과 WitnessMap을 JSON(및 TinyDB)에 저장 가능한 dict로 변환한다.
체 원소는 str(int)로, witness는 정수 인덱스로 저장한다.

Circuit 문서 형태:
    {
      "field": "bn254",
      "num_witnesses": 5,
      "public_inputs": [4],
      "opcodes": [
        {"type": "arithmetic",
         "mul_terms": [["1", 0, 0]], "linear_terms": [["-1", 1]], "constant": "0"},
        {"type": "blackbox", "name": "to_bits",
         "inputs": [{"witness": 0, "num_bits": 3}], "outputs": [1, 2, 3]}
      ]
    }

WitnessMap 문서 형태:
    {"field": "bn254", "values": {"0": "3", "1": "9"}}

형식이 잘못된 문서는 MalformedCircuit을 발생시킨다.
"""

from acvm.circuit import (
    ArithmeticGate,
    BlackBoxFuncCall,
    Circuit,
    FunctionInput,
    LinearCombination,
    Witness,
)
from acvm.errors import ConfigError, MalformedCircuit
from acvm.field import get_field
from acvm.witness_map import WitnessMap


# ─── 체 원소 ───

def serialize_fe(val):
    """FieldElement → str(int)"""
    return str(int(val))


def deserialize_fe(s, field):
    """str(int) → FieldElement"""
    return field(int(s))


# ─── opcode ───

def serialize_opcode(opcode):
    """ArithmeticGate | BlackBoxFuncCall → dict"""
    if isinstance(opcode, ArithmeticGate):
        return {
            "type": "arithmetic",
            "mul_terms": [
                [serialize_fe(c), wi.index, wj.index] for c, wi, wj in opcode.mul_terms
            ],
            "linear_terms": [[serialize_fe(c), w.index] for c, w in opcode.linear_terms],
            "constant": serialize_fe(opcode.constant),
        }
    inputs = []
    for function_input in opcode.inputs:
        if function_input.is_constant:
            inputs.append({
                "constant": serialize_fe(function_input.source),
                "num_bits": function_input.num_bits,
            })
        else:
            inputs.append({
                "witness": function_input.witness.index,
                "num_bits": function_input.num_bits,
            })
    return {
        "type": "blackbox",
        "name": opcode.name.value,
        "inputs": inputs,
        "outputs": [w.index for w in opcode.outputs],
    }


def deserialize_opcode(data, field):
    """dict → ArithmeticGate | BlackBoxFuncCall"""
    kind = data["type"]
    if kind == "arithmetic":
        return ArithmeticGate(
            mul_terms=[
                (deserialize_fe(c, field), Witness(i), Witness(j))
                for c, i, j in data["mul_terms"]
            ],
            linear_combination=LinearCombination(
                [(deserialize_fe(c, field), Witness(i)) for c, i in data["linear_terms"]],
                deserialize_fe(data["constant"], field),
                field=field,
            ),
            field=field,
        )
    if kind == "blackbox":
        inputs = []
        for item in data["inputs"]:
            if "constant" in item:
                source = deserialize_fe(item["constant"], field)
            else:
                source = Witness(item["witness"])
            inputs.append(FunctionInput(source, item["num_bits"]))
        return BlackBoxFuncCall(data["name"], inputs, [Witness(i) for i in data["outputs"]])
    raise ValueError(f"알 수 없는 opcode 종류: {kind!r}")


# ─── Circuit ───

def serialize_circuit(circuit):
    """Circuit → dict"""
    return {
        "field": circuit.field.name,
        "num_witnesses": circuit.num_witnesses,
        "public_inputs": sorted(w.index for w in circuit.public_inputs),
        "opcodes": [serialize_opcode(op) for op in circuit],
    }


def deserialize_circuit(data):
    """dict → Circuit

    Raises:
        MalformedCircuit: 문서 형식이 잘못되었거나 구조 검증에 실패했을 때
    """
    try:
        field = get_field(data["field"])
        opcodes = [deserialize_opcode(op, field) for op in data["opcodes"]]
        num_witnesses = data["num_witnesses"]
        public_inputs = [Witness(i) for i in data.get("public_inputs", [])]
    except (KeyError, TypeError, ValueError, ConfigError) as exc:
        raise MalformedCircuit(f"회로 문서를 해석할 수 없습니다: {exc!r}") from exc
    return Circuit(opcodes, num_witnesses, public_inputs=public_inputs, field=field)


# ─── WitnessMap ───

def serialize_witness_map(witness_map):
    """WitnessMap → dict"""
    return {
        "field": witness_map.field.name,
        "values": {str(w.index): serialize_fe(v) for w, v in witness_map.items()},
    }


def deserialize_witness_map(data):
    """dict → WitnessMap"""
    try:
        field = get_field(data["field"])
        values = {int(k): deserialize_fe(v, field) for k, v in data["values"].items()}
    except (AttributeError, KeyError, TypeError, ValueError, ConfigError) as exc:
        raise MalformedCircuit(f"witness 문서를 해석할 수 없습니다: {exc!r}") from exc
    return WitnessMap(field, values)
