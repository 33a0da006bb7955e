"""
ACVM 풀이 데모
===============

실행:
    python -m acvm.example

흐름:
    1. 회로 구성 및 풀이 (x³ + x + 5 = 35, x = 3)
    2. 잘못된 입력 (x = 4) → 제약 불만족
    3. 비트 분해 (TO_BITS)
    4. Merkle 멤버십 검사 (Pedersen 해시 트리)
"""

from acvm.blackbox.merkle import build_merkle_tree, merkle_path, merkle_root
from acvm.builder import CircuitBuilder
from acvm.circuit import BlackBoxFunc
from acvm.errors import UnsatisfiedConstraint
from acvm.field import Bn254Field as F
from acvm.solver import is_satisfied, solve


def main():
    print("=" * 60)
    print("  ACVM Witness Solver Demo")
    print("  회로: x³ + x + 5 = 35 (x = 3)")
    print("=" * 60)

    # ── 1. 회로 구성 및 풀이 ──
    print("\n[1] 회로 구성 및 풀이...")
    circuit = CircuitBuilder.x3_plus_x_plus_5_eq_35()
    print(f"    opcode 수: {len(circuit)}")
    print(f"    witness 수: {circuit.num_witnesses}")
    print(f"    공개 입력: {sorted(w.index for w in circuit.public_inputs)}")

    witness = solve(circuit, {0: 3})
    for w, value in witness.items():
        print(f"      w{w.index} = {int(value)}")
    cubic_ok = is_satisfied(circuit, witness)
    print(f"    제약 확인: {'✓' if cubic_ok else '✗'}")

    # ── 2. 잘못된 입력 ──
    print("\n[2] 잘못된 입력으로 풀이 (x = 4)...")
    try:
        solve(circuit, {0: 4})
        rejected = False
        print("    풀이 성공 ✗ (실패해야 함)")
    except UnsatisfiedConstraint as err:
        rejected = True
        print(f"    {err} (예상대로 실패)")

    # ── 3. 비트 분해 ──
    print("\n[3] 비트 분해 (x = 6, 3비트)...")
    builder = CircuitBuilder()
    x = builder.new_witness()
    bits = builder.add_to_bits(x, 3)
    bits_circuit = builder.build()
    bits_witness = solve(bits_circuit, {x: 6})
    decomposed = [int(bits_witness[b]) for b in bits]
    print(f"    비트 (MSB 먼저): {decomposed}")
    bits_ok = decomposed == [1, 1, 0]

    # ── 4. Merkle 멤버십 ──
    print("\n[4] Merkle 멤버십 검사 (리프 4개, 인덱스 2)...")
    leaves = [F(v) for v in (10, 20, 30, 40)]
    tree = build_merkle_tree(leaves, F)
    path = merkle_path(tree, 2)
    print(f"    루트: {int(merkle_root(tree))}")

    builder = CircuitBuilder()
    root, leaf, index = builder.new_witnesses(3)
    siblings = builder.new_witnesses(len(path))
    result = builder.new_witness()
    builder.add_blackbox(
        BlackBoxFunc.MERKLE_MEMBERSHIP,
        [(w, F.max_num_bits()) for w in [root, leaf, index] + siblings],
        [result],
    )
    initial = {root: merkle_root(tree), leaf: leaves[2], index: 2}
    initial.update(zip(siblings, path))
    merkle_witness = solve(builder.build(), initial)
    member = int(merkle_witness[result]) == 1
    print(f"    멤버십 결과: {int(merkle_witness[result])} {'✓' if member else '✗'}")

    ok = cubic_ok and rejected and bits_ok and member
    print("\n" + "=" * 60)
    if ok:
        print("  데모 완료: 모든 테스트 통과!")
    else:
        print("  데모 완료: 일부 테스트 실패")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    main()
