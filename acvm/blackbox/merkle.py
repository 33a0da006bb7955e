"""
Merkle 멤버십 블랙박스 함수
============================

입력: 후보 루트, 리프, 인덱스, 형제(sibling) 해시 경로 [s₀, s₁, ..., s_{d-1}]
출력: 재계산한 루트가 후보 루트와 같으면 1, 아니면 0

레벨 i에서는 인덱스의 i번째 비트(최하위 비트부터)가 인자 순서를 정한다:

    bit = 0 → 현재 노드가 왼쪽 자식:  node = H(node, sᵢ)
    bit = 1 → 현재 노드가 오른쪽 자식: node = H(sᵢ, node)

H는 2-입력 Pedersen 해시다.
인덱스가 경로 깊이 d로 표현되지 않으면 (index ≥ 2^d) 멤버가 아니므로 0이다.

트리 구성 예시 (리프 4개):

              root
            /      \\
         h01        h23
        /   \\      /   \\
      l0    l1   l2    l3

    merkle_path(tree, 2) == [l3, h01]
"""

from acvm.blackbox.pedersen import pedersen_hash


def hash_pair(left, right, field):
    return pedersen_hash([left, right], field)


def compute_merkle_root(leaf, index, path, field):
    """리프와 형제 경로로부터 루트를 재계산한다."""
    node = leaf
    index = int(index)
    for level, sibling in enumerate(path):
        if (index >> level) & 1:
            node = hash_pair(sibling, node, field)
        else:
            node = hash_pair(node, sibling, field)
    return node


def check_membership(root, leaf, index, path, field):
    """멤버십 여부를 bool로 반환한다."""
    if int(index) >= 1 << len(path):
        return False
    return compute_merkle_root(leaf, index, path, field) == root


def merkle_membership(inputs, num_outputs, field):
    values = [value for value, _ in inputs]
    root, leaf, index, path = values[0], values[1], values[2], values[3:]
    return [field(1 if check_membership(root, leaf, index, path, field) else 0)]


# ─────────────────────────────────────────────────────────────────────
# 트리 구성 도우미
# ─────────────────────────────────────────────────────────────────────

def build_merkle_tree(leaves, field):
    """리프 리스트로 전체 트리를 구성한다.

    Args:
        leaves: 체 원소 리스트 (길이는 2의 거듭제곱)

    Returns:
        list[list]: 레벨별 노드 리스트. tree[0]은 리프, tree[-1]은 [root]
    """
    n = len(leaves)
    if n == 0 or n & (n - 1):
        raise ValueError(f"리프 수는 2의 거듭제곱이어야 합니다: {n}")
    tree = [list(leaves)]
    while len(tree[-1]) > 1:
        level = tree[-1]
        tree.append([hash_pair(level[i], level[i + 1], field) for i in range(0, len(level), 2)])
    return tree


def merkle_root(tree):
    return tree[-1][0]


def merkle_path(tree, index):
    """index번째 리프의 형제 해시 경로 (리프 쪽부터)."""
    path = []
    for level in tree[:-1]:
        path.append(level[index ^ 1])
        index >>= 1
    return path
