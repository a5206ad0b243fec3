import logging
from typing import List, Sequence, Set

from ..document import COMPONENT_TYPES, LEAF_TYPES, MAX_TREE_DEPTH, ROOT_TYPE, ComponentNode
from ..errors import StructuralError

logger = logging.getLogger(__name__)


def validate_tree(tree: Sequence[ComponentNode]) -> List[str]:
    """
    Enforce the structural invariants of one page's component tree.

    Rules, checked depth-first and failing fast:
    1. The first top-level node is the Body root; no other node is a Body.
    2. Every id is non-empty and unique within the tree.
    3. Every type belongs to the component enumeration.
    4. Leaf types carrying children are accepted; a warning is returned
       because code generation does not render those children.
    5. No node sits deeper than MAX_TREE_DEPTH levels.

    Pure and idempotent. Returns the warnings collected on success.
    """
    if not tree or tree[0].type != ROOT_TYPE:
        raise StructuralError("missing or duplicate root")

    warnings: List[str] = []
    seen_ids: Set[str] = set()

    # (node, is_root, depth); reversed so siblings pop in document order
    stack = [(node, index == 0, 1) for index, node in reversed(list(enumerate(tree)))]

    while stack:
        node, is_root, depth = stack.pop()

        if depth > MAX_TREE_DEPTH:
            raise StructuralError(f"tree nested deeper than {MAX_TREE_DEPTH} levels")

        if node.type == ROOT_TYPE and not is_root:
            raise StructuralError("missing or duplicate root")

        if not node.id:
            raise StructuralError(f"missing id on {node.type} node")

        if node.id in seen_ids:
            raise StructuralError(f"duplicate id: {node.id}")
        seen_ids.add(node.id)

        if node.type not in COMPONENT_TYPES:
            raise StructuralError(f"unknown type: {node.type}")

        if node.type in LEAF_TYPES and node.children:
            message = f"{node.type} node {node.id} has children that will not be rendered"
            logger.warning(message)
            warnings.append(message)

        stack.extend((child, False, depth + 1) for child in reversed(node.children))

    return warnings
