# sitebuilder/domain/identifiers.py
"""
Identifier allocation for component nodes, pages and deployments.

Ids look like ``{lowercased-type}-{epoch-millis}-{random-suffix}``. They are
collision resistant, not cryptographically unique: uniqueness inside a tree
is enforced by the tree validator, never assumed.
"""
import random
import string
import time
from typing import Dict, Optional, Set

from .document import ComponentNode, Page, Project, ROOT_TYPE, walk_tree

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9

_rng = random.SystemRandom()


def _suffix() -> str:
    return "".join(_rng.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def new_id(component_type: str, *, now_ms: Optional[int] = None) -> str:
    timestamp = _now_ms() if now_ms is None else now_ms
    return f"{component_type.lower()}-{timestamp}-{_suffix()}"


def new_page_id() -> str:
    return new_id("page")


def new_deployment_id() -> str:
    return new_id("deploy")


def new_page(name: str, slug: str) -> Page:
    """A fresh page, seeded with its Body root so it is valid from birth."""
    return Page(
        id=new_page_id(),
        name=name,
        slug=slug,
        tree=[
            ComponentNode(
                id=new_id(ROOT_TYPE),
                type=ROOT_TYPE,
                metadata={"name": ROOT_TYPE},
            )
        ],
    )


def repair_ids(prior: Project, enhanced: Project) -> Project:
    """
    Re-apply the allocator to a project returned by the enhancement transform.

    Two passes per page tree, depth-first:
    1. a node whose id existed in ``prior`` on a node of the same type keeps
       it (first such node only), wherever the transform moved it;
    2. every other node keeps its id when it is non-empty and still unused
       in that tree, otherwise it gets a fresh id.

    Neither input is mutated.
    """
    repaired = enhanced.copy()
    prior_types: Dict[str, str] = {}
    for page in prior.pages:
        for node in walk_tree(page.tree):
            prior_types.setdefault(node.id, node.type)

    for page in repaired.pages:
        nodes = list(walk_tree(page.tree))
        seen: Set[str] = set()
        claimed: Set[int] = set()

        for index, node in enumerate(nodes):
            if node.id and node.id not in seen and prior_types.get(node.id) == node.type:
                seen.add(node.id)
                claimed.add(index)

        for index, node in enumerate(nodes):
            if index in claimed:
                continue
            if not node.id or node.id in seen:
                node.id = new_id(node.type)
                # A fresh id can only collide with an existing one by
                # chance; draw again until it is unique in this tree
                while node.id in seen or node.id in prior_types:
                    node.id = new_id(node.type)
            seen.add(node.id)

    return repaired
