# sitebuilder/domain/document.py
"""
Project document model.

A Project owns an ordered list of Pages; each Page owns a component tree
(an ordered list of ComponentNode, rooted at a single Body node). The model
is a plain owned recursive structure: children are held by value and no node
points back at its parent, so the tree can never contain a cycle.

Every type parses from / serializes to the camelCase JSON shape persisted by
the document store and exchanged over the API.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from .errors import StructuralError, ValidationError


COMPONENT_TYPES = {
    "Body",
    "Section",
    "Div",
    "Text",
    "Image",
    "Button",
    "Container",
    "Grid",
    "List",
    "Link",
    "Form",
}

CONTAINER_TYPES = {"Body", "Section", "Div", "Container", "Grid", "Form"}
LEAF_TYPES = {"Text", "Image", "Button", "Link"}

ROOT_TYPE = "Body"

# Nesting limit for one component tree, counting the root as level 1
MAX_TREE_DEPTH = 64

ENVIRONMENTS = ("builder", "staging", "production")
BUILDER_ENVIRONMENT = "builder"
DEPLOY_TARGETS = ("staging", "production")

DEPLOYMENT_STATUSES = {"success", "error"}

DEPLOYMENT_HISTORY_LIMIT = 50


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(ts: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _require_mapping(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(f"{where}: expected an object")
    return value


def _optional_mapping(data: Dict[str, Any], key: str, where: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"{where}.{key}: expected an object")
    return copy.deepcopy(value)


def _optional_list(data: Dict[str, Any], key: str, where: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{where}.{key}: expected an array")
    return value


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{where}: missing {key}")
    return value


# ------------------------
# Component tree
# ------------------------

@dataclass
class ComponentNode:
    id: str
    type: str
    props: Dict[str, Any] = field(default_factory=dict)
    styles: Dict[str, str] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    children: List["ComponentNode"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, *, where: str = "node", depth: int = 1) -> "ComponentNode":
        """
        Parse one node and its subtree.

        A missing id parses as "" so that enhancement output can be repaired
        by the identifier allocator before validation rejects it. Subtrees
        nested deeper than MAX_TREE_DEPTH raise StructuralError.
        """
        data = _require_mapping(data, where)
        if depth > MAX_TREE_DEPTH:
            raise StructuralError(f"tree nested deeper than {MAX_TREE_DEPTH} levels")

        node_type = data.get("type")
        if not isinstance(node_type, str) or not node_type:
            raise ValidationError(f"{where}: missing type")

        node_id = data.get("id") or ""
        if not isinstance(node_id, str):
            raise ValidationError(f"{where}: id must be a string")

        styles = {
            str(key): value if isinstance(value, str) else str(value)
            for key, value in _optional_mapping(data, "styles", where).items()
        }

        children = [
            cls.from_dict(child, where=f"{where}.children[{index}]", depth=depth + 1)
            for index, child in enumerate(_optional_list(data, "children", where))
        ]

        return cls(
            id=node_id,
            type=node_type,
            props=_optional_mapping(data, "props", where),
            styles=styles,
            metadata=_optional_mapping(data, "metadata", where),
            children=children,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "props": copy.deepcopy(self.props),
            "styles": dict(self.styles),
        }
        if self.metadata:
            data["metadata"] = copy.deepcopy(self.metadata)
        data["children"] = [child.to_dict() for child in self.children]
        return data

    def walk(self) -> Iterator["ComponentNode"]:
        """Depth-first pre-order traversal of this node and its subtree."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def walk_tree(tree: List[ComponentNode]) -> Iterator[ComponentNode]:
    for root in tree:
        yield from root.walk()


# ------------------------
# Pages
# ------------------------

@dataclass
class Page:
    id: str
    name: str
    slug: str
    tree: List[ComponentNode] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, *, where: str = "page") -> "Page":
        data = _require_mapping(data, where)

        if not isinstance(data.get("tree"), list):
            raise ValidationError(f"{where}: tree must be an array")

        name = data.get("name") or ""
        if not isinstance(name, str):
            raise ValidationError(f"{where}: name must be a string")

        return cls(
            id=_require_str(data, "id", where),
            name=name,
            slug=_require_str(data, "slug", where),
            tree=[
                ComponentNode.from_dict(node, where=f"{where}.tree[{index}]")
                for index, node in enumerate(data["tree"])
            ],
            metadata=_optional_mapping(data, "metadata", where),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "tree": [node.to_dict() for node in self.tree],
        }
        if self.metadata:
            data["metadata"] = copy.deepcopy(self.metadata)
        return data


# ------------------------
# Deployment history
# ------------------------

@dataclass(frozen=True)
class DeploymentRecord:
    id: str
    environment: str
    deployed_at: str
    status: str = "success"
    message: str = ""
    deployed_by: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, *, where: str = "deployment") -> "DeploymentRecord":
        data = _require_mapping(data, where)

        environment = data.get("environment")
        if environment not in DEPLOY_TARGETS:
            raise ValidationError(f"{where}: invalid environment")

        status = data.get("status", "success")
        if status not in DEPLOYMENT_STATUSES:
            raise ValidationError(f"{where}: invalid status {status!r}")

        return cls(
            id=_require_str(data, "id", where),
            environment=environment,
            deployed_at=_require_str(data, "deployedAt", where),
            status=status,
            message=data.get("message") or "",
            deployed_by=data.get("deployedBy"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "environment": self.environment,
            "deployedAt": self.deployed_at,
            "status": self.status,
            "message": self.message,
        }
        if self.deployed_by is not None:
            data["deployedBy"] = self.deployed_by
        return data


# ------------------------
# Projects
# ------------------------

_KNOWN_METADATA_KEYS = {
    "environment",
    "createdAt",
    "updatedAt",
    "lastDeployment",
    "deploymentHistory",
}


@dataclass
class ProjectMetadata:
    environment: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    last_deployment: Dict[str, str] = field(default_factory=dict)
    deployment_history: List[DeploymentRecord] = field(default_factory=list)
    # Keys the core does not interpret (description, thumbnails, ...)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, *, where: str = "metadata") -> "ProjectMetadata":
        if data is None:
            return cls()
        data = _require_mapping(data, where)

        environment = data.get("environment")
        if environment is not None and environment not in ENVIRONMENTS:
            raise ValidationError(f"{where}: invalid environment")

        last_deployment = _optional_mapping(data, "lastDeployment", where)
        history = [
            DeploymentRecord.from_dict(item, where=f"{where}.deploymentHistory[{index}]")
            for index, item in enumerate(_optional_list(data, "deploymentHistory", where))
        ]

        return cls(
            environment=environment,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            last_deployment=last_deployment,
            deployment_history=history,
            extra={
                key: copy.deepcopy(value)
                for key, value in data.items()
                if key not in _KNOWN_METADATA_KEYS
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = copy.deepcopy(self.extra)
        if self.environment is not None:
            data["environment"] = self.environment
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        if self.last_deployment:
            data["lastDeployment"] = dict(self.last_deployment)
        if self.deployment_history:
            data["deploymentHistory"] = [r.to_dict() for r in self.deployment_history]
        return data


@dataclass
class Project:
    id: str
    name: str
    pages: List[Page] = field(default_factory=list)
    metadata: ProjectMetadata = field(default_factory=ProjectMetadata)

    @classmethod
    def from_dict(cls, data: Any, *, where: str = "project") -> "Project":
        data = _require_mapping(data, where)

        name = data.get("name") or ""
        if not isinstance(name, str):
            raise ValidationError(f"{where}: name must be a string")

        return cls(
            id=_require_str(data, "id", where),
            name=name,
            pages=[
                Page.from_dict(page, where=f"pages[{index}]")
                for index, page in enumerate(_optional_list(data, "pages", where))
            ],
            metadata=ProjectMetadata.from_dict(data.get("metadata"), where="metadata"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "pages": [page.to_dict() for page in self.pages],
            "metadata": self.metadata.to_dict(),
        }

    def copy(self) -> "Project":
        return copy.deepcopy(self)

    def with_metadata(self, **changes: Any) -> "Project":
        """Return a deep copy of this project with metadata fields replaced."""
        clone = self.copy()
        clone.metadata = replace(clone.metadata, **changes)
        return clone
