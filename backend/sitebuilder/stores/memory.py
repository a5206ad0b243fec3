import copy
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sitebuilder.domain.document import Project
from sitebuilder.domain.errors import NotFound
from .base import DocumentStore


class MemoryDocumentStore(DocumentStore):
    """
    Dict-backed store for tests and embedding.

    Documents are kept as serialized JSON mappings and deep-copied on the
    way in and out, so callers never share state with the store.
    ``transaction()`` snapshots the whole store and restores it when the
    block raises.
    """

    def __init__(self):
        self._documents: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self._updated: Dict[Tuple[str, str], datetime] = {}
        self._catalogue: Dict[str, Dict[str, Any]] = {}

    @contextmanager
    def transaction(self) -> Iterator[None]:
        state = copy.deepcopy((self._documents, self._updated, self._catalogue))
        try:
            yield
        except Exception:
            self._documents, self._updated, self._catalogue = state
            raise

    def load(self, project_id: str, environment: str) -> Project:
        document = self._documents.get((project_id, environment))
        if document is None:
            raise NotFound(f"Project not found in {environment} environment")
        return Project.from_dict(copy.deepcopy(document))

    def save(self, project_id: str, environment: str, project: Project) -> None:
        key = (project_id, environment)
        self._documents[key] = project.to_dict()
        self._updated[key] = datetime.now(timezone.utc)

        if project_id not in self._catalogue:
            self.upsert_catalogue(project)

    def exists(self, project_id: str, environment: str) -> bool:
        return (project_id, environment) in self._documents

    def updated_at(self, project_id: str, environment: str) -> Optional[datetime]:
        return self._updated.get((project_id, environment))

    def delete(self, project_id: str) -> None:
        if project_id not in self._catalogue:
            raise NotFound("Project not found")

        del self._catalogue[project_id]
        for key in [key for key in self._documents if key[0] == project_id]:
            del self._documents[key]
            self._updated.pop(key, None)

    def list_catalogue(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(entry) for entry in self._catalogue.values()]

    def upsert_catalogue(self, project: Project) -> None:
        self._catalogue[project.id] = {
            "id": project.id,
            "name": project.name,
            "metadata": project.metadata.to_dict(),
        }

    def raw(self, project_id: str, environment: str) -> Optional[Dict[str, Any]]:
        """The stored JSON mapping, for byte-level comparisons in tests and tooling."""
        document = self._documents.get((project_id, environment))
        return copy.deepcopy(document) if document is not None else None
