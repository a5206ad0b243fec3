from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from sitebuilder.domain.document import Project


class DocumentStore(ABC):
    """
    Persists Project snapshots keyed by (project_id, environment), plus a
    catalogue of {id, name, metadata} entries for listing.

    The store is the sole writer of persisted project state and the only
    serialization point: each document is overwritten whole, last write wins.
    """

    # Whether writes made through this store can carry audit rows
    supports_audit = False

    @abstractmethod
    def load(self, project_id: str, environment: str) -> Project:
        """Return the stored snapshot; raises NotFound when absent."""

    @abstractmethod
    def save(self, project_id: str, environment: str, project: Project) -> None:
        """Overwrite the snapshot; raises IoError on storage failure."""

    @abstractmethod
    def exists(self, project_id: str, environment: str) -> bool:
        ...

    @abstractmethod
    def updated_at(self, project_id: str, environment: str) -> Optional[datetime]:
        """When the snapshot was last written, or None when absent."""

    @abstractmethod
    def delete(self, project_id: str) -> None:
        """Drop the catalogue entry and every environment snapshot; NotFound when unknown."""

    @abstractmethod
    def list_catalogue(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def upsert_catalogue(self, project: Project) -> None:
        ...

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Group several writes so that either all land or none do.
        Subclasses override; the default runs the block as-is.
        """
        yield
