from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from sitebuilder.extensions import db
from sitebuilder.models.base import utc_now
from sitebuilder.models.project import ProjectRecord
from sitebuilder.models.project_document import ProjectDocument
from sitebuilder.domain.document import Project
from sitebuilder.domain.errors import BuilderError, IoError, NotFound
from sitebuilder.utils.transaction import transactional
from .base import DocumentStore

_DEPTH_KEY = "document_store_depth"


class SqlDocumentStore(DocumentStore):
    """
    Flask-SQLAlchemy backed store.

    Writes issued inside ``transaction()`` are flushed and committed together
    when the outermost block exits; a write issued on its own commits
    immediately. Any database failure surfaces as IoError.
    """

    supports_audit = True

    # -------------------------------------------------
    # Transaction handling
    # -------------------------------------------------
    @property
    def _depth(self) -> int:
        # session.info is per scoped session, so nesting is tracked per request
        return db.session.info.get(_DEPTH_KEY, 0)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        info = db.session.info
        if info.get(_DEPTH_KEY, 0):
            info[_DEPTH_KEY] += 1
            try:
                yield
            finally:
                info[_DEPTH_KEY] -= 1
            return

        info[_DEPTH_KEY] = 1
        try:
            with transactional():
                yield
        finally:
            info[_DEPTH_KEY] = 0

    @contextmanager
    def _write(self) -> Iterator[None]:
        if self._depth:
            try:
                yield
                db.session.flush()
            except SQLAlchemyError as exc:
                raise IoError(f"storage failure: {exc.__class__.__name__}") from exc
            return

        with self.transaction():
            yield

    # -------------------------------------------------
    # Documents
    # -------------------------------------------------
    def _document(self, project_id: str, environment: str) -> Optional[ProjectDocument]:
        try:
            return ProjectDocument.query.filter_by(
                project_id=project_id,
                environment=environment,
            ).first()
        except SQLAlchemyError as exc:
            raise IoError(f"storage failure: {exc.__class__.__name__}") from exc

    def load(self, project_id: str, environment: str) -> Project:
        row = self._document(project_id, environment)
        if row is None:
            raise NotFound(f"Project not found in {environment} environment")

        try:
            return Project.from_dict(row.document)
        except BuilderError as exc:
            raise IoError(f"stored document is corrupt: {exc}") from exc

    def save(self, project_id: str, environment: str, project: Project) -> None:
        with self._write():
            record = db.session.get(ProjectRecord, project_id)
            if record is None:
                record = ProjectRecord()
                record.id = project_id
                record.name = project.name
                record.project_metadata = project.metadata.to_dict()
                db.session.add(record)

            row = self._document(project_id, environment)
            if row is None:
                row = ProjectDocument()
                row.project_id = project_id
                row.environment = environment
                db.session.add(row)

            row.document = project.to_dict()
            row.updated_at = utc_now()

    def exists(self, project_id: str, environment: str) -> bool:
        return self._document(project_id, environment) is not None

    def updated_at(self, project_id: str, environment: str) -> Optional[datetime]:
        row = self._document(project_id, environment)
        return row.updated_at if row is not None else None

    def delete(self, project_id: str) -> None:
        with self._write():
            record = db.session.get(ProjectRecord, project_id)
            if record is None:
                raise NotFound("Project not found")
            db.session.delete(record)

    # -------------------------------------------------
    # Catalogue
    # -------------------------------------------------
    def list_catalogue(self) -> List[Dict[str, Any]]:
        try:
            records = ProjectRecord.query.order_by(ProjectRecord.created_at.desc(), ProjectRecord.id.asc()).all()
        except SQLAlchemyError as exc:
            raise IoError(f"storage failure: {exc.__class__.__name__}") from exc

        return [
            {
                "id": record.id,
                "name": record.name,
                "metadata": record.project_metadata or {},
            }
            for record in records
        ]

    def upsert_catalogue(self, project: Project) -> None:
        with self._write():
            record = db.session.get(ProjectRecord, project.id)
            if record is None:
                record = ProjectRecord()
                record.id = project.id
                db.session.add(record)

            record.name = project.name
            record.project_metadata = project.metadata.to_dict()
            record.updated_at = utc_now()
