import uuid
from sitebuilder.extensions import db
from .base import BaseModel


class ProjectDocument(BaseModel):
    """A full Project snapshot for one (project_id, environment) pair."""
    __tablename__ = "project_documents"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = db.Column(
        db.String(128),
        db.ForeignKey("projects.id"),
        nullable=False,
        index=True,
    )
    environment = db.Column(db.String(20), nullable=False)  # builder | staging | production
    document = db.Column(db.JSON, nullable=False)

    project = db.relationship("ProjectRecord", back_populates="documents")

    __table_args__ = (
        db.UniqueConstraint("project_id", "environment", name="uq_project_environment"),
        db.Index("idx_project_document_env", "project_id", "environment"),
    )
