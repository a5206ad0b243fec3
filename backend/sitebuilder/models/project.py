from sitebuilder.extensions import db
from .base import BaseModel


class ProjectRecord(BaseModel):
    """Catalogue row: one per known project, used by listing operations."""
    __tablename__ = "projects"

    id = db.Column(db.String(128), primary_key=True)
    name = db.Column(db.String(255), nullable=False, default="")
    # "metadata" is reserved on declarative models
    project_metadata = db.Column("metadata", db.JSON, nullable=False, default=dict)

    documents = db.relationship(
        "ProjectDocument",
        back_populates="project",
        cascade="all, delete-orphan",
    )
