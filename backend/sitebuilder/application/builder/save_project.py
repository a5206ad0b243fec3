# sitebuilder/application/builder/save_project.py
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sitebuilder.domain.document import BUILDER_ENVIRONMENT, Project, to_iso, utc_now
from sitebuilder.domain.errors import ConflictError, NotFound, ValidationError
from sitebuilder.domain.invariants.project import assert_project
from sitebuilder.domain.lifecycle.environment import assert_environment
from sitebuilder.stores.base import DocumentStore
from sitebuilder.utils.audit import log_action
from sitebuilder.utils.optimistic_lock import is_modified_since

logger = logging.getLogger(__name__)


def list_projects(*, store: DocumentStore) -> List[Dict[str, Any]]:
    """Catalogue entries ({id, name, metadata}) for every known project."""
    return store.list_catalogue()


def get_project(*, store: DocumentStore, project_id: str) -> Project:
    try:
        return store.load(project_id, BUILDER_ENVIRONMENT)
    except NotFound as exc:
        raise NotFound("Project not found") from exc


def load_from_environment(
    *,
    store: DocumentStore,
    project_id: str,
    environment: str,
) -> Project:
    assert_environment(environment)
    return store.load(project_id, environment)


def create_or_update_project(
    *,
    store: DocumentStore,
    data: Dict[str, Any],
    actor_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Project:
    """
    Create or overwrite the authoring (builder) copy of a project.

    Responsibilities:
    - shape check (id and name are required)
    - createdAt kept when supplied, updatedAt stamped
    - tree invariants on every page
    - builder document + catalogue entry written together
    """
    if not isinstance(data, dict) or not data.get("id") or not data.get("name"):
        raise ValidationError("Invalid project: missing id or name")

    project = Project.from_dict(data)
    stamp = to_iso(now or utc_now())

    project = project.with_metadata(
        environment=BUILDER_ENVIRONMENT,
        created_at=project.metadata.created_at or stamp,
        updated_at=stamp,
    )

    assert_project(project)

    with store.transaction():
        store.save(project.id, BUILDER_ENVIRONMENT, project)
        store.upsert_catalogue(project)

        log_action(
            store=store,
            action="project.save",
            entity_type="project",
            entity_id=project.id,
            actor_id=actor_id,
            payload={"environment": BUILDER_ENVIRONMENT, "pages": len(project.pages)},
        )

    logger.info("saved project %s (%d pages)", project.id, len(project.pages))
    return project


def save_to_environment(
    *,
    store: DocumentStore,
    project_id: str,
    environment: str,
    data: Dict[str, Any],
    actor_id: Optional[str] = None,
    now: Optional[datetime] = None,
    if_unmodified_since: Optional[datetime] = None,
) -> Project:
    """
    Overwrite one environment's copy of a project.

    The saved copy is stamped with its environment and updatedAt; nothing
    else is changed, so a later load returns the same project. When
    ``if_unmodified_since`` is given and the stored copy changed after that
    instant, the save is refused with ConflictError. Otherwise last write
    wins.
    """
    assert_environment(environment)

    if not isinstance(data, dict) or not data.get("id") or not data.get("name"):
        raise ValidationError("Invalid project data. Missing id or name.")
    if data["id"] != project_id:
        raise ValidationError("Project id does not match the request path")

    project = Project.from_dict(data)
    project = project.with_metadata(
        environment=environment,
        updated_at=to_iso(now or utc_now()),
    )

    assert_project(project)

    with store.transaction():
        if if_unmodified_since is not None:
            stored_at = store.updated_at(project_id, environment)
            if stored_at is not None and is_modified_since(stored_at, if_unmodified_since):
                raise ConflictError("Conflict detected. Project has been modified.")

        store.save(project_id, environment, project)
        if environment == BUILDER_ENVIRONMENT:
            store.upsert_catalogue(project)

        log_action(
            store=store,
            action="project.save",
            entity_type="project",
            entity_id=project_id,
            actor_id=actor_id,
            payload={"environment": environment, "pages": len(project.pages)},
        )

    logger.info("saved project %s to %s", project_id, environment)
    return project
