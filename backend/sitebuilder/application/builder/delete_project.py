# sitebuilder/application/builder/delete_project.py
import logging
from typing import Optional

from sitebuilder.stores.base import DocumentStore
from sitebuilder.utils.audit import log_action

logger = logging.getLogger(__name__)


def delete_project(
    *,
    store: DocumentStore,
    project_id: str,
    actor_id: Optional[str] = None,
) -> None:
    """
    Delete a project: its catalogue entry and every environment copy.

    Raises NotFound when the project is unknown.
    """
    with store.transaction():
        store.delete(project_id)

        log_action(
            store=store,
            action="project.delete",
            entity_type="project",
            entity_id=project_id,
            actor_id=actor_id,
        )

    logger.info("deleted project %s", project_id)
