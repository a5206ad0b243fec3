# sitebuilder/application/builder/deployment_history.py
from typing import Any, Dict

from sitebuilder.domain.document import BUILDER_ENVIRONMENT
from sitebuilder.domain.errors import NotFound
from sitebuilder.stores.base import DocumentStore


def get_deployment_history(*, store: DocumentStore, project_id: str) -> Dict[str, Any]:
    """
    Deployment history as recorded on the builder copy, which every
    promotion writes back to.
    """
    try:
        project = store.load(project_id, BUILDER_ENVIRONMENT)
    except NotFound as exc:
        raise NotFound("Project not found") from exc

    return {
        "projectId": project_id,
        "deploymentHistory": [r.to_dict() for r in project.metadata.deployment_history],
        "lastDeployment": dict(project.metadata.last_deployment),
    }
