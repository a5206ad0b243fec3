# sitebuilder/application/builder/promote_project.py
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sitebuilder.domain.document import (
    BUILDER_ENVIRONMENT,
    DEPLOYMENT_HISTORY_LIMIT,
    DeploymentRecord,
    to_iso,
    utc_now,
)
from sitebuilder.domain.errors import NotFound
from sitebuilder.domain.identifiers import new_deployment_id
from sitebuilder.domain.invariants.project import assert_project
from sitebuilder.domain.lifecycle.environment import assert_promotion
from sitebuilder.stores.base import DocumentStore
from sitebuilder.utils.audit import log_action

logger = logging.getLogger(__name__)


def promote_project(
    *,
    store: DocumentStore,
    project_id: str,
    target_environment: str,
    message: Optional[str] = None,
    actor_id: Optional[str] = None,
    now: Optional[datetime] = None,
    history_limit: int = DEPLOYMENT_HISTORY_LIMIT,
) -> Dict[str, Any]:
    """
    Copy the builder snapshot into a target environment and record it.

    Responsibilities:
    - promotion target enforcement (staging | production)
    - builder snapshot must exist, have pages and pass validation
    - immutable DeploymentRecord appended, history capped (oldest evicted)
    - target copy and builder copy written in one store transaction, so a
      failure leaves both prior snapshots intact
    - audit logging
    """
    if history_limit < 1:
        raise ValueError("history_limit must be at least 1")

    # 1️⃣ Target environment
    assert_promotion(from_environment=BUILDER_ENVIRONMENT, to_environment=target_environment)

    # 2️⃣ Authoring copy
    try:
        builder = store.load(project_id, BUILDER_ENVIRONMENT)
    except NotFound as exc:
        raise NotFound("no builder project") from exc

    # 3️⃣ Invariants (non-empty pages first, then every tree)
    assert_project(builder, require_pages=True)

    # 4️⃣ Deployment record + metadata
    deployed_at = to_iso(now or utc_now())
    record = DeploymentRecord(
        id=new_deployment_id(),
        environment=target_environment,
        deployed_at=deployed_at,
        status="success",
        message=message or f"Deployed to {target_environment}",
        deployed_by=actor_id,
    )

    history = [*builder.metadata.deployment_history, record][-history_limit:]

    synced = builder.with_metadata(
        updated_at=deployed_at,
        last_deployment={**builder.metadata.last_deployment, target_environment: deployed_at},
        deployment_history=history,
    )
    # Same snapshot; each copy is labelled with the environment it lives in
    deployed = synced.with_metadata(environment=target_environment)
    synced = synced.with_metadata(environment=BUILDER_ENVIRONMENT)

    # 5️⃣ Target first, then builder sync; all or nothing
    with store.transaction():
        store.save(project_id, target_environment, deployed)
        store.save(project_id, BUILDER_ENVIRONMENT, synced)
        store.upsert_catalogue(synced)

        log_action(
            store=store,
            action="project.promote",
            entity_type="project",
            entity_id=project_id,
            actor_id=actor_id,
            payload={"environment": target_environment, "deployment_id": record.id},
        )

    logger.info("promoted project %s to %s (%s)", project_id, target_environment, record.id)

    return {
        "projectId": project_id,
        "environment": target_environment,
        "deployedAt": deployed_at,
        "deploymentLog": record.to_dict(),
    }
