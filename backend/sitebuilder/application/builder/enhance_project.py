# sitebuilder/application/builder/enhance_project.py
import json
import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from sitebuilder.domain.document import BUILDER_ENVIRONMENT, Project, to_iso, utc_now
from sitebuilder.domain.errors import BuilderError, EnhancementParseError, ValidationError
from sitebuilder.domain.identifiers import repair_ids
from sitebuilder.domain.invariants.project import assert_project
from sitebuilder.domain.lifecycle.environment import assert_environment
from sitebuilder.stores.base import DocumentStore
from sitebuilder.utils.audit import log_action

logger = logging.getLogger(__name__)

# (project as JSON mapping, instruction) -> enhanced project as mapping or JSON text
EnhancementTransform = Callable[[Dict[str, Any], str], Union[Dict[str, Any], str]]

_CODE_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def parse_enhanced_payload(raw: Any) -> Dict[str, Any]:
    """
    Turn transform output into a project mapping.

    Text is accepted with or without markdown code fences. The result must
    carry an ``id`` and a ``pages`` array.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")

    if isinstance(raw, str):
        try:
            raw = json.loads(_CODE_FENCE.sub("", raw).strip())
        except json.JSONDecodeError as exc:
            raise EnhancementParseError("Failed to parse AI response as JSON") from exc

    if not isinstance(raw, dict):
        raise EnhancementParseError("Invalid project structure in response")
    if not raw.get("id") or not isinstance(raw.get("pages"), list):
        raise EnhancementParseError("Invalid project structure in response")

    return raw


def enhance_project(
    *,
    project: Project,
    instruction: str,
    transform: EnhancementTransform,
    store: Optional[DocumentStore] = None,
    environment: Optional[str] = None,
    actor_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Project:
    """
    Rewrite a project through the external enhancement transform.

    Responsibilities:
    - reject malformed transform output (EnhancementParseError); the prior
      project and any stored copy stay untouched
    - re-apply the identifier allocator to new or clashing node ids
    - keep deployment history out of the transform's reach
    - validate the result before anything is written
    - optionally save the result to one environment of the store
    """
    if not isinstance(instruction, str) or not instruction.strip():
        raise ValidationError("Enhancement prompt is required")
    if environment is not None:
        assert_environment(environment)

    try:
        raw = transform(project.to_dict(), instruction)
    except BuilderError:
        raise
    except Exception as exc:
        logger.warning("enhancement transform failed for project %s: %s", project.id, exc)
        raise EnhancementParseError("AI enhancement failed. Please try again.") from exc

    payload = parse_enhanced_payload(raw)
    if payload["id"] != project.id:
        raise EnhancementParseError("Enhanced project id does not match the original")

    try:
        enhanced = Project.from_dict(payload)
    except ValidationError as exc:
        raise EnhancementParseError(f"Invalid project structure in response: {exc}") from exc

    enhanced = repair_ids(project, enhanced)
    enhanced = enhanced.with_metadata(
        created_at=project.metadata.created_at,
        last_deployment=dict(project.metadata.last_deployment),
        deployment_history=list(project.metadata.deployment_history),
    )

    assert_project(enhanced)

    if store is not None and environment is not None:
        enhanced = enhanced.with_metadata(
            environment=environment,
            updated_at=to_iso(now or utc_now()),
        )
        with store.transaction():
            store.save(enhanced.id, environment, enhanced)
            if environment == BUILDER_ENVIRONMENT:
                store.upsert_catalogue(enhanced)

            log_action(
                store=store,
                action="project.enhance",
                entity_type="project",
                entity_id=enhanced.id,
                actor_id=actor_id,
                payload={"environment": environment, "instruction": instruction[:200]},
            )

    logger.info("enhanced project %s", project.id)
    return enhanced
