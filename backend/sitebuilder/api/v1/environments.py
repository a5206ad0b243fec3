# sitebuilder/api/v1/environments.py
from flask import g, jsonify, request

from sitebuilder.application.builder.save_project import load_from_environment, save_to_environment
from sitebuilder.domain.errors import ValidationError
from sitebuilder.utils.decorators import auth_required
from sitebuilder.utils.optimistic_lock import if_unmodified_since
from . import v1_bp, document_store


@v1_bp.route("/projects/<project_id>/environments/<environment>", methods=["PUT"])
@auth_required
def save_environment(project_id, environment):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    store = document_store()

    project = save_to_environment(
        store=store,
        project_id=project_id,
        environment=environment,
        data=data.get("project", data),
        actor_id=g.actor_id,
        if_unmodified_since=if_unmodified_since(),
    )

    response = jsonify({
        "success": True,
        "message": f"Project saved to {environment} environment",
        "projectId": project.id,
        "environment": environment,
        "updatedAt": project.metadata.updated_at,
    })
    response.last_modified = store.updated_at(project_id, environment)
    return response


@v1_bp.route("/projects/<project_id>/environments/<environment>", methods=["GET"])
@auth_required
def load_environment(project_id, environment):
    store = document_store()

    project = load_from_environment(
        store=store,
        project_id=project_id,
        environment=environment,
    )

    response = jsonify({
        "success": True,
        "project": project.to_dict(),
        "environment": environment,
    })
    # Echo as If-Unmodified-Since on the next save to detect concurrent edits
    response.last_modified = store.updated_at(project_id, environment)
    return response
