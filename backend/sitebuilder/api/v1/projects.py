# sitebuilder/api/v1/projects.py
from flask import current_app, g, jsonify, request, send_file
from io import BytesIO

from sitebuilder.application.builder.delete_project import delete_project as delete_project_op
from sitebuilder.application.builder.deployment_history import get_deployment_history
from sitebuilder.application.builder.export_project import export_archive
from sitebuilder.application.builder.promote_project import promote_project
from sitebuilder.application.builder.save_project import (
    create_or_update_project,
    get_project as get_project_op,
    list_projects as list_projects_op,
)
from sitebuilder.domain.errors import ValidationError
from sitebuilder.normalizers.pagination import normalize_pagination
from sitebuilder.normalizers.project import normalize_catalogue_entry
from sitebuilder.utils.decorators import auth_required
from sitebuilder.utils.pagination import paginate_sequence, parse_offset_args
from . import v1_bp, document_store


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# ------------------------
# Catalogue
# ------------------------

@v1_bp.route("/projects", methods=["GET"])
@auth_required
def list_projects():
    page, per_page = parse_offset_args(request.args)

    entries = list_projects_op(store=document_store())

    return jsonify(
        normalize_pagination(
            paginate_sequence(entries, page=page, per_page=per_page),
            normalize_catalogue_entry,
            key="projects",
            page=page,
            per_page=per_page,
            total=len(entries),
        )
    )


@v1_bp.route("/projects", methods=["POST"])
@auth_required
def create_project():
    data = _json_body()

    project = create_or_update_project(
        store=document_store(),
        data=data,
        actor_id=g.actor_id,
    )

    return jsonify({
        "success": True,
        "project": project.to_dict()
    }), 200


@v1_bp.route("/projects/<project_id>", methods=["GET"])
@auth_required
def get_project(project_id):
    project = get_project_op(store=document_store(), project_id=project_id)
    return jsonify({"project": project.to_dict()})


@v1_bp.route("/projects/<project_id>", methods=["DELETE"])
@auth_required
def delete_project(project_id):
    delete_project_op(
        store=document_store(),
        project_id=project_id,
        actor_id=g.actor_id,
    )
    return jsonify({"success": True})


# ------------------------
# Promotion
# ------------------------

@v1_bp.route("/projects/<project_id>/deploy", methods=["POST"])
@auth_required
def deploy_project(project_id):
    data = request.get_json(silent=True) or {}

    message = data.get("message")
    if message is not None and not isinstance(message, str):
        raise ValidationError("message must be a string")

    result = promote_project(
        store=document_store(),
        project_id=project_id,
        target_environment=data.get("targetEnvironment"),
        message=message,
        actor_id=g.actor_id,
        history_limit=current_app.config["DEPLOYMENT_HISTORY_LIMIT"],
    )

    return jsonify({
        "success": True,
        "message": f"Successfully deployed to {result['environment']}",
        **result
    }), 200


@v1_bp.route("/projects/<project_id>/deployments", methods=["GET"])
@auth_required
def list_deployments(project_id):
    return jsonify(get_deployment_history(store=document_store(), project_id=project_id))


# ------------------------
# Export
# ------------------------

@v1_bp.route("/projects/export", methods=["POST"])
@auth_required
def export_project():
    data = _json_body()
    # Accept both {project: {...}} and a bare project body
    project_data = data.get("project", data)

    filename, archive = export_archive(
        data=project_data,
        compression_level=current_app.config["EXPORT_COMPRESSION_LEVEL"],
    )

    return send_file(
        BytesIO(archive),
        mimetype="application/zip",
        as_attachment=True,
        download_name=filename,
    )
