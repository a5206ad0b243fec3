# sitebuilder/api/v1/builder.py
from flask import current_app, g, jsonify, request

from sitebuilder.application.builder.enhance_project import enhance_project as enhance_project_op
from sitebuilder.domain.document import Project
from sitebuilder.domain.errors import ValidationError
from sitebuilder.utils.decorators import auth_required
from . import v1_bp, document_store, enhancement_transform


@v1_bp.route("/builder/enhance", methods=["POST"])
@auth_required
def enhance_project():
    """
    Body: {project, enhancementPrompt, environment?}

    Returns the enhanced project. With ``environment`` the result is also
    saved to that copy; otherwise nothing is written.
    """
    data = request.get_json(silent=True) or {}

    if not isinstance(data.get("project"), dict):
        raise ValidationError("Project data is required")

    prompt = data.get("enhancementPrompt")
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationError("Enhancement prompt is required")

    project = Project.from_dict(data["project"])
    environment = data.get("environment")

    enhanced = enhance_project_op(
        project=project,
        instruction=prompt,
        transform=enhancement_transform(),
        store=document_store() if environment else None,
        environment=environment,
        actor_id=g.actor_id,
    )

    current_app.logger.info("Enhanced project %s", enhanced.id)

    return jsonify({
        "success": True,
        "project": enhanced.to_dict()
    })
