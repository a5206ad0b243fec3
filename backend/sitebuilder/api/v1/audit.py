from flask import request, jsonify

from sitebuilder.domain.errors import ValidationError
from sitebuilder.models.audit_log import AuditLog
from sitebuilder.normalizers.audit import normalize_audit_log
from sitebuilder.normalizers.pagination import normalize_pagination
from sitebuilder.stores.sql import SqlDocumentStore
from sitebuilder.utils.decorators import auth_required
from sitebuilder.utils.pagination import paginate_cursor, parse_limit
from . import v1_bp, document_store


@v1_bp.route("/audit", methods=["GET"])
@auth_required
def list_audit_logs():
    if not isinstance(document_store(), SqlDocumentStore):
        raise ValidationError("Audit trail requires the SQL document store")

    query = AuditLog.query

    # Optional filters
    if action := request.args.get("action"):
        query = query.filter(AuditLog.action == action)

    if entity_type := request.args.get("entity_type"):
        query = query.filter(AuditLog.entity_type == entity_type)

    if entity_id := request.args.get("entity_id"):
        query = query.filter(AuditLog.entity_id == entity_id)

    logs, meta = paginate_cursor(
        query,
        model=AuditLog,
        cursor=request.args.get("cursor"),
        limit=parse_limit(request.args),
    )

    return jsonify(
        normalize_pagination(logs, normalize_audit_log, key="data", cursor=meta)
    ), 200
