from flask import Flask, send_file, current_app
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .middleware.request_logging import request_logging_middleware
from .errors import register_error_handlers
from .models import audit_log, project, project_document  # noqa: F401  (register tables)
from .services.enhancer import HttpEnhancementTransform
from .stores import SqlDocumentStore
from flask_swagger_ui import get_swaggerui_blueprint
import logging
import os


def create_app(config_name: str = "development", *, store=None, enhancer=None) -> Flask:
    """
    Application factory.

    ``store`` replaces the SQL document store (e.g. MemoryDocumentStore) and
    ``enhancer`` replaces the HTTP enhancement transform; both are reachable
    through ``app.extensions``.
    """
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    if app.config["DEPLOYMENT_HISTORY_LIMIT"] < 1:
        raise ValueError("DEPLOYMENT_HISTORY_LIMIT must be at least 1")

    # -------------------------------------------------
    # Logging
    # -------------------------------------------------
    # Module loggers live under "sitebuilder", the same tree as app.logger
    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    app.extensions["document_store"] = store if store is not None else SqlDocumentStore()
    app.extensions["enhancer"] = enhancer if enhancer is not None else HttpEnhancementTransform(
        url=app.config["ENHANCE_API_URL"],
        timeout=app.config["ENHANCE_TIMEOUT"],
    )

    if app.config.get("AUTO_CREATE_SCHEMA"):
        with app.app_context():
            db.create_all()

    # -------------------------------------------------
    # Middleware
    # -------------------------------------------------
    request_logging_middleware(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC)
    # -------------------------------------------------
    @app.route("/openapi/builder.yaml", methods=["GET"], endpoint="openapi_builder")
    def serve_openapi():
        openapi_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "builder_openapi.yaml",
        )

        if not os.path.exists(openapi_path):
            raise FileNotFoundError("builder_openapi.yaml not found")

        return send_file(
            openapi_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/builder.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Site Builder API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    return app
