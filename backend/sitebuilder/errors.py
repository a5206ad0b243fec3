from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from sitebuilder.domain.errors import BuilderError


def register_error_handlers(app):
    @app.errorhandler(BuilderError)
    def handle_builder_error(error):
        if error.status_code >= 500:
            current_app.logger.error("%s: %s", error.kind, error.message, exc_info=error)
        else:
            current_app.logger.info("%s: %s", error.kind, error.message)

        response = jsonify({
            "error": error.kind,
            "message": error.message
        })
        response.status_code = error.status_code
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name,
            "message": error.description
        })
        response.status_code = error.code
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        current_app.logger.exception("Unhandled error")
        response = jsonify({
            "error": "InternalError",
            "message": "An unexpected error occurred"
        })
        response.status_code = 500
        return response
