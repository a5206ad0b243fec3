from flask import Blueprint, current_app

# Create the versioned blueprint
v1_bp = Blueprint("v1", __name__)


def document_store():
    return current_app.extensions["document_store"]


def enhancement_transform():
    return current_app.extensions["enhancer"]


# Import route modules so they register with v1_bp
from . import health
from . import projects
from . import environments
from . import builder
from . import audit
