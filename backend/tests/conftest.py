import copy

import pytest

from sitebuilder import create_app
from sitebuilder.domain.document import Project
from sitebuilder.extensions import db
from sitebuilder.stores import MemoryDocumentStore, SqlDocumentStore


SAMPLE_PROJECT = {
    "id": "site-1",
    "name": "My Site",
    "pages": [
        {
            "id": "page-home",
            "name": "Home",
            "slug": "/",
            "tree": [
                {
                    "id": "body-1",
                    "type": "Body",
                    "props": {},
                    "styles": {},
                    "metadata": {"name": "Body"},
                    "children": [
                        {
                            "id": "text-1",
                            "type": "Text",
                            "props": {"text": "Hi"},
                            "styles": {},
                            "children": [],
                        }
                    ],
                }
            ],
        }
    ],
    "metadata": {"description": "Landing page"},
}


class FakeEnhancer:
    """Enhancement transform double: returns a canned reply and records calls."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def __call__(self, project, instruction):
        self.calls.append((copy.deepcopy(project), instruction))
        if self.error is not None:
            raise self.error
        if callable(self.reply):
            return self.reply(project)
        return copy.deepcopy(self.reply)


@pytest.fixture
def project_data():
    return copy.deepcopy(SAMPLE_PROJECT)


@pytest.fixture
def project(project_data):
    return Project.from_dict(project_data)


@pytest.fixture
def enhancer():
    return FakeEnhancer()


@pytest.fixture
def app(enhancer):
    app = create_app("testing", enhancer=enhancer)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def memory_store():
    return MemoryDocumentStore()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        return MemoryDocumentStore()
    request.getfixturevalue("app")
    return SqlDocumentStore()


@pytest.fixture
def make_enhancer():
    return FakeEnhancer
