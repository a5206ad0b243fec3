import copy
import json

import pytest
import requests

from sitebuilder.application.builder.enhance_project import enhance_project, parse_enhanced_payload
from sitebuilder.application.builder.promote_project import promote_project
from sitebuilder.application.builder.save_project import create_or_update_project
from sitebuilder.domain.document import walk_tree
from sitebuilder.domain.errors import EnhancementParseError, StructuralError, ValidationError
from sitebuilder.services.enhancer import HttpEnhancementTransform, extract_content


def _rename(project):
    return {**project, "name": "Renamed"}


def _add_heading(project):
    enhanced = copy.deepcopy(project)
    enhanced["pages"][0]["tree"][0]["children"].insert(
        0, {"type": "Text", "props": {"text": "Welcome", "tag": "h1"}}
    )
    return enhanced


def test_enhancement_keeps_ids_and_mints_new_ones(project, make_enhancer):
    transform = make_enhancer(reply=_add_heading)

    enhanced = enhance_project(project=project, instruction="add a heading", transform=transform)

    ids = [n.id for n in walk_tree(enhanced.pages[0].tree)]
    assert ids[0] == "body-1"
    assert ids[1].startswith("text-")
    assert ids[2] == "text-1"
    assert transform.calls[0][1] == "add a heading"


def test_missing_pages_leaves_stored_document_untouched(memory_store, project_data, make_enhancer):
    create_or_update_project(store=memory_store, data=project_data)
    stored = memory_store.load("site-1", "builder")
    before = json.dumps(memory_store.raw("site-1", "builder"), sort_keys=True)

    transform = make_enhancer(reply={"id": "site-1", "name": "My Site"})
    with pytest.raises(EnhancementParseError):
        enhance_project(
            project=stored,
            instruction="make it pop",
            transform=transform,
            store=memory_store,
            environment="builder",
        )

    assert json.dumps(memory_store.raw("site-1", "builder"), sort_keys=True) == before


def test_deployment_history_survives_enhancement(memory_store, project_data, make_enhancer):
    create_or_update_project(store=memory_store, data=project_data)
    promote_project(store=memory_store, project_id="site-1", target_environment="staging")
    stored = memory_store.load("site-1", "builder")

    def drop_metadata(project):
        return {**project, "metadata": {}}

    enhanced = enhance_project(
        project=stored,
        instruction="rewrite",
        transform=make_enhancer(reply=drop_metadata),
        store=memory_store,
        environment="builder",
    )

    assert enhanced.metadata.deployment_history == stored.metadata.deployment_history
    assert enhanced.metadata.last_deployment == stored.metadata.last_deployment
    assert memory_store.load("site-1", "builder").metadata.deployment_history == stored.metadata.deployment_history


def test_builder_enhancement_refreshes_the_catalogue(store, project_data, make_enhancer):
    create_or_update_project(store=store, data=project_data)

    enhance_project(
        project=store.load("site-1", "builder"),
        instruction="rename it",
        transform=make_enhancer(reply=_rename),
        store=store,
        environment="builder",
    )

    assert [entry["name"] for entry in store.list_catalogue()] == ["Renamed"]


def test_staging_enhancement_leaves_the_catalogue_alone(store, project_data, make_enhancer):
    create_or_update_project(store=store, data=project_data)

    enhance_project(
        project=store.load("site-1", "builder"),
        instruction="rename it",
        transform=make_enhancer(reply=_rename),
        store=store,
        environment="staging",
    )

    assert store.load("site-1", "staging").name == "Renamed"
    assert [entry["name"] for entry in store.list_catalogue()] == ["My Site"]


def test_fenced_json_text_is_accepted(project, make_enhancer):
    text = "```json\n" + json.dumps(project.to_dict()) + "\n```"

    enhanced = enhance_project(project=project, instruction="noop", transform=make_enhancer(reply=text))

    assert enhanced.pages == project.pages


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        ["a", "list"],
        {"pages": []},
        {"id": "site-1", "pages": "nope"},
    ],
)
def test_malformed_payloads(raw):
    with pytest.raises(EnhancementParseError):
        parse_enhanced_payload(raw)


def test_project_id_must_not_change(project, project_data, make_enhancer):
    project_data["id"] = "someone-else"

    with pytest.raises(EnhancementParseError):
        enhance_project(project=project, instruction="x", transform=make_enhancer(reply=project_data))


def test_transform_failure_is_a_parse_error(project, make_enhancer):
    with pytest.raises(EnhancementParseError):
        enhance_project(project=project, instruction="x", transform=make_enhancer(error=TimeoutError("slow")))


def test_invalid_tree_after_repair_writes_nothing(memory_store, project_data, make_enhancer):
    create_or_update_project(store=memory_store, data=project_data)
    before = memory_store.raw("site-1", "builder")
    bad = copy.deepcopy(project_data)
    bad["pages"][0]["tree"].append({"id": "body-2", "type": "Body"})

    with pytest.raises(StructuralError):
        enhance_project(
            project=memory_store.load("site-1", "builder"),
            instruction="x",
            transform=make_enhancer(reply=bad),
            store=memory_store,
            environment="builder",
        )

    assert memory_store.raw("site-1", "builder") == before


def test_instruction_is_required(project, make_enhancer):
    transform = make_enhancer(reply={})

    with pytest.raises(ValidationError):
        enhance_project(project=project, instruction="   ", transform=transform)
    assert transform.calls == []


class _Response:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, json=None, timeout=None):
        self.requests.append((url, json, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_http_transform_posts_chat_messages(project_data):
    session = _Session(_Response({"message": {"content": "{}"}}))
    transform = HttpEnhancementTransform(url="http://chef.local/api/chat", timeout=5, session=session)

    assert transform(project_data, "add a footer") == "{}"

    url, body, timeout = session.requests[0]
    assert url == "http://chef.local/api/chat"
    assert timeout == 5
    assert body["stream"] is False
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert "add a footer" in body["messages"][1]["content"]


@pytest.mark.parametrize(
    "session",
    [
        _Session(error=requests.ConnectionError("refused")),
        _Session(_Response({}, status=502)),
    ],
)
def test_http_transport_failures_become_parse_errors(session, project_data):
    transform = HttpEnhancementTransform(session=session)

    with pytest.raises(EnhancementParseError):
        transform(project_data, "x")


def test_extract_content_shapes():
    assert extract_content({"content": "a"}) == "a"
    assert extract_content({"message": {"content": "b"}}) == "b"
    assert extract_content({"id": "p", "pages": []}) == {"id": "p", "pages": []}
