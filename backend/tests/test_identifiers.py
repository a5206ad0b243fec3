import re

from sitebuilder.domain.document import ComponentNode, Project, walk_tree
from sitebuilder.domain.identifiers import new_deployment_id, new_id, new_page, repair_ids
from sitebuilder.domain.invariants.tree import validate_tree

ID_PATTERN = re.compile(r"^[a-z]+-\d+-[0-9a-z]{9}$")


def test_new_id_format():
    assert re.match(r"^text-1718000000000-[0-9a-z]{9}$", new_id("Text", now_ms=1718000000000))
    assert ID_PATTERN.match(new_id("Body"))
    assert new_deployment_id().startswith("deploy-")


def test_new_ids_do_not_repeat():
    ids = {new_id("Div", now_ms=0) for _ in range(2000)}

    assert len(ids) == 2000


def test_new_page_is_valid_from_birth():
    page = new_page("About", "/about")

    assert page.id.startswith("page-")
    assert [n.type for n in page.tree] == ["Body"]
    assert validate_tree(page.tree) == []


def _ids(project):
    return [n.id for page in project.pages for n in walk_tree(page.tree)]


def test_repair_keeps_prior_ids_and_replaces_missing_and_repeated(project):
    enhanced = project.copy()
    body = enhanced.pages[0].tree[0]
    body.children.append(ComponentNode(id="", type="Button"))
    body.children.append(ComponentNode(id="text-1", type="Text", props={"text": "copy"}))
    before = enhanced.to_dict()

    repaired = repair_ids(project, enhanced)

    ids = _ids(repaired)
    assert ids[:3] == ["body-1", "text-1", ids[2]]
    assert ID_PATTERN.match(ids[2]) and ids[2].startswith("button-")
    assert ids[3].startswith("text-") and ids[3] != "text-1"
    assert len(set(ids)) == len(ids)
    assert validate_tree(repaired.pages[0].tree) == []
    # inputs untouched
    assert enhanced.to_dict() == before
    assert _ids(project) == ["body-1", "text-1"]


def test_repair_leaves_a_clean_project_alone(project):
    assert repair_ids(project, project).to_dict() == project.to_dict()


def test_repair_is_per_page():
    data = {
        "id": "p",
        "name": "P",
        "pages": [
            {"id": "a", "slug": "/", "tree": [{"id": "body-1", "type": "Body"}]},
            {"id": "b", "slug": "/b", "tree": [{"id": "body-1", "type": "Body"}]},
        ],
    }
    project = Project.from_dict(data)

    assert _ids(repair_ids(project, project)) == ["body-1", "body-1"]


def test_prior_id_stays_on_the_node_of_its_prior_type(project):
    enhanced = project.copy()
    body = enhanced.pages[0].tree[0]
    body.children.insert(0, ComponentNode(id="text-1", type="Image", props={"src": "/a.png"}))

    repaired = repair_ids(project, enhanced)

    image, text = repaired.pages[0].tree[0].children
    assert (text.type, text.id) == ("Text", "text-1")
    assert image.type == "Image"
    assert ID_PATTERN.match(image.id) and image.id.startswith("image-")
    assert validate_tree(repaired.pages[0].tree) == []


def test_retyped_node_keeps_an_unclaimed_prior_id(project):
    enhanced = project.copy()
    enhanced.pages[0].tree[0].children[0].type = "Button"

    repaired = repair_ids(project, enhanced)

    assert _ids(repaired) == ["body-1", "text-1"]
