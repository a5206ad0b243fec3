import pytest

from sitebuilder.domain.document import MAX_TREE_DEPTH, ComponentNode, Page, Project
from sitebuilder.domain.errors import StructuralError, ValidationError
from sitebuilder.domain.invariants.page import assert_slug
from sitebuilder.domain.invariants.project import assert_project
from sitebuilder.domain.invariants.tree import validate_tree


def node(node_id, node_type, *children, **props):
    return ComponentNode(id=node_id, type=node_type, props=props, children=list(children))


def test_valid_tree_has_no_warnings():
    tree = [node("body-1", "Body", node("section-1", "Section", node("text-1", "Text", text="Hi")))]

    assert validate_tree(tree) == []


def test_empty_tree_has_no_root():
    with pytest.raises(StructuralError, match="missing or duplicate root"):
        validate_tree([])


def test_first_node_must_be_body():
    with pytest.raises(StructuralError, match="missing or duplicate root"):
        validate_tree([node("div-1", "Div")])


def test_second_top_level_body_is_rejected():
    with pytest.raises(StructuralError, match="missing or duplicate root"):
        validate_tree([node("body-1", "Body"), node("body-2", "Body")])


def test_nested_body_is_rejected():
    tree = [node("body-1", "Body", node("div-1", "Div", node("body-2", "Body")))]

    with pytest.raises(StructuralError, match="missing or duplicate root"):
        validate_tree(tree)


def test_repeated_id_is_rejected():
    tree = [node("body-1", "Body", node("text-1", "Text"), node("text-1", "Text"))]

    with pytest.raises(StructuralError, match="duplicate id: text-1"):
        validate_tree(tree)


def test_missing_id_is_rejected():
    with pytest.raises(StructuralError, match="missing id"):
        validate_tree([node("body-1", "Body", node("", "Text"))])


def test_unknown_type_is_rejected():
    with pytest.raises(StructuralError, match="unknown type: Carousel"):
        validate_tree([node("body-1", "Body", node("c-1", "Carousel"))])


def test_leaf_with_children_is_a_warning():
    tree = [node("body-1", "Body", node("text-1", "Text", node("text-2", "Text")))]

    warnings = validate_tree(tree)

    assert len(warnings) == 1
    assert "text-1" in warnings[0]


def _chain(levels):
    deepest = node(f"div-{levels}", "Div")
    for level in range(levels - 1, 0, -1):
        deepest = node(f"div-{level}", "Div", deepest)
    return deepest


def test_tree_nested_past_the_limit_is_rejected():
    assert validate_tree([node("body-1", "Body", _chain(MAX_TREE_DEPTH - 1))]) == []

    with pytest.raises(StructuralError, match="nested deeper"):
        validate_tree([node("body-1", "Body", _chain(MAX_TREE_DEPTH))])


def test_validation_is_idempotent_and_pure():
    tree = [node("body-1", "Body", node("img-1", "Image", node("text-1", "Text")))]
    before = [n.to_dict() for n in tree]

    assert validate_tree(tree) == validate_tree(tree)
    assert [n.to_dict() for n in tree] == before


@pytest.mark.parametrize("slug", ["/", "/about", "/blog/first-post", "/v1.2/notes_~x"])
def test_valid_slugs(slug):
    assert_slug(slug)


@pytest.mark.parametrize("slug", ["", "about", "/about/", "//x", "/../etc", "/a/./b", "/hello world", "/a?b"])
def test_invalid_slugs(slug):
    with pytest.raises(ValidationError, match="invalid slug"):
        assert_slug(slug)


def _page(page_id, slug):
    return Page(id=page_id, name=page_id, slug=slug, tree=[node(f"body-{page_id}", "Body")])


def test_project_slugs_must_be_unique():
    project = Project(id="p", name="P", pages=[_page("a", "/about"), _page("b", "/about")])

    with pytest.raises(ValidationError, match="duplicate slug: /about"):
        assert_project(project)


def test_project_without_pages_only_fails_when_pages_are_required():
    project = Project(id="p", name="P")

    assert assert_project(project) == []
    with pytest.raises(ValidationError, match="project has no pages"):
        assert_project(project, require_pages=True)
