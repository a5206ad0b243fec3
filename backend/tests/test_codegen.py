import copy

import pytest

from sitebuilder.codegen import generate, page_path
from sitebuilder.codegen.markup import render_tree
from sitebuilder.domain.document import ComponentNode, Project
from sitebuilder.domain.errors import StructuralError, ValidationError


def test_generate_is_deterministic(project_data):
    first = generate(Project.from_dict(project_data))
    second = generate(Project.from_dict(copy.deepcopy(project_data)))

    assert first == second


def test_generate_does_not_mutate_input(project):
    before = project.to_dict()

    generate(project)

    assert project.to_dict() == before


def test_text_is_nested_inside_body_markup(project):
    source = generate(project)["pages/index.tsx"]

    assert (
        '      <div className="builder-body-root" style={{"minHeight": "100vh", "width": "100%"}}>\n'
        "        <p>Hi</p>\n"
        "      </div>"
    ) in source
    assert "export default function HomePage()" in source


def test_artifact_set(project):
    artifacts = generate(project)

    assert set(artifacts) == {
        "pages/index.tsx",
        "pages/_app.tsx",
        "pages/_document.tsx",
        "package.json",
        "next.config.js",
        "tailwind.config.js",
        "postcss.config.js",
        "tsconfig.json",
        ".gitignore",
        "README.md",
        "styles/globals.css",
        "config/builderSite.json",
        "config/stagingSite.json",
        "config/productionSite.json",
        "config/project.json",
    }
    assert '"name": "my-site"' in artifacts["package.json"]
    assert '"environment": "staging"' in artifacts["config/stagingSite.json"]


@pytest.mark.parametrize(
    "slug, path",
    [
        ("/", "pages/index.tsx"),
        ("/about", "pages/about.tsx"),
        ("/blog/intro", "pages/blog/intro.tsx"),
    ],
)
def test_page_path(slug, path):
    assert page_path(slug) == path


def test_slug_colliding_with_reserved_page_is_rejected(project_data):
    project_data["pages"][0]["slug"] = "/_app"

    with pytest.raises(ValidationError, match="collides"):
        generate(Project.from_dict(project_data))


def test_invalid_tree_is_rejected(project_data):
    project_data["pages"][0]["tree"].append({"id": "body-2", "type": "Body"})

    with pytest.raises(StructuralError):
        generate(Project.from_dict(project_data))


def _render(node_dict):
    return render_tree([ComponentNode.from_dict(node_dict)])


def test_unsafe_text_is_emitted_as_expression():
    out = _render({"id": "t", "type": "Text", "props": {"text": "a {b} <c>", "tag": "h1"}})

    assert out == '<h1>{"a {b} <c>"}</h1>'


def test_linked_button_is_wrapped_in_anchor():
    out = _render({
        "id": "b",
        "type": "Button",
        "props": {"text": "Go", "linkType": "anchor", "linkTarget": "contact", "openInNewTab": True},
    })

    assert out.splitlines() == [
        '<a href="#contact" target="_blank" rel="noopener noreferrer">',
        '  <button type="button">Go</button>',
        "</a>",
    ]


def test_link_defaults():
    assert _render({"id": "l", "type": "Link"}) == '<a href="#">Link</a>'


def test_ordered_list_with_nested_items():
    out = _render({
        "id": "l",
        "type": "List",
        "props": {"listConfig": {"type": "ordered", "items": [
            {"id": "i1", "text": "One", "children": [{"id": "i2", "text": "Two"}]},
        ]}},
    })

    assert out.splitlines() == [
        "<ol>",
        "  <li>",
        "    One",
        "    <ol>",
        "      <li>Two</li>",
        "    </ol>",
        "  </li>",
        "</ol>",
    ]


def test_grid_gets_grid_style_and_renders_children_in_order():
    out = _render({
        "id": "g",
        "type": "Grid",
        "props": {"gridConfig": {"rows": 1, "cols": 3, "gap": 8}},
        "children": [
            {"id": "t1", "type": "Text", "props": {"text": "A"}},
            {"id": "t2", "type": "Text", "props": {"text": "B"}},
        ],
    })
    lines = out.splitlines()

    assert '"gridTemplateColumns": "repeat(3, 1fr)"' in lines[0]
    assert '"gap": "8px"' in lines[0]
    assert lines[1:] == ["  <p>A</p>", "  <p>B</p>", "</div>"]


def test_form_renders_fields_then_submit():
    out = _render({
        "id": "f",
        "type": "Form",
        "props": {"formConfig": {"fields": [
            {"id": "email", "type": "email", "label": "Email", "required": True},
            {"id": "msg", "type": "textarea", "label": "Message"},
        ]}},
    })

    assert out.splitlines() == [
        "<form>",
        "  <div>",
        '    <label htmlFor="email">Email</label>',
        '    <input id="email" name="email" type="email" required />',
        "  </div>",
        "  <div>",
        '    <label htmlFor="msg">Message</label>',
        '    <textarea id="msg" name="msg" />',
        "  </div>",
        '  <button type="submit">Submit</button>',
        "</form>",
    ]


def test_empty_section_is_self_closing():
    assert _render({"id": "s", "type": "Section", "styles": {"padding": "8px"}}) == (
        '<section style={{"padding": "8px"}} />'
    )


def test_image_maps_src_and_alt():
    out = _render({"id": "i", "type": "Image", "props": {"src": "/hero.png", "alt": "Hero"}})

    assert out == '<img src="/hero.png" alt="Hero" />'


def test_leaf_children_are_not_rendered(project_data):
    text = project_data["pages"][0]["tree"][0]["children"][0]
    text["children"] = [{"id": "image-1", "type": "Image", "props": {"src": "/leak.png", "alt": "leak"}}]

    source = generate(Project.from_dict(project_data))["pages/index.tsx"]

    assert "        <p>Hi</p>\n" in source
    assert "/leak.png" not in source
    assert "<img" not in source
