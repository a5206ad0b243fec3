# sitebuilder/codegen/generator.py
import json
import logging
import re
from typing import Dict

from sitebuilder.domain.document import ENVIRONMENTS, Page, Project
from sitebuilder.domain.errors import ValidationError
from sitebuilder.domain.invariants.page import HOME_SLUG
from sitebuilder.domain.invariants.project import assert_project
from . import templates
from .markup import render_tree

logger = logging.getLogger(__name__)

PAGES_DIR = "pages"
PAGE_EXTENSION = ".tsx"
INDEX_NAME = "index"

# Files under pages/ the generator writes itself
RESERVED_PAGE_PATHS = {
    f"{PAGES_DIR}/_app{PAGE_EXTENSION}",
    f"{PAGES_DIR}/_document{PAGE_EXTENSION}",
}


def page_path(slug: str) -> str:
    """
    "/"           -> pages/index.tsx
    "/about"      -> pages/about.tsx
    "/blog/intro" -> pages/blog/intro.tsx
    """
    if slug == HOME_SLUG:
        return f"{PAGES_DIR}/{INDEX_NAME}{PAGE_EXTENSION}"
    return f"{PAGES_DIR}/{slug.lstrip('/')}{PAGE_EXTENSION}"


def component_name(page: Page) -> str:
    words = re.findall(r"[A-Za-z0-9]+", page.name)
    base = "".join(word[:1].upper() + word[1:] for word in words) or "Untitled"
    if base[0].isdigit():
        base = f"Page{base}"
    return f"{base}Page"


def page_source(page: Page) -> str:
    body = render_tree(page.tree, depth=3)
    title = page.name.replace("*/", "* /") or page.slug

    return f"""/**
 * {title}
 * Auto-generated from website builder
 */

export default function {component_name(page)}() {{
  return (
    <div className="page-container">
{body}
    </div>
  );
}}
"""


def _environment_snapshot(project: Project, environment: str) -> str:
    data = project.to_dict()
    data["metadata"] = {**data["metadata"], "environment": environment}
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def generate(project: Project) -> Dict[str, str]:
    """
    Compile a project into its artifact set: {artifact path: source text}.

    Deterministic and pure: no clock, no I/O, and the input is never
    mutated, so identical projects always produce identical artifacts.
    Raises StructuralError / ValidationError for projects that fail
    validation or whose slugs map onto the same file.
    """
    assert_project(project)

    artifacts: Dict[str, str] = {}

    # -------------------------------------------------
    # Pages
    # -------------------------------------------------
    for page in project.pages:
        path = page_path(page.slug)
        if path in artifacts or path in RESERVED_PAGE_PATHS:
            raise ValidationError(f"slug collides with another page file: {page.slug}")
        artifacts[path] = page_source(page)

    artifacts[f"{PAGES_DIR}/_app{PAGE_EXTENSION}"] = templates.APP_PAGE
    artifacts[f"{PAGES_DIR}/_document{PAGE_EXTENSION}"] = templates.DOCUMENT_PAGE

    # -------------------------------------------------
    # Project files
    # -------------------------------------------------
    artifacts["package.json"] = templates.package_json(project.name)
    artifacts["next.config.js"] = templates.NEXT_CONFIG
    artifacts["tailwind.config.js"] = templates.TAILWIND_CONFIG
    artifacts["postcss.config.js"] = templates.POSTCSS_CONFIG
    artifacts["tsconfig.json"] = templates.TSCONFIG
    artifacts[".gitignore"] = templates.GITIGNORE
    artifacts["README.md"] = templates.readme(project.name)
    artifacts["styles/globals.css"] = templates.GLOBALS_CSS

    # -------------------------------------------------
    # Environment snapshots
    # -------------------------------------------------
    for environment in ENVIRONMENTS:
        artifacts[f"config/{environment}Site.json"] = _environment_snapshot(project, environment)
    artifacts["config/project.json"] = json.dumps(project.to_dict(), indent=2, ensure_ascii=False) + "\n"

    logger.debug("generated %d artifacts for project %s", len(artifacts), project.id)
    return artifacts
