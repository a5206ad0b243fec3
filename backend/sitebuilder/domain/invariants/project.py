from typing import List, Set

from .page import assert_page
from ..document import Project
from ..errors import ValidationError


def assert_project(project: Project, *, require_pages: bool = False) -> List[str]:
    """
    Validate every page of a project and the project-level rules.

    - slugs are unique per project
    - with require_pages, the project must have at least one page
    """
    if require_pages and not project.pages:
        raise ValidationError("project has no pages")

    warnings: List[str] = []
    slugs: Set[str] = set()

    for page in project.pages:
        if page.slug in slugs:
            raise ValidationError(f"duplicate slug: {page.slug}")
        slugs.add(page.slug)

        warnings.extend(assert_page(page))

    return warnings
