import re
from typing import List

from .tree import validate_tree
from ..document import Page
from ..errors import ValidationError

HOME_SLUG = "/"

_SEGMENT = re.compile(r"^[A-Za-z0-9._~-]+$")


def assert_slug(slug: str) -> None:
    """
    "/" is the home page; any other slug is "/seg(/seg)*" with URL-safe
    segments. Empty, "." and ".." segments are rejected so a slug can never
    escape the generated pages directory.
    """
    if slug == HOME_SLUG:
        return

    if not isinstance(slug, str) or not slug.startswith("/"):
        raise ValidationError(f"invalid slug: {slug}")

    for segment in slug[1:].split("/"):
        if segment in ("", ".", "..") or not _SEGMENT.match(segment):
            raise ValidationError(f"invalid slug: {slug}")


def assert_page(page: Page) -> List[str]:
    assert_slug(page.slug)
    return validate_tree(page.tree)
