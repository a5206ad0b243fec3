from typing import Any, Set

from ..document import ENVIRONMENTS
from ..errors import ValidationError

# Explicit allowed promotions: only the authoring copy is ever promoted
ALLOWED_PROMOTIONS: dict[str, Set[str]] = {
    "builder": {"staging", "production"},
}


def assert_promotion(*, from_environment: str, to_environment: Any) -> None:
    """
    Guards environment promotions.
    Single source of truth for which copies a deploy may write.
    """
    allowed = ALLOWED_PROMOTIONS.get(from_environment, set())

    if not isinstance(to_environment, str) or to_environment not in allowed:
        raise ValidationError("invalid environment")


def assert_environment(environment: Any) -> str:
    if not isinstance(environment, str) or environment not in ENVIRONMENTS:
        raise ValidationError("invalid environment")
    return environment
