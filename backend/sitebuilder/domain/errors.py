class BuilderError(Exception):
    """
    Base class for every error the builder core reports to callers.

    kind        -> stable machine-readable name, used as the API "error" field
    status_code -> HTTP status the API layer maps the error to
    """
    kind = "BuilderError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StructuralError(BuilderError):
    """A component tree violates a structural invariant."""
    kind = "StructuralError"
    status_code = 400


class ValidationError(BuilderError):
    """A request-level precondition is unmet (bad shape, no pages, bad environment)."""
    kind = "ValidationError"
    status_code = 400


class EnhancementParseError(BuilderError):
    """The enhancement transform returned output that is not a usable Project."""
    kind = "EnhancementParseError"
    status_code = 400


class NotFound(BuilderError):
    kind = "NotFound"
    status_code = 404


class ConflictError(BuilderError):
    """The stored document changed after the caller's If-Unmodified-Since instant."""
    kind = "ConflictError"
    status_code = 409


class IoError(BuilderError):
    """The store or archive boundary failed."""
    kind = "IoError"
    status_code = 500
