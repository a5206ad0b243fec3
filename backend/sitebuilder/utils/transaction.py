from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sitebuilder.extensions import db
from sitebuilder.domain.errors import IoError


@contextmanager
def transactional():
    """
    Context manager for database transactions.

    Commits when the block succeeds; rolls back on any failure. Database
    failures surface as IoError, everything else is re-raised untouched.
    """
    try:
        yield
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise IoError(f"storage failure: {exc.__class__.__name__}") from exc
    except Exception:
        db.session.rollback()
        raise
