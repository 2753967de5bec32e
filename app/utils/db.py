from contextlib import contextmanager
import logging
from app.exceptions import AppError
from models import db

logger = logging.getLogger(__name__)


@contextmanager
def transactional(message="DB transaction failed"):
    """Context manager to wrap a database transaction.

    Commits on success. On any error the session is rolled back and the
    exception is re-raised so callers decide how to report it. Domain errors
    are expected outcomes and are not logged as failures.
    """
    try:
        yield
        db.session.commit()
    except AppError:
        db.session.rollback()
        raise
    except Exception as e:
        logger.error(f"{message}: %s", e, exc_info=True)
        db.session.rollback()
        raise
