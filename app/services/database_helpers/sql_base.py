# /app/services/database_helpers/sql_base.py

"""
Shared plumbing for the SQL repositories: id generation and the translation
of unexpected store failures into `UpstreamFailureError`.
"""

import functools
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import DomainError, UpstreamFailureError

logger = logging.getLogger(__name__)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


def _wrap(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except DomainError:
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Store failure in %s.%s: %s", type(self).__name__, method.__name__, e)
            raise UpstreamFailureError(f"The data store rejected the request: {e.__class__.__name__}") from e
    return wrapper


def translate_store_errors(cls):
    """
    Class decorator for repositories. Every public method gets its
    SQLAlchemy errors rolled back and re-raised as `UpstreamFailureError`.
    Errors a method already handles (duplicate-key no-ops, domain errors)
    pass through untouched.
    """
    for name, attr in list(vars(cls).items()):
        if name.startswith("_") or not callable(attr):
            continue
        setattr(cls, name, _wrap(attr))
    return cls
