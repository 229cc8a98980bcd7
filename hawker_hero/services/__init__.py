import logging

from sqlalchemy.exc import SQLAlchemyError

from ..errors import DataAccessFailure, NotFound
from ..models import db

logger = logging.getLogger(__name__)


def get_or_404(model, object_id):
    """Load a row by id or raise NotFound; missing and deleted look the same."""
    obj = db.session.get(model, object_id) if object_id is not None else None
    if obj is None:
        raise NotFound()
    return obj


def commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Database error while %s", action)
        raise DataAccessFailure() from exc
