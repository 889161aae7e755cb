# storefront/repos/base.py
import functools

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from storefront.domain.errors import DownstreamUnavailable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def db_guard(method):
    """Baza niedostepna -> rollback i DownstreamUnavailable."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except OperationalError as e:
            logger.error(f"{type(self).__name__}.{method.__name__}: baza niedostepna: {e}")
            self.db.rollback()
            raise DownstreamUnavailable("Baza danych niedostepna") from e

    return wrapper


class BaseRepo:
    def __init__(self, db: Session):
        self.db = db

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
