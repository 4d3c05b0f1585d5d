import logging
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


class BaseService:
    """
    Request-scoped facade over the injected session.
    Holds no state besides the session; every call round-trips to storage.
    """

    def __init__(self, db: Session):
        self.db = db
        self._logger = logging.getLogger(self.__class__.__module__)

    def _fetch_one(self, sql: str, params: Optional[Dict[str, Any]] = None):
        return self.db.execute(text(sql), params or {}).mappings().first()

    def _fetch_all(self, sql: str, params: Optional[Dict[str, Any]] = None):
        return self.db.execute(text(sql), params or {}).mappings().all()

    def _write_one(self, sql: str, params: Optional[Dict[str, Any]] = None):
        """
        Run a write with a RETURNING clause and commit.
        Returns the first returned row (or None). IntegrityError propagates after a rollback.
        """
        try:
            row = self.db.execute(text(sql), params or {}).mappings().first()
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        return row

    def log_info(self, message: str, **extra):
        self._logger.info(message, extra=extra or None)

    def log_warning(self, message: str, **extra):
        self._logger.warning(message, extra=extra or None)
