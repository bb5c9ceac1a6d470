"""
Base Service.

Base class for services. Services orchestrate repositories, implement
business rules, and convert driver failures into application exceptions.

Usage:
    from cloudnotes.backend.services.base import BaseService

    class NoteService(BaseService):
        def __init__(self, session: AsyncSession, owner_id: str) -> None:
            super().__init__(session)
            self.store = NoteStore(session, owner_id)
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cloudnotes.backend.core.exceptions import StorageError
from cloudnotes.backend.core.logging import get_logger

T = TypeVar("T")


class BaseService:
    """
    Base class for all services.

    Provides:
    - Database session access
    - Logging context
    - Error wrapping for store operations
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
    ) -> T:
        """
        Await a store operation, converting driver errors to StorageError.

        The session is rolled back so later operations on the same
        request start clean. Earlier committed writes are kept.

        Raises:
            StorageError: For any SQLAlchemy error
        """
        try:
            return await coro
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            await self._session.rollback()
            raise StorageError(f"Storage operation failed: {operation}") from e

    def _log_operation(self, operation: str, **context: Any) -> None:
        """Log a service operation with context at info level."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        """Log debug information."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
