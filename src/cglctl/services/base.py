"""BaseService: abstract foundation for all cglctl services.

Every service receives a :class:`Library` at construction time.  The
Library provides transactional access to the database.  Services own
their transaction boundaries via ``self._library.transaction()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cglctl.domain.errors import NumberingError, NumberOverflowError
from cglctl.infrastructure.database.counters import NumberConflictError
from cglctl.infrastructure.library import unique_violation_columns
from cglctl.services.result import ServiceResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from cglctl.infrastructure.library import Library, LibraryTransaction

logger = structlog.get_logger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class BookService(BaseService):
            def create_book(self, title: str, ...) -> ServiceResult:
                with self._library.transaction() as txn:
                    ...
    """

    def __init__(self, library: Library) -> None:
        self._library = library

    def _write_numbered(
        self,
        op: str,
        write: Callable[[LibraryTransaction], ServiceResult],
    ) -> ServiceResult:
        """Run *write* in a transaction, retrying on visible-number conflicts.

        *write* reserves a number and inserts the row.  A
        :class:`NumberConflictError` rolls the transaction back and the
        whole write is attempted again, up to ``numbering.max_attempts``.
        Exhausting the attempts yields ``NUMBER_CONFLICT`` with
        ``retryable=True`` so the caller can decide to try later.

        *write* must perform its checks before any reservation: a failed
        ServiceResult it returns is committed like a success.
        """
        attempts = self._library.settings.numbering.max_attempts
        conflict: NumberConflictError | None = None

        for attempt in range(1, attempts + 1):
            try:
                with self._library.transaction() as txn:
                    result = write(txn)
            except NumberConflictError as exc:
                conflict = exc
                logger.info(
                    "visible_number_conflict",
                    op=op,
                    scope=exc.scope,
                    number=exc.number,
                    attempt=attempt,
                    max_attempts=attempts,
                )
                continue
            except NumberOverflowError as exc:
                return ServiceResult.failure(
                    op,
                    "NUMBER_OVERFLOW",
                    str(exc),
                    last=exc.last,
                    step=str(exc.step),
                )
            except NumberingError as exc:
                return ServiceResult.failure(op, "INVALID_NUMBER", str(exc))
            except IntegrityError as exc:
                columns = unique_violation_columns(exc)
                if "slug" in columns:
                    return ServiceResult.failure(
                        op, "DUPLICATE_SLUG", "Slug is already in use", columns=columns
                    )
                logger.warning("integrity_error", op=op, error=str(exc.orig))
                return ServiceResult.failure(op, "STORAGE_ERROR", str(exc.orig))
            except SQLAlchemyError as exc:
                logger.warning("storage_error", op=op, error=str(exc), exc_info=True)
                return ServiceResult.failure(op, "STORAGE_ERROR", str(exc))

            if result.ok:
                meta = {**(result.meta or {}), "attempts": attempt}
                return result.model_copy(update={"meta": meta})
            return result

        assert conflict is not None
        return ServiceResult.failure(
            op,
            "NUMBER_CONFLICT",
            f"{conflict} (gave up after {attempts} attempts)",
            retryable=True,
            scope=conflict.scope,
            number=conflict.number,
            attempts=attempts,
        )
