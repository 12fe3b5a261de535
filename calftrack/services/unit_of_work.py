"""Unit of Work — one commit-or-rollback boundary per service write operation.

Invariants:
    - Success → exactly one COMMIT at the end of the block
    - Any failure → ROLLBACK before the error escapes (nothing partial persists)
    - CalftrackError passes through unchanged; IntegrityError becomes
      ConflictError / ReferentialIntegrityError; anything else becomes
      TransactionFailedError with the original exception as __cause__

Design Decisions:
    - Services own their transactions, routes never commit: the same guarantee
      holds for HTTP requests, bulk-intake jobs and tests
    - Mirrors DatabaseSessionManager.session() error mapping at operation scope
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from calftrack.core.errors import CalftrackError, TransactionFailedError
from calftrack.infrastructure.database import classify_integrity_error

logger = logging.getLogger(__name__)


@asynccontextmanager
async def unit_of_work(
    db: AsyncSession, operation: str, **log_extra,
) -> AsyncGenerator[AsyncSession, None]:
    try:
        yield db
        await db.commit()
    except CalftrackError as e:
        await db.rollback()
        logger.warning(
            f"{operation} rejected: {e.message}",
            extra={"error_code": e.code, "operation": operation, **log_extra},
        )
        raise
    except IntegrityError as e:
        await db.rollback()
        error = classify_integrity_error(e)
        logger.warning(
            f"{operation} violated a constraint: {e.orig}",
            extra={"error_code": error.code, "operation": operation, **log_extra},
        )
        raise error from e
    except Exception as e:
        await db.rollback()
        logger.error(
            f"{operation} failed, rolled back: {e}",
            exc_info=True,
            extra={"error_code": "TRANSACTION_FAILED", "operation": operation, **log_extra},
        )
        raise TransactionFailedError(operation, e) from e
