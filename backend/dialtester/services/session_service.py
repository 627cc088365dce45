"""
Persistence gateway: session and data point operations over the relational store.
"""
from typing import List, Optional
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dialtester.core.exceptions import NotFoundError, StoreError, ValidationError
from dialtester.core.logging import get_logger
from dialtester.core.metrics import (
    sessions_created_total,
    sessions_completed_total,
    data_points_stored_total,
    data_point_value,
)
from dialtester.models.database import DialSession, DataPoint
from dialtester.models.schemas.common import ensure_utc, to_utc
from dialtester.models.schemas.data_points import coerce_dial_value

logger = get_logger(__name__)


class SessionService:
    """Service for recording sessions and their data points.

    Every operation is a single round trip; failures are not retried.
    """

    @staticmethod
    async def create_session(db: AsyncSession, email: str) -> DialSession:
        """
        Start a recording session.

        Args:
            db: Database session
            email: Participant identifier; surrounding whitespace is dropped

        Returns:
            Created session

        Raises:
            ValidationError: If the email is empty or blank
            StoreError: If the insert fails
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")

        now = datetime.now(timezone.utc)
        session = DialSession(
            email=email.strip(),
            start_time=now,
            created_at=now,
            updated_at=now,
        )

        try:
            db.add(session)
            await db.commit()
            await db.refresh(session)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error creating session: {e}")
            raise StoreError("Failed to create session", details=str(e)) from e

        sessions_created_total.inc()
        logger.info(f"Created session {session.id}", extra={"session_id": session.id})
        return session

    @staticmethod
    async def insert_data_point(
        db: AsyncSession,
        session_id: str,
        value,
        timestamp: Optional[datetime] = None
    ) -> DataPoint:
        """
        Persist one sampled value.

        Args:
            db: Database session
            session_id: Owning session
            value: Dial value; coerced to an integer in [-100, 100]
            timestamp: Sample time, defaults to now

        Returns:
            Created data point

        Raises:
            ValidationError: If the value is non-numeric or out of range
            NotFoundError: If the session does not exist
            StoreError: If the insert fails
        """
        if not session_id:
            raise ValidationError("Session ID and value are required")
        try:
            numeric_value = coerce_dial_value(value)
        except ValueError as e:
            raise ValidationError(str(e), details={"received": str(value)}) from e

        try:
            owner = await db.get(DialSession, session_id)
            if owner is None:
                raise NotFoundError("Failed to save data point", details=f"Session {session_id} not found")

            data_point = DataPoint(
                session_id=session_id,
                value=numeric_value,
                timestamp=to_utc(timestamp) if timestamp else datetime.now(timezone.utc),
            )
            db.add(data_point)
            await db.commit()
            await db.refresh(data_point)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                f"Error saving data point: {e}",
                extra={"session_id": session_id, "data_point": {"value": numeric_value}},
            )
            raise StoreError("Failed to save data point", details=str(e)) from e

        data_points_stored_total.inc()
        data_point_value.observe(numeric_value)
        logger.debug(f"Saved data point {data_point.id} for session {session_id}")
        return data_point

    @staticmethod
    async def complete_session(db: AsyncSession, session_id: str) -> DialSession:
        """
        Mark a session as finished by setting its end time.

        Completing an already completed session leaves the end time as is.

        Raises:
            ValidationError: If the id is blank
            NotFoundError: If the session does not exist
            StoreError: If the update fails
        """
        if not session_id or not session_id.strip():
            raise ValidationError("Session ID is required")

        try:
            session = await db.get(DialSession, session_id)
            if session is None:
                raise NotFoundError("Failed to update session", details=f"Session {session_id} not found")

            now = datetime.now(timezone.utc)
            if session.end_time is None:
                # Never earlier than the start, even under clock skew
                session.end_time = max(now, ensure_utc(session.start_time))
                sessions_completed_total.inc()
            else:
                logger.info(f"Session {session_id} already completed")
            session.updated_at = now

            await db.commit()
            await db.refresh(session)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error updating session: {e}", extra={"session_id": session_id})
            raise StoreError("Failed to update session", details=str(e)) from e

        logger.info(f"Completed session {session_id}", extra={"session_id": session_id})
        return session

    @staticmethod
    async def get_session(db: AsyncSession, session_id: str) -> DialSession:
        """
        Fetch one session with its data points.

        Raises:
            NotFoundError: If the session does not exist
            StoreError: If the query fails
        """
        try:
            result = await db.execute(
                select(DialSession)
                .options(selectinload(DialSession.data_points))
                .where(DialSession.id == session_id)
            )
            session = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching session: {e}", extra={"session_id": session_id})
            raise StoreError("Failed to fetch session", details=str(e)) from e

        if session is None:
            raise NotFoundError("Failed to fetch session", details=f"Session {session_id} not found")
        return session

    @staticmethod
    async def list_sessions(db: AsyncSession) -> List[DialSession]:
        """
        All sessions, newest start first, each with its data points.

        Raises:
            StoreError: If the query fails
        """
        try:
            result = await db.execute(
                select(DialSession)
                .options(selectinload(DialSession.data_points))
                .order_by(DialSession.start_time.desc())
            )
            sessions = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching sessions: {e}")
            raise StoreError("Failed to fetch sessions", details=str(e)) from e

        logger.debug(f"Fetched {len(sessions)} session(s)")
        return sessions
