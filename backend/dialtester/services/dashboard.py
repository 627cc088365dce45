"""
Admin dashboard computations shared by the API and the recorder client.
"""
from typing import Iterable, List

from dialtester.models.schemas.admin import OverviewResponse
from dialtester.models.schemas.common import ensure_utc
from dialtester.models.schemas.sessions import SessionDetailResponse, SessionStats
from dialtester.services.statistics import compute_stats, round_half_up


def session_stats(session: SessionDetailResponse) -> SessionStats:
    """Apply the aggregator to one session's data point values."""
    return compute_stats(point.value for point in session.data_points)


def with_stats(sessions: Iterable[SessionDetailResponse]) -> List[SessionDetailResponse]:
    """Return copies of ``sessions`` with their ``stats`` field filled in."""
    return [
        session.model_copy(update={"stats": session_stats(session)})
        for session in sessions
    ]


def overview(sessions: Iterable[SessionDetailResponse]) -> OverviewResponse:
    """
    Totals across all sessions.

    Average duration only sums sessions that have both a start and an end
    time, but divides by the total session count, then rounds to whole
    minutes.
    """
    sessions = list(sessions)
    total_sessions = len(sessions)
    total_data_points = 0
    total_duration_seconds = 0.0
    participants = set()

    for session in sessions:
        total_data_points += len(session.data_points)
        participants.add(session.email)
        if session.start_time and session.end_time:
            duration = ensure_utc(session.end_time) - ensure_utc(session.start_time)
            total_duration_seconds += duration.total_seconds()

    average_minutes = 0
    if total_sessions > 0:
        average_minutes = int(round_half_up(total_duration_seconds / total_sessions / 60))

    return OverviewResponse(
        total_sessions=total_sessions,
        total_data_points=total_data_points,
        average_duration_minutes=average_minutes,
        unique_participants=len(participants),
    )
