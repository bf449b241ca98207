# File: vocabstack_app/modules/session/interface.py
"""
Session Interface
=================
Public API for starting, answering, stopping and deleting study sessions.
"""

from .schemas import AnswerResult, SessionStartResult
from .services.session_service import SessionService


class SessionInterface:
    """Public interface for the study-session lifecycle."""

    @staticmethod
    def start_session(user_id, mode, target_count=10, **options) -> SessionStartResult:
        """
        Materialize a task list for ``mode`` over a deck, a folder or all of
        the user's decks. See ``SessionService.start_session`` for options.
        """
        return SessionService.start_session(user_id, mode, target_count, **options)

    @staticmethod
    def record_answer(session_id, user_id, task_index, user_answer, used_hint=False, time_ms=0, now=None) -> AnswerResult:
        return SessionService.record_answer(session_id, user_id, task_index, user_answer, used_hint, time_ms, now)

    @staticmethod
    def stop_session(session_id, user_id, now=None) -> dict:
        return SessionService.stop_session(session_id, user_id, now)

    @staticmethod
    def delete_session(session_id, user_id) -> bool:
        return SessionService.delete_session(session_id, user_id)

    @staticmethod
    def get_session(session_id, user_id) -> dict:
        return SessionService.get_session(session_id, user_id)

    @staticmethod
    def get_active_sessions(user_id):
        return SessionService.get_active_sessions(user_id)
