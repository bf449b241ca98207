import copy
import datetime
import logging
import random
from typing import Iterable, List, Optional

from flask import current_app
from sqlalchemy import and_

from vocabstack_app.core.defaults import DIRECTIONS
from vocabstack_app.core.error_handlers import AuthorizationError, NotFoundError, ValidationError
from vocabstack_app.core.extensions import db
from vocabstack_app.core.signals import session_completed
from vocabstack_app.models import Card, Deck, User
from vocabstack_app.modules.answer_check.interface import AnswerCheckInterface
from vocabstack_app.modules.answer_check.logics.matcher import AnswerOutcome, normalize_answer
from vocabstack_app.modules.assessment.models import StudyTest
from vocabstack_app.modules.assessment.logics.scoring import filter_enabled_modes
from vocabstack_app.modules.assessment.services.test_service import AssessmentService
from vocabstack_app.modules.due_cards.services.scope_service import ScopeService
from vocabstack_app.modules.progress.logics.settings_logic import get_study_settings
from vocabstack_app.modules.review.config import ReviewDefaultConfig
from vocabstack_app.modules.review.models import ReviewState
from vocabstack_app.modules.review.services.scheduler_service import SchedulerService
from vocabstack_app.utils.db_session import run_in_transaction, run_read
from vocabstack_app.utils.numbers import percentage
from vocabstack_app.utils.time_utils import ensure_utc, get_user_timezone, local_date, start_of_local_day, utcnow

from ..config import SessionDefaultConfig
from ..logics.selection import filter_by_levels, select_cards
from ..logics.task_builder import assign_task_types, build_tasks, resolve_direction
from ..models import SessionItem, StudySession
from ..schemas import AnswerResult, CandidateCard, SessionStartResult

logger = logging.getLogger(__name__)


def _retries():
    return current_app.config.get('MAX_WRITE_RETRIES', 3)


class SessionService:
    """
    Session lifecycle: start (materialize tasks), record answers, stop and
    delete. Every write is a single transaction replayed on conflicts.
    """

    # ── Validation ────────────────────────────────────────────────────

    @staticmethod
    def _validate_start(mode, target_count, deck_id, folder_id, levels, direction) -> int:
        if mode not in SessionDefaultConfig.MODES:
            raise ValidationError(f"Unknown session mode: {mode!r}", errors={'mode': list(SessionDefaultConfig.MODES)})
        try:
            target_count = int(target_count)
        except (TypeError, ValueError):
            raise ValidationError("target_count must be an integer")
        if target_count <= 0:
            raise ValidationError("target_count must be positive")
        if deck_id is not None and folder_id is not None:
            raise ValidationError("deck_id and folder_id are mutually exclusive")
        if levels:
            bad = [level for level in levels if not isinstance(level, int) or not 0 <= level <= ReviewDefaultConfig.MAX_LEVEL]
            if bad:
                raise ValidationError(f"Levels out of range 0..{ReviewDefaultConfig.MAX_LEVEL}: {bad}")
        if direction is not None and direction not in DIRECTIONS:
            raise ValidationError(f"Unknown direction: {direction!r}")
        return min(target_count, current_app.config.get('SESSION_MAX_TASKS', 35))

    @staticmethod
    def _get_owned_session(session_id: int, user_id: int) -> StudySession:
        session = db.session.get(StudySession, session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found", resource='session')
        if session.user_id != user_id:
            raise AuthorizationError(f"Session {session_id} does not belong to user {user_id}")
        return session

    # ── Start ─────────────────────────────────────────────────────────

    @staticmethod
    def _load_candidates(user_id: int, deck_ids: List[int]) -> List[CandidateCard]:
        rows = (
            db.session.query(Card, ReviewState)
            .outerjoin(ReviewState, and_(ReviewState.card_id == Card.card_id, ReviewState.user_id == user_id))
            .filter(Card.user_id == user_id, Card.deck_id.in_(deck_ids))
            .order_by(Card.card_id)
            .all()
        )
        return [
            CandidateCard(
                card_id=card.card_id,
                deck_id=card.deck_id,
                front=card.front,
                back=card.back,
                level=state.level if state else None,
                due_at=state.due_at if state else None,
                today_wrong_count=(state.today_wrong_count or 0) if state else 0,
                last_reviewed_at=state.last_reviewed_at if state else None,
            )
            for card, state in rows
        ]

    @staticmethod
    def _count_introduced_today(user_id: int, now: datetime.datetime, tz) -> int:
        day_start = start_of_local_day(local_date(now, tz), tz)
        return (
            ReviewState.query
            .filter(ReviewState.user_id == user_id, ReviewState.introduced_at >= day_start)
            .count()
        )

    @staticmethod
    def start_session(
        user_id: int,
        mode: str,
        target_count: int = SessionDefaultConfig.DEFAULT_TARGET_COUNT,
        deck_id: Optional[int] = None,
        folder_id: Optional[int] = None,
        levels: Optional[Iterable[int]] = None,
        direction: Optional[str] = None,
        shuffle: Optional[bool] = None,
        allow_typos: bool = True,
        enabled_modes: Optional[Iterable[str]] = None,
        random_answer_order: bool = True,
        now: Optional[datetime.datetime] = None,
        rng: Optional[random.Random] = None,
    ) -> SessionStartResult:
        levels = list(levels) if levels else None
        count = SessionService._validate_start(mode, target_count, deck_id, folder_id, levels, direction)
        levels = sorted(set(levels)) if levels else None
        now = ensure_utc(now) if now else utcnow()
        rng = rng or random.Random()

        user = run_read(lambda: db.session.get(User, user_id), label="user lookup")
        if user is None:
            raise NotFoundError(f"User {user_id} not found", resource='user')
        settings = get_study_settings(user)
        tz = get_user_timezone(user)

        deck_ids = ScopeService.resolve_deck_ids(user_id, [deck_id] if deck_id is not None else None, folder_id)
        if not deck_ids:
            raise ValidationError("No decks found for the selected scope")

        def _plan():
            candidates = SessionService._load_candidates(user_id, deck_ids)
            introduced = SessionService._count_introduced_today(user_id, now, tz)
            deck = db.session.get(Deck, deck_id) if deck_id is not None else None
            return candidates, introduced, deck.direction if deck else None

        candidates, introduced_today, deck_direction = run_read(_plan, label="session candidates")
        if not candidates:
            raise ValidationError("No cards in the selected scope")
        eligible = filter_by_levels(candidates, levels)
        if not eligible:
            raise ValidationError("No cards match the selected level filter")

        selected = select_cards(eligible, count, now, settings.max_new_per_day, introduced_today)
        if not selected:
            raise ValidationError("No cards available: the new-card allowance for today is used up")

        modes = None
        if mode == 'test':
            modes = filter_enabled_modes(enabled_modes)
        study_direction = resolve_direction(direction, deck_direction, settings.default_direction)
        do_shuffle = settings.shuffle if shuffle is None else bool(shuffle)

        task_types = assign_task_types(mode, len(selected), rng, mix=settings.mix, enabled_modes=modes)
        tasks = build_tasks(selected, task_types, study_direction, candidates, rng, do_shuffle, random_answer_order)

        session_settings = {
            'deck_ids': deck_ids,
            'folder_id': folder_id,
            'direction': study_direction,
            'levels': levels,
            'shuffle': do_shuffle,
            'allow_typos': bool(allow_typos),
            'enabled_modes': modes,
            'random_answer_order': bool(random_answer_order),
            'test_id': None,
            'tasks': tasks,
        }

        def _create():
            session = StudySession(
                user_id=user_id,
                deck_id=deck_id if deck_id is not None else deck_ids[0],
                mode=mode,
                target_count=len(tasks),
                completed_count=0,
                accuracy=0,
                started_at=now,
                settings=copy.deepcopy(session_settings),
            )
            db.session.add(session)
            db.session.flush()

            for position, task in enumerate(tasks):
                db.session.add(SessionItem(
                    session_id=session.session_id,
                    position=position,
                    card_id=task['card_id'],
                    task_type=task['task_type'],
                    prompt_shown=task['prompt'],
                ))

            test_id = None
            if mode == 'test':
                test = AssessmentService.create_for_session(
                    user_id=user_id,
                    session_id=session.session_id,
                    started_at=now,
                    question_count=len(tasks),
                    deck_id=deck_id,
                    folder_id=folder_id,
                    enabled_modes=modes,
                    random_question_order=do_shuffle,
                    random_answer_order=random_answer_order,
                )
                test_id = test.test_id
                stored = copy.deepcopy(session.settings)
                stored['test_id'] = test_id
                session.settings = stored
            return session.session_id, test_id

        session_id, test_id = run_in_transaction(db.session, _create, retries=_retries(), label=f"start session user={user_id}")
        logger.info(
            "Started %s session %s for user %s with %d tasks", mode, session_id, user_id, len(tasks),
            extra={'user_id': user_id, 'session_id': session_id},
        )
        return SessionStartResult(session_id=session_id, tasks=tasks, test_id=test_id, deck_id=deck_id if deck_id is not None else deck_ids[0])

    # ── Answer ────────────────────────────────────────────────────────

    @staticmethod
    def _grade(task: dict, user_answer, allow_typos: bool):
        """Return (outcome, is_correct) for an answer to ``task``."""
        expected = task.get('expected_answer', task['answer'])
        if task['task_type'] == 'abcd' and task.get('options'):
            options = task['options']
            chosen = user_answer
            # Option text wins over an index, so numeric answers grade as text
            is_option_text = isinstance(user_answer, str) and any(
                normalize_answer(option) == normalize_answer(user_answer) for option in options
            )
            if not is_option_text and (
                isinstance(user_answer, int) or (isinstance(user_answer, str) and user_answer.strip().isdigit())
            ):
                index = int(user_answer)
                if 0 <= index < len(options):
                    chosen = options[index]
            is_correct = normalize_answer(str(chosen)) == normalize_answer(task['answer'])
            return (AnswerOutcome.CORRECT if is_correct else AnswerOutcome.WRONG), is_correct

        outcome = AnswerCheckInterface.classify_expected(str(user_answer or ''), expected)
        if outcome == AnswerOutcome.TYPO:
            return outcome, bool(allow_typos)
        return outcome, outcome == AnswerOutcome.CORRECT

    @staticmethod
    def _finalize(session: StudySession, now: datetime.datetime) -> None:
        """Set the terminal marker, score a linked test and emit ``session_completed``."""
        session.ended_at = now
        db.session.add(session)

        test_id = (session.settings or {}).get('test_id')
        if session.mode == 'test' and test_id:
            test = db.session.get(StudyTest, test_id)
            if test is not None:
                AssessmentService.finalize(test, now)

        session_completed.send(
            SessionService,
            user_id=session.user_id,
            session_id=session.session_id,
            mode=session.mode,
            started_at=session.started_at,
            ended_at=now,
            task_count=len(session.tasks),
        )

    @staticmethod
    def record_answer(
        session_id: int,
        user_id: int,
        task_index: int,
        user_answer,
        used_hint: bool = False,
        time_ms: int = 0,
        now: Optional[datetime.datetime] = None,
    ) -> AnswerResult:
        now = ensure_utc(now) if now else utcnow()

        def _work():
            session = SessionService._get_owned_session(session_id, user_id)
            if not session.is_active:
                raise ValidationError(f"Session {session_id} has already ended")
            tasks = copy.deepcopy(session.tasks)
            if not isinstance(task_index, int) or not 0 <= task_index < len(tasks):
                raise ValidationError(f"Task index {task_index!r} out of range")
            task = tasks[task_index]
            if task.get('completed'):
                raise ValidationError(f"Task {task_index} is already completed")

            allow_typos = (session.settings or {}).get('allow_typos', True)
            outcome, is_correct = SessionService._grade(task, user_answer, allow_typos)

            review = SchedulerService.stage_review(
                user_id, task['card_id'], outcome, is_correct=is_correct, used_hint=used_hint, now=now,
            )

            task['completed'] = True
            task['is_correct'] = is_correct
            stored = copy.deepcopy(session.settings)
            stored['tasks'] = tasks
            session.settings = stored

            completed = [t for t in tasks if t.get('completed')]
            session.completed_count = len(completed)
            session.accuracy = percentage(sum(1 for t in completed if t.get('is_correct')), len(completed))

            item = session.items.filter_by(position=task_index).first()
            if item is not None:
                item.user_answer = None if user_answer is None else str(user_answer)
                item.outcome = outcome.value
                item.is_correct = is_correct
                item.used_hint = bool(used_hint)
                item.time_ms = max(0, int(time_ms or 0))
                item.answered_at = now

            test_id = stored.get('test_id')
            if session.mode == 'test' and test_id:
                test = db.session.get(StudyTest, test_id)
                if test is not None:
                    AssessmentService.append_answer(
                        test,
                        card_id=task['card_id'],
                        mode_used=task['task_type'],
                        prompt_shown=task['prompt'],
                        user_answer=None if user_answer is None else str(user_answer),
                        is_correct=is_correct,
                        time_ms=time_ms,
                        answered_at=now,
                    )

            done = session.completed_count >= len(tasks)
            if done:
                SessionService._finalize(session, now)
            db.session.add(session)

            return AnswerResult(
                outcome=outcome.value,
                is_correct=is_correct,
                expected_answer=task.get('expected_answer', task['answer']),
                hint=None if is_correct else AnswerCheckInterface.hint(task['answer']),
                level=review.level,
                due_at=review.due_at,
                completed_count=session.completed_count,
                target_count=session.target_count,
                accuracy=session.accuracy,
                session_done=done,
            )

        result = run_in_transaction(
            db.session, _work, retries=_retries(), label=f"answer session={session_id} task={task_index}",
        )
        logger.debug(
            "Session %s task %s graded %s (%d/%d)",
            session_id, task_index, result.outcome, result.completed_count, result.target_count,
            extra={'user_id': user_id, 'session_id': session_id},
        )
        return result

    # ── Stop / delete ─────────────────────────────────────────────────

    @staticmethod
    def stop_session(session_id: int, user_id: int, now: Optional[datetime.datetime] = None) -> dict:
        """End the session. Stopping an ended session returns it unchanged."""
        now = ensure_utc(now) if now else utcnow()

        def _work():
            session = SessionService._get_owned_session(session_id, user_id)
            if session.is_active:
                SessionService._finalize(session, now)
            return session.to_dict()

        data = run_in_transaction(db.session, _work, retries=_retries(), label=f"stop session={session_id}")
        logger.info("Session %s stopped at %s", session_id, data['ended_at'])
        return data

    @staticmethod
    def delete_session(session_id: int, user_id: int) -> bool:
        """Remove the session and its items. A linked test survives, unlinked."""
        def _work():
            session = SessionService._get_owned_session(session_id, user_id)
            db.session.delete(session)
            return True

        run_in_transaction(db.session, _work, retries=_retries(), label=f"delete session={session_id}")
        logger.info("Session %s deleted by user %s", session_id, user_id)
        return True

    # ── Reads ─────────────────────────────────────────────────────────

    @staticmethod
    def get_session(session_id: int, user_id: int) -> dict:
        def _load():
            session = SessionService._get_owned_session(session_id, user_id)
            data = session.to_dict()
            data['items'] = [item.to_dict() for item in session.items.all()]
            return data

        return run_read(_load, label=f"session {session_id}")

    @staticmethod
    def get_active_sessions(user_id: int) -> List[dict]:
        return run_read(
            lambda: [
                session.to_dict()
                for session in StudySession.query
                .filter(StudySession.user_id == user_id, StudySession.ended_at.is_(None))
                .order_by(StudySession.started_at.desc(), StudySession.session_id.desc())
                .all()
            ],
            label="active sessions",
        )
