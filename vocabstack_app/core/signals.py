"""
Central Signal Registry for Event-Driven Architecture.

Uses blinker to decouple the scheduling and session modules from the
progress aggregation that listens to them.

Usage:
    # Publisher (sender)
    from vocabstack_app.core.signals import card_reviewed
    card_reviewed.send(None, user_id=1, card_id=2, ...)

    # Subscriber (receiver) - in module's events.py
    @card_reviewed.connect
    def on_card_reviewed(sender, **kwargs):
        ...

Signals are sent before the surrounding transaction commits, so receivers
must stage their writes on ``db.session`` and never commit themselves.
"""
from blinker import Namespace

learning_signals = Namespace()

# Signal: Fired when a review outcome is applied to a card's ReviewState
# Payload: user_id, card_id, outcome, is_correct, reviewed_at, new_state
card_reviewed = learning_signals.signal('card_reviewed')

# Signal: Fired when a study session is stopped for the first time
# Payload: user_id, session_id, mode, started_at, ended_at, task_count
session_completed = learning_signals.signal('session_completed')
