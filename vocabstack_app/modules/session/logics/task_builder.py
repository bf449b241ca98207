"""
Pure task construction: task types per card, prompt direction and the
task records stored in ``settings['tasks']``.
"""
import random
from typing import Dict, List, Optional, Sequence

from vocabstack_app.modules.answer_check.logics.matcher import normalize_answer

from ..config import SessionDefaultConfig
from ..schemas import CandidateCard

DECK_DIRECTION_TO_STUDY = {
    'front-to-back': 'pl-en',
    'back-to-front': 'en-pl',
    'both': 'both',
}


def split_counts(total: int, weights: Dict[str, int], order: Sequence[str]) -> Dict[str, int]:
    """
    Split ``total`` proportionally to ``weights`` using largest remainders.
    Equal remainders go to the type listed first in ``order``.
    """
    clean = {name: max(0, int(weights.get(name, 0) or 0)) for name in order}
    weight_sum = sum(clean.values())
    if weight_sum == 0:
        clean = {name: 1 for name in order}
        weight_sum = len(order)

    counts = {}
    remainders = []
    for position, name in enumerate(order):
        exact = total * clean[name]
        counts[name] = exact // weight_sum
        remainders.append((-(exact % weight_sum), position, name))

    leftover = total - sum(counts.values())
    for _, _, name in sorted(remainders)[:leftover]:
        counts[name] += 1
    return counts


def assign_task_types(
    mode: str,
    count: int,
    rng: random.Random,
    mix: Optional[Dict[str, int]] = None,
    enabled_modes: Optional[Sequence[str]] = None,
) -> List[str]:
    """One task type per selected card."""
    if mode == 'mixed':
        order = SessionDefaultConfig.MIXED_TASK_TYPES
        counts = split_counts(count, mix or {}, order)
        types = [name for name in order for _ in range(counts[name])]
        rng.shuffle(types)
        return types
    if mode == 'test':
        pool = list(enabled_modes or ()) or ['translate', 'abcd']
        return [rng.choice(pool) for _ in range(count)]
    return [mode] * count


def resolve_direction(explicit: Optional[str], deck_direction: Optional[str], default_direction: str) -> str:
    """Explicit request, else the deck's setting, else the user's default."""
    if explicit:
        return explicit
    if deck_direction and deck_direction != 'front-to-back':
        return DECK_DIRECTION_TO_STUDY.get(deck_direction, default_direction)
    return default_direction


def is_reverse(direction: str, rng: random.Random) -> bool:
    if direction == 'en-pl':
        return True
    if direction == 'both':
        return rng.random() < 0.5
    return False


def build_abcd_options(
    answer: str,
    card: CandidateCard,
    pool: Sequence[CandidateCard],
    reverse: bool,
    rng: random.Random,
    shuffle_options: bool = True,
):
    """Up to three distractors from other cards plus the correct answer."""
    seen = {normalize_answer(answer)}
    distractors = []
    others = [other for other in pool if other.card_id != card.card_id]
    rng.shuffle(others)
    for other in others:
        if len(distractors) >= SessionDefaultConfig.ABCD_DISTRACTORS:
            break
        text = other.front if reverse else other.back
        key = normalize_answer(text)
        if not key or key in seen:
            continue
        seen.add(key)
        distractors.append(text)

    options = distractors + [answer]
    if shuffle_options:
        rng.shuffle(options)
    return options, options.index(answer)


def build_task(
    card: CandidateCard,
    task_type: str,
    direction: str,
    pool: Sequence[CandidateCard],
    rng: random.Random,
    random_answer_order: bool = True,
) -> dict:
    reverse = is_reverse(direction, rng)
    prompt = card.back if reverse else card.front
    answer = card.front if reverse else card.back

    task = {
        'card_id': card.card_id,
        'task_type': task_type,
        'prompt': prompt,
        'answer': answer,
        'reverse': reverse,
        'completed': False,
    }

    if task_type == 'translate':
        task['expected_answer'] = answer
    elif task_type == 'describe':
        task['prompt'] = card.front
        task['answer'] = card.back
        task['expected_answer'] = card.back
        task['reverse'] = False
    elif task_type == 'sentence':
        # Step one asks for the front; the sentence must then use it.
        task['prompt'] = card.back
        task['answer'] = card.front
        task['expected_answer'] = card.front
        task['required_word'] = card.front
        task['reverse'] = True
    elif task_type == 'abcd':
        options, correct_index = build_abcd_options(answer, card, pool, reverse, rng, random_answer_order)
        task['options'] = options
        task['correct_index'] = correct_index

    return task


def build_tasks(
    cards: Sequence[CandidateCard],
    task_types: Sequence[str],
    direction: str,
    pool: Sequence[CandidateCard],
    rng: random.Random,
    shuffle: bool = True,
    random_answer_order: bool = True,
) -> List[dict]:
    tasks = [
        build_task(card, task_type, direction, pool, rng, random_answer_order)
        for card, task_type in zip(cards, task_types)
    ]
    if shuffle:
        rng.shuffle(tasks)
    return tasks
