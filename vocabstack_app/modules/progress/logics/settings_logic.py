"""
Study settings resolution: the user's stored partial settings merged over
DEFAULT_STUDY_SETTINGS, with unusable values replaced by the defaults.
"""
from dataclasses import asdict, dataclass, fields

from vocabstack_app.core.defaults import DAILY_GOAL_MODES, DEFAULT_STUDY_SETTINGS, DIRECTIONS


@dataclass(frozen=True)
class StudySettings:
    daily_goal_mode: str = 'sessions'
    min_sessions_per_day: int = 1
    min_minutes_per_day: int = 10
    default_direction: str = 'pl-en'
    mix_translate: int = 50
    mix_abcd: int = 30
    mix_sentence: int = 20
    max_new_per_day: int = 20
    shuffle: bool = True
    sound: bool = True
    auto_advance: bool = False
    dark_mode: bool = False

    @property
    def mix(self):
        return {
            'translate': self.mix_translate,
            'abcd': self.mix_abcd,
            'sentence': self.mix_sentence,
        }

    def to_dict(self):
        return asdict(self)


def _non_negative_int(value, fallback):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback
    return number if number >= 0 else fallback


def merge_settings(stored) -> StudySettings:
    """Build StudySettings from a stored dict (or None)."""
    merged = dict(DEFAULT_STUDY_SETTINGS)
    if isinstance(stored, dict):
        merged.update({key: value for key, value in stored.items() if value is not None})

    values = {}
    for field_def in fields(StudySettings):
        default = DEFAULT_STUDY_SETTINGS.get(field_def.name, field_def.default)
        value = merged.get(field_def.name, default)
        if field_def.type is bool:
            value = bool(value)
        elif field_def.type is int:
            value = _non_negative_int(value, default)
        values[field_def.name] = value

    if values['daily_goal_mode'] not in DAILY_GOAL_MODES:
        values['daily_goal_mode'] = DEFAULT_STUDY_SETTINGS['daily_goal_mode']
    if values['default_direction'] not in DIRECTIONS:
        values['default_direction'] = DEFAULT_STUDY_SETTINGS['default_direction']
    return StudySettings(**values)


def get_study_settings(user) -> StudySettings:
    """Effective settings of ``user`` (any object with ``study_settings``)."""
    return merge_settings(getattr(user, 'study_settings', None) if user is not None else None)


# Lower bounds applied when a user saves settings.
SETTING_MINIMUMS = {
    'min_sessions_per_day': 1,
    'min_minutes_per_day': 5,
}


def sanitize_settings_update(changes: dict) -> dict:
    """
    Validate a partial settings update. Unknown keys are dropped; invalid
    enum values raise ValueError; goal minimums are raised to their floor.
    """
    known = {field_def.name: field_def.type for field_def in fields(StudySettings)}
    clean = {}
    for key, value in (changes or {}).items():
        if key not in known or value is None:
            continue
        if known[key] is bool:
            clean[key] = bool(value)
        elif known[key] is int:
            try:
                number = int(value)
            except (TypeError, ValueError):
                raise ValueError(f"{key} must be an integer")
            if number < 0:
                raise ValueError(f"{key} must not be negative")
            clean[key] = max(number, SETTING_MINIMUMS.get(key, 0))
        else:
            clean[key] = value

    if 'daily_goal_mode' in clean and clean['daily_goal_mode'] not in DAILY_GOAL_MODES:
        raise ValueError(f"daily_goal_mode must be one of {DAILY_GOAL_MODES}")
    if 'default_direction' in clean and clean['default_direction'] not in DIRECTIONS:
        raise ValueError(f"default_direction must be one of {DIRECTIONS}")
    return clean
