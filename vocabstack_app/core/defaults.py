"""
Centralized default study settings for VocabStack.

These values are used as fallbacks when a key is missing from
``User.study_settings``.
"""

DEFAULT_STUDY_SETTINGS = {
    # --- Daily goal ---
    'daily_goal_mode': 'sessions',      # sessions | minutes | hybrid
    'min_sessions_per_day': 1,
    'min_minutes_per_day': 10,

    # --- Session building ---
    'default_direction': 'pl-en',       # pl-en | en-pl | both
    'mix_translate': 50,
    'mix_abcd': 30,
    'mix_sentence': 20,
    'max_new_per_day': 20,

    # --- Client toggles ---
    'shuffle': True,
    'sound': True,
    'auto_advance': False,
    'dark_mode': False,
}

DAILY_GOAL_MODES = ('sessions', 'minutes', 'hybrid')
DIRECTIONS = ('pl-en', 'en-pl', 'both')
