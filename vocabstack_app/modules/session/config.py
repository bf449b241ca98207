class SessionDefaultConfig:
    """Default settings for study sessions."""

    MODES = ('translate', 'abcd', 'sentence', 'describe', 'mixed', 'test')
    TASK_TYPES = ('translate', 'abcd', 'sentence', 'describe')

    # Order doubles as the tie-break order for mixed-mode rounding.
    MIXED_TASK_TYPES = ('translate', 'abcd', 'sentence')

    ABCD_DISTRACTORS = 3
    DEFAULT_TARGET_COUNT = 10
