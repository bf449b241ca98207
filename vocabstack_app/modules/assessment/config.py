class AssessmentDefaultConfig:
    """Default settings for test records."""

    TEST_MODES = ('abcd', 'translate', 'sentence', 'describe')
    DEFAULT_ENABLED_MODES = ('translate', 'abcd')

    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_FINISHED = 'finished'
    STATUS_ABANDONED = 'abandoned'

    LIST_LIMIT_DEFAULT = 20
    RANKING_LIMIT = 20
