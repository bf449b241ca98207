# modules/review/config.py

from datetime import timedelta


class ReviewDefaultConfig:
    # Level -> minutes until the card is due again. Must be strictly increasing.
    LEVEL_INTERVAL_MINUTES = {
        0: 10,
        1: 24 * 60,
        2: 3 * 24 * 60,
        3: 7 * 24 * 60,
        4: 21 * 24 * 60,
    }
    MAX_LEVEL = 4
    # Wait after a wrong answer. Must stay below LEVEL_INTERVAL_MINUTES[0]
    RELEARN_INTERVAL_MINUTES = 1
    # A correct answer given with a hint reschedules without levelling up
    HINT_BLOCKS_LEVEL_UP = True

    @classmethod
    def interval(cls, level: int) -> timedelta:
        level = max(0, min(int(level), cls.MAX_LEVEL))
        return timedelta(minutes=cls.LEVEL_INTERVAL_MINUTES[level])

    @classmethod
    def relearn_interval(cls) -> timedelta:
        return timedelta(minutes=cls.RELEARN_INTERVAL_MINUTES)
