"""
Reading Pause - How long a bubble stays in focus before the next one is promoted.
"""

DEFAULT_WPM = 200
MIN_READING_PAUSE_MS = 1500
MAX_READING_PAUSE_MS = 8000


def reading_pause(word_count: int,
                  wpm: int = DEFAULT_WPM,
                  min_ms: float = MIN_READING_PAUSE_MS,
                  max_ms: float = MAX_READING_PAUSE_MS) -> float:
    """Hold time in milliseconds for ``word_count`` words read at ``wpm``."""
    if wpm <= 0:
        raise ValueError(f"Reading speed must be positive, got {wpm} wpm")
    ms = word_count / wpm * 60 * 1000
    return max(min_ms, min(ms, max_ms))
