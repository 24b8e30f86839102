"""
Opt-in hot path profiling for the text scanners.

Enabled by setting ``SPANJSON_PROFILE`` in the environment (ignored under
``python -O``). When disabled every hook is a no-op.
"""

import os
import time
from dataclasses import dataclass
from typing import Any

PROFILE_HOT_PATHS = __debug__ and "SPANJSON_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during scanning."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records a call with its timing and characters processed."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """
        Times one scanner call and charges it to ``name``.

        The call is recorded on exit whether or not the body raised, so
        malformed input still shows up in the character counts.
        """

        def __init__(self, name: str, chars: int = 0) -> None:
            self.name = name
            self.chars = chars
            self._started_ns = 0

        def __enter__(self) -> "ProfileContext":
            self._started_ns = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            elapsed_ns = time.perf_counter_ns() - self._started_ns
            entry = _hot_path_stats.setdefault(
                self.name, HotPathStats(self.name)
            )
            entry.record_call(elapsed_ns, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns a snapshot of the stats keyed by scanner name."""
        return dict(_hot_path_stats)

    def clear_hot_path_stats() -> None:
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass
