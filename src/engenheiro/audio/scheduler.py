"""Gapless playback scheduling.

Hides the timeline bookkeeping that keeps streamed chunks strictly
sequential: every buffer starts at ``max(cursor, now)`` and pushes the cursor
forward by its own duration, so chunks arriving in a burst queue up back to
back and a chunk arriving after a gap starts immediately.
"""

import itertools
from dataclasses import dataclass

from .codec import AudioBuffer


@dataclass(frozen=True)
class ScheduledSource:
    """A buffer placed on the output timeline."""

    source_id: int
    buffer: AudioBuffer
    start_time: float

    @property
    def duration(self) -> float:
        return self.buffer.duration

    @property
    def end_time(self) -> float:
        return self.start_time + self.buffer.duration


class PlaybackScheduler:
    """Owns the playback cursor and the set of in-flight sources.

    Times are in seconds on the output device clock.
    """

    def __init__(self) -> None:
        self._cursor = 0.0
        self._active: dict[int, ScheduledSource] = {}
        self._ids = itertools.count(1)

    @property
    def cursor(self) -> float:
        """Time at which the next buffer may start."""
        return self._cursor

    @property
    def active(self) -> dict[int, ScheduledSource]:
        """In-flight sources keyed by id (a copy)."""
        return dict(self._active)

    def __len__(self) -> int:
        return len(self._active)

    def schedule(self, buffer: AudioBuffer, now: float) -> ScheduledSource:
        """Place a buffer on the timeline.

        Args:
            buffer: Decoded audio
            now: Current output clock time

        Returns:
            The scheduled source, also tracked as active
        """
        start = max(self._cursor, now)
        source = ScheduledSource(source_id=next(self._ids), buffer=buffer, start_time=start)
        self._cursor = start + buffer.duration
        self._active[source.source_id] = source
        return source

    def complete(self, source_id: int) -> ScheduledSource | None:
        """Forget a source that finished playing naturally."""
        return self._active.pop(source_id, None)

    def stop_all(self) -> list[ScheduledSource]:
        """Drop every in-flight source and rewind the cursor.

        Returns:
            The sources that were active, in scheduling order
        """
        stopped = [self._active[k] for k in sorted(self._active)]
        self._active.clear()
        self._cursor = 0.0
        return stopped
