"""Watch session models."""

from __future__ import annotations

from dataclasses import dataclass, field

from ntfy_cli.shared.constants import (
    DEFAULT_PRIORITY_THRESHOLD,
    DEFAULT_WATCH_INTERVAL_SECONDS,
    MAX_PRIORITY,
    MIN_PRIORITY,
)
from ntfy_cli.shared.errors import UsageError


@dataclass(frozen=True)
class WatchSettings:
    """
    Watch session configuration, fixed for the session's lifetime.

    Args:
        topics: Topics to poll, in polling order.
        sound_path: Alert sound file passed to the audio player.
        interval_seconds: Delay between poll cycles.
        no_sound: Never play audio.
        device: Optional output device hint.
        priority_threshold: Minimum priority in a batch that triggers audio.
    """

    topics: tuple[str, ...]
    sound_path: str
    interval_seconds: float = DEFAULT_WATCH_INTERVAL_SECONDS
    no_sound: bool = False
    device: str | None = None
    priority_threshold: int = DEFAULT_PRIORITY_THRESHOLD

    def __post_init__(self) -> None:
        if not self.topics:
            raise UsageError("At least one topic is required to watch")
        if len(set(self.topics)) != len(self.topics):
            raise UsageError("Watched topics must be unique")
        if self.interval_seconds <= 0:
            raise UsageError("Polling interval must be a positive number of seconds")
        if not MIN_PRIORITY <= self.priority_threshold <= MAX_PRIORITY:
            raise UsageError(
                f"Priority threshold must be between {MIN_PRIORITY} and {MAX_PRIORITY}"
            )


@dataclass
class SessionStats:
    """
    Per-session message counters.

    Args:
        started_at: Session start time in Unix seconds.
        topics: Watched topics in polling order.
        counts: Messages rendered per topic.
    """

    started_at: float
    topics: tuple[str, ...]
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        """Messages rendered across all topics."""
        return sum(self.counts.values())

    def record(self, topic: str, count: int) -> None:
        """Add rendered messages to a topic's counter."""
        self.counts[topic] = self.counts.get(topic, 0) + count

    def elapsed(self, now: float) -> float:
        """Seconds between session start and now."""
        return max(0.0, now - self.started_at)
