"""Watch mode polling engine."""

from __future__ import annotations

import inspect
import logging
import sys
import time
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Protocol, TextIO

from ntfy_cli.client.models import Message
from ntfy_cli.display.formatting import Formatter
from ntfy_cli.display.render import (
    render_watch_banner,
    render_watch_message,
    render_watch_summary,
)
from ntfy_cli.watch.cancel import CancelToken
from ntfy_cli.watch.models import SessionStats, WatchSettings

logger = logging.getLogger(__name__)

FetchMessages = Callable[[str, str], Awaitable[list[Message]]]
AdvanceCallback = Callable[[str, int], Awaitable[None] | None]


class SoundPlayer(Protocol):
    """Audio dispatcher used for alerts."""

    async def play(self, sound_path: str, device: str | None = None) -> None: ...


def filter_new_messages(messages: Iterable[Message], last_seen: int) -> list[Message]:
    """
    Select messages strictly newer than a cursor.

    Args:
        messages: Fetched messages in any order.
        last_seen: Latest timestamp already rendered.

    Returns:
        Newer messages sorted by time ascending.
    """
    newer = [message for message in messages if message.time > last_seen]
    newer.sort(key=lambda message: message.time)
    return newer


def should_trigger_sound(messages: Sequence[Message], threshold: int) -> bool:
    """
    Check whether any message meets the audio priority threshold.

    Args:
        messages: New-message batch.
        threshold: Minimum priority, 1 to 5.

    Returns:
        True when at least one message's priority is at or above threshold.
    """
    return any(message.effective_priority >= threshold for message in messages)


class WatchEngine:
    """
    Poll topics on an interval and surface each new message once.

    Args:
        settings: Session configuration.
        fetch: Coroutine returning a topic's messages since a cursor.
        player: Audio dispatcher.
        token: Cancellation token checked between units of work.
        formatter: Output settings.
        out: Stream receiving rendered output.
        clock: Returns the current Unix time in seconds.
        on_advance: Called with a topic and its new cursor after each batch;
            may return an awaitable.
    """

    def __init__(
        self,
        settings: WatchSettings,
        fetch: FetchMessages,
        player: SoundPlayer,
        token: CancelToken,
        formatter: Formatter | None = None,
        out: TextIO | None = None,
        clock: Callable[[], float] = time.time,
        on_advance: AdvanceCallback | None = None,
    ) -> None:
        self.settings = settings
        self.fetch = fetch
        self.player = player
        self.token = token
        self.formatter = formatter or Formatter()
        self.out = out or sys.stdout
        self.clock = clock
        self.on_advance = on_advance
        start = self.clock()
        self.cursors: dict[str, int] = {topic: int(start) for topic in settings.topics}
        self.stats = SessionStats(
            started_at=start,
            topics=settings.topics,
            counts={topic: 0 for topic in settings.topics},
        )
        self._finished = False

    def _write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    async def run(self) -> SessionStats:
        """
        Run the polling loop until cancelled, then print the summary.

        Returns:
            Final session counters.
        """
        if self._finished:
            return self.stats
        settings = self.settings
        sound_label = "disabled" if settings.no_sound else settings.sound_path
        self._write(
            render_watch_banner(
                settings.topics,
                settings.interval_seconds,
                sound_label,
                self.formatter,
            )
        )
        try:
            while not self.token.cancelled:
                await self.poll_once()
                if self.token.cancelled:
                    break
                await self.token.sleep(settings.interval_seconds)
        finally:
            self._finish()
        return self.stats

    async def poll_once(self) -> None:
        """
        Run one poll cycle over every topic in order.

        Returns:
            None.
        """
        for topic in self.settings.topics:
            if self.token.cancelled:
                return
            await self.poll_topic(topic)

    async def poll_topic(self, topic: str) -> list[Message]:
        """
        Fetch, render and alert for one topic.

        Fetch failures are logged and leave the topic's cursor unchanged.
        Render failures are logged per message and do not stop the batch.

        Args:
            topic: Topic to poll.

        Returns:
            Newly rendered messages.
        """
        cursor = self.cursors[topic]
        try:
            messages = await self.fetch(topic, str(cursor))
        except Exception as error:
            logger.warning("[%s] fetch error: %s", topic, error)
            return []

        batch = filter_new_messages(messages, cursor)
        if not batch:
            return []

        newest = batch[-1].time
        self.cursors[topic] = newest
        self.stats.record(topic, len(batch))
        for message in batch:
            try:
                self._write(render_watch_message(message, topic, self.formatter))
            except Exception as error:
                logger.warning(
                    "[%s] could not render message %s: %s", topic, message.id, error
                )
        if self.on_advance is not None:
            try:
                result = self.on_advance(topic, newest)
                if inspect.isawaitable(result):
                    await result
            except Exception as error:
                logger.warning("[%s] could not record read state: %s", topic, error)

        settings = self.settings
        if not settings.no_sound and should_trigger_sound(
            batch, settings.priority_threshold
        ):
            try:
                await self.player.play(settings.sound_path, settings.device)
            except Exception as error:
                logger.warning("Audio alert failed: %s", error)
        return batch

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._write(render_watch_summary(self.stats, self.clock(), self.formatter))
