from __future__ import annotations

import asyncio
import io
import os
import signal
import sys

import pytest

from ntfy_cli.client.models import Message
from ntfy_cli.display.formatting import Formatter
from ntfy_cli.shared.errors import NtfyError, UsageError
from ntfy_cli.watch.cancel import CancelToken, cancel_on_signals
from ntfy_cli.watch.engine import WatchEngine, filter_new_messages, should_trigger_sound
from ntfy_cli.watch.models import WatchSettings

T0 = 1_700_000_000


def make_message(message_id: str, offset: int, priority: int | None = None) -> Message:
    return Message(
        id=message_id,
        time=T0 + offset,
        priority=priority,
        message=f"body-{message_id}",
    )


class FakeClock:
    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class ScriptedFetch:
    """Return queued responses per topic; exceptions in the queue are raised."""

    def __init__(self, responses: dict[str, list]) -> None:
        self.responses = {topic: list(items) for topic, items in responses.items()}
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, topic: str, since: str) -> list[Message]:
        self.calls.append((topic, since))
        queue = self.responses.get(topic, [])
        item = queue.pop(0) if queue else []
        if isinstance(item, Exception):
            raise item
        return list(item)


class RecordingPlayer:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str | None]] = []

    async def play(self, sound_path: str, device: str | None = None) -> None:
        self.calls.append((sound_path, device))


class ClockedToken(CancelToken):
    """Advance a fake clock instead of sleeping; cancel on the Nth sleep."""

    def __init__(self, clock: FakeClock, cancel_on_sleep: int) -> None:
        super().__init__()
        self.clock = clock
        self.cancel_on_sleep = cancel_on_sleep
        self.sleeps = 0

    async def sleep(self, seconds: float) -> bool:
        self.sleeps += 1
        self.clock.now += seconds
        if self.sleeps >= self.cancel_on_sleep:
            self.cancel()
            self.cancel()
            return True
        return False


def build_engine(
    fetch: ScriptedFetch,
    topics: tuple[str, ...] = ("alerts",),
    token: CancelToken | None = None,
    clock: FakeClock | None = None,
    **settings_kwargs,
) -> tuple[WatchEngine, RecordingPlayer, io.StringIO]:
    settings = WatchSettings(topics=topics, sound_path="ping.wav", **settings_kwargs)
    player = RecordingPlayer()
    out = io.StringIO()
    engine = WatchEngine(
        settings,
        fetch=fetch,
        player=player,
        token=token or CancelToken(),
        formatter=Formatter(no_color=True),
        out=out,
        clock=clock or FakeClock(),
    )
    return engine, player, out


def test_filter_new_messages_is_strict_and_sorted() -> None:
    messages = [make_message("c", 30), make_message("a", 0), make_message("b", 10)]

    result = filter_new_messages(messages, T0)

    assert [message.id for message in result] == ["b", "c"]


def test_should_trigger_sound_uses_default_priority() -> None:
    batch = [make_message("a", 1)]

    assert should_trigger_sound(batch, 3)
    assert not should_trigger_sound(batch, 4)


def test_overlapping_polls_render_each_message_once() -> None:
    fetch = ScriptedFetch(
        {
            "alerts": [
                [make_message("m100", 100), make_message("m200", 200)],
                [make_message("m200", 200), make_message("m300", 300)],
            ]
        }
    )

    async def scenario() -> tuple[WatchEngine, io.StringIO]:
        engine, _, out = build_engine(fetch)
        await engine.poll_once()
        await engine.poll_once()
        return engine, out

    engine, out = asyncio.run(scenario())

    text = out.getvalue()
    assert text.count("body-m100") == 1
    assert text.count("body-m200") == 1
    assert text.count("body-m300") == 1
    assert engine.stats.counts["alerts"] == 3
    assert fetch.calls[1] == ("alerts", str(T0 + 200))


def test_cursor_never_decreases() -> None:
    fetch = ScriptedFetch(
        {
            "alerts": [
                [make_message("a", 5), make_message("b", 10)],
                [make_message("old", 3)],
                [],
            ]
        }
    )

    async def scenario() -> list[int]:
        engine, _, _ = build_engine(fetch)
        cursors = []
        for _ in range(3):
            await engine.poll_once()
            cursors.append(engine.cursors["alerts"])
        return cursors

    cursors = asyncio.run(scenario())

    assert cursors == [T0 + 10, T0 + 10, T0 + 10]


def test_out_of_order_batch_renders_chronologically() -> None:
    fetch = ScriptedFetch(
        {"alerts": [[make_message("m300", 300), make_message("m100", 100), make_message("m200", 200)]]}
    )

    async def scenario() -> tuple[WatchEngine, io.StringIO]:
        engine, _, out = build_engine(fetch)
        await engine.poll_once()
        return engine, out

    engine, out = asyncio.run(scenario())

    text = out.getvalue()
    assert text.index("body-m100") < text.index("body-m200") < text.index("body-m300")
    assert engine.cursors["alerts"] == T0 + 300


def test_messages_at_session_start_are_not_rendered() -> None:
    fetch = ScriptedFetch({"alerts": [[make_message("seed", 0), make_message("past", -50)]]})

    async def scenario() -> tuple[WatchEngine, io.StringIO]:
        engine, _, out = build_engine(fetch)
        await engine.poll_once()
        return engine, out

    engine, out = asyncio.run(scenario())

    assert out.getvalue() == ""
    assert engine.cursors["alerts"] == T0
    assert engine.stats.total == 0


@pytest.mark.parametrize(
    ("priorities", "expected_plays"),
    [
        ([2, 3], 0),
        ([2, 5], 1),
        ([4, 5], 1),
    ],
)
def test_priority_threshold_gates_audio(priorities: list[int], expected_plays: int) -> None:
    batch = [make_message(f"m{index}", index + 1, priority) for index, priority in enumerate(priorities)]
    fetch = ScriptedFetch({"alerts": [batch]})

    async def scenario() -> RecordingPlayer:
        engine, player, _ = build_engine(fetch, priority_threshold=4)
        await engine.poll_once()
        return player

    player = asyncio.run(scenario())

    assert len(player.calls) == expected_plays


def test_no_sound_never_plays() -> None:
    fetch = ScriptedFetch({"alerts": [[make_message("a", 1, 5)]]})

    async def scenario() -> tuple[RecordingPlayer, io.StringIO]:
        engine, player, out = build_engine(fetch, no_sound=True)
        await engine.poll_once()
        return player, out

    player, out = asyncio.run(scenario())

    assert player.calls == []
    assert "body-a" in out.getvalue()


def test_missing_priority_counts_as_default() -> None:
    async def scenario(threshold: int) -> tuple[RecordingPlayer, io.StringIO]:
        engine, player, out = build_engine(
            ScriptedFetch({"alerts": [[make_message("a", 1)]]}),
            priority_threshold=threshold,
        )
        await engine.poll_once()
        return player, out

    player, out = asyncio.run(scenario(3))
    assert len(player.calls) == 1
    header = out.getvalue().splitlines()[0]
    assert header.endswith("[alerts]")

    player, _ = asyncio.run(scenario(4))
    assert player.calls == []


def test_fetch_failure_is_isolated_per_topic() -> None:
    fetch = ScriptedFetch(
        {
            "a": [NtfyError("boom"), [make_message("a1", 7)]],
            "b": [[make_message("b1", 1), make_message("b2", 2)]],
        }
    )

    async def scenario() -> tuple[WatchEngine, io.StringIO, list[int]]:
        engine, _, out = build_engine(fetch, topics=("a", "b"))
        await engine.poll_once()
        after_first = [engine.cursors["a"], engine.cursors["b"]]
        await engine.poll_once()
        return engine, out, after_first

    engine, out, after_first = asyncio.run(scenario())

    assert after_first == [T0, T0 + 2]
    assert "body-b1" in out.getvalue()
    assert "body-b2" in out.getvalue()
    assert "body-a1" in out.getvalue()
    assert engine.cursors["a"] == T0 + 7
    assert fetch.calls[2] == ("a", str(T0))


def test_player_failure_does_not_stop_session() -> None:
    class BrokenPlayer:
        async def play(self, sound_path: str, device: str | None = None) -> None:
            raise OSError("no audio device")

    fetch = ScriptedFetch({"alerts": [[make_message("a", 1)], [make_message("b", 2)]]})

    async def scenario() -> WatchEngine:
        engine = WatchEngine(
            WatchSettings(topics=("alerts",), sound_path="ping.wav"),
            fetch=fetch,
            player=BrokenPlayer(),
            token=CancelToken(),
            formatter=Formatter(no_color=True),
            out=io.StringIO(),
            clock=FakeClock(),
        )
        await engine.poll_once()
        await engine.poll_once()
        return engine

    engine = asyncio.run(scenario())

    assert engine.stats.counts["alerts"] == 2


def test_on_advance_receives_batch_maximum() -> None:
    fetch = ScriptedFetch({"alerts": [[make_message("a", 4), make_message("b", 9)]]})
    advanced: list[tuple[str, int]] = []

    async def scenario() -> None:
        engine, _, _ = build_engine(fetch)
        engine.on_advance = lambda topic, cursor: advanced.append((topic, cursor))
        await engine.poll_once()

    asyncio.run(scenario())

    assert advanced == [("alerts", T0 + 9)]


def test_double_cancel_prints_one_summary() -> None:
    clock = FakeClock()
    fetch = ScriptedFetch({"alerts": []})

    async def scenario() -> io.StringIO:
        token = CancelToken()
        engine, _, out = build_engine(fetch, token=token, clock=clock)
        token.cancel()
        token.cancel()
        await engine.run()
        await engine.run()
        return out

    out = asyncio.run(scenario())

    assert out.getvalue().count("Watch session ended") == 1
    assert fetch.calls == []


def test_end_to_end_session() -> None:
    clock = FakeClock()
    alert = make_message("urgent1", 5, priority=5)
    fetch = ScriptedFetch({"alerts": [[make_message("seed", 0)], [alert]]})

    async def scenario():
        token = ClockedToken(clock, cancel_on_sleep=2)
        engine, player, out = build_engine(
            fetch, token=token, clock=clock, interval_seconds=60
        )
        stats = await engine.run()
        return engine, player, out, stats

    engine, player, out, stats = asyncio.run(scenario())

    assert [call[1] for call in fetch.calls] == [str(T0), str(T0)]
    assert engine.cursors["alerts"] == T0 + 5
    assert stats.counts == {"alerts": 1}
    assert player.calls == [("ping.wav", None)]

    text = out.getvalue()
    assert "ntfy watch - polling every 60s" in text
    assert text.count("body-urgent1") == 1
    assert "[urgent]" in text
    summary = text[text.index("Watch session ended") :]
    assert "Duration: 2m 0s" in summary
    assert "Topics watched: alerts" in summary
    assert "Messages seen: 1" in summary
    assert "alerts: 1 message" in summary
    assert "alerts: 1 messages" not in summary


def test_cancel_token_sleep_wakes_on_cancel() -> None:
    async def scenario() -> tuple[bool, bool]:
        token = CancelToken()
        timed_out = await token.sleep(0.01)
        asyncio.get_running_loop().call_later(0.01, token.cancel)
        woken = await token.sleep(5)
        return timed_out, woken

    timed_out, woken = asyncio.run(scenario())

    assert timed_out is False
    assert woken is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"topics": ()},
        {"topics": ("a", "a")},
        {"topics": ("a",), "interval_seconds": 0},
        {"topics": ("a",), "priority_threshold": 6},
        {"topics": ("a",), "priority_threshold": 0},
    ],
)
def test_invalid_settings_are_rejected(kwargs: dict) -> None:
    with pytest.raises(UsageError):
        WatchSettings(sound_path="ping.wav", **kwargs)


def test_out_of_range_time_does_not_block_other_topics() -> None:
    fetch = ScriptedFetch(
        {
            "a": [[Message(id="far", time=10**13, message="body-far")]],
            "b": [[make_message("b1", 3)]],
        }
    )

    async def scenario() -> tuple[WatchEngine, io.StringIO]:
        engine, _, out = build_engine(fetch, topics=("a", "b"))
        await engine.poll_once()
        return engine, out

    engine, out = asyncio.run(scenario())

    assert [call[0] for call in fetch.calls] == ["a", "b"]
    text = out.getvalue()
    assert "body-far" in text
    assert "body-b1" in text
    assert engine.cursors == {"a": 10**13, "b": T0 + 3}


def test_render_failure_is_isolated_per_topic(monkeypatch: pytest.MonkeyPatch) -> None:
    from ntfy_cli.watch import engine as engine_module

    original = engine_module.render_watch_message

    def flaky_render(message: Message, topic: str, fmt: Formatter) -> str:
        if topic == "a":
            raise ValueError("cannot render")
        return original(message, topic, fmt)

    monkeypatch.setattr(engine_module, "render_watch_message", flaky_render)
    fetch = ScriptedFetch(
        {
            "a": [[make_message("a1", 1)], [make_message("a1", 1)]],
            "b": [[make_message("b1", 2)]],
        }
    )

    async def scenario() -> tuple[WatchEngine, RecordingPlayer, io.StringIO]:
        engine, player, out = build_engine(fetch, topics=("a", "b"))
        await engine.poll_once()
        await engine.poll_once()
        return engine, player, out

    engine, player, out = asyncio.run(scenario())

    assert "body-b1" in out.getvalue()
    assert engine.cursors["a"] == T0 + 1
    assert engine.stats.counts == {"a": 1, "b": 1}
    assert len(player.calls) == 2
    assert len(fetch.calls) == 4


def test_async_on_advance_is_awaited() -> None:
    fetch = ScriptedFetch({"alerts": [[make_message("a", 6)]]})
    advanced: list[tuple[str, int]] = []

    async def record(topic: str, cursor: int) -> None:
        await asyncio.sleep(0)
        advanced.append((topic, cursor))

    async def scenario() -> None:
        engine, _, _ = build_engine(fetch)
        engine.on_advance = record
        await engine.poll_once()

    asyncio.run(scenario())

    assert advanced == [("alerts", T0 + 6)]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_interrupt_signal_cancels_token() -> None:
    async def scenario() -> tuple[bool, bool]:
        token = CancelToken()
        with cancel_on_signals(token, (signal.SIGINT,)):
            os.kill(os.getpid(), signal.SIGINT)
            woken = await token.sleep(5)
        return token.cancelled, woken

    assert asyncio.run(scenario()) == (True, True)
