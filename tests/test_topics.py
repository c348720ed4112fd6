from __future__ import annotations

import pytest

from ntfy_cli.config.models import ServerProfile
from ntfy_cli.config.topics import (
    add_group,
    add_topic,
    remove_group,
    remove_topic,
    resolve_watch_topics,
)
from ntfy_cli.shared.errors import UsageError


@pytest.fixture
def profile() -> ServerProfile:
    return ServerProfile(
        url="https://ntfy.example.com",
        user="alice",
        password="secret",
        default_topic="alerts",
        topics=["alerts", "builds", "deploys"],
        topic_groups={"ci": ["builds", "deploys"]},
    )


def test_add_topic_skips_duplicates(profile: ServerProfile) -> None:
    assert add_topic(profile, "backups") is True
    assert add_topic(profile, "backups") is False
    assert profile.topics == ["alerts", "builds", "deploys", "backups"]


def test_default_topic_cannot_be_removed(profile: ServerProfile) -> None:
    with pytest.raises(UsageError, match="default topic"):
        remove_topic(profile, "alerts")


def test_remove_topic_drops_group_membership(profile: ServerProfile) -> None:
    remove_topic(profile, "builds")

    assert profile.topics == ["alerts", "deploys"]
    assert profile.topic_groups == {"ci": ["deploys"]}


def test_remove_unwatched_topic_fails(profile: ServerProfile) -> None:
    with pytest.raises(UsageError, match="not in the watch list"):
        remove_topic(profile, "nope")


def test_add_group_requires_watched_members(profile: ServerProfile) -> None:
    with pytest.raises(UsageError, match="nope"):
        add_group(profile, "mixed", ["alerts", "nope"])

    add_group(profile, "all", ["alerts", "builds", "alerts"])
    assert profile.topic_groups["all"] == ["alerts", "builds"]


def test_remove_group(profile: ServerProfile) -> None:
    remove_group(profile, "ci")
    assert profile.topic_groups == {}

    with pytest.raises(UsageError):
        remove_group(profile, "ci")


@pytest.mark.parametrize(
    ("topic", "group", "expected"),
    [
        ("solo", None, ["solo"]),
        (None, "ci", ["builds", "deploys"]),
        (None, None, ["alerts", "builds", "deploys"]),
    ],
)
def test_resolve_watch_topics(
    profile: ServerProfile,
    topic: str | None,
    group: str | None,
    expected: list[str],
) -> None:
    assert resolve_watch_topics(profile, topic, group) == expected


def test_resolve_watch_topics_falls_back_to_default_topic(profile: ServerProfile) -> None:
    profile.topics = []

    assert resolve_watch_topics(profile) == ["alerts"]


def test_resolve_watch_topics_rejects_unknown_group(profile: ServerProfile) -> None:
    with pytest.raises(UsageError, match="Available groups: ci"):
        resolve_watch_topics(profile, group="missing")
