"""Watched-topic and topic-group management."""

from __future__ import annotations

from ntfy_cli.config.models import ServerProfile
from ntfy_cli.shared.errors import UsageError


def add_topic(profile: ServerProfile, topic: str) -> bool:
    """
    Add a topic to the watch list.

    Args:
        profile: Profile to update in place.
        topic: Topic name.

    Returns:
        True when the topic was added, False when already watched.
    """
    name = topic.strip()
    if not name:
        raise UsageError("topic name is required")
    if name in profile.topics:
        return False
    profile.topics.append(name)
    return True


def remove_topic(profile: ServerProfile, topic: str) -> None:
    """
    Remove a topic from the watch list and from every group.

    Args:
        profile: Profile to update in place.
        topic: Topic name.

    Returns:
        None.

    Raises:
        UsageError: Topic is the default topic or is not watched.
    """
    if topic == profile.default_topic:
        raise UsageError(f'Cannot remove the default topic "{topic}"')
    if topic not in profile.topics:
        raise UsageError(f'Topic "{topic}" is not in the watch list')
    profile.topics = [item for item in profile.topics if item != topic]
    for group_name, members in profile.topic_groups.items():
        profile.topic_groups[group_name] = [item for item in members if item != topic]


def add_group(profile: ServerProfile, group: str, members: list[str]) -> None:
    """
    Create or replace a topic group.

    Args:
        profile: Profile to update in place.
        group: Group name.
        members: Member topics; each must already be watched.

    Returns:
        None.

    Raises:
        UsageError: Group is unnamed, empty, or names unwatched topics.
    """
    name = group.strip()
    if not name:
        raise UsageError("group name is required")
    unique: list[str] = []
    for member in members:
        text = member.strip()
        if text and text not in unique:
            unique.append(text)
    if not unique:
        raise UsageError(f'Group "{name}" needs at least one topic')
    unknown = [member for member in unique if member not in profile.topics]
    if unknown:
        raise UsageError(
            f"Topics not in the watch list: {', '.join(unknown)}. "
            "Add them first with: ntfy topics add <topic>"
        )
    profile.topic_groups[name] = unique


def remove_group(profile: ServerProfile, group: str) -> None:
    """
    Delete a topic group.

    Args:
        profile: Profile to update in place.
        group: Group name.

    Returns:
        None.

    Raises:
        UsageError: Group does not exist.
    """
    if group not in profile.topic_groups:
        raise UsageError(f'Group "{group}" not found')
    del profile.topic_groups[group]


def resolve_watch_topics(
    profile: ServerProfile,
    topic: str | None = None,
    group: str | None = None,
) -> list[str]:
    """
    Resolve the topics a watch session should poll.

    Args:
        profile: Active profile.
        topic: Explicit single topic.
        group: Named topic group.

    Returns:
        Topics in polling order.

    Raises:
        UsageError: Group is unknown or the resolved set is empty.
    """
    if topic:
        topics = [topic]
    elif group:
        if group not in profile.topic_groups:
            names = ", ".join(profile.topic_groups) or "(none)"
            raise UsageError(f'Group "{group}" not found. Available groups: {names}')
        topics = list(profile.topic_groups[group])
    elif profile.topics:
        topics = list(profile.topics)
    elif profile.default_topic:
        topics = [profile.default_topic]
    else:
        topics = []
    if not topics:
        raise UsageError("No topics to watch. Add topics with: ntfy topics add <topic>")
    return topics
