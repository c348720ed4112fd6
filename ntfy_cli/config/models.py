"""Profile configuration models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ServerProfile:
    """
    Named server identity.

    Args:
        url: Server base URL.
        user: Username, empty for anonymous access.
        password: Password, empty for anonymous access.
        default_topic: Topic used when a command names none.
        topics: Watched topics in display order, without duplicates.
        topic_groups: Group name to member topics; members are watched topics.
        skip_ssl_verification: Disable TLS certificate checks.
    """

    url: str
    user: str
    password: str
    default_topic: str
    topics: list[str] = field(default_factory=list)
    topic_groups: dict[str, list[str]] = field(default_factory=dict)
    skip_ssl_verification: bool = False

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to the on-disk profile shape.

        Returns:
            Profile dictionary with camelCase keys.
        """
        payload: dict[str, Any] = {
            "url": self.url,
            "user": self.user,
            "password": self.password,
            "defaultTopic": self.default_topic,
            "topics": list(self.topics),
            "topicGroups": {
                name: list(members) for name, members in self.topic_groups.items()
            },
        }
        if self.skip_ssl_verification:
            payload["skipSSLVerification"] = True
        return payload


@dataclass
class AppConfig:
    """
    Complete profile configuration.

    Args:
        active_profile: Name of the profile used by default.
        profiles: Profiles keyed by name.
    """

    active_profile: str
    profiles: dict[str, ServerProfile] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to the on-disk config shape.

        Returns:
            Config dictionary.
        """
        return {
            "activeProfile": self.active_profile,
            "profiles": {
                name: profile.to_dict() for name, profile in self.profiles.items()
            },
        }
