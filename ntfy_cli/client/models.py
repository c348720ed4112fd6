"""ntfy wire models."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from ntfy_cli.shared.constants import DEFAULT_PRIORITY

MESSAGE_EVENT = "message"


class Message(BaseModel):
    """
    One notification event as published by the server.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    time: int
    event: str = MESSAGE_EVENT
    topic: str = ""
    message: str | None = None
    title: str | None = None
    priority: int | None = None
    tags: list[str] | None = None
    click: str | None = None
    expires: int | None = None

    @property
    def effective_priority(self) -> int:
        """Priority with the server default applied when absent."""
        return self.priority if self.priority is not None else DEFAULT_PRIORITY


class HealthStatus(BaseModel):
    """
    Server health response.
    """

    healthy: bool = False
    version: str | None = None


@dataclass(frozen=True)
class SendOptions:
    """
    Optional publish settings.

    Args:
        title: Message title.
        priority: Priority from 1 to 5.
        tags: Comma-separated tags.
        delay: Scheduled delivery such as "30m" or "tomorrow 10am".
        click: URL opened when the notification is clicked.
        attach: URL of an attachment.
        markdown: Render body as markdown.
    """

    title: str | None = None
    priority: int | None = None
    tags: str | None = None
    delay: str | None = None
    click: str | None = None
    attach: str | None = None
    markdown: bool = False
