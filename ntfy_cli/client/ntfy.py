"""ntfy REST API client implementation."""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ntfy_cli.client.models import MESSAGE_EVENT, HealthStatus, Message, SendOptions
from ntfy_cli.shared.constants import (
    HTTP_RETRIES,
    HTTP_TIMEOUT_SECONDS,
    RETRYABLE_STATUS_CODES,
)
from ntfy_cli.shared.errors import NtfyError

logger = logging.getLogger(__name__)


def auth_header(user: str, password: str) -> str:
    """
    Build a Basic Authorization header value.

    Args:
        user: Username.
        password: Password.

    Returns:
        Header value, or an empty string for anonymous access.
    """
    if not user and not password:
        return ""
    encoded = base64.b64encode(f"{user}:{password}".encode()).decode("ascii")
    return f"Basic {encoded}"


def encode_header_value(value: str) -> str:
    """
    Encode a header value so non-ASCII text survives transport.

    Args:
        value: Header text.

    Returns:
        The value unchanged when ASCII, otherwise an RFC 2047
        "=?UTF-8?B?...?=" encoded word.
    """
    if value.isascii():
        return value
    encoded = base64.b64encode(value.encode("utf-8")).decode("ascii")
    return f"=?UTF-8?B?{encoded}?="


def parse_ndjson_messages(body: str) -> list[Message]:
    """
    Parse an NDJSON poll response into message events.

    Blank and malformed lines are skipped, as are non-message events such as
    keepalive and open.

    Args:
        body: Raw response text.

    Returns:
        Messages in server order.
    """
    messages: list[Message] = []
    for line in body.splitlines():
        text = line.strip()
        if not text:
            continue
        try:
            message = Message.model_validate_json(text)
        except ValidationError:
            logger.debug("Skipping malformed line: %s", text[:80])
            continue
        if message.event == MESSAGE_EVENT:
            messages.append(message)
    return messages


class NtfyClient:
    """
    Client for one ntfy server profile.

    Args:
        url: Server base URL.
        user: Username, empty for anonymous access.
        password: Password, empty for anonymous access.
        timeout: HTTP request timeout in seconds.
        retries: Retry attempts for transient publish failures.
        verify: Verify TLS certificates.
        transport: Optional transport override.
    """

    def __init__(
        self,
        url: str,
        user: str = "",
        password: str = "",
        timeout: float = HTTP_TIMEOUT_SECONDS,
        retries: int = HTTP_RETRIES,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            url: Server base URL.
            user: Username.
            password: Password.
            timeout: HTTP request timeout in seconds.
            retries: Retry attempts for transient publish failures.
            verify: Verify TLS certificates.
            transport: Optional transport override.
        """
        self.base_url = url.rstrip("/")
        self.retries = max(0, retries)
        headers: dict[str, str] = {}
        auth = auth_header(user, password)
        if auth:
            headers["Authorization"] = auth
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers=headers,
            verify=verify,
            transport=transport,
        )

    async def __aenter__(self) -> NtfyClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _topic_url(self, topic: str) -> str:
        return f"{self.base_url}/{quote(topic, safe='')}"

    async def fetch_messages(self, topic: str, since: str) -> list[Message]:
        """
        Poll cached messages for a topic.

        Args:
            topic: Topic name.
            since: "all", a Unix timestamp, an ISO time, or a duration like "10m".

        Returns:
            Message events in server order.

        Raises:
            NtfyError: Request failed or returned a non-success status.
        """
        url = f"{self._topic_url(topic)}/json"
        params = {"poll": "1", "since": since}
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as error:
            raise NtfyError(f"ntfy fetch failed: {error}") from error
        if not response.is_success:
            raise NtfyError(
                f"ntfy fetch failed: HTTP {response.status_code} "
                f"{response.reason_phrase}"
            )
        return parse_ndjson_messages(response.text)

    async def send_message(
        self,
        topic: str,
        message: str,
        options: SendOptions | None = None,
    ) -> Message:
        """
        Publish a message to a topic.

        Args:
            topic: Topic name.
            message: Message body.
            options: Optional publish settings.

        Returns:
            Published message as returned by the server.

        Raises:
            NtfyError: Publishing failed after all retries.
        """
        options = options or SendOptions()
        optional = {
            "Title": options.title,
            "Priority": None if options.priority is None else str(options.priority),
            "Tags": options.tags,
            "X-Delay": options.delay,
            "X-Click": options.click,
            "X-Attach": options.attach,
        }
        headers = {
            "Content-Type": "text/markdown" if options.markdown else "text/plain"
        }
        for name, value in optional.items():
            if value:
                headers[name] = encode_header_value(value)

        payload = await self._post_with_retries(
            self._topic_url(topic),
            content=message.encode("utf-8"),
            headers=headers,
        )
        try:
            return Message.model_validate(payload)
        except ValidationError as error:
            raise NtfyError(f"ntfy send returned an unexpected payload: {error}") from error

    async def _post_with_retries(
        self,
        url: str,
        content: bytes,
        headers: dict[str, str],
    ) -> Any:
        """
        POST with retries on transient failures.

        Args:
            url: Request URL.
            content: Request body.
            headers: Request headers.

        Returns:
            Decoded JSON response.
        """
        last_error: Exception | None = None
        for attempt in range(self.retries + 1):
            try:
                response = await self._client.post(url, content=content, headers=headers)
            except httpx.HTTPError as error:
                last_error = error
                if attempt < self.retries:
                    await asyncio.sleep(2**attempt)
                    continue
                break
            if response.status_code in RETRYABLE_STATUS_CODES and attempt < self.retries:
                logger.debug("Retrying publish after HTTP %s", response.status_code)
                await asyncio.sleep(2**attempt)
                continue
            if not response.is_success:
                raise NtfyError(
                    f"ntfy send failed: HTTP {response.status_code} "
                    f"{response.reason_phrase}"
                )
            try:
                return response.json()
            except ValueError as error:
                raise NtfyError(f"ntfy send returned invalid JSON: {error}") from error
        raise NtfyError(f"ntfy send failed: {last_error}")

    async def delete_message(self, message_id: str) -> None:
        """
        Delete a message by its globally unique ID.

        Args:
            message_id: Message identifier.

        Returns:
            None.

        Raises:
            NtfyError: Request failed or returned a non-success status.
        """
        url = f"{self.base_url}/v1/messages/{quote(message_id, safe='')}"
        try:
            response = await self._client.delete(url)
        except httpx.HTTPError as error:
            raise NtfyError(f"ntfy delete failed: {error}") from error
        if not response.is_success:
            raise NtfyError(
                f"ntfy delete failed: HTTP {response.status_code} "
                f"{response.reason_phrase}"
            )

    async def check_health(self) -> HealthStatus:
        """
        Check server health.

        Returns:
            Health status; unreachable or failing servers report unhealthy.
        """
        try:
            response = await self._client.get(f"{self.base_url}/v1/health")
        except httpx.HTTPError as error:
            logger.debug("Health request failed: %s", error)
            return HealthStatus(healthy=False)
        if not response.is_success:
            return HealthStatus(healthy=False)
        try:
            data = response.json()
        except ValueError:
            return HealthStatus(healthy=False)
        if not isinstance(data, dict):
            return HealthStatus(healthy=False)
        version = data.get("version")
        return HealthStatus(
            healthy=data.get("healthy") is True,
            version=str(version) if version else None,
        )

    async def aclose(self) -> None:
        """
        Close the underlying HTTP client.

        Returns:
            None.
        """
        await self._client.aclose()
