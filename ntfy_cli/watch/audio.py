"""Platform audio playback for new-message alerts."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import sys
from dataclasses import dataclass

from ntfy_cli.shared.constants import (
    DEFAULT_SOUND_FILE,
    PLAYBACK_TIMEOUT_SECONDS,
    SOUNDS_DIR,
)

logger = logging.getLogger(__name__)


def default_sound_path() -> str:
    """
    Return the bundled alert sound.

    Returns:
        Absolute path to the packaged sound file.
    """
    return str(SOUNDS_DIR / DEFAULT_SOUND_FILE)


@dataclass(frozen=True)
class PlayerCommand:
    """
    One playback attempt.

    Args:
        argv: Command and arguments.
        env: Extra environment variables for the process.
    """

    argv: tuple[str, ...]
    env: dict[str, str] | None = None


def player_commands(
    platform: str,
    sound_path: str,
    device: str | None = None,
) -> list[PlayerCommand]:
    """
    Build the ordered playback fallback chain for a platform.

    Args:
        platform: Value of sys.platform.
        sound_path: Sound file to play.
        device: Optional output device hint.

    Returns:
        Commands to try in order; empty on unsupported platforms.
    """
    if platform == "darwin":
        argv = ["afplay"]
        if device:
            argv.extend(["-d", device])
        argv.append(sound_path)
        return [PlayerCommand(tuple(argv))]
    if platform.startswith("linux"):
        sox_env = {"AUDIODEV": device} if device else None
        paplay = ["paplay"]
        if device:
            paplay.append(f"--device={device}")
        paplay.append(sound_path)
        return [
            PlayerCommand(("play", "-q", sound_path), sox_env),
            PlayerCommand(tuple(paplay)),
        ]
    return []


class AudioPlayer:
    """
    Fire-and-forget sound player that never raises.

    Args:
        platform: Platform override, defaults to sys.platform.
        timeout: Seconds before a hung player is killed.
    """

    def __init__(
        self,
        platform: str | None = None,
        timeout: float = PLAYBACK_TIMEOUT_SECONDS,
    ) -> None:
        self.platform = platform or sys.platform
        self.timeout = timeout
        self._warned = False

    async def play(self, sound_path: str, device: str | None = None) -> None:
        """
        Play a sound, trying each available player in order.

        Args:
            sound_path: Sound file to play.
            device: Optional output device hint.

        Returns:
            None.
        """
        commands = player_commands(self.platform, sound_path, device)
        if not commands:
            logger.debug("Audio playback unsupported on %s", self.platform)
            return
        for command in commands:
            if await self._run(command):
                return
        if not self._warned:
            self._warned = True
            tried = ", ".join(command.argv[0] for command in commands)
            logger.warning(
                "No audio player succeeded (tried: %s). "
                "Install sox or pulseaudio-utils, or pass --no-sound.",
                tried,
            )

    async def _run(self, command: PlayerCommand) -> bool:
        """
        Run one player process to completion.

        Args:
            command: Playback attempt.

        Returns:
            True when the player exited successfully.
        """
        env = {**os.environ, **command.env} if command.env else None
        try:
            process = await asyncio.create_subprocess_exec(
                *command.argv,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                env=env,
            )
        except OSError as error:
            logger.debug("Audio player %s unavailable: %s", command.argv[0], error)
            return False
        try:
            return_code = await asyncio.wait_for(process.wait(), timeout=self.timeout)
        except TimeoutError:
            logger.debug("Audio player %s timed out", command.argv[0])
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            return False
        return return_code == 0
