"""Completion chime played through the platform's sound player"""
import logging
import platform
import shutil
import subprocess
from typing import List, Optional

logger = logging.getLogger(__name__)

_MAC_SOUND = "/System/Library/Sounds/Glass.aiff"
_LINUX_PLAYERS = [
    ["paplay", "/usr/share/sounds/freedesktop/stereo/complete.oga"],
    ["paplay", "/usr/share/sounds/alsa/Front_Right.wav"],
    ["aplay", "-q", "/usr/share/sounds/alsa/Front_Right.wav"],
]


class AudioCue:
    """
    Lazily acquired audio output.

    `acquire()` resolves the player once; later calls are no-ops. Playing never
    raises: a missing player or a failing command is logged and skipped.
    """

    def __init__(self, system: Optional[str] = None):
        self._system = system or platform.system()
        self._command: Optional[List[str]] = None
        self._acquired = False
        self._process: Optional[subprocess.Popen] = None

    @property
    def acquired(self) -> bool:
        return self._acquired

    @property
    def available(self) -> bool:
        return self._command is not None or (self._acquired and self._system == "Windows")

    def acquire(self) -> None:
        if self._acquired:
            return
        self._acquired = True

        if self._system == "Darwin" and shutil.which("afplay"):
            self._command = ["afplay", _MAC_SOUND]
        elif self._system == "Linux":
            for command in _LINUX_PLAYERS:
                if shutil.which(command[0]):
                    self._command = command
                    break

        if self._command is None and self._system != "Windows":
            logger.info(f"No sound player found on {self._system}, completion chime disabled")

    def play(self) -> None:
        if not self._acquired:
            self.acquire()

        try:
            if self._system == "Windows":
                import winsound

                winsound.Beep(800, 500)
            elif self._command is not None:
                # poll() reaps the previous chime once it has exited
                if self._process is not None and self._process.poll() is None:
                    logger.debug("Previous chime still playing, skipping")
                    return
                self._process = subprocess.Popen(
                    self._command,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
        except Exception as e:
            logger.warning(f"Failed to play completion chime: {e}")
