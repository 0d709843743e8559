import asyncio
import contextlib
import logging
import os
import tempfile
from abc import ABC, abstractmethod

import edge_tts

DEFAULT_VOICE = "en-US-AriaNeural"
DEFAULT_PLAYER = ("ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet")
# Substrings of voice names that tend to be pleasant female voices
PREFERRED_VOICE_NAMES = ("Female", "Aria", "Jenny", "Ana")


def rate_to_percent(rate: float) -> str:
    return f"{round((rate - 1) * 100):+d}%"


class Speaker(ABC):
    @abstractmethod
    def speak(self, text: str):
        """
        Start speaking text in the background. Never raises, never blocks.
        """
        raise NotImplementedError

    async def close(self):
        pass

    async def __aenter__(self) -> 'Speaker':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class SilentSpeaker(Speaker):
    logger: logging.Logger

    def __init__(self, *, root_logger: logging.Logger = logging.root):
        self.logger = root_logger.getChild("speech")

    def speak(self, text: str):
        self.logger.debug(f"Speech disabled, not speaking: {text}")


class EdgeSpeaker(Speaker):
    locale: str
    rate: float
    voice: str | None
    player: tuple[str, ...]
    logger: logging.Logger
    task: asyncio.Task | None

    def __init__(
            self, *,
            locale: str = "en-US",
            rate: float = 0.9,
            voice: str | None = None,
            player: tuple[str, ...] | list[str] = DEFAULT_PLAYER,
            root_logger: logging.Logger = logging.root,
    ):
        self.locale = locale
        self.rate = rate
        self.voice = voice
        self.player = tuple(player)
        self.logger = root_logger.getChild("speech")
        self.task = None

    async def get_voice(self) -> str:
        if self.voice is not None:
            return self.voice
        try:
            manager = await edge_tts.VoicesManager.create()
            voices = manager.find(Gender="Female", Locale=self.locale)
        except Exception:
            self.logger.exception("Failed to fetch the voice list, using the default voice")
            voices = []
        preferred = [v for v in voices if any(name in v["ShortName"] for name in PREFERRED_VOICE_NAMES)]
        if preferred:
            self.voice = preferred[0]["ShortName"]
        elif voices:
            self.voice = voices[0]["ShortName"]
        else:
            self.voice = DEFAULT_VOICE
        self.logger.debug(f"Selected voice {self.voice}")
        return self.voice

    def speak(self, text: str):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.logger.warning("Cannot speak without a running event loop")
            return
        # cancel any previous speech to avoid overlap
        if self.task is not None and not self.task.done():
            self.task.cancel()
        self.task = loop.create_task(self.utter(text))
        self.task.set_name("speech")

    async def utter(self, text: str):
        fd, path = tempfile.mkstemp(suffix=".mp3", prefix="lexiquiz-")
        os.close(fd)
        process = None
        try:
            communicate = edge_tts.Communicate(text, await self.get_voice(), rate=rate_to_percent(self.rate))
            await communicate.save(path)
            process = await asyncio.create_subprocess_exec(
                *self.player, path,
                stdout=asyncio.subprocess.DEVNULL, stderr=asyncio.subprocess.DEVNULL,
            )
            await process.wait()
        except asyncio.CancelledError:
            if process is not None and process.returncode is None:
                process.kill()
                await process.wait()
            raise
        except FileNotFoundError:
            self.logger.warning(f"Audio player '{self.player[0]}' not found, text-to-speech is unavailable")
        except Exception:
            self.logger.exception("Failed to speak text")
        finally:
            with contextlib.suppress(OSError):
                os.remove(path)

    async def close(self):
        if self.task is None:
            return
        self.task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self.task
        self.task = None
