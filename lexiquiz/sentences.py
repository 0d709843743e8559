import logging
from abc import ABC, abstractmethod

from .classes import WordEntry


class SentenceSource(ABC):
    @abstractmethod
    async def request_example_sentence(self, word: WordEntry) -> str | None:
        """
        Return a short example sentence using the word, or None if one can't be produced.
        Implementations should not raise; callers treat an exception the same as None.
        """
        raise NotImplementedError

    async def __aenter__(self) -> 'SentenceSource':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass


class StaticSentenceSource(SentenceSource):
    """
    Sentence source used when no generation backend is configured
    """
    logger: logging.Logger

    def __init__(self, *, root_logger: logging.Logger = logging.root):
        self.logger = root_logger.getChild("sentences")

    async def request_example_sentence(self, word: WordEntry) -> str | None:
        self.logger.debug(f"No sentence backend configured, skipping '{word.surface_form}'")
        return None
