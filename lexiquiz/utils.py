import logging
import os
import sys
import time

from .config import QuizConfig
from .gemini import GeminiSentenceSource
from .sentences import SentenceSource, StaticSentenceSource
from .speech import EdgeSpeaker, SilentSpeaker, Speaker


def logging_file_formatter() -> logging.Formatter:
    return logging.Formatter("[%(asctime)s] [%(name)s|%(levelname)s]: %(message)s")


def logging_setup(*, log_dir: str = "logs", stdout_level: int = logging.WARNING):
    # Make logs dir
    os.makedirs(log_dir, exist_ok=True)
    # Create objects
    file_formatter = logging_file_formatter()
    stdout_formatter = logging.Formatter("[%(name)s|%(levelname)s]: %(message)s")
    file_handler = logging.FileHandler(time.strftime(f'{log_dir}/%Y-%m-%d_%H-%M-%S-quiz.log'))
    stdout_handler = logging.StreamHandler(sys.stdout)
    # Set up handlers
    file_handler.setFormatter(file_formatter)
    file_handler.setLevel(logging.DEBUG)
    stdout_handler.setFormatter(stdout_formatter)
    stdout_handler.setLevel(stdout_level)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(stdout_handler)
    logging.getLogger("httpcore").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.INFO)


def create_sentence_source(config: QuizConfig, root_logger: logging.Logger = logging.root) -> SentenceSource:
    gemini = config.gemini
    if gemini.api_key is None:
        return StaticSentenceSource(root_logger=root_logger)
    return GeminiSentenceSource(gemini.api_key, model=gemini.model, temperature=gemini.temperature,
                                timeout=gemini.timeout, root_logger=root_logger, retries=gemini.retries,
                                retry_wait=gemini.retry_wait)


def create_speaker(config: QuizConfig, root_logger: logging.Logger = logging.root) -> Speaker:
    speech = config.speech
    if not speech.enabled:
        return SilentSpeaker(root_logger=root_logger)
    return EdgeSpeaker(locale=speech.locale, rate=speech.rate, voice=speech.voice, player=speech.player,
                       root_logger=root_logger)
