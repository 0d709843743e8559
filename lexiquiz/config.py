import logging
import os
import pathlib

import pydantic
from pydantic import BaseModel, Field

from .exceptions import ConfigError

API_KEY_VARIABLES = ("GEMINI_API_KEY", "API_KEY")


class GeminiConfig(BaseModel):
    api_key: str | None = None
    model: str = "gemini-2.5-flash"
    temperature: float = Field(0.8, ge=0, le=2)
    timeout: float | None = 10.0
    retries: int = Field(3, ge=1)
    retry_wait: float = Field(2.5, ge=0)


class SpeechConfig(BaseModel):
    enabled: bool = True
    locale: str = "en-US"
    rate: float = Field(0.9, gt=0)
    voice: str | None = None
    player: list[str] = Field(default_factory=lambda: ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"],
                              min_length=1)


class QuizConfig(BaseModel):
    question_count: int = Field(10, ge=1)
    option_count: int = Field(5, ge=2)
    lessons_file: str = "lessons.json"
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    speech: SpeechConfig = Field(default_factory=SpeechConfig)


def load_config(path: str | os.PathLike = "config.json") -> QuizConfig:
    logger = logging.getLogger("configs")
    path = pathlib.Path(path)
    try:
        if path.exists():
            config = QuizConfig.model_validate_json(path.read_text(encoding="utf-8"))
        else:
            logger.info(f"No config file at {path}, using defaults")
            config = QuizConfig()
    except pydantic.ValidationError as e:
        raise ConfigError(f"Invalid config file {path}") from e
    if config.gemini.api_key is None:
        for variable in API_KEY_VARIABLES:
            if os.environ.get(variable):
                config.gemini.api_key = os.environ[variable]
                break
    if config.gemini.api_key is None:
        logger.warning("No Gemini API key configured, example sentences are disabled")
    logger.debug("Config parsed.")
    return config
