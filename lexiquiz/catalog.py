import logging
import os
import pathlib

import pydantic
from pydantic import BaseModel, Field

from .classes import Lesson, WordEntry
from .exceptions import LessonLoadError

logger = logging.getLogger("catalog")


class WordRecord(BaseModel):
    word: str = Field(min_length=1)
    category: str
    translation: str
    illustration: str | None = None


class LessonRecord(BaseModel):
    id: str = Field(min_length=1)
    title: str
    icon: str = ""
    color: str = ""
    words: list[WordRecord]


class Catalog(BaseModel):
    lessons: list[LessonRecord]


def to_lesson(record: LessonRecord) -> Lesson:
    seen = set()
    for word in record.words:
        if word.word in seen:
            raise LessonLoadError(f"Duplicate word '{word.word}' in lesson '{record.id}'")
        seen.add(word.word)
    return Lesson(
        id=record.id,
        title=record.title,
        icon=record.icon,
        color=record.color,
        words=tuple(
            WordEntry(
                surface_form=word.word,
                category=word.category,
                translation=word.translation,
                illustration=word.illustration or None,
            )
            for word in record.words
        ),
    )


def parse_lessons(data: str | bytes) -> list[Lesson]:
    try:
        catalog = Catalog.model_validate_json(data)
    except pydantic.ValidationError as e:
        raise LessonLoadError(f"Invalid lesson catalog: {e.error_count()} validation errors") from e
    lessons = []
    ids = set()
    for record in catalog.lessons:
        if record.id in ids:
            raise LessonLoadError(f"Duplicate lesson id '{record.id}'")
        ids.add(record.id)
        lessons.append(to_lesson(record))
    return lessons


def load_lessons(path: str | os.PathLike) -> list[Lesson]:
    path = pathlib.Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise LessonLoadError(f"Could not read lesson catalog {path}") from e
    lessons = parse_lessons(data)
    logger.info(f"Loaded {len(lessons)} lessons from {path}")
    return lessons


def find_lesson(lessons: list[Lesson], lesson_id: str) -> Lesson | None:
    for lesson in lessons:
        if lesson.id == lesson_id:
            return lesson
    return None
