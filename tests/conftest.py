import asyncio

import pytest

from lexiquiz.classes import Lesson, Question, QuestionKind, WordEntry
from lexiquiz.sentences import SentenceSource
from lexiquiz.speech import Speaker


def make_word(surface_form: str, illustration: str | None = None) -> WordEntry:
    return WordEntry(surface_form=surface_form, category="noun", translation=f"{surface_form}-zh",
                     illustration=illustration)


def make_lesson(count: int, illustrated: int = 0, lesson_id: str = "test") -> Lesson:
    words = tuple(make_word(f"word{i}", "🖼️" if i < illustrated else None) for i in range(count))
    return Lesson(id=lesson_id, title="Test", icon="🧪", color="bg-slate-500", words=words)


def make_questions(count: int, kind: QuestionKind = QuestionKind.TranslateFromNative) -> list[Question]:
    words = [make_word(f"word{i}") for i in range(count + 2)]
    questions = []
    for i in range(count):
        options = (words[i], words[i + 1], words[i + 2])
        questions.append(Question(prompt_word=words[i], options=options, kind=kind))
    return questions


class FakeSentenceSource(SentenceSource):
    """Returns a canned sentence, optionally after a gate opens or by raising."""

    def __init__(self, sentence: str | None = "This is an example.", error: Exception | None = None):
        self.sentence = sentence
        self.error = error
        self.gate: asyncio.Event | None = None
        self.requested: list[WordEntry] = []

    async def request_example_sentence(self, word: WordEntry) -> str | None:
        self.requested.append(word)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.sentence


class RecordingSpeaker(Speaker):
    def __init__(self):
        self.spoken: list[str] = []

    def speak(self, text: str):
        self.spoken.append(text)


@pytest.fixture
def source() -> FakeSentenceSource:
    return FakeSentenceSource()


@pytest.fixture
def speaker() -> RecordingSpeaker:
    return RecordingSpeaker()
