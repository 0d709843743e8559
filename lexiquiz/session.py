import asyncio
import contextlib
import logging
import random
import typing

from . import generator
from .classes import Enrichment, EnrichmentStatus, Lesson, Question, QuestionKind, QuizResult, WordEntry
from .exceptions import InvalidTransition, SessionCompleted
from .sentences import SentenceSource
from .speech import Speaker

CompletionCallback = typing.Callable[[int, int], typing.Any]


class QuizSession:
    """
    Drives a learner through a fixed sequence of questions.

    All state changes go through submit_answer() and advance(). The example sentence for an answered
    question is fetched in a background task; its result only lands if the session is still on the
    question it was requested for.
    """
    questions: tuple[Question, ...]
    sentence_source: SentenceSource
    speaker: Speaker | None
    on_complete: CompletionCallback | None
    logger: logging.Logger
    enrichment_task: asyncio.Task | None
    pending_tasks: set[asyncio.Task]
    _index: int
    _score: int
    _selected: WordEntry | None
    _answered: bool
    _enrichment: Enrichment
    _result: QuizResult | None

    def __init__(
            self,
            questions: typing.Iterable[Question],
            sentence_source: SentenceSource,
            speaker: Speaker | None = None, *,
            on_complete: CompletionCallback | None = None,
            root_logger: logging.Logger = logging.root,
    ):
        self.questions = tuple(questions)
        self.sentence_source = sentence_source
        self.speaker = speaker
        self.on_complete = on_complete
        self.logger = root_logger.getChild("session")
        self.enrichment_task = None
        self.pending_tasks = set()
        self._index = 0
        self._score = 0
        self._result = None
        self._reset_answer()
        if self.is_empty:
            self.logger.warning("Session created without questions")
        else:
            self._enter_question()

    @classmethod
    def from_lesson(
            cls,
            lesson: Lesson,
            sentence_source: SentenceSource,
            speaker: Speaker | None = None, *,
            question_count: int = 10,
            option_count: int = 5,
            rng: random.Random | None = None,
            on_complete: CompletionCallback | None = None,
            root_logger: logging.Logger = logging.root,
    ) -> 'QuizSession':
        questions = generator.generate(lesson, question_count, option_count, rng=rng)
        return cls(questions, sentence_source, speaker, on_complete=on_complete, root_logger=root_logger)

    @property
    def is_empty(self) -> bool:
        return len(self.questions) == 0

    @property
    def completed(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> QuizResult | None:
        return self._result

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Question | None:
        if self.is_empty or self.completed:
            return None
        return self.questions[self._index]

    @property
    def is_last_question(self) -> bool:
        return self._index == len(self.questions) - 1

    @property
    def score(self) -> int:
        return self._score

    @property
    def selected_answer(self) -> WordEntry | None:
        return self._selected

    @property
    def answered(self) -> bool:
        return self._answered

    @property
    def enrichment(self) -> Enrichment:
        return self._enrichment

    @property
    def is_correct(self) -> bool:
        question = self.current_question
        return question is not None and self._selected is not None and question.is_correct(self._selected)

    def _reset_answer(self):
        self._selected = None
        self._answered = False
        self._enrichment = Enrichment.idle()

    def _enter_question(self):
        if self.current_question.kind == QuestionKind.IdentifyFromAudio:
            self.replay_prompt()

    def replay_prompt(self):
        question = self.current_question
        if question is None or self.speaker is None:
            return
        self.speaker.speak(question.prompt_word.surface_form)

    def submit_answer(self, word: WordEntry):
        question = self.current_question
        if question is None:
            if self.completed:
                raise SessionCompleted("Session already completed")
            raise InvalidTransition("Session has no questions")
        if self._answered:
            self.logger.debug("Question already answered, ignoring submission")
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        self._answered = True
        self._selected = word
        if question.is_correct(word):
            self._score += 1
            self.logger.info(f"Question {self._index + 1}: correct ({word.surface_form})")
        else:
            self.logger.info(f"Question {self._index + 1}: incorrect ({word.surface_form}, "
                             f"expected {question.prompt_word.surface_form})")
        if loop is None:
            self.logger.warning("Cannot request an example sentence without a running event loop")
            self._enrichment = Enrichment.unavailable()
            return
        self._enrichment = Enrichment.pending()
        self.enrichment_task = loop.create_task(self._enrich(self._index, question.prompt_word))
        self.enrichment_task.set_name(f"enrichment-{self._index}")
        self.pending_tasks.add(self.enrichment_task)
        self.enrichment_task.add_done_callback(self.pending_tasks.discard)

    async def _enrich(self, index: int, word: WordEntry):
        try:
            sentence = await self.sentence_source.request_example_sentence(word)
        except Exception:
            self.logger.exception(f"Sentence source failed for '{word.surface_form}'")
            sentence = None
        if self.completed or index != self._index:
            self.logger.debug(f"Discarding stale example sentence for question {index + 1}")
            return
        if sentence is None or not sentence.strip():
            self._enrichment = Enrichment.unavailable()
            return
        self._enrichment = Enrichment.ready(sentence)
        if self.speaker is not None:
            self.speaker.speak(sentence)

    async def wait_for_enrichment(self) -> Enrichment:
        if self.enrichment_task is not None and self._enrichment.status == EnrichmentStatus.Pending:
            await asyncio.shield(self.enrichment_task)
        return self._enrichment

    def advance(self) -> QuizResult | None:
        if self.completed:
            raise SessionCompleted("Session already completed")
        if not self._answered:
            raise InvalidTransition("Cannot advance before the current question is answered")
        if not self.is_last_question:
            self._index += 1
            self._reset_answer()
            self._enter_question()
            return None
        self._result = QuizResult(score=self._score, total=len(self.questions))
        self.logger.info(f"Session completed with score {self._result.score}/{self._result.total}")
        if self.on_complete is not None:
            self.on_complete(self._result.score, self._result.total)
        return self._result

    async def close(self):
        # stale requests from earlier questions may still be running
        tasks = list(self.pending_tasks)
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self.pending_tasks.clear()
        self.enrichment_task = None
