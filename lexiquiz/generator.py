import logging
import random
import typing

from .classes import Lesson, Question, QuestionKind, WordEntry

logger = logging.getLogger("quiz.generator")

T = typing.TypeVar("T")

BASE_KINDS = (
    QuestionKind.TranslateFromNative,
    QuestionKind.TranslateToNative,
    QuestionKind.IdentifyFromAudio,
)


def shuffled(items: typing.Iterable[T], rng: random.Random) -> list[T]:
    # Random.shuffle is Fisher-Yates, so prefixes of the result are unbiased samples
    result = list(items)
    rng.shuffle(result)
    return result


def eligible_kinds(word: WordEntry, illustrated_count: int, option_count: int) -> list[QuestionKind]:
    kinds = list(BASE_KINDS)
    # the whole lesson needs option_count illustrated words, not just option_count - 1 distractors
    if word.has_illustration and illustrated_count >= option_count:
        kinds.append(QuestionKind.IdentifyFromImage)
    return kinds


def make_question(answer: WordEntry, lesson: Lesson, option_count: int, rng: random.Random) -> Question:
    illustrated = lesson.illustrated_words
    kind = rng.choice(eligible_kinds(answer, len(illustrated), option_count))
    pool = illustrated if kind == QuestionKind.IdentifyFromImage else lesson.words
    pool = [word for word in pool if word.surface_form != answer.surface_form]
    if len(pool) < option_count - 1:
        logger.warning(f"Only {len(pool)} distractors available for '{answer.surface_form}' ({kind.name}), "
                       f"wanted {option_count - 1}")
    distractors = shuffled(pool, rng)[:option_count - 1]
    return Question(
        prompt_word=answer,
        options=tuple(shuffled([answer, *distractors], rng)),
        kind=kind,
    )


def generate(lesson: Lesson, question_count: int = 10, option_count: int = 5, *,
             rng: random.Random | None = None) -> list[Question]:
    if option_count < 1:
        raise ValueError("option_count must be at least 1")
    if question_count < 0:
        raise ValueError("question_count cannot be negative")
    if rng is None:
        rng = random.Random()
    if len(lesson.words) < option_count:
        logger.warning(f"Insufficient vocabulary in lesson '{lesson.id}': {len(lesson.words)} words, "
                       f"{option_count} options per question required")
        return []

    answers = shuffled(lesson.words, rng)[:question_count]
    questions = [make_question(answer, lesson, option_count, rng) for answer in answers]
    logger.debug(f"Generated {len(questions)} questions for lesson '{lesson.id}'")
    return shuffled(questions, rng)
