import asyncio
import contextlib
import logging
import sys

from lexiquiz import catalog, config, utils
from lexiquiz.classes import EnrichmentStatus, Lesson, Question, QuestionKind, WordEntry
from lexiquiz.exceptions import ConfigError, LessonLoadError
from lexiquiz.sentences import SentenceSource
from lexiquiz.session import QuizSession
from lexiquiz.speech import Speaker


async def ask(prompt: str) -> str:
    # input() runs in a thread so the example sentence keeps loading while we wait
    return (await asyncio.to_thread(input, prompt)).strip().lower()


def render_prompt(question: Question) -> str:
    word = question.prompt_word
    if question.kind == QuestionKind.TranslateToNative:
        return word.surface_form
    if question.kind == QuestionKind.IdentifyFromImage:
        return word.illustration
    if question.kind == QuestionKind.IdentifyFromAudio:
        return "🔊 (type 'r' to listen again)"
    return word.translation


def render_option(question: Question, option: WordEntry) -> str:
    if question.kind == QuestionKind.TranslateToNative:
        return option.translation
    return f"{option.illustration or '📝'} {option.surface_form}"


async def choose_lesson(lessons: list[Lesson]) -> Lesson | None:
    print("=" * 15)
    for i, lesson in enumerate(lessons, 1):
        print(f"{i}. {lesson.icon} {lesson.title} ({len(lesson.words)} words)")
    while True:
        answer = await ask("Pick a lesson (q to quit): ")
        if answer == "q":
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(lessons):
            return lessons[int(answer) - 1]
        print("Please enter a lesson number.")


async def run_quiz(session: QuizSession) -> bool:
    """Returns False if the learner quit before finishing."""
    if session.is_empty:
        print("This lesson doesn't have enough words for a quiz yet.")
        return False
    total = len(session.questions)
    while not session.completed:
        question = session.current_question
        print("-" * 15)
        print(f"{session.current_index + 1} / {total}")
        print(question.kind.instruction)
        print(render_prompt(question))
        for i, option in enumerate(question.options, 1):
            print(f"  {i}. {render_option(question, option)}")
        while not session.answered:
            answer = await ask("Answer: ")
            if answer == "q":
                return False
            if answer == "r":
                session.replay_prompt()
            elif answer.isdigit() and 1 <= int(answer) <= len(question.options):
                session.submit_answer(question.options[int(answer) - 1])
            else:
                print("Please enter an option number.")
        if session.is_correct:
            print("Correct!")
        else:
            correct = question.prompt_word
            print(f"Not quite. The answer is {correct.surface_form} ({correct.translation}).")
        if session.enrichment.status == EnrichmentStatus.Pending:
            print("Generating example...")
        enrichment = await session.wait_for_enrichment()
        if enrichment.status == EnrichmentStatus.Ready:
            print(f"💡 Example: {enrichment.sentence}")
        else:
            print("Could not generate an example right now.")
        label = "Finish Quiz" if session.is_last_question else "Next"
        if await ask(f"[Enter] {label}, q to quit: ") == "q":
            return False
        session.advance()
    return True


def show_summary(session: QuizSession):
    result = session.result
    print("=" * 15)
    print(result.feedback)
    print(f"You scored {result.score} / {result.total} ({result.percentage}%)")


async def main():
    try:
        cfg = config.load_config()
        lessons = catalog.load_lessons(cfg.lessons_file)
    except (ConfigError, LessonLoadError) as e:
        print(f"Could not start: {e}")
        return 1
    logger = logging.getLogger("quiz")
    async with utils.create_sentence_source(cfg, logger) as source, utils.create_speaker(cfg, logger) as speaker:
        source: SentenceSource
        speaker: Speaker
        lesson = await choose_lesson(lessons)
        while lesson is not None:
            session = QuizSession.from_lesson(lesson, source, speaker, question_count=cfg.question_count,
                                              option_count=cfg.option_count, root_logger=logger)
            finished = await run_quiz(session)
            await session.close()
            if finished:
                show_summary(session)
                if await ask("t to try again, anything else for the lesson list: ") == "t":
                    continue
            lesson = await choose_lesson(lessons)
    print("Bye!")
    return 0


if __name__ == "__main__":
    utils.logging_setup()
    with contextlib.suppress(KeyboardInterrupt, EOFError):
        sys.exit(asyncio.run(main()))
