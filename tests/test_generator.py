import random

import pytest

from lexiquiz import generator
from lexiquiz.classes import QuestionKind

from conftest import make_lesson, make_word

SEEDS = range(40)


def test_generate_returns_empty_for_insufficient_vocabulary() -> None:
    lesson = make_lesson(4)
    assert generator.generate(lesson, 10, 5, rng=random.Random(1)) == []


def test_generate_question_and_option_counts() -> None:
    lesson = make_lesson(6, illustrated=6)
    for seed in SEEDS:
        questions = generator.generate(lesson, 5, 5, rng=random.Random(seed))
        assert len(questions) == 5
        for question in questions:
            surfaces = [option.surface_form for option in question.options]
            assert len(surfaces) == 5
            assert len(set(surfaces)) == 5
            assert surfaces.count(question.prompt_word.surface_form) == 1


def test_generate_caps_question_count_at_lesson_size() -> None:
    lesson = make_lesson(7)
    questions = generator.generate(lesson, 10, 5, rng=random.Random(3))
    assert len(questions) == 7
    assert {q.prompt_word.surface_form for q in questions} == {w.surface_form for w in lesson.words}


def test_generate_uses_lesson_size_equal_to_option_count() -> None:
    lesson = make_lesson(5)
    questions = generator.generate(lesson, 10, 5, rng=random.Random(8))
    assert len(questions) == 5
    for question in questions:
        assert {o.surface_form for o in question.options} == {w.surface_form for w in lesson.words}


def test_image_questions_require_enough_illustrated_words() -> None:
    # four illustrated words is one short of the option count
    lesson = make_lesson(10, illustrated=4)
    for seed in SEEDS:
        questions = generator.generate(lesson, 10, 5, rng=random.Random(seed))
        assert all(q.kind != QuestionKind.IdentifyFromImage for q in questions)


def test_image_questions_only_use_illustrated_options() -> None:
    lesson = make_lesson(12, illustrated=6)
    kinds = set()
    for seed in SEEDS:
        for question in generator.generate(lesson, 10, 5, rng=random.Random(seed)):
            kinds.add(question.kind)
            if question.kind == QuestionKind.IdentifyFromImage:
                assert question.prompt_word.has_illustration
                assert all(option.has_illustration for option in question.options)
    assert kinds == set(QuestionKind)


def test_eligible_kinds_threshold() -> None:
    word = make_word("cat", "🐱")
    assert QuestionKind.IdentifyFromImage not in generator.eligible_kinds(word, 4, 5)
    assert QuestionKind.IdentifyFromImage in generator.eligible_kinds(word, 5, 5)
    assert QuestionKind.IdentifyFromImage not in generator.eligible_kinds(make_word("idea"), 10, 5)
    assert len(generator.eligible_kinds(make_word("idea"), 10, 5)) == 3


def test_generate_is_deterministic_with_seed() -> None:
    lesson = make_lesson(9, illustrated=9)
    assert generator.generate(lesson, rng=random.Random(42)) == generator.generate(lesson, rng=random.Random(42))


def test_option_order_is_randomized() -> None:
    lesson = make_lesson(8)
    positions = set()
    for seed in SEEDS:
        for question in generator.generate(lesson, 8, 5, rng=random.Random(seed)):
            positions.add(question.options.index(question.prompt_word))
    assert positions == set(range(5))


def test_question_order_is_shuffled() -> None:
    lesson = make_lesson(8)
    first_words = {generator.generate(lesson, 8, 5, rng=random.Random(seed))[0].prompt_word.surface_form
                   for seed in SEEDS}
    assert len(first_words) > 1


class ImageOnlyRandom(random.Random):
    def choice(self, seq):
        return QuestionKind.IdentifyFromImage


def test_short_distractor_pool_does_not_crash() -> None:
    lesson = make_lesson(6, illustrated=2)
    question = generator.make_question(lesson.words[0], lesson, 5, ImageOnlyRandom(0))
    assert question.kind == QuestionKind.IdentifyFromImage
    assert {o.surface_form for o in question.options} == {"word0", "word1"}


@pytest.mark.parametrize(("question_count", "option_count"), [(5, 0), (-1, 5)])
def test_generate_rejects_invalid_arguments(question_count: int, option_count: int) -> None:
    with pytest.raises(ValueError):
        generator.generate(make_lesson(6), question_count, option_count)


def test_generate_zero_questions() -> None:
    assert generator.generate(make_lesson(6), 0, 5, rng=random.Random(0)) == []
