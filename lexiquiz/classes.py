import dataclasses
import enum


@dataclasses.dataclass(init=True, frozen=True, slots=True, kw_only=True)
class WordEntry:
    surface_form: str           # target language spelling, unique within a lesson
    category: str
    translation: str            # native language gloss
    illustration: str | None = None

    @property
    def has_illustration(self) -> bool:
        return bool(self.illustration)


@dataclasses.dataclass(init=True, frozen=True, slots=True, kw_only=True)
class Lesson:
    id: str
    title: str
    icon: str
    color: str
    words: tuple[WordEntry, ...]

    @property
    def illustrated_words(self) -> list[WordEntry]:
        return [word for word in self.words if word.has_illustration]


class QuestionKind(enum.Enum):
    TranslateFromNative = 0
    TranslateToNative = 1
    IdentifyFromImage = 2
    IdentifyFromAudio = 3

    @property
    def instruction(self) -> str:
        if self == QuestionKind.IdentifyFromImage:
            return "What is this?"
        if self == QuestionKind.IdentifyFromAudio:
            return "What do you hear?"
        return "Translate this word:"


@dataclasses.dataclass(init=True, frozen=True, slots=True, kw_only=True)
class Question:
    prompt_word: WordEntry
    options: tuple[WordEntry, ...]
    kind: QuestionKind

    def is_correct(self, word: WordEntry) -> bool:
        return word.surface_form == self.prompt_word.surface_form


class EnrichmentStatus(enum.Enum):
    Idle = 0
    Pending = 1
    Ready = 2
    Unavailable = 3


@dataclasses.dataclass(init=True, frozen=True, slots=True, repr=True)
class Enrichment:
    status: EnrichmentStatus
    sentence: str | None = None     # only present if status == Ready

    @classmethod
    def idle(cls) -> 'Enrichment':
        return cls(EnrichmentStatus.Idle)

    @classmethod
    def pending(cls) -> 'Enrichment':
        return cls(EnrichmentStatus.Pending)

    @classmethod
    def ready(cls, sentence: str) -> 'Enrichment':
        return cls(EnrichmentStatus.Ready, sentence)

    @classmethod
    def unavailable(cls) -> 'Enrichment':
        return cls(EnrichmentStatus.Unavailable)


@dataclasses.dataclass(init=True, frozen=True, slots=True, kw_only=True, repr=True)
class QuizResult:
    score: int
    total: int

    @property
    def percentage(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.score / self.total * 100)

    @property
    def feedback(self) -> str:
        if self.percentage < 50:
            return "Keep Practicing!"
        if self.percentage < 80:
            return "Good Effort!"
        return "Great Job!"
