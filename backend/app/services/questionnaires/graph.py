from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Hashable, Iterator, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

KEY_SEPARATOR = "|"


def step_key(section_title: str, step_title: str) -> str:
    return KEY_SEPARATOR.join((section_title, step_title))


def question_key(section_title: str, step_title: str, question_title: str) -> str:
    return KEY_SEPARATOR.join((section_title, step_title, question_title))


class OrderedKeyMap(Generic[K, V]):
    """Dict lookup paired with an explicit insertion-order key list.

    Iteration always follows the key list, so ordering does not depend on
    the behaviour of the underlying mapping type.
    """

    def __init__(self) -> None:
        self._values: dict[K, V] = {}
        self._order: list[K] = []

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._order)

    def __getitem__(self, key: K) -> V:
        return self._values[key]

    def insert_if_absent(self, key: K, factory: Callable[[], V]) -> bool:
        """Store ``factory()`` under ``key`` unless present. Returns True when inserted."""
        if key in self._values:
            return False
        self._values[key] = factory()
        self._order.append(key)
        return True

    def keys(self) -> list[K]:
        return list(self._order)

    def values(self) -> list[V]:
        return [self._values[key] for key in self._order]

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._order))


@dataclass(frozen=True)
class QuestionnaireMetadata:
    """Free-text fields passed through to the stored questionnaire."""

    name: str
    description: str | None = None
    guidelines: str | None = None
    company_id: str | None = None


@dataclass(frozen=True)
class NormalizedSection:
    title: str
    order_index: int

    @property
    def key(self) -> str:
        return self.title


@dataclass(frozen=True)
class NormalizedStep:
    section_title: str
    title: str
    order_index: int

    @property
    def key(self) -> str:
        return step_key(self.section_title, self.title)


@dataclass(frozen=True)
class NormalizedQuestion:
    section_title: str
    step_title: str
    title: str
    question_text: str
    context: str
    order_index: int

    @property
    def key(self) -> str:
        return question_key(self.section_title, self.step_title, self.title)

    @property
    def parent_key(self) -> str:
        return step_key(self.section_title, self.step_title)


@dataclass(frozen=True)
class NormalizedRatingScale:
    value: int
    name: str
    description: str
    order_index: int = 0


@dataclass(frozen=True)
class QuestionRatingScaleAssociation:
    question_key: str
    value: int
    description: str


@dataclass(frozen=True)
class QuestionnaireGraph:
    sections: list[NormalizedSection] = field(default_factory=list)
    steps: list[NormalizedStep] = field(default_factory=list)
    questions: list[NormalizedQuestion] = field(default_factory=list)
    rating_scales: list[NormalizedRatingScale] = field(default_factory=list)
    question_rating_scales: list[QuestionRatingScaleAssociation] = field(default_factory=list)

    def summary(self) -> dict[str, int]:
        return {
            "sections": len(self.sections),
            "steps": len(self.steps),
            "questions": len(self.questions),
            "rating_scales": len(self.rating_scales),
            "question_rating_scales": len(self.question_rating_scales),
        }


__all__ = [
    "KEY_SEPARATOR",
    "NormalizedQuestion",
    "NormalizedRatingScale",
    "NormalizedSection",
    "NormalizedStep",
    "OrderedKeyMap",
    "QuestionRatingScaleAssociation",
    "QuestionnaireGraph",
    "QuestionnaireMetadata",
    "question_key",
    "step_key",
]
