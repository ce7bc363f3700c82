"""Построение эффективной последовательности вопросов для (язык, пол)

Вопросы фильтруются по полу один раз, при построении. Раздел, в котором после
фильтра не осталось вопросов, выбрасывается целиком; часть без разделов тоже.
Позиции являются индексами в уже отфильтрованных списках, поэтому сохранённый курсор
однозначно разрешается в вопрос без каких-либо пропусков.
"""
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from .definition import Gender, Part, Question, QuestionnaireDefinition, Section
from .errors import ConfigurationError
from .navigator import Position, Shape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexedQuestion:
    """Вопрос вместе с его местом в анкете"""
    position: Position
    question: Question
    part: Part
    section: Section
    language: str
    total_in_section: int
    is_first: bool
    is_last: bool

    @property
    def question_id(self) -> str:
        return self.question.id

    @property
    def part_id(self) -> str:
        return self.part.id

    @property
    def section_id(self) -> str:
        return self.section.id

    @property
    def number(self) -> str:
        return self.question.number

    @property
    def text(self) -> str:
        return self.question.text_for(self.language)

    @property
    def options(self) -> List[str]:
        return self.question.options_for(self.language)

    @property
    def follow_up(self) -> Optional[str]:
        return self.question.follow_up_for(self.language)

    @property
    def part_title(self) -> str:
        return self.part.title[self.language]

    @property
    def section_title(self) -> str:
        return self.section.title[self.language]

    @property
    def current_in_section(self) -> int:
        return self.position.question_index + 1


@dataclass(frozen=True)
class SectionSummary:
    part_id: str
    part_title: str
    section_id: str
    section_title: str
    question_count: int
    start_position: Position


class EffectiveSequence:
    """Отфильтрованная по полу анкета на одном языке"""

    def __init__(self, definition: QuestionnaireDefinition, language: str, gender: Gender):
        if language not in definition.languages:
            raise ConfigurationError(f"Язык {language!r} не поддерживается анкетой")
        if gender == Gender.ANY:
            raise ConfigurationError("Последовательность строится для конкретного пола")

        self.language = language
        self.gender = gender

        parts: List[Tuple[Part, Tuple[Tuple[Section, Tuple[Question, ...]], ...]]] = []
        for part in definition.parts:
            sections = []
            for section in part.sections:
                questions = tuple(q for q in section.questions if q.applies_to(gender))
                if questions:
                    sections.append((section, questions))
            if sections:
                parts.append((part, tuple(sections)))
        self._parts = tuple(parts)

        self.shape: Shape = tuple(
            tuple(len(questions) for _, questions in sections)
            for _, sections in self._parts
        )
        self._total = sum(sum(part) for part in self.shape)

        self._entries: List[IndexedQuestion] = []
        self._by_position: Dict[Position, IndexedQuestion] = {}
        self._by_id: Dict[str, IndexedQuestion] = {}
        for p, (part, sections) in enumerate(self._parts):
            for s, (section, questions) in enumerate(sections):
                for q, question in enumerate(questions):
                    pos = Position(p, s, q)
                    entry = IndexedQuestion(
                        position=pos,
                        question=question,
                        part=part,
                        section=section,
                        language=language,
                        total_in_section=len(questions),
                        is_first=not self._entries,
                        is_last=len(self._entries) == self._total - 1,
                    )
                    self._entries.append(entry)
                    self._by_position[pos] = entry
                    self._by_id[question.id] = entry

    def __repr__(self):
        return f"<EffectiveSequence(lang={self.language}, gender={self.gender.value}, total={self._total})>"

    def __len__(self):
        return self._total

    def __iter__(self):
        return iter(self._entries)

    def total_question_count(self) -> int:
        return self._total

    def question_at(self, pos) -> Optional[IndexedQuestion]:
        """Вопрос по позиции или None, если позиция не разрешается"""
        if not isinstance(pos, Position):
            return None
        return self._by_position.get(pos)

    def position_of(self, question_id: str) -> Optional[Position]:
        entry = self._by_id.get(question_id)
        return entry.position if entry else None

    def first_position(self) -> Position:
        if not self._entries:
            raise ConfigurationError(f"Пустая анкета для {self.language}/{self.gender.value}")
        return self._entries[0].position

    def last_position(self) -> Position:
        if not self._entries:
            raise ConfigurationError(f"Пустая анкета для {self.language}/{self.gender.value}")
        return self._entries[-1].position

    def section_questions(self, part_index: int, section_index: int) -> List[IndexedQuestion]:
        """Все вопросы одного раздела по порядку"""
        count = self.shape[part_index][section_index]
        return [self._by_position[Position(part_index, section_index, q)] for q in range(count)]

    def section_summaries(self) -> List[SectionSummary]:
        summaries = []
        for p, (part, sections) in enumerate(self._parts):
            for s, (section, questions) in enumerate(sections):
                summaries.append(SectionSummary(
                    part_id=part.id,
                    part_title=part.title[self.language],
                    section_id=section.id,
                    section_title=section.title[self.language],
                    question_count=len(questions),
                    start_position=Position(p, s, 0),
                ))
        return summaries

    def parts(self) -> List[Tuple[Part, List[Section]]]:
        """Части и их непустые разделы"""
        return [(part, [section for section, _ in sections]) for part, sections in self._parts]


@lru_cache(maxsize=32)
def build_sequence(definition: QuestionnaireDefinition, language: str, gender: Gender) -> EffectiveSequence:
    """Построить (или взять из кеша) последовательность для языка и пола"""
    sequence = EffectiveSequence(definition, language, Gender(gender))
    logger.debug(f"Построена последовательность {sequence!r}")
    return sequence


def validate_definition_sequences(definition: QuestionnaireDefinition) -> None:
    """Проверить при старте, что ни для одной пары (язык, пол) анкета не пуста"""
    for language in definition.languages:
        for gender in (Gender.MALE, Gender.FEMALE):
            if build_sequence(definition, language, gender).total_question_count() == 0:
                raise ConfigurationError(
                    f"После фильтра по полу не осталось вопросов: {language}/{gender.value}"
                )
