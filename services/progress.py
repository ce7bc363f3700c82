"""Подсчёт прогресса анкеты

Только чтение: функции не меняют сессию и могут вызываться в любой момент,
в том числе из админских отчётов.
"""
import math
from dataclasses import dataclass
from typing import List

from .indexer import EffectiveSequence
from .navigator import Position
from .storage import ProgressSession


@dataclass(frozen=True)
class OverallProgress:
    answered: int
    total: int
    percent: int

    @property
    def remaining(self) -> int:
        return max(self.total - self.answered, 0)


@dataclass(frozen=True)
class SectionProgress:
    part_id: str
    section_id: str
    section_title: str
    answered: int
    total: int
    start_position: Position

    @property
    def is_complete(self) -> bool:
        return self.answered == self.total


@dataclass(frozen=True)
class PartProgress:
    part_id: str
    part_title: str
    sections: List[SectionProgress]
    answered: int
    total: int

    @property
    def is_complete(self) -> bool:
        return self.answered == self.total


def percent(answered: int, total: int) -> int:
    """Процент с округлением вверх от половины, в пределах 0..100"""
    if total == 0:
        return 0
    raw = math.floor(100 * answered / total + 0.5)
    return max(0, min(100, raw))


def overall_progress(sequence: EffectiveSequence, session: ProgressSession) -> OverallProgress:
    answered = len(session.answers)
    total = sequence.total_question_count()
    return OverallProgress(answered=answered, total=total, percent=percent(answered, total))


def per_section_progress(sequence: EffectiveSequence, session: ProgressSession) -> List[SectionProgress]:
    """Прогресс по каждому разделу в порядке анкеты

    Ответ относится к разделу по явно сохранённым part_id/section_id.
    """
    counts = {}
    for answer in session.answers.values():
        key = (answer.part_id, answer.section_id)
        counts[key] = counts.get(key, 0) + 1

    return [
        SectionProgress(
            part_id=summary.part_id,
            section_id=summary.section_id,
            section_title=summary.section_title,
            answered=counts.get((summary.part_id, summary.section_id), 0),
            total=summary.question_count,
            start_position=summary.start_position,
        )
        for summary in sequence.section_summaries()
    ]


def per_part_progress(sequence: EffectiveSequence, session: ProgressSession) -> List[PartProgress]:
    sections = per_section_progress(sequence, session)
    parts = []
    for part, _ in sequence.parts():
        part_sections = [s for s in sections if s.part_id == part.id]
        parts.append(PartProgress(
            part_id=part.id,
            part_title=part.title[sequence.language],
            sections=part_sections,
            answered=sum(s.answered for s in part_sections),
            total=sum(s.total for s in part_sections),
        ))
    return parts


def first_incomplete_position(sequence: EffectiveSequence, session: ProgressSession) -> Position:
    """Начало первого не до конца отвеченного раздела

    Если отвечено всё, возвращается последний вопрос анкеты.
    """
    for section in per_section_progress(sequence, session):
        if section.answered < section.total:
            return section.start_position
    return sequence.last_position()
