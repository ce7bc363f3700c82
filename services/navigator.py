"""Навигация по вопросам: следующий и предыдущий вопрос

Функции чистые: зависят только от формы последовательности и позиции.
Пустых разделов и частей в последовательности нет (их убирает индексатор),
поэтому при переходе через границу ничего пропускать не нужно.
"""
from enum import Enum
from typing import NamedTuple, Tuple, Union


class Position(NamedTuple):
    """Курсор: индексы в отфильтрованных по полу списках"""
    part_index: int
    section_index: int
    question_index: int

    def as_dict(self) -> dict:
        return self._asdict()

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        return cls(int(data["part_index"]), int(data["section_index"]), int(data["question_index"]))


class Terminal(Enum):
    """Маркеры «до первого» и «после последнего» вопроса"""
    START = "start"
    END = "end"


Step = Union[Position, Terminal]

# shape[part_index][section_index] = число вопросов в разделе
Shape = Tuple[Tuple[int, ...], ...]


def is_valid(shape: Shape, pos: Position) -> bool:
    """Указывает ли позиция на существующий вопрос"""
    part, section, question = pos
    if not 0 <= part < len(shape):
        return False
    if not 0 <= section < len(shape[part]):
        return False
    return 0 <= question < shape[part][section]


def next_position(sequence, pos: Position) -> Step:
    """Следующая позиция или Terminal.END после последнего вопроса"""
    shape = sequence.shape
    if not is_valid(shape, pos):
        raise ValueError(f"Позиция вне анкеты: {pos}")
    part, section, question = pos

    if question < shape[part][section] - 1:
        return Position(part, section, question + 1)
    if section < len(shape[part]) - 1:
        return Position(part, section + 1, 0)
    if part < len(shape) - 1:
        return Position(part + 1, 0, 0)
    return Terminal.END


def previous_position(sequence, pos: Position) -> Step:
    """Предыдущая позиция или Terminal.START на самом первом вопросе"""
    shape = sequence.shape
    if not is_valid(shape, pos):
        raise ValueError(f"Позиция вне анкеты: {pos}")
    part, section, question = pos

    if question > 0:
        return Position(part, section, question - 1)
    if section > 0:
        # Последний вопрос предыдущего раздела
        return Position(part, section - 1, shape[part][section - 1] - 1)
    if part > 0:
        prev_part = shape[part - 1]
        return Position(part - 1, len(prev_part) - 1, prev_part[-1] - 1)
    return Terminal.START
