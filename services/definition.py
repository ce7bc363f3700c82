"""Описание анкеты: части, разделы, вопросы

Описание загружается один раз при старте и дальше не меняется. Любая ошибка
в содержимом (повторяющиеся id, пустые варианты ответа и т.п.) означает
ConfigurationError, бот с такой анкетой не запускается.
"""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class Gender(str, Enum):
    ANY = "any"
    MALE = "male"
    FEMALE = "female"


class QuestionType(str, Enum):
    FREE_TEXT = "free_text"
    SINGLE_CHOICE = "single_choice"


# Названия типов из старой выгрузки анкеты
_TYPE_ALIASES = {
    "fillup": QuestionType.FREE_TEXT,
    "text": QuestionType.FREE_TEXT,
    "mcq": QuestionType.SINGLE_CHOICE,
}


@dataclass(frozen=True)
class Question:
    id: str
    number: str
    text: Dict[str, str]
    type: QuestionType = QuestionType.FREE_TEXT
    options: Tuple[Dict[str, str], ...] = ()
    allow_multiple: bool = False
    gender: Gender = Gender.ANY
    follow_up: Optional[Dict[str, str]] = None
    bounds: Optional[Tuple[float, float]] = None

    def applies_to(self, gender: Gender) -> bool:
        """Показывается ли вопрос участнику этого пола"""
        return self.gender == Gender.ANY or self.gender == gender

    def text_for(self, lang: str) -> str:
        return self.text[lang]

    def options_for(self, lang: str) -> List[str]:
        return [option[lang] for option in self.options]

    def follow_up_for(self, lang: str) -> Optional[str]:
        if self.follow_up is None:
            return None
        return self.follow_up[lang]


@dataclass(frozen=True)
class Section:
    id: str
    title: Dict[str, str]
    questions: Tuple[Question, ...]


@dataclass(frozen=True)
class Part:
    id: str
    title: Dict[str, str]
    sections: Tuple[Section, ...]


@dataclass(frozen=True, eq=False)
class QuestionnaireDefinition:
    """Вся анкета целиком

    eq=False: определение сравнивается и хешируется по identity, что
    позволяет кешировать построенные по нему последовательности.
    """
    version: int
    languages: Tuple[str, ...]
    parts: Tuple[Part, ...]
    _questions: Dict[str, Question] = field(default_factory=dict, repr=False)

    def question_by_id(self, question_id: str) -> Optional[Question]:
        return self._questions.get(question_id)

    def iter_questions(self):
        for part in self.parts:
            for section in part.sections:
                for question in section.questions:
                    yield part, section, question


def _localized(raw, languages: Tuple[str, ...], where: str) -> Dict[str, str]:
    """Проверить, что двуязычное поле содержит все языки анкеты"""
    if isinstance(raw, str):
        # Одна строка на все языки (цифры, единицы измерения)
        return {lang: raw for lang in languages}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{where}: ожидался словарь переводов, получено {type(raw).__name__}")
    missing = [lang for lang in languages if not raw.get(lang)]
    if missing:
        raise ConfigurationError(f"{where}: нет перевода для {', '.join(missing)}")
    return {lang: str(raw[lang]) for lang in languages}


def _parse_question(raw: dict, languages: Tuple[str, ...], where: str) -> Question:
    question_id = raw.get("id")
    if not question_id:
        raise ConfigurationError(f"{where}: у вопроса нет id")
    where = f"{where}/{question_id}"

    raw_type = raw.get("type", QuestionType.FREE_TEXT.value)
    try:
        q_type = _TYPE_ALIASES.get(raw_type) or QuestionType(raw_type)
    except ValueError:
        raise ConfigurationError(f"{where}: неизвестный тип вопроса {raw_type!r}") from None

    try:
        gender = Gender(raw.get("gender", Gender.ANY.value))
    except ValueError:
        raise ConfigurationError(f"{where}: неизвестный пол {raw.get('gender')!r}") from None

    options = tuple(
        _localized(option, languages, f"{where}/options[{i}]")
        for i, option in enumerate(raw.get("options") or [])
    )
    if q_type == QuestionType.SINGLE_CHOICE and not options:
        raise ConfigurationError(f"{where}: вопрос с выбором без вариантов ответа")
    if q_type == QuestionType.FREE_TEXT and options:
        raise ConfigurationError(f"{where}: у открытого вопроса не может быть вариантов")

    allow_multiple = bool(raw.get("allow_multiple", False))
    if allow_multiple and q_type != QuestionType.SINGLE_CHOICE:
        raise ConfigurationError(f"{where}: allow_multiple допустим только для вопроса с выбором")

    bounds = None
    if raw.get("bounds") is not None:
        if q_type != QuestionType.FREE_TEXT:
            raise ConfigurationError(f"{where}: bounds допустимы только для открытого вопроса")
        try:
            low, high = float(raw["bounds"]["min"]), float(raw["bounds"]["max"])
        except (KeyError, TypeError, ValueError):
            raise ConfigurationError(f"{where}: bounds должны содержать числа min и max") from None
        if low > high:
            raise ConfigurationError(f"{where}: min больше max")
        bounds = (low, high)

    follow_up = None
    if raw.get("follow_up"):
        follow_up = _localized(raw["follow_up"], languages, f"{where}/follow_up")

    return Question(
        id=str(question_id),
        number=str(raw.get("number", "")),
        text=_localized(raw.get("text"), languages, f"{where}/text"),
        type=q_type,
        options=options,
        allow_multiple=allow_multiple,
        gender=gender,
        follow_up=follow_up,
        bounds=bounds,
    )


def parse_definition(data: dict) -> QuestionnaireDefinition:
    """Построить и проверить описание анкеты из словаря"""
    languages = tuple(data.get("languages") or ())
    if not languages:
        raise ConfigurationError("В анкете не указаны языки")

    raw_parts = data.get("parts") or []
    if not raw_parts:
        raise ConfigurationError("В анкете нет ни одной части")

    parts = []
    part_ids = set()
    questions: Dict[str, Question] = {}

    for raw_part in raw_parts:
        part_id = raw_part.get("id")
        if not part_id:
            raise ConfigurationError("У части анкеты нет id")
        if part_id in part_ids:
            raise ConfigurationError(f"Повторяющийся id части: {part_id}")
        part_ids.add(part_id)

        sections = []
        section_ids = set()
        for raw_section in raw_part.get("sections") or []:
            section_id = raw_section.get("id")
            if not section_id:
                raise ConfigurationError(f"{part_id}: у раздела нет id")
            if section_id in section_ids:
                raise ConfigurationError(f"{part_id}: повторяющийся id раздела {section_id}")
            section_ids.add(section_id)

            where = f"{part_id}/{section_id}"
            section_questions = []
            for raw_question in raw_section.get("questions") or []:
                question = _parse_question(raw_question, languages, where)
                # Ответы хранятся по id вопроса, поэтому id уникален во всей анкете
                if question.id in questions:
                    raise ConfigurationError(f"Повторяющийся id вопроса: {question.id}")
                questions[question.id] = question
                section_questions.append(question)

            sections.append(Section(
                id=section_id,
                title=_localized(raw_section.get("title", section_id), languages, f"{where}/title"),
                questions=tuple(section_questions),
            ))

        parts.append(Part(
            id=part_id,
            title=_localized(raw_part.get("title", part_id), languages, f"{part_id}/title"),
            sections=tuple(sections),
        ))

    return QuestionnaireDefinition(
        version=int(data.get("version", 1)),
        languages=languages,
        parts=tuple(parts),
        _questions=questions,
    )


def load_definition(data: dict = None, path: str = None) -> QuestionnaireDefinition:
    """Загрузить анкету: из словаря, из JSON-файла или встроенную"""
    if data is None and path:
        logger.info(f"Загрузка анкеты из {path}")
        with open(Path(path), encoding="utf-8") as f:
            data = json.load(f)
    elif data is None:
        from utils.questions import QUESTIONNAIRE
        data = QUESTIONNAIRE

    definition = parse_definition(data)
    logger.info(
        f"Анкета v{definition.version}: {len(definition.parts)} частей, "
        f"{len(definition._questions)} вопросов"
    )
    return definition
