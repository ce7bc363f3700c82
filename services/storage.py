"""Хранилище прогресса анкеты

ProgressStore: контракт, который движок ждёт от удалённого хранилища.
SqlProgressStore: его реализация на SQLAlchemy (async). Все ошибки базы
превращаются в PersistenceError: контроллер показывает их пользователю,
а операцию можно безопасно повторить (ответы и позиция пишутся через upsert).
"""
import functools
import json
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Union

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from models import Answer, QuestionnaireProgress
from .definition import Gender
from .errors import PersistenceError, StaleSessionError
from .navigator import Position

logger = logging.getLogger(__name__)

AnswerValue = Union[str, List[str]]


@dataclass(frozen=True)
class RecordedAnswer:
    """Сохранённый ответ; текст вопроса является снимком на момент ответа"""
    question_id: str
    part_id: str
    section_id: str
    question_number: str
    question_text: str
    value: AnswerValue
    answered_at: datetime
    conditional_value: Optional[str] = None


@dataclass
class ProgressSession:
    participant_id: str
    gender: Gender
    language: str
    current_position: Position
    answers: Dict[str, RecordedAnswer] = field(default_factory=dict)
    started_at: Optional[datetime] = None
    last_updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    is_complete: bool = False
    # Токен конкретной сессии; после сброса языка создаётся новый
    session_token: Optional[str] = None

    def copy(self) -> "ProgressSession":
        return replace(self, answers=dict(self.answers))


class ProgressStore(Protocol):
    """Операции удалённого хранилища прогресса

    create_session возвращает токен новой сессии. Записи, получившие token,
    выполняются только для сессии с этим токеном, иначе StaleSessionError.
    """

    async def get_session(self, participant_id: str, gender: Gender) -> Optional[ProgressSession]: ...

    async def create_session(self, participant_id: str, gender: Gender, language: str) -> str: ...

    async def save_answer(
        self, participant_id: str, gender: Gender, answer: RecordedAnswer, token: Optional[str] = None
    ) -> None: ...

    async def update_position(
        self, participant_id: str, gender: Gender, position: Position, token: Optional[str] = None
    ) -> None: ...

    async def mark_complete(self, participant_id: str, gender: Gender, token: Optional[str] = None) -> None: ...

    async def reset_session(self, participant_id: str, gender: Gender) -> None: ...


def _encode_value(value: AnswerValue):
    if isinstance(value, list):
        return json.dumps(value, ensure_ascii=False), True
    return value, False


def _decode_value(row: Answer) -> AnswerValue:
    if row.is_multiple:
        return json.loads(row.value)
    return row.value


def _to_recorded(row: Answer) -> RecordedAnswer:
    return RecordedAnswer(
        question_id=row.question_id,
        part_id=row.part_id,
        section_id=row.section_id,
        question_number=row.question_number,
        question_text=row.question_text,
        value=_decode_value(row),
        answered_at=row.answered_at,
        conditional_value=row.conditional_value,
    )


def _to_session(row: QuestionnaireProgress) -> ProgressSession:
    return ProgressSession(
        participant_id=row.participant_id,
        gender=Gender(row.gender),
        language=row.language,
        current_position=Position(row.part_index, row.section_index, row.question_index),
        answers={a.question_id: _to_recorded(a) for a in row.answers},
        started_at=row.started_at,
        last_updated_at=row.last_updated_at,
        completed_at=row.completed_at,
        is_complete=row.is_complete,
        session_token=row.session_token,
    )


def persistence_operation(func):
    """Декоратор: ошибки SQLAlchemy превращаются в PersistenceError"""
    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception(f"Ошибка хранилища в {func.__name__}")
            raise PersistenceError(f"{func.__name__} не выполнено: {e}") from e
    return wrapper


class SqlProgressStore:
    """Хранилище прогресса в реляционной БД"""

    def __init__(self, session_maker: async_sessionmaker):
        self._session_maker = session_maker

    async def _get_row(
        self,
        session: AsyncSession,
        participant_id: str,
        gender: Gender,
        with_answers: bool = False
    ) -> Optional[QuestionnaireProgress]:
        query = select(QuestionnaireProgress).where(
            and_(
                QuestionnaireProgress.participant_id == participant_id,
                QuestionnaireProgress.gender == Gender(gender).value
            )
        )
        if with_answers:
            query = query.options(selectinload(QuestionnaireProgress.answers))
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def _require_row(
        self,
        session: AsyncSession,
        participant_id: str,
        gender: Gender,
        token: Optional[str] = None
    ) -> QuestionnaireProgress:
        row = await self._get_row(session, participant_id, gender)
        where = f"{participant_id}/{Gender(gender).value}"
        if token is not None and (row is None or row.session_token != token):
            logger.warning(f"Запись в устаревшую сессию {where} отклонена")
            raise StaleSessionError(f"Сессия {where} была сброшена")
        if row is None:
            raise PersistenceError(f"Нет сохранённой анкеты для {where}")
        return row

    @persistence_operation
    async def get_session(self, participant_id: str, gender: Gender) -> Optional[ProgressSession]:
        """Получить сессию с ответами или None"""
        async with self._session_maker() as session:
            row = await self._get_row(session, participant_id, gender, with_answers=True)
            return _to_session(row) if row else None

    @persistence_operation
    async def create_session(self, participant_id: str, gender: Gender, language: str) -> str:
        """Создать новую сессию на первом вопросе и вернуть её токен"""
        async with self._session_maker() as session:
            now = datetime.utcnow()
            token = uuid.uuid4().hex
            session.add(QuestionnaireProgress(
                participant_id=participant_id,
                gender=Gender(gender).value,
                language=language,
                session_token=token,
                part_index=0,
                section_index=0,
                question_index=0,
                started_at=now,
                last_updated_at=now,
            ))
            await session.commit()
            return token

    @persistence_operation
    async def save_answer(
        self, participant_id: str, gender: Gender, answer: RecordedAnswer, token: Optional[str] = None
    ) -> None:
        """Сохранить ответ (upsert по question_id)"""
        async with self._session_maker() as session:
            progress = await self._require_row(session, participant_id, gender, token)

            # Проверяем, есть ли уже ответ
            result = await session.execute(
                select(Answer).where(
                    and_(
                        Answer.progress_id == progress.id,
                        Answer.question_id == answer.question_id
                    )
                )
            )
            existing = result.scalar_one_or_none()
            value, is_multiple = _encode_value(answer.value)

            if existing:
                existing.part_id = answer.part_id
                existing.section_id = answer.section_id
                existing.question_number = answer.question_number
                existing.question_text = answer.question_text
                existing.value = value
                existing.is_multiple = is_multiple
                existing.conditional_value = answer.conditional_value
                existing.answered_at = answer.answered_at
            else:
                session.add(Answer(
                    progress_id=progress.id,
                    question_id=answer.question_id,
                    part_id=answer.part_id,
                    section_id=answer.section_id,
                    question_number=answer.question_number,
                    question_text=answer.question_text,
                    value=value,
                    is_multiple=is_multiple,
                    conditional_value=answer.conditional_value,
                    answered_at=answer.answered_at,
                ))

            progress.last_updated_at = datetime.utcnow()
            await session.commit()

    @persistence_operation
    async def update_position(
        self, participant_id: str, gender: Gender, position: Position, token: Optional[str] = None
    ) -> None:
        """Сохранить текущую позицию"""
        async with self._session_maker() as session:
            progress = await self._require_row(session, participant_id, gender, token)
            progress.part_index, progress.section_index, progress.question_index = position
            progress.last_updated_at = datetime.utcnow()
            await session.commit()

    @persistence_operation
    async def mark_complete(self, participant_id: str, gender: Gender, token: Optional[str] = None) -> None:
        """Пометить анкету завершённой"""
        async with self._session_maker() as session:
            progress = await self._require_row(session, participant_id, gender, token)
            now = datetime.utcnow()
            progress.is_complete = True
            progress.completed_at = now
            progress.last_updated_at = now
            await session.commit()

    @persistence_operation
    async def reset_session(self, participant_id: str, gender: Gender) -> None:
        """Удалить сессию вместе с ответами (смена языка)"""
        async with self._session_maker() as session:
            progress = await self._get_row(session, participant_id, gender)
            if progress is None:
                return
            await session.execute(delete(Answer).where(Answer.progress_id == progress.id))
            await session.execute(delete(QuestionnaireProgress).where(QuestionnaireProgress.id == progress.id))
            await session.commit()
