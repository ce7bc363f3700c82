"""Идентификация участника: Telegram user_id -> (id пары, пол)"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Participant
from .definition import Gender


@dataclass(frozen=True)
class Identity:
    participant_id: str
    gender: Gender


async def get_identity(session: AsyncSession, user_id: int) -> Optional[Identity]:
    """Получить id пары и пол по Telegram-аккаунту"""
    result = await session.execute(
        select(Participant).where(Participant.user_id == user_id)
    )
    participant = result.scalar_one_or_none()
    if not participant:
        return None
    return Identity(participant_id=participant.couple_id, gender=Gender(participant.gender))


async def enroll_participant(
    session: AsyncSession,
    user_id: int,
    couple_id: str,
    gender: Gender,
    username: str = None
) -> Participant:
    """Зарегистрировать участника или обновить его данные"""
    gender = Gender(gender)
    if gender == Gender.ANY:
        raise ValueError("Пол участника должен быть male или female")

    result = await session.execute(
        select(Participant).where(Participant.user_id == user_id)
    )
    participant = result.scalar_one_or_none()

    if participant:
        participant.couple_id = couple_id
        participant.gender = gender.value
        if username:
            participant.username = username
    else:
        participant = Participant(
            user_id=user_id,
            username=username,
            couple_id=couple_id,
            gender=gender.value
        )
        session.add(participant)

    await session.commit()
    await session.refresh(participant)
    return participant
