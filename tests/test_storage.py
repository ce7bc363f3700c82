"""Тесты хранилища прогресса"""
from datetime import datetime

import pytest
from sqlalchemy import select, func

from models import Answer
from services.definition import Gender
from services.errors import PersistenceError, StaleSessionError
from services.navigator import Position
from services.storage import RecordedAnswer


def _answer(question_id="q_age", value="30", conditional_value=None):
    return RecordedAnswer(
        question_id=question_id,
        part_id="part_1",
        section_id="section_a",
        question_number="1",
        question_text="Age?",
        value=value,
        answered_at=datetime(2024, 5, 1, 10, 0),
        conditional_value=conditional_value,
    )


@pytest.mark.asyncio
async def test_get_session_missing(store):
    """Тест: нет сессии, возвращается None"""
    assert await store.get_session("couple_1", Gender.MALE) is None


@pytest.mark.asyncio
async def test_create_session(store):
    """Тест: новая сессия начинается с первой позиции без ответов"""
    await store.create_session("couple_1", Gender.FEMALE, "ta")

    session = await store.get_session("couple_1", Gender.FEMALE)

    assert session.language == "ta"
    assert session.gender == Gender.FEMALE
    assert session.current_position == Position(0, 0, 0)
    assert session.answers == {}
    assert session.is_complete is False
    assert session.started_at is not None
    # У партнёра своя сессия
    assert await store.get_session("couple_1", Gender.MALE) is None


@pytest.mark.asyncio
async def test_save_answer_is_upsert(store, test_session):
    """Тест: повторное сохранение ответа заменяет его, а не дублирует"""
    await store.create_session("couple_1", Gender.MALE, "en")

    await store.save_answer("couple_1", Gender.MALE, _answer(value="30"))
    await store.save_answer("couple_1", Gender.MALE, _answer(value="31"))

    session = await store.get_session("couple_1", Gender.MALE)
    assert len(session.answers) == 1
    assert session.answers["q_age"].value == "31"

    count = await test_session.scalar(select(func.count(Answer.id)))
    assert count == 1


@pytest.mark.asyncio
async def test_multi_select_round_trip(store):
    """Тест: мультивыбор хранится и читается как список"""
    await store.create_session("couple_1", Gender.MALE, "ta")
    await store.save_answer(
        "couple_1", Gender.MALE,
        _answer("q_exercise", ["நடைபயிற்சி", "யோகா"])
    )

    session = await store.get_session("couple_1", Gender.MALE)

    assert session.answers["q_exercise"].value == ["நடைபயிற்சி", "யோகா"]


@pytest.mark.asyncio
async def test_conditional_value_saved(store):
    await store.create_session("couple_1", Gender.MALE, "en")
    await store.save_answer("couple_1", Gender.MALE, _answer("q_smoke", "Yes", "10"))

    session = await store.get_session("couple_1", Gender.MALE)

    assert session.answers["q_smoke"].conditional_value == "10"
    assert session.answers["q_smoke"].answered_at == datetime(2024, 5, 1, 10, 0)


@pytest.mark.asyncio
async def test_update_position_and_complete(store):
    await store.create_session("couple_1", Gender.MALE, "en")

    await store.update_position("couple_1", Gender.MALE, Position(1, 0, 1))
    await store.mark_complete("couple_1", Gender.MALE)

    session = await store.get_session("couple_1", Gender.MALE)
    assert session.current_position == Position(1, 0, 1)
    assert session.is_complete is True
    assert session.completed_at is not None


@pytest.mark.asyncio
async def test_reset_session(store, test_session):
    """Тест: сброс удаляет сессию вместе с ответами"""
    await store.create_session("couple_1", Gender.MALE, "en")
    await store.save_answer("couple_1", Gender.MALE, _answer())

    await store.reset_session("couple_1", Gender.MALE)

    assert await store.get_session("couple_1", Gender.MALE) is None
    assert await test_session.scalar(select(func.count(Answer.id))) == 0

    # Повторный сброс и новая сессия после сброса
    await store.reset_session("couple_1", Gender.MALE)
    await store.create_session("couple_1", Gender.MALE, "ta")
    assert (await store.get_session("couple_1", Gender.MALE)).language == "ta"


@pytest.mark.asyncio
async def test_operations_without_session_fail(store):
    """Тест: запись без сессии даёт PersistenceError"""
    with pytest.raises(PersistenceError):
        await store.save_answer("couple_1", Gender.MALE, _answer())
    with pytest.raises(PersistenceError):
        await store.update_position("couple_1", Gender.MALE, Position(0, 0, 1))
    with pytest.raises(PersistenceError):
        await store.mark_complete("couple_1", Gender.MALE)


@pytest.mark.asyncio
async def test_duplicate_session_wrapped(store):
    """Тест: ошибка базы превращается в PersistenceError"""
    await store.create_session("couple_1", Gender.MALE, "en")
    with pytest.raises(PersistenceError):
        await store.create_session("couple_1", Gender.MALE, "en")


@pytest.mark.asyncio
async def test_create_session_returns_token(store):
    """Тест: у каждой новой сессии свой токен"""
    token = await store.create_session("couple_1", Gender.MALE, "en")

    session = await store.get_session("couple_1", Gender.MALE)
    assert token
    assert session.session_token == token

    await store.reset_session("couple_1", Gender.MALE)
    assert await store.create_session("couple_1", Gender.MALE, "en") != token


@pytest.mark.asyncio
async def test_write_with_old_token_rejected(store):
    """Тест: после сброса записи со старым токеном отклоняются"""
    old = await store.create_session("couple_1", Gender.MALE, "en")
    await store.reset_session("couple_1", Gender.MALE)

    # Сессии нет совсем
    with pytest.raises(StaleSessionError):
        await store.save_answer("couple_1", Gender.MALE, _answer(), old)

    new = await store.create_session("couple_1", Gender.MALE, "ta")
    with pytest.raises(StaleSessionError):
        await store.save_answer("couple_1", Gender.MALE, _answer(), old)
    with pytest.raises(StaleSessionError):
        await store.update_position("couple_1", Gender.MALE, Position(1, 0, 0), old)
    with pytest.raises(StaleSessionError):
        await store.mark_complete("couple_1", Gender.MALE, old)

    await store.save_answer("couple_1", Gender.MALE, _answer(), new)
    await store.update_position("couple_1", Gender.MALE, Position(0, 0, 1), new)

    session = await store.get_session("couple_1", Gender.MALE)
    assert list(session.answers) == ["q_age"]
    assert session.current_position == Position(0, 0, 1)
    assert session.is_complete is False
