"""Тесты отчётов и регистрации участников"""
import pytest

from services.controller import ProgressController
from services.definition import Gender
from services.identity import enroll_participant, get_identity
from services.reports import ProgressReport


@pytest.mark.asyncio
async def test_report_without_sessions(store, definition):
    """Тест: пара без анкет"""
    report = ProgressReport(store, definition)
    text = await report.generate_progress_text("couple_9")

    assert "couple_9" in text
    assert "No questionnaire started yet." in text
    assert await report.export_to_csv_data("couple_9") == []


@pytest.mark.asyncio
async def test_progress_text(store, definition):
    """Тест: отчёт показывает прогресс каждого партнёра"""
    female = ProgressController(store, definition, "couple_1", Gender.FEMALE)
    await female.open()
    await female.select_language("en")
    await female.record_answer("30")

    text = await ProgressReport(store, definition).generate_progress_text("couple_1")

    assert "Female partner (en)" in text
    assert "1/5 (20%)" in text
    assert "Background: 1/3" in text
    assert "Male partner\n  Not started" in text


@pytest.mark.asyncio
async def test_export_rows_in_questionnaire_order(store, definition):
    """Тест: экспорт идёт в порядке анкеты, мультивыбор склеивается"""
    male = ProgressController(store, definition, "couple_1", Gender.MALE)
    await male.open()
    await male.select_language("en")
    await male.jump_to_section(male.sequence.section_summaries()[1].start_position)
    await male.record_answer(["Walking", "Running"])
    await male.retreat()
    await male.record_answer("Yes", "2")

    rows = await ProgressReport(store, definition).export_to_csv_data("couple_1")

    assert [row["question_id"] for row in rows] == ["q_smoke", "q_exercise"]
    assert rows[0]["conditional_answer"] == "2"
    assert rows[1]["answer"] == "Walking; Running"
    assert rows[1]["gender"] == "male"
    assert rows[1]["section_id"] == "section_b"
    assert rows[0]["answered_at"]


@pytest.mark.asyncio
async def test_enroll_and_identity(test_session):
    """Тест: регистрация участника и повторная регистрация"""
    assert await get_identity(test_session, 111) is None

    await enroll_participant(test_session, 111, "couple_1", Gender.FEMALE, username="anna")
    identity = await get_identity(test_session, 111)
    assert identity.participant_id == "couple_1"
    assert identity.gender == Gender.FEMALE

    participant = await enroll_participant(test_session, 111, "couple_2", "male")
    assert participant.username == "anna"
    identity = await get_identity(test_session, 111)
    assert (identity.participant_id, identity.gender) == ("couple_2", Gender.MALE)


@pytest.mark.asyncio
async def test_enroll_requires_concrete_gender(test_session):
    with pytest.raises(ValueError):
        await enroll_participant(test_session, 111, "couple_1", Gender.ANY)
