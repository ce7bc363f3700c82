"""Общие фикстуры тестов"""
import asyncio
import copy

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from models.database import Base
from services.controller import ProgressController
from services.definition import Gender, load_definition
from services.errors import PersistenceError
from services.storage import SqlProgressStore


def _t(en: str, ta: str) -> dict:
    return {"en": en, "ta": ta}


# Две части: в первой 3 вопроса (один только для женщин), во второй 2
TEST_QUESTIONNAIRE = {
    "version": 1,
    "languages": ["en", "ta"],
    "parts": [
        {
            "id": "part_1",
            "title": _t("Part 1", "பகுதி 1"),
            "sections": [
                {
                    "id": "section_a",
                    "title": _t("Background", "பின்னணி"),
                    "questions": [
                        {
                            "id": "q_age",
                            "number": "1",
                            "text": _t("Age?", "வயது?"),
                            "type": "free_text",
                            "bounds": {"min": 18, "max": 60},
                        },
                        {
                            "id": "q_cycle",
                            "number": "2",
                            "text": _t("Cycle pattern?", "மாதவிடாய் சுழற்சி?"),
                            "type": "single_choice",
                            "gender": "female",
                            "options": [_t("Regular", "சீரான"), _t("Irregular", "சீரற்ற")],
                        },
                        {
                            "id": "q_smoke",
                            "number": "3",
                            "text": _t("Do you smoke?", "புகைப்பிடிப்பீர்களா?"),
                            "type": "single_choice",
                            "options": [_t("Yes", "ஆம்"), _t("No", "இல்லை")],
                            "follow_up": _t("How many per day?", "ஒரு நாளைக்கு எத்தனை?"),
                        },
                    ],
                }
            ],
        },
        {
            "id": "part_2",
            "title": _t("Part 2", "பகுதி 2"),
            "sections": [
                {
                    "id": "section_b",
                    "title": _t("Lifestyle", "வாழ்க்கை முறை"),
                    "questions": [
                        {
                            "id": "q_exercise",
                            "number": "4",
                            "text": _t("Exercise types?", "உடற்பயிற்சி வகைகள்?"),
                            "type": "single_choice",
                            "allow_multiple": True,
                            "options": [
                                _t("Walking", "நடைபயிற்சி"),
                                _t("Yoga", "யோகா"),
                                _t("Running", "ஓட்டம்"),
                            ],
                        },
                        {
                            "id": "q_notes",
                            "number": "5",
                            "text": _t("Anything else?", "வேறு ஏதாவது?"),
                            "type": "free_text",
                        },
                    ],
                }
            ],
        },
    ],
}


class FlakyStore:
    """Обёртка над хранилищем: выбранные операции падают с PersistenceError

    hold(name) задерживает операцию до release(name), чтобы проверять,
    что происходит, пока запись ещё идёт.
    """

    def __init__(self, inner):
        self.inner = inner
        self.failing = set()
        self.calls = []
        self.held = {}
        self.waiting = asyncio.Event()
        self.finished = asyncio.Event()

    def hold(self, name):
        self.held[name] = asyncio.Event()
        self.waiting.clear()
        self.finished.clear()

    def release(self, name):
        self.held.pop(name).set()

    def __getattr__(self, name):
        method = getattr(self.inner, name)

        async def call(*args):
            self.calls.append(name)
            gate = self.held.get(name)
            if gate is not None:
                self.waiting.set()
                await gate.wait()
            try:
                if name in self.failing:
                    raise PersistenceError(f"{name} недоступно")
                return await method(*args)
            finally:
                if gate is not None:
                    self.finished.set()
        return call


@pytest.fixture
def questionnaire_data():
    return copy.deepcopy(TEST_QUESTIONNAIRE)


@pytest.fixture
def definition(questionnaire_data):
    return load_definition(data=questionnaire_data)


# Фикстура для тестовой БД
@pytest.fixture
async def session_maker():
    """Создать фабрику сессий тестовой БД"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool
    )
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield maker

    await engine.dispose()


@pytest.fixture
async def test_session(session_maker):
    """Создать тестовую сессию БД"""
    async with session_maker() as session:
        yield session


@pytest.fixture
def store(session_maker):
    return SqlProgressStore(session_maker)


@pytest.fixture
def flaky_store(store):
    return FlakyStore(store)


@pytest.fixture
def make_controller(store, definition):
    """Фабрика контроллеров; по умолчанию участник couple_1 мужского пола"""
    def factory(gender=Gender.MALE, participant_id="couple_1", store_=None):
        return ProgressController(store_ or store, definition, participant_id, gender)
    return factory
