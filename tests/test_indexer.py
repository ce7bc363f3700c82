"""Тесты построения последовательности вопросов"""
import pytest

from services.definition import Gender, load_definition
from services.errors import ConfigurationError
from services.indexer import EffectiveSequence, build_sequence, validate_definition_sequences
from services.navigator import Position


def test_male_sequence_skips_female_questions(definition):
    """Тест: мужчине вопрос только для женщин не показывается"""
    sequence = build_sequence(definition, "en", Gender.MALE)

    assert sequence.total_question_count() == 4
    assert [entry.question_id for entry in sequence] == ["q_age", "q_smoke", "q_exercise", "q_notes"]
    assert sequence.shape == ((2,), (2,))


def test_female_sequence(definition):
    sequence = build_sequence(definition, "en", Gender.FEMALE)

    assert len(sequence) == 5
    assert sequence.position_of("q_cycle") == Position(0, 0, 1)
    assert sequence.position_of("q_smoke") == Position(0, 0, 2)


def test_sequence_is_deterministic(definition):
    """Тест: одинаковые входные данные дают одинаковые позиции"""
    first = EffectiveSequence(definition, "ta", Gender.MALE)
    second = EffectiveSequence(definition, "ta", Gender.MALE)

    assert [e.position for e in first] == [e.position for e in second]
    assert [e.question_id for e in first] == [e.question_id for e in second]
    assert build_sequence(definition, "ta", Gender.MALE) is build_sequence(definition, "ta", Gender.MALE)


def test_question_at_resolves_localized_entry(definition):
    """Тест: позиция разрешается в вопрос на языке сессии"""
    sequence = build_sequence(definition, "ta", Gender.MALE)
    entry = sequence.question_at(Position(0, 0, 1))

    assert entry.question_id == "q_smoke"
    assert entry.text == "புகைப்பிடிப்பீர்களா?"
    assert entry.options == ["ஆம்", "இல்லை"]
    assert entry.section_title == "பின்னணி"
    assert entry.current_in_section == 2
    assert entry.total_in_section == 2


def test_question_at_unknown_position(definition):
    sequence = build_sequence(definition, "en", Gender.MALE)

    assert sequence.question_at(Position(0, 0, 2)) is None
    assert sequence.question_at(Position(5, 0, 0)) is None
    assert sequence.question_at((0, 0, 0)) is None


def test_first_and_last_flags(definition):
    sequence = build_sequence(definition, "en", Gender.FEMALE)
    entries = list(sequence)

    assert entries[0].is_first and not entries[0].is_last
    assert entries[-1].is_last and not entries[-1].is_first
    assert sequence.first_position() == Position(0, 0, 0)
    assert sequence.last_position() == Position(1, 0, 1)


def test_empty_section_dropped(questionnaire_data):
    """Тест: раздел без вопросов для данного пола выбрасывается целиком"""
    questionnaire_data["parts"][1]["sections"].insert(0, {
        "id": "section_male_only",
        "title": {"en": "Occupation", "ta": "தொழில்"},
        "questions": [
            {"id": "q_heat", "number": "6", "text": {"en": "Heat?", "ta": "வெப்பம்?"}, "gender": "male"},
        ],
    })
    definition = load_definition(data=questionnaire_data)

    female = build_sequence(definition, "en", Gender.FEMALE)
    male = build_sequence(definition, "en", Gender.MALE)

    assert female.shape == ((3,), (2,))
    assert female.position_of("q_exercise") == Position(1, 0, 0)
    assert male.shape == ((2,), (1, 2))
    assert [s.section_id for s in female.section_summaries()] == ["section_a", "section_b"]


def test_empty_part_dropped(questionnaire_data):
    questionnaire_data["parts"].append({
        "id": "part_3",
        "title": {"en": "Part 3", "ta": "பகுதி 3"},
        "sections": [{
            "id": "section_c",
            "questions": [
                {"id": "q_female", "number": "7", "text": {"en": "Q?", "ta": "கே?"}, "gender": "female"},
            ],
        }],
    })
    definition = load_definition(data=questionnaire_data)

    assert len(build_sequence(definition, "en", Gender.MALE).shape) == 2
    assert len(build_sequence(definition, "en", Gender.FEMALE).shape) == 3


def test_section_summaries(definition):
    summaries = build_sequence(definition, "en", Gender.MALE).section_summaries()

    assert [(s.section_id, s.question_count, s.start_position) for s in summaries] == [
        ("section_a", 2, Position(0, 0, 0)),
        ("section_b", 2, Position(1, 0, 0)),
    ]


def test_unsupported_language(definition):
    with pytest.raises(ConfigurationError):
        EffectiveSequence(definition, "fr", Gender.MALE)


def test_sequence_requires_concrete_gender(definition):
    with pytest.raises(ConfigurationError):
        EffectiveSequence(definition, "en", Gender.ANY)


def test_validate_empty_sequence(questionnaire_data):
    """Тест: анкета, пустая для одного из полов, не проходит проверку"""
    for part in questionnaire_data["parts"]:
        for section in part["sections"]:
            for question in section["questions"]:
                question["gender"] = "female"
    definition = load_definition(data=questionnaire_data)

    with pytest.raises(ConfigurationError):
        validate_definition_sequences(definition)


def test_builtin_questionnaire_sequences():
    """Тест: встроенная анкета для обоих полов и языков"""
    definition = load_definition()
    validate_definition_sequences(definition)

    female = build_sequence(definition, "en", Gender.FEMALE)
    male = build_sequence(definition, "ta", Gender.MALE)

    assert female.total_question_count() == 25
    assert male.total_question_count() == 26
    # Раздел о профессиональных вредностях есть только у мужчин
    assert "section_e_occupational_exposure" not in [s.section_id for s in female.section_summaries()]
    assert "section_e_occupational_exposure" in [s.section_id for s in male.section_summaries()]
