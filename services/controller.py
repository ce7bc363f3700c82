"""Контроллер сессии анкеты

Состояния: NO_SESSION -> LANGUAGE_SELECTION -> QUESTION / SECTION_OVERVIEW -> COMPLETE.

Сессию меняет только контроллер. Каждая изменяющая операция
сначала пишет в хранилище и только после успешной записи меняет локальное
состояние. Операции над одной анкетой (participant_id + gender) выполняются
строго по одной, даже из разных контроллеров: замок берётся из общего реестра.
Записи несут токен сессии, поэтому запись в уже сброшенную сессию отклоняется
(StaleSessionError). Вызовы хранилища обёрнуты в asyncio.shield: если
вызывающий уйдёт посреди записи, запись всё равно завершится, а при следующей
загрузке победит удалённое состояние.
"""
import asyncio
import logging
import weakref
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

from .definition import Gender, QuestionnaireDefinition, QuestionType
from .errors import (
    AnswerValidationError,
    ConfigurationError,
    SessionCompleteError,
    SessionStateError,
    StaleSessionError,
)
from .indexer import EffectiveSequence, IndexedQuestion, build_sequence
from .navigator import Position, Step, Terminal, next_position, previous_position
from .progress import (
    OverallProgress,
    PartProgress,
    SectionProgress,
    first_incomplete_position,
    overall_progress,
    per_part_progress,
    per_section_progress,
)
from .storage import AnswerValue, ProgressSession, ProgressStore, RecordedAnswer

logger = logging.getLogger(__name__)


class ScreenState(str, Enum):
    NO_SESSION = "no_session"
    LANGUAGE_SELECTION = "language_selection"
    SECTION_OVERVIEW = "section_overview"
    QUESTION = "question"
    COMPLETE = "complete"


class OpenResult(Enum):
    NEW = "new"
    RESUMABLE = "resumable"
    ALREADY_COMPLETE = "already_complete"


class LanguageChoice(Enum):
    STARTED = "started"
    RESUMED = "resumed"
    CONFIRMATION_REQUIRED = "confirmation_required"


SectionValue = Union[AnswerValue, Tuple[AnswerValue, Optional[str]]]

_IN_PROGRESS = (ScreenState.QUESTION, ScreenState.SECTION_OVERVIEW)

# Замки живут, пока их кто-то держит или ждёт
_locks = weakref.WeakValueDictionary()


def _shared_lock(kind: str, participant_id: str, gender: Gender) -> asyncio.Lock:
    # asyncio.Lock привязывается к циклу событий, поэтому цикл входит в ключ
    key = (kind, asyncio.get_running_loop(), participant_id, Gender(gender).value)
    lock = _locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _locks[key] = lock
    return lock


def session_lock(participant_id: str, gender: Gender) -> asyncio.Lock:
    """Замок операций контроллера над анкетой участника"""
    return _shared_lock("session", participant_id, gender)


def interaction_lock(participant_id: str, gender: Gender) -> asyncio.Lock:
    """Замок целого хода участника в боте: загрузка сессии плюс операция

    Отдельный от session_lock, потому что asyncio.Lock не реентерабелен.
    """
    return _shared_lock("interaction", participant_id, gender)


class ProgressController:
    """Анкета одного участника (participant_id + gender)"""

    def __init__(
        self,
        store: ProgressStore,
        definition: QuestionnaireDefinition,
        participant_id: str,
        gender: Gender,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        gender = Gender(gender)
        if gender == Gender.ANY:
            raise ValueError("Пол участника должен быть male или female")

        self.store = store
        self.definition = definition
        self.participant_id = participant_id
        self.gender = gender
        self._clock = clock

        self.screen = ScreenState.NO_SESSION
        self.session: Optional[ProgressSession] = None
        self.sequence: Optional[EffectiveSequence] = None
        # Сессия, найденная в хранилище при открытии (до выбора языка)
        self.existing: Optional[ProgressSession] = None
        self.pending_language: Optional[str] = None
        # Сохранённая позиция не разрешилась и была сдвинута
        self.resumed_with_drift = False

    def __repr__(self):
        return f"<ProgressController(participant={self.participant_id}, gender={self.gender.value}, screen={self.screen.value})>"

    @property
    def _lock(self) -> asyncio.Lock:
        return session_lock(self.participant_id, self.gender)

    @property
    def _token(self) -> Optional[str]:
        return self.session.session_token if self.session else None

    async def _call(self, operation, *args):
        """Вызов хранилища, который не прерывается отменой вызывающего"""
        try:
            return await asyncio.shield(operation(self.participant_id, self.gender, *args))
        except StaleSessionError:
            logger.warning(f"Сессия {self.participant_id}/{self.gender.value} сброшена в другом месте")
            self.session = None
            self.sequence = None
            self.screen = ScreenState.NO_SESSION
            raise

    def _sequence_for(self, language: str) -> EffectiveSequence:
        sequence = build_sequence(self.definition, language, self.gender)
        if sequence.total_question_count() == 0:
            logger.error(f"Пустая анкета для {language}/{self.gender.value}, сессия не запускается")
            raise ConfigurationError(f"Нет вопросов для {language}/{self.gender.value}")
        return sequence

    def _require_in_progress(self):
        if self.screen == ScreenState.COMPLETE:
            raise SessionCompleteError("Анкета уже завершена")
        if self.screen not in _IN_PROGRESS or self.session is None:
            raise SessionStateError(f"Операция недоступна в состоянии {self.screen.value}")

    # --- Открытие и выбор языка ---

    async def open(self) -> OpenResult:
        """Загрузить сохранённую сессию и перейти к выбору языка"""
        async with self._lock:
            existing = await self._call(self.store.get_session)

            if existing and existing.is_complete:
                self.session = existing
                if existing.language in self.definition.languages:
                    self.sequence = build_sequence(self.definition, existing.language, self.gender)
                self.screen = ScreenState.COMPLETE
                return OpenResult.ALREADY_COMPLETE

            self.existing = existing
            self.session = None
            self.pending_language = None
            self.screen = ScreenState.LANGUAGE_SELECTION
            return OpenResult.RESUMABLE if existing else OpenResult.NEW

    async def select_language(self, language: str, confirmed: bool = False) -> LanguageChoice:
        """Выбор языка: продолжить, начать заново или запросить подтверждение

        Смена языка при незавершённой сессии удаляет все ответы, поэтому без
        confirmed=True она только запоминается как ожидающая подтверждения.
        """
        async with self._lock:
            if self.screen == ScreenState.COMPLETE:
                raise SessionCompleteError("Анкета уже завершена")
            if self.screen != ScreenState.LANGUAGE_SELECTION:
                raise SessionStateError("Сначала нужно открыть анкету")
            if language not in self.definition.languages:
                raise ValueError(f"Язык {language!r} не поддерживается")

            sequence = self._sequence_for(language)

            if self.existing is None:
                await self._start_new(language, sequence)
                return LanguageChoice.STARTED

            if self.existing.language == language:
                await self._resume(sequence)
                return LanguageChoice.RESUMED

            if not confirmed:
                self.pending_language = language
                return LanguageChoice.CONFIRMATION_REQUIRED

            logger.warning(
                f"Смена языка {self.existing.language} -> {language} для "
                f"{self.participant_id}/{self.gender.value}: ответы удаляются"
            )
            await self._call(self.store.reset_session)
            self.existing = None
            await self._start_new(language, sequence)
            return LanguageChoice.STARTED

    async def resume(self) -> LanguageChoice:
        """Продолжить на сохранённом языке"""
        if self.existing is None:
            raise SessionStateError("Нет сохранённой анкеты")
        return await self.select_language(self.existing.language)

    async def confirm_language_switch(self) -> LanguageChoice:
        if self.pending_language is None:
            raise SessionStateError("Нет ожидающей смены языка")
        return await self.select_language(self.pending_language, confirmed=True)

    def cancel_language_switch(self):
        """Отказ от смены языка: сессия не трогается"""
        self.pending_language = None

    async def _start_new(self, language: str, sequence: EffectiveSequence):
        token = await self._call(self.store.create_session, language)
        now = self._clock()
        self.session = ProgressSession(
            participant_id=self.participant_id,
            gender=self.gender,
            language=language,
            current_position=sequence.first_position(),
            started_at=now,
            last_updated_at=now,
            session_token=token,
        )
        self.sequence = sequence
        self.pending_language = None
        self.resumed_with_drift = False
        self.screen = ScreenState.QUESTION
        logger.info(f"Новая анкета {self.participant_id}/{self.gender.value} ({language})")

    async def _resume(self, sequence: EffectiveSequence):
        session = self.existing.copy()
        drift = sequence.question_at(session.current_position) is None
        if drift:
            clamped = first_incomplete_position(sequence, session)
            logger.warning(
                f"Позиция {tuple(session.current_position)} не найдена в анкете "
                f"{self.participant_id}/{self.gender.value}, продолжаем с {tuple(clamped)}"
            )
            await self._call(self.store.update_position, clamped, session.session_token)
            session.current_position = clamped
            session.last_updated_at = self._clock()

        self.session = session
        self.sequence = sequence
        self.pending_language = None
        self.resumed_with_drift = drift
        self.screen = ScreenState.QUESTION
        logger.info(f"Продолжение анкеты {self.participant_id}/{self.gender.value}")

    # --- Текущий вопрос ---

    def current_question(self) -> Optional[IndexedQuestion]:
        if self.session is None or self.sequence is None:
            return None
        return self.sequence.question_at(self.session.current_position)

    def stored_answer(self, question_id: str = None) -> Optional[RecordedAnswer]:
        """Сохранённый ответ (по умолчанию на текущий вопрос) для предзаполнения"""
        if self.session is None:
            return None
        if question_id is None:
            entry = self.current_question()
            if entry is None:
                return None
            question_id = entry.question_id
        return self.session.answers.get(question_id)

    def _validate(self, entry: IndexedQuestion, value, conditional_value) -> Tuple[AnswerValue, Optional[str]]:
        """Проверить и нормализовать ответ"""
        question = entry.question
        options = entry.options

        if question.allow_multiple:
            raw_values = [value] if isinstance(value, str) else list(value or [])
            normalized: List[str] = []
            for item in raw_values:
                item = str(item).strip()
                if item and item not in normalized:
                    normalized.append(item)
            if not normalized:
                raise AnswerValidationError("answer_required")
            if any(item not in options for item in normalized):
                raise AnswerValidationError("answer_invalid_option")
            result: AnswerValue = normalized
        else:
            if isinstance(value, (list, tuple)):
                raise AnswerValidationError("answer_single_only")
            result = "" if value is None else str(value).strip()
            if not result:
                raise AnswerValidationError("answer_required")
            if question.type == QuestionType.SINGLE_CHOICE and result not in options:
                raise AnswerValidationError("answer_invalid_option")
            if question.bounds is not None:
                low, high = question.bounds
                try:
                    number = float(result.replace(",", "."))
                except ValueError:
                    raise AnswerValidationError("answer_not_number") from None
                if not low <= number <= high:
                    raise AnswerValidationError("answer_out_of_range", min=f"{low:g}", max=f"{high:g}")

        conditional = (conditional_value or "").strip() or None
        if question.follow_up is None:
            conditional = None
        return result, conditional

    def _snapshot(self, entry: IndexedQuestion, value: AnswerValue, conditional: Optional[str]) -> RecordedAnswer:
        return RecordedAnswer(
            question_id=entry.question_id,
            part_id=entry.part_id,
            section_id=entry.section_id,
            question_number=entry.number,
            question_text=entry.text,
            value=value,
            answered_at=self._clock(),
            conditional_value=conditional,
        )

    def _store_locally(self, answer: RecordedAnswer):
        self.session.answers[answer.question_id] = answer
        self.session.last_updated_at = answer.answered_at

    # --- Изменяющие операции ---

    async def record_answer(self, value: AnswerValue, conditional_value: str = None) -> RecordedAnswer:
        """Сохранить ответ на текущий вопрос; курсор не двигается"""
        async with self._lock:
            self._require_in_progress()
            entry = self.current_question()
            value, conditional = self._validate(entry, value, conditional_value)
            answer = self._snapshot(entry, value, conditional)

            await self._call(self.store.save_answer, answer, self._token)
            self._store_locally(answer)
            return answer

    async def advance(self) -> Step:
        """Перейти к следующему вопросу или завершить анкету"""
        async with self._lock:
            self._require_in_progress()
            entry = self.current_question()
            if entry.question_id not in self.session.answers:
                # Позиция в хранилище не должна обгонять сохранённые ответы
                raise AnswerValidationError("answer_required")
            return await self._move_forward(self.session.current_position)

    async def _move_forward(self, from_position: Position) -> Step:
        step = next_position(self.sequence, from_position)
        if step is Terminal.END:
            await self._call(self.store.mark_complete, self._token)
            now = self._clock()
            self.session.is_complete = True
            self.session.completed_at = now
            self.session.last_updated_at = now
            self.screen = ScreenState.COMPLETE
            logger.info(f"Анкета завершена {self.participant_id}/{self.gender.value}")
            return step

        await self._call(self.store.update_position, step, self._token)
        self.session.current_position = step
        self.session.last_updated_at = self._clock()
        self.screen = ScreenState.QUESTION
        return step

    async def retreat(self) -> Step:
        """Вернуться к предыдущему вопросу; ответы не меняются"""
        async with self._lock:
            self._require_in_progress()
            step = previous_position(self.sequence, self.session.current_position)
            if step is Terminal.START:
                return step

            await self._call(self.store.update_position, step, self._token)
            self.session.current_position = step
            self.session.last_updated_at = self._clock()
            self.screen = ScreenState.QUESTION
            return step

    def show_sections(self) -> List[SectionProgress]:
        """Открыть обзор разделов"""
        self._require_in_progress()
        self.screen = ScreenState.SECTION_OVERVIEW
        return self.section_progress()

    def close_sections(self):
        self._require_in_progress()
        self.screen = ScreenState.QUESTION

    async def jump_to_section(self, position: Position) -> Position:
        """Перейти к первому вопросу раздела из обзора"""
        async with self._lock:
            self._require_in_progress()
            starts = {summary.start_position for summary in self.sequence.section_summaries()}
            if position not in starts:
                raise ValueError(f"{position} не начало раздела")

            await self._call(self.store.update_position, position, self._token)
            self.session.current_position = position
            self.session.last_updated_at = self._clock()
            self.screen = ScreenState.QUESTION
            return position

    async def submit_section(self, values: Dict[str, SectionValue]) -> Step:
        """Сохранить весь текущий раздел разом и перейти к следующему

        Сначала проверяются все вопросы раздела, потом ответы пишутся по одному.
        Вопрос без нового значения, но с сохранённым ответом, не перезаписывается.
        Курсор двигается только после того, как записаны все ответы.
        """
        async with self._lock:
            self._require_in_progress()
            pos = self.session.current_position
            entries = self.sequence.section_questions(pos.part_index, pos.section_index)

            prepared = []
            for entry in entries:
                raw = values.get(entry.question_id)
                if raw is None:
                    if entry.question_id in self.session.answers:
                        continue
                    raise AnswerValidationError("answer_required", number=entry.number)
                value, conditional = raw if isinstance(raw, tuple) else (raw, None)
                try:
                    value, conditional = self._validate(entry, value, conditional)
                except AnswerValidationError as e:
                    e.params.setdefault("number", entry.number)
                    raise
                prepared.append(self._snapshot(entry, value, conditional))

            for answer in prepared:
                await self._call(self.store.save_answer, answer, self._token)
                self._store_locally(answer)

            return await self._move_forward(entries[-1].position)

    async def save_progress(self):
        """Сохранить текущую позицию, не выходя из анкеты"""
        async with self._lock:
            self._require_in_progress()
            await self._call(self.store.update_position, self.session.current_position, self._token)

    async def save_and_exit(self):
        """Сохранить позицию и закончить сеанс без завершения анкеты"""
        async with self._lock:
            self._require_in_progress()
            await self._call(self.store.update_position, self.session.current_position, self._token)
            self.screen = ScreenState.NO_SESSION
            logger.info(f"Анкета отложена {self.participant_id}/{self.gender.value}")

    # --- Прогресс (только чтение) ---

    def overall_progress(self) -> OverallProgress:
        if self.session is None or self.sequence is None:
            return OverallProgress(answered=0, total=0, percent=0)
        return overall_progress(self.sequence, self.session)

    def existing_progress(self) -> Optional[OverallProgress]:
        """Прогресс найденной при открытии сессии (для экрана выбора языка)"""
        if self.existing is None or self.existing.language not in self.definition.languages:
            return None
        sequence = build_sequence(self.definition, self.existing.language, self.gender)
        return overall_progress(sequence, self.existing)

    def section_progress(self) -> List[SectionProgress]:
        if self.session is None or self.sequence is None:
            return []
        return per_section_progress(self.sequence, self.session)

    def part_progress(self) -> List[PartProgress]:
        if self.session is None or self.sequence is None:
            return []
        return per_part_progress(self.sequence, self.session)
