"""Хендлеры анкеты"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext

from models import get_session
from keyboards import (
    get_language_keyboard,
    get_language_switch_keyboard,
    get_question_keyboard,
    get_navigation_keyboard,
    get_follow_up_keyboard,
    get_sections_keyboard,
)
from services.controller import LanguageChoice, OpenResult, ProgressController, interaction_lock
from services.definition import QuestionnaireDefinition, QuestionType
from services.errors import (
    AnswerValidationError,
    ConfigurationError,
    PersistenceError,
    SessionStateError,
    StaleSessionError,
)
from services.identity import get_identity
from services.navigator import Terminal
from services.storage import ProgressStore
from utils.config import DEFAULT_LANGUAGE
from utils.i18n import get_text, LANGUAGE_NAMES
from .states import QuestionnaireFSM

router = Router()
logger = logging.getLogger(__name__)

# Ошибки, о которых участнику сообщают текстом, не прерывая бота
RECOVERABLE_ERRORS = (AnswerValidationError, PersistenceError, StaleSessionError)


async def load_controller(
    user_id: int,
    store: ProgressStore,
    definition: QuestionnaireDefinition
) -> Optional[ProgressController]:
    """Создать контроллер для участника или None, если он не зарегистрирован"""
    async for session in get_session():
        identity = await get_identity(session, user_id)
        if not identity:
            return None
        return ProgressController(store, definition, identity.participant_id, identity.gender)


@asynccontextmanager
async def participant_turn(
    user_id: int,
    store: ProgressStore,
    definition: QuestionnaireDefinition
) -> AsyncIterator[Optional[ProgressController]]:
    """Ход участника: контроллер (или None) под общим замком его анкеты

    Пока ход не закончен, другие нажатия того же участника ждут, поэтому
    загрузка сессии и операция над ней не перемешиваются с чужими.
    """
    controller = await load_controller(user_id, store, definition)
    if controller is None:
        yield None
        return
    async with interaction_lock(controller.participant_id, controller.gender):
        yield controller


async def open_in_progress(controller: ProgressController) -> OpenResult:
    """Открыть анкету и продолжить её на сохранённом языке

    Каждое нажатие заново читает сессию из хранилища: удалённое состояние
    всегда главнее локального.
    """
    result = await controller.open()
    if result == OpenResult.RESUMABLE:
        await controller.resume()
    return result


def parse_index(data: str, prefix: str) -> int:
    """Номер из callback_data; -1, если там не число"""
    raw = data[len(prefix):]
    return int(raw) if raw.isdigit() else -1


def format_value(value) -> str:
    return ", ".join(value) if isinstance(value, list) else value


async def get_lang(state: FSMContext) -> str:
    user_data = await state.get_data()
    return user_data.get("lang", DEFAULT_LANGUAGE)


async def show_question(
    message: Message,
    controller: ProgressController,
    state: FSMContext,
    notice: str = None,
    edit: bool = False
):
    """Показать текущий вопрос"""
    entry = controller.current_question()
    lang = controller.session.language
    stored = controller.stored_answer()
    overall = controller.overall_progress()

    header = get_text(
        lang, "question_header",
        part=entry.part_title,
        section=entry.section_title,
        current=entry.current_in_section,
        total=entry.total_in_section
    )
    progress_text = get_text(lang, "progress", answered=overall.answered, total=overall.total, percent=overall.percent)

    text = f"{notice}\n\n" if notice else ""
    text += f"{header}\n📊 {progress_text}\n\n{entry.number}. {entry.text}"
    if stored:
        text += "\n\n" + get_text(lang, "previous_answer", value=format_value(stored.value))

    selected = []
    if entry.question.type == QuestionType.FREE_TEXT:
        text += "\n\n" + get_text(lang, "input_text")
        keyboard = get_navigation_keyboard(
            can_go_back=not entry.is_first,
            has_stored_answer=stored is not None,
            lang=lang
        )
    else:
        if stored:
            selected = list(stored.value) if isinstance(stored.value, list) else [stored.value]
        keyboard = get_question_keyboard(
            options=entry.options,
            multi_select=entry.question.allow_multiple,
            selected=selected,
            can_go_back=not entry.is_first,
            has_stored_answer=stored is not None,
            lang=lang
        )

    await state.set_state(QuestionnaireFSM.question)
    await state.update_data(
        lang=lang,
        question_id=entry.question_id,
        options=entry.options,
        multi=entry.question.allow_multiple,
        selected_options=selected,
        can_go_back=not entry.is_first,
        has_stored_answer=stored is not None
    )

    if edit:
        await message.edit_text(text, reply_markup=keyboard)
    else:
        await message.answer(text, reply_markup=keyboard)


async def show_language_selection(message: Message, controller: ProgressController, state: FSMContext, notice: str = None):
    """Экран выбора языка (с пометкой о сохранённом прогрессе)"""
    lang = await get_lang(state)
    text = f"{notice}\n\n" if notice else ""
    text += get_text(lang, "choose_language")

    existing = controller.existing
    existing_progress = controller.existing_progress()
    if existing and existing_progress:
        text += "\n\n" + get_text(
            existing.language, "existing_progress",
            percent=existing_progress.percent,
            language=LANGUAGE_NAMES.get(existing.language, existing.language)
        )

    await state.set_state(QuestionnaireFSM.language_selection)
    await message.answer(
        text,
        reply_markup=get_language_keyboard(
            controller.definition.languages,
            existing.language if existing else None
        )
    )


async def finish_questionnaire(message: Message, lang: str, state: FSMContext):
    """Завершение анкеты"""
    await message.answer(get_text(lang, "questionnaire_completed"))
    await state.clear()
    await state.update_data(lang=lang)


async def show_completed(message: Message, controller: ProgressController):
    """Завершённая анкета: сообщение и ответы только для просмотра"""
    lang = controller.session.language
    text = get_text(lang, "already_complete")

    answers = controller.session.answers
    if controller.sequence is not None and answers:
        text += "\n\n" + get_text(lang, "your_answers")
        for entry in controller.sequence:
            answer = answers.get(entry.question_id)
            if answer:
                text += f"\n\n{entry.number}. {entry.text}\n→ {format_value(answer.value)}"
                if answer.conditional_value:
                    text += f" ({answer.conditional_value})"

    # Telegram ограничивает длину сообщения
    for i in range(0, len(text), 4096):
        await message.answer(text[i:i + 4096])


async def advance_and_show(message: Message, controller: ProgressController, state: FSMContext):
    """Перейти к следующему вопросу или завершить анкету"""
    lang = controller.session.language
    step = await controller.advance()
    if step is Terminal.END:
        await finish_questionnaire(message, lang, state)
    else:
        await show_question(message, controller, state)


async def after_answer(message: Message, controller: ProgressController, state: FSMContext):
    """После сохранения ответа: уточняющий вопрос или следующий вопрос"""
    entry = controller.current_question()
    if entry.follow_up:
        await state.set_state(QuestionnaireFSM.follow_up)
        await message.answer(entry.follow_up, reply_markup=get_follow_up_keyboard(controller.session.language))
        return
    await advance_and_show(message, controller, state)


async def report_error(message: Message, lang: str, error: Exception):
    """Показать участнику ошибку проверки или сохранения"""
    if isinstance(error, AnswerValidationError):
        await message.answer(get_text(lang, error.message_key, **error.params))
    elif isinstance(error, StaleSessionError):
        await message.answer(get_text(lang, "session_changed"))
    else:
        await message.answer(get_text(lang, "save_failed"))


async def begin(message: Message, user_id: int, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Открыть анкету: выбор языка или сообщение о завершении"""
    lang = await get_lang(state)
    async with participant_turn(user_id, store, definition) as controller:
        if controller is None:
            await message.answer(get_text(lang, "not_enrolled"))
            return

        try:
            result = await controller.open()
        except PersistenceError as e:
            await report_error(message, lang, e)
            return

        if result == OpenResult.ALREADY_COMPLETE:
            await show_completed(message, controller)
            await state.clear()
            return

        await show_language_selection(message, controller, state)


@router.message(Command("questionnaire"))
async def cmd_questionnaire(message: Message, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Команда /questionnaire"""
    await begin(message, message.from_user.id, state, store, definition)


@router.callback_query(F.data == "start_questionnaire")
async def start_questionnaire(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Кнопка начала анкеты"""
    await callback.answer()
    await begin(callback.message, callback.from_user.id, state, store, definition)


async def apply_language_choice(
    callback: CallbackQuery,
    state: FSMContext,
    store: ProgressStore,
    definition: QuestionnaireDefinition,
    language: str,
    confirmed: bool
):
    lang = await get_lang(state)
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if controller is None:
            await callback.message.answer(get_text(lang, "not_enrolled"))
            return

        try:
            result = await controller.open()
            if result == OpenResult.ALREADY_COMPLETE:
                await callback.message.answer(get_text(controller.session.language, "already_complete"))
                return
            choice = await controller.select_language(language, confirmed=confirmed)
        except (PersistenceError, StaleSessionError) as e:
            await report_error(callback.message, lang, e)
            return
        except (ValueError, ConfigurationError) as e:
            # Чужой callback_data или язык, которого больше нет в анкете
            logger.warning(f"Язык {language!r} недоступен для {controller.participant_id}: {e}")
            await show_language_selection(
                callback.message, controller, state,
                notice=get_text(lang, "language_unavailable")
            )
            return

        if choice == LanguageChoice.CONFIRMATION_REQUIRED:
            await state.set_state(QuestionnaireFSM.confirm_language_switch)
            await callback.message.edit_text(
                get_text(language, "lang_switch_warning"),
                reply_markup=get_language_switch_keyboard(language)
            )
            return

        notice = None
        if controller.resumed_with_drift:
            notice = get_text(language, "drift_notice")
        elif choice == LanguageChoice.RESUMED:
            notice = get_text(language, "resumed_notice")
        await show_question(callback.message, controller, state, notice=notice)


@router.callback_query(F.data.startswith("lang_confirm_"))
async def handle_language_confirm(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Подтверждённая смена языка: ответы удаляются, анкета начинается заново"""
    await callback.answer()
    language = callback.data.replace("lang_confirm_", "")
    await apply_language_choice(callback, state, store, definition, language, confirmed=True)


@router.callback_query(F.data == "lang_cancel")
async def handle_language_cancel(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Отказ от смены языка"""
    await callback.answer()
    lang = await get_lang(state)
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if controller is None:
            await callback.message.answer(get_text(lang, "not_enrolled"))
            return

        try:
            await controller.open()
        except PersistenceError as e:
            await report_error(callback.message, lang, e)
            return
        controller.cancel_language_switch()
        await show_language_selection(callback.message, controller, state, notice=get_text(lang, "lang_switch_cancelled"))


@router.callback_query(F.data.startswith("lang_"))
async def handle_language(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Выбор языка"""
    await callback.answer()
    language = callback.data.replace("lang_", "", 1)
    await apply_language_choice(callback, state, store, definition, language, confirmed=False)


async def with_controller(message: Message, state: FSMContext, controller: Optional[ProgressController]) -> bool:
    """Открыть анкету для ответа внутри вопроса; False, если продолжать нельзя"""
    lang = await get_lang(state)
    if controller is None:
        await message.answer(get_text(lang, "not_enrolled"))
        return False

    try:
        result = await open_in_progress(controller)
    except (PersistenceError, StaleSessionError) as e:
        await report_error(message, lang, e)
        return False
    except (ValueError, ConfigurationError) as e:
        # Сохранённого языка больше нет в анкете
        logger.warning(f"Анкету {controller.participant_id} нельзя продолжить: {e}")
        await show_language_selection(message, controller, state, notice=get_text(lang, "language_unavailable"))
        return False

    if result == OpenResult.ALREADY_COMPLETE:
        await message.answer(get_text(controller.session.language, "already_complete"))
        await state.clear()
        return False
    if result == OpenResult.NEW:
        # Сессию удалили (например, смена языка на другом устройстве)
        await show_language_selection(message, controller, state)
        return False
    return True


async def record_and_continue(message: Message, controller: ProgressController, state: FSMContext, value):
    lang = controller.session.language
    try:
        await controller.record_answer(value)
        await after_answer(message, controller, state)
    except RECOVERABLE_ERRORS as e:
        await report_error(message, lang, e)


# Обработка одиночного выбора
@router.callback_query(F.data.startswith("ans_"))
async def handle_single_answer(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Обработка одиночного выбора"""
    await callback.answer()
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if not await with_controller(callback.message, state, controller):
            return

        entry = controller.current_question()
        index = parse_index(callback.data, "ans_")
        user_data = await state.get_data()
        if user_data.get("question_id") != entry.question_id or not 0 <= index < len(entry.options):
            # Нажата кнопка со старого сообщения
            await show_question(callback.message, controller, state)
            return

        await record_and_continue(callback.message, controller, state, entry.options[index])


# Обработка множественного выбора (тогглы)
@router.callback_query(F.data.startswith("tog_"))
async def handle_multi_toggle(callback: CallbackQuery, state: FSMContext):
    """Обработка тоггла в мультивыборе"""
    await callback.answer()

    user_data = await state.get_data()
    options = user_data.get("options", [])
    selected = user_data.get("selected_options", [])
    lang = user_data.get("lang", DEFAULT_LANGUAGE)
    index = parse_index(callback.data, "tog_")
    if not 0 <= index < len(options):
        return

    # Тоггл опции
    option = options[index]
    if option in selected:
        selected.remove(option)
    else:
        selected.append(option)

    await state.update_data(selected_options=selected)

    keyboard = get_question_keyboard(
        options=options,
        multi_select=True,
        selected=selected,
        can_go_back=user_data.get("can_go_back", False),
        has_stored_answer=user_data.get("has_stored_answer", False),
        lang=lang
    )
    await callback.message.edit_reply_markup(reply_markup=keyboard)


# Завершение мультивыбора
@router.callback_query(F.data == "multi_done")
async def handle_multi_done(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Завершение мультивыбора"""
    await callback.answer()
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if not await with_controller(callback.message, state, controller):
            return

        user_data = await state.get_data()
        if user_data.get("question_id") != controller.current_question().question_id:
            await show_question(callback.message, controller, state)
            return

        await record_and_continue(callback.message, controller, state, user_data.get("selected_options", []))


# Обработка текстового ввода
@router.message(QuestionnaireFSM.question, F.text, ~F.text.startswith("/"))
async def handle_text_input(message: Message, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Обработка текстового ответа"""
    async with participant_turn(message.from_user.id, store, definition) as controller:
        if not await with_controller(message, state, controller):
            return
        await record_and_continue(message, controller, state, message.text)


# Ответ на уточняющий вопрос
@router.message(QuestionnaireFSM.follow_up, F.text, ~F.text.startswith("/"))
async def handle_follow_up(message: Message, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Сохранить уточнение вместе с уже данным ответом"""
    async with participant_turn(message.from_user.id, store, definition) as controller:
        if not await with_controller(message, state, controller):
            return

        lang = controller.session.language
        stored = controller.stored_answer()
        if stored is None:
            await show_question(message, controller, state)
            return
        try:
            await controller.record_answer(stored.value, message.text)
            await advance_and_show(message, controller, state)
        except RECOVERABLE_ERRORS as e:
            await report_error(message, lang, e)


@router.callback_query(F.data.in_({"follow_skip", "keep_answer"}))
async def handle_keep_answer(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Дальше без изменений: пропуск уточнения или сохранённый ответ"""
    await callback.answer()
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if not await with_controller(callback.message, state, controller):
            return

        lang = controller.session.language
        try:
            await advance_and_show(callback.message, controller, state)
        except RECOVERABLE_ERRORS as e:
            await report_error(callback.message, lang, e)


# Навигация назад
@router.callback_query(F.data == "nav_back")
async def handle_back(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Возврат к предыдущему вопросу"""
    await callback.answer()
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if not await with_controller(callback.message, state, controller):
            return

        lang = controller.session.language
        try:
            step = await controller.retreat()
        except RECOVERABLE_ERRORS as e:
            await report_error(callback.message, lang, e)
            return
        if step is not Terminal.START:
            await show_question(callback.message, controller, state, edit=True)


@router.callback_query(F.data == "nav_sections")
async def handle_sections(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Обзор разделов"""
    await callback.answer()
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if not await with_controller(callback.message, state, controller):
            return

        lang = controller.session.language
        sections = controller.show_sections()
        await state.set_state(QuestionnaireFSM.section_overview)
        await callback.message.edit_text(
            get_text(lang, "sections_title"),
            reply_markup=get_sections_keyboard(sections, lang)
        )


@router.callback_query(F.data.startswith("jump_"))
async def handle_jump(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Переход к первому вопросу раздела"""
    await callback.answer()
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if not await with_controller(callback.message, state, controller):
            return

        lang = controller.session.language
        sections = controller.section_progress()
        index = parse_index(callback.data, "jump_")
        if not 0 <= index < len(sections):
            await show_question(callback.message, controller, state, edit=True)
            return

        try:
            await controller.jump_to_section(sections[index].start_position)
        except RECOVERABLE_ERRORS as e:
            await report_error(callback.message, lang, e)
            return
        await show_question(callback.message, controller, state, edit=True)


@router.callback_query(F.data == "sections_close")
async def handle_sections_close(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Вернуться из обзора к текущему вопросу"""
    await callback.answer()
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if not await with_controller(callback.message, state, controller):
            return
        await show_question(callback.message, controller, state, edit=True)


@router.callback_query(F.data == "nav_exit")
async def handle_save_and_exit(callback: CallbackQuery, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Сохранить и выйти"""
    await callback.answer()
    async with participant_turn(callback.from_user.id, store, definition) as controller:
        if not await with_controller(callback.message, state, controller):
            return

        lang = controller.session.language
        try:
            await controller.save_and_exit()
        except (PersistenceError, SessionStateError) as e:
            logger.warning(f"Не удалось сохранить позицию при выходе: {e}")
            await report_error(callback.message, lang, e)
            return

        await state.clear()
        await state.update_data(lang=lang)
        await callback.message.edit_text(get_text(lang, "progress_saved"))
