"""Базовые хендлеры (команды /start, /help, /status)"""
from aiogram import Router
from aiogram.types import Message
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext

from keyboards import get_start_keyboard
from services.controller import OpenResult
from services.definition import QuestionnaireDefinition
from services.errors import PersistenceError
from services.storage import ProgressStore
from utils.config import DEFAULT_LANGUAGE
from utils.i18n import get_text
from .survey import load_controller

router = Router()


@router.message(Command("start"))
async def cmd_start(message: Message, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Команда /start"""
    await state.clear()
    await state.update_data(lang=DEFAULT_LANGUAGE)
    lang = DEFAULT_LANGUAGE

    controller = await load_controller(message.from_user.id, store, definition)
    if controller is None:
        await message.answer(get_text(lang, "not_enrolled"))
        return

    await message.answer(
        get_text(lang, "start_welcome"),
        reply_markup=get_start_keyboard(lang)
    )


@router.message(Command("help"))
async def cmd_help(message: Message, state: FSMContext):
    """Команда /help"""
    user_data = await state.get_data()
    lang = user_data.get("lang", DEFAULT_LANGUAGE)

    await message.answer(get_text(lang, "help_text"))


@router.message(Command("status"))
async def cmd_status(message: Message, state: FSMContext, store: ProgressStore, definition: QuestionnaireDefinition):
    """Команда /status - прогресс анкеты (без изменения сессии)"""
    user_data = await state.get_data()
    lang = user_data.get("lang", DEFAULT_LANGUAGE)

    controller = await load_controller(message.from_user.id, store, definition)
    if controller is None:
        await message.answer(get_text(lang, "not_enrolled"))
        return

    try:
        result = await controller.open()
    except PersistenceError:
        await message.answer(get_text(lang, "save_failed"))
        return

    if result == OpenResult.NEW:
        await message.answer(get_text(lang, "status_no_session"))
        return

    if result == OpenResult.ALREADY_COMPLETE:
        lang = controller.session.language
        progress = controller.overall_progress()
    else:
        lang = controller.existing.language
        progress = controller.existing_progress()

    if progress is None:
        await message.answer(get_text(lang, "status_no_session"))
        return

    await message.answer(
        get_text(
            lang, "status_info",
            answered=progress.answered,
            total=progress.total,
            percent=progress.percent,
            remaining=progress.remaining
        )
    )
