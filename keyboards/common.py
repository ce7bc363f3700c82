"""Общие клавиатуры"""
from typing import Iterable, Optional
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton
from utils.i18n import get_text, LANGUAGE_NAMES


def get_start_keyboard(lang: str = "en") -> InlineKeyboardMarkup:
    """Клавиатура начала анкеты"""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(
            text=get_text(lang, "btn_start_questionnaire"),
            callback_data="start_questionnaire"
        )]
    ])


def get_language_keyboard(
    languages: Iterable[str],
    existing_language: Optional[str] = None
) -> InlineKeyboardMarkup:
    """Выбор языка; язык сохранённой анкеты помечен как «продолжить»"""
    buttons = []
    for code in languages:
        text = LANGUAGE_NAMES.get(code, code)
        if code == existing_language:
            text += get_text(code, "resume_suffix")
        buttons.append([InlineKeyboardButton(text=text, callback_data=f"lang_{code}")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def get_language_switch_keyboard(new_language: str) -> InlineKeyboardMarkup:
    """Подтверждение смены языка (ответы будут удалены)"""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(
            text=get_text(new_language, "btn_switch_confirm"),
            callback_data=f"lang_confirm_{new_language}"
        )],
        [InlineKeyboardButton(
            text=get_text(new_language, "btn_switch_cancel"),
            callback_data="lang_cancel"
        )]
    ])
