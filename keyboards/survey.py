"""Клавиатуры для анкеты"""
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton
from typing import List
from utils.i18n import get_text


def _navigation_row(can_go_back: bool, lang: str) -> List[InlineKeyboardButton]:
    row = []
    if can_go_back:
        row.append(InlineKeyboardButton(text=get_text(lang, "btn_back"), callback_data="nav_back"))
    row.append(InlineKeyboardButton(text=get_text(lang, "btn_sections"), callback_data="nav_sections"))
    row.append(InlineKeyboardButton(text=get_text(lang, "btn_save_exit"), callback_data="nav_exit"))
    return row


def get_question_keyboard(
    options: List[str],
    multi_select: bool = False,
    selected: List[str] = None,
    can_go_back: bool = False,
    has_stored_answer: bool = False,
    lang: str = "en"
) -> InlineKeyboardMarkup:
    """
    Создать клавиатуру для вопроса
    
    options: тексты вариантов на языке анкеты; в callback_data передаётся индекс
    multi_select: множественный выбор (с тогглами)
    selected: уже выбранные варианты (для мультивыбора и сохранённого ответа)
    has_stored_answer: на вопрос уже есть ответ, его можно оставить без изменений
    """
    selected = selected or []
    buttons = []
    
    for i, text in enumerate(options):
        prefix = "✅ " if text in selected else ""
        callback_data = f"tog_{i}" if multi_select else f"ans_{i}"
        buttons.append([InlineKeyboardButton(
            text=f"{prefix}{text}",
            callback_data=callback_data
        )])
    
    # Для мультивыбора добавляем кнопку "Далее"
    if multi_select and selected:
        buttons.append([InlineKeyboardButton(
            text=get_text(lang, "btn_next"),
            callback_data="multi_done"
        )])
    elif has_stored_answer:
        buttons.append([InlineKeyboardButton(
            text=get_text(lang, "btn_keep_answer"),
            callback_data="keep_answer"
        )])
    
    buttons.append(_navigation_row(can_go_back, lang))
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def get_navigation_keyboard(
    can_go_back: bool,
    has_stored_answer: bool = False,
    lang: str = "en"
) -> InlineKeyboardMarkup:
    """Клавиатура навигации для открытых вопросов"""
    buttons = []
    if has_stored_answer:
        buttons.append([InlineKeyboardButton(
            text=get_text(lang, "btn_keep_answer"),
            callback_data="keep_answer"
        )])
    buttons.append(_navigation_row(can_go_back, lang))
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def get_follow_up_keyboard(lang: str = "en") -> InlineKeyboardMarkup:
    """Пропуск уточняющего вопроса"""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(
            text=get_text(lang, "btn_skip_follow_up"),
            callback_data="follow_skip"
        )]
    ])


def get_sections_keyboard(sections, lang: str = "en") -> InlineKeyboardMarkup:
    """Обзор разделов: прогресс и переход к первому вопросу раздела"""
    buttons = []
    for i, section in enumerate(sections):
        mark = "✅" if section.is_complete else f"{section.answered}/{section.total}"
        buttons.append([InlineKeyboardButton(
            text=f"{mark} {section.section_title}",
            callback_data=f"jump_{i}"
        )])
    buttons.append([InlineKeyboardButton(
        text=get_text(lang, "btn_close_sections"),
        callback_data="sections_close"
    )])
    return InlineKeyboardMarkup(inline_keyboard=buttons)
