"""Админские хендлеры"""
import os
import csv
import logging
from datetime import datetime
from functools import wraps

from aiogram import Router
from aiogram.types import Message, FSInputFile
from aiogram.filters import Command, CommandObject

from models import get_session
from services.definition import Gender, QuestionnaireDefinition
from services.identity import enroll_participant
from services.reports import ProgressReport
from services.storage import ProgressStore
from utils.config import ADMIN_IDS

router = Router()
logger = logging.getLogger(__name__)

EXPORT_FIELDS = [
    "couple_id", "gender", "language", "part_id", "section_id", "question_id",
    "question_number", "question_text", "answer", "conditional_answer", "answered_at",
]


def admin_only(func):
    """Декоратор для проверки прав администратора"""
    @wraps(func)
    async def wrapper(message: Message, **kwargs):
        if message.from_user.id not in ADMIN_IDS:
            await message.answer("⛔️ This command is available to administrators only.")
            return
        return await func(message, **kwargs)
    return wrapper


@router.message(Command("enroll"))
@admin_only
async def cmd_enroll(message: Message, command: CommandObject = None, **kwargs):
    """Команда /enroll <user_id> <couple_id> <male|female>"""
    args = command.args.split() if command and command.args else []
    if len(args) != 3 or not args[0].isdigit() or args[2] not in (Gender.MALE.value, Gender.FEMALE.value):
        await message.answer("Usage: /enroll <user_id> <couple_id> <male|female>")
        return

    user_id, couple_id, gender = int(args[0]), args[1], Gender(args[2])
    async for session in get_session():
        await enroll_participant(session, user_id, couple_id, gender)

    logger.info(f"Участник {user_id} зарегистрирован: пара {couple_id}, {gender.value}")
    await message.answer(f"✅ User {user_id} enrolled in couple {couple_id} as {gender.value}.")


@router.message(Command("progress"))
@admin_only
async def cmd_progress(message: Message, command: CommandObject = None, store: ProgressStore = None,
                       definition: QuestionnaireDefinition = None, **kwargs):
    """Команда /progress <couple_id> - прогресс пары"""
    couple_id = command.args.strip() if command and command.args else ""
    if not couple_id:
        await message.answer("Usage: /progress <couple_id>")
        return

    report = ProgressReport(store, definition)
    await message.answer(await report.generate_progress_text(couple_id))


@router.message(Command("export"))
@admin_only
async def cmd_export(message: Message, command: CommandObject = None, store: ProgressStore = None,
                     definition: QuestionnaireDefinition = None, **kwargs):
    """Команда /export <couple_id> - экспорт ответов пары в CSV"""
    couple_id = command.args.strip() if command and command.args else ""
    if not couple_id:
        await message.answer("Usage: /export <couple_id>")
        return

    await message.answer("⏳ Preparing export...")

    report = ProgressReport(store, definition)
    data = await report.export_to_csv_data(couple_id)

    if not data:
        await message.answer("No answers to export.")
        return

    # Создаём директорию exports если её нет
    os.makedirs("exports", exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = f"exports/couple_{couple_id}_{timestamp}.csv"

    with open(filename, 'w', newline='', encoding='utf-8-sig') as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        writer.writerows(data)

    document = FSInputFile(filename)
    await message.answer_document(
        document=document,
        caption=f"📊 Couple {couple_id}: {len(data)} answers"
    )


@router.message(Command("admin"))
@admin_only
async def cmd_admin_help(message: Message, **kwargs):
    """Команда /admin - справка для админов"""
    help_text = """
🔧 Administrator commands

👥 /enroll <user_id> <couple_id> <male|female> — link a Telegram account to a couple
📊 /progress <couple_id> — questionnaire progress of both partners
💾 /export <couple_id> — export the couple's answers to CSV
"""
    await message.answer(help_text)
