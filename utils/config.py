"""Конфигурация бота"""
import logging
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

BOT_TOKEN = os.getenv("BOT_TOKEN")
ADMIN_IDS = [int(id.strip()) for id in os.getenv("ADMIN_IDS", "").split(",") if id.strip()]
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///data.db")

# JSON-файл с анкетой; если не задан, используется встроенная utils/questions.py
QUESTIONNAIRE_PATH = os.getenv("QUESTIONNAIRE_PATH") or None
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")


def check_config():
    """Проверка обязательных настроек перед запуском бота"""
    if not BOT_TOKEN:
        raise ValueError("BOT_TOKEN не установлен в .env файле")

    if not ADMIN_IDS:
        logger.warning("ADMIN_IDS не установлены. Админ-команды будут недоступны.")
