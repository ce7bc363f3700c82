"""Главный файл бота"""
import asyncio
import logging
from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage

from utils.config import BOT_TOKEN, QUESTIONNAIRE_PATH, check_config
from models import init_db, close_db, async_session_maker
from handlers import common_router, survey_router, admin_router
from services.definition import load_definition
from services.errors import ConfigurationError
from services.indexer import validate_definition_sequences
from services.storage import SqlProgressStore

# Настройка логирования
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def main():
    """Главная функция запуска бота"""
    check_config()

    # Инициализация БД
    logger.info("Инициализация базы данных...")
    await init_db()

    # Загрузка и проверка анкеты
    try:
        definition = load_definition(path=QUESTIONNAIRE_PATH)
        validate_definition_sequences(definition)
    except ConfigurationError as e:
        logger.error(f"Ошибка в анкете: {e}")
        raise
    logger.info(f"Анкета v{definition.version} загружена, языки: {', '.join(definition.languages)}")

    # Создание бота и диспетчера
    bot = Bot(token=BOT_TOKEN)
    storage = MemoryStorage()
    dp = Dispatcher(
        storage=storage,
        store=SqlProgressStore(async_session_maker),
        definition=definition
    )

    # Регистрация роутеров
    dp.include_router(common_router)
    dp.include_router(survey_router)
    dp.include_router(admin_router)

    logger.info("Бот запущен и готов к работе!")

    try:
        # Запуск поллинга
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await bot.session.close()
        await close_db()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Бот остановлен пользователем")
