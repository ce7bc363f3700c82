"""FSM для анкеты"""
from aiogram.fsm.state import State, StatesGroup


class QuestionnaireFSM(StatesGroup):
    """Состояния экрана анкеты"""
    language_selection = State()
    
    # Ожидание подтверждения смены языка
    confirm_language_switch = State()
    
    # Показан вопрос (кнопки или текстовый ввод)
    question = State()
    
    # Ожидание ответа на уточняющий вопрос
    follow_up = State()
    
    section_overview = State()
