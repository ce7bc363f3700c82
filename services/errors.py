"""Исключения движка анкеты"""


class QuestionnaireError(Exception):
    """Базовая ошибка анкеты"""


class ConfigurationError(QuestionnaireError):
    """Ошибка в описании анкеты (фатальная, без повторов)"""


class AnswerValidationError(QuestionnaireError):
    """Ответ не прошёл проверку

    message_key: ключ текста из utils.i18n, который показывается участнику.
    """

    def __init__(self, message_key: str, **params):
        super().__init__(message_key)
        self.message_key = message_key
        self.params = params


class PersistenceError(QuestionnaireError):
    """Хранилище не смогло выполнить операцию (можно повторить)"""


class SessionStateError(QuestionnaireError):
    """Операция недопустима в текущем состоянии сессии"""


class SessionCompleteError(SessionStateError):
    """Анкета уже завершена, изменения запрещены"""


class StaleSessionError(SessionStateError):
    """Сессию сбросили или пересоздали, запись в старую отклонена"""
