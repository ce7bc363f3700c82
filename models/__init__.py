from .database import init_db, close_db, get_session, async_session_maker
from .participant import Participant
from .progress import QuestionnaireProgress
from .answer import Answer

__all__ = ["init_db", "close_db", "get_session", "async_session_maker", "Participant", "QuestionnaireProgress", "Answer"]
