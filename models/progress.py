"""Модель прогресса анкеты (одна строка на пару participant_id + gender)"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base


class QuestionnaireProgress(Base):
    __tablename__ = "questionnaire_progress"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    participant_id = Column(String(64), nullable=False)  # id пары
    gender = Column(String(6), nullable=False)
    language = Column(String(8), nullable=False)
    # Меняется при каждом создании сессии; записи со старым токеном отклоняются
    session_token = Column(String(32), nullable=False)
    
    # Текущая позиция в отфильтрованной по полу анкете
    part_index = Column(Integer, nullable=False, default=0)
    section_index = Column(Integer, nullable=False, default=0)
    question_index = Column(Integer, nullable=False, default=0)
    
    is_complete = Column(Boolean, default=False, nullable=False)
    started_at = Column(DateTime, default=datetime.utcnow)
    last_updated_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)
    
    answers = relationship("Answer", back_populates="progress", cascade="all, delete-orphan")
    
    __table_args__ = (
        UniqueConstraint("participant_id", "gender", name="uq_progress_participant_gender"),
    )
    
    def __repr__(self):
        return (
            f"<QuestionnaireProgress(participant={self.participant_id}, gender={self.gender}, "
            f"complete={self.is_complete})>"
        )
