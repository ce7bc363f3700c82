"""Модель ответа на вопрос"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base


class Answer(Base):
    __tablename__ = "answers"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    progress_id = Column(Integer, ForeignKey("questionnaire_progress.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(String(128), nullable=False)
    part_id = Column(String(128), nullable=False)
    section_id = Column(String(128), nullable=False)
    question_number = Column(String(16), nullable=False, default="")
    question_text = Column(Text, nullable=False)  # снимок текста на момент ответа
    value = Column(Text, nullable=False)  # JSON для мультивыбора, текст для остальных
    is_multiple = Column(Boolean, default=False, nullable=False)
    conditional_value = Column(Text, nullable=True)
    answered_at = Column(DateTime, default=datetime.utcnow)
    
    progress = relationship("QuestionnaireProgress", back_populates="answers")
    
    __table_args__ = (
        UniqueConstraint("progress_id", "question_id", name="uq_answer_progress_question"),
    )
    
    def __repr__(self):
        return f"<Answer(id={self.id}, question={self.question_id})>"
