"""Модель участника (связь Telegram-аккаунта с парой)"""
from sqlalchemy import Column, Integer, String, DateTime, BigInteger
from datetime import datetime
from .database import Base


class Participant(Base):
    __tablename__ = "participants"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, nullable=False, unique=True, index=True)
    username = Column(String, nullable=True)
    couple_id = Column(String(64), nullable=False, index=True)
    gender = Column(String(6), nullable=False)  # male / female
    created_at = Column(DateTime, default=datetime.utcnow)
    
    def __repr__(self):
        return f"<Participant(user_id={self.user_id}, couple_id={self.couple_id}, gender={self.gender})>"
