"""Отчёты для администраторов (только чтение)

Отчёт строится по одной паре: анкеты обоих партнёров читаются через
ProgressStore.get_session, записи в хранилище отсюда нет.
"""
from typing import Dict, List, Optional

from .definition import Gender, QuestionnaireDefinition
from .indexer import build_sequence
from .progress import overall_progress, per_section_progress
from .storage import ProgressSession, ProgressStore

PARTNER_GENDERS = (Gender.FEMALE, Gender.MALE)


class ProgressReport:
    """Прогресс и ответы пары участников"""

    def __init__(self, store: ProgressStore, definition: QuestionnaireDefinition):
        self.store = store
        self.definition = definition

    async def load_sessions(self, couple_id: str) -> Dict[Gender, Optional[ProgressSession]]:
        """Сессии обоих партнёров (None, если анкета не начата)"""
        return {
            gender: await self.store.get_session(couple_id, gender)
            for gender in PARTNER_GENDERS
        }

    def _session_block(self, gender: Gender, session: Optional[ProgressSession]) -> str:
        title = "👩 Female partner" if gender == Gender.FEMALE else "👨 Male partner"
        if session is None:
            return f"{title}\n  Not started\n"

        text = f"{title} ({session.language})\n"
        if session.language not in self.definition.languages:
            text += f"  Answers: {len(session.answers)} (language no longer available)\n"
            return text

        sequence = build_sequence(self.definition, session.language, gender)
        overall = overall_progress(sequence, session)
        status = "✅ Complete" if session.is_complete else "⏳ In progress"
        text += f"  {status}: {overall.answered}/{overall.total} ({overall.percent}%)\n"
        if session.completed_at:
            text += f"  Completed at: {session.completed_at.strftime('%Y-%m-%d %H:%M')}\n"
        elif session.last_updated_at:
            text += f"  Last activity: {session.last_updated_at.strftime('%Y-%m-%d %H:%M')}\n"

        for section in per_section_progress(sequence, session):
            mark = "✅" if section.is_complete else "•"
            text += f"  {mark} {section.section_title}: {section.answered}/{section.total}\n"
        return text

    async def generate_progress_text(self, couple_id: str) -> str:
        """Текст отчёта о прогрессе пары"""
        sessions = await self.load_sessions(couple_id)

        if all(session is None for session in sessions.values()):
            return f"📋 Couple {couple_id}\n\nNo questionnaire started yet."

        text = f"📋 Couple {couple_id}\n\n"
        text += "\n".join(self._session_block(gender, session) for gender, session in sessions.items())
        return text

    async def export_to_csv_data(self, couple_id: str) -> List[Dict]:
        """Подготовить ответы пары для экспорта в CSV"""
        sessions = await self.load_sessions(couple_id)
        rows = []

        for gender, session in sessions.items():
            if session is None:
                continue

            # Порядок анкеты, если язык ещё поддерживается; иначе по времени ответа
            order = {}
            if session.language in self.definition.languages:
                sequence = build_sequence(self.definition, session.language, gender)
                order = {entry.question_id: i for i, entry in enumerate(sequence)}
            answers = sorted(
                session.answers.values(),
                key=lambda a: (order.get(a.question_id, len(order)), a.answered_at)
            )

            for answer in answers:
                value = "; ".join(answer.value) if isinstance(answer.value, list) else answer.value
                rows.append({
                    "couple_id": couple_id,
                    "gender": gender.value,
                    "language": session.language,
                    "part_id": answer.part_id,
                    "section_id": answer.section_id,
                    "question_id": answer.question_id,
                    "question_number": answer.question_number,
                    "question_text": answer.question_text,
                    "answer": value,
                    "conditional_answer": answer.conditional_value or "",
                    "answered_at": answer.answered_at.strftime("%Y-%m-%d %H:%M:%S") if answer.answered_at else "",
                })

        return rows
