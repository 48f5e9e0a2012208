"""
Class agenda service for SkorZen School Portal
"""

import logging

from database import db
from models.reports import ClassAgenda
from models.student import Student
from services.communication_service import CommunicationService
from utils.calendar_helpers import year_month_range
from utils.validators import validate_text_length, parse_date

logger = logging.getLogger(__name__)

class AgendaService:
    """Teaching journal entries"""

    @staticmethod
    def _validate(data):
        if not (data.get('class_name') or '').strip():
            return False, "Kelas wajib dipilih"
        if not (data.get('subject') or '').strip():
            return False, "Mata pelajaran wajib dipilih"
        if parse_date(data.get('date')) is None:
            return False, "Tanggal tidak valid"
        if not (data.get('period') or '').strip():
            return False, "Jam ke wajib diisi"

        checks = [
            validate_text_length(data.get('learning_objective'), 'Tujuan pembelajaran', 5, 500),
            validate_text_length(data.get('topic'), 'Pokok bahasan', 5, 500),
            validate_text_length(data.get('reflection'), 'Refleksi', 0, 1000, required=False),
        ]
        for is_valid, message in checks:
            if not is_valid:
                return False, message
        return True, "Valid agenda"

    @staticmethod
    def _absent_students(class_name, student_codes):
        """Resolve selected codes to {student_code, name} entries within the class"""
        codes = set(Student.normalize_code(c) for c in (student_codes or []) if c)
        if not codes:
            return []
        students = (Student.query
                    .filter(Student.class_name == class_name, Student.student_code.in_(codes))
                    .order_by(Student.name)
                    .all())
        return [{'student_code': s.student_code, 'name': s.name} for s in students]

    @staticmethod
    def save_agenda(data, user, agenda_id=None):
        """Create an agenda entry, or update one of the user's own entries"""
        is_valid, message = AgendaService._validate(data)
        if not is_valid:
            return False, message

        try:
            if agenda_id:
                agenda = db.session.get(ClassAgenda, agenda_id)
                if not agenda or agenda.teacher_id != user.id:
                    return False, "Agenda tidak ditemukan"
                action = "Agenda Kelas Diperbarui"
            else:
                agenda = ClassAgenda(teacher_id=user.id)
                db.session.add(agenda)
                action = "Agenda Kelas Ditambahkan"

            agenda.teacher_name = user.display_name
            agenda.class_name = data['class_name'].strip()
            agenda.subject = data['subject'].strip()
            agenda.date = parse_date(data['date'])
            agenda.period = data['period'].strip()
            agenda.learning_objective = data['learning_objective'].strip()
            agenda.topic = data['topic'].strip()
            agenda.absent_students = AgendaService._absent_students(
                agenda.class_name, data.get('absent_students'))
            agenda.reflection = (data.get('reflection') or '').strip() or None
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error saving class agenda")
            return False, f"Gagal menyimpan agenda: {str(e)}"

        CommunicationService.add_activity_log(
            action, f"Kelas: {agenda.class_name}, Mapel: {agenda.subject}, Tgl: {agenda.date.isoformat()}", user)
        return True, "Agenda kelas berhasil disimpan"

    @staticmethod
    def delete_agenda(agenda_id, user):
        agenda = db.session.get(ClassAgenda, agenda_id)
        if not agenda or (not user.is_admin and agenda.teacher_id != user.id):
            return False, "Agenda tidak ditemukan"

        details = f"Kelas: {agenda.class_name}, Mapel: {agenda.subject}, Tgl: {agenda.date.isoformat()}"
        try:
            db.session.delete(agenda)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting agenda %s", agenda_id)
            return False, f"Gagal menghapus agenda: {str(e)}"

        CommunicationService.add_activity_log("Agenda Kelas Dihapus", details, user)
        return True, "Agenda kelas berhasil dihapus"

    @staticmethod
    def get_agendas(year, month=None, teacher_id=None, class_name=None):
        """Agenda entries in a period, newest first"""
        start, end = year_month_range(year, month)
        query = ClassAgenda.query.filter(ClassAgenda.date >= start, ClassAgenda.date <= end)
        if teacher_id:
            query = query.filter(ClassAgenda.teacher_id == teacher_id)
        if class_name:
            query = query.filter(ClassAgenda.class_name == class_name)
        return query.order_by(ClassAgenda.date.desc(), ClassAgenda.period).all()
