"""
Violation service for SkorZen School Portal
Student violation (pelanggaran) records and reports
"""

import logging

from database import db
from models.reports import Violation
from models.student import Student
from services.communication_service import CommunicationService
from utils.calendar_helpers import year_month_range
from utils.sorting_helpers import SortingHelpers
from utils.validators import validate_date, validate_integer, validate_text_length, parse_date

logger = logging.getLogger(__name__)

class ViolationService:
    """Service for student violations"""

    @staticmethod
    def record_violation(data, user):
        """Record a violation; student name and class are copied onto the record"""
        student = Student.get_by_code(data.get('student_code'))
        if not student:
            return False, "Siswa tidak ditemukan"

        checks = [
            validate_date(data.get('date') or '', allow_future=False),
            validate_text_length(data.get('violation'), 'Pelanggaran', 5, 200),
            validate_integer(data.get('points'), 'Poin', 1, 100),
            validate_text_length(data.get('notes'), 'Catatan', 0, 500, required=False),
        ]
        for is_valid, message in checks:
            if not is_valid:
                return False, message

        violation = Violation(
            student_code=student.student_code,
            student_name=student.name,
            student_class=student.class_name,
            date=parse_date(data['date']),
            violation=data['violation'].strip(),
            points=int(str(data['points']).strip()),
            notes=(data.get('notes') or '').strip() or None,
            recorded_by_id=user.id,
            recorded_by_name=user.display_name
        )
        try:
            db.session.add(violation)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error recording violation for %s", student.student_code)
            return False, f"Gagal menyimpan pelanggaran: {str(e)}"

        CommunicationService.add_activity_log(
            "Pelanggaran Siswa Dicatat",
            f"Siswa: {student.name} ({student.class_name}), {violation.violation}, Poin: {violation.points}",
            user
        )
        return True, f"Pelanggaran {student.name} berhasil dicatat"

    @staticmethod
    def delete_violation(violation_id, user):
        """Delete a violation; admins may delete any, staff only their own"""
        violation = db.session.get(Violation, violation_id)
        if not violation or (not user.is_admin and violation.recorded_by_id != user.id):
            return False, "Data pelanggaran tidak ditemukan"

        details = f"Siswa: {violation.student_name}, {violation.violation}"
        try:
            db.session.delete(violation)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting violation %s", violation_id)
            return False, f"Gagal menghapus pelanggaran: {str(e)}"

        CommunicationService.add_activity_log("Pelanggaran Siswa Dihapus", details, user)
        return True, "Data pelanggaran berhasil dihapus"

    @staticmethod
    def get_recent(limit=20):
        return (Violation.query
                .order_by(Violation.date.desc(), Violation.id.desc())
                .limit(limit)
                .all())

    @staticmethod
    def get_report(year, month=None, class_name=None):
        """Violations for a year (and optionally month/class), newest first"""
        start, end = year_month_range(year, month)
        query = Violation.query.filter(Violation.date >= start, Violation.date <= end)
        if class_name:
            query = query.filter(Violation.student_class == class_name)
        return query.order_by(Violation.date.desc(), Violation.id.desc()).all()

    @staticmethod
    def summarize_by_class(violations):
        """Violation count and total points per class, in class order"""
        totals = {}
        for violation in violations:
            entry = totals.setdefault(violation.student_class, {
                'class_name': violation.student_class, 'count': 0, 'points': 0
            })
            entry['count'] += 1
            entry['points'] += violation.points
        return [totals[name] for name in SortingHelpers.sort_class_names(totals.keys())]

    @staticmethod
    def get_class_options():
        """Classes known from students and from recorded violations"""
        recorded = [row[0] for row in db.session.query(Violation.student_class).distinct().all()]
        return SortingHelpers.sort_class_names(Student.get_class_names() + recorded)
