"""
Attendance service for SkorZen School Portal
Teacher daily attendance, monthly summaries and the TU staff recap
"""

import logging
from datetime import date

from database import db
from models.academic import SchoolHoliday
from models.attendance import TeacherAttendance
from models.user import User
from services.communication_service import CommunicationService
from utils.calendar_helpers import count_workdays, format_date_id, month_bounds, year_month_range
from utils.roles import TU_STAFF_DUTIES
from utils.validators import validate_attendance_status, validate_date, validate_text_length, parse_date

logger = logging.getLogger(__name__)

class AttendanceService:
    """Service for teacher and staff attendance"""

    @staticmethod
    def record_attendance(user, date_value, status, notes=''):
        """Record or update the user's own attendance for a day that is not in the future"""
        is_valid, message = validate_date(date_value, allow_future=False)
        if not is_valid:
            return False, message
        is_valid, message = validate_attendance_status(status)
        if not is_valid:
            return False, message
        is_valid, message = validate_text_length(notes, 'Catatan', 0, 300, required=False)
        if not is_valid:
            return False, message

        attendance_date = parse_date(date_value)
        try:
            record = TeacherAttendance.query.filter_by(teacher_id=user.id, date=attendance_date).first()
            is_new = record is None
            if is_new:
                record = TeacherAttendance(teacher_id=user.id, date=attendance_date)
                db.session.add(record)
            record.teacher_name = user.display_name
            record.status = status
            record.notes = (notes or '').strip() or None
            record.last_updated_by = user.display_name
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error recording attendance for user %s", user.id)
            return False, f"Gagal menyimpan kehadiran: {str(e)}"

        CommunicationService.add_activity_log(
            "Kehadiran Harian Dicatat" if is_new else "Kehadiran Harian Diperbarui",
            f"{user.display_name}: {status} pada {format_date_id(attendance_date, with_day=True)}",
            user
        )
        return True, f"Kehadiran tanggal {format_date_id(attendance_date)} berhasil disimpan"

    @staticmethod
    def update_record(record_id, status, notes, admin):
        """Admin correction of an existing record"""
        record = db.session.get(TeacherAttendance, record_id)
        if not record:
            return False, "Data kehadiran tidak ditemukan"
        is_valid, message = validate_attendance_status(status)
        if not is_valid:
            return False, message
        is_valid, message = validate_text_length(notes, 'Catatan', 0, 300, required=False)
        if not is_valid:
            return False, message

        try:
            record.status = status
            record.notes = (notes or '').strip() or None
            record.last_updated_by = admin.display_name
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error updating attendance %s", record_id)
            return False, f"Gagal memperbarui kehadiran: {str(e)}"

        CommunicationService.add_activity_log(
            "Kehadiran Harian Guru Diperbarui (Admin)",
            f"Guru: {record.teacher_name}, Tgl: {record.date.isoformat()}, Status: {status}",
            admin
        )
        return True, "Data kehadiran berhasil diperbarui"

    @staticmethod
    def delete_record(record_id, admin):
        record = db.session.get(TeacherAttendance, record_id)
        if not record:
            return False, "Data kehadiran tidak ditemukan"

        details = f"Guru: {record.teacher_name}, Tgl: {format_date_id(record.date, with_day=True)}"
        try:
            db.session.delete(record)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting attendance %s", record_id)
            return False, f"Gagal menghapus kehadiran: {str(e)}"

        CommunicationService.add_activity_log("Data Kehadiran Harian Guru Dihapus (Admin)", details, admin)
        return True, "Data kehadiran harian berhasil dihapus"

    @staticmethod
    def get_records(year, month=None, teacher_id=None):
        start, end = year_month_range(year, month)
        return TeacherAttendance.get_for_period(start, end, teacher_id)

    @staticmethod
    def get_today_record(user_id):
        return TeacherAttendance.query.filter_by(teacher_id=user_id, date=date.today()).first()

    @staticmethod
    def get_workdays(year, month, records=None):
        """Workdays of a month; Hadir records on a weekend or holiday add to the count"""
        start, end = month_bounds(year, month)
        holidays = SchoolHoliday.get_dates_between(start, end)
        attended = [r.date for r in (records or []) if r.is_present()]
        return count_workdays(year, month, holidays, attended)

    @staticmethod
    def summarize(records, workdays):
        """Status counts and attendance percentage for one person's records"""
        summary = {status: 0 for status in TeacherAttendance.STATUSES}
        for record in records:
            if record.status in summary:
                summary[record.status] += 1
            else:
                summary[TeacherAttendance.STATUS_ABSENT] += 1
        summary['TotalTercatat'] = len(records)
        summary['TotalHariKerja'] = workdays
        percentage = (summary[TeacherAttendance.STATUS_PRESENT] / workdays) * 100 if workdays > 0 else 0
        summary['PersentaseHadir'] = round(percentage, 1)
        return summary

    @staticmethod
    def get_monthly_summary(year, month, teacher_id=None):
        """One summary row per person who has records in the month, sorted by name"""
        records = AttendanceService.get_records(year, month, teacher_id)
        workdays = AttendanceService.get_workdays(year, month)

        grouped = {}
        for record in records:
            grouped.setdefault(record.teacher_id, []).append(record)

        rows = []
        for person_id, person_records in grouped.items():
            row = AttendanceService.summarize(person_records, workdays)
            row['teacher_id'] = person_id
            row['teacher_name'] = person_records[0].teacher_name
            rows.append(row)
        return sorted(rows, key=lambda r: r['teacher_name'].lower())

    @staticmethod
    def get_personal_recap(user, year, month):
        """Summary row and daily records for one person"""
        records = AttendanceService.get_records(year, month, user.id)
        workdays = AttendanceService.get_workdays(year, month, records)
        summary = AttendanceService.summarize(records, workdays)
        summary['teacher_id'] = user.id
        summary['teacher_name'] = user.display_name
        return {'summary': summary, 'records': sorted(records, key=lambda r: r.date)}

    @staticmethod
    def get_tu_staff():
        """Active users holding a tata usaha staff duty"""
        users = User.query.filter_by(is_active=True, role=User.ROLE_GURU).all()
        return [u for u in users if u.has_duty(*TU_STAFF_DUTIES)]

    @staticmethod
    def get_tu_staff_recap(year, month):
        """Summary rows for every TU staff member, including those without records"""
        records = AttendanceService.get_records(year, month)
        by_person = {}
        for record in records:
            by_person.setdefault(record.teacher_id, []).append(record)

        rows = []
        for staff in AttendanceService.get_tu_staff():
            person_records = by_person.get(staff.id, [])
            workdays = AttendanceService.get_workdays(year, month, person_records)
            row = AttendanceService.summarize(person_records, workdays)
            row['teacher_id'] = staff.id
            row['teacher_name'] = staff.display_name
            rows.append(row)
        return sorted(rows, key=lambda r: r['teacher_name'].lower())
