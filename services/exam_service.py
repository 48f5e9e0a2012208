"""
Exam administration service for SkorZen School Portal
Exam minutes (berita acara) and proctor attendance (daftar hadir pengawas)
"""

import logging
from datetime import date

from database import db
from models.exams import ExamMinutes, ProctorAttendance
from services.communication_service import CommunicationService
from utils.calendar_helpers import DAY_NAMES, MONTHS, day_name, format_date_id
from utils.roles import KURIKULUM
from utils.validators import (validate_academic_year, validate_integer, validate_text_length,
                              validate_time, validate_url, parse_date)

logger = logging.getLogger(__name__)

MONTH_NAMES = [name for _, name in MONTHS]

class ExamService:
    """Service for exam administration documents"""

    @staticmethod
    def can_view_all(user):
        """Admins and the curriculum team see every exam document"""
        return user.is_admin or user.has_duty(KURIKULUM)

    @staticmethod
    def _check_times(start_time, end_time):
        for value, label in ((start_time, 'Waktu mulai'), (end_time, 'Waktu selesai')):
            is_valid, message = validate_time(value, label)
            if not is_valid:
                return False, message
        # HH:MM strings compare correctly as text
        if end_time.strip() <= start_time.strip():
            return False, "Waktu selesai harus setelah waktu mulai"
        return True, "Valid time range"

    # ---- berita acara ----

    @staticmethod
    def _validate_minutes(data):
        checks = [
            validate_academic_year(data.get('academic_year') or ''),
            validate_text_length(data.get('exam_subject'), 'Mata ujian', 3, 100),
            validate_integer(data.get('day'), 'Tanggal', 1, 31),
            validate_integer(data.get('year'), 'Tahun', 2000, 2100),
            validate_text_length(data.get('room'), 'Ruang ujian', 1, 50),
            validate_text_length(data.get('proctor_name'), 'Nama pengawas', 3, 100),
            validate_url(data.get('proctor_signature_url'), 'URL tanda tangan', required=False),
            ExamService._check_times(data.get('start_time') or '', data.get('end_time') or ''),
        ]
        for field, label in (('participants_x', 'Jumlah peserta kelas X'),
                             ('participants_xi', 'Jumlah peserta kelas XI'),
                             ('participants_xii', 'Jumlah peserta kelas XII'),
                             ('absent_count', 'Jumlah tidak hadir'),
                             ('attendance_list_count', 'Jumlah daftar hadir'),
                             ('minutes_count', 'Jumlah berita acara')):
            checks.append(validate_integer(data.get(field) or 0, label, 0))

        for is_valid, message in checks:
            if not is_valid:
                return False, message

        if data.get('month_name') not in MONTH_NAMES:
            return False, "Bulan tidak valid"
        day_value = (data.get('day_name') or '').strip()
        if day_value and day_value not in DAY_NAMES:
            return False, "Hari tidak valid"
        return True, "Valid minutes"

    @staticmethod
    def _derive_day_name(data):
        """
        Day name for the exam date, None when day/month/year is not a real date.
        A day name typed into the form wins over the derived one.
        """
        try:
            value = date(int(data['year']), MONTH_NAMES.index(data['month_name']) + 1, int(data['day']))
        except ValueError:
            return None
        return (data.get('day_name') or '').strip() or day_name(value)

    @staticmethod
    def create_minutes(data, user):
        """Create an exam minutes record"""
        is_valid, message = ExamService._validate_minutes(data)
        if not is_valid:
            return False, None, message

        computed_day = ExamService._derive_day_name(data)
        if not computed_day:
            return False, None, "Tanggal ujian tidak valid"

        minutes = ExamMinutes(
            exam_type=(data.get('exam_type') or '').strip() or ExamMinutes.DEFAULT_EXAM_TYPE,
            academic_year=data['academic_year'].strip(),
            exam_subject=data['exam_subject'].strip(),
            day_name=computed_day,
            day=int(data['day']),
            month_name=data['month_name'],
            year=int(data['year']),
            start_time=data['start_time'].strip(),
            end_time=data['end_time'].strip(),
            room=data['room'].strip(),
            combined_classes=(data.get('combined_classes') or '').strip() or None,
            participants_x=int(data.get('participants_x') or 0),
            participants_xi=int(data.get('participants_xi') or 0),
            participants_xii=int(data.get('participants_xii') or 0),
            absent_count=int(data.get('absent_count') or 0),
            present_numbers=(data.get('present_numbers') or '').strip() or None,
            absent_numbers=(data.get('absent_numbers') or '').strip() or None,
            attendance_list_count=int(data.get('attendance_list_count') or 0),
            minutes_count=int(data.get('minutes_count') or 0),
            notes=(data.get('notes') or '').strip() or None,
            proctor_name=data['proctor_name'].strip(),
            proctor_signature_url=(data.get('proctor_signature_url') or '').strip() or None,
            created_by_id=user.id,
            created_by_name=user.display_name
        )
        if minutes.absent_count > minutes.total_participants:
            return False, None, "Jumlah tidak hadir melebihi jumlah peserta"

        try:
            db.session.add(minutes)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error saving exam minutes")
            return False, None, f"Gagal menyimpan berita acara: {str(e)}"

        CommunicationService.add_activity_log(
            "Berita Acara Ujian Dibuat", f"Mapel: {minutes.exam_subject}, {minutes.date_text}, Ruang {minutes.room}", user)
        return True, minutes, "Berita acara berhasil disimpan"

    @staticmethod
    def get_minutes_list(user):
        query = ExamMinutes.query
        if not ExamService.can_view_all(user):
            query = query.filter_by(created_by_id=user.id)
        return query.order_by(ExamMinutes.created_at.desc(), ExamMinutes.id.desc()).all()

    @staticmethod
    def get_minutes(minutes_id, user):
        """A single record the user is allowed to see, else None"""
        minutes = db.session.get(ExamMinutes, minutes_id)
        if minutes and (ExamService.can_view_all(user) or minutes.created_by_id == user.id):
            return minutes
        return None

    @staticmethod
    def delete_minutes(minutes_id, user):
        minutes = db.session.get(ExamMinutes, minutes_id)
        if not minutes or (not user.is_admin and minutes.created_by_id != user.id):
            return False, "Berita acara tidak ditemukan"

        details = f"Mapel: {minutes.exam_subject}, {minutes.date_text}"
        try:
            db.session.delete(minutes)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting exam minutes %s", minutes_id)
            return False, f"Gagal menghapus berita acara: {str(e)}"

        CommunicationService.add_activity_log("Berita Acara Ujian Dihapus", details, user)
        return True, "Berita acara berhasil dihapus"

    # ---- daftar hadir pengawas ----

    @staticmethod
    def create_proctor_attendance(data, user):
        """Record a signed proctor attendance entry"""
        exam_date = parse_date(data.get('exam_date'))
        if exam_date is None:
            return False, "Tanggal ujian tidak valid"

        checks = [
            validate_text_length(data.get('exam_subject'), 'Mata ujian', 3, 100),
            validate_text_length(data.get('room'), 'Ruang ujian', 1, 50),
            ExamService._check_times(data.get('start_time') or '', data.get('end_time') or ''),
            validate_url(data.get('signature_url'), 'URL tanda tangan'),
        ]
        for is_valid, message in checks:
            if not is_valid:
                return False, message

        proctor_name = (data.get('proctor_name') or '').strip() or user.display_name
        entry = ProctorAttendance(
            exam_date=exam_date,
            exam_subject=data['exam_subject'].strip(),
            room=data['room'].strip(),
            start_time=data['start_time'].strip(),
            end_time=data['end_time'].strip(),
            signature_url=data['signature_url'].strip(),
            proctor_name=proctor_name,
            created_by_id=user.id
        )
        try:
            db.session.add(entry)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error saving proctor attendance")
            return False, f"Gagal menyimpan daftar hadir: {str(e)}"

        CommunicationService.add_activity_log(
            "Daftar Hadir Pengawas Diisi",
            f"{proctor_name}: {entry.exam_subject}, {format_date_id(exam_date)}, Ruang {entry.room}",
            user
        )
        return True, "Daftar hadir pengawas berhasil disimpan"

    @staticmethod
    def get_proctor_attendance(user, exam_date=None):
        query = ProctorAttendance.query
        if not ExamService.can_view_all(user):
            query = query.filter_by(created_by_id=user.id)
        if exam_date:
            query = query.filter_by(exam_date=exam_date)
        return query.order_by(ProctorAttendance.exam_date.desc(),
                              ProctorAttendance.start_time,
                              ProctorAttendance.room).all()

    @staticmethod
    def delete_proctor_attendance(entry_id, user):
        entry = db.session.get(ProctorAttendance, entry_id)
        if not entry or (not user.is_admin and entry.created_by_id != user.id):
            return False, "Data daftar hadir tidak ditemukan"

        details = f"{entry.proctor_name}: {entry.exam_subject}, {format_date_id(entry.exam_date)}"
        try:
            db.session.delete(entry)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting proctor attendance %s", entry_id)
            return False, f"Gagal menghapus daftar hadir: {str(e)}"

        CommunicationService.add_activity_log("Daftar Hadir Pengawas Dihapus", details, user)
        return True, "Data daftar hadir berhasil dihapus"
