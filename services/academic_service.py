"""
Academic settings service for SkorZen School Portal
Academic years, subject master, KKM values and school holidays
"""

import logging

from sqlalchemy import func

from database import db, DatabaseError
from models.academic import AcademicYearSetting, Subject, SchoolHoliday
from models.grades import KkmSetting
from services.communication_service import CommunicationService
from utils.calendar_helpers import get_academic_years, get_current_academic_year, year_month_range
from utils.db_helpers import safe_add_and_commit, safe_delete_and_commit
from utils.validators import validate_academic_year, validate_score, validate_text_length, parse_date

logger = logging.getLogger(__name__)

class AcademicService:
    """Service for academic configuration"""

    # ---- academic years ----

    @staticmethod
    def get_year_settings():
        """All selectable years with their activation flag, newest first"""
        active = {s.year: s.is_active for s in AcademicYearSetting.query.all()}
        return [{'year': year, 'is_active': active.get(year, False)} for year in get_academic_years()]

    @staticmethod
    def get_active_academic_years():
        """Active years newest first; the current year when none is active"""
        rows = AcademicYearSetting.query.filter_by(is_active=True).all()
        years = sorted((row.year for row in rows), reverse=True)
        return years or [get_current_academic_year()]

    @staticmethod
    def get_default_academic_year(active_years=None):
        """Current academic year when active, otherwise the newest active one"""
        active_years = active_years or AcademicService.get_active_academic_years()
        current = get_current_academic_year()
        return current if current in active_years else active_years[0]

    @staticmethod
    def set_academic_year_active(year, is_active, user=None):
        """Activate or deactivate an academic year"""
        is_valid, message = validate_academic_year(year)
        if not is_valid:
            return False, message
        if year not in get_academic_years():
            return False, "Tahun ajaran di luar rentang yang tersedia"

        try:
            setting = AcademicYearSetting.query.filter_by(year=year).first()
            if setting is None:
                setting = AcademicYearSetting(year=year)
                db.session.add(setting)
            setting.is_active = bool(is_active)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error updating academic year %s", year)
            return False, f"Gagal memperbarui tahun ajaran: {str(e)}"

        state = "diaktifkan" if is_active else "dinonaktifkan"
        CommunicationService.add_activity_log(
            "Status Tahun Ajaran Diubah", f"Tahun ajaran {year} {state}", user)
        return True, f"Tahun ajaran {year} berhasil {state}"

    # ---- subjects ----

    @staticmethod
    def get_subjects():
        return Subject.query.order_by(Subject.name).all()

    @staticmethod
    def add_subject(name, user=None):
        """Add a subject to the master list"""
        name = (name or '').strip()
        is_valid, message = validate_text_length(name, 'Nama mata pelajaran', 2, 100)
        if not is_valid:
            return False, message

        existing = Subject.query.filter(func.lower(Subject.name) == name.lower()).first()
        if existing:
            return False, f"Mata pelajaran '{existing.name}' sudah ada"

        try:
            success, message = safe_add_and_commit(Subject(name=name))
        except DatabaseError as e:
            return False, f"Gagal menambah mata pelajaran: {str(e)}"
        if not success:
            return False, message

        CommunicationService.add_activity_log("Mata Pelajaran Ditambahkan", f"Mapel: {name}", user)
        return True, f"Mata pelajaran {name} berhasil ditambahkan"

    @staticmethod
    def delete_subject(subject_id, user=None):
        subject = db.session.get(Subject, subject_id)
        if not subject:
            return False, "Mata pelajaran tidak ditemukan"

        name = subject.name
        try:
            safe_delete_and_commit(subject)
        except DatabaseError as e:
            return False, f"Gagal menghapus mata pelajaran: {str(e)}"

        CommunicationService.add_activity_log("Mata Pelajaran Dihapus", f"Mapel: {name}", user)
        return True, f"Mata pelajaran {name} berhasil dihapus"

    # ---- KKM ----

    @staticmethod
    def get_kkm_settings(academic_year):
        """KKM value for every master subject in a year, defaulting when unset"""
        stored = {
            s.subject: s.kkm_value
            for s in KkmSetting.query.filter_by(academic_year=academic_year).all()
        }
        return [
            {'subject': name, 'kkm_value': stored.get(name, KkmSetting.DEFAULT_KKM), 'is_set': name in stored}
            for name in Subject.get_names()
        ]

    @staticmethod
    def save_kkm(subject, academic_year, kkm_value, user=None):
        """Insert or update the KKM for a subject and year"""
        is_valid, message = validate_academic_year(academic_year)
        if not is_valid:
            return False, message
        if not subject:
            return False, "Mata pelajaran wajib dipilih"
        is_valid, message = validate_score(kkm_value, 'KKM')
        if not is_valid:
            return False, message

        try:
            setting = KkmSetting.query.filter_by(subject=subject, academic_year=academic_year).first()
            if setting is None:
                setting = KkmSetting(subject=subject, academic_year=academic_year)
                db.session.add(setting)
            setting.kkm_value = float(kkm_value)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error saving KKM for %s %s", subject, academic_year)
            return False, f"Gagal menyimpan KKM: {str(e)}"

        CommunicationService.add_activity_log(
            "KKM Diperbarui", f"Mapel: {subject}, TA: {academic_year}, KKM: {setting.kkm_value}", user)
        return True, f"KKM {subject} berhasil disimpan"

    # ---- holidays ----

    @staticmethod
    def get_holidays(year, month=None):
        start, end = year_month_range(year, month)
        return (SchoolHoliday.query
                .filter(SchoolHoliday.date >= start, SchoolHoliday.date <= end)
                .order_by(SchoolHoliday.date)
                .all())

    @staticmethod
    def toggle_holiday(date_value, description, user=None):
        """Add the date as a holiday, or remove it when it already is one"""
        holiday_date = parse_date(date_value)
        if holiday_date is None:
            return False, "Tanggal harus dalam format YYYY-MM-DD"

        try:
            existing = SchoolHoliday.query.filter_by(date=holiday_date).first()
            if existing:
                db.session.delete(existing)
                db.session.commit()
                action, message = "Hari Libur Dihapus", "Hari libur berhasil dihapus"
            else:
                description = (description or '').strip() or 'Hari Libur'
                db.session.add(SchoolHoliday(date=holiday_date, description=description[:200]))
                db.session.commit()
                action, message = "Hari Libur Ditambahkan", "Hari libur berhasil ditambahkan"
        except Exception as e:
            db.session.rollback()
            logger.exception("Error toggling holiday %s", holiday_date)
            return False, f"Gagal memperbarui hari libur: {str(e)}"

        CommunicationService.add_activity_log(action, f"Tanggal: {holiday_date.isoformat()}", user)
        return True, message
