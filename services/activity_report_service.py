"""
Activity report service for SkorZen School Portal
Laporan kegiatan filed by staff under their additional duties
"""

import logging

from database import db
from models.reports import ActivityReport
from services.communication_service import CommunicationService
from utils.calendar_helpers import year_month_range
from utils.roles import duty_label, TU_STAFF_DUTIES
from utils.validators import validate_text_length, parse_date

logger = logging.getLogger(__name__)

class ActivityReportService:
    """Service for activity reports"""

    @staticmethod
    def _validate(data):
        checks = [
            validate_text_length(data.get('title'), 'Judul', 5, 150),
            validate_text_length(data.get('content'), 'Isi laporan', 10, 2000),
        ]
        for is_valid, message in checks:
            if not is_valid:
                return False, message
        if parse_date(data.get('date')) is None:
            return False, "Tanggal kegiatan tidak valid"
        return True, "Valid report"

    @staticmethod
    def save_report(data, user, report_id=None):
        """Create a report, or update one of the user's own reports"""
        activity_id = data.get('activity_id')
        if activity_id not in user.reportable_duties:
            return False, "Anda tidak memiliki tugas untuk kegiatan ini"

        is_valid, message = ActivityReportService._validate(data)
        if not is_valid:
            return False, message

        try:
            if report_id:
                report = db.session.get(ActivityReport, report_id)
                if not report or report.created_by_id != user.id:
                    return False, "Laporan tidak ditemukan"
                action = "Laporan Kegiatan Diperbarui"
            else:
                report = ActivityReport(created_by_id=user.id, created_by_name=user.display_name)
                db.session.add(report)
                action = "Laporan Kegiatan Dibuat"

            report.activity_id = activity_id
            report.activity_name = duty_label(activity_id)
            report.title = data['title'].strip()
            report.content = data['content'].strip()
            report.date = parse_date(data['date'])
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error saving activity report")
            return False, f"Gagal menyimpan laporan: {str(e)}"

        CommunicationService.add_activity_log(
            action, f"Kegiatan: {report.activity_name}, Judul: {report.title}", user)
        return True, "Laporan kegiatan berhasil disimpan"

    @staticmethod
    def delete_report(report_id, user):
        """Delete a report; admins may delete any, staff only their own"""
        report = db.session.get(ActivityReport, report_id)
        if not report or (not user.is_admin and report.created_by_id != user.id):
            return False, "Laporan tidak ditemukan"

        details = f"Kegiatan: {report.activity_name}, Judul: {report.title}"
        try:
            db.session.delete(report)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting activity report %s", report_id)
            return False, f"Gagal menghapus laporan: {str(e)}"

        CommunicationService.add_activity_log("Laporan Kegiatan Dihapus", details, user)
        return True, "Laporan kegiatan berhasil dihapus"

    @staticmethod
    def get_user_reports(user_id):
        return (ActivityReport.query
                .filter_by(created_by_id=user_id)
                .order_by(ActivityReport.date.desc(), ActivityReport.id.desc())
                .all())

    @staticmethod
    def get_grouped_reports(activity_id=None):
        """
        Reports grouped by activity. Groups are ordered by activity name and
        reports inside a group newest first.
        """
        query = ActivityReport.query
        if activity_id:
            query = query.filter_by(activity_id=activity_id)
        reports = query.order_by(ActivityReport.date.desc(), ActivityReport.id.desc()).all()

        groups = {}
        for report in reports:
            group = groups.setdefault(report.activity_id, {
                'activity_id': report.activity_id,
                'activity_name': report.activity_name,
                'reports': [],
            })
            group['reports'].append(report)
        return sorted(groups.values(), key=lambda g: g['activity_name'].lower())

    @staticmethod
    def get_tu_combined_reports(year, month=None):
        """Reports of tata usaha duties in a period, grouped in TU role order"""
        start, end = year_month_range(year, month)
        reports = (ActivityReport.query
                   .filter(ActivityReport.activity_id.in_(TU_STAFF_DUTIES),
                           ActivityReport.date >= start,
                           ActivityReport.date <= end)
                   .order_by(ActivityReport.date.desc(), ActivityReport.id.desc())
                   .all())

        groups = []
        for duty in TU_STAFF_DUTIES:
            duty_reports = [r for r in reports if r.activity_id == duty]
            if duty_reports:
                groups.append({
                    'activity_id': duty,
                    'activity_name': duty_label(duty),
                    'reports': duty_reports,
                })
        return groups
