"""
Guru portal routes for SkorZen School Portal
Handles teacher and staff functionality, filtered by additional duties
"""

import functools
import logging
from datetime import date

from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify

from database import db
from models.attendance import TeacherAttendance
from models.communication import Announcement
from models.reports import ActivityReport, ClassAgenda
from models.settings import PREDEFINED_CLASSES, STAT_KEYS
from models.student import Student
from models.user import User
from routes.auth import login_required, duty_required, get_current_user
from routes.common import (is_ajax_request, request_data, period_args, period_label, reject_all_months,
                           excel_response, pdf_response, missing_grades_context)
from services.academic_service import AcademicService
from services.activity_report_service import ActivityReportService
from services.agenda_service import AgendaService
from services.attendance_service import AttendanceService
from services.communication_service import CommunicationService
from services.excel_export_service import ExcelExportService
from services.grade_service import GradeService
from services.reporting_service import ReportingService
from services.school_service import SchoolService
from services.student_service import StudentService
from services.violation_service import ViolationService
from utils.calendar_helpers import MONTHS, SEMESTERS
from utils.grading import days_present_from_percentage
from utils.roles import BK, KEPALA_TATA_USAHA, KESISWAAN, KURIKULUM, duty_label

logger = logging.getLogger(__name__)

guru_bp = Blueprint('guru', __name__)

def teaching_only(f):
    """Grade and class pages are closed to staff with non-teaching duties"""
    @functools.wraps(f)
    def decorated_function(*args, **kwargs):
        if get_current_user().is_non_teaching:
            flash('Menu ini hanya untuk guru pengajar', 'error')
            return redirect(url_for('guru.dashboard'))
        return f(*args, **kwargs)
    return decorated_function

def _respond(success, message, endpoint, **values):
    if is_ajax_request():
        return jsonify({'success': success, 'message': message}), (200 if success else 400)
    flash(message, 'success' if success else 'error')
    return redirect(url_for(endpoint, **values))

@guru_bp.route('/dashboard')
@login_required(User.ROLE_GURU)
def dashboard():
    """Guru dashboard: menu, latest announcements and today's attendance"""
    user = get_current_user()
    return render_template('guru/dashboard.html',
                           announcements=Announcement.get_latest(3),
                           today_record=AttendanceService.get_today_record(user.id))

# ---- grades ----

def _grade_page_args(user):
    academic_years = AcademicService.get_active_academic_years()
    subjects = GradeService.get_teacher_subject_options(user)
    return {
        'class_name': request.args.get('class_name', ''),
        'subject': request.args.get('subject') or (subjects[0] if subjects else ''),
        'semester': request.args.get('semester', type=int) or 1,
        'academic_year': request.args.get('academic_year') or AcademicService.get_default_academic_year(academic_years),
        'academic_years': academic_years,
        'subjects': subjects,
    }

@guru_bp.route('/grades')
@login_required(User.ROLE_GURU)
@teaching_only
def input_grades():
    """Grade input table for one class, subject, semester and year"""
    user = get_current_user()
    args = _grade_page_args(user)
    weights = GradeService.get_weights()
    effective_days = weights.effective_days_for(args['semester'])

    rows = []
    if args['class_name'] and args['subject']:
        for student in StudentService.get_students_by_class(args['class_name']):
            grade = GradeService.get_grade(student.student_code, args['subject'], args['semester'],
                                           args['academic_year'], user.id)
            rows.append({
                'student': student,
                'grade': grade,
                'days_present': days_present_from_percentage(grade.attendance, effective_days) if grade else 0,
            })

    return render_template('guru/input_grades.html', rows=rows, weights=weights,
                           effective_days=effective_days, semesters=SEMESTERS,
                           class_names=Student.get_class_names(), **args)

@guru_bp.route('/grades/save', methods=['POST'])
@login_required(User.ROLE_GURU)
@teaching_only
def save_grade():
    data = request_data()
    success, grade, message = GradeService.save_grade({
        'student_code': data.get('student_code'),
        'subject': data.get('subject'),
        'semester': data.get('semester'),
        'academic_year': data.get('academic_year'),
        'assignments': data.get('assignments'),
        'test': data.get('test'),
        'midterm': data.get('midterm'),
        'final_exam': data.get('final_exam'),
        'extracurricular': data.get('extracurricular'),
        'osis': data.get('osis'),
        'days_present': data.get('days_present'),
    }, get_current_user())

    if is_ajax_request():
        payload = {'success': success, 'message': message}
        if success:
            payload['final_grade'] = grade.final_grade
            payload['attendance'] = grade.attendance
        return jsonify(payload), (200 if success else 400)

    flash(message, 'success' if success else 'error')
    return redirect(url_for('guru.input_grades', class_name=data.get('class_name', ''),
                            subject=data.get('subject'), semester=data.get('semester'),
                            academic_year=data.get('academic_year')))

def _recap_filters():
    return {
        'class_name': request.args.get('class_name', ''),
        'academic_year': request.args.get('academic_year', ''),
        'semester': request.args.get('semester', type=int) or '',
        'subject': request.args.get('subject', ''),
        'search': request.args.get('search', '').strip(),
    }

@guru_bp.route('/grades/recap')
@login_required(User.ROLE_GURU)
@teaching_only
def grade_recap():
    """Rekap Nilai: the teacher's own grades with KKM status"""
    user = get_current_user()
    filters = _recap_filters()
    rows = GradeService.get_teacher_recap(user.id, filters)
    return render_template('guru/grade_recap.html', rows=rows, filters=filters,
                           class_names=Student.get_class_names(),
                           academic_years=AcademicService.get_active_academic_years(),
                           subjects=GradeService.get_teacher_subject_options(user), semesters=SEMESTERS)

@guru_bp.route('/grades/recap/export')
@login_required(User.ROLE_GURU)
@teaching_only
def export_grade_recap():
    user = get_current_user()
    rows = GradeService.get_teacher_recap(user.id, _recap_filters())
    wb = ExcelExportService.export_teacher_recap(rows, user.display_name)
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'rekap_nilai.xlsx')

@guru_bp.route('/students')
@login_required(User.ROLE_GURU)
@teaching_only
def students():
    class_name = request.args.get('class_name', '')
    roster = StudentService.get_students_by_class(class_name) if class_name else []
    return render_template('guru/students.html', students=roster, class_name=class_name,
                           class_names=Student.get_class_names())

@guru_bp.route('/students/<student_code>/report')
@login_required(User.ROLE_GURU)
@teaching_only
def report_card(student_code):
    report = GradeService.get_report_card(student_code)
    if report is None:
        flash('Siswa tidak ditemukan', 'error')
        return redirect(url_for('guru.students'))
    return render_template('shared/report_card.html', report=report,
                           print_settings=SchoolService.get_print_settings(),
                           pdf_url=url_for('guru.report_card_pdf', student_code=student_code))

@guru_bp.route('/students/<student_code>/report.pdf')
@login_required(User.ROLE_GURU)
@teaching_only
def report_card_pdf(student_code):
    report = GradeService.get_report_card(student_code)
    if report is None:
        flash('Siswa tidak ditemukan', 'error')
        return redirect(url_for('guru.students'))
    try:
        pdf_bytes = ReportingService.generate_report_card_pdf(report)
    except Exception as e:
        logger.exception("Error generating report card for %s", student_code)
        flash(f'Gagal membuat PDF: {str(e)}', 'error')
        return redirect(url_for('guru.report_card', student_code=student_code))
    return pdf_response(pdf_bytes, f'rapor_{report["student"].student_code}.pdf')

# ---- class agenda ----

@guru_bp.route('/agenda')
@login_required(User.ROLE_GURU)
@teaching_only
def agenda():
    user = get_current_user()
    year, month = period_args()
    edit_id = request.args.get('edit', type=int)
    editing = db.session.get(ClassAgenda, edit_id) if edit_id else None
    if editing and editing.teacher_id != user.id:
        editing = None
    class_name = request.args.get('class_name') or (editing.class_name if editing else '')
    roster = StudentService.get_students_by_class(class_name) if class_name else []
    return render_template('guru/agenda.html',
                           agendas=AgendaService.get_agendas(year, month, teacher_id=user.id),
                           editing=editing, class_name=class_name, roster=roster,
                           year=year, month=month, months=MONTHS,
                           class_names=Student.get_class_names(),
                           subjects=GradeService.get_teacher_subject_options(user))

@guru_bp.route('/agenda/save', methods=['POST'])
@guru_bp.route('/agenda/<int:agenda_id>/save', methods=['POST'])
@login_required(User.ROLE_GURU)
@teaching_only
def save_agenda(agenda_id=None):
    success, message = AgendaService.save_agenda({
        'class_name': request.form.get('class_name'),
        'subject': request.form.get('subject'),
        'date': request.form.get('date'),
        'period': request.form.get('period'),
        'learning_objective': request.form.get('learning_objective'),
        'topic': request.form.get('topic'),
        'absent_students': request.form.getlist('absent_students'),
        'reflection': request.form.get('reflection'),
    }, get_current_user(), agenda_id)
    return _respond(success, message, 'guru.agenda')

@guru_bp.route('/agenda/<int:agenda_id>/delete', methods=['POST'])
@login_required(User.ROLE_GURU)
@teaching_only
def delete_agenda(agenda_id):
    success, message = AgendaService.delete_agenda(agenda_id, get_current_user())
    return _respond(success, message, 'guru.agenda')

# ---- attendance ----

@guru_bp.route('/attendance', methods=['GET', 'POST'])
@login_required(User.ROLE_GURU)
def attendance():
    """Catat Kehadiran: the user's own daily attendance"""
    user = get_current_user()
    if request.method == 'POST':
        data = request_data()
        success, message = AttendanceService.record_attendance(
            user, data.get('date') or date.today().isoformat(), data.get('status'), data.get('notes', ''))
        return _respond(success, message, 'guru.attendance')

    today = date.today()
    return render_template('guru/attendance.html', today=today,
                           today_record=AttendanceService.get_today_record(user.id),
                           records=AttendanceService.get_records(today.year, today.month, user.id),
                           statuses=TeacherAttendance.STATUSES)

@guru_bp.route('/attendance/recap')
@login_required(User.ROLE_GURU)
def attendance_recap():
    """Rekap Kehadiran Saya"""
    year, month = period_args()
    if month is None:
        return reject_all_months('guru.attendance_recap', year)
    recap = AttendanceService.get_personal_recap(get_current_user(), year, month)
    return render_template('guru/attendance_recap.html', recap=recap, year=year, month=month,
                           months=MONTHS, statuses=TeacherAttendance.STATUSES)

# ---- information pages ----

@guru_bp.route('/announcements')
@login_required(User.ROLE_GURU)
def announcements():
    return render_template('guru/announcements.html', announcements=Announcement.get_latest())

@guru_bp.route('/school-profile')
@login_required(User.ROLE_GURU)
def school_profile():
    return render_template('shared/school_profile.html', profile=SchoolService.get_profile(),
                           stat_keys=STAT_KEYS, classes=PREDEFINED_CLASSES, editable=False)

@guru_bp.route('/archive-links')
@login_required(User.ROLE_GURU)
def archive_links():
    return render_template('guru/archive_links.html', links=CommunicationService.get_archive_links())

# ---- activity reports ----

@guru_bp.route('/activity-reports')
@login_required(User.ROLE_GURU)
def activity_reports():
    user = get_current_user()
    if not user.reportable_duties:
        flash('Anda tidak memiliki tugas tambahan untuk dilaporkan', 'error')
        return redirect(url_for('guru.dashboard'))

    edit_id = request.args.get('edit', type=int)
    editing = db.session.get(ActivityReport, edit_id) if edit_id else None
    if editing and editing.created_by_id != user.id:
        editing = None
    activities = [(code, duty_label(code)) for code in user.reportable_duties]
    return render_template('guru/activity_reports.html', reports=ActivityReportService.get_user_reports(user.id),
                           activities=activities, editing=editing)

@guru_bp.route('/activity-reports/save', methods=['POST'])
@guru_bp.route('/activity-reports/<int:report_id>/save', methods=['POST'])
@login_required(User.ROLE_GURU)
def save_activity_report(report_id=None):
    data = request_data()
    success, message = ActivityReportService.save_report({
        'activity_id': data.get('activity_id'),
        'title': data.get('title'),
        'content': data.get('content'),
        'date': data.get('date'),
    }, get_current_user(), report_id)
    return _respond(success, message, 'guru.activity_reports')

@guru_bp.route('/activity-reports/<int:report_id>/delete', methods=['POST'])
@login_required(User.ROLE_GURU)
def delete_activity_report(report_id):
    success, message = ActivityReportService.delete_report(report_id, get_current_user())
    return _respond(success, message, 'guru.activity_reports')

# ---- violations ----

@guru_bp.route('/violations', methods=['GET', 'POST'])
@login_required(User.ROLE_GURU)
@duty_required(KESISWAAN, BK)
def violations():
    """Catat Pelanggaran for kesiswaan and BK staff"""
    if request.method == 'POST':
        data = request_data()
        success, message = ViolationService.record_violation({
            'student_code': data.get('student_code'),
            'date': data.get('date'),
            'violation': data.get('violation'),
            'points': data.get('points'),
            'notes': data.get('notes'),
        }, get_current_user())
        return _respond(success, message, 'guru.violations', class_name=data.get('class_name', ''))

    class_name = request.args.get('class_name', '')
    roster = StudentService.get_students_by_class(class_name) if class_name else []
    return render_template('guru/violations.html', violations=ViolationService.get_recent(),
                           class_name=class_name, roster=roster, today=date.today(),
                           class_names=Student.get_class_names())

@guru_bp.route('/violations/<int:violation_id>/delete', methods=['POST'])
@login_required(User.ROLE_GURU)
@duty_required(KESISWAAN, BK)
def delete_violation(violation_id):
    success, message = ViolationService.delete_violation(violation_id, get_current_user())
    return _respond(success, message, 'guru.violations')

# ---- kurikulum ----

@guru_bp.route('/grades/missing')
@login_required(User.ROLE_GURU)
@duty_required(KURIKULUM)
def missing_grades():
    return render_template('shared/missing_grades.html', export_endpoint='guru.export_missing_grades',
                           form_endpoint='guru.missing_grades', **missing_grades_context())

@guru_bp.route('/grades/missing/export')
@login_required(User.ROLE_GURU)
@duty_required(KURIKULUM)
def export_missing_grades():
    context = missing_grades_context()
    if not context['searched'] or not context['success']:
        flash(context.get('message') or 'Lengkapi filter terlebih dahulu', 'error')
        return redirect(url_for('guru.missing_grades', **request.args.to_dict(flat=False)))
    wb = ExcelExportService.export_missing_grades(
        context['rows'], context['academic_year'], context['semester'], context['component'])
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'rekap_nilai_kosong.xlsx')

# ---- kepala tata usaha ----

@guru_bp.route('/tata-usaha/attendance')
@login_required(User.ROLE_GURU)
@duty_required(KEPALA_TATA_USAHA)
def tu_attendance_recap():
    year, month = period_args()
    if month is None:
        return reject_all_months('guru.tu_attendance_recap', year)
    return render_template('guru/tu_attendance_recap.html',
                           rows=AttendanceService.get_tu_staff_recap(year, month),
                           year=year, month=month, months=MONTHS, statuses=TeacherAttendance.STATUSES)

@guru_bp.route('/tata-usaha/attendance/export')
@login_required(User.ROLE_GURU)
@duty_required(KEPALA_TATA_USAHA)
def export_tu_attendance_recap():
    year, month = period_args()
    if month is None:
        return reject_all_months('guru.tu_attendance_recap', year)
    wb = ExcelExportService.export_tu_staff_recap(AttendanceService.get_tu_staff_recap(year, month), year, month)
    return excel_response(ExcelExportService.workbook_to_bytes(wb), f'rekap_kehadiran_tu_{year}_{month:02d}.xlsx')

@guru_bp.route('/tata-usaha/reports')
@login_required(User.ROLE_GURU)
@duty_required(KEPALA_TATA_USAHA)
def tu_combined_reports():
    year, month = period_args()
    return render_template('guru/tu_combined_reports.html',
                           groups=ActivityReportService.get_tu_combined_reports(year, month),
                           year=year, month=month, months=MONTHS)

@guru_bp.route('/tata-usaha/reports/export')
@login_required(User.ROLE_GURU)
@duty_required(KEPALA_TATA_USAHA)
def export_tu_combined_reports():
    year, month = period_args()
    wb = ExcelExportService.export_tu_combined_reports(
        ActivityReportService.get_tu_combined_reports(year, month), period_label(year, month))
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'laporan_gabungan_tu.xlsx')
