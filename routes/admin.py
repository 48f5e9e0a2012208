"""
Admin portal routes for SkorZen School Portal
Handles all administrator functionality
"""

import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify, current_app

from database import db
from models.attendance import TeacherAttendance
from models.communication import Announcement, ArchiveLink
from models.grades import Grade, GradeWeights
from models.settings import PREDEFINED_CLASSES, STAT_KEYS
from models.student import Student
from models.user import User
from routes.auth import login_required, leadership_read_required, get_current_user
from routes.common import (is_ajax_request, request_data, period_args, period_label, reject_all_months,
                           excel_response, pdf_response, missing_grades_context)
from services.academic_service import AcademicService
from services.activity_report_service import ActivityReportService
from services.admin_service import AdminService
from services.agenda_service import AgendaService
from services.attendance_service import AttendanceService
from services.communication_service import CommunicationService
from services.excel_export_service import ExcelExportService
from services.grade_service import GradeService
from services.reporting_service import ReportingService
from services.school_service import SchoolService
from services.student_service import StudentService
from services.violation_service import ViolationService
from utils.calendar_helpers import get_academic_years, MONTHS, SEMESTERS
from utils.db_helpers import ListPagination
from utils.roles import DUTY_CHOICES, REPORTABLE_DUTIES, duty_label

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)

def _respond(success, message, endpoint, **values):
    """JSON for AJAX callers, else flash and redirect"""
    if is_ajax_request():
        return jsonify({'success': success, 'message': message}), (200 if success else 400)
    flash(message, 'success' if success else 'error')
    return redirect(url_for(endpoint, **values))

@admin_bp.route('/dashboard')
@leadership_read_required
def dashboard():
    """Admin dashboard with overview statistics"""
    stats = AdminService.get_dashboard_stats(current_app.config['RECENT_ACTIVITY_LIMIT'])
    return render_template('admin/dashboard.html', stats=stats)

# ---- students ----

@admin_bp.route('/students')
@login_required(User.ROLE_ADMIN)
def students():
    page = request.args.get('page', 1, type=int)
    search = request.args.get('search', '').strip()
    class_name = request.args.get('class_name', '')
    pagination = StudentService.get_students_paginated(
        page, search, class_name or None, current_app.config['ITEMS_PER_PAGE'])
    return render_template('admin/students.html', pagination=pagination, search=search,
                           class_name=class_name, class_names=Student.get_class_names())

@admin_bp.route('/students/add', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def add_student():
    data = request_data()
    success, message = StudentService.add_student({
        'student_code': data.get('student_code'),
        'name': data.get('name'),
        'nis': data.get('nis'),
        'class_name': data.get('class_name'),
    }, get_current_user())
    return _respond(success, message, 'admin.students')

@admin_bp.route('/students/<int:student_id>/edit', methods=['GET', 'POST'])
@login_required(User.ROLE_ADMIN)
def edit_student(student_id):
    student = db.get_or_404(Student, student_id)
    if request.method == 'POST':
        success, message = StudentService.update_student(student_id, {
            'name': request.form.get('name'),
            'nis': request.form.get('nis'),
            'class_name': request.form.get('class_name'),
        }, get_current_user())
        flash(message, 'success' if success else 'error')
        if success:
            return redirect(url_for('admin.students'))
    return render_template('admin/student_edit.html', student=student)

@admin_bp.route('/students/<int:student_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_student(student_id):
    success, message = StudentService.delete_student(student_id, get_current_user())
    return _respond(success, message, 'admin.students')

@admin_bp.route('/students/import', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def import_students():
    """Bulk upsert students from an Excel file"""
    upload = request.files.get('file')
    if not upload or not upload.filename:
        flash('Pilih file Excel terlebih dahulu', 'error')
        return redirect(url_for('admin.students'))

    extension = upload.filename.rsplit('.', 1)[-1].lower() if '.' in upload.filename else ''
    if extension not in current_app.config['ALLOWED_EXTENSIONS']:
        flash('Format file harus .xlsx atau .xls', 'error')
        return redirect(url_for('admin.students'))

    success, summary, message = StudentService.import_students(upload.read(), get_current_user())
    flash(message, 'success' if success else 'error')
    for error in (summary or {}).get('errors', [])[:10]:
        flash(error, 'warning')
    return redirect(url_for('admin.students'))

@admin_bp.route('/students/template')
@login_required(User.ROLE_ADMIN)
def student_template():
    wb = ExcelExportService.student_import_template()
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'template_import_siswa.xlsx')

@admin_bp.route('/students/export')
@login_required(User.ROLE_ADMIN)
def export_students():
    class_name = request.args.get('class_name') or None
    wb = ExcelExportService.export_students(StudentService.get_students_by_class(class_name))
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'data_siswa.xlsx')

@admin_bp.route('/students/<student_code>/report')
@login_required(User.ROLE_ADMIN)
def report_card(student_code):
    report = GradeService.get_report_card(student_code)
    if report is None:
        flash('Siswa tidak ditemukan', 'error')
        return redirect(url_for('admin.students'))
    return render_template('shared/report_card.html', report=report,
                           print_settings=SchoolService.get_print_settings(),
                           pdf_url=url_for('admin.report_card_pdf', student_code=student_code))

@admin_bp.route('/students/<student_code>/report.pdf')
@login_required(User.ROLE_ADMIN)
def report_card_pdf(student_code):
    report = GradeService.get_report_card(student_code)
    if report is None:
        flash('Siswa tidak ditemukan', 'error')
        return redirect(url_for('admin.students'))
    try:
        pdf_bytes = ReportingService.generate_report_card_pdf(report)
    except Exception as e:
        logger.exception("Error generating report card for %s", student_code)
        flash(f'Gagal membuat PDF: {str(e)}', 'error')
        return redirect(url_for('admin.report_card', student_code=student_code))
    return pdf_response(pdf_bytes, f'rapor_{report["student"].student_code}.pdf')

# ---- grades ----

def _grade_filters():
    return {
        'class_name': request.args.get('class_name', ''),
        'academic_year': request.args.get('academic_year', ''),
        'semester': request.args.get('semester', type=int) or '',
        'subject': request.args.get('subject', ''),
        'search': request.args.get('search', '').strip(),
    }

@admin_bp.route('/grades')
@leadership_read_required
def grades():
    filters = _grade_filters()
    sort_by = request.args.get('sort_by', 'name')
    sort_dir = 'desc' if request.args.get('sort_dir') == 'desc' else 'asc'
    rows = GradeService.get_grade_rows(filters, sort_by=sort_by, sort_dir=sort_dir)
    pagination = ListPagination(rows, request.args.get('page', 1, type=int), current_app.config['ITEMS_PER_PAGE'])
    return render_template('admin/grades.html', pagination=pagination, filters=filters,
                           sort_by=sort_by, sort_dir=sort_dir,
                           class_names=Student.get_class_names(),
                           academic_years=AcademicService.get_active_academic_years(),
                           subjects=AcademicService.get_subjects(), semesters=SEMESTERS)

@admin_bp.route('/grades/<int:grade_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_grade(grade_id):
    success, message = GradeService.delete_grade(grade_id, get_current_user())
    return _respond(success, message, 'admin.grades')

@admin_bp.route('/grades/export')
@leadership_read_required
def export_grades():
    sort_by = request.args.get('sort_by', 'name')
    sort_dir = 'desc' if request.args.get('sort_dir') == 'desc' else 'asc'
    rows = GradeService.get_grade_rows(_grade_filters(), sort_by=sort_by, sort_dir=sort_dir)
    wb = ExcelExportService.export_grades(rows)
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'data_nilai.xlsx')

@admin_bp.route('/grades/missing')
@login_required(User.ROLE_ADMIN)
def missing_grades():
    context = missing_grades_context()
    return render_template('shared/missing_grades.html', export_endpoint='admin.export_missing_grades',
                           form_endpoint='admin.missing_grades', **context)

@admin_bp.route('/grades/missing/export')
@login_required(User.ROLE_ADMIN)
def export_missing_grades():
    context = missing_grades_context()
    if not context['searched'] or not context['success']:
        flash(context.get('message') or 'Lengkapi filter terlebih dahulu', 'error')
        return redirect(url_for('admin.missing_grades', **request.args.to_dict(flat=False)))
    wb = ExcelExportService.export_missing_grades(
        context['rows'], context['academic_year'], context['semester'], context['component'])
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'rekap_nilai_kosong.xlsx')

@admin_bp.route('/weights', methods=['GET', 'POST'])
@login_required(User.ROLE_ADMIN)
def weights():
    """Bobot penilaian and effective days"""
    if request.method == 'POST':
        data = {field: request.form.get(field, '') for field in
                GradeWeights.WEIGHT_FIELDS + ('effective_days_odd', 'effective_days_even')}
        success, message = GradeService.update_weights(data, get_current_user())
        flash(message, 'success' if success else 'error')
        if success:
            return redirect(url_for('admin.weights'))
        return render_template('admin/weights.html', weights=data, labels=GradeWeights.WEIGHT_LABELS)
    return render_template('admin/weights.html', weights=GradeService.get_weights().to_dict(),
                           labels=GradeWeights.WEIGHT_LABELS)

# ---- academic settings ----

@admin_bp.route('/academic')
@login_required(User.ROLE_ADMIN)
def academic_settings():
    """Academic years, subject master data and KKM"""
    kkm_year = request.args.get('kkm_year') or AcademicService.get_default_academic_year()
    return render_template('admin/academic_settings.html',
                           year_settings=AcademicService.get_year_settings(),
                           subjects=AcademicService.get_subjects(),
                           kkm_year=kkm_year,
                           kkm_settings=AcademicService.get_kkm_settings(kkm_year),
                           academic_years=get_academic_years())

@admin_bp.route('/academic/years', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def toggle_academic_year():
    data = request_data()
    is_active = str(data.get('is_active', '')).lower() in ('1', 'true', 'on', 'yes')
    success, message = AcademicService.set_academic_year_active(data.get('year'), is_active, get_current_user())
    return _respond(success, message, 'admin.academic_settings')

@admin_bp.route('/academic/subjects', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def add_subject():
    success, message = AcademicService.add_subject(request_data().get('name'), get_current_user())
    return _respond(success, message, 'admin.academic_settings')

@admin_bp.route('/academic/subjects/<int:subject_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_subject(subject_id):
    success, message = AcademicService.delete_subject(subject_id, get_current_user())
    return _respond(success, message, 'admin.academic_settings')

@admin_bp.route('/academic/kkm', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def save_kkm():
    data = request_data()
    year = data.get('academic_year')
    success, message = AcademicService.save_kkm(data.get('subject'), year, data.get('kkm_value'), get_current_user())
    return _respond(success, message, 'admin.academic_settings', kkm_year=year)

# ---- teachers ----

def _teacher_form_data():
    return {
        'display_name': request.form.get('display_name'),
        'email': request.form.get('email'),
        'username': request.form.get('username'),
        'password': request.form.get('password'),
        'assigned_subjects': request.form.getlist('assigned_subjects'),
        'additional_duties': request.form.getlist('additional_duties'),
        'signature_url': request.form.get('signature_url'),
    }

@admin_bp.route('/teachers')
@login_required(User.ROLE_ADMIN)
def teachers():
    return render_template('admin/teachers.html', teachers=AdminService.get_teachers(),
                           subjects=AcademicService.get_subjects(), duty_choices=DUTY_CHOICES)

@admin_bp.route('/teachers/add', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def add_teacher():
    success, credentials, message = AdminService.add_teacher(_teacher_form_data(), get_current_user())
    if is_ajax_request():
        return jsonify({'success': success, 'message': message, 'credentials': credentials}), (200 if success else 400)
    flash(message, 'success' if success else 'error')
    return redirect(url_for('admin.teachers'))

@admin_bp.route('/teachers/<int:teacher_id>/edit', methods=['GET', 'POST'])
@login_required(User.ROLE_ADMIN)
def edit_teacher(teacher_id):
    teacher = db.get_or_404(User, teacher_id)
    if teacher.is_admin:
        flash('Guru tidak ditemukan', 'error')
        return redirect(url_for('admin.teachers'))

    if request.method == 'POST':
        data = _teacher_form_data()
        data['is_active'] = request.form.get('is_active') == 'on'
        success, message = AdminService.update_teacher(teacher_id, data, get_current_user())
        flash(message, 'success' if success else 'error')
        if success:
            return redirect(url_for('admin.teachers'))

    return render_template('admin/teacher_edit.html', teacher=teacher,
                           subjects=AcademicService.get_subjects(), duty_choices=DUTY_CHOICES)

@admin_bp.route('/teachers/<int:teacher_id>/reset-password', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def reset_teacher_password(teacher_id):
    success, new_password, message = AdminService.reset_teacher_password(teacher_id, get_current_user())
    if is_ajax_request():
        return jsonify({'success': success, 'message': message, 'password': new_password}), (200 if success else 400)
    flash(message, 'success' if success else 'error')
    return redirect(url_for('admin.teachers'))

@admin_bp.route('/teachers/<int:teacher_id>/credentials')
@login_required(User.ROLE_ADMIN)
def teacher_credentials(teacher_id):
    """Initial credentials for the admin to hand out"""
    credentials = AdminService.get_teacher_credentials(teacher_id)
    if credentials is None:
        return jsonify({'success': False, 'message': 'Guru tidak ditemukan'}), 404
    return jsonify({'success': True, **credentials})

@admin_bp.route('/teachers/<int:teacher_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_teacher(teacher_id):
    success, message = AdminService.delete_teacher(teacher_id, get_current_user())
    return _respond(success, message, 'admin.teachers')

@admin_bp.route('/activity-log')
@login_required(User.ROLE_ADMIN)
def activity_log():
    return render_template('admin/activity_log.html', entries=CommunicationService.get_recent_activity(200))

# ---- teacher attendance ----

@admin_bp.route('/attendance')
@leadership_read_required
def attendance():
    year, month = period_args()
    teacher_id = request.args.get('teacher_id', type=int)
    records = AttendanceService.get_records(year, month, teacher_id)
    return render_template('admin/attendance.html', records=records, year=year, month=month,
                           teacher_id=teacher_id, teachers=AdminService.get_teachers(),
                           statuses=TeacherAttendance.STATUSES, months=MONTHS)

@admin_bp.route('/attendance/<int:record_id>/edit', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def update_attendance(record_id):
    data = request_data()
    success, message = AttendanceService.update_record(
        record_id, data.get('status'), data.get('notes', ''), get_current_user())
    return _respond(success, message, 'admin.attendance', **request.args.to_dict(flat=False))

@admin_bp.route('/attendance/<int:record_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_attendance(record_id):
    success, message = AttendanceService.delete_record(record_id, get_current_user())
    return _respond(success, message, 'admin.attendance', **request.args.to_dict(flat=False))

@admin_bp.route('/attendance/export')
@leadership_read_required
def export_attendance():
    year, month = period_args()
    records = AttendanceService.get_records(year, month, request.args.get('teacher_id', type=int))
    wb = ExcelExportService.export_daily_attendance(records, period_label(year, month))
    return excel_response(ExcelExportService.workbook_to_bytes(wb), f'kehadiran_guru_{year}_{month or "semua"}.xlsx')

@admin_bp.route('/attendance/summary')
@leadership_read_required
def attendance_summary():
    year, month = period_args()
    if month is None:
        return reject_all_months('admin.attendance_summary', year)
    rows = AttendanceService.get_monthly_summary(year, month)
    return render_template('admin/attendance_summary.html', rows=rows, year=year, month=month,
                           workdays=AttendanceService.get_workdays(year, month),
                           statuses=TeacherAttendance.STATUSES, months=MONTHS)

@admin_bp.route('/attendance/summary/export')
@leadership_read_required
def export_attendance_summary():
    year, month = period_args()
    if month is None:
        return reject_all_months('admin.attendance_summary', year)
    wb = ExcelExportService.export_attendance_summary(AttendanceService.get_monthly_summary(year, month), year, month)
    return excel_response(ExcelExportService.workbook_to_bytes(wb), f'rekap_kehadiran_{year}_{month:02d}.xlsx')

@admin_bp.route('/holidays', methods=['GET', 'POST'])
@login_required(User.ROLE_ADMIN)
def holidays():
    if request.method == 'POST':
        data = request_data()
        success, message = AcademicService.toggle_holiday(data.get('date'), data.get('description'), get_current_user())
        return _respond(success, message, 'admin.holidays')
    year, month = period_args(default_all_months=True)
    return render_template('admin/holidays.html', holidays=AcademicService.get_holidays(year, month),
                           year=year, month=month, months=MONTHS)

# ---- reports ----

@admin_bp.route('/activity-reports')
@leadership_read_required
def activity_reports():
    activity_id = request.args.get('activity_id') or None
    groups = ActivityReportService.get_grouped_reports(activity_id)
    activities = [(code, duty_label(code)) for code in REPORTABLE_DUTIES]
    return render_template('admin/activity_reports.html', groups=groups,
                           activity_id=activity_id, activities=activities)

@admin_bp.route('/activity-reports/export')
@leadership_read_required
def export_activity_reports():
    groups = ActivityReportService.get_grouped_reports(request.args.get('activity_id') or None)
    wb = ExcelExportService.export_activity_reports(groups)
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'laporan_kegiatan.xlsx')

@admin_bp.route('/activity-reports/<int:report_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_activity_report(report_id):
    success, message = ActivityReportService.delete_report(report_id, get_current_user())
    return _respond(success, message, 'admin.activity_reports')

def _violation_context():
    year, month = period_args(default_all_months=True)
    class_name = request.args.get('class_name') or None
    violations = ViolationService.get_report(year, month, class_name)
    return {
        'violations': violations,
        'class_totals': ViolationService.summarize_by_class(violations),
        'year': year, 'month': month, 'class_name': class_name,
        'period': period_label(year, month),
    }

@admin_bp.route('/violations')
@leadership_read_required
def violations():
    return render_template('admin/violations.html', class_names=ViolationService.get_class_options(),
                           months=MONTHS, **_violation_context())

@admin_bp.route('/violations/print')
@leadership_read_required
def print_violations():
    return render_template('admin/violations_print.html', print_settings=SchoolService.get_print_settings(),
                           **_violation_context())

@admin_bp.route('/violations/export')
@leadership_read_required
def export_violations():
    context = _violation_context()
    wb = ExcelExportService.export_violations(context['violations'], context['period'])
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'laporan_pelanggaran.xlsx')

@admin_bp.route('/violations/<int:violation_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_violation(violation_id):
    success, message = ViolationService.delete_violation(violation_id, get_current_user())
    return _respond(success, message, 'admin.violations')

def _agenda_filters():
    year, month = period_args()
    return year, month, request.args.get('teacher_id', type=int), request.args.get('class_name') or None

@admin_bp.route('/agendas')
@leadership_read_required
def agendas():
    year, month, teacher_id, class_name = _agenda_filters()
    return render_template('admin/agendas.html',
                           agendas=AgendaService.get_agendas(year, month, teacher_id, class_name),
                           year=year, month=month, teacher_id=teacher_id, class_name=class_name,
                           teachers=AdminService.get_teachers(), class_names=Student.get_class_names(),
                           months=MONTHS)

@admin_bp.route('/agendas/export')
@leadership_read_required
def export_agendas():
    year, month, teacher_id, class_name = _agenda_filters()
    wb = ExcelExportService.export_agendas(AgendaService.get_agendas(year, month, teacher_id, class_name),
                                           period_label(year, month))
    return excel_response(ExcelExportService.workbook_to_bytes(wb), 'agenda_kelas.xlsx')

@admin_bp.route('/agendas/<int:agenda_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_agenda(agenda_id):
    success, message = AgendaService.delete_agenda(agenda_id, get_current_user())
    return _respond(success, message, 'admin.agendas')

# ---- communication ----

def _announcement_form():
    data = request_data()
    return {
        'title': data.get('title'),
        'content': data.get('content'),
        'priority': data.get('priority') or Announcement.DEFAULT_PRIORITY,
        'extra_info': data.get('extra_info'),
    }

@admin_bp.route('/announcements')
@login_required(User.ROLE_ADMIN)
def announcements():
    edit_id = request.args.get('edit', type=int)
    editing = db.session.get(Announcement, edit_id) if edit_id else None
    return render_template('admin/announcements.html', announcements=Announcement.get_latest(),
                           editing=editing, priorities=Announcement.PRIORITIES)

@admin_bp.route('/announcements/add', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def create_announcement():
    success, _, message = CommunicationService.create_announcement(_announcement_form(), get_current_user())
    return _respond(success, message, 'admin.announcements')

@admin_bp.route('/announcements/<int:announcement_id>/edit', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def update_announcement(announcement_id):
    success, message = CommunicationService.update_announcement(
        announcement_id, _announcement_form(), get_current_user())
    return _respond(success, message, 'admin.announcements')

@admin_bp.route('/announcements/<int:announcement_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_announcement(announcement_id):
    success, message = CommunicationService.delete_announcement(announcement_id, get_current_user())
    return _respond(success, message, 'admin.announcements')

@admin_bp.route('/archive-links')
@login_required(User.ROLE_ADMIN)
def archive_links():
    edit_id = request.args.get('edit', type=int)
    editing = db.session.get(ArchiveLink, edit_id) if edit_id else None
    return render_template('admin/archive_links.html', links=CommunicationService.get_archive_links(),
                           editing=editing)

@admin_bp.route('/archive-links/save', methods=['POST'])
@admin_bp.route('/archive-links/<int:link_id>/save', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def save_archive_link(link_id=None):
    data = request_data()
    success, message = CommunicationService.save_archive_link({
        'title': data.get('title'),
        'url': data.get('url'),
        'description': data.get('description'),
    }, get_current_user(), link_id)
    return _respond(success, message, 'admin.archive_links')

@admin_bp.route('/archive-links/<int:link_id>/delete', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def delete_archive_link(link_id):
    success, message = CommunicationService.delete_archive_link(link_id, get_current_user())
    return _respond(success, message, 'admin.archive_links')

# ---- general settings ----

@admin_bp.route('/school-profile', methods=['GET', 'POST'])
@login_required(User.ROLE_ADMIN)
def school_profile():
    if request.method == 'POST':
        success, message = SchoolService.update_profile(request.form, get_current_user())
        flash(message, 'success' if success else 'error')
        return redirect(url_for('admin.school_profile'))
    return render_template('shared/school_profile.html', profile=SchoolService.get_profile(),
                           stat_keys=STAT_KEYS, classes=PREDEFINED_CLASSES, editable=True)

@admin_bp.route('/print-settings', methods=['GET', 'POST'])
@login_required(User.ROLE_ADMIN)
def print_settings():
    if request.method == 'POST':
        success, message = SchoolService.update_print_settings(request.form, get_current_user())
        flash(message, 'success' if success else 'error')
        if success:
            return redirect(url_for('admin.print_settings'))
        return render_template('admin/print_settings.html', settings=request.form)
    return render_template('admin/print_settings.html', settings=SchoolService.get_print_settings().to_dict())
