"""
Request helpers shared by the SkorZen route modules
"""

from datetime import date

from flask import request, make_response, flash, redirect, url_for

from models.grades import Grade
from models.student import Student
from services.academic_service import AcademicService
from services.grade_service import GradeService
from utils.calendar_helpers import month_name, FIRST_ACADEMIC_YEAR, LAST_ACADEMIC_YEAR, SEMESTERS

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

def is_ajax_request():
    """Check if the current request is an AJAX request"""
    return (request.headers.get('X-Requested-With') == 'XMLHttpRequest' or
            request.is_json)

def request_data():
    """JSON body for AJAX calls, else the submitted form"""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form

def period_args(default_all_months=False):
    """
    (year, month) from the query string. month is None when 'all' is chosen
    (or nothing is chosen and default_all_months is set).
    """
    today = date.today()
    year = request.args.get('year', type=int) or today.year
    if not FIRST_ACADEMIC_YEAR <= year <= LAST_ACADEMIC_YEAR + 1:
        year = today.year
    month_arg = request.args.get('month', '')
    if month_arg == 'all' or (not month_arg and default_all_months):
        return year, None
    try:
        month = int(month_arg) if month_arg else today.month
    except ValueError:
        month = today.month
    if month < 1 or month > 12:
        month = today.month
    return year, month

def reject_all_months(endpoint, year):
    """Redirect back to a per-month page when a whole year was requested"""
    flash('Rekap kehadiran hanya tersedia per bulan, silakan pilih bulan', 'warning')
    return redirect(url_for(endpoint, year=year))

def period_label(year, month):
    return f"{month_name(month)} {year}" if month else f"Tahun {year}"

def excel_response(excel_data, filename):
    """Attachment response for generated xlsx bytes"""
    response = make_response(excel_data)
    response.headers['Content-Type'] = XLSX_CONTENT_TYPE
    response.headers['Content-Disposition'] = f'attachment; filename={filename}'
    return response

def pdf_response(pdf_bytes, filename):
    response = make_response(pdf_bytes)
    response.headers['Content-Type'] = 'application/pdf'
    response.headers['Content-Disposition'] = f'attachment; filename={filename}'
    return response

def missing_grades_context():
    """Filter values and results for the Rekap Nilai Kosong page"""

    academic_year = request.args.get('academic_year') or AcademicService.get_default_academic_year()
    semester = request.args.get('semester', type=int) or 1
    subjects = request.args.getlist('subjects')
    component = request.args.get('component', 'tugas')
    class_name = request.args.get('class_name') or None

    context = {
        'academic_year': academic_year, 'semester': semester, 'subjects': subjects,
        'component': component, 'class_name': class_name,
        'academic_years': AcademicService.get_active_academic_years(),
        'semesters': SEMESTERS, 'components': Grade.COMPONENT_LABELS,
        'subject_options': AcademicService.get_subjects(),
        'class_names': Student.get_class_names(),
        'searched': bool(subjects), 'success': False, 'rows': [], 'message': None,
    }
    if subjects:
        success, rows, message = GradeService.get_missing_grades(
            academic_year, semester, subjects, component, class_name)
        context.update(success=success, rows=rows, message=message)
    return context
