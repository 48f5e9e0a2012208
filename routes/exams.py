"""
Exam administration routes for SkorZen School Portal
Berita acara and daftar hadir pengawas, shared by admins and teachers
"""

import logging
from datetime import date

from flask import Blueprint, render_template, request, redirect, url_for, flash

from models.exams import ExamMinutes
from routes.auth import login_required, get_current_user
from routes.common import request_data, pdf_response
from services.academic_service import AcademicService
from services.exam_service import ExamService, MONTH_NAMES
from services.reporting_service import ReportingService
from services.school_service import SchoolService
from utils.calendar_helpers import DAY_NAMES
from utils.validators import parse_date

logger = logging.getLogger(__name__)

exams_bp = Blueprint('exams', __name__)

MINUTES_FIELDS = [
    'exam_type', 'academic_year', 'exam_subject', 'day_name', 'day', 'month_name', 'year',
    'start_time', 'end_time', 'room', 'combined_classes', 'participants_x', 'participants_xi',
    'participants_xii', 'absent_count', 'present_numbers', 'absent_numbers',
    'attendance_list_count', 'minutes_count', 'notes', 'proctor_name', 'proctor_signature_url',
]

@exams_bp.route('/')
@login_required()
def index():
    return render_template('exams/index.html')

# ---- berita acara ----

@exams_bp.route('/berita-acara', methods=['GET', 'POST'])
@login_required()
def minutes():
    user = get_current_user()
    form = {}
    if request.method == 'POST':
        data = request_data()
        form = {field: data.get(field, '') for field in MINUTES_FIELDS}
        success, _, message = ExamService.create_minutes(form, user)
        flash(message, 'success' if success else 'error')
        if success:
            return redirect(url_for('exams.minutes'))

    today = date.today()
    defaults = {
        'exam_type': ExamMinutes.DEFAULT_EXAM_TYPE,
        'academic_year': AcademicService.get_default_academic_year(),
        'day': today.day,
        'month_name': MONTH_NAMES[today.month - 1],
        'year': today.year,
        'proctor_name': user.display_name,
        'proctor_signature_url': user.signature_url or '',
    }
    defaults.update({k: v for k, v in form.items() if v not in (None, '')})
    return render_template('exams/minutes.html', minutes_list=ExamService.get_minutes_list(user),
                           form=defaults, month_names=MONTH_NAMES, day_names=DAY_NAMES,
                           academic_years=AcademicService.get_active_academic_years())

@exams_bp.route('/berita-acara/<int:minutes_id>/print')
@login_required()
def print_minutes(minutes_id):
    record = ExamService.get_minutes(minutes_id, get_current_user())
    if record is None:
        flash('Berita acara tidak ditemukan', 'error')
        return redirect(url_for('exams.minutes'))
    return render_template('exams/minutes_print.html', minutes=record,
                           print_settings=SchoolService.get_print_settings())

@exams_bp.route('/berita-acara/<int:minutes_id>/pdf')
@login_required()
def minutes_pdf(minutes_id):
    record = ExamService.get_minutes(minutes_id, get_current_user())
    if record is None:
        flash('Berita acara tidak ditemukan', 'error')
        return redirect(url_for('exams.minutes'))
    try:
        pdf_bytes = ReportingService.generate_exam_minutes_pdf(record)
    except Exception as e:
        logger.exception("Error generating exam minutes PDF %s", minutes_id)
        flash(f'Gagal membuat PDF: {str(e)}', 'error')
        return redirect(url_for('exams.minutes'))
    return pdf_response(pdf_bytes, f'berita_acara_{record.id}.pdf')

@exams_bp.route('/berita-acara/<int:minutes_id>/delete', methods=['POST'])
@login_required()
def delete_minutes(minutes_id):
    success, message = ExamService.delete_minutes(minutes_id, get_current_user())
    flash(message, 'success' if success else 'error')
    return redirect(url_for('exams.minutes'))

# ---- daftar hadir pengawas ----

@exams_bp.route('/daftar-hadir', methods=['GET', 'POST'])
@login_required()
def proctor_attendance():
    user = get_current_user()
    if request.method == 'POST':
        data = request_data()
        success, message = ExamService.create_proctor_attendance({
            'exam_date': data.get('exam_date'),
            'exam_subject': data.get('exam_subject'),
            'room': data.get('room'),
            'start_time': data.get('start_time'),
            'end_time': data.get('end_time'),
            'signature_url': data.get('signature_url'),
            'proctor_name': data.get('proctor_name'),
        }, user)
        flash(message, 'success' if success else 'error')
        return redirect(url_for('exams.proctor_attendance'))

    exam_date = parse_date(request.args.get('date')) if request.args.get('date') else None
    return render_template('exams/proctor_attendance.html',
                           entries=ExamService.get_proctor_attendance(user, exam_date),
                           exam_date=exam_date, today=date.today())

@exams_bp.route('/daftar-hadir/print')
@login_required()
def print_proctor_attendance():
    exam_date = parse_date(request.args.get('date')) or date.today()
    return render_template('exams/proctor_attendance_print.html', exam_date=exam_date, signed_on=exam_date,
                           entries=ExamService.get_proctor_attendance(get_current_user(), exam_date),
                           print_settings=SchoolService.get_print_settings())

@exams_bp.route('/daftar-hadir/pdf')
@login_required()
def proctor_attendance_pdf():
    exam_date = parse_date(request.args.get('date')) or date.today()
    entries = ExamService.get_proctor_attendance(get_current_user(), exam_date)
    try:
        pdf_bytes = ReportingService.generate_proctor_attendance_pdf(entries, exam_date)
    except Exception as e:
        logger.exception("Error generating proctor attendance PDF for %s", exam_date)
        flash(f'Gagal membuat PDF: {str(e)}', 'error')
        return redirect(url_for('exams.proctor_attendance'))
    return pdf_response(pdf_bytes, f'daftar_hadir_pengawas_{exam_date.isoformat()}.pdf')

@exams_bp.route('/daftar-hadir/<int:entry_id>/delete', methods=['POST'])
@login_required()
def delete_proctor_attendance(entry_id):
    success, message = ExamService.delete_proctor_attendance(entry_id, get_current_user())
    flash(message, 'success' if success else 'error')
    return redirect(url_for('exams.proctor_attendance'))
