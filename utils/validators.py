"""
Validation utilities for SkorZen School Portal
Every validator returns an (is_valid, message) tuple.
"""

import re
from datetime import datetime, date
from urllib.parse import urlparse

ACADEMIC_YEAR_PATTERN = re.compile(r'^\d{4}/\d{4}$')
TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')

def validate_text_length(value, field_name, min_length=0, max_length=None, required=True):
    """Validate a free-text field against length bounds"""
    text = (value or '').strip()
    if not text:
        if required:
            return False, f"{field_name} wajib diisi"
        return True, f"Valid {field_name.lower()}"

    if len(text) < min_length:
        return False, f"{field_name} minimal {min_length} karakter"

    if max_length is not None and len(text) > max_length:
        return False, f"{field_name} maksimal {max_length} karakter"

    return True, f"Valid {field_name.lower()}"

def validate_student_code(student_code):
    """Validate student identifier (id siswa)"""
    if not student_code or len(student_code.strip()) == 0:
        return False, "ID Siswa wajib diisi"

    if len(student_code.strip()) < 3:
        return False, "ID Siswa minimal 3 karakter"

    if len(student_code) > 50:
        return False, "ID Siswa maksimal 50 karakter"

    if not re.match(r'^[a-zA-Z0-9_.-]+$', student_code.strip()):
        return False, "ID Siswa hanya boleh berisi huruf, angka, titik, strip, dan garis bawah"

    return True, "Valid student code"

def validate_nis(nis):
    """Validate NIS (nomor induk siswa): digits only"""
    if not nis or len(nis.strip()) == 0:
        return False, "NIS wajib diisi"

    if not nis.strip().isdigit():
        return False, "NIS hanya boleh berisi angka"

    if len(nis.strip()) < 5:
        return False, "NIS minimal 5 digit"

    if len(nis) > 20:
        return False, "NIS maksimal 20 digit"

    return True, "Valid NIS"

def validate_name(name, field_name="Nama"):
    """Validate person name"""
    return validate_text_length(name, field_name, min_length=3, max_length=100)

def validate_username(username):
    """Validate username format"""
    if not username or len(username.strip()) == 0:
        return False, "Username wajib diisi"

    if len(username) < 3:
        return False, "Username minimal 3 karakter"

    if len(username) > 80:
        return False, "Username maksimal 80 karakter"

    # Allow alphanumeric, dot and underscore
    if not re.match(r'^[A-Za-z0-9_.]+$', username):
        return False, "Username hanya boleh berisi huruf, angka, titik, dan garis bawah"

    return True, "Valid username"

def validate_password(password):
    """Validate password strength"""
    if not password:
        return False, "Password wajib diisi"

    if len(password) < 6:
        return False, "Password minimal 6 karakter"

    if len(password) > 128:
        return False, "Password maksimal 128 karakter"

    return True, "Valid password"

def validate_academic_year(academic_year):
    """Validate academic year string such as 2024/2025"""
    if not academic_year or not ACADEMIC_YEAR_PATTERN.match(academic_year.strip()):
        return False, "Format tahun ajaran harus YYYY/YYYY"

    first, second = academic_year.strip().split('/')
    if int(second) != int(first) + 1:
        return False, "Tahun ajaran harus berurutan, contoh 2024/2025"

    return True, "Valid academic year"

def validate_semester(semester):
    """Validate semester: 1 (Ganjil) or 2 (Genap)"""
    try:
        sem_int = int(semester)
    except (ValueError, TypeError):
        return False, "Semester harus berupa angka"
    if sem_int not in (1, 2):
        return False, "Semester harus 1 (Ganjil) atau 2 (Genap)"
    return True, "Valid semester"

def validate_score(value, field_name="Nilai", min_value=0, max_value=100):
    """Validate a numeric score within bounds"""
    try:
        number = float(value)
    except (ValueError, TypeError):
        return False, f"{field_name} harus berupa angka"

    if number < min_value or number > max_value:
        return False, f"{field_name} harus antara {min_value} dan {max_value}"

    return True, f"Valid {field_name.lower()}"

def validate_integer(value, field_name, min_value=None, max_value=None):
    """Validate an integer within optional bounds"""
    try:
        number = int(str(value).strip())
    except (ValueError, TypeError):
        return False, f"{field_name} harus berupa bilangan bulat"

    if min_value is not None and number < min_value:
        return False, f"{field_name} minimal {min_value}"

    if max_value is not None and number > max_value:
        return False, f"{field_name} maksimal {max_value}"

    return True, f"Valid {field_name.lower()}"

def validate_weights(data):
    """
    Validate the grade weight configuration.

    Every weight must be 0-100, effective days 1-200, and the five academic
    components must add up to exactly 100.
    """
    from models.grades import GradeWeights

    for field in GradeWeights.WEIGHT_FIELDS:
        is_valid, message = validate_score(data.get(field), f"Bobot {field}")
        if not is_valid:
            return False, message

    for field in ('effective_days_odd', 'effective_days_even'):
        is_valid, message = validate_integer(data.get(field), "Total hari efektif", 1, 200)
        if not is_valid:
            return False, message

    academic_total = sum(float(data.get(field)) for field in GradeWeights.ACADEMIC_FIELDS)
    if abs(academic_total - 100) > 1e-9:
        return False, ("Total bobot dari komponen penilaian akademik "
                       "(Tugas, Tes, PTS, PAS, Kehadiran) harus 100%")

    return True, "Valid weights"

def validate_date(date_str, allow_future=True):
    """Validate date format and optionally reject future dates"""
    if isinstance(date_str, datetime):
        value = date_str.date()
    elif isinstance(date_str, date):
        value = date_str
    elif isinstance(date_str, str):
        try:
            value = datetime.strptime(date_str, '%Y-%m-%d').date()
        except ValueError:
            return False, "Tanggal harus dalam format YYYY-MM-DD"
    else:
        return False, "Format tanggal tidak valid"

    if not allow_future and value > date.today():
        return False, "Tanggal tidak boleh di masa depan"

    return True, "Valid date"

def parse_date(date_str):
    """Parse YYYY-MM-DD into a date, returning None when invalid"""
    if isinstance(date_str, date):
        return date_str
    try:
        return datetime.strptime((date_str or '').strip(), '%Y-%m-%d').date()
    except ValueError:
        return None

def validate_time(value, field_name="Waktu"):
    """Validate a HH:MM time string"""
    if not value or not TIME_PATTERN.match(value.strip()):
        return False, f"{field_name} harus dalam format HH:MM"
    return True, f"Valid {field_name.lower()}"

def validate_url(url, field_name="URL", required=True):
    """Validate an http(s) URL"""
    text = (url or '').strip()
    if not text:
        if required:
            return False, f"{field_name} wajib diisi"
        return True, f"Valid {field_name.lower()}"

    parsed = urlparse(text)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        return False, f"{field_name} harus berupa URL yang valid (http/https)"

    return True, f"Valid {field_name.lower()}"

def validate_attendance_status(status):
    """Validate teacher attendance status"""
    from models.attendance import TeacherAttendance

    if status not in TeacherAttendance.STATUSES:
        return False, f"Status kehadiran harus salah satu dari: {', '.join(TeacherAttendance.STATUSES)}"

    return True, "Valid attendance status"
