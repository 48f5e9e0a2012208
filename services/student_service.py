"""
Student service for SkorZen School Portal
Student CRUD, Excel import and roster queries
"""

import logging
from io import BytesIO

import openpyxl
from sqlalchemy import or_

from database import db
from models.student import Student
from services.communication_service import CommunicationService
from utils.db_helpers import paginate_query
from utils.validators import validate_student_code, validate_name, validate_nis

logger = logging.getLogger(__name__)

# Column headers of the import template, in order
IMPORT_HEADERS = ['Nama Siswa', 'NIS', 'Kelas', 'ID Siswa']

class StudentService:
    """Student service class"""

    @staticmethod
    def get_students_paginated(page=1, search='', class_name=None, per_page=15):
        """Students sorted by name with optional class filter and search"""
        query = Student.query
        if class_name:
            query = query.filter(Student.class_name == class_name)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Student.name.ilike(pattern),
                Student.nis.ilike(pattern),
                Student.student_code.ilike(pattern)
            ))
        return paginate_query(query.order_by(Student.name), page, per_page)

    @staticmethod
    def get_students_by_class(class_name=None):
        query = Student.query
        if class_name:
            query = query.filter(Student.class_name == class_name)
        return query.order_by(Student.name).all()

    @staticmethod
    def _validate_student_data(data):
        checks = [
            validate_student_code(data.get('student_code', '')),
            validate_name(data.get('name', ''), 'Nama siswa'),
            validate_nis(data.get('nis', '')),
        ]
        for is_valid, message in checks:
            if not is_valid:
                return False, message
        if not (data.get('class_name') or '').strip():
            return False, "Kelas wajib diisi"
        return True, "Valid student"

    @staticmethod
    def add_student(student_data, user=None):
        """Add a single student"""
        data = {k: (v or '').strip() for k, v in student_data.items()}
        is_valid, message = StudentService._validate_student_data(data)
        if not is_valid:
            return False, message

        code = Student.normalize_code(data['student_code'])
        if Student.query.filter_by(student_code=code).first():
            return False, f"ID Siswa {code} sudah digunakan"
        if Student.query.filter_by(nis=data['nis']).first():
            return False, f"NIS {data['nis']} sudah terdaftar"

        student = Student(
            student_code=code,
            name=data['name'],
            nis=data['nis'],
            class_name=data['class_name']
        )
        try:
            db.session.add(student)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error adding student %s", code)
            return False, f"Gagal menambah siswa: {str(e)}"

        CommunicationService.add_activity_log(
            "Siswa Ditambahkan", f"Siswa: {student.name} (NIS: {student.nis})", user)
        return True, f"Siswa {student.name} berhasil ditambahkan"

    @staticmethod
    def update_student(student_id, student_data, user=None):
        """Update name, NIS and class; the student code never changes here"""
        student = db.session.get(Student, student_id)
        if not student:
            return False, "Siswa tidak ditemukan"

        data = {k: (v or '').strip() for k, v in student_data.items()}
        data['student_code'] = student.student_code
        is_valid, message = StudentService._validate_student_data(data)
        if not is_valid:
            return False, message

        duplicate = Student.query.filter(Student.nis == data['nis'], Student.id != student.id).first()
        if duplicate:
            return False, f"NIS {data['nis']} sudah digunakan oleh {duplicate.name}"

        try:
            student.name = data['name']
            student.nis = data['nis']
            student.class_name = data['class_name']
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error updating student %s", student_id)
            return False, f"Gagal memperbarui siswa: {str(e)}"

        CommunicationService.add_activity_log(
            "Data Siswa Diperbarui", f"Siswa: {student.name} (NIS: {student.nis})", user)
        return True, f"Data siswa {student.name} berhasil diperbarui"

    @staticmethod
    def delete_student(student_id, user=None):
        """Delete a student together with all of their grades"""
        student = db.session.get(Student, student_id)
        if not student:
            return False, "Siswa tidak ditemukan"

        name, nis = student.name, student.nis
        grade_count = len(student.grades)
        try:
            db.session.delete(student)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting student %s", student_id)
            return False, f"Gagal menghapus siswa: {str(e)}"

        CommunicationService.add_activity_log(
            "Siswa Dihapus", f"Siswa: {name} (NIS: {nis}) beserta {grade_count} data nilai", user)
        return True, f"Siswa {name} beserta {grade_count} data nilai berhasil dihapus"

    @staticmethod
    def import_students(file_data, user=None):
        """
        Upsert students from an Excel workbook.

        Rows are matched on student code first, then on NIS. Rows with a
        missing field, or repeating a code/NIS seen earlier in the same file,
        are skipped. Returns (success, summary, message) where summary holds
        added/updated/failed counts and row-numbered errors.
        """
        try:
            workbook = openpyxl.load_workbook(BytesIO(file_data), read_only=True, data_only=True)
        except Exception as e:
            logger.warning("Unreadable student import file: %s", e)
            return False, None, "File Excel tidak dapat dibaca"

        sheet = workbook.active
        rows = list(sheet.iter_rows(values_only=True))
        workbook.close()
        if not rows:
            return False, None, "File Excel kosong"

        header_to_index = {
            str(h).strip().lower(): i for i, h in enumerate(rows[0]) if h is not None
        }
        missing = [h for h in IMPORT_HEADERS if h.lower() not in header_to_index]
        if missing:
            return False, None, f"Kolom wajib tidak ditemukan: {', '.join(missing)}"

        def cell(row, header):
            idx = header_to_index[header.lower()]
            value = row[idx] if idx < len(row) else None
            if value is None:
                return ''
            # NIS typed as a number comes back as int/float
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            return str(value).strip()

        summary = {'added': 0, 'updated': 0, 'unchanged': 0, 'failed': 0, 'errors': []}
        seen_codes, seen_nis = set(), set()

        for index, row in enumerate(rows[1:], start=2):
            if row is None or all(v is None or str(v).strip() == '' for v in row):
                continue

            name = cell(row, 'Nama Siswa')
            nis = cell(row, 'NIS')
            class_name = cell(row, 'Kelas')
            code = Student.normalize_code(cell(row, 'ID Siswa'))

            if not all([name, nis, class_name, code]):
                summary['failed'] += 1
                summary['errors'].append(f"Baris {index}: Data tidak lengkap. Dilewati.")
                continue

            if code in seen_codes or nis in seen_nis:
                summary['failed'] += 1
                summary['errors'].append(
                    f"Baris {index}: Duplikat NIS/ID di dalam file untuk {nis}/{code}. Dilewati.")
                continue

            is_valid, message = StudentService._validate_student_data(
                {'student_code': code, 'name': name, 'nis': nis, 'class_name': class_name})
            if not is_valid:
                summary['failed'] += 1
                summary['errors'].append(f"Baris {index}: {message}")
                continue

            seen_codes.add(code)
            seen_nis.add(nis)

            existing = Student.query.filter_by(student_code=code).first() or \
                Student.query.filter_by(nis=nis).first()

            try:
                if existing:
                    changes = {}
                    for field, value in (('name', name), ('class_name', class_name),
                                         ('nis', nis), ('student_code', code)):
                        if getattr(existing, field) != value:
                            changes[field] = value
                    if not changes:
                        summary['unchanged'] += 1
                        continue
                    for field, value in changes.items():
                        setattr(existing, field, value)
                    db.session.commit()
                    summary['updated'] += 1
                else:
                    db.session.add(Student(student_code=code, name=name, nis=nis, class_name=class_name))
                    db.session.commit()
                    summary['added'] += 1
            except Exception as e:
                db.session.rollback()
                logger.warning("Import row %s failed: %s", index, e)
                summary['failed'] += 1
                summary['errors'].append(f"Baris {index}: Gagal menyimpan {name}.")

        CommunicationService.add_activity_log(
            "Impor Data Siswa (Excel)",
            f"{summary['added']} ditambahkan, {summary['updated']} diperbarui, {summary['failed']} gagal",
            user
        )
        message = (f"Berhasil: {summary['added']} ditambahkan, {summary['updated']} diperbarui. "
                   f"Gagal: {summary['failed']}.")
        return True, summary, message
