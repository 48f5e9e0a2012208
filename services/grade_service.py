"""
Grade service for SkorZen School Portal
Grade input, weight configuration, grade listings, report cards and missing grade recaps
"""

import logging

from database import db
from models.grades import Grade, GradeWeights, KkmSetting
from models.student import Student
from models.academic import Subject
from services.communication_service import CommunicationService
from utils.calendar_helpers import semester_label
from utils.grading import attendance_percentage, parse_assignment_scores
from utils.sorting_helpers import SortingHelpers
from utils.validators import validate_academic_year, validate_semester, validate_score, validate_weights

logger = logging.getLogger(__name__)

SCORE_FIELDS = [
    ('test', 'Nilai tes'),
    ('midterm', 'Nilai PTS'),
    ('final_exam', 'Nilai PAS'),
    ('extracurricular', 'Nilai eskul'),
    ('osis', 'Nilai OSIS'),
]

# Columns the admin grade table may be sorted by
SORTABLE_COLUMNS = {
    'name': lambda r: (r['student_name'] or '').lower(),
    'nis': lambda r: r['nis'] or '',
    'class_name': lambda r: SortingHelpers.get_class_sort_key(r['class_name']),
    'subject': lambda r: (r['subject'] or '').lower(),
    'academic_year': lambda r: r['academic_year'],
    'semester': lambda r: r['semester'],
    'assignment_average': lambda r: r['assignment_average'],
    'final_grade': lambda r: r['final_grade'] or 0,
}

class GradeService:
    """Grade service class"""

    # ---- weights ----

    @staticmethod
    def get_weights():
        return GradeWeights.get_current()

    @staticmethod
    def update_weights(data, user=None):
        """Validate and store the weight configuration"""
        is_valid, message = validate_weights(data)
        if not is_valid:
            return False, message

        weights = GradeWeights.get_current()
        try:
            for field in GradeWeights.WEIGHT_FIELDS:
                setattr(weights, field, float(data[field]))
            weights.effective_days_odd = int(data['effective_days_odd'])
            weights.effective_days_even = int(data['effective_days_even'])
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error saving grade weights")
            return False, f"Gagal menyimpan bobot: {str(e)}"

        summary = ', '.join(f"{field}: {getattr(weights, field):g}" for field in GradeWeights.WEIGHT_FIELDS)
        CommunicationService.add_activity_log(
            "Bobot Penilaian Diperbarui",
            f"{summary}; hari efektif {weights.effective_days_odd}/{weights.effective_days_even}",
            user
        )
        return True, "Bobot penilaian berhasil disimpan"

    # ---- grade input ----

    @staticmethod
    def get_grade(student_code, subject, semester, academic_year, teacher_id):
        return Grade.query.filter_by(
            student_code=Student.normalize_code(student_code),
            subject=subject,
            semester=int(semester),
            academic_year=academic_year,
            teacher_id=teacher_id
        ).first()

    @staticmethod
    def save_grade(data, teacher):
        """
        Insert or update one grade record for the teacher.

        The attendance percentage is derived from days present and the
        effective days of the semester, and the final grade is recomputed
        with the current weights.
        """
        student = Student.get_by_code(data.get('student_code'))
        if not student:
            return False, None, "Siswa tidak ditemukan"

        subject = (data.get('subject') or '').strip()
        if not subject:
            return False, None, "Mata pelajaran wajib dipilih"

        for is_valid, message in (validate_semester(data.get('semester')),
                                  validate_academic_year(data.get('academic_year') or '')):
            if not is_valid:
                return False, None, message

        ok, assignments, message = parse_assignment_scores(data.get('assignments'))
        if not ok:
            return False, None, message

        scores = {}
        for field, label in SCORE_FIELDS:
            raw = data.get(field)
            if raw in (None, ''):
                scores[field] = 0.0
                continue
            is_valid, message = validate_score(raw, label)
            if not is_valid:
                return False, None, message
            scores[field] = float(raw)

        semester = int(data['semester'])
        weights = GradeWeights.get_current()
        effective_days = weights.effective_days_for(semester)
        days_present = data.get('days_present')
        if days_present in (None, ''):
            days_present = 0
        is_valid, message = validate_score(days_present, 'Jumlah hari hadir', 0, max(effective_days, 0) or 366)
        if not is_valid:
            return False, None, message

        try:
            grade = GradeService.get_grade(student.student_code, subject, semester,
                                           data['academic_year'], teacher.id)
            is_new = grade is None
            if is_new:
                grade = Grade(
                    student_code=student.student_code,
                    subject=subject,
                    semester=semester,
                    academic_year=data['academic_year'],
                    teacher_id=teacher.id
                )
                db.session.add(grade)

            grade.assignments = assignments
            for field, value in scores.items():
                setattr(grade, field, value)
            grade.attendance = round(attendance_percentage(float(days_present), effective_days), 2)
            grade.calculate_final_grade(weights)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error saving grade for %s", student.student_code)
            return False, None, f"Gagal menyimpan nilai: {str(e)}"

        CommunicationService.add_activity_log(
            "Nilai Ditambahkan" if is_new else "Nilai Diperbarui",
            f"Siswa: {student.name}, Mapel: {subject}, Semester: {semester_label(semester)}, "
            f"TA: {grade.academic_year}, Nilai Akhir: {grade.final_grade}",
            teacher
        )
        return True, grade, f"Nilai {student.name} berhasil disimpan (nilai akhir {grade.final_grade:g})"

    @staticmethod
    def delete_grade(grade_id, user):
        """Delete a grade; teachers may only delete their own"""
        grade = db.session.get(Grade, grade_id)
        if not grade:
            return False, "Data nilai tidak ditemukan"
        if not user.is_admin and grade.teacher_id != user.id:
            return False, "Anda tidak berhak menghapus nilai ini"

        details = f"Siswa: {grade.student_code}, Mapel: {grade.subject}, TA: {grade.academic_year}"
        try:
            db.session.delete(grade)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting grade %s", grade_id)
            return False, f"Gagal menghapus nilai: {str(e)}"

        CommunicationService.add_activity_log("Nilai Dihapus", details, user)
        return True, "Data nilai berhasil dihapus"

    # ---- listings ----

    @staticmethod
    def _grade_row(grade, student):
        return {
            'id': grade.id,
            'student_code': grade.student_code,
            'student_name': student.name if student else grade.student_code,
            'nis': student.nis if student else '',
            'class_name': student.class_name if student else '',
            'subject': grade.subject,
            'semester': grade.semester,
            'semester_label': semester_label(grade.semester),
            'academic_year': grade.academic_year,
            'assignments': list(grade.assignments or []),
            'assignment_average': grade.get_assignment_average(),
            'test': grade.test,
            'midterm': grade.midterm,
            'final_exam': grade.final_exam,
            'attendance': grade.attendance,
            'extracurricular': grade.extracurricular,
            'osis': grade.osis,
            'final_grade': grade.final_grade,
            'teacher_id': grade.teacher_id,
            'teacher_name': grade.teacher.display_name if grade.teacher else '-',
        }

    @staticmethod
    def get_grade_rows(filters=None, teacher_id=None, sort_by='name', sort_dir='asc'):
        """
        Grades joined with student data, filtered and sorted.

        filters may contain class_name, academic_year, semester, subject and
        search (matched against student name and NIS).
        """
        filters = filters or {}
        query = db.session.query(Grade, Student).outerjoin(
            Student, Student.student_code == Grade.student_code)

        if teacher_id:
            query = query.filter(Grade.teacher_id == teacher_id)
        if filters.get('class_name'):
            query = query.filter(Student.class_name == filters['class_name'])
        if filters.get('academic_year'):
            query = query.filter(Grade.academic_year == filters['academic_year'])
        if filters.get('semester') and validate_semester(filters['semester'])[0]:
            query = query.filter(Grade.semester == int(filters['semester']))
        if filters.get('subject'):
            query = query.filter(Grade.subject == filters['subject'])

        rows = [GradeService._grade_row(grade, student) for grade, student in query.all()]

        search = (filters.get('search') or '').strip().lower()
        if search:
            rows = [r for r in rows if search in r['student_name'].lower() or search in r['nis']]

        key = SORTABLE_COLUMNS.get(sort_by, SORTABLE_COLUMNS['name'])
        rows.sort(key=lambda r: (key(r), r['student_name'].lower(), r['subject']),
                  reverse=(sort_dir == 'desc'))
        return rows

    @staticmethod
    def get_teacher_recap(teacher_id, filters=None):
        """Teacher's own grades with a below-KKM flag per row"""
        rows = GradeService.get_grade_rows(filters, teacher_id=teacher_id, sort_by='class_name')
        kkm_cache = {}
        for row in rows:
            cache_key = (row['subject'], row['academic_year'])
            if cache_key not in kkm_cache:
                kkm_cache[cache_key] = KkmSetting.get_value(*cache_key)
            row['kkm'] = kkm_cache[cache_key]
            row['below_kkm'] = (row['final_grade'] or 0) < row['kkm']
        return rows

    # ---- report card ----

    @staticmethod
    def get_report_card(student_code):
        """
        Grades of one student grouped by academic year (newest first),
        then semester (Ganjil before Genap), then subject.
        """
        student = Student.get_by_code(student_code)
        if not student:
            return None

        years = {}
        for grade in student.grades:
            semesters = years.setdefault(grade.academic_year, {})
            semesters.setdefault(grade.semester, []).append(grade)

        groups = []
        for year in sorted(years.keys(), reverse=True):
            semester_groups = []
            for semester in sorted(years[year].keys()):
                grades = sorted(years[year][semester], key=lambda g: g.subject.lower())
                semester_groups.append({
                    'semester': semester,
                    'semester_label': semester_label(semester),
                    'grades': [GradeService._grade_row(g, student) for g in grades],
                })
            groups.append({'academic_year': year, 'semesters': semester_groups})

        return {'student': student, 'years': groups}

    # ---- missing grades ----

    @staticmethod
    def get_missing_grades(academic_year, semester, subjects, component, class_name=None):
        """
        Students without a usable score for a component.

        A (student, subject) pair is reported when no grade exists for the
        year and semester, or the component is empty: no assignment scores,
        or a test/PTS/PAS score that is missing or 0.
        """
        if component not in Grade.COMPONENTS:
            return False, [], "Komponen nilai tidak dikenal"
        if not subjects:
            return False, [], "Pilih minimal satu mata pelajaran"

        students = Student.query
        if class_name:
            students = students.filter(Student.class_name == class_name)
        students = SortingHelpers.sort_students(students.all())

        grades = Grade.query.filter(
            Grade.academic_year == academic_year,
            Grade.semester == int(semester),
            Grade.subject.in_(subjects)
        ).all()
        by_key = {}
        for grade in grades:
            by_key.setdefault((grade.student_code, grade.subject), []).append(grade)

        rows = []
        for student in students:
            for subject in sorted(subjects):
                candidates = by_key.get((student.student_code, subject), [])
                recorded = GradeService._component_status(candidates, component)
                if recorded is None:
                    continue
                rows.append({
                    'student_code': student.student_code,
                    'student_name': student.name,
                    'nis': student.nis,
                    'class_name': student.class_name,
                    'subject': subject,
                    'recorded_value': recorded,
                })
        return True, rows, f"{len(rows)} data nilai kosong ditemukan"

    @staticmethod
    def _component_status(grades, component):
        """None when some grade holds a real value, else the label to display"""
        if not grades:
            return 'Kosong'
        label = 'Kosong'
        for grade in grades:
            value = grade.get_component_value(component)
            if component == 'tugas':
                if value:
                    return None
            elif value is None:
                continue
            elif float(value) == 0:
                label = '0'
            else:
                return None
        return label

    @staticmethod
    def get_teacher_subject_options(user):
        """Subjects a teacher may grade: assigned ones, else the full master list"""
        if user.assigned_subjects:
            return sorted(user.assigned_subjects)
        return Subject.get_names()
