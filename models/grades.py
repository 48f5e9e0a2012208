"""
Grading models for SkorZen School Portal
Grade records, weight configuration (bobot) and KKM settings
"""

from database import db
from datetime import datetime

class Grade(db.Model):
    """Grade (nilai) of one student for one subject, semester and academic year"""
    __tablename__ = 'grades'

    id = db.Column(db.Integer, primary_key=True)
    student_code = db.Column(
        db.String(50),
        db.ForeignKey('students.student_code', ondelete='CASCADE', onupdate='CASCADE'),
        nullable=False, index=True
    )
    subject = db.Column(db.String(100), nullable=False, index=True)
    semester = db.Column(db.Integer, nullable=False)  # 1 = Ganjil, 2 = Genap
    academic_year = db.Column(db.String(9), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    # Component scores, all on a 0-100 scale
    assignments = db.Column(db.JSON, default=list)  # tugas
    test = db.Column(db.Float)  # tes
    midterm = db.Column(db.Float)  # pts
    final_exam = db.Column(db.Float)  # pas
    attendance = db.Column(db.Float)  # kehadiran percentage
    extracurricular = db.Column(db.Float)  # eskul
    osis = db.Column(db.Float)
    final_grade = db.Column(db.Float)  # nilai akhir

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    teacher = db.relationship('User', backref=db.backref('grades', lazy='dynamic'))

    __table_args__ = (
        db.UniqueConstraint('student_code', 'subject', 'semester', 'academic_year', 'teacher_id',
                            name='unique_student_grade'),
    )

    # Components checked by the missing grade recap
    COMPONENTS = {
        'tugas': 'assignments',
        'tes': 'test',
        'pts': 'midterm',
        'pas': 'final_exam',
    }

    COMPONENT_LABELS = {
        'tugas': 'Tugas',
        'tes': 'Tes',
        'pts': 'PTS',
        'pas': 'PAS',
    }

    def get_assignment_average(self):
        from utils.grading import calculate_average
        return round(calculate_average(self.assignments or []), 2)

    def get_component_value(self, component):
        return getattr(self, self.COMPONENTS[component])

    def calculate_final_grade(self, weights):
        """Recompute and store the final grade with the given weights"""
        from utils.grading import calculate_final_grade
        self.final_grade = calculate_final_grade(self, weights)
        return self.final_grade

    def to_dict(self):
        """Convert grade to dictionary"""
        return {
            'id': self.id,
            'student_code': self.student_code,
            'subject': self.subject,
            'semester': self.semester,
            'academic_year': self.academic_year,
            'assignments': list(self.assignments or []),
            'assignment_average': self.get_assignment_average(),
            'test': self.test,
            'midterm': self.midterm,
            'final_exam': self.final_exam,
            'attendance': self.attendance,
            'extracurricular': self.extracurricular,
            'osis': self.osis,
            'final_grade': self.final_grade,
            'teacher_id': self.teacher_id,
        }

    def __repr__(self):
        return f'<Grade {self.student_code} {self.subject} {self.academic_year}/{self.semester}>'


class GradeWeights(db.Model):
    """Single-row weight configuration (bobot) and effective school days"""
    __tablename__ = 'grade_weights'

    ACADEMIC_FIELDS = ('tugas', 'tes', 'pts', 'pas', 'kehadiran')
    BONUS_FIELDS = ('eskul', 'osis')
    WEIGHT_FIELDS = ACADEMIC_FIELDS + BONUS_FIELDS

    WEIGHT_LABELS = {
        'tugas': 'Tugas',
        'tes': 'Tes',
        'pts': 'PTS',
        'pas': 'PAS',
        'kehadiran': 'Kehadiran',
        'eskul': 'Ekstrakurikuler',
        'osis': 'OSIS',
    }

    DEFAULTS = {
        'tugas': 20,
        'tes': 20,
        'pts': 20,
        'pas': 25,
        'kehadiran': 15,
        'eskul': 5,
        'osis': 5,
        'effective_days_odd': 90,
        'effective_days_even': 90,
    }

    id = db.Column(db.Integer, primary_key=True)
    tugas = db.Column(db.Float, nullable=False, default=DEFAULTS['tugas'])
    tes = db.Column(db.Float, nullable=False, default=DEFAULTS['tes'])
    pts = db.Column(db.Float, nullable=False, default=DEFAULTS['pts'])
    pas = db.Column(db.Float, nullable=False, default=DEFAULTS['pas'])
    kehadiran = db.Column(db.Float, nullable=False, default=DEFAULTS['kehadiran'])
    eskul = db.Column(db.Float, nullable=False, default=DEFAULTS['eskul'])
    osis = db.Column(db.Float, nullable=False, default=DEFAULTS['osis'])
    effective_days_odd = db.Column(db.Integer, nullable=False, default=DEFAULTS['effective_days_odd'])
    effective_days_even = db.Column(db.Integer, nullable=False, default=DEFAULTS['effective_days_even'])
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @staticmethod
    def get_current():
        """Return the configuration row, creating it with defaults when missing"""
        weights = GradeWeights.query.first()
        if weights is None:
            weights = GradeWeights(**GradeWeights.DEFAULTS)
            db.session.add(weights)
            db.session.commit()
        return weights

    def effective_days_for(self, semester):
        return self.effective_days_odd if int(semester) == 1 else self.effective_days_even

    @property
    def academic_total(self):
        return sum(getattr(self, field) or 0 for field in self.ACADEMIC_FIELDS)

    def to_dict(self):
        data = {field: getattr(self, field) for field in self.WEIGHT_FIELDS}
        data['effective_days_odd'] = self.effective_days_odd
        data['effective_days_even'] = self.effective_days_even
        return data

    def __repr__(self):
        return f'<GradeWeights tugas={self.tugas} tes={self.tes} pts={self.pts} pas={self.pas}>'


class KkmSetting(db.Model):
    """Minimum passing score (KKM) per subject and academic year"""
    __tablename__ = 'kkm_settings'

    DEFAULT_KKM = 75

    id = db.Column(db.Integer, primary_key=True)
    subject = db.Column(db.String(100), nullable=False)
    academic_year = db.Column(db.String(9), nullable=False)
    kkm_value = db.Column(db.Float, nullable=False, default=DEFAULT_KKM)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('subject', 'academic_year', name='unique_subject_kkm'),
    )

    @staticmethod
    def get_value(subject, academic_year):
        setting = KkmSetting.query.filter_by(subject=subject, academic_year=academic_year).first()
        return setting.kkm_value if setting else KkmSetting.DEFAULT_KKM

    def __repr__(self):
        return f'<KkmSetting {self.subject} {self.academic_year}: {self.kkm_value}>'
