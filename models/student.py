"""
Student model for SkorZen School Portal
"""

from database import db
from datetime import datetime

class Student(db.Model):
    """Student (siswa) model"""
    __tablename__ = 'students'

    id = db.Column(db.Integer, primary_key=True)
    student_code = db.Column(db.String(50), unique=True, nullable=False, index=True)  # id_siswa, lowercase
    name = db.Column(db.String(100), nullable=False)
    nis = db.Column(db.String(20), unique=True, nullable=False, index=True)
    class_name = db.Column(db.String(20), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Grades are removed together with the student
    grades = db.relationship('Grade', backref='student', cascade='all, delete-orphan',
                             passive_deletes=True)

    @staticmethod
    def normalize_code(student_code):
        return (student_code or '').strip().lower()

    @staticmethod
    def get_by_code(student_code):
        return Student.query.filter_by(student_code=Student.normalize_code(student_code)).first()

    @staticmethod
    def get_class_names():
        """Distinct class names in natural school order"""
        from utils.sorting_helpers import SortingHelpers
        rows = db.session.query(Student.class_name).distinct().all()
        return SortingHelpers.sort_class_names(row[0] for row in rows)

    def to_dict(self):
        """Convert student to dictionary"""
        return {
            'id': self.id,
            'student_code': self.student_code,
            'name': self.name,
            'nis': self.nis,
            'class_name': self.class_name,
        }

    def __repr__(self):
        return f'<Student {self.student_code}: {self.name}>'
