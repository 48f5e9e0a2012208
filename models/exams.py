"""
Exam administration models for SkorZen School Portal
Exam minutes (berita acara) and proctor attendance (daftar hadir pengawas)
"""

from database import db
from datetime import datetime

class ExamMinutes(db.Model):
    """Official minutes of one exam session"""
    __tablename__ = 'exam_minutes'

    DEFAULT_EXAM_TYPE = 'Sumatif Akhir Semester (SAS)'

    id = db.Column(db.Integer, primary_key=True)
    exam_type = db.Column(db.String(100), nullable=False, default=DEFAULT_EXAM_TYPE)
    academic_year = db.Column(db.String(9), nullable=False)
    exam_subject = db.Column(db.String(100), nullable=False)
    day_name = db.Column(db.String(10), nullable=False)
    day = db.Column(db.Integer, nullable=False)
    month_name = db.Column(db.String(15), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    start_time = db.Column(db.String(5), nullable=False)
    end_time = db.Column(db.String(5), nullable=False)
    room = db.Column(db.String(50), nullable=False)
    combined_classes = db.Column(db.String(100))
    participants_x = db.Column(db.Integer, default=0)
    participants_xi = db.Column(db.Integer, default=0)
    participants_xii = db.Column(db.Integer, default=0)
    absent_count = db.Column(db.Integer, default=0)
    present_numbers = db.Column(db.String(500))
    absent_numbers = db.Column(db.String(500))
    attendance_list_count = db.Column(db.Integer, default=0)
    minutes_count = db.Column(db.Integer, default=0)
    notes = db.Column(db.Text)
    proctor_name = db.Column(db.String(100), nullable=False)
    proctor_signature_url = db.Column(db.String(500))
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_by_name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    @property
    def total_participants(self):
        return (self.participants_x or 0) + (self.participants_xi or 0) + (self.participants_xii or 0)

    @property
    def present_count(self):
        return max(self.total_participants - (self.absent_count or 0), 0)

    @property
    def date_text(self):
        return f"{self.day_name}, {self.day} {self.month_name} {self.year}"

    def __repr__(self):
        return f'<ExamMinutes {self.exam_subject} {self.date_text}>'


class ProctorAttendance(db.Model):
    """Signed attendance of a proctor for one exam session"""
    __tablename__ = 'proctor_attendance'

    id = db.Column(db.Integer, primary_key=True)
    exam_date = db.Column(db.Date, nullable=False, index=True)
    exam_subject = db.Column(db.String(100), nullable=False)
    room = db.Column(db.String(50), nullable=False)
    start_time = db.Column(db.String(5), nullable=False)
    end_time = db.Column(db.String(5), nullable=False)
    signature_url = db.Column(db.String(500), nullable=False)
    proctor_name = db.Column(db.String(100), nullable=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<ProctorAttendance {self.proctor_name} {self.exam_date}>'
