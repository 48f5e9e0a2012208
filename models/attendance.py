"""
Attendance models for SkorZen School Portal
Daily attendance of teachers and staff
"""

from database import db
from datetime import datetime, date

class TeacherAttendance(db.Model):
    """Daily attendance record for a teacher or staff member"""
    __tablename__ = 'teacher_attendance'

    STATUS_PRESENT = 'Hadir'
    STATUS_PERMIT = 'Izin'
    STATUS_SICK = 'Sakit'
    STATUS_ABSENT = 'Alpa'
    STATUSES = [STATUS_PRESENT, STATUS_PERMIT, STATUS_SICK, STATUS_ABSENT]

    id = db.Column(db.Integer, primary_key=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    teacher_name = db.Column(db.String(100), nullable=False)
    date = db.Column(db.Date, nullable=False, default=date.today, index=True)
    status = db.Column(db.String(10), nullable=False)
    notes = db.Column(db.String(300), nullable=True)
    recorded_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_updated_by = db.Column(db.String(100), nullable=True)

    teacher = db.relationship('User', backref=db.backref('attendance_records', lazy='dynamic',
                                                         cascade='all, delete-orphan'))

    # One record per person per day
    __table_args__ = (db.UniqueConstraint('teacher_id', 'date', name='unique_teacher_date_attendance'),)

    def is_present(self):
        return self.status == self.STATUS_PRESENT

    @staticmethod
    def get_for_period(start_date, end_date, teacher_id=None):
        """Records between two dates (inclusive), newest first"""
        query = TeacherAttendance.query.filter(
            TeacherAttendance.date >= start_date,
            TeacherAttendance.date <= end_date
        )
        if teacher_id:
            query = query.filter(TeacherAttendance.teacher_id == teacher_id)
        return query.order_by(TeacherAttendance.date.desc(), TeacherAttendance.teacher_name).all()

    def to_dict(self):
        """Convert attendance record to dictionary"""
        return {
            'id': self.id,
            'teacher_id': self.teacher_id,
            'teacher_name': self.teacher_name,
            'date': self.date.isoformat() if self.date else None,
            'status': self.status,
            'notes': self.notes,
            'last_updated_by': self.last_updated_by,
        }

    def __repr__(self):
        return f'<TeacherAttendance {self.teacher_name} {self.date}: {self.status}>'
