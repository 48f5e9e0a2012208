"""
Report models for SkorZen School Portal
Activity reports, student violations and class agendas
"""

from database import db
from datetime import datetime

class ActivityReport(db.Model):
    """Activity report (laporan kegiatan) filed under one of the author's duties"""
    __tablename__ = 'activity_reports'

    id = db.Column(db.Integer, primary_key=True)
    activity_id = db.Column(db.String(50), nullable=False, index=True)  # duty code
    activity_name = db.Column(db.String(100), nullable=False)
    title = db.Column(db.String(150), nullable=False)
    content = db.Column(db.Text, nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_by_name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'activity_id': self.activity_id,
            'activity_name': self.activity_name,
            'title': self.title,
            'content': self.content,
            'date': self.date.isoformat() if self.date else None,
            'created_by_name': self.created_by_name,
        }

    def __repr__(self):
        return f'<ActivityReport {self.activity_id}: {self.title}>'


class Violation(db.Model):
    """Disciplinary record (pelanggaran) with a point penalty"""
    __tablename__ = 'violations'

    id = db.Column(db.Integer, primary_key=True)
    student_code = db.Column(db.String(50), nullable=False, index=True)
    # Copied at write time so the record survives student edits
    student_name = db.Column(db.String(100), nullable=False)
    student_class = db.Column(db.String(20), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    violation = db.Column(db.String(200), nullable=False)
    points = db.Column(db.Integer, nullable=False)
    notes = db.Column(db.String(500), nullable=True)
    recorded_by_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    recorded_by_name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'student_code': self.student_code,
            'student_name': self.student_name,
            'student_class': self.student_class,
            'date': self.date.isoformat() if self.date else None,
            'violation': self.violation,
            'points': self.points,
            'notes': self.notes,
            'recorded_by_name': self.recorded_by_name,
        }

    def __repr__(self):
        return f'<Violation {self.student_code} {self.date}: {self.points}>'


class ClassAgenda(db.Model):
    """Teaching journal entry (agenda kelas) for one lesson"""
    __tablename__ = 'class_agendas'

    id = db.Column(db.Integer, primary_key=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    teacher_name = db.Column(db.String(100), nullable=False)
    class_name = db.Column(db.String(20), nullable=False)
    subject = db.Column(db.String(100), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    period = db.Column(db.String(20), nullable=False)  # jam ke
    learning_objective = db.Column(db.String(500), nullable=False)
    topic = db.Column(db.String(500), nullable=False)
    absent_students = db.Column(db.JSON, default=list)  # [{'student_code': ..., 'name': ...}]
    reflection = db.Column(db.String(1000), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def absent_names(self):
        return [s.get('name', '') for s in (self.absent_students or [])]

    def to_dict(self):
        return {
            'id': self.id,
            'teacher_name': self.teacher_name,
            'class_name': self.class_name,
            'subject': self.subject,
            'date': self.date.isoformat() if self.date else None,
            'period': self.period,
            'learning_objective': self.learning_objective,
            'topic': self.topic,
            'absent_students': list(self.absent_students or []),
            'reflection': self.reflection,
        }

    def __repr__(self):
        return f'<ClassAgenda {self.class_name} {self.subject} {self.date}>'
