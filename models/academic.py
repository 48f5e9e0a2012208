"""
Academic structure models for SkorZen School Portal
Active academic years, the subject master list and school holidays
"""

from database import db
from datetime import datetime

class AcademicYearSetting(db.Model):
    """Activation flag for an academic year"""
    __tablename__ = 'academic_year_settings'

    id = db.Column(db.Integer, primary_key=True)
    year = db.Column(db.String(9), unique=True, nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=False, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {'year': self.year, 'is_active': self.is_active}

    def __repr__(self):
        return f'<AcademicYearSetting {self.year} active={self.is_active}>'


class Subject(db.Model):
    """Subject master (mata pelajaran)"""
    __tablename__ = 'subjects'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @staticmethod
    def get_names():
        return [s.name for s in Subject.query.order_by(Subject.name).all()]

    def to_dict(self):
        return {'id': self.id, 'name': self.name}

    def __repr__(self):
        return f'<Subject {self.name}>'


class SchoolHoliday(db.Model):
    """A non-working school day"""
    __tablename__ = 'school_holidays'

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, unique=True, nullable=False, index=True)
    description = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @staticmethod
    def get_dates_between(start_date, end_date):
        rows = SchoolHoliday.query.filter(
            SchoolHoliday.date >= start_date,
            SchoolHoliday.date <= end_date
        ).all()
        return [row.date for row in rows]

    def to_dict(self):
        return {'id': self.id, 'date': self.date.isoformat(), 'description': self.description}

    def __repr__(self):
        return f'<SchoolHoliday {self.date}: {self.description}>'
