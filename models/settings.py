"""
School-wide settings models for SkorZen School Portal
School profile statistics and print (letterhead/signature) settings
"""

import copy
from database import db
from datetime import datetime

PREDEFINED_CLASSES = ['X-1', 'X-2', 'X-3', 'X-4', 'XI-1', 'XI-2', 'XI-3', 'XII-1', 'XII-2', 'XII-3']
DEFAULT_FACILITIES = ['Ruang Kelas', 'Laboratorium', 'Perpustakaan', 'Toilet']
STAT_KEYS = [('alumni', 'Alumni'), ('guru', 'Guru'), ('tendik', 'Tenaga Kependidikan')]

def _count_pair():
    return {'ril': 0, 'dapodik': 0}

def default_stats():
    return {key: _count_pair() for key, _ in STAT_KEYS}

def default_class_details():
    return [
        {'class_name': name, 'male': _count_pair(), 'female': _count_pair()}
        for name in PREDEFINED_CLASSES
    ]

def default_facilities():
    return [{'name': name, 'quantity': 0} for name in DEFAULT_FACILITIES]

class SchoolProfile(db.Model):
    """Single-row school statistics profile"""
    __tablename__ = 'school_profile'

    id = db.Column(db.Integer, primary_key=True)
    stats = db.Column(db.JSON, nullable=False, default=default_stats)
    class_details = db.Column(db.JSON, nullable=False, default=default_class_details)
    facilities = db.Column(db.JSON, nullable=False, default=default_facilities)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @staticmethod
    def get_current():
        profile = SchoolProfile.query.first()
        if profile is None:
            profile = SchoolProfile(
                stats=default_stats(),
                class_details=default_class_details(),
                facilities=default_facilities()
            )
            db.session.add(profile)
            db.session.commit()
        return profile

    def get_class_rows(self):
        """Class details with per-class totals, predefined classes always present"""
        by_name = {row.get('class_name'): row for row in (self.class_details or [])}
        rows = []
        for name in PREDEFINED_CLASSES:
            row = copy.deepcopy(by_name.get(name) or {'class_name': name, 'male': _count_pair(), 'female': _count_pair()})
            row['total'] = {
                source: int(row['male'].get(source, 0)) + int(row['female'].get(source, 0))
                for source in ('ril', 'dapodik')
            }
            rows.append(row)
        return rows

    def get_student_totals(self):
        """Overall male/female/total students for both data sources"""
        totals = {'male': _count_pair(), 'female': _count_pair(), 'total': _count_pair()}
        for row in self.get_class_rows():
            for source in ('ril', 'dapodik'):
                totals['male'][source] += int(row['male'].get(source, 0))
                totals['female'][source] += int(row['female'].get(source, 0))
                totals['total'][source] += row['total'][source]
        return totals

    def __repr__(self):
        return f'<SchoolProfile {self.id}>'


class PrintSettings(db.Model):
    """Single-row letterhead and signer settings used by printed documents"""
    __tablename__ = 'print_settings'

    DEFAULT_PLACE = 'Cianjur'

    id = db.Column(db.Integer, primary_key=True)
    header_image_url = db.Column(db.String(500), nullable=True)
    place = db.Column(db.String(100), nullable=False, default=DEFAULT_PLACE)
    signer_one_name = db.Column(db.String(100))
    signer_one_position = db.Column(db.String(100))
    signer_one_npa = db.Column(db.String(100))
    signer_two_name = db.Column(db.String(100))
    signer_two_position = db.Column(db.String(100))
    signer_two_npa = db.Column(db.String(100))
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    TEXT_FIELDS = [
        'place',
        'signer_one_name', 'signer_one_position', 'signer_one_npa',
        'signer_two_name', 'signer_two_position', 'signer_two_npa',
    ]

    @staticmethod
    def get_current():
        settings = PrintSettings.query.first()
        if settings is None:
            settings = PrintSettings(place=PrintSettings.DEFAULT_PLACE)
            db.session.add(settings)
            db.session.commit()
        return settings

    def to_dict(self):
        data = {field: getattr(self, field) for field in self.TEXT_FIELDS}
        data['header_image_url'] = self.header_image_url
        return data

    def __repr__(self):
        return f'<PrintSettings {self.place}>'
