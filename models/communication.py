"""
Communication models for SkorZen School Portal
Announcements, archive links and the activity log
"""

from database import db
from datetime import datetime

class Announcement(db.Model):
    """Announcement (pengumuman) for teachers"""
    __tablename__ = 'announcements'

    PRIORITIES = ['Tinggi', 'Sedang', 'Rendah']
    DEFAULT_PRIORITY = 'Sedang'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(150), nullable=False)
    content = db.Column(db.Text, nullable=False)
    priority = db.Column(db.String(10), nullable=False, default=DEFAULT_PRIORITY)
    extra_info = db.Column(db.String(100), nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_by_name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @staticmethod
    def get_latest(limit=None):
        query = Announcement.query.order_by(Announcement.created_at.desc(), Announcement.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'priority': self.priority,
            'extra_info': self.extra_info,
            'created_by_name': self.created_by_name,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Announcement {self.title}>'


class ArchiveLink(db.Model):
    """Shared link to an external document archive"""
    __tablename__ = 'archive_links'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    url = db.Column(db.String(500), nullable=False)
    description = db.Column(db.String(200), nullable=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_by_name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<ArchiveLink {self.title}>'


class ActivityLog(db.Model):
    """Audit trail of data changes made through the portal"""
    __tablename__ = 'activity_logs'

    id = db.Column(db.Integer, primary_key=True)
    action = db.Column(db.String(150), nullable=False)
    details = db.Column(db.Text, nullable=True)
    user_id = db.Column(db.Integer, nullable=True)
    user_name = db.Column(db.String(100), nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'action': self.action,
            'details': self.details,
            'user_name': self.user_name,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }

    def __repr__(self):
        return f'<ActivityLog {self.action}>'
