"""
User model for SkorZen School Portal
Administrators and teachers (guru) share one account table
"""

import random
import re
import string
from datetime import datetime

from werkzeug.security import generate_password_hash, check_password_hash

from database import db
from utils.roles import clean_duties, duty_label, NON_TEACHING_DUTIES, REPORTABLE_DUTIES, TU_STAFF_DUTIES

class User(db.Model):
    """Portal account with a role and optional additional duties"""
    __tablename__ = 'users'

    ROLE_ADMIN = 'admin'
    ROLE_GURU = 'guru'
    ROLES = [ROLE_ADMIN, ROLE_GURU]

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    role = db.Column(db.String(10), nullable=False, default=ROLE_GURU)
    password_hash = db.Column(db.String(255), nullable=False)
    password_encrypted = db.Column(db.Text, nullable=True)  # Initial password, readable by admin
    assigned_subjects = db.Column(db.JSON, default=list)
    additional_duties = db.Column(db.JSON, default=list)
    signature_url = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_login = db.Column(db.DateTime)
    is_active = db.Column(db.Boolean, default=True)

    def set_password(self, password, keep_copy=False):
        """Set password hash; optionally keep an encrypted copy for the admin"""
        self.password_hash = generate_password_hash(password)
        if keep_copy:
            from utils.encryption import password_encryptor
            self.password_encrypted = password_encryptor.encrypt_password(password)
        else:
            self.password_encrypted = None

    def check_password(self, password):
        """Check password against hash"""
        return check_password_hash(self.password_hash, password)

    def get_decrypted_password(self):
        """Initial password for admin display, None once the user changed it"""
        from utils.encryption import password_encryptor
        if self.password_encrypted:
            return password_encryptor.decrypt_password(self.password_encrypted)
        return None

    def update_last_login(self):
        """Update last login timestamp"""
        self.last_login = datetime.utcnow()
        db.session.commit()

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def duties(self):
        return clean_duties(self.additional_duties or [])

    def set_duties(self, duties):
        self.additional_duties = clean_duties(duties)

    def has_duty(self, *duties):
        """True when the user holds at least one of the given duties"""
        held = set(self.duties)
        return any(d in held for d in duties)

    @property
    def duty_labels(self):
        return [duty_label(d) for d in self.duties]

    @property
    def is_non_teaching(self):
        """Holds a non-teaching duty; such staff do not get the teaching menus"""
        return self.has_duty(*NON_TEACHING_DUTIES)

    @property
    def is_tu_staff(self):
        return self.has_duty(*TU_STAFF_DUTIES)

    @property
    def reportable_duties(self):
        return [d for d in self.duties if d in REPORTABLE_DUTIES]

    @staticmethod
    def generate_username(display_name):
        """Username suggestion from the first two words of a name"""
        words = re.sub(r'[^a-z0-9 ]', '', (display_name or '').lower()).split()
        base = '.'.join(words[:2]) or 'guru'
        return base

    @staticmethod
    def generate_password():
        """Generate a random password for new teachers"""
        # 8 characters of letters and digits
        chars = string.ascii_letters + string.digits
        return ''.join(random.SystemRandom().choice(chars) for _ in range(8))

    def to_dict(self):
        """Convert user to dictionary for JSON serialization"""
        return {
            'id': self.id,
            'username': self.username,
            'display_name': self.display_name,
            'email': self.email,
            'role': self.role,
            'assigned_subjects': list(self.assigned_subjects or []),
            'additional_duties': self.duties,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'last_login': self.last_login.isoformat() if self.last_login else None,
            'is_active': self.is_active
        }

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'
