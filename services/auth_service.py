"""
Authentication service for SkorZen School Portal
Handles login, password management, and session utilities
"""

import logging
from datetime import datetime

from sqlalchemy import func

from database import db
from models.user import User

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service class"""

    @staticmethod
    def authenticate(username, password):
        """Authenticate any active user; usernames match case-insensitively"""
        normalized = (username or '').strip()
        try:
            user = (
                User.query
                .filter(func.lower(User.username) == func.lower(normalized))
                .filter_by(is_active=True)
                .first()
            )

            if user and user.check_password(password):
                user.update_last_login()
                logger.info("User %s logged in", user.username)
                return True, user, "Login berhasil"

            logger.info("Failed login for %s", normalized)
            return False, None, "Username atau password salah"

        except Exception as e:
            logger.exception("Authentication error")
            return False, None, f"Authentication error: {str(e)}"

    @staticmethod
    def generate_teacher_credentials(display_name, manual_username=None, manual_password=None):
        """Generate a unique username and a password for a new teacher"""
        username = (manual_username or '').strip().lower() or User.generate_username(display_name)

        if not manual_username:
            counter = 1
            original_username = username
            while User.query.filter(func.lower(User.username) == username).first():
                username = f"{original_username}{counter}"
                counter += 1

        password = manual_password or User.generate_password()
        return username, password

    @staticmethod
    def change_password(user_id, old_password, new_password):
        """Change user password"""
        try:
            user = db.session.get(User, user_id)
            if not user:
                return False, "User tidak ditemukan"

            if not user.check_password(old_password):
                return False, "Password saat ini salah"

            # The admin-visible copy is dropped once the user picks their own password
            user.set_password(new_password, keep_copy=False)
            db.session.commit()
            logger.info("User %s changed password", user.username)
            return True, "Password berhasil diubah"

        except Exception as e:
            db.session.rollback()
            logger.exception("Error changing password")
            return False, f"Error changing password: {str(e)}"

    @staticmethod
    def reset_teacher_password(user_id):
        """Reset a teacher password to a new random password"""
        try:
            user = db.session.get(User, user_id)
            if not user or user.is_admin:
                return False, None, "Guru tidak ditemukan"

            new_password = User.generate_password()
            user.set_password(new_password, keep_copy=True)
            db.session.commit()
            logger.info("Password reset for %s", user.username)
            return True, new_password, "Password berhasil direset"

        except Exception as e:
            db.session.rollback()
            logger.exception("Error resetting password")
            return False, None, f"Error resetting password: {str(e)}"


class SessionManager:
    """Session management utilities"""

    @staticmethod
    def create_session(session, user):
        """Create user session"""
        session['user_id'] = user.id
        session['role'] = user.role
        session['username'] = user.username
        session['display_name'] = user.display_name
        session['login_time'] = datetime.utcnow().isoformat()
        session.permanent = True

    @staticmethod
    def clear_session(session):
        """Clear user session"""
        session.clear()

    @staticmethod
    def is_authenticated(session):
        """Check if user is authenticated"""
        return 'role' in session and 'user_id' in session

    @staticmethod
    def is_admin(session):
        return session.get('role') == User.ROLE_ADMIN

    @staticmethod
    def is_guru(session):
        return session.get('role') == User.ROLE_GURU

    @staticmethod
    def get_current_user_id(session):
        """Get current user ID from session"""
        return session.get('user_id')

    @staticmethod
    def get_session_info(session):
        """Get complete session information"""
        if not SessionManager.is_authenticated(session):
            return None

        return {
            'role': session.get('role'),
            'user_id': session.get('user_id'),
            'username': session.get('username'),
            'display_name': session.get('display_name'),
            'login_time': session.get('login_time')
        }
