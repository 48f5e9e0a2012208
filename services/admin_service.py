"""
Admin service for SkorZen School Portal
Dashboard statistics and teacher (guru) account management
"""

import logging
from datetime import date

from sqlalchemy import func

from database import db
from models.communication import Announcement
from models.grades import Grade
from models.reports import Violation
from models.student import Student
from models.user import User
from services.auth_service import AuthService
from services.communication_service import CommunicationService
from utils.calendar_helpers import month_bounds
from utils.roles import clean_duties
from utils.validators import validate_name, validate_password, validate_username

logger = logging.getLogger(__name__)

class AdminService:
    """Admin service class"""

    @staticmethod
    def get_dashboard_stats(recent_limit=10, today=None):
        """Counts, class distribution and recent activity for the admin dashboard"""
        today = today or date.today()
        month_start, month_end = month_bounds(today.year, today.month)

        class_rows = (db.session.query(Student.class_name, func.count(Student.id))
                      .group_by(Student.class_name)
                      .all())
        # Largest classes first, ties by class name
        distribution = sorted(
            ({'class_name': name, 'count': count} for name, count in class_rows),
            key=lambda row: (-row['count'], row['class_name'])
        )

        return {
            'total_teachers': User.query.filter_by(role=User.ROLE_GURU).count(),
            'total_students': Student.query.count(),
            'total_grades': Grade.query.count(),
            'total_announcements': Announcement.query.count(),
            'violations_this_month': Violation.query.filter(
                Violation.date >= month_start, Violation.date <= month_end).count(),
            'class_distribution': distribution,
            'recent_activity': CommunicationService.get_recent_activity(recent_limit),
        }

    # ---- teacher accounts ----

    @staticmethod
    def get_teachers(include_inactive=True):
        query = User.query.filter_by(role=User.ROLE_GURU)
        if not include_inactive:
            query = query.filter_by(is_active=True)
        return query.order_by(User.display_name).all()

    @staticmethod
    def _clean_subjects(subjects):
        seen = []
        for subject in subjects or []:
            name = (subject or '').strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    @staticmethod
    def add_teacher(teacher_data, admin=None):
        """
        Create a guru account. Username and password are generated when not
        supplied; the password is kept encrypted so the admin can hand it out.

        Returns (success, credentials_dict_or_None, message)
        """
        display_name = (teacher_data.get('display_name') or '').strip()
        is_valid, message = validate_name(display_name, 'Nama guru')
        if not is_valid:
            return False, None, message

        manual_username = (teacher_data.get('username') or '').strip()
        manual_password = (teacher_data.get('password') or '').strip()
        if manual_username:
            is_valid, message = validate_username(manual_username)
            if not is_valid:
                return False, None, message
            if User.query.filter(func.lower(User.username) == manual_username.lower()).first():
                return False, None, f"Username {manual_username} sudah digunakan"
        if manual_password:
            is_valid, message = validate_password(manual_password)
            if not is_valid:
                return False, None, message

        email = (teacher_data.get('email') or '').strip().lower() or None
        if email and User.query.filter_by(email=email).first():
            return False, None, f"Email {email} sudah digunakan"

        username, password = AuthService.generate_teacher_credentials(
            display_name, manual_username or None, manual_password or None)

        teacher = User(
            username=username,
            display_name=display_name,
            email=email,
            role=User.ROLE_GURU,
            assigned_subjects=AdminService._clean_subjects(teacher_data.get('assigned_subjects')),
            additional_duties=clean_duties(teacher_data.get('additional_duties')),
            signature_url=(teacher_data.get('signature_url') or '').strip() or None,
            is_active=True
        )
        teacher.set_password(password, keep_copy=True)

        try:
            db.session.add(teacher)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error adding teacher %s", username)
            return False, None, f"Gagal menambahkan guru: {str(e)}"

        logger.info("Teacher account %s created", username)
        CommunicationService.add_activity_log("Guru Ditambahkan", f"Nama: {display_name}, Username: {username}", admin)
        credentials = {'username': username, 'password': password}
        return True, credentials, f"Guru berhasil ditambahkan. Username: {username}, Password: {password}"

    @staticmethod
    def update_teacher(teacher_id, teacher_data, admin=None):
        """Update name, contact, subjects, duties and active flag of a guru"""
        teacher = db.session.get(User, teacher_id)
        if not teacher or teacher.is_admin:
            return False, "Guru tidak ditemukan"

        display_name = (teacher_data.get('display_name') or '').strip()
        is_valid, message = validate_name(display_name, 'Nama guru')
        if not is_valid:
            return False, message

        email = (teacher_data.get('email') or '').strip().lower() or None
        if email and User.query.filter(User.email == email, User.id != teacher.id).first():
            return False, f"Email {email} sudah digunakan"

        try:
            teacher.display_name = display_name
            teacher.email = email
            teacher.assigned_subjects = AdminService._clean_subjects(teacher_data.get('assigned_subjects'))
            teacher.set_duties(teacher_data.get('additional_duties'))
            teacher.signature_url = (teacher_data.get('signature_url') or '').strip() or None
            if 'is_active' in teacher_data:
                teacher.is_active = bool(teacher_data.get('is_active'))
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error updating teacher %s", teacher_id)
            return False, f"Gagal memperbarui data guru: {str(e)}"

        CommunicationService.add_activity_log(
            "Data Guru Diperbarui", f"Nama: {teacher.display_name}, Tugas: {', '.join(teacher.duty_labels) or '-'}", admin)
        return True, f"Data guru {teacher.display_name} berhasil diperbarui"

    @staticmethod
    def reset_teacher_password(teacher_id, admin=None):
        success, new_password, message = AuthService.reset_teacher_password(teacher_id)
        if success:
            teacher = db.session.get(User, teacher_id)
            CommunicationService.add_activity_log("Password Guru Direset", f"Username: {teacher.username}", admin)
            message = f"Password {teacher.display_name} direset menjadi: {new_password}"
        return success, new_password, message

    @staticmethod
    def get_teacher_credentials(teacher_id):
        """Username and the stored initial password, if the teacher never changed it"""
        teacher = db.session.get(User, teacher_id)
        if not teacher or teacher.is_admin:
            return None
        return {
            'username': teacher.username,
            'password': teacher.get_decrypted_password(),
        }

    @staticmethod
    def delete_teacher(teacher_id, admin=None):
        """Delete a guru account; their grades keep the record with no teacher"""
        teacher = db.session.get(User, teacher_id)
        if not teacher or teacher.is_admin:
            return False, "Guru tidak ditemukan"

        name = teacher.display_name
        try:
            db.session.delete(teacher)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting teacher %s", teacher_id)
            return False, f"Gagal menghapus guru: {str(e)}"

        CommunicationService.add_activity_log("Guru Dihapus", f"Nama: {name}", admin)
        return True, f"Guru {name} berhasil dihapus"
