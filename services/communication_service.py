"""
Communication service for SkorZen School Portal
Announcements, archive links and the activity log
"""

import logging

from database import db
from models.communication import Announcement, ArchiveLink, ActivityLog
from utils.validators import validate_text_length, validate_url

logger = logging.getLogger(__name__)

class CommunicationService:
    """Service for announcements, archive links and audit logging"""

    @staticmethod
    def add_activity_log(action, details, user=None):
        """Append an entry to the activity log; failures never abort the caller"""
        try:
            entry = ActivityLog(
                action=action,
                details=details,
                user_id=user.id if user else None,
                user_name=(user.display_name or user.username) if user else 'Sistem'
            )
            db.session.add(entry)
            db.session.commit()
            return entry
        except Exception:
            db.session.rollback()
            logger.exception("Could not write activity log entry '%s'", action)
            return None

    @staticmethod
    def get_recent_activity(limit=10):
        return (ActivityLog.query
                .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
                .limit(limit)
                .all())

    # ---- announcements ----

    @staticmethod
    def _validate_announcement(data):
        checks = [
            validate_text_length(data.get('title'), 'Judul', 5, 150),
            validate_text_length(data.get('content'), 'Isi pengumuman', 10, 2000),
            validate_text_length(data.get('extra_info'), 'Info tambahan', 0, 100, required=False),
        ]
        for is_valid, message in checks:
            if not is_valid:
                return False, message

        priority = data.get('priority') or Announcement.DEFAULT_PRIORITY
        if priority not in Announcement.PRIORITIES:
            return False, f"Prioritas harus salah satu dari: {', '.join(Announcement.PRIORITIES)}"
        return True, "Valid announcement"

    @staticmethod
    def create_announcement(data, user):
        """Create an announcement"""
        is_valid, message = CommunicationService._validate_announcement(data)
        if not is_valid:
            return False, None, message

        try:
            announcement = Announcement(
                title=data['title'].strip(),
                content=data['content'].strip(),
                priority=data.get('priority') or Announcement.DEFAULT_PRIORITY,
                extra_info=(data.get('extra_info') or '').strip() or None,
                created_by_id=user.id,
                created_by_name=user.display_name
            )
            db.session.add(announcement)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error creating announcement")
            return False, None, f"Gagal menyimpan pengumuman: {str(e)}"

        CommunicationService.add_activity_log(
            "Pengumuman Dibuat", f"Judul: {announcement.title}", user)
        return True, announcement, "Pengumuman berhasil dibuat"

    @staticmethod
    def update_announcement(announcement_id, data, user):
        """Update an announcement"""
        announcement = db.session.get(Announcement, announcement_id)
        if not announcement:
            return False, "Pengumuman tidak ditemukan"

        is_valid, message = CommunicationService._validate_announcement(data)
        if not is_valid:
            return False, message

        try:
            announcement.title = data['title'].strip()
            announcement.content = data['content'].strip()
            announcement.priority = data.get('priority') or Announcement.DEFAULT_PRIORITY
            announcement.extra_info = (data.get('extra_info') or '').strip() or None
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error updating announcement %s", announcement_id)
            return False, f"Gagal memperbarui pengumuman: {str(e)}"

        CommunicationService.add_activity_log(
            "Pengumuman Diperbarui", f"Judul: {announcement.title}", user)
        return True, "Pengumuman berhasil diperbarui"

    @staticmethod
    def delete_announcement(announcement_id, user):
        announcement = db.session.get(Announcement, announcement_id)
        if not announcement:
            return False, "Pengumuman tidak ditemukan"

        title = announcement.title
        try:
            db.session.delete(announcement)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting announcement %s", announcement_id)
            return False, f"Gagal menghapus pengumuman: {str(e)}"

        CommunicationService.add_activity_log("Pengumuman Dihapus", f"Judul: {title}", user)
        return True, "Pengumuman berhasil dihapus"

    # ---- archive links ----

    @staticmethod
    def _validate_archive_link(data):
        checks = [
            validate_text_length(data.get('title'), 'Judul', 3, 100),
            validate_url(data.get('url'), 'URL'),
            validate_text_length(data.get('description'), 'Deskripsi', 5, 200),
        ]
        for is_valid, message in checks:
            if not is_valid:
                return False, message
        return True, "Valid archive link"

    @staticmethod
    def get_archive_links():
        return ArchiveLink.query.order_by(ArchiveLink.created_at.desc(), ArchiveLink.id.desc()).all()

    @staticmethod
    def save_archive_link(data, user, link_id=None):
        """Create an archive link, or update it when link_id is given"""
        is_valid, message = CommunicationService._validate_archive_link(data)
        if not is_valid:
            return False, message

        try:
            if link_id:
                link = db.session.get(ArchiveLink, link_id)
                if not link:
                    return False, "Link arsip tidak ditemukan"
                action = "Link Arsip Diperbarui"
            else:
                link = ArchiveLink(created_by_id=user.id, created_by_name=user.display_name)
                db.session.add(link)
                action = "Link Arsip Ditambahkan"

            link.title = data['title'].strip()
            link.url = data['url'].strip()
            link.description = data['description'].strip()
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error saving archive link")
            return False, f"Gagal menyimpan link arsip: {str(e)}"

        CommunicationService.add_activity_log(action, f"Judul: {link.title}", user)
        return True, "Link arsip berhasil disimpan"

    @staticmethod
    def delete_archive_link(link_id, user):
        link = db.session.get(ArchiveLink, link_id)
        if not link:
            return False, "Link arsip tidak ditemukan"

        title = link.title
        try:
            db.session.delete(link)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception("Error deleting archive link %s", link_id)
            return False, f"Gagal menghapus link arsip: {str(e)}"

        CommunicationService.add_activity_log("Link Arsip Dihapus", f"Judul: {title}", user)
        return True, "Link arsip berhasil dihapus"
