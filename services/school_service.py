"""
School settings service for SkorZen School Portal
School profile statistics and print settings
"""

import logging

from database import DatabaseError
from models.settings import PrintSettings, SchoolProfile, PREDEFINED_CLASSES, STAT_KEYS
from services.communication_service import CommunicationService
from utils.db_helpers import safe_update_and_commit
from utils.validators import validate_text_length, validate_url

logger = logging.getLogger(__name__)

def _non_negative_int(value, label):
    """Parse a non-negative count, raising ValueError with a readable message"""
    text = str(value if value is not None else '').strip() or '0'
    try:
        number = int(text)
    except ValueError:
        raise ValueError(f"{label} harus berupa bilangan bulat")
    if number < 0:
        raise ValueError(f"{label} tidak boleh negatif")
    return number

class SchoolService:
    """Service for school-wide settings"""

    @staticmethod
    def get_profile():
        return SchoolProfile.get_current()

    @staticmethod
    def update_profile(form, user=None):
        """
        Update the school profile from flat form fields:
        stat_<key>_<source>, class_<name>_<gender>_<source>,
        facility_name_<n> and facility_quantity_<n>.
        """
        try:
            stats = {
                key: {
                    source: _non_negative_int(form.get(f'stat_{key}_{source}'), f"{label} ({source})")
                    for source in ('ril', 'dapodik')
                }
                for key, label in STAT_KEYS
            }

            class_details = []
            for class_name in PREDEFINED_CLASSES:
                row = {'class_name': class_name}
                for gender in ('male', 'female'):
                    row[gender] = {
                        source: _non_negative_int(form.get(f'class_{class_name}_{gender}_{source}'),
                                                  f"Jumlah siswa {class_name}")
                        for source in ('ril', 'dapodik')
                    }
                class_details.append(row)

            facilities = []
            index = 0
            while f'facility_name_{index}' in form:
                name = (form.get(f'facility_name_{index}') or '').strip()
                if name:
                    facilities.append({
                        'name': name[:100],
                        'quantity': _non_negative_int(form.get(f'facility_quantity_{index}'), f"Jumlah {name}")
                    })
                index += 1
        except ValueError as e:
            return False, str(e)

        profile = SchoolProfile.get_current()
        # Assign new objects so the JSON columns are flagged as modified
        profile.stats = stats
        profile.class_details = class_details
        profile.facilities = facilities
        try:
            success, message = safe_update_and_commit()
        except DatabaseError as e:
            return False, f"Gagal menyimpan profil sekolah: {str(e)}"
        if not success:
            return False, message

        CommunicationService.add_activity_log("Profil Sekolah Diperbarui", "Data statistik sekolah diperbarui", user)
        return True, "Profil sekolah berhasil disimpan"

    @staticmethod
    def get_print_settings():
        return PrintSettings.get_current()

    @staticmethod
    def update_print_settings(form, user=None):
        """Validate and store letterhead and signer settings"""
        is_valid, message = validate_url(form.get('header_image_url'), 'URL gambar kop', required=False)
        if not is_valid:
            return False, message
        for field in PrintSettings.TEXT_FIELDS:
            is_valid, message = validate_text_length(form.get(field), field.replace('_', ' ').capitalize(),
                                                     0, 100, required=False)
            if not is_valid:
                return False, message

        settings = PrintSettings.get_current()
        settings.header_image_url = (form.get('header_image_url') or '').strip() or None
        for field in PrintSettings.TEXT_FIELDS:
            setattr(settings, field, (form.get(field) or '').strip() or None)
        settings.place = settings.place or PrintSettings.DEFAULT_PLACE
        try:
            success, message = safe_update_and_commit()
        except DatabaseError as e:
            return False, f"Gagal menyimpan pengaturan cetak: {str(e)}"
        if not success:
            return False, message

        CommunicationService.add_activity_log("Pengaturan Cetak Diperbarui", f"Tempat: {settings.place}", user)
        return True, "Pengaturan cetak berhasil disimpan"
