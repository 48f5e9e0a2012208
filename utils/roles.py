"""
Additional duty (tugas tambahan) definitions for SkorZen School Portal
"""

KEPALA_SEKOLAH = 'kepala_sekolah'
KURIKULUM = 'kurikulum'
KESISWAAN = 'kesiswaan'
BENDAHARA = 'bendahara'
OPERATOR = 'operator'
BK = 'bk'
KEPALA_TATA_USAHA = 'kepala_tata_usaha'
STAF_TU = 'staf_tu'
SATPAM = 'satpam'
PENJAGA_SEKOLAH = 'penjaga_sekolah'
PEMBINA_OSIS = 'pembina_osis'

LEGACY_PEMBINA_ESKUL = 'pembina_eskul'

# Ordered (code, label) pairs; the order is the display order in forms
DUTY_CHOICES = [
    (KEPALA_SEKOLAH, 'Kepala Sekolah'),
    (KURIKULUM, 'Wakasek Kurikulum'),
    (KESISWAAN, 'Wakasek Kesiswaan'),
    (BENDAHARA, 'Bendahara'),
    (OPERATOR, 'Operator'),
    (BK, 'Guru BK'),
    (KEPALA_TATA_USAHA, 'Kepala Tata Usaha'),
    (STAF_TU, 'Staf Tata Usaha'),
    (SATPAM, 'Satpam'),
    (PENJAGA_SEKOLAH, 'Penjaga Sekolah'),
    (PEMBINA_OSIS, 'Pembina OSIS'),
    ('pembina_eskul_pmr', 'Pembina Eskul PMR'),
    ('pembina_eskul_paskibra', 'Pembina Eskul Paskibra'),
    ('pembina_eskul_pramuka', 'Pembina Eskul Pramuka'),
    ('pembina_eskul_karawitan', 'Pembina Eskul Karawitan'),
    ('pembina_eskul_pencak_silat', 'Pembina Eskul Pencak Silat'),
    ('pembina_eskul_volly_ball', 'Pembina Eskul Volly Ball'),
]

DUTY_LABELS = dict(DUTY_CHOICES)

# Tata usaha staff, in the order used by combined reports
TU_STAFF_DUTIES = [KEPALA_TATA_USAHA, OPERATOR, STAF_TU, SATPAM, PENJAGA_SEKOLAH]

NON_TEACHING_DUTIES = [STAF_TU, SATPAM, PENJAGA_SEKOLAH]

# Duties with read access to the admin report pages
LEADERSHIP_DUTIES = [KEPALA_SEKOLAH, KEPALA_TATA_USAHA]

# Duties that may file activity reports
REPORTABLE_DUTIES = [code for code, _ in DUTY_CHOICES if code != KEPALA_SEKOLAH]

def duty_label(code):
    """Return the display label for a duty code"""
    return DUTY_LABELS.get(code, code)

def is_eskul_duty(code):
    return bool(code) and code.startswith('pembina_eskul_')

def clean_duties(duties):
    """Keep only known duty codes, in canonical order, without the legacy eskul value"""
    selected = set(d for d in (duties or []) if d and d != LEGACY_PEMBINA_ESKUL)
    return [code for code, _ in DUTY_CHOICES if code in selected]

def reportable_duties(duties):
    """Duties from the given list that may file activity reports"""
    return [d for d in clean_duties(duties) if d in REPORTABLE_DUTIES]
