"""
Menu definitions for SkorZen School Portal
Admin menu groups and duty-filtered guru menu items
"""

from utils.roles import BK, KEPALA_TATA_USAHA, KESISWAAN, KURIKULUM, LEADERSHIP_DUTIES

ADMIN_MENU = [
    ('Sistem Akademik & Penilaian', [
        ('Data Siswa', 'admin.students'),
        ('Data Nilai', 'admin.grades'),
        ('Rekap Nilai Kosong', 'admin.missing_grades'),
        ('Bobot Penilaian', 'admin.weights'),
        ('Pengaturan Akademik', 'admin.academic_settings'),
    ]),
    ('Manajemen Pengguna & Sistem', [
        ('Data Guru', 'admin.teachers'),
        ('Log Aktivitas', 'admin.activity_log'),
    ]),
    ('Kehadiran Guru', [
        ('Data Kehadiran', 'admin.attendance'),
        ('Rekap Bulanan', 'admin.attendance_summary'),
        ('Hari Libur', 'admin.holidays'),
    ]),
    ('Komunikasi & Informasi', [
        ('Pengumuman', 'admin.announcements'),
        ('Arsip Link', 'admin.archive_links'),
        ('Laporan Kegiatan', 'admin.activity_reports'),
        ('Laporan Pelanggaran', 'admin.violations'),
        ('Agenda Kelas', 'admin.agendas'),
    ]),
    ('Administrasi Ujian', [
        ('Berita Acara', 'exams.minutes'),
        ('Daftar Hadir Pengawas', 'exams.proctor_attendance'),
    ]),
    ('Pengaturan Umum', [
        ('Profil Sekolah', 'admin.school_profile'),
        ('Pengaturan Cetak', 'admin.print_settings'),
    ]),
]

def _teaching(user):
    return not user.is_non_teaching

def _always(user):
    return True

def _leadership(user):
    return user.has_duty(*LEADERSHIP_DUTIES)

# (group, label, endpoint, predicate)
GURU_MENU = [
    ('Menu Utama', 'Input Nilai', 'guru.input_grades', _teaching),
    ('Menu Utama', 'Daftar Siswa', 'guru.students', _teaching),
    ('Menu Utama', 'Agenda Mengajar', 'guru.agenda', _teaching),
    ('Menu Utama', 'Rekap Nilai', 'guru.grade_recap', _teaching),
    ('Menu Utama', 'Catat Kehadiran', 'guru.attendance', _always),
    ('Menu Utama', 'Rekap Kehadiran', 'guru.attendance_recap', _always),
    ('Menu Utama', 'Pengumuman', 'guru.announcements', _always),
    ('Menu Utama', 'Profil Sekolah', 'guru.school_profile', _always),
    ('Menu Utama', 'Arsip Link', 'guru.archive_links', _always),
    ('Menu Utama', 'Administrasi Ujian', 'exams.index', _always),
    ('Tugas Tambahan', 'Laporan Kegiatan', 'guru.activity_reports', lambda u: bool(u.reportable_duties)),
    ('Tugas Tambahan', 'Catat Pelanggaran', 'guru.violations', lambda u: u.has_duty(KESISWAAN, BK)),
    ('Tugas Tambahan', 'Rekap Nilai Kosong', 'guru.missing_grades', lambda u: u.has_duty(KURIKULUM)),
    ('Tugas Tambahan', 'Rekap Kehadiran Staf TU', 'guru.tu_attendance_recap',
     lambda u: u.has_duty(KEPALA_TATA_USAHA)),
    ('Tugas Tambahan', 'Laporan Gabungan TU', 'guru.tu_combined_reports',
     lambda u: u.has_duty(KEPALA_TATA_USAHA)),
    ('Pengawasan Pimpinan', 'Dasbor Sekolah', 'admin.dashboard', _leadership),
    ('Pengawasan Pimpinan', 'Data Nilai', 'admin.grades', _leadership),
    ('Pengawasan Pimpinan', 'Kehadiran Guru', 'admin.attendance', _leadership),
    ('Pengawasan Pimpinan', 'Rekap Kehadiran Bulanan', 'admin.attendance_summary', _leadership),
    ('Pengawasan Pimpinan', 'Laporan Kegiatan', 'admin.activity_reports', _leadership),
    ('Pengawasan Pimpinan', 'Laporan Pelanggaran', 'admin.violations', _leadership),
    ('Pengawasan Pimpinan', 'Agenda Kelas', 'admin.agendas', _leadership),
]

def build_navigation(user):
    """
    Menu groups visible to a user.

    Returns a list of {'title': ..., 'items': [{'label', 'endpoint'}]};
    groups without visible items are left out.
    """
    if user is None:
        return []

    if user.is_admin:
        return [
            {'title': title, 'items': [{'label': label, 'endpoint': endpoint} for label, endpoint in items]}
            for title, items in ADMIN_MENU
        ]

    groups = []
    for group_title, label, endpoint, predicate in GURU_MENU:
        if not predicate(user):
            continue
        if not groups or groups[-1]['title'] != group_title:
            groups.append({'title': group_title, 'items': []})
        groups[-1]['items'].append({'label': label, 'endpoint': endpoint})
    return groups

def visible_endpoints(user):
    """Flat set of endpoints the user's menu exposes"""
    return {item['endpoint'] for group in build_navigation(user) for item in group['items']}
