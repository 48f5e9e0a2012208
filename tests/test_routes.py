"""
Integration tests for routes and workflows
"""

import unittest

from app import create_app
from config import TestingConfig
from database import db
from models.grades import Grade
from models.student import Student
from models.user import User
from routes.common import XLSX_CONTENT_TYPE
from services.grade_service import GradeService

class TestRoutes(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.app = create_app(TestingConfig)

        # Requests push their own app context, so none is kept open between them
        with self.app.app_context():
            admin = User(username='admin', display_name='Administrator', role=User.ROLE_ADMIN)
            admin.set_password('admin123')
            guru = User(username='budi', display_name='Budi Santoso', role=User.ROLE_GURU,
                        assigned_subjects=['Matematika'], additional_duties=[])
            guru.set_password('guru123')
            student = Student(student_code='sis001', name='Andi Wijaya', nis='10001', class_name='X-1')
            db.session.add_all([admin, guru, student])
            db.session.commit()
            self.admin_id = admin.id
            self.guru_id = guru.id
            self.student_id = student.id

        self.client = self.app.test_client()

    def tearDown(self):
        """Clean up after tests"""
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    def login(self, username, password):
        return self.client.post('/login', data={'username': username, 'password': password})

    def make_staff(self, username, duties):
        with self.app.app_context():
            user = User(username=username, display_name=username.title(), role=User.ROLE_GURU,
                        additional_duties=duties)
            user.set_password('guru123')
            db.session.add(user)
            db.session.commit()

    # ---- authentication ----

    def test_login_page(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'Masuk ke SkorZen', response.data)

    def test_admin_login_success(self):
        response = self.client.post('/login', data={'username': 'admin', 'password': 'admin123'},
                                    follow_redirects=True)
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'Dasbor Admin', response.data)

    def test_guru_login_redirects_to_guru_dashboard(self):
        response = self.login('budi', 'guru123')
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.headers['Location'].endswith('/guru/dashboard'))

    def test_login_failure(self):
        response = self.login('admin', 'salah')
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'Username atau password salah', response.data)

    def test_login_requires_both_fields(self):
        response = self.login('admin', '')
        self.assertIn(b'Username dan password wajib diisi', response.data)

    def test_logout(self):
        self.login('admin', 'admin123')
        response = self.client.post('/logout')
        self.assertEqual(response.status_code, 302)
        response = self.client.get('/admin/dashboard')
        self.assertTrue(response.headers['Location'].endswith('/login'))

    def test_change_password(self):
        self.login('budi', 'guru123')
        response = self.client.post('/change-password', data={
            'current_password': 'guru123', 'new_password': 'baru1234', 'confirm_password': 'beda1234',
        })
        self.assertIn(b'Konfirmasi password baru tidak cocok', response.data)

        response = self.client.post('/change-password', data={
            'current_password': 'guru123', 'new_password': 'baru1234', 'confirm_password': 'baru1234',
        })
        self.assertEqual(response.status_code, 302)
        with self.app.app_context():
            self.assertTrue(db.session.get(User, self.guru_id).check_password('baru1234'))

    # ---- access control ----

    def test_pages_require_login(self):
        for url in ('/admin/dashboard', '/guru/dashboard', '/ujian/'):
            response = self.client.get(url)
            self.assertEqual(response.status_code, 302, url)
            self.assertTrue(response.headers['Location'].endswith('/login'), url)

    def test_guru_cannot_open_admin_pages(self):
        self.login('budi', 'guru123')
        response = self.client.get('/admin/students')
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.headers['Location'].endswith('/guru/dashboard'))

    def test_admin_cannot_open_guru_pages(self):
        self.login('admin', 'admin123')
        response = self.client.get('/guru/grades')
        self.assertTrue(response.headers['Location'].endswith('/admin/dashboard'))

    def test_inactive_user_loses_session(self):
        self.login('budi', 'guru123')
        with self.app.app_context():
            db.session.get(User, self.guru_id).is_active = False
            db.session.commit()
        response = self.client.get('/guru/dashboard')
        self.assertTrue(response.headers['Location'].endswith('/login'))

    def test_duty_pages(self):
        self.login('budi', 'guru123')
        for url in ('/guru/violations', '/guru/grades/missing', '/guru/tata-usaha/attendance'):
            response = self.client.get(url)
            self.assertEqual(response.status_code, 302, url)

        self.make_staff('kesiswaan', ['kesiswaan'])
        self.client.post('/logout')
        self.login('kesiswaan', 'guru123')
        self.assertEqual(self.client.get('/guru/violations').status_code, 200)

    def test_non_teaching_staff_cannot_input_grades(self):
        self.make_staff('staf', ['staf_tu'])
        self.login('staf', 'guru123')
        response = self.client.get('/guru/grades')
        self.assertEqual(response.status_code, 302)
        self.assertEqual(self.client.get('/guru/attendance').status_code, 200)

    # ---- leadership read access ----

    def test_leadership_can_read_admin_reports(self):
        self.make_staff('kepsek', ['kepala_sekolah'])
        self.login('kepsek', 'guru123')
        for url in ('/admin/dashboard', '/admin/grades', '/admin/attendance', '/admin/attendance/summary',
                    '/admin/activity-reports', '/admin/violations', '/admin/violations/print', '/admin/agendas'):
            self.assertEqual(self.client.get(url).status_code, 200, url)

        response = self.client.get('/admin/grades/export')
        self.assertEqual(response.headers['Content-Type'], XLSX_CONTENT_TYPE)
        self.assertIn(b'Pengawasan Pimpinan', self.client.get('/guru/dashboard').data)

    def test_leadership_cannot_change_data(self):
        with self.app.app_context():
            guru = db.session.get(User, self.guru_id)
            success, grade, message = GradeService.save_grade({
                'student_code': 'sis001', 'subject': 'Matematika', 'semester': '1',
                'academic_year': '2024/2025', 'assignments': '80', 'test': '70', 'midterm': '75',
                'final_exam': '80', 'days_present': '90', 'extracurricular': '80', 'osis': '0',
            }, guru)
            self.assertTrue(success, message)
            grade_id = grade.id

        self.make_staff('kepalatu', ['kepala_tata_usaha'])
        self.login('kepalatu', 'guru123')
        self.assertNotIn(b'Hapus data nilai ini?', self.client.get('/admin/grades').data)
        response = self.client.post(f'/admin/grades/{grade_id}/delete')
        self.assertTrue(response.headers['Location'].endswith('/guru/dashboard'))
        with self.app.app_context():
            self.assertIsNotNone(db.session.get(Grade, grade_id))

        response = self.client.get('/admin/students')
        self.assertTrue(response.headers['Location'].endswith('/guru/dashboard'))

    def test_guru_without_leadership_duty_cannot_read_reports(self):
        self.login('budi', 'guru123')
        for url in ('/admin/dashboard', '/admin/grades', '/admin/violations'):
            response = self.client.get(url)
            self.assertEqual(response.status_code, 302, url)
            self.assertTrue(response.headers['Location'].endswith('/guru/dashboard'), url)

    # ---- pages ----

    def test_admin_pages_render(self):
        self.login('admin', 'admin123')
        urls = [
            '/admin/dashboard', '/admin/students', f'/admin/students/{self.student_id}/edit', '/admin/students/sis001/report',
            '/admin/grades', '/admin/grades/missing', '/admin/weights', '/admin/academic',
            '/admin/teachers', f'/admin/teachers/{self.guru_id}/edit', '/admin/activity-log', '/admin/attendance',
            '/admin/attendance/summary', '/admin/holidays', '/admin/activity-reports',
            '/admin/violations', '/admin/violations/print', '/admin/agendas', '/admin/announcements',
            '/admin/archive-links', '/admin/school-profile', '/admin/print-settings',
            '/ujian/', '/ujian/berita-acara', '/ujian/daftar-hadir',
        ]
        for url in urls:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 200, url)

    def test_guru_pages_render(self):
        self.login('budi', 'guru123')
        urls = [
            '/guru/dashboard', '/guru/grades?class_name=X-1&subject=Matematika', '/guru/grades/recap',
            '/guru/students', '/guru/students/sis001/report', '/guru/agenda', '/guru/attendance',
            '/guru/attendance/recap', '/guru/announcements', '/guru/school-profile',
            '/guru/archive-links',
        ]
        for url in urls:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 200, url)

    def test_unknown_student_report_redirects(self):
        self.login('admin', 'admin123')
        response = self.client.get('/admin/students/tidakada/report')
        self.assertEqual(response.status_code, 302)

    # ---- workflows ----

    def test_add_student_ajax(self):
        self.login('admin', 'admin123')
        headers = {'X-Requested-With': 'XMLHttpRequest'}
        response = self.client.post('/admin/students/add', headers=headers, data={
            'student_code': 'SIS002', 'name': 'Bela Putri', 'nis': '10002', 'class_name': 'X-1',
        })
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()['success'])
        with self.app.app_context():
            self.assertIsNotNone(Student.get_by_code('sis002'))

        response = self.client.post('/admin/students/add', headers=headers, data={
            'student_code': 'sis003', 'name': 'Citra', 'nis': '10002', 'class_name': 'X-1',
        })
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()['success'])

    def test_save_grade_json(self):
        self.login('budi', 'guru123')
        response = self.client.post('/guru/grades/save', json={
            'student_code': 'sis001', 'subject': 'Matematika', 'semester': '1',
            'academic_year': '2024/2025', 'assignments': '80, 90', 'test': '70', 'midterm': '75',
            'final_exam': '80', 'days_present': '90', 'extracurricular': '80', 'osis': '0',
        })
        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertEqual(payload['final_grade'], 85.0)
        self.assertEqual(payload['attendance'], 100.0)

    def test_teacher_credentials_json(self):
        self.login('admin', 'admin123')
        response = self.client.post('/admin/teachers/add', data={'display_name': 'Sari Dewi'},
                                    headers={'X-Requested-With': 'XMLHttpRequest'})
        credentials = response.get_json()['credentials']
        with self.app.app_context():
            teacher_id = User.query.filter_by(username=credentials['username']).first().id

        response = self.client.get(f'/admin/teachers/{teacher_id}/credentials')
        self.assertEqual(response.get_json()['password'], credentials['password'])
        self.assertEqual(self.client.get(f'/admin/teachers/{self.admin_id}/credentials').status_code, 404)

    def test_record_attendance(self):
        self.login('budi', 'guru123')
        response = self.client.post('/guru/attendance', data={'date': '2024-06-03', 'status': 'Hadir'},
                                    follow_redirects=True)
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'berhasil disimpan', response.data)

    # ---- query string handling ----

    def test_grade_filters_ignore_non_numeric_semester(self):
        self.login('admin', 'admin123')
        self.assertEqual(self.client.get('/admin/grades?semester=abc').status_code, 200)
        self.assertEqual(self.client.get('/admin/grades/export?semester=abc').status_code, 200)
        self.client.post('/logout')

        self.login('budi', 'guru123')
        self.assertEqual(self.client.get('/guru/grades/recap?semester=abc').status_code, 200)

    def test_monthly_recap_rejects_all_months(self):
        self.login('admin', 'admin123')
        response = self.client.get('/admin/attendance/summary?year=2024&month=all')
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.headers['Location'].endswith('/admin/attendance/summary?year=2024'))

        response = self.client.get('/admin/attendance/summary/export?year=2024&month=all', follow_redirects=True)
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'Rekap kehadiran hanya tersedia per bulan', response.data)
        self.client.post('/logout')

        self.login('budi', 'guru123')
        response = self.client.get('/guru/attendance/recap?month=all')
        self.assertEqual(response.status_code, 302)

    def test_out_of_range_year_falls_back(self):
        self.login('admin', 'admin123')
        for url in ('/admin/attendance?year=10000', '/admin/attendance/summary?year=10000&month=2',
                    '/admin/violations?year=10000', '/admin/holidays?year=99999'):
            self.assertEqual(self.client.get(url).status_code, 200, url)

    def test_missing_grades_redirect_keeps_every_subject(self):
        self.login('admin', 'admin123')
        response = self.client.get('/admin/grades/missing/export?academic_year=2024/2025&semester=1'
                                   '&subjects=Matematika&subjects=Fisika&component=nilai')
        self.assertEqual(response.status_code, 302)
        location = response.headers['Location']
        self.assertIn('subjects=Matematika', location)
        self.assertIn('subjects=Fisika', location)

    # ---- downloads ----

    def test_excel_downloads(self):
        self.login('admin', 'admin123')
        for url in ('/admin/students/export', '/admin/students/template', '/admin/grades/export',
                    '/admin/attendance/summary/export', '/admin/violations/export'):
            response = self.client.get(url)
            self.assertEqual(response.status_code, 200, url)
            self.assertEqual(response.headers['Content-Type'], XLSX_CONTENT_TYPE)
            self.assertIn('attachment', response.headers['Content-Disposition'])

    def test_report_card_pdf_download(self):
        self.login('admin', 'admin123')
        response = self.client.get('/admin/students/sis001/report.pdf')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['Content-Type'], 'application/pdf')
        self.assertTrue(response.data.startswith(b'%PDF'))

if __name__ == '__main__':
    unittest.main()
