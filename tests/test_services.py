"""
Unit tests for services
"""

import unittest
from datetime import date
from io import BytesIO

import openpyxl

from app import create_app
from config import TestingConfig
from database import db
from models.attendance import TeacherAttendance
from models.communication import ActivityLog
from models.grades import Grade
from models.student import Student
from models.user import User
from services.academic_service import AcademicService
from services.activity_report_service import ActivityReportService
from services.admin_service import AdminService
from services.agenda_service import AgendaService
from services.attendance_service import AttendanceService
from services.auth_service import AuthService
from services.communication_service import CommunicationService
from services.exam_service import ExamService
from services.grade_service import GradeService
from services.school_service import SchoolService
from services.student_service import IMPORT_HEADERS, StudentService
from services.violation_service import ViolationService

class ServiceTestCase(unittest.TestCase):
    """Fresh in-memory database with one admin, one teacher and two students"""

    def setUp(self):
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()

        self.admin = User(username='admin', display_name='Administrator', role=User.ROLE_ADMIN)
        self.admin.set_password('admin123')
        self.guru = User(username='budi', display_name='Budi Santoso', role=User.ROLE_GURU,
                         assigned_subjects=['Matematika'], additional_duties=[])
        self.guru.set_password('guru123', keep_copy=True)
        db.session.add_all([self.admin, self.guru])
        db.session.add_all([
            Student(student_code='sis001', name='Andi Wijaya', nis='10001', class_name='X-1'),
            Student(student_code='sis002', name='Bela Putri', nis='10002', class_name='X-1'),
        ])
        db.session.commit()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def make_guru(self, username, duties):
        user = User(username=username, display_name=username.title(), role=User.ROLE_GURU,
                    additional_duties=duties)
        user.set_password('guru123')
        db.session.add(user)
        db.session.commit()
        return user


class TestAuthService(ServiceTestCase):

    def test_authenticate_is_case_insensitive(self):
        success, user, message = AuthService.authenticate('BUDI', 'guru123')
        self.assertTrue(success)
        self.assertEqual(user.id, self.guru.id)
        self.assertIsNotNone(user.last_login)

    def test_authenticate_failure_and_inactive(self):
        success, user, message = AuthService.authenticate('budi', 'salah')
        self.assertFalse(success)
        self.assertEqual(message, 'Username atau password salah')

        self.guru.is_active = False
        db.session.commit()
        success, _, _ = AuthService.authenticate('budi', 'guru123')
        self.assertFalse(success)

    def test_change_password_drops_admin_copy(self):
        success, message = AuthService.change_password(self.guru.id, 'salah', 'baru1234')
        self.assertFalse(success)

        success, message = AuthService.change_password(self.guru.id, 'guru123', 'baru1234')
        self.assertTrue(success)
        self.assertTrue(self.guru.check_password('baru1234'))
        self.assertIsNone(self.guru.password_encrypted)

    def test_generated_usernames_are_unique(self):
        username, password = AuthService.generate_teacher_credentials('Budi')
        self.assertEqual(username, 'budi1')
        self.assertEqual(len(password), 8)


class TestAdminService(ServiceTestCase):

    def test_add_teacher_with_generated_credentials(self):
        success, credentials, message = AdminService.add_teacher({
            'display_name': 'Sari Dewi',
            'assigned_subjects': ['Biologi', 'Biologi', ' '],
            'additional_duties': ['bk', 'unknown'],
        }, self.admin)

        self.assertTrue(success)
        self.assertEqual(credentials['username'], 'sari.dewi')
        self.assertIn(credentials['password'], message)

        teacher = User.query.filter_by(username='sari.dewi').first()
        self.assertEqual(teacher.assigned_subjects, ['Biologi'])
        self.assertEqual(teacher.duties, ['bk'])
        self.assertEqual(AdminService.get_teacher_credentials(teacher.id),
                         {'username': 'sari.dewi', 'password': credentials['password']})

    def test_add_teacher_rejects_duplicate_username(self):
        success, credentials, message = AdminService.add_teacher(
            {'display_name': 'Budi Lain', 'username': 'Budi'}, self.admin)
        self.assertFalse(success)
        self.assertIsNone(credentials)

    def test_update_and_deactivate_teacher(self):
        success, message = AdminService.update_teacher(self.guru.id, {
            'display_name': 'Budi S.',
            'additional_duties': ['kurikulum'],
            'is_active': False,
        }, self.admin)
        self.assertTrue(success)
        self.assertEqual(self.guru.duties, ['kurikulum'])
        self.assertFalse(self.guru.is_active)

    def test_reset_password(self):
        success, new_password, message = AdminService.reset_teacher_password(self.guru.id, self.admin)
        self.assertTrue(success)
        self.assertTrue(self.guru.check_password(new_password))
        self.assertEqual(AdminService.get_teacher_credentials(self.guru.id)['password'], new_password)

    def test_admin_account_is_not_a_teacher(self):
        self.assertFalse(AdminService.delete_teacher(self.admin.id, self.admin)[0])
        self.assertIsNone(AdminService.get_teacher_credentials(self.admin.id))

    def test_dashboard_stats(self):
        db.session.add(Student(student_code='sis003', name='Citra', nis='10003', class_name='XI-2'))
        db.session.commit()

        stats = AdminService.get_dashboard_stats()
        self.assertEqual(stats['total_teachers'], 1)
        self.assertEqual(stats['total_students'], 3)
        self.assertEqual(stats['class_distribution'][0], {'class_name': 'X-1', 'count': 2})
        self.assertEqual(stats['violations_this_month'], 0)


class TestStudentService(ServiceTestCase):

    def _workbook(self, rows):
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.append(IMPORT_HEADERS)
        for row in rows:
            ws.append(row)
        output = BytesIO()
        wb.save(output)
        return output.getvalue()

    def test_add_student_normalizes_code(self):
        success, message = StudentService.add_student(
            {'student_code': 'SIS010', 'name': 'Dodi', 'nis': '10010', 'class_name': 'X-2'}, self.admin)
        self.assertTrue(success)
        self.assertIsNotNone(Student.get_by_code('sis010'))

    def test_add_student_rejects_duplicates(self):
        success, message = StudentService.add_student(
            {'student_code': 'sis001', 'name': 'Dodi', 'nis': '10099', 'class_name': 'X-2'}, self.admin)
        self.assertFalse(success)

        success, message = StudentService.add_student(
            {'student_code': 'sis099', 'name': 'Dodi', 'nis': '10001', 'class_name': 'X-2'}, self.admin)
        self.assertFalse(success)
        self.assertIn('10001', message)

    def test_import_upserts_rows(self):
        data = self._workbook([
            ['Andi Wijaya', '10001', 'XI-1', 'SIS001'],   # class change
            ['Bela Putri', '10002', 'X-1', 'sis002'],     # unchanged
            ['Citra Lestari', 10003, 'X-2', 'sis003'],    # new, NIS typed as a number
            ['Dodi', '', 'X-2', 'sis004'],                # incomplete
            ['Eko', '10003', 'X-2', 'sis005'],            # NIS repeated in the file
        ])
        success, summary, message = StudentService.import_students(data, self.admin)

        self.assertTrue(success)
        self.assertEqual(summary['added'], 1)
        self.assertEqual(summary['updated'], 1)
        self.assertEqual(summary['unchanged'], 1)
        self.assertEqual(summary['failed'], 2)
        self.assertEqual(Student.get_by_code('sis001').class_name, 'XI-1')
        self.assertEqual(Student.get_by_code('sis003').nis, '10003')
        self.assertTrue(summary['errors'][0].startswith('Baris 5'))

    def test_import_requires_headers(self):
        wb = openpyxl.Workbook()
        wb.active.append(['Nama', 'Kelas'])
        output = BytesIO()
        wb.save(output)
        success, summary, message = StudentService.import_students(output.getvalue())
        self.assertFalse(success)
        self.assertIn('NIS', message)

    def test_delete_student_removes_grades(self):
        db.session.add(Grade(student_code='sis001', subject='Matematika', semester=1,
                             academic_year='2024/2025', teacher_id=self.guru.id))
        db.session.commit()
        student = Student.get_by_code('sis001')

        success, message = StudentService.delete_student(student.id, self.admin)
        self.assertTrue(success)
        self.assertIn('1 data nilai', message)
        self.assertEqual(Grade.query.count(), 0)


class TestGradeService(ServiceTestCase):

    def _save(self, **overrides):
        data = {
            'student_code': 'sis001', 'subject': 'Matematika', 'semester': '1',
            'academic_year': '2024/2025', 'assignments': '80, 90', 'test': '70',
            'midterm': '75', 'final_exam': '80', 'days_present': '90',
            'extracurricular': '80', 'osis': '',
        }
        data.update(overrides)
        return GradeService.save_grade(data, self.guru)

    def test_save_grade_computes_final_grade(self):
        success, grade, message = self._save()
        self.assertTrue(success)
        self.assertEqual(grade.attendance, 100.0)
        self.assertEqual(grade.final_grade, 85.0)
        self.assertEqual(grade.osis, 0.0)

    def test_save_grade_updates_existing_record(self):
        self._save()
        success, grade, message = self._save(final_exam='100', days_present='45')
        self.assertTrue(success)
        self.assertEqual(Grade.query.count(), 1)
        self.assertEqual(grade.attendance, 50.0)

    def test_save_grade_validation(self):
        self.assertFalse(self._save(student_code='tidakada')[0])
        self.assertFalse(self._save(test='101')[0])
        self.assertFalse(self._save(assignments='80, x')[0])
        self.assertFalse(self._save(days_present='91')[0])
        self.assertFalse(self._save(semester='3')[0])

    def test_update_weights(self):
        data = {'tugas': '30', 'tes': '20', 'pts': '20', 'pas': '20', 'kehadiran': '10',
                'eskul': '5', 'osis': '5', 'effective_days_odd': '100', 'effective_days_even': '95'}
        success, message = GradeService.update_weights(data, self.admin)
        self.assertTrue(success)
        weights = GradeService.get_weights()
        self.assertEqual(weights.tugas, 30)
        self.assertEqual(weights.effective_days_for(2), 95)

        data['tugas'] = '40'
        success, message = GradeService.update_weights(data, self.admin)
        self.assertFalse(success)

    def test_teacher_may_only_delete_own_grade(self):
        success, grade, _ = self._save()
        other = self.make_guru('lain', [])
        self.assertFalse(GradeService.delete_grade(grade.id, other)[0])
        self.assertTrue(GradeService.delete_grade(grade.id, self.guru)[0])

    def test_teacher_recap_flags_below_kkm(self):
        self._save()
        self._save(student_code='sis002', test='0', midterm='0', final_exam='0')
        AcademicService.save_kkm('Matematika', '2024/2025', '80', self.admin)

        rows = GradeService.get_teacher_recap(self.guru.id)
        by_student = {row['student_code']: row for row in rows}
        self.assertFalse(by_student['sis001']['below_kkm'])
        self.assertTrue(by_student['sis002']['below_kkm'])
        self.assertEqual(by_student['sis002']['kkm'], 80)

    def test_grade_rows_sorting_and_search(self):
        self._save()
        self._save(student_code='sis002', final_exam='100')
        rows = GradeService.get_grade_rows({}, sort_by='final_grade', sort_dir='desc')
        self.assertEqual(rows[0]['student_code'], 'sis002')

        rows = GradeService.get_grade_rows({'search': 'andi'})
        self.assertEqual([r['student_code'] for r in rows], ['sis001'])

    def test_grade_rows_ignore_invalid_semester_filter(self):
        self._save()
        self._save(semester='2')
        self.assertEqual(len(GradeService.get_grade_rows({'semester': 'abc'})), 2)
        self.assertEqual(len(GradeService.get_grade_rows({'semester': 3})), 2)
        self.assertEqual([r['semester'] for r in GradeService.get_grade_rows({'semester': 2})], [2])

    def test_report_card_groups(self):
        self._save()
        self._save(semester='2')
        self._save(academic_year='2023/2024')
        report = GradeService.get_report_card('SIS001')
        self.assertEqual([y['academic_year'] for y in report['years']], ['2024/2025', '2023/2024'])
        self.assertEqual([s['semester_label'] for s in report['years'][0]['semesters']], ['Ganjil', 'Genap'])
        self.assertIsNone(GradeService.get_report_card('tidakada'))

    def test_missing_grades(self):
        self._save(test='0')
        success, rows, message = GradeService.get_missing_grades(
            '2024/2025', 1, ['Matematika'], 'tes')
        self.assertTrue(success)
        values = {row['student_code']: row['recorded_value'] for row in rows}
        self.assertEqual(values, {'sis001': '0', 'sis002': 'Kosong'})

        success, rows, _ = GradeService.get_missing_grades('2024/2025', 1, ['Matematika'], 'tugas')
        self.assertEqual([row['student_code'] for row in rows], ['sis002'])

    def test_missing_grades_requires_subjects(self):
        success, rows, message = GradeService.get_missing_grades('2024/2025', 1, [], 'tes')
        self.assertFalse(success)
        self.assertFalse(GradeService.get_missing_grades('2024/2025', 1, ['Matematika'], 'nilai')[0])


class TestAcademicService(ServiceTestCase):

    def test_academic_year_activation(self):
        success, message = AcademicService.set_academic_year_active('2024/2025', True, self.admin)
        self.assertTrue(success)
        self.assertEqual(AcademicService.get_active_academic_years(), ['2024/2025'])
        self.assertEqual(AcademicService.get_default_academic_year(), '2024/2025')

        self.assertFalse(AcademicService.set_academic_year_active('2024/2026', True)[0])
        self.assertFalse(AcademicService.set_academic_year_active('1990/1991', True)[0])

    def test_subjects_are_unique_case_insensitively(self):
        self.assertTrue(AcademicService.add_subject('Matematika', self.admin)[0])
        success, message = AcademicService.add_subject('matematika', self.admin)
        self.assertFalse(success)
        self.assertIn('Matematika', message)

    def test_kkm_settings_list_every_subject(self):
        AcademicService.add_subject('Biologi')
        AcademicService.add_subject('Fisika')
        AcademicService.save_kkm('Fisika', '2024/2025', 70)
        rows = {row['subject']: row for row in AcademicService.get_kkm_settings('2024/2025')}
        self.assertEqual(rows['Fisika']['kkm_value'], 70)
        self.assertTrue(rows['Fisika']['is_set'])
        self.assertFalse(rows['Biologi']['is_set'])

    def test_toggle_holiday(self):
        success, message = AcademicService.toggle_holiday('2024-06-17', 'Idul Adha', self.admin)
        self.assertTrue(success)
        self.assertEqual(len(AcademicService.get_holidays(2024, 6)), 1)

        AcademicService.toggle_holiday('2024-06-17', '', self.admin)
        self.assertEqual(AcademicService.get_holidays(2024, 6), [])
        self.assertFalse(AcademicService.toggle_holiday('17-06-2024', '')[0])


class TestAttendanceService(ServiceTestCase):

    def test_record_attendance_once_per_day(self):
        self.assertTrue(AttendanceService.record_attendance(self.guru, '2024-06-03', 'Hadir')[0])
        self.assertTrue(AttendanceService.record_attendance(self.guru, '2024-06-03', 'Sakit', 'Demam')[0])
        records = TeacherAttendance.query.filter_by(teacher_id=self.guru.id).all()
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].status, 'Sakit')

    def test_record_attendance_validation(self):
        self.assertFalse(AttendanceService.record_attendance(self.guru, '2024-06-03', 'Cuti')[0])
        future = date(date.today().year + 1, 1, 1).isoformat()
        self.assertFalse(AttendanceService.record_attendance(self.guru, future, 'Hadir')[0])

    def test_monthly_summary(self):
        AttendanceService.record_attendance(self.guru, '2024-06-01', 'Hadir')  # Saturday
        AttendanceService.record_attendance(self.guru, '2024-06-03', 'Hadir')
        AttendanceService.record_attendance(self.guru, '2024-06-04', 'Izin')

        rows = AttendanceService.get_monthly_summary(2024, 6)
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row['Hadir'], 2)
        self.assertEqual(row['Izin'], 1)
        self.assertEqual(row['TotalTercatat'], 3)
        self.assertEqual(row['TotalHariKerja'], 20)
        self.assertEqual(row['PersentaseHadir'], 10.0)

    def test_personal_recap_counts_weekend_work(self):
        AttendanceService.record_attendance(self.guru, '2024-06-01', 'Hadir')
        AttendanceService.record_attendance(self.guru, '2024-06-03', 'Hadir')
        recap = AttendanceService.get_personal_recap(self.guru, 2024, 6)
        self.assertEqual(recap['summary']['TotalHariKerja'], 21)
        self.assertEqual(recap['summary']['PersentaseHadir'], 9.5)
        self.assertEqual([r.date.day for r in recap['records']], [1, 3])

    def test_tu_staff_recap_includes_staff_without_records(self):
        staff = self.make_guru('operator', ['operator'])
        self.make_guru('satpam', ['satpam'])
        AttendanceService.record_attendance(staff, '2024-06-03', 'Hadir')

        rows = AttendanceService.get_tu_staff_recap(2024, 6)
        self.assertEqual([r['teacher_name'] for r in rows], ['Operator', 'Satpam'])
        self.assertEqual(rows[1]['TotalTercatat'], 0)
        self.assertEqual(rows[1]['PersentaseHadir'], 0)

    def test_admin_correction(self):
        AttendanceService.record_attendance(self.guru, '2024-06-03', 'Alpa')
        record = TeacherAttendance.query.first()
        success, message = AttendanceService.update_record(record.id, 'Izin', 'Surat menyusul', self.admin)
        self.assertTrue(success)
        self.assertEqual(record.last_updated_by, 'Administrator')
        self.assertTrue(AttendanceService.delete_record(record.id, self.admin)[0])


class TestReportServices(ServiceTestCase):

    def test_activity_report_requires_duty(self):
        data = {'activity_id': 'bk', 'title': 'Konseling kelas X', 'content': 'Konseling kelompok siswa baru',
                'date': '2024-06-03'}
        self.assertFalse(ActivityReportService.save_report(data, self.guru)[0])

        counselor = self.make_guru('konselor', ['bk'])
        self.assertTrue(ActivityReportService.save_report(data, counselor)[0])
        groups = ActivityReportService.get_grouped_reports()
        self.assertEqual(groups[0]['activity_name'], 'Guru BK')
        self.assertEqual(len(groups[0]['reports']), 1)

    def test_tu_combined_reports_in_role_order(self):
        operator = self.make_guru('operator', ['operator'])
        head = self.make_guru('kepala.tu', ['kepala_tata_usaha'])
        for user, duty in ((operator, 'operator'), (head, 'kepala_tata_usaha')):
            ActivityReportService.save_report({'activity_id': duty, 'title': 'Laporan bulanan',
                                               'content': 'Rekap pekerjaan bulan Juni', 'date': '2024-06-10'}, user)
        groups = ActivityReportService.get_tu_combined_reports(2024, 6)
        self.assertEqual([g['activity_id'] for g in groups], ['kepala_tata_usaha', 'operator'])
        self.assertEqual(ActivityReportService.get_tu_combined_reports(2024, 7), [])

    def test_violations(self):
        staff = self.make_guru('kesiswaan', ['kesiswaan'])
        success, message = ViolationService.record_violation({
            'student_code': 'SIS001', 'date': '2024-06-10', 'violation': 'Terlambat masuk kelas', 'points': '5',
        }, staff)
        self.assertTrue(success)
        ViolationService.record_violation({
            'student_code': 'sis002', 'date': '2024-06-11', 'violation': 'Tidak memakai atribut', 'points': '10',
        }, staff)

        violations = ViolationService.get_report(2024, 6)
        self.assertEqual(len(violations), 2)
        self.assertEqual(violations[0].student_name, 'Bela Putri')
        self.assertEqual(ViolationService.summarize_by_class(violations),
                         [{'class_name': 'X-1', 'count': 2, 'points': 15}])
        self.assertFalse(ViolationService.delete_violation(violations[0].id, self.guru)[0])
        self.assertTrue(ViolationService.delete_violation(violations[0].id, self.admin)[0])

    def test_violation_points_validation(self):
        success, message = ViolationService.record_violation({
            'student_code': 'sis001', 'date': '2024-06-10', 'violation': 'Terlambat masuk', 'points': '0',
        }, self.guru)
        self.assertFalse(success)

    def test_agenda_keeps_absent_students_of_class(self):
        db.session.add(Student(student_code='sis009', name='Lain Kelas', nis='10009', class_name='X-2'))
        db.session.commit()
        success, message = AgendaService.save_agenda({
            'class_name': 'X-1', 'subject': 'Matematika', 'date': '2024-06-03', 'period': '1-2',
            'learning_objective': 'Memahami persamaan linear', 'topic': 'Persamaan linear satu variabel',
            'absent_students': ['SIS002', 'sis009'], 'reflection': '',
        }, self.guru)
        self.assertTrue(success)

        agendas = AgendaService.get_agendas(2024, 6, teacher_id=self.guru.id)
        self.assertEqual(len(agendas), 1)
        self.assertEqual(agendas[0].absent_names, ['Bela Putri'])
        self.assertEqual(agendas[0].absent_students, [{'student_code': 'sis002', 'name': 'Bela Putri'}])

        other = self.make_guru('lain', [])
        self.assertFalse(AgendaService.delete_agenda(agendas[0].id, other)[0])


class TestCommunicationAndSettings(ServiceTestCase):

    def test_announcements(self):
        success, announcement, message = CommunicationService.create_announcement({
            'title': 'Rapat guru', 'content': 'Rapat evaluasi semester hari Jumat', 'priority': 'Tinggi',
        }, self.admin)
        self.assertTrue(success)
        self.assertEqual(announcement.created_by_name, 'Administrator')

        success, _, _ = CommunicationService.create_announcement({
            'title': 'Rapat guru', 'content': 'Rapat evaluasi semester', 'priority': 'Darurat',
        }, self.admin)
        self.assertFalse(success)

    def test_archive_links_require_valid_url(self):
        self.assertFalse(CommunicationService.save_archive_link(
            {'title': 'Arsip', 'url': 'bukan-url', 'description': 'Arsip nilai'}, self.admin)[0])
        self.assertTrue(CommunicationService.save_archive_link(
            {'title': 'Arsip', 'url': 'https://drive.example.com/arsip', 'description': 'Arsip nilai'}, self.admin)[0])
        self.assertEqual(len(CommunicationService.get_archive_links()), 1)

    def test_activity_log_written(self):
        AcademicService.add_subject('Kimia', self.admin)
        entry = ActivityLog.query.order_by(ActivityLog.id.desc()).first()
        self.assertEqual(entry.user_name, 'Administrator')

    def test_update_school_profile(self):
        form = {'stat_guru_ril': '40', 'stat_guru_dapodik': '38',
                'class_X-1_male_ril': '15', 'class_X-1_female_ril': '17',
                'facility_name_0': 'Ruang Kelas', 'facility_quantity_0': '24',
                'facility_name_1': '', 'facility_quantity_1': '3'}
        success, message = SchoolService.update_profile(form, self.admin)
        self.assertTrue(success)

        profile = SchoolService.get_profile()
        self.assertEqual(profile.stats['guru'], {'ril': 40, 'dapodik': 38})
        self.assertEqual(profile.stats['alumni'], {'ril': 0, 'dapodik': 0})
        self.assertEqual(profile.get_class_rows()[0]['total']['ril'], 32)
        self.assertEqual(profile.facilities, [{'name': 'Ruang Kelas', 'quantity': 24}])

    def test_school_profile_rejects_negative_counts(self):
        success, message = SchoolService.update_profile({'stat_guru_ril': '-1'}, self.admin)
        self.assertFalse(success)
        self.assertIn('negatif', message)

    def test_print_settings(self):
        success, message = SchoolService.update_print_settings({
            'header_image_url': 'https://example.com/kop.png', 'place': '',
            'signer_one_name': 'Drs. Ahmad', 'signer_one_position': 'Kepala Sekolah',
        }, self.admin)
        self.assertTrue(success)
        settings = SchoolService.get_print_settings()
        self.assertEqual(settings.place, 'Cianjur')
        self.assertEqual(settings.signer_one_name, 'Drs. Ahmad')

        success, message = SchoolService.update_print_settings({'header_image_url': 'kop.png'}, self.admin)
        self.assertFalse(success)


class TestExamService(ServiceTestCase):

    def _minutes(self, **overrides):
        data = {
            'exam_type': '', 'academic_year': '2024/2025', 'exam_subject': 'Matematika',
            'day_name': '', 'day': '2', 'month_name': 'Desember', 'year': '2024',
            'start_time': '07:30', 'end_time': '09:30', 'room': 'R-01',
            'participants_x': '20', 'participants_xi': '0', 'participants_xii': '0',
            'absent_count': '2', 'proctor_name': 'Budi Santoso',
        }
        data.update(overrides)
        return ExamService.create_minutes(data, self.guru)

    def test_create_minutes_derives_day_name(self):
        success, minutes, message = self._minutes()
        self.assertTrue(success)
        self.assertEqual(minutes.day_name, 'Senin')
        self.assertEqual(minutes.exam_type, 'Sumatif Akhir Semester (SAS)')
        self.assertEqual(minutes.present_count, 18)

    def test_minutes_validation(self):
        self.assertEqual(self._minutes(end_time='07:00')[2], 'Waktu selesai harus setelah waktu mulai')
        self.assertEqual(self._minutes(absent_count='25')[2], 'Jumlah tidak hadir melebihi jumlah peserta')
        self.assertFalse(self._minutes(day='31', month_name='Februari')[0])
        self.assertFalse(self._minutes(month_name='Decembre')[0])

    def test_minutes_with_day_name_still_validates_date(self):
        success, minutes, message = self._minutes(day_name='Senin', day='31', month_name='Februari', year='2025')
        self.assertFalse(success)
        self.assertEqual(message, 'Tanggal ujian tidak valid')

        success, minutes, message = self._minutes(day_name='Selasa')
        self.assertTrue(success)
        self.assertEqual(minutes.day_name, 'Selasa')

    def test_minutes_visibility(self):
        self._minutes()
        other = self.make_guru('lain', [])
        curriculum = self.make_guru('kurikulum', ['kurikulum'])
        self.assertEqual(len(ExamService.get_minutes_list(self.guru)), 1)
        self.assertEqual(ExamService.get_minutes_list(other), [])
        self.assertEqual(len(ExamService.get_minutes_list(curriculum)), 1)
        self.assertEqual(len(ExamService.get_minutes_list(self.admin)), 1)

    def test_proctor_attendance(self):
        data = {'exam_date': '2024-12-02', 'exam_subject': 'Matematika', 'room': 'R-01',
                'start_time': '07:30', 'end_time': '09:30', 'signature_url': ''}
        success, message = ExamService.create_proctor_attendance(data, self.guru)
        self.assertFalse(success)

        data['signature_url'] = 'https://example.com/ttd.png'
        success, message = ExamService.create_proctor_attendance(data, self.guru)
        self.assertTrue(success)

        entries = ExamService.get_proctor_attendance(self.admin, date(2024, 12, 2))
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].proctor_name, 'Budi Santoso')
        self.assertEqual(ExamService.get_proctor_attendance(self.admin, date(2024, 12, 3)), [])

if __name__ == '__main__':
    unittest.main()
