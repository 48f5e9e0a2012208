"""
Unit tests for grading, calendar, validation and menu helpers
"""

import unittest
from datetime import date

from models.grades import Grade, GradeWeights
from models.user import User
from utils.calendar_helpers import (count_workdays, format_date_id, get_current_academic_year,
                                    month_name, semester_label)
from utils.grading import (attendance_percentage, calculate_average, calculate_final_grade,
                           days_present_from_percentage, parse_assignment_scores)
from utils.navigation import build_navigation, visible_endpoints
from utils.roles import clean_duties, duty_label, reportable_duties
from utils.sorting_helpers import SortingHelpers
from utils.validators import (validate_academic_year, validate_nis, validate_student_code,
                              validate_time, validate_url, validate_weights)

def default_weights():
    return GradeWeights(**GradeWeights.DEFAULTS)

class TestGrading(unittest.TestCase):

    def test_parse_assignment_scores_skips_blanks(self):
        ok, scores, _ = parse_assignment_scores("80, 90,")
        self.assertTrue(ok)
        self.assertEqual(scores, [80.0, 90.0])

    def test_parse_assignment_scores_rejects_bad_values(self):
        ok, scores, message = parse_assignment_scores("80, abc")
        self.assertFalse(ok)
        self.assertEqual(scores, [])
        self.assertIn('abc', message)

        ok, _, _ = parse_assignment_scores("120")
        self.assertFalse(ok)

    def test_calculate_average(self):
        self.assertEqual(calculate_average([]), 0)
        self.assertEqual(calculate_average([70, 80, 90]), 80)

    def test_attendance_percentage(self):
        self.assertEqual(attendance_percentage(45, 90), 50.0)
        self.assertEqual(attendance_percentage(100, 90), 100.0)
        self.assertEqual(attendance_percentage(10, 0), 0.0)
        self.assertEqual(days_present_from_percentage(50, 90), 45)
        self.assertEqual(days_present_from_percentage(None, 90), 0)

    def test_final_grade_with_default_weights(self):
        grade = Grade(assignments=[80, 90], test=70, midterm=75, final_exam=80,
                      attendance=100, extracurricular=80, osis=0)
        # 17 + 14 + 15 + 20 + 15 academic, plus 4 eskul bonus
        self.assertAlmostEqual(calculate_final_grade(grade, default_weights()), 85.0)

    def test_final_grade_is_capped(self):
        grade = Grade(assignments=[100], test=100, midterm=100, final_exam=100,
                      attendance=100, extracurricular=100, osis=100)
        self.assertEqual(calculate_final_grade(grade, default_weights()), 100)

    def test_final_grade_missing_components_count_as_zero(self):
        grade = Grade(assignments=[], final_exam=80)
        self.assertAlmostEqual(calculate_final_grade(grade, default_weights()), 20.0)
        self.assertEqual(calculate_final_grade(None, default_weights()), 0)

class TestCalendarHelpers(unittest.TestCase):

    def test_month_and_semester_labels(self):
        self.assertEqual(month_name(8), 'Agustus')
        self.assertEqual(month_name(13), '')
        self.assertEqual(semester_label(1), 'Ganjil')
        self.assertEqual(semester_label(2), 'Genap')

    def test_format_date_id(self):
        self.assertEqual(format_date_id(date(2024, 8, 17)), '17 Agustus 2024')
        self.assertEqual(format_date_id(date(2024, 8, 17), with_day=True), 'Sabtu, 17 Agustus 2024')
        self.assertEqual(format_date_id('2024-01-05'), '5 Januari 2024')
        self.assertEqual(format_date_id(None), '')

    def test_current_academic_year_switches_in_july(self):
        self.assertEqual(get_current_academic_year(date(2024, 7, 1)), '2024/2025')
        self.assertEqual(get_current_academic_year(date(2025, 6, 30)), '2024/2025')

    def test_count_workdays(self):
        # June 2024 starts on a Saturday and has 20 weekdays
        self.assertEqual(count_workdays(2024, 6), 20)
        self.assertEqual(count_workdays(2024, 6, holidays=[date(2024, 6, 17)]), 19)

    def test_attendance_on_weekend_or_holiday_adds_workday(self):
        self.assertEqual(count_workdays(2024, 6, attended_dates=[date(2024, 6, 1)]), 21)
        self.assertEqual(count_workdays(2024, 6, holidays=[date(2024, 6, 17)],
                                        attended_dates=[date(2024, 6, 17)]), 20)
        # Dates outside the month are ignored
        self.assertEqual(count_workdays(2024, 6, attended_dates=[date(2024, 7, 6)]), 20)

class TestValidators(unittest.TestCase):

    def test_student_identifiers(self):
        self.assertTrue(validate_student_code('siswa.001')[0])
        self.assertFalse(validate_student_code('ab')[0])
        self.assertFalse(validate_student_code('siswa 001')[0])
        self.assertTrue(validate_nis('12345')[0])
        self.assertFalse(validate_nis('12a45')[0])

    def test_academic_year(self):
        self.assertTrue(validate_academic_year('2024/2025')[0])
        self.assertFalse(validate_academic_year('2024/2026')[0])
        self.assertFalse(validate_academic_year('2024-2025')[0])

    def test_weights_must_total_100(self):
        data = dict(GradeWeights.DEFAULTS)
        self.assertTrue(validate_weights(data)[0])

        data['tugas'] = 30
        is_valid, message = validate_weights(data)
        self.assertFalse(is_valid)
        self.assertIn('100%', message)

    def test_bonus_weights_do_not_count_towards_total(self):
        data = dict(GradeWeights.DEFAULTS, eskul=50, osis=0)
        self.assertTrue(validate_weights(data)[0])

    def test_effective_days_range(self):
        data = dict(GradeWeights.DEFAULTS, effective_days_odd=0)
        self.assertFalse(validate_weights(data)[0])

    def test_time_and_url(self):
        self.assertTrue(validate_time('07:30')[0])
        self.assertFalse(validate_time('7.30')[0])
        self.assertTrue(validate_url('https://example.com/ttd.png')[0])
        self.assertFalse(validate_url('ftp://example.com/ttd.png')[0])
        self.assertTrue(validate_url('', required=False)[0])

class TestRolesAndSorting(unittest.TestCase):

    def test_clean_duties_orders_and_drops_unknown(self):
        self.assertEqual(clean_duties(['bk', 'pembina_eskul', 'unknown', 'kurikulum']),
                         ['kurikulum', 'bk'])

    def test_reportable_duties_exclude_principal(self):
        self.assertEqual(reportable_duties(['kepala_sekolah', 'bendahara']), ['bendahara'])
        self.assertEqual(duty_label('pembina_eskul_pmr'), 'Pembina Eskul PMR')

    def test_class_names_sort_naturally(self):
        self.assertEqual(SortingHelpers.sort_class_names(['XII-1', 'X-10', 'X-2', 'XI-3', 'X-2']),
                         ['X-2', 'X-10', 'XI-3', 'XII-1'])

class TestNavigation(unittest.TestCase):

    def test_admin_menu(self):
        admin = User(username='admin', display_name='Administrator', role=User.ROLE_ADMIN)
        groups = build_navigation(admin)
        self.assertEqual(len(groups), 6)
        self.assertIn('exams.minutes', visible_endpoints(admin))

    def test_teacher_without_duties(self):
        guru = User(username='budi', display_name='Budi', role=User.ROLE_GURU, additional_duties=[])
        groups = build_navigation(guru)
        self.assertEqual([g['title'] for g in groups], ['Menu Utama'])
        self.assertIn('guru.input_grades', visible_endpoints(guru))
        self.assertNotIn('guru.violations', visible_endpoints(guru))

    def test_non_teaching_staff_lose_teaching_menus(self):
        staff = User(username='tu', display_name='Staf TU', role=User.ROLE_GURU, additional_duties=['staf_tu'])
        endpoints = visible_endpoints(staff)
        self.assertNotIn('guru.input_grades', endpoints)
        self.assertIn('guru.attendance', endpoints)
        self.assertIn('guru.activity_reports', endpoints)

    def test_duty_menus(self):
        guru = User(username='sari', display_name='Sari', role=User.ROLE_GURU,
                    additional_duties=['kesiswaan', 'kurikulum', 'kepala_tata_usaha'])
        endpoints = visible_endpoints(guru)
        for endpoint in ('guru.violations', 'guru.missing_grades',
                         'guru.tu_attendance_recap', 'guru.tu_combined_reports'):
            self.assertIn(endpoint, endpoints)

    def test_leadership_menu(self):
        principal = User(username='kepsek', display_name='Kepsek', role=User.ROLE_GURU,
                         additional_duties=['kepala_sekolah'])
        groups = build_navigation(principal)
        self.assertEqual(groups[-1]['title'], 'Pengawasan Pimpinan')
        endpoints = visible_endpoints(principal)
        self.assertIn('admin.grades', endpoints)
        self.assertIn('admin.violations', endpoints)
        self.assertNotIn('admin.students', endpoints)

        guru = User(username='budi', display_name='Budi', role=User.ROLE_GURU, additional_duties=['bk'])
        self.assertNotIn('admin.grades', visible_endpoints(guru))

    def test_anonymous(self):
        self.assertEqual(build_navigation(None), [])

if __name__ == '__main__':
    unittest.main()
