"""
Tests for Excel workbooks and PDF documents
"""

import unittest
from datetime import date
from io import BytesIO

import openpyxl

from app import create_app
from config import TestingConfig
from database import db
from models.student import Student
from models.user import User
from services.activity_report_service import ActivityReportService
from services.attendance_service import AttendanceService
from services.exam_service import ExamService
from services.excel_export_service import ExcelExportService
from services.grade_service import GradeService
from services.reporting_service import ReportingService

class TestExports(unittest.TestCase):

    def setUp(self):
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()

        self.guru = User(username='budi', display_name='Budi Santoso', role=User.ROLE_GURU,
                         additional_duties=['bk'])
        self.guru.set_password('guru123')
        db.session.add(self.guru)
        db.session.add(Student(student_code='sis001', name='Andi Wijaya', nis='10001', class_name='X-1'))
        db.session.commit()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def reload(self, workbook):
        """Save and load again, as a downloaded file would be"""
        data = ExcelExportService.workbook_to_bytes(workbook)
        self.assertIsNotNone(data)
        return openpyxl.load_workbook(BytesIO(data))

    def save_grade(self):
        success, grade, message = GradeService.save_grade({
            'student_code': 'sis001', 'subject': 'Matematika', 'semester': '1',
            'academic_year': '2024/2025', 'assignments': '80, 90', 'test': '70',
            'midterm': '75', 'final_exam': '80', 'days_present': '90', 'extracurricular': '80',
        }, self.guru)
        self.assertTrue(success, message)
        return grade

    def test_format_number(self):
        self.assertEqual(ExcelExportService.format_number(85.0), 85)
        self.assertEqual(ExcelExportService.format_number(85.456), 85.46)
        self.assertIsNone(ExcelExportService.format_number(None))
        self.assertEqual(ExcelExportService.format_number('Kosong'), 'Kosong')

    def test_student_import_template_headers(self):
        ws = self.reload(ExcelExportService.student_import_template()).active
        self.assertEqual([c.value for c in ws[1]], ['Nama Siswa', 'NIS', 'Kelas', 'ID Siswa'])

    def test_export_grades(self):
        self.save_grade()
        ws = self.reload(ExcelExportService.export_grades(GradeService.get_grade_rows())).active
        self.assertEqual(ws.title, 'Data Nilai')
        self.assertEqual(ws.cell(row=2, column=2).value, 'Andi Wijaya')
        self.assertEqual(ws.cell(row=2, column=8).value, '80, 90')
        self.assertEqual(ws.cell(row=2, column=16).value, 85)
        self.assertEqual(ws.cell(row=2, column=17).value, 'Budi Santoso')

    def test_export_teacher_recap_marks_kkm(self):
        self.save_grade()
        rows = GradeService.get_teacher_recap(self.guru.id)
        ws = self.reload(ExcelExportService.export_teacher_recap(rows, 'Budi Santoso')).active
        self.assertEqual(ws['A2'].value, 'Guru: Budi Santoso')
        self.assertEqual(ws.cell(row=5, column=18).value, 'Tuntas')

    def test_export_attendance_summary_uses_percent_format(self):
        AttendanceService.record_attendance(self.guru, '2024-06-03', 'Hadir')
        rows = AttendanceService.get_monthly_summary(2024, 6)
        ws = self.reload(ExcelExportService.export_attendance_summary(rows, 2024, 6)).active
        self.assertEqual(ws['A2'].value, 'Juni 2024')
        percent = ws.cell(row=5, column=9)
        self.assertAlmostEqual(percent.value, 0.05)
        self.assertEqual(percent.number_format, '0%')

    def test_export_activity_reports_sheet_per_activity(self):
        ActivityReportService.save_report({'activity_id': 'bk', 'title': 'Konseling kelas X',
                                           'content': 'Konseling kelompok siswa baru',
                                           'date': '2024-06-03'}, self.guru)
        wb = self.reload(ExcelExportService.export_activity_reports(ActivityReportService.get_grouped_reports()))
        self.assertEqual(wb.sheetnames, ['Guru BK'])

        empty = self.reload(ExcelExportService.export_activity_reports([]))
        self.assertEqual(empty.sheetnames, ['Laporan Kegiatan'])

    def test_report_card_pdf(self):
        self.save_grade()
        pdf = ReportingService.generate_report_card_pdf(GradeService.get_report_card('sis001'))
        self.assertTrue(pdf.startswith(b'%PDF'))

    def test_exam_documents_pdf(self):
        success, minutes, message = ExamService.create_minutes({
            'academic_year': '2024/2025', 'exam_subject': 'Matematika', 'day': '2',
            'month_name': 'Desember', 'year': '2024', 'start_time': '07:30', 'end_time': '09:30',
            'room': 'R-01', 'participants_x': '20', 'absent_count': '1', 'proctor_name': 'Budi Santoso',
            'notes': 'Ujian berjalan lancar & tertib',
        }, self.guru)
        self.assertTrue(success, message)
        self.assertTrue(ReportingService.generate_exam_minutes_pdf(minutes).startswith(b'%PDF'))

        pdf = ReportingService.generate_proctor_attendance_pdf([], date(2024, 12, 2))
        self.assertTrue(pdf.startswith(b'%PDF'))

if __name__ == '__main__':
    unittest.main()
