"""
Excel export service for SkorZen School Portal
Builds the openpyxl workbooks behind every "Export Excel" button
"""

import logging
from io import BytesIO

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from models.attendance import TeacherAttendance
from models.grades import Grade
from services.student_service import IMPORT_HEADERS
from utils.calendar_helpers import format_date_id, month_name, semester_label

logger = logging.getLogger(__name__)

# Excel limits worksheet titles to 31 characters
MAX_SHEET_TITLE = 31

class ExcelExportService:
    """Service for exporting data to Excel"""

    @staticmethod
    def create_workbook():
        """Create a new workbook with default styling"""
        wb = openpyxl.Workbook()
        return wb

    @staticmethod
    def style_header_row(ws, row_num, columns):
        """Apply styling to header row"""
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="000000", end_color="000000", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")

        for col_num, header in enumerate(columns, 1):
            cell = ws.cell(row=row_num, column=col_num, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment

    @staticmethod
    def write_title(ws, title, subtitle=None):
        """Bold title row (and optional subtitle) above a table; returns the next free row"""
        ws.cell(row=1, column=1, value=title).font = Font(bold=True, size=13)
        if subtitle:
            ws.cell(row=2, column=1, value=subtitle)
            return 4
        return 3

    @staticmethod
    def auto_adjust_columns(ws):
        """Auto-adjust column widths"""
        for column in ws.columns:
            max_length = 0
            column_letter = get_column_letter(column[0].column)

            for cell in column:
                if cell.value is not None and len(str(cell.value)) > max_length:
                    max_length = len(str(cell.value))

            adjusted_width = min(max_length + 2, 50)
            ws.column_dimensions[column_letter].width = adjusted_width

    @staticmethod
    def format_number(value):
        """Format number: whole numbers without decimals, fractional numbers with 2 decimal places."""
        try:
            if value is None:
                return None
            num = float(value)
            if num == int(num):
                return int(num)
            return round(num, 2)
        except (ValueError, TypeError):
            return value

    @staticmethod
    def set_percentage(cell, percent_0_to_100, align_left=True):
        """Write a numeric percentage (avoid text with green triangle)."""
        if percent_0_to_100 is None:
            cell.value = None
        else:
            cell.value = float(percent_0_to_100) / 100.0
            if percent_0_to_100 == int(percent_0_to_100):
                cell.number_format = '0%'
            else:
                cell.number_format = '0.0%'
        cell.alignment = Alignment(horizontal=("left" if align_left else "right"), vertical="center")
        return cell

    @staticmethod
    def write_rows(ws, start_row, headers, rows):
        """Header row followed by data rows; returns the row after the table"""
        ExcelExportService.style_header_row(ws, start_row, headers)
        row_num = start_row + 1
        for values in rows:
            for col_num, value in enumerate(values, 1):
                ws.cell(row=row_num, column=col_num, value=value)
            row_num += 1
        return row_num

    @staticmethod
    def workbook_to_bytes(workbook):
        """Convert workbook to bytes for download"""
        try:
            output = BytesIO()
            workbook.save(output)
            output.seek(0)
            return output.getvalue()
        except Exception:
            logger.exception("Error converting workbook to bytes")
            return None

    # ---- students ----

    @staticmethod
    def export_students(students):
        """Data Siswa sheet"""
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = "Data Siswa"
        ExcelExportService.write_rows(
            ws, 1, ['No', 'ID Siswa', 'NIS', 'Nama Siswa', 'Kelas'],
            ([i, s.student_code, s.nis, s.name, s.class_name] for i, s in enumerate(students, 1))
        )
        ExcelExportService.auto_adjust_columns(ws)
        return wb

    @staticmethod
    def student_import_template():
        """Empty import template with one example row"""
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = "Template Siswa"
        ExcelExportService.write_rows(ws, 1, IMPORT_HEADERS, [['Contoh Nama Siswa', '1234567', 'X-1', 'siswa001']])
        ExcelExportService.auto_adjust_columns(ws)
        return wb

    # ---- grades ----

    @staticmethod
    def _grade_values(row):
        fmt = ExcelExportService.format_number
        return [
            row['student_name'], row['nis'], row['class_name'], row['subject'],
            row['academic_year'], row['semester_label'],
            ', '.join(str(fmt(s)) for s in row['assignments']),
            fmt(row['assignment_average']), fmt(row['test']), fmt(row['midterm']),
            fmt(row['final_exam']), fmt(row['attendance']), fmt(row['extracurricular']),
            fmt(row['osis']), fmt(row['final_grade']),
        ]

    GRADE_HEADERS = ['Nama Siswa', 'NIS', 'Kelas', 'Mata Pelajaran', 'Tahun Ajaran', 'Semester',
                     'Nilai Tugas', 'Rata-rata Tugas', 'Tes', 'PTS', 'PAS', 'Kehadiran (%)',
                     'Eskul', 'OSIS', 'Nilai Akhir']

    @staticmethod
    def export_grades(rows):
        """Admin grade listing as shown on the Data Nilai page"""
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = "Data Nilai"
        ExcelExportService.write_rows(
            ws, 1, ['No'] + ExcelExportService.GRADE_HEADERS + ['Guru'],
            ([i] + ExcelExportService._grade_values(r) + [r['teacher_name']] for i, r in enumerate(rows, 1))
        )
        ExcelExportService.auto_adjust_columns(ws)
        return wb

    @staticmethod
    def export_teacher_recap(rows, teacher_name):
        """Rekap Nilai of one teacher including the KKM comparison"""
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = "Rekap Nilai"
        start = ExcelExportService.write_title(ws, "Rekap Nilai", f"Guru: {teacher_name}")
        ExcelExportService.write_rows(
            ws, start, ['No'] + ExcelExportService.GRADE_HEADERS + ['KKM', 'Keterangan'],
            ([i] + ExcelExportService._grade_values(r)
             + [r['kkm'], 'Belum Tuntas' if r['below_kkm'] else 'Tuntas']
             for i, r in enumerate(rows, 1))
        )
        ExcelExportService.auto_adjust_columns(ws)
        return wb

    @staticmethod
    def export_missing_grades(rows, academic_year, semester, component):
        """Rekap Nilai Kosong for one component"""
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = "Rekap Nilai Kosong"
        label = Grade.COMPONENT_LABELS.get(component, component)
        start = ExcelExportService.write_title(
            ws, f"Rekap Nilai Kosong - {label}",
            f"Tahun Ajaran {academic_year}, Semester {semester_label(semester)}")
        ExcelExportService.write_rows(
            ws, start, ['No', 'Nama Siswa', 'NIS', 'Kelas', 'Mata Pelajaran', f'Nilai {label}'],
            ([i, r['student_name'], r['nis'], r['class_name'], r['subject'], r['recorded_value']]
             for i, r in enumerate(rows, 1))
        )
        ExcelExportService.auto_adjust_columns(ws)
        return wb

    # ---- attendance ----

    @staticmethod
    def export_daily_attendance(records, period_label):
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = "Kehadiran Harian"
        start = ExcelExportService.write_title(ws, "Data Kehadiran Guru", period_label)
        ExcelExportService.write_rows(
            ws, start, ['No', 'Tanggal', 'Nama', 'Status', 'Keterangan', 'Diperbarui Oleh'],
            ([i, format_date_id(r.date, with_day=True), r.teacher_name, r.status, r.notes or '',
              r.last_updated_by or ''] for i, r in enumerate(records, 1))
        )
        ExcelExportService.auto_adjust_columns(ws)
        return wb

    @staticmethod
    def export_attendance_summary(rows, year, month, title="Rekap Kehadiran Guru"):
        """Monthly summary rows as produced by AttendanceService.summarize"""
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = title[:MAX_SHEET_TITLE]
        start = ExcelExportService.write_title(ws, title, f"{month_name(month)} {year}")
        headers = ['No', 'Nama'] + list(TeacherAttendance.STATUSES) + [
            'Total Tercatat', 'Total Hari Kerja', 'Persentase Hadir']
        ExcelExportService.style_header_row(ws, start, headers)
        row_num = start + 1
        for i, row in enumerate(rows, 1):
            values = [i, row['teacher_name']] + [row[s] for s in TeacherAttendance.STATUSES] + [
                row['TotalTercatat'], row['TotalHariKerja']]
            for col_num, value in enumerate(values, 1):
                ws.cell(row=row_num, column=col_num, value=value)
            ExcelExportService.set_percentage(ws.cell(row=row_num, column=len(values) + 1), row['PersentaseHadir'])
            row_num += 1
        ExcelExportService.auto_adjust_columns(ws)
        return wb

    @staticmethod
    def export_tu_staff_recap(rows, year, month):
        return ExcelExportService.export_attendance_summary(rows, year, month, title="Rekap Kehadiran Staf TU")

    # ---- activity reports ----

    @staticmethod
    def _write_report_sheet(ws, group):
        ExcelExportService.write_rows(
            ws, 1, ['No', 'Tanggal', 'Judul', 'Isi Laporan', 'Dibuat Oleh'],
            ([i, format_date_id(r.date), r.title, r.content, r.created_by_name]
             for i, r in enumerate(group['reports'], 1))
        )
        ExcelExportService.auto_adjust_columns(ws)

    @staticmethod
    def export_activity_reports(groups):
        """One sheet per activity, titled with the activity name"""
        wb = ExcelExportService.create_workbook()
        if not groups:
            wb.active.title = "Laporan Kegiatan"
            ExcelExportService.style_header_row(wb.active, 1, ['Tidak ada laporan'])
            return wb

        used_titles = set()
        for index, group in enumerate(groups):
            ws = wb.active if index == 0 else wb.create_sheet()
            title = group['activity_name'][:MAX_SHEET_TITLE]
            if title in used_titles:
                title = f"{title[:MAX_SHEET_TITLE - 4]} ({index})"
            used_titles.add(title)
            ws.title = title
            ExcelExportService._write_report_sheet(ws, group)
        return wb

    @staticmethod
    def export_tu_combined_reports(groups, period_label):
        """Laporan Gabungan TU on a single sheet, grouped by role"""
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = "Laporan Gabungan TU"
        row_num = ExcelExportService.write_title(ws, "Laporan Gabungan Tata Usaha", period_label)
        for group in groups:
            ws.cell(row=row_num, column=1, value=group['activity_name']).font = Font(bold=True)
            row_num = ExcelExportService.write_rows(
                ws, row_num + 1, ['No', 'Tanggal', 'Judul', 'Isi Laporan', 'Dibuat Oleh'],
                ([i, format_date_id(r.date), r.title, r.content, r.created_by_name]
                 for i, r in enumerate(group['reports'], 1))
            ) + 1
        ExcelExportService.auto_adjust_columns(ws)
        return wb

    # ---- violations and agenda ----

    @staticmethod
    def export_violations(violations, period_label):
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = "Laporan Pelanggaran"
        start = ExcelExportService.write_title(ws, "Laporan Pelanggaran Siswa", period_label)
        ExcelExportService.write_rows(
            ws, start, ['Tanggal', 'Nama Siswa', 'Kelas', 'Pelanggaran', 'Poin', 'Catatan', 'Dicatat Oleh'],
            ([format_date_id(v.date), v.student_name, v.student_class, v.violation, v.points,
              v.notes or '', v.recorded_by_name] for v in violations)
        )
        ExcelExportService.auto_adjust_columns(ws)
        return wb

    @staticmethod
    def export_agendas(agendas, period_label):
        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ws.title = "Agenda Kelas"
        start = ExcelExportService.write_title(ws, "Agenda Kelas", period_label)
        ExcelExportService.write_rows(
            ws, start,
            ['No', 'Tanggal', 'Guru', 'Kelas', 'Mata Pelajaran', 'Jam Ke', 'Tujuan Pembelajaran',
             'Pokok Bahasan', 'Siswa Tidak Hadir', 'Refleksi'],
            ([i, format_date_id(a.date, with_day=True), a.teacher_name, a.class_name, a.subject, a.period,
              a.learning_objective, a.topic, ', '.join(a.absent_names) or '-', a.reflection or '']
             for i, a in enumerate(agendas, 1))
        )
        ExcelExportService.auto_adjust_columns(ws)
        return wb
