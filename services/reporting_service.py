"""
Reporting service for SkorZen School Portal
PDF documents (report card, exam minutes, proctor attendance) built with reportlab
"""

import logging
from datetime import date
from io import BytesIO
from xml.sax.saxutils import escape as xml_escape

from flask import current_app
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, Image

from models.settings import PrintSettings
from utils.calendar_helpers import format_date_id

logger = logging.getLogger(__name__)

PAGE_MARGIN = 18 * mm
PAGE_WIDTH = A4[0] - 2 * PAGE_MARGIN

class ReportingService:
    """Service for generating printable PDF documents"""

    @staticmethod
    def _format_number(value):
        """Whole numbers without decimals, fractional numbers with 2 decimal places"""
        if value is None:
            return '-'
        try:
            num = float(value)
        except (ValueError, TypeError):
            return str(value)
        return str(int(num)) if num == int(num) else f"{num:.2f}"

    @staticmethod
    def _get_paragraph_style():
        """Return a compact cell Paragraph style to enable auto word-wrap in table cells."""
        styles = getSampleStyleSheet()
        return ParagraphStyle(
            'Cell',
            parent=styles['Normal'],
            fontSize=9,
            leading=11,
            spaceAfter=0,
            spaceBefore=0,
        )

    @staticmethod
    def _to_paragraph(value):
        """Convert any value to a Paragraph so ReportLab wraps text within cell width."""
        if value is None:
            return Paragraph('', ReportingService._get_paragraph_style())
        text = xml_escape(str(value)).replace('\n', '<br/>')
        return Paragraph(text, ReportingService._get_paragraph_style())

    @staticmethod
    def _wrap_table_data(rows, skip_header=True):
        """Map table cells to Paragraphs for word-wrap, leaving the header row to TableStyle"""
        if not rows:
            return rows
        start_idx = 1 if skip_header else 0
        wrapped_rows = [list(r) for r in rows[:start_idx]]
        for row in rows[start_idx:]:
            wrapped_rows.append([ReportingService._to_paragraph(cell) for cell in row])
        return wrapped_rows

    @staticmethod
    def _build_table(rows, col_fracs, center_cols=None):
        """Standard bordered table with a black header row"""
        wrapped = ReportingService._wrap_table_data(rows)
        tbl = Table(wrapped, repeatRows=1, colWidths=[PAGE_WIDTH * f for f in col_fracs])
        style = [
            ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
            ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ('BACKGROUND', (0, 0), (-1, 0), colors.black),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 9),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 1), (-1, -1), 3),
            ('RIGHTPADDING', (0, 1), (-1, -1), 3),
            ('TOPPADDING', (0, 1), (-1, -1), 2),
            ('BOTTOMPADDING', (0, 1), (-1, -1), 2),
        ]
        for col in center_cols or []:
            style.append(('ALIGN', (col, 1), (col, -1), 'CENTER'))
        tbl.setStyle(TableStyle(style))
        return tbl

    @staticmethod
    def _info_table(pairs):
        """Borderless label/value rows for document metadata"""
        rows = [[ReportingService._to_paragraph(label), ReportingService._to_paragraph(f": {value}")]
                for label, value in pairs]
        tbl = Table(rows, colWidths=[45 * mm, PAGE_WIDTH - 45 * mm])
        tbl.setStyle(TableStyle([
            ('LEFTPADDING', (0, 0), (-1, -1), 0),
            ('TOPPADDING', (0, 0), (-1, -1), 1),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 1),
        ]))
        return tbl

    @staticmethod
    def _header(settings):
        """Letterhead: the configured kop image when it loads, else the school name"""
        styles = getSampleStyleSheet()
        elements = []
        if settings.header_image_url:
            try:
                kop = Image(settings.header_image_url)
                kop._restrictSize(PAGE_WIDTH, 35 * mm)
                elements.append(kop)
            except Exception:
                logger.warning("Could not load header image %s", settings.header_image_url)
        if not elements:
            title = ParagraphStyle('HeaderTitle', parent=styles['Title'], alignment=1, fontSize=16, leading=19)
            elements.append(Paragraph(xml_escape(current_app.config['SCHOOL_NAME']), title))

        line = Table([['']], colWidths=[PAGE_WIDTH])
        line.setStyle(TableStyle([('LINEBELOW', (0, 0), (-1, 0), 0.75, colors.black)]))
        elements.append(line)
        elements.append(Spacer(1, 6))
        return elements

    @staticmethod
    def _signatures(settings, signed_on=None):
        """Two signature columns using the configured signers"""
        styles = getSampleStyleSheet()
        center = ParagraphStyle('SignCenter', parent=styles['Normal'], alignment=1, fontSize=10, leading=12)
        place_line = f"{settings.place or PrintSettings.DEFAULT_PLACE}, {format_date_id(signed_on or date.today())}"

        def block(position, name, npa, dated=False):
            lines = [xml_escape(place_line) if dated else '', xml_escape(position or ''), '<br/><br/><br/>',
                     f"<b><u>{xml_escape(name or '........................')}</u></b>",
                     f"NPA. {xml_escape(npa)}" if npa else '']
            return [Paragraph(line, center) for line in lines]

        tbl = Table([[
            block(settings.signer_one_position, settings.signer_one_name, settings.signer_one_npa),
            block(settings.signer_two_position, settings.signer_two_name, settings.signer_two_npa, dated=True),
        ]], colWidths=[PAGE_WIDTH / 2, PAGE_WIDTH / 2])
        tbl.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP')]))
        return [Spacer(1, 18), tbl]

    @staticmethod
    def _render(elements):
        buffer = BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=PAGE_MARGIN, rightMargin=PAGE_MARGIN,
                                topMargin=PAGE_MARGIN, bottomMargin=PAGE_MARGIN)
        doc.build(elements)
        pdf = buffer.getvalue()
        buffer.close()
        return pdf

    @staticmethod
    def _title(text, subtitle=None):
        styles = getSampleStyleSheet()
        title_center = ParagraphStyle('TitleCenter', parent=styles['Title'], alignment=1, fontSize=14, leading=17)
        subtitle_center = ParagraphStyle('SubtitleCenter', parent=styles['Normal'], alignment=1)
        elements = [Paragraph(xml_escape(text), title_center)]
        if subtitle:
            elements.append(Paragraph(xml_escape(subtitle), subtitle_center))
        elements.append(Spacer(1, 8))
        return elements

    # ---- documents ----

    @staticmethod
    def generate_report_card_pdf(report_card):
        """Student report card grouped by academic year and semester"""
        settings = PrintSettings.get_current()
        student = report_card['student']
        elements = ReportingService._header(settings)
        elements += ReportingService._title('LAPORAN HASIL BELAJAR SISWA')
        elements.append(ReportingService._info_table([
            ('Nama Siswa', student.name),
            ('NIS', student.nis),
            ('Kelas', student.class_name),
        ]))
        elements.append(Spacer(1, 8))

        styles = getSampleStyleSheet()
        fmt = ReportingService._format_number
        if not report_card['years']:
            elements.append(Paragraph('Belum ada data nilai.', styles['Normal']))
        for year_group in report_card['years']:
            for semester_group in year_group['semesters']:
                elements.append(Paragraph(
                    f"<b>Tahun Ajaran {xml_escape(year_group['academic_year'])} - "
                    f"Semester {semester_group['semester_label']}</b>", styles['Normal']))
                elements.append(Spacer(1, 4))
                rows = [['No', 'Mata Pelajaran', 'Tugas', 'Tes', 'PTS', 'PAS', 'Hadir', 'Nilai Akhir']]
                for i, g in enumerate(semester_group['grades'], 1):
                    rows.append([i, g['subject'], fmt(g['assignment_average']), fmt(g['test']),
                                 fmt(g['midterm']), fmt(g['final_exam']), fmt(g['attendance']),
                                 fmt(g['final_grade'])])
                elements.append(ReportingService._build_table(
                    rows, [0.06, 0.30, 0.10, 0.10, 0.10, 0.10, 0.10, 0.14], center_cols=range(2, 8)))
                elements.append(Spacer(1, 10))

        elements += ReportingService._signatures(settings)
        return ReportingService._render(elements)

    @staticmethod
    def generate_exam_minutes_pdf(minutes):
        """Berita acara pelaksanaan ujian"""
        settings = PrintSettings.get_current()
        styles = getSampleStyleSheet()
        body = ParagraphStyle('Body', parent=styles['Normal'], fontSize=10, leading=14)

        elements = ReportingService._header(settings)
        elements += ReportingService._title('BERITA ACARA PELAKSANAAN',
                                            f"{minutes.exam_type} Tahun Ajaran {minutes.academic_year}")
        elements.append(Paragraph(xml_escape(
            f"Pada hari ini {minutes.day_name} tanggal {minutes.day} bulan {minutes.month_name} "
            f"tahun {minutes.year}, telah diselenggarakan {minutes.exam_type} mata pelajaran "
            f"{minutes.exam_subject} dari pukul {minutes.start_time} sampai dengan pukul {minutes.end_time}."
        ), body))
        elements.append(Spacer(1, 6))
        elements.append(ReportingService._info_table([
            ('Ruang', minutes.room),
            ('Kelas Gabungan', minutes.combined_classes or '-'),
            ('Peserta Kelas X', minutes.participants_x or 0),
            ('Peserta Kelas XI', minutes.participants_xi or 0),
            ('Peserta Kelas XII', minutes.participants_xii or 0),
            ('Jumlah Peserta', minutes.total_participants),
            ('Hadir', minutes.present_count),
            ('Tidak Hadir', minutes.absent_count or 0),
            ('Nomor Peserta Hadir', minutes.present_numbers or '-'),
            ('Nomor Peserta Tidak Hadir', minutes.absent_numbers or '-'),
            ('Daftar Hadir', f"{minutes.attendance_list_count or 0} lembar"),
            ('Berita Acara', f"{minutes.minutes_count or 0} lembar"),
        ]))
        elements.append(Spacer(1, 6))
        elements.append(Paragraph('<b>Catatan selama pelaksanaan ujian:</b>', body))
        elements.append(ReportingService._to_paragraph(minutes.notes or '-'))
        elements.append(Spacer(1, 18))

        center = ParagraphStyle('ProctorCenter', parent=styles['Normal'], alignment=1)
        proctor = [Paragraph('Pengawas', center)]
        if minutes.proctor_signature_url:
            try:
                signature = Image(minutes.proctor_signature_url)
                signature._restrictSize(40 * mm, 20 * mm)
                proctor.append(signature)
            except Exception:
                logger.warning("Could not load proctor signature for minutes %s", minutes.id)
                proctor.append(Spacer(1, 30))
        else:
            proctor.append(Spacer(1, 30))
        proctor.append(Paragraph(f"<b><u>{xml_escape(minutes.proctor_name)}</u></b>", center))
        tbl = Table([['', proctor]], colWidths=[PAGE_WIDTH / 2, PAGE_WIDTH / 2])
        elements.append(tbl)
        return ReportingService._render(elements)

    @staticmethod
    def generate_proctor_attendance_pdf(entries, exam_date):
        """Daftar hadir pengawas for one exam day"""
        settings = PrintSettings.get_current()
        elements = ReportingService._header(settings)
        elements += ReportingService._title('DAFTAR HADIR PENGAWAS UJIAN', format_date_id(exam_date, with_day=True))

        rows = [['No', 'Nama Pengawas', 'Mata Ujian', 'Ruang', 'Waktu', 'Tanda Tangan']]
        for i, entry in enumerate(entries, 1):
            try:
                signature = Image(entry.signature_url)
                signature._restrictSize(30 * mm, 12 * mm)
            except Exception:
                logger.warning("Could not load signature for proctor entry %s", entry.id)
                signature = '(tertanda)'
            rows.append([i, entry.proctor_name, entry.exam_subject, entry.room,
                         f"{entry.start_time} - {entry.end_time}", signature])

        wrapped = [rows[0]] + [
            [ReportingService._to_paragraph(c) for c in row[:5]] + [row[5]] for row in rows[1:]
        ]
        tbl = Table(wrapped, repeatRows=1,
                    colWidths=[PAGE_WIDTH * f for f in (0.06, 0.26, 0.22, 0.12, 0.14, 0.20)])
        tbl.setStyle(TableStyle([
            ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
            ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ('BACKGROUND', (0, 0), (-1, 0), colors.black),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 9),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('ALIGN', (5, 1), (5, -1), 'CENTER'),
        ]))
        elements.append(tbl)
        elements += ReportingService._signatures(settings, signed_on=exam_date)
        return ReportingService._render(elements)
