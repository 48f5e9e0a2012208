"""
Calendar helpers for SkorZen School Portal
Indonesian month and day names, academic years and workday counting
"""

import calendar
from datetime import date, datetime

MONTHS = [
    (1, 'Januari'), (2, 'Februari'), (3, 'Maret'), (4, 'April'),
    (5, 'Mei'), (6, 'Juni'), (7, 'Juli'), (8, 'Agustus'),
    (9, 'September'), (10, 'Oktober'), (11, 'November'), (12, 'Desember'),
]

# Monday first, matching date.weekday()
DAY_NAMES = ['Senin', 'Selasa', 'Rabu', 'Kamis', 'Jumat', 'Sabtu', 'Minggu']

SEMESTERS = [(1, 'Ganjil'), (2, 'Genap')]

FIRST_ACADEMIC_YEAR = 2020
LAST_ACADEMIC_YEAR = 2049

def month_name(month):
    """Indonesian name for a month number, empty string when unknown"""
    try:
        return MONTHS[int(month) - 1][1]
    except (TypeError, ValueError, IndexError):
        return ''

def day_name(value):
    """Indonesian weekday name for a date"""
    return DAY_NAMES[value.weekday()]

def semester_label(semester):
    return dict(SEMESTERS).get(int(semester), str(semester)) if semester else ''

def format_date_id(value, with_day=False):
    """Format a date as '17 Agustus 2024', optionally prefixed by the weekday"""
    if value is None or value == '':
        return ''
    if isinstance(value, str):
        try:
            value = datetime.strptime(value, '%Y-%m-%d').date()
        except ValueError:
            return value
    text = f"{value.day} {month_name(value.month)} {value.year}"
    if with_day:
        return f"{day_name(value)}, {text}"
    return text

def get_academic_years(start_year=FIRST_ACADEMIC_YEAR, end_year=LAST_ACADEMIC_YEAR):
    """All selectable academic years, most recent first"""
    return [f"{year}/{year + 1}" for year in range(end_year, start_year - 1, -1)]

def get_current_academic_year(today=None):
    """Academic year containing the given day; a new year starts in July"""
    today = today or date.today()
    if today.month >= 7:
        return f"{today.year}/{today.year + 1}"
    return f"{today.year - 1}/{today.year}"

def month_bounds(year, month):
    """First and last date of a month"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)

def year_month_range(year, month=None):
    """Inclusive date range for a whole year or a single month"""
    if month:
        return month_bounds(year, month)
    return date(year, 1, 1), date(year, 12, 31)

def count_workdays(year, month, holidays=None, attended_dates=None):
    """
    Count workdays in a month: Monday to Friday minus school holidays.

    Dates in attended_dates that fall on a weekend or holiday are counted as
    extra workdays, since the person actually worked that day.
    """
    holiday_set = set(holidays or [])
    first, last = month_bounds(year, month)
    workdays = set()
    for day in range(first.day, last.day + 1):
        current = date(year, month, day)
        if current.weekday() < 5 and current not in holiday_set:
            workdays.add(current)
    for attended in attended_dates or []:
        if attended.year == year and attended.month == month:
            workdays.add(attended)
    return len(workdays)
