"""
Grade calculation helpers for SkorZen School Portal
"""

def calculate_average(numbers):
    """Mean of the given scores, 0 for an empty list"""
    if not numbers:
        return 0
    return sum(float(n) for n in numbers) / len(numbers)

def parse_assignment_scores(text):
    """
    Parse comma separated assignment scores.

    Returns (success, scores, message). Blank entries are ignored so that
    "80, 90," yields [80.0, 90.0].
    """
    if text is None:
        return True, [], "No assignment scores"
    if isinstance(text, (list, tuple)):
        parts = list(text)
    else:
        parts = str(text).split(',')

    scores = []
    for part in parts:
        value = str(part).strip()
        if not value:
            continue
        try:
            score = float(value)
        except ValueError:
            return False, [], f"Nilai tugas '{value}' bukan angka"
        if score < 0 or score > 100:
            return False, [], "Setiap nilai tugas harus antara 0 dan 100"
        scores.append(score)
    return True, scores, "Valid assignment scores"

def attendance_percentage(days_present, effective_days):
    """Convert days present into a 0-100 attendance percentage"""
    if not effective_days or effective_days <= 0 or days_present is None:
        return 0.0
    percentage = (float(days_present) / float(effective_days)) * 100
    return min(max(percentage, 0.0), 100.0)

def days_present_from_percentage(percentage, effective_days):
    """Inverse of attendance_percentage, used to pre-fill the input form"""
    if not percentage or not effective_days or effective_days <= 0:
        return 0
    return int(round((float(percentage) / 100) * effective_days))

def calculate_final_grade(grade, weights):
    """
    Combine component scores into a final grade.

    The five academic components are weighted to 100%; extracurricular and
    OSIS scores add bonus points up to their configured weight. The result is
    capped at 100 and rounded to two decimals.
    """
    if grade is None or weights is None:
        return 0

    avg_assignments = calculate_average(grade.assignments or [])

    academic = (
        avg_assignments * (weights.tugas / 100)
        + (grade.test or 0) * (weights.tes / 100)
        + (grade.midterm or 0) * (weights.pts / 100)
        + (grade.final_exam or 0) * (weights.pas / 100)
        + (grade.attendance or 0) * (weights.kehadiran / 100)
    )

    eskul_bonus = ((grade.extracurricular or 0) / 100) * (weights.eskul or 0)
    osis_bonus = ((grade.osis or 0) / 100) * (weights.osis or 0)

    return round(min(100, academic + eskul_bonus + osis_bonus), 2)
