"""
Sorting helper utilities for SkorZen School Portal
Provides consistent ordering for class names and students
"""

import re

# Grade levels in school order
GRADE_LEVEL_ORDER = {'X': 10, 'XI': 11, 'XII': 12}

class SortingHelpers:
    """Helper class for sorting operations"""

    @staticmethod
    def get_class_sort_key(class_name):
        """
        Natural sort key for class names.
        'X-2' < 'X-10' < 'XI-1' < 'XII-3'; unknown formats sort last alphabetically.
        """
        text = (class_name or '').strip().upper()
        match = re.match(r'^(XII|XI|X)\s*[-\s]?\s*(\d+)?', text)
        if not match:
            return (99, 0, text)

        level = GRADE_LEVEL_ORDER[match.group(1)]
        number = int(match.group(2)) if match.group(2) else 0
        return (level, number, text)

    @staticmethod
    def get_student_sort_key(student):
        """Sort key for students: class first, then name"""
        return (
            SortingHelpers.get_class_sort_key(student.class_name),
            (student.name or '').lower()
        )

    @staticmethod
    def sort_class_names(class_names):
        """Unique class names in natural school order"""
        unique = set(c for c in class_names if c)
        return sorted(unique, key=SortingHelpers.get_class_sort_key)

    @staticmethod
    def sort_students(students):
        """Sort students using the standard sorting logic"""
        return sorted(students, key=SortingHelpers.get_student_sort_key)
