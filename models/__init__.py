"""
Database models package for SkorZen School Portal
"""

from .user import User
from .student import Student
from .grades import Grade, GradeWeights, KkmSetting
from .academic import AcademicYearSetting, Subject, SchoolHoliday
from .attendance import TeacherAttendance
from .reports import ActivityReport, Violation, ClassAgenda
from .communication import Announcement, ArchiveLink, ActivityLog
from .settings import SchoolProfile, PrintSettings
from .exams import ExamMinutes, ProctorAttendance

__all__ = [
    'User', 'Student', 'Grade', 'GradeWeights', 'KkmSetting',
    'AcademicYearSetting', 'Subject', 'SchoolHoliday', 'TeacherAttendance',
    'ActivityReport', 'Violation', 'ClassAgenda',
    'Announcement', 'ArchiveLink', 'ActivityLog',
    'SchoolProfile', 'PrintSettings', 'ExamMinutes', 'ProctorAttendance'
]
