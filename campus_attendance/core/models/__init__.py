from campus_attendance.auth.models import User
from campus_attendance.core.models.class_model import SchoolClass
from campus_attendance.core.models.subject import Subject
from campus_attendance.core.models.teacher_subject import TeacherSubject
from campus_attendance.core.models.day_order import DayOrderConfig, DayOrderSetting
from campus_attendance.core.models.teacher_absence import ClassTransfer, TeacherAbsence
from campus_attendance.core.models.attendance_session import AttendanceSession

__all__ = [
    "User",
    "SchoolClass",
    "Subject",
    "TeacherSubject",
    "DayOrderConfig",
    "DayOrderSetting",
    "TeacherAbsence",
    "ClassTransfer",
    "AttendanceSession",
]
