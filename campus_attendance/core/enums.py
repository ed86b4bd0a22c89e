from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"
    SECURITY = "SECURITY"


class AbsenceStatus(str, Enum):
    active = "active"
    closed = "closed"


class DayOrderAction(str, Enum):
    current = "current"
    upcoming = "upcoming"


class SessionStatus(str, Enum):
    active = "active"
    closed = "closed"
