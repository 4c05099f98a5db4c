from enum import Enum


class Role(str, Enum):
    admin = "admin"
    teacher = "teacher"


class StudentStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class PaymentStatus(str, Enum):
    paid = "paid"
    not_paid = "not-paid"


class NotificationType(str, Enum):
    scheduled = "Scheduled"  # current-month run
    month_fallback = "MonthFallback"  # previous-month catch-up on the 1st/2nd
    escalation = "Escalation"  # reserved


class MonthCode(str, Enum):
    JAN = "JAN"
    FEB = "FEB"
    MAR = "MAR"
    APR = "APR"
    MAY = "MAY"
    JUN = "JUN"
    JUL = "JUL"
    AUG = "AUG"
    SEP = "SEP"
    OCT = "OCT"
    NOV = "NOV"
    DEC = "DEC"


MONTH_CODES: list[str] = [m.value for m in MonthCode]
