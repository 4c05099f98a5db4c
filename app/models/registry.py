"""Import every model so string relationships resolve and Base.metadata is complete."""
from app.core.database import Base  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.school_class import SchoolClass  # noqa: F401
from app.models.student import Student  # noqa: F401
from app.models.payment_record import PaymentRecord  # noqa: F401
from app.models.notification_log import NotificationLog  # noqa: F401
