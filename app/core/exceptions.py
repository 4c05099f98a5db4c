from fastapi import HTTPException, status


class SmsDeliveryError(Exception):
    """The SMS gateway rejected or could not deliver a message."""


class ReminderRunError(Exception):
    """A reminder sweep could not load its payment records."""


class AppException:
    """Class-based exception handlers for common HTTP status codes."""

    @staticmethod
    def raise_400(message: str = "Bad Request"):
        """Raise a 400 Bad Request exception."""
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    @staticmethod
    def raise_401(message: str = "Unauthorized"):
        """Raise a 401 Unauthorized exception."""
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)

    @staticmethod
    def raise_403(message: str = "Forbidden"):
        """Raise a 403 Forbidden exception."""
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)

    @staticmethod
    def raise_404(message: str = "Not Found"):
        """Raise a 404 Not Found exception."""
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)

