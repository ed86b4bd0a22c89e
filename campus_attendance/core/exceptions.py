from typing import Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AbsenceWriteError(ServiceError):
    """A storage write failed while recording an absence. `stage` is "absence" or "transfers"."""

    def __init__(self, message: str, stage: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message, status_code)
        self.stage = stage


class DayOrderLookupError(Exception):
    """The day-order lookup could not produce a usable answer."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
