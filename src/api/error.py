"""HTTP error translation for use-case failures"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

ERROR_STATUS = {
    "SLOT_CONFLICT": status.HTTP_409_CONFLICT,
    "INSUFFICIENT_CREDITS": status.HTTP_402_PAYMENT_REQUIRED,
    "OUTSIDE_OPERATING_HOURS": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "OUTSIDE_CANCELLATION_WINDOW": status.HTTP_409_CONFLICT,
    "ALREADY_TERMINAL": status.HTTP_409_CONFLICT,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "SERVICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "BOOKING_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "PACKAGE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "RULE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_AVAILABILITY_RULE": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_DECLARATION": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_DATE_RANGE": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


class ClientError(Exception):
    """
    Raised by routes for a failed Result

    Rendered as {"error": {"code": ..., "message": ...}}. Without an explicit
    status_code, known business codes map through ERROR_STATUS and anything
    else (the *_FAILED codes) is a 500.
    """

    def __init__(self, error: Error, status_code: int = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or ERROR_STATUS.get(
            error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        )


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.error.code, "message": exc.error.message}},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
