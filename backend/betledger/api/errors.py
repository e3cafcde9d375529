"""Translation of ledger rejections into HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from betledger import exceptions
from betledger.schemas import ErrorResponse

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[exceptions.LedgerError], int] = {
    exceptions.InvalidAmount: 400,
    exceptions.InvalidOption: 400,
    exceptions.InvalidOdds: 400,
    exceptions.InvalidRole: 400,
    exceptions.InsufficientBalance: 400,
    exceptions.EventClosed: 400,
    exceptions.InvalidCredentials: 401,
    exceptions.UserNotFound: 404,
    exceptions.EventNotFound: 404,
    exceptions.BetNotFound: 404,
    exceptions.EventNotResolvable: 409,
    exceptions.AlreadyClosed: 409,
    exceptions.BetAlreadySettled: 409,
    exceptions.EventHasBets: 409,
    exceptions.UserHasPendingBets: 409,
    exceptions.UsernameTaken: 409,
}


def status_code_for(exc: exceptions.LedgerError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 400


async def ledger_error_handler(request: Request, exc: exceptions.LedgerError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info(f"{request.method} {request.url.path} rejected: {exc.code} ({exc.message})")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=exc.code, detail=exc.message, details=exc.details
        ).model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(exceptions.LedgerError, ledger_error_handler)
