"""
Service exceptions -> HTTPException
"""
import logging
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from services.common import ConflictError

logger = logging.getLogger(__name__)


def http_error(error: Exception) -> HTTPException:
    """
    LookupError -> 404, ValueError -> 400,
    ConflictError / IntegrityError -> 409, le reste -> 500
    """
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, LookupError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ValueError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, ConflictError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, IntegrityError):
        return HTTPException(status_code=409, detail=str(error.orig))

    logger.error(f"❌ Unexpected error: {error}", exc_info=error)
    return HTTPException(status_code=500, detail=str(error))
