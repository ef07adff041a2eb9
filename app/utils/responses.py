"""
Standardized response utilities
"""

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from app.schemas.common import ErrorResponse

def error_response(
    error_code: str,
    message: str,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        error=error_code,
        message=message
    )
    return JSONResponse(
        content=response.dict(),
        status_code=status_code
    )

def invalid_request(message: str) -> JSONResponse:
    return error_response("INVALID_REQUEST", message, status_code=status.HTTP_400_BAD_REQUEST)

def unauthorized_error(message: str = "Unauthorized"):
    """Create unauthorized error"""
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message
    )

def rate_limit_error():
    """Create rate limit error"""
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded. Please try again later."
    )
