"""
Common Pydantic schemas
"""

from pydantic import BaseModel

class ErrorResponse(BaseModel):
    """Error response schema"""
    error: str
    message: str
