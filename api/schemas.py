from pydantic import BaseModel, Field
from typing import Optional

EXAMPLE_PHONE = "+1234567890"


class PhoneUpdateRequest(BaseModel):
    phoneNumber: Optional[str] = Field(
        default=None,
        description="Phone number to update in the format +1234567890",
        examples=[EXAMPLE_PHONE],
    )


class PhoneUpdateData(BaseModel):
    phoneNumber: str
    status: str


class PhoneUpdateResponse(BaseModel):
    success: bool
    message: str
    data: Optional[PhoneUpdateData] = None
    updatedAt: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
    example: Optional[dict | str] = None


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
