from typing import Optional

from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_phone_update_operation, get_settings
from api.schemas import (
    EXAMPLE_PHONE,
    ErrorResponse,
    HealthResponse,
    PhoneUpdateData,
    PhoneUpdateRequest,
    PhoneUpdateResponse,
)
from config.settings import Settings
from core.credentials import USAGE_EXAMPLE, AuthenticationRequired, parse_basic_auth
from core.logger import app_log, error_log
from models.data_models import PhoneUpdateOutcome, UpdateState, isoformat_utc, utc_timestamp
from operations.phone_update import AutomationFailed, PhoneUpdateOperation

API_TITLE = "Phone Settings Automation API"
HEALTH_MESSAGE = "Alleviate Health API is running"
AVAILABLE_ENDPOINTS = ["GET /health", "POST /settings/phone"]

app = FastAPI(
    title=API_TITLE,
    version="1.0.0",
    description="Updates the phone number in the target platform's settings through browser automation",
    docs_url="/api-docs",
    redoc_url=None,
)


class InvalidPhoneUpdateRequest(Exception):
    """Phone number missing or empty."""


async def _require_phone_number(request: Request) -> str:
    """Read the JSON body once the caller is authenticated."""
    try:
        payload = PhoneUpdateRequest.model_validate_json(await request.body())
    except ValidationError as exc:
        raise InvalidPhoneUpdateRequest() from exc
    phone_number = payload.phoneNumber
    if not phone_number or not phone_number.strip():
        raise InvalidPhoneUpdateRequest()
    return phone_number


def _render_outcome(outcome: PhoneUpdateOutcome) -> PhoneUpdateResponse:
    if outcome.state is UpdateState.LOGIN_FAILED:
        return PhoneUpdateResponse(success=False, message="Login failed")
    if outcome.success:
        return PhoneUpdateResponse(
            success=True,
            message="Phone number updated successfully",
            data=PhoneUpdateData(phoneNumber=outcome.phone_number, status="completed"),
            updatedAt=isoformat_utc(outcome.finished_at),
        )
    return PhoneUpdateResponse(
        success=False,
        message="Phone number update failed",
        data=PhoneUpdateData(phoneNumber=outcome.phone_number, status="failed"),
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse(
        status="OK",
        message=HEALTH_MESSAGE,
        timestamp=utc_timestamp(),
    )


@app.post(
    "/settings/phone",
    response_model=PhoneUpdateResponse,
    response_model_exclude_none=True,
    tags=["Settings"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad request - missing phone number"},
        401: {"model": ErrorResponse, "description": "Basic authentication required"},
        500: {"model": ErrorResponse, "description": "Browser automation failed"},
    },
    openapi_extra={
        "security": [{"BasicAuth": []}],
        # The body is parsed inside the handler so the auth check runs first.
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": PhoneUpdateRequest.model_json_schema()}},
        },
    },
)
async def update_phone_number(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    operation: PhoneUpdateOperation = Depends(get_phone_update_operation),
    settings: Settings = Depends(get_settings),
):
    """Update the phone number in the target platform settings"""
    try:
        credentials = parse_basic_auth(authorization)
        phone_number = await _require_phone_number(request)
    except (AuthenticationRequired, InvalidPhoneUpdateRequest):
        operation.reject()
        raise

    try:
        outcome = await operation.run(credentials, phone_number)
    except AutomationFailed as exc:
        message = str(exc) if settings.server.expose_error_details else "See server logs for details"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to update phone number", "message": message},
        )
    return _render_outcome(outcome)


@app.exception_handler(AuthenticationRequired)
async def authentication_required_handler(request: Request, exc: AuthenticationRequired):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": exc.error, "example": USAGE_EXAMPLE},
        headers={"WWW-Authenticate": "Basic"},
    )


@app.exception_handler(InvalidPhoneUpdateRequest)
async def invalid_request_handler(request: Request, exc: InvalidPhoneUpdateRequest):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Phone number is required", "example": {"phoneNumber": EXAMPLE_PHONE}},
    )


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Endpoint not found", "availableEndpoints": AVAILABLE_ENDPOINTS},
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    error_log(f"❌ Unhandled error on {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Something went wrong!", "message": str(exc)},
    )


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema.setdefault("components", {}).setdefault("securitySchemes", {})["BasicAuth"] = {
        "type": "http",
        "scheme": "basic",
        "description": "Target platform username and password",
    }
    app.openapi_schema = schema
    return schema


app.openapi = custom_openapi
app_log(f"📚 {API_TITLE} routes registered: {', '.join(AVAILABLE_ENDPOINTS)}")
