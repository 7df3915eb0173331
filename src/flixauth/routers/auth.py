from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from ..deps import (
    get_account_email_service,
    get_password_reset_service,
    get_registration_service,
    get_verification_service,
)
from ..logging_config import get_logger
from ..metrics import record_flow_outcome
from ..schemas.auth import FlowResponse, NewVerificationRequest
from ..services.account_email_service import AccountEmailService
from ..services.password_reset_service import PasswordResetService
from ..services.registration_service import RegistrationService
from ..services.verification_service import VerificationService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


async def _json_body(request: Request) -> Any:
    """Return the parsed JSON body, or None when the body is missing or not JSON."""
    try:
        return await request.json()
    except Exception as e:
        logger.debug("non_json_body_or_parse_error", path=request.url.path, error=str(e))
        return None


@router.post("/new-verification", response_model=FlowResponse, response_model_exclude_none=True)
@router.get("/new-verification", response_model=FlowResponse, response_model_exclude_none=True)
async def new_verification(
    request: Request,
    token: Optional[str] = None,
    svc: VerificationService = Depends(get_verification_service),
):
    """
    Verify an email address using the token from the confirmation email.
    Supports both GET (from email links) and POST (API calls).
    """
    if request.method == "POST" and not token:
        try:
            token = NewVerificationRequest.model_validate(await _json_body(request)).token
        except ValidationError:
            token = None
    if not token or not isinstance(token, str):
        raise HTTPException(status_code=400, detail="token is required")

    result = await svc.verify_email(token)
    record_flow_outcome("new_verification", result)
    return result.to_response()


@router.post("/reset", response_model=FlowResponse, response_model_exclude_none=True)
async def reset(
    request: Request,
    svc: PasswordResetService = Depends(get_password_reset_service),
):
    """Send a password reset link to the account owning the posted email."""
    values = await _json_body(request)
    result = await svc.request_password_reset(values)
    record_flow_outcome("reset_password", result)
    return result.to_response()


@router.post("/new-password", response_model=FlowResponse, response_model_exclude_none=True)
async def new_password(
    request: Request,
    token: Optional[str] = None,
    svc: PasswordResetService = Depends(get_password_reset_service),
):
    values = await _json_body(request)
    result = await svc.set_new_password(values, token)
    record_flow_outcome("new_password", result)
    return result.to_response()


@router.post("/register", response_model=FlowResponse, response_model_exclude_none=True)
async def register(
    request: Request,
    svc: RegistrationService = Depends(get_registration_service),
):
    values = await _json_body(request)
    result = await svc.register(values)
    record_flow_outcome("register", result)
    return result.to_response()


@router.post(
    "/resend-verification", response_model=FlowResponse, response_model_exclude_none=True
)
async def resend_verification(
    request: Request,
    svc: AccountEmailService = Depends(get_account_email_service),
):
    """Send a new confirmation link to an account that has not verified its email."""
    values = await _json_body(request)
    result = await svc.resend_verification(values)
    record_flow_outcome("resend_verification", result)
    return result.to_response()


@router.post("/change-email", response_model=FlowResponse, response_model_exclude_none=True)
async def change_email(
    request: Request,
    svc: AccountEmailService = Depends(get_account_email_service),
):
    """
    Start an email change for the account matching ``email``/``password``.
    The account switches to ``new_email`` once the mailed link is verified.
    """
    values = await _json_body(request)
    result = await svc.change_email(values)
    record_flow_outcome("email_change", result)
    return result.to_response()
