"""Schema exports for API request/response models."""

from .auth import (
    ChangeEmailRequest,
    FlowResponse,
    NewPasswordRequest,
    NewVerificationRequest,
    RegisterRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
)

__all__ = [
    "ChangeEmailRequest",
    "FlowResponse",
    "NewPasswordRequest",
    "NewVerificationRequest",
    "RegisterRequest",
    "ResendVerificationRequest",
    "ResetPasswordRequest",
]
