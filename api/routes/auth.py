"""
Identity endpoints.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_identity_service
from api.models.auth import ResendVerificationRequest
from api.services.identity_service import IdentityService
from weatherwell.exceptions import IdentityNotConfiguredError

router = APIRouter()


@router.post(
    "/auth/resend-verification",
    summary="Resend verification e-mail",
    description="Ask the identity provider to send a new verification e-mail to a user"
)
async def resend_verification_email(
    request: ResendVerificationRequest,
    identity_service: IdentityService = Depends(get_identity_service),
):
    """
    Resend the account verification e-mail.

    Args:
        request: Body with the user's e-mail address

    Returns:
        Success message

    Raises:
        400: Missing e-mail, or user unknown / request refused
        503: Identity provider not configured
    """
    if not request.email or not request.email.strip():
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Email is required"})

    try:
        success = await identity_service.resend_verification_email(request.email.strip())
    except IdentityNotConfiguredError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "Identity provider is not configured", "details": str(e)}
        )

    if success:
        return {"message": "Verification email sent successfully"}

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Failed to send verification email. User may not exist."}
    )
