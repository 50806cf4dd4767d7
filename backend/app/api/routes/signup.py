"""Sign-up endpoint — submissions are logged, not stored.

Provider applications and family update requests are collected manually for
now; there is no backend table behind this form.
"""

import logging

from fastapi import APIRouter, status

from app.models.signup import SignupRequest, SignupResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/signup", tags=["signup"])

_MESSAGES = {
    "provider": "Thanks, we'll follow up with next steps for listing and verification.",
    "family": "Thanks, we'll email you when verified providers are added or updated in your area.",
}


@router.post(
    "",
    response_model=SignupResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit a sign-up",
    description=(
        "Accepts a provider application or a family update request. "
        "The submission is logged only; nothing is persisted."
    ),
)
async def submit_signup(request: SignupRequest) -> SignupResponse:
    # Email is PII; log the domain only.
    domain = request.email.rpartition("@")[2]
    logger.info(
        "Sign-up received: role=%s email_domain=%s location=%s",
        request.role,
        domain,
        request.location,
    )
    return SignupResponse(received=True, role=request.role, message=_MESSAGES[request.role])
