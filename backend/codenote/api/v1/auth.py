"""Login code + session endpoints.

Passwordless sign-in via emailed one-time codes, session lifetime choice,
logout, and current user info.

Endpoints:
- POST /auth/send-code: email a 6-digit login code
- POST /auth/verify-code: redeem the code, set session cookie
- POST /auth/session-duration: re-issue the cookie with a chosen lifetime
- POST /auth/logout: clear session cookie
- GET /auth/me: return current user info
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Request
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from starlette.responses import Response

from codenote.api.deps import Codec, CurrentIdentity, DbSession
from codenote.core.auth import (
    DEFAULT_SESSION_DURATION,
    SessionDuration,
    clear_session_cookie,
    resolve_duration,
    set_session_cookie,
)
from codenote.core.email import send_login_code_email, send_login_success_email
from codenote.core.errors import EmailDeliveryError
from codenote.core.rate_limiting import limiter, verify_code_limit
from codenote.core.responses import DataResponse
from codenote.services import login_code_service
from codenote.services.login_code_service import LOGIN_CODE_TTL

logger = logging.getLogger(__name__)

router = APIRouter()


# ===================================================================
# Request models
# ===================================================================


class SendCodeRequest(BaseModel):
    """Request body for POST /auth/send-code."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class VerifyCodeRequest(BaseModel):
    """Request body for POST /auth/verify-code."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    code: str = Field(min_length=1, max_length=16)


class SessionDurationRequest(BaseModel):
    """Request body for POST /auth/session-duration."""

    model_config = ConfigDict(extra="forbid")

    choice: SessionDuration


# ===================================================================
# POST /auth/send-code
# ===================================================================


@router.post("/send-code")
async def send_code(
    body: SendCodeRequest,
    db: DbSession,
) -> DataResponse[dict]:
    """Email a one-time login code.

    Creates the user on first request. The token is committed before the
    email goes out, so a delivery failure leaves an unusable token behind
    rather than an emailed code with no token.
    """
    issued = await login_code_service.issue_code(db, body.email)
    await db.commit()

    delivered = await send_login_code_email(
        to_email=issued.email,
        code=issued.code,
        ttl=LOGIN_CODE_TTL,
    )
    if not delivered:
        logger.warning("Login code for user %s stored but not delivered", issued.user_id)
        raise EmailDeliveryError()

    return DataResponse(
        data={
            "message": "Code sent. Check your email.",
            "email": issued.email,
        }
    )


# ===================================================================
# POST /auth/verify-code
# ===================================================================


@router.post("/verify-code")
@limiter.limit(verify_code_limit)
async def verify_code(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: VerifyCodeRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    db: DbSession,
    codec: Codec,
) -> DataResponse[dict]:
    """Redeem a login code and start a session.

    Sets a one-day session cookie; the client then offers the duration
    choice. The sign-in notification email is sent after the response.

    Rate limit: settings.rate_limit_verify_code per client address.
    """
    user_id = await login_code_service.verify_code(db, body.email, body.code)
    await db.commit()

    email = login_code_service.normalize_email(body.email)
    set_session_cookie(
        response,
        codec.encode(user_id, email),
        resolve_duration(DEFAULT_SESSION_DURATION),
    )
    background_tasks.add_task(send_login_success_email, to_email=email)

    return DataResponse(
        data={
            "id": str(user_id),
            "email": email,
            "session_duration": DEFAULT_SESSION_DURATION.value,
            "duration_choices": [d.value for d in SessionDuration],
        }
    )


# ===================================================================
# POST /auth/session-duration
# ===================================================================


@router.post("/session-duration")
async def set_session_duration(
    body: SessionDurationRequest,
    response: Response,
    identity: CurrentIdentity,
    codec: Codec,
) -> DataResponse[dict]:
    """Re-issue the session cookie with the chosen lifetime.

    Requires a valid session. The credential itself is unchanged; only the
    cookie's Max-Age differs.
    """
    lifetime = resolve_duration(body.choice)
    set_session_cookie(response, codec.encode(identity.id, identity.email), lifetime)
    return DataResponse(
        data={
            "session_duration": body.choice.value,
            "max_age": int(lifetime.total_seconds()),
        }
    )


# ===================================================================
# POST /auth/logout
# ===================================================================


@router.post("/logout")
async def logout(response: Response) -> DataResponse[dict]:
    """Clear session cookie.

    No auth required; clears cookie regardless. Other devices stay signed
    in; only rotating the session secret ends every session.
    """
    clear_session_cookie(response)
    return DataResponse(data={"message": "Signed out"})


# ===================================================================
# GET /auth/me
# ===================================================================


@router.get("/me")
async def get_me(identity: CurrentIdentity) -> DataResponse[dict]:
    """Return current user info from the session cookie.

    Returns 401 if no valid session.
    """
    return DataResponse(data={"id": str(identity.id), "email": identity.email})
