import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from src.api.error import ClientError
from src.app.errors import InvoiceError
from src.app.use_cases.invoices.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

bearer_scheme = HTTPBearer(auto_error=False)


def get_invoice_service(request: Request) -> InvoiceService:
    return request.app.state.invoice_service


def _unauthorized(reason: str) -> ClientError:
    return ClientError(
        InvoiceError("Admin authorization required", reason=reason, code="UNAUTHORIZED"),
        status_code=status.HTTP_401_UNAUTHORIZED,
    )


def decode_token(token: str, secret_key: str, algorithm: str) -> Optional[Dict[str, Any]]:
    """
    Decode and verify a signed bearer token

    Returns:
        Token claims, or None if the signature, expiry or format is invalid
    """
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        return None


async def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    """
    Admin guard

    The bearer token must be a JWT signed with JWT_SECRET_KEY carrying
    role=admin. Missing or invalid tokens get 401, other roles get 403.
    """
    config = request.app.state.config
    if config.AUTH_DISABLED:
        return

    if not credentials or not credentials.credentials:
        raise _unauthorized("Missing bearer token")
    if not config.JWT_SECRET_KEY:
        logger.error("JWT_SECRET_KEY is not configured; rejecting admin request")
        raise _unauthorized("Token verification is not configured")

    claims = decode_token(credentials.credentials, config.JWT_SECRET_KEY, config.JWT_ALGORITHM)
    if claims is None:
        raise _unauthorized("Invalid or expired bearer token")

    if claims.get("role") != ADMIN_ROLE:
        raise ClientError(
            InvoiceError(
                "Admin role required",
                reason=f"Token role {claims.get('role')!r} is not {ADMIN_ROLE!r}",
                code="FORBIDDEN",
            ),
            status_code=status.HTTP_403_FORBIDDEN,
        )
