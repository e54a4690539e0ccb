"""
Bearer token decoding.

Tokens are issued elsewhere; this service only verifies the signature and
reads the subject claim.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from backoffice.config import settings
from backoffice.core.exceptions import InvalidTokenError


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller."""

    user_id: str
    claims: Dict[str, Any]


def decode_token(
    token: str,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        InvalidTokenError: If the token is malformed, expired or badly signed
    """
    try:
        return jwt.decode(
            token,
            secret_key or settings.JWT_SECRET_KEY,
            algorithms=[algorithm or settings.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("Token has expired", reason="expired") from exc
    except JWTError as exc:
        raise InvalidTokenError("Invalid or malformed token", reason="decode") from exc


def user_from_token(token: str) -> CurrentUser:
    payload = decode_token(token)
    subject = payload.get("sub")
    if not subject:
        raise InvalidTokenError("Token has no subject", reason="missing_sub")
    return CurrentUser(user_id=str(subject), claims=payload)
