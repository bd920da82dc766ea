# src/jwt_signer/issuer.py
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional, Union

from jose import JOSEError, jwt

from jwt_signer.errors import SigningError

ALGORITHM = "HS256"


def issue_token(
    claims: Mapping[str, Any],
    valid_for: timedelta,
    secret: Union[str, bytes],
    now: Optional[datetime] = None,
) -> str:
    """
    Sign ``claims`` into a compact HS256 JWT valid for ``valid_for``.

    ``iat`` and ``exp`` are set last as integer Unix timestamps, replacing
    any claims of the same name. ``claims`` itself is left untouched.

    Raises:
        SigningError: If the secret is empty or rejected by the signer
    """
    if not secret:
        raise SigningError("cannot sign token: secret is empty")

    if now is None:
        now = datetime.now(timezone.utc)

    to_encode: Dict[str, Any] = dict(claims)
    try:
        to_encode["iat"] = math.floor(now.timestamp())
        to_encode["exp"] = math.floor((now + valid_for).timestamp())
    except (OverflowError, OSError) as e:
        raise SigningError(f"cannot sign token: expiry out of range: {e}") from e

    try:
        return jwt.encode(to_encode, secret, algorithm=ALGORITHM)
    except JOSEError as e:
        raise SigningError(f"cannot sign token: {e}") from e
