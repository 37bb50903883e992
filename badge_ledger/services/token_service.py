"""Bearer tokens (ES256) and the caller identity they carry.

The ledger never authenticates anyone itself: an upstream identity
provider signs tokens and the token ``sub`` becomes the opaque caller
identity handed to every ledger operation.  Roles ride along for
logging only; capabilities come from the authorization registry.

Dev/test: an ephemeral key pair is generated on import and
``create_access_token`` mints tokens for local tooling and tests.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

import jwt
from cryptography.hazmat.primitives.asymmetric import ec

from badge_ledger.models.principal import Principal
from badge_ledger.services.validation import MAX_IDENTITY_LEN

_private_key = ec.generate_private_key(ec.SECP256R1())
_public_key = _private_key.public_key()

ALGORITHM = "ES256"
ISSUER = "badge-ledger"
AUDIENCE = "badge-ledger"
ACCESS_TOKEN_TTL_MIN = 15


def create_access_token(*, sub: str, roles: list[str] | None = None) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": sub,
        "iss": ISSUER,
        "aud": AUDIENCE,
        "exp": now + timedelta(minutes=ACCESS_TOKEN_TTL_MIN),
        "iat": now,
        "jti": str(uuid.uuid4()),
        "roles": roles or [],
    }
    return jwt.encode(payload, _private_key, algorithm=ALGORITHM)


def principal_from_token(token: str) -> Principal:
    """Verify ``token`` and return the caller it names.

    The algorithm is pinned to ES256.  Raises jwt.ExpiredSignatureError
    or jwt.InvalidTokenError.  A blank or overlong subject counts as
    invalid: it cannot be a ledger identity.
    """
    claims = jwt.decode(
        token,
        _public_key,
        algorithms=[ALGORITHM],
        issuer=ISSUER,
        audience=AUDIENCE,
        options={"require": ["sub", "exp", "iat", "jti"]},
    )
    subject = claims["sub"]
    if (
        not isinstance(subject, str)
        or not subject.strip()
        or len(subject) > MAX_IDENTITY_LEN
    ):
        raise jwt.InvalidTokenError("token subject is not a usable identity")
    return Principal(user_id=subject, roles=frozenset(claims.get("roles", [])))
