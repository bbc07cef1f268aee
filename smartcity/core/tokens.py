"""JWT issuance and stateless validation shared by the identity and admin services."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

import jwt

from smartcity.core.roles import Role

if TYPE_CHECKING:
    from smartcity.core.config import Settings

# Fixed lifetime; not configurable.
TOKEN_LIFETIME = timedelta(hours=24)

REQUIRED_CLAIMS = ["sub", "name", "role", "iat", "exp", "iss", "aud"]

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(UTC)


class TokenSubject(Protocol):
    id: int
    username: str
    role: Role


@dataclass(frozen=True)
class TokenConfig:
    """Signing parameters, built once at startup and never re-read per request."""

    secret: str = field(repr=False)
    issuer: str
    audience: str
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenConfig":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            algorithm=settings.JWT_ALGORITHM,
        )


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    name: str
    role: Role
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class IssuedToken:
    token: str
    claims: TokenClaims

    @property
    def expires_at(self) -> datetime:
        return self.claims.expires_at


class TokenFailureReason(str, Enum):
    MALFORMED = "malformed_token"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    ISSUER_MISMATCH = "issuer_mismatch"
    AUDIENCE_MISMATCH = "audience_mismatch"


@dataclass(frozen=True)
class TokenFailure:
    reason: TokenFailureReason

    @property
    def message(self) -> str:
        if self.reason is TokenFailureReason.EXPIRED:
            return "Token has expired"
        return "Invalid token"


class TokenIssuer:
    """Mints signed bearer tokens valid for exactly TOKEN_LIFETIME."""

    def __init__(self, config: TokenConfig, clock: Clock = utcnow) -> None:
        self._config = config
        self._clock = clock

    def issue(self, user: TokenSubject) -> IssuedToken:
        # JWT timestamps are whole seconds; truncate so exp - iat is exactly the lifetime.
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + TOKEN_LIFETIME
        role = Role(user.role)
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "name": user.username,
            "role": role.value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": self._config.issuer,
            "aud": self._config.audience,
        }
        token = jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)
        claims = TokenClaims(
            user_id=user.id,
            name=user.username,
            role=role,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        return IssuedToken(token=token, claims=claims)


class TokenValidator:
    """
    Verify signature, issuer, audience and expiry of a bearer token.

    Pure function of (token, config, clock): no database access, so any service
    holding the same TokenConfig re-derives the same answer. Expiry uses zero
    leeway; a token is expired from the instant now >= exp.
    """

    def __init__(self, config: TokenConfig, clock: Clock = utcnow) -> None:
        self._config = config
        self._clock = clock

    def validate(self, token: str) -> TokenClaims | TokenFailure:
        if not isinstance(token, str) or token.count(".") != 2:
            return TokenFailure(TokenFailureReason.MALFORMED)
        try:
            payload = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                audience=self._config.audience,
                issuer=self._config.issuer,
                # Time checks are done below against the injected clock.
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError):
            return TokenFailure(TokenFailureReason.BAD_SIGNATURE)
        except jwt.InvalidIssuerError:
            return TokenFailure(TokenFailureReason.ISSUER_MISMATCH)
        except jwt.InvalidAudienceError:
            return TokenFailure(TokenFailureReason.AUDIENCE_MISMATCH)
        except jwt.PyJWTError:
            return TokenFailure(TokenFailureReason.MALFORMED)

        claims = _claims_from_payload(payload)
        if claims is None:
            return TokenFailure(TokenFailureReason.MALFORMED)
        if self._clock() >= claims.expires_at:
            return TokenFailure(TokenFailureReason.EXPIRED)
        return claims


def _claims_from_payload(payload: dict[str, Any]) -> TokenClaims | None:
    """Type-check the decoded claims; None if any is missing or ill-typed."""
    iat, exp, name = payload.get("iat"), payload.get("exp"), payload.get("name")
    if not isinstance(iat, int | float) or not isinstance(exp, int | float):
        return None
    if not isinstance(name, str):
        return None
    try:
        user_id = int(payload["sub"])
        role = Role(payload["role"])
    except (KeyError, TypeError, ValueError):
        return None
    return TokenClaims(
        user_id=user_id,
        name=name,
        role=role,
        issued_at=datetime.fromtimestamp(iat, UTC),
        expires_at=datetime.fromtimestamp(exp, UTC),
    )
