"""Authentication service: bcrypt passwords and signed, expiring bearer tokens."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta

import bcrypt
import jwt

from fieldtech.db import crud
from fieldtech.db.engine import Database
from fieldtech.errors import UnauthenticatedError, ValidationError
from fieldtech.models import Technician

logger = logging.getLogger(__name__)


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


@dataclass
class TokenIssuer:
    """Issues and verifies JWTs whose only claim is the technician id."""

    secret: str
    algorithm: str = "HS256"
    expires_in: timedelta = timedelta(hours=24)

    def issue(self, technician_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {"sub": technician_id, "iat": now, "exp": now + self.expires_in}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Return the technician id carried by a valid token."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise UnauthenticatedError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise UnauthenticatedError("Invalid or expired token") from exc
        return str(payload["sub"])


class SessionIssuer:
    """Verifies credentials, hands out tokens, and resolves tokens to technicians."""

    def __init__(self, database: Database, tokens: TokenIssuer):
        self.database = database
        self.tokens = tokens

    async def login(self, username: str, password: str) -> tuple[str, Technician]:
        if not username or not password:
            raise ValidationError("Username and password are required")

        async with self.database.session() as db:
            tech = await crud.get_technician_by_username(db, username)

        if not tech or not verify_password(password, tech.password_hash):
            logger.warning("Failed login for username %r", username)
            raise UnauthenticatedError("Invalid username or password")

        logger.info("Technician %s logged in", tech.id)
        return self.tokens.issue(tech.id), tech

    async def resolve(self, token: str) -> Technician:
        """Verify the token, then re-read the technician it names."""
        technician_id = self.tokens.verify(token)
        async with self.database.session() as db:
            tech = await crud.get_technician(db, technician_id)
        if not tech:
            raise UnauthenticatedError("Invalid or expired token")
        return tech
