from dataclasses import dataclass
from typing import Annotated, Optional
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.core.security import decode_session_token
from app.services.ai.gemini_client import GeminiClient


logger = logging.getLogger(__name__)

# HTTP Bearer security scheme; missing credentials are answered with 401 below
security = HTTPBearer(auto_error=False)


@dataclass
class Identity:
    """Authenticated caller as asserted by the identity provider."""
    clerk_id: str
    session_id: Optional[str] = None
    claims: Optional[dict] = None


async def get_current_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Identity:
    """
    Dependency to get the current authenticated caller.
    Validates the Clerk session token; `sub` is the Clerk user id.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        raise credentials_exception

    payload = decode_session_token(credentials.credentials)
    if payload is None or not payload.get("sub"):
        logger.warning("Token verification failed - invalid or expired token")
        raise credentials_exception

    return Identity(
        clerk_id=payload["sub"],
        session_id=payload.get("sid"),
        claims=payload,
    )


def get_gemini_client() -> GeminiClient:
    """Gemini client dependency (overridable in tests)."""
    return GeminiClient()


# Type aliases for cleaner dependency injection
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
DB = Annotated[AsyncSession, Depends(get_db)]
Gemini = Annotated[GeminiClient, Depends(get_gemini_client)]
