from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel
import logging

from ..settings import settings
from ..session import ScreeningSession, SessionRegistry

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


class LoginRequest(BaseModel):
	email: str = ""
	password: str = ""


class Token(BaseModel):
	access_token: str
	token_type: str = "bearer"


def get_registry(request: Request) -> SessionRegistry:
	return request.app.state.sessions


def _resolve_expiry(expires_delta: Optional[timedelta]) -> datetime:
	delta = expires_delta
	if delta is None:
		minutes = settings.access_token_expire_minutes
		delta = timedelta(minutes=minutes) if minutes > 0 else timedelta(hours=8)
	return datetime.now(timezone.utc) + delta


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None, *, expires_at: Optional[datetime] = None) -> str:
	to_encode = data.copy()
	to_encode.update({"exp": expires_at or _resolve_expiry(expires_delta)})
	return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


@router.post("/login", response_model=Token)
async def login(req: LoginRequest, request: Request, registry: SessionRegistry = Depends(get_registry)):
	# Dashboard gate only: any non-empty email and password opens a session
	email = (req.email or "").strip()
	if not email or not req.password:
		raise HTTPException(status_code=400, detail="email and password are required")
	await registry.prune()
	expires_at = _resolve_expiry(None)
	session = registry.create(email, request.app.state.quran_client, expires_at=expires_at)
	logger.info("Opened screening session %s for %s", session.session_id, email)
	return Token(access_token=create_access_token({"sub": email, "jti": session.session_id}, expires_at=expires_at))


async def get_current_session(
	token: str = Depends(oauth2_scheme),
	registry: SessionRegistry = Depends(get_registry),
) -> ScreeningSession:
	credentials_exception = HTTPException(status_code=401, detail="Could not validate credentials")
	try:
		payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
		email: str | None = payload.get("sub")
		jti: str | None = payload.get("jti")
		if email is None or jti is None:
			raise credentials_exception
	except ExpiredSignatureError:
		# Signature is still checked; only the expiry is ignored to find the session to drop
		try:
			stale = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm], options={"verify_exp": False})
		except JWTError:
			raise credentials_exception
		if stale.get("jti"):
			await registry.drop(stale["jti"])
		raise credentials_exception
	except JWTError:
		raise credentials_exception
	session = registry.get(jti)
	# Sessions live in memory only; a restart or logout invalidates old tokens
	if session is None or session.instructor != email:
		raise credentials_exception
	return session


@router.post("/logout", status_code=204)
async def logout(
	session: ScreeningSession = Depends(get_current_session),
	registry: SessionRegistry = Depends(get_registry),
):
	await registry.drop(session.session_id)
	logger.info("Closed screening session %s", session.session_id)
