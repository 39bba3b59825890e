from datetime import datetime, timedelta, timezone
from typing import Optional
import hmac
import logging
import uuid

from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from ..content import Language, message, parse_language
from ..settings import settings

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)
logging.getLogger('passlib').setLevel(logging.ERROR)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")

ADMIN_USERNAME = "admin"
PURGE_SCOPE = "purge"


def request_language(lang: Optional[str] = Query(default=None)) -> Language:
	return parse_language(lang, parse_language(settings.default_language))


class Token(BaseModel):
	access_token: str
	token_type: str = "bearer"


class LoginRequest(BaseModel):
	password: str


class AdminSession(BaseModel):
	username: str
	session_id: str


def verify_admin_password(password: str) -> bool:
	if settings.admin_password_hash:
		return pwd_context.verify(password, settings.admin_password_hash)
	if settings.admin_password:
		return hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))
	# No password configured: admin access stays closed
	return False


def _resolve_expiry(expires_delta: Optional[timedelta]) -> datetime:
	delta = expires_delta
	if delta is None:
		minutes = settings.access_token_expire_minutes
		delta = timedelta(minutes=minutes) if minutes > 0 else timedelta(days=1)
	return datetime.now(timezone.utc) + delta


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
	to_encode = data.copy()
	to_encode.update({"exp": _resolve_expiry(expires_delta)})
	return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


@router.post("/token", response_model=Token)
async def login(req: LoginRequest, language: Language = Depends(request_language)):
	if not verify_admin_password(req.password):
		raise HTTPException(status_code=401, detail=message("wrong_password", language))
	session_id = uuid.uuid4().hex
	logger.info("Admin session %s opened", session_id)
	return Token(access_token=create_access_token({"sub": ADMIN_USERNAME, "jti": session_id}))


def get_current_admin(token: str = Depends(oauth2_scheme)) -> AdminSession:
	credentials_exception = HTTPException(status_code=401, detail="Could not validate credentials")
	try:
		payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
	except JWTError:
		raise credentials_exception
	username: str | None = payload.get("sub")
	jti: str | None = payload.get("jti")
	# Purge confirmation tokens must not work as session tokens
	if username != ADMIN_USERNAME or jti is None or payload.get("scope"):
		raise credentials_exception
	return AdminSession(username=username, session_id=jti)


def create_purge_token(session: AdminSession) -> str:
	minutes = max(1, settings.purge_confirmation_minutes)
	return create_access_token(
		{"sub": session.username, "jti": session.session_id, "scope": PURGE_SCOPE},
		timedelta(minutes=minutes),
	)


def verify_purge_token(token: Optional[str], session: AdminSession) -> bool:
	"""True only for an unexpired purge confirmation issued to this admin session."""
	if not token:
		return False
	try:
		payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
	except JWTError:
		return False
	return (
		payload.get("scope") == PURGE_SCOPE
		and payload.get("sub") == session.username
		and payload.get("jti") == session.session_id
	)

