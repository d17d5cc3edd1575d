from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from sqlalchemy import select

from ..db import get_session
from ..models.api_key import ApiKey
from .errors import Unauthorized, raise_http

bearer = HTTPBearer(auto_error=False)


def ip_allowed(api_key: ApiKey, client_ip: str | None) -> bool:
    allowed = (api_key.ip_address or "*").strip()
    if allowed in ("", "*"):
        return True
    return client_ip is not None and client_ip == allowed


def resolve_credential(session: Session, token: str | None, client_ip: str | None = None) -> ApiKey:
    token = (token or "").strip()
    if not token:
        raise Unauthorized("API key required")

    api_key = session.scalar(select(ApiKey).where(ApiKey.key == token))
    if not api_key or not api_key.is_active:
        raise Unauthorized("API key not authorized")
    if not ip_allowed(api_key, client_ip):
        raise Unauthorized("API key not authorized")
    return api_key


def get_credential(
    request: Request,
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    x_api_key: str | None = Header(default=None),
    session: Session = Depends(get_session),
) -> ApiKey:
    token = x_api_key or (creds.credentials if creds else None)
    client_ip = request.client.host if request.client else None
    try:
        return resolve_credential(session, token, client_ip)
    except Unauthorized as exc:
        raise_http(exc)
