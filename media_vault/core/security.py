"""JWT helpers and the authenticated-account dependency."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from media_vault.core.config import get_settings
from media_vault.interfaces.http.deps.account import get_account_service
from media_vault.modules.accounts import Account, AccountService
from media_vault.schemas import TokenData

security = HTTPBearer()


def create_access_token(account_id: str, username: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": account_id,
        "username": username,
        "exp": datetime.now(timezone.utc) + expire_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> TokenData:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials") from exc

    account_id = payload.get("sub")
    username = payload.get("username")
    if not account_id or not username:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")
    return TokenData(account_id=account_id, username=username)


async def get_current_account(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    service: AccountService = Depends(get_account_service),
) -> Account:
    token_data = decode_access_token(credentials.credentials)
    account = await service.get_by_id(token_data.account_id)
    if account is None or not account.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account missing or disabled")
    return account
