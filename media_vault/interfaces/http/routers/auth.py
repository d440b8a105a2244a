"""Registration and token endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from media_vault.core.security import create_access_token, get_current_account
from media_vault.interfaces.http.deps import get_account_service, get_db_session
from media_vault.modules.accounts import Account, AccountAlreadyExistsError, AccountCreateInput, AccountService
from media_vault.schemas import AccountResponse, LoginRequest, RegisterRequest, Token

router = APIRouter()


@router.post(
    "/register",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a contributor account",
)
async def register(
    payload: RegisterRequest,
    service: AccountService = Depends(get_account_service),
    db: AsyncSession = Depends(get_db_session),
) -> AccountResponse:
    try:
        account = await service.create_account(
            AccountCreateInput(username=payload.username, password=payload.password)
        )
    except AccountAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    await db.commit()
    return AccountResponse.model_validate(account)


@router.post("/login", response_model=Token, summary="Exchange credentials for a bearer token")
async def login(
    payload: LoginRequest,
    service: AccountService = Depends(get_account_service),
    db: AsyncSession = Depends(get_db_session),
) -> Token:
    account = await service.authenticate(payload.username, payload.password)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password")
    await service.set_last_login(account.id)
    await db.commit()
    return Token(access_token=create_access_token(account.id, account.username))


@router.get("/me", response_model=AccountResponse, summary="Current account")
async def me(account: Account = Depends(get_current_account)) -> AccountResponse:
    return AccountResponse.model_validate(account)
