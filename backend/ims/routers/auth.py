"""Authentication router."""
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError

from ims.context import AppContext
from ims.schemas.records import UserStatus
from ims.schemas.user import PasswordReset, Token, TokenData, UserRead, UserRegister
from ims.security import create_access_token, decode_access_token
from ims.services.session import SessionContext

router = APIRouter(prefix="/auth", tags=["auth"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


def get_context(request: Request) -> AppContext:
    """The process-wide services built at startup."""
    return request.app.state.ims


async def get_session(
    token: str = Depends(oauth2_scheme),
    context: AppContext = Depends(get_context),
) -> SessionContext:
    """Resolve the bearer token to the active tenant."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token, context.settings.secret_key)
        user_id: str = payload.get("sub")
        if user_id is None:
            raise credentials_exception
        token_data = TokenData(
            user_id=user_id,
            username=payload.get("username"),
            role=payload.get("role"),
        )
    except JWTError:
        raise credentials_exception

    user = context.accounts.get_user(token_data.user_id)
    if user is None or user.get("status") != UserStatus.APPROVED.value:
        raise credentials_exception
    return SessionContext(user=user)


async def require_admin(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Dependency to require the privileged tenant."""
    if not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions"
        )
    return session


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(payload: UserRegister, context: AppContext = Depends(get_context)):
    """Register a company; it stays Pending until an admin approves it."""
    return context.accounts.register(
        payload.company_name,
        payload.username,
        payload.password,
        payload.contact_person,
    )


@router.post("/token", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    context: AppContext = Depends(get_context),
):
    """Login and get access token."""
    user = context.accounts.authenticate(form_data.username, form_data.password)

    access_token = create_access_token(
        data={
            "sub": user["id"],
            "username": user["username"],
            "role": user.get("role"),
        },
        secret_key=context.settings.secret_key,
        expires_delta=timedelta(minutes=context.settings.access_token_expire_minutes),
    )
    return Token(access_token=access_token)


@router.get("/me", response_model=UserRead)
async def get_me(session: SessionContext = Depends(get_session)):
    """Get current user info."""
    return session.user


@router.post("/password", response_model=UserRead)
async def change_own_password(
    payload: PasswordReset,
    session: SessionContext = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    """Change the current user's password."""
    return context.accounts.reset_password(session, session.user["id"], payload.password)
