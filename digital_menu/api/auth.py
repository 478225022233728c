"""Authentication API endpoints"""

from datetime import datetime, timedelta
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from digital_menu.api.deps import get_app_settings, get_auth_events
from digital_menu.config import Settings
from digital_menu.database import get_db
from digital_menu.models.user import User
from digital_menu.schemas.auth import Token, RefreshRequest, SignUpRequest, UserResponse
from digital_menu.services import auth_service
from digital_menu.services.auth_service import AuthError, AuthStateFeed

router = APIRouter()

# OAuth2 scheme
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def create_access_token(user: User, settings: Settings) -> str:
    """Create JWT access token"""
    expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_refresh_token(user: User, settings: Settings) -> str:
    """Create JWT refresh token"""
    expire = datetime.utcnow() + timedelta(days=settings.refresh_token_expire_days)
    payload = {
        "sub": str(user.id),
        "exp": expire,
        "type": "refresh",
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


async def issue_tokens(db: AsyncSession, user: User, settings: Settings) -> Token:
    access_token = create_access_token(user, settings)
    refresh_token = create_refresh_token(user, settings)
    await auth_service.store_refresh_token(db, user, refresh_token)
    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.access_token_expire_minutes * 60,
    )


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """Get current authenticated user from token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
        user_id: str = payload.get("sub")
        token_type: str = payload.get("type")
        
        if user_id is None or token_type != "access":
            raise credentials_exception
        user_uuid = UUID(user_id)
    except (JWTError, ValueError):
        raise credentials_exception
    
    user = await auth_service.get_user(db, user_uuid)
    if user is None:
        raise credentials_exception
    
    return user


@router.post("/signup", response_model=Token, status_code=201)
async def signup(
    request: SignUpRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    auth_events: AuthStateFeed = Depends(get_auth_events),
):
    """Create an account and sign it in"""
    try:
        user = await auth_service.sign_up(db, request.email, request.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    
    token = await issue_tokens(db, user, settings)
    auth_events.emit(user)
    return token


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    auth_events: AuthStateFeed = Depends(get_auth_events),
):
    """Authenticate user and return tokens"""
    try:
        user = await auth_service.sign_in(db, form_data.username, form_data.password)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    token = await issue_tokens(db, user, settings)
    auth_events.emit(user)
    return token


@router.post("/refresh", response_model=Token)
async def refresh_token(
    request: RefreshRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Refresh access token using refresh token"""
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid refresh token",
    )
    try:
        payload = jwt.decode(
            request.refresh_token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        user_id: str = payload.get("sub")
        token_type: str = payload.get("type")
        
        if user_id is None or token_type != "refresh":
            raise invalid
        user_uuid = UUID(user_id)
    except (JWTError, ValueError):
        raise invalid
    
    user = await auth_service.get_user(db, user_uuid)
    
    if not user or user.refresh_token != request.refresh_token:
        raise invalid
    
    # Rotation: the presented refresh token stops working
    return await issue_tokens(db, user, settings)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
):
    """Get current user information"""
    return current_user


@router.post("/logout")
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    auth_events: AuthStateFeed = Depends(get_auth_events),
):
    """Logout user by invalidating refresh token"""
    await auth_service.sign_out(db, current_user)
    auth_events.emit(None)
    return {"message": "Successfully logged out"}
