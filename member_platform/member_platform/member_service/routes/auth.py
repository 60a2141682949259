"""
Registration and login endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import datetime
import logging

from ..auth import TokenService, hash_password, verify_password
from ..dependencies import get_db, get_store, get_token_service, require_store_ready
from ..errors import DuplicateEmailError, MemberServiceError, StoreUnavailableError
from ..gateway import UserStoreGateway
from ..models import DEFAULT_ROLE, User
from ..schemas import AuthResponse, UserCreate, UserLogin, UserSummary

router = APIRouter(tags=["auth"], dependencies=[Depends(require_store_ready)])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user: UserCreate,
    db: Session = Depends(get_db),
    store: UserStoreGateway = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
):
    try:
        if store.find_by_email(db, user.email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

        hashed_pw = hash_password(user.password)

        new_user = store.insert(db, User(
            name=user.name,
            email=user.email,
            password=hashed_pw,
            role=DEFAULT_ROLE,
            created_at=datetime.utcnow()
        ))

        token = tokens.issue(new_user.id)
        logger.info("User registered: user_id=%s", new_user.id)
        return AuthResponse(
            message="User registered successfully",
            token=token,
            user=UserSummary.model_validate(new_user)
        )

    except (HTTPException, StoreUnavailableError):
        raise
    except DuplicateEmailError as e:
        # Lost the race against a concurrent registration for the same email
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists") from e
    except Exception as e:
        logger.exception("Registration error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error registering user"
        ) from e


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    store: UserStoreGateway = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
):
    try:
        user = store.find_by_email(db, credentials.email)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        if not verify_password(credentials.password, user.password):
            logger.info("Login rejected: user_id=%s", user.id)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

        summary = UserSummary.model_validate(user)

        # last_login is informational; failing to record it does not fail the login
        user.last_login = datetime.utcnow()
        try:
            store.save(db, user)
        except (SQLAlchemyError, MemberServiceError) as e:
            logger.warning("Could not record last login for user_id=%s: %s", summary.id, e)

        token = tokens.issue(summary.id)
        logger.info("Successful login: user_id=%s", summary.id)
        return AuthResponse(message="Login successful", token=token, user=summary)

    except (HTTPException, StoreUnavailableError):
        raise
    except Exception as e:
        logger.exception("Login error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed"
        ) from e
