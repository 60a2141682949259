"""
Profile endpoints for the authenticated user.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from datetime import datetime
import logging

from ..dependencies import get_db, get_store, require_user_id
from ..errors import DuplicateEmailError, StoreUnavailableError
from ..gateway import UserStoreGateway
from ..models import DEFAULT_ROLE
from ..schemas import Profile, ProfileResponse, ProfileUpdate, ProfileUpdateResponse, UpdatedProfile

router = APIRouter(prefix="/profile", tags=["profile"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
    store: UserStoreGateway = Depends(get_store),
):
    try:
        user = store.find_by_id(db, user_id, exclude_password=True)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        return ProfileResponse(
            message="Profile retrieved successfully",
            profile=Profile(
                id=user.id,
                name=user.name,
                email=user.email,
                role=user.role or DEFAULT_ROLE,
                created_at=user.created_at,
                # Display default only, never written back
                last_login=user.last_login or datetime.utcnow()
            )
        )

    except (HTTPException, StoreUnavailableError):
        raise
    except Exception as e:
        logger.exception("Profile error for user_id=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving profile"
        ) from e


@router.put("", response_model=ProfileUpdateResponse)
def update_profile(
    payload: ProfileUpdate,
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
    store: UserStoreGateway = Depends(get_store),
):
    try:
        user = store.find_by_id(db, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        # Email uniqueness is not checked here; only the store constraint guards it
        if payload.name:
            user.name = payload.name
        if payload.email:
            user.email = payload.email

        user = store.save(db, user)
        logger.info("Profile updated: user_id=%s", user.id)

        return ProfileUpdateResponse(
            message="Profile updated successfully",
            profile=UpdatedProfile(
                id=user.id,
                name=user.name,
                email=user.email,
                role=user.role or DEFAULT_ROLE,
                updated_at=datetime.utcnow()
            )
        )

    except (HTTPException, StoreUnavailableError):
        raise
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use") from e
    except Exception as e:
        logger.exception("Profile update error for user_id=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating profile"
        ) from e
