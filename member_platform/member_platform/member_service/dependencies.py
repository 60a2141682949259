"""
Request gates shared by the routers.

``require_store_ready`` turns requests away while the store is not
connected; ``require_user_id`` resolves the bearer token to a user id.
"""
from fastapi import Depends, Header, HTTPException, Request, status
from typing import Optional

from .auth import TokenService
from .connection import ConnectionState
from .gateway import UserStoreGateway


def get_store(request: Request) -> UserStoreGateway:
    return request.app.state.store


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_db(store: UserStoreGateway = Depends(get_store)):
    db = store.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def store_not_ready_body(state: ConnectionState) -> dict:
    return {
        "message": "Database connection not ready. Please try again in a few seconds.",
        "error": "Database connection not established",
        "state": state.value,
    }


def require_store_ready(store: UserStoreGateway = Depends(get_store)) -> None:
    if not store.monitor.is_ready:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=store_not_ready_body(store.monitor.state)
        )


def require_user_id(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access Denied")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access Denied")

    user_id = tokens.verify(token)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Token")
    return user_id
