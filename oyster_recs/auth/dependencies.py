from __future__ import annotations

from fastapi import Depends, HTTPException, Request


def require_user(request: Request) -> dict:
    """Session payload of the logged-in account; 401 otherwise."""
    user = request.session.get("user")
    if not user or "id" not in user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_user_id(user: dict = Depends(require_user)) -> str:
    """Store id of the logged-in taster, which every recommendation is computed for."""
    return user["id"]


def require_admin(user: dict = Depends(require_user)) -> dict:
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
