from __future__ import annotations

from fastapi import Depends, HTTPException, Request


def require_user(request: Request) -> dict:
    """Raise 401 if no merchant is logged in."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(request: Request) -> dict:
    """Raise 401 if not logged in, 403 if not admin."""
    user = require_user(request)
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def require_shop(user: dict = Depends(require_user)) -> str:
    """Return the shop the logged-in merchant acts for."""
    shop = user.get("shop")
    if not shop:
        raise HTTPException(status_code=403, detail="No shop bound to this session")
    return shop
