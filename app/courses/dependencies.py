from fastapi import Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from app.auth.client_bound_guard import verify_client_bound_request

def get_db_instance():
    """Get database from main module"""
    from app.main import db
    return db

# ==================== DEPENDENCY FUNCTIONS ====================

async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return get_db_instance()

async def get_current_user_id(user: dict = Depends(verify_client_bound_request)) -> int:
    """
    Extract the site user id from the authenticated request
    The token's `sub` claim carries the numeric user id
    """
    try:
        return int(user.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token: missing user id")
