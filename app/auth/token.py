# app/auth/token.py
from jose import jwt, JWTError
from fastapi import Header, HTTPException
import os

SECRET_KEY = os.getenv("JWT_SECRET_KEY")  # Shared secret with the identity provider
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")


def decode_token(token: str) -> dict:
    if not SECRET_KEY:
        raise HTTPException(status_code=401, detail="Authentication is not configured")
    try:
        # Checks expiration and signature
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or Expired Token")


def verify_token(authorization: str = Header(None)) -> dict:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    return decode_token(authorization.split(" ", 1)[1])
