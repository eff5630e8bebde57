"""
Client-bound request check

A request is accepted when its bearer token names, in `cid`, the sha256 of
the Ed25519 key in X-Client-Public-Key, and X-Client-Signature signs
"<X-Client-Timestamp>:<path>" with that key within the allowed clock skew.
"""

import hashlib
import os
import time
from fastapi import Header, HTTPException, Request, Depends
from nacl.signing import VerifyKey
from nacl.exceptions import BadSignatureError

from app.auth.token import verify_token

TIMESTAMP_TOLERANCE_SECONDS = int(os.getenv("CLIENT_TIMESTAMP_TOLERANCE_SECONDS", "60"))


def client_id_for(public_key_bytes: bytes) -> str:
    """Client id a token must carry in its `cid` claim for this key"""
    return hashlib.sha256(public_key_bytes).hexdigest()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


def check_timestamp(raw_timestamp: str, now: int) -> None:
    try:
        sent_at = int(raw_timestamp)
    except ValueError:
        raise _unauthorized("Invalid timestamp")
    if abs(now - sent_at) > TIMESTAMP_TOLERANCE_SECONDS:
        raise _unauthorized("Stale request")


def load_client_key(public_key_hex: str) -> VerifyKey:
    try:
        return VerifyKey(bytes.fromhex(public_key_hex))
    except Exception:
        raise _unauthorized("Invalid client public key")


def check_token_binding(token_payload: dict, verify_key: VerifyKey) -> None:
    bound_client_id = token_payload.get("cid")
    if not bound_client_id:
        raise _unauthorized("Token not client-bound")
    if bound_client_id != client_id_for(verify_key.encode()):
        raise _unauthorized("Client mismatch")


def check_signature(verify_key: VerifyKey, raw_timestamp: str, path: str, signature_hex: str) -> None:
    message = f"{raw_timestamp}:{path}".encode()
    try:
        verify_key.verify(message, bytes.fromhex(signature_hex))
    except (BadSignatureError, ValueError):
        raise _unauthorized("Invalid client signature")


def verify_client_bound_request(
    request: Request,
    token_payload: dict = Depends(verify_token),
    x_client_public_key: str = Header(...),
    x_client_signature: str = Header(...),
    x_client_timestamp: str = Header(...)
) -> dict:
    """Dependency: token payload of a request signed by the client the token is bound to"""
    check_timestamp(x_client_timestamp, int(time.time()))
    verify_key = load_client_key(x_client_public_key)
    check_token_binding(token_payload, verify_key)
    check_signature(verify_key, x_client_timestamp, request.url.path, x_client_signature)
    return token_payload
