# PURPOSE: API-key authentication.
# - Clients send the plaintext key in the X-Api-Key header on every task endpoint.
# - Only the SHA-256 digest of the key is stored; lookups compare digests.

import hashlib
import secrets
import string
from dataclasses import dataclass
from typing import Mapping

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .api.errors import DEFAULT_API_KEY_HEADER, InvalidApiKey, MissingApiKey, UserNotFound
from .store_db import get_db, get_user_by_key

API_KEY_LENGTH = 30
API_KEY_ALPHABET = string.ascii_letters + string.digits


@dataclass(frozen=True)
class ApiKey:
    """A freshly issued key: the plaintext goes to the client once, the hash to the DB."""

    key: str
    hash: str


# --- Key helpers ---

def generate_api_key(length: int = API_KEY_LENGTH) -> str:
    """Return a random alphanumeric API key."""
    return "".join(secrets.choice(API_KEY_ALPHABET) for _ in range(length))


def hash_api_key(api_key: str) -> str:
    """Return the SHA-256 hex digest for the given plaintext key."""
    if not isinstance(api_key, str):
        raise TypeError("api_key must be a string")
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


def issue_api_key() -> ApiKey:
    key = generate_api_key()
    return ApiKey(key=key, hash=hash_api_key(key))


# --- Authentication gate ---

def authenticate(
    headers: Mapping[str, str],
    db: Session,
    header_name: str = DEFAULT_API_KEY_HEADER,
) -> int:
    """
    Resolve the request headers to the id of the user owning the API key.
    - Missing or blank header -> MissingApiKey
    - Key that matches no user -> InvalidApiKey
    """
    raw_key = headers.get(header_name)
    if raw_key is None or not raw_key.strip():
        raise MissingApiKey(header_name)

    try:
        user = get_user_by_key(db, hash_api_key(raw_key.strip()))
    except UserNotFound:
        raise InvalidApiKey(header_name) from None
    return user.id


def get_current_user_id(request: Request, db: Session = Depends(get_db)) -> int:
    """FastAPI dependency: run the authentication gate before a protected handler."""
    header_name = request.app.state.context.settings.API_KEY_HEADER
    return authenticate(request.headers, db, header_name=header_name)
