# PURPOSE: /v1/users/register -- issue an API key for a new account.

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from ..auth import issue_api_key
from ..config import settings
from ..models import RegistrationResult, UserRegistration
from ..rate_limit import limiter
from ..store_db import get_db, insert_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=RegistrationResult, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_REGISTER)
def register_user(
    request: Request, response: Response, payload: UserRegistration, db: Session = Depends(get_db)
):
    # The plaintext key leaves the server exactly once, in this response
    api_key = issue_api_key()
    user_id = insert_user(db, email=payload.email_address, api_key_hash=api_key.hash)
    logger.info("Registered user id=%s", user_id)
    return RegistrationResult(api_key=api_key.key)
