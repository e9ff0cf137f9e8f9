# controller/controller_dependencies.py
import logging
import secrets
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from config.settings import settings
from repository.record_store import RecordStore
from service.record_service import RecordService
from util.constants import ADMIN_USERNAME, AUTH_REALM

logger = logging.getLogger(__name__)

_basic = HTTPBasic(realm=AUTH_REALM)


def get_record_store(request: Request) -> RecordStore:
    # Opened in main.lifespan and attached to app.state
    return request.app.state.store


def get_record_service(
    store: RecordStore = Depends(get_record_store),
) -> RecordService:
    return RecordService(store)


def require_admin(credentials: HTTPBasicCredentials = Depends(_basic)) -> str:
    """HTTP basic auth against the single admin account."""
    user_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"), ADMIN_USERNAME.encode("utf-8")
    )
    pass_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        settings.ADMIN_PASSWORD.encode("utf-8"),
    )
    if not (user_ok and pass_ok):
        logger.warning("auth.rejected user=%s", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": f'Basic realm="{AUTH_REALM}"'},
        )
    return credentials.username
