"""
Dependency injection for FastAPI endpoints.
"""
from typing import Dict, NoReturn, Optional
from fastapi import HTTPException, Header, Request
import structlog

from ..container.container import Container
from ..services.account_service import AccountService
from ..services.exceptions import AccountError

logger = structlog.get_logger()


class AccountHTTPException(HTTPException):
    """HTTPException carrying the core error category as ``error_code``."""
    
    def __init__(self, status_code: int, detail: str, error_code: str):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_account_service(request: Request) -> AccountService:
    return get_container(request).account_service


async def get_authorization(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Raw ``Authorization`` header; validation happens in the request gate."""
    return authorization


def raise_for_account_error(
    exc: AccountError,
    status_map: Dict[str, int],
    fallback_status: int
) -> NoReturn:
    """
    Translate a core error into the route's HTTP status.
    
    Args:
        exc: Error raised by the account service
        status_map: Category to status code for this route
        fallback_status: Status for every category not in ``status_map``
    """
    status_code = status_map.get(exc.category, fallback_status)
    logger.info(
        "Account operation failed",
        error_code=exc.category,
        status_code=status_code
    )
    raise AccountHTTPException(
        status_code=status_code,
        detail=exc.message,
        error_code=exc.category
    ) from exc
