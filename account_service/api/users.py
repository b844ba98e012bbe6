"""
User account endpoints.
Routing glue only: bodies are parsed into typed calls on the account
service and its errors are mapped to this API's status codes.
"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, Response, status
import structlog

from ..schemas.user_schemas import (
    AuthenticationRequest,
    DeleteAccountRequest,
    ErrorResponse,
    ProfileResponse,
    RegistrationRequest,
    TokenResponse,
)
from ..services.account_service import AccountService
from ..services.exceptions import AccountError
from .deps import get_account_service, get_authorization, raise_for_account_error

logger = structlog.get_logger()
router = APIRouter(tags=["users"])


@router.get(
    "/all",
    response_model=List[Dict[str, Any]],
    responses={503: {"model": ErrorResponse}}
)
async def list_users(account_service: AccountService = Depends(get_account_service)):
    """
    List every user.
    
    Unauthenticated, as in earlier releases, but credentials are never part
    of the returned documents.
    """
    try:
        return await account_service.list_users()
    except AccountError as e:
        raise_for_account_error(e, {}, status.HTTP_503_SERVICE_UNAVAILABLE)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse}
    }
)
async def register(
    registration_data: RegistrationRequest,
    account_service: AccountService = Depends(get_account_service)
):
    """
    Register a new user account.
    
    - **name**: Display name
    - **username**: Must be unique
    - **password**: Stored only as a bcrypt hash
    
    Any other keys are stored on the profile.
    """
    try:
        await account_service.register(
            username=registration_data.username,
            password=registration_data.password,
            name=registration_data.name,
            profile_fields=registration_data.profile_fields
        )
    except AccountError as e:
        raise_for_account_error(
            e,
            {"CONFLICT": status.HTTP_409_CONFLICT, "INVALID": status.HTTP_400_BAD_REQUEST},
            status.HTTP_404_NOT_FOUND
        )
    
    return Response(status_code=status.HTTP_201_CREATED)


@router.post(
    "/auth",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse}, 503: {"model": ErrorResponse}}
)
async def authenticate(
    credentials: AuthenticationRequest,
    account_service: AccountService = Depends(get_account_service)
):
    """Exchange username and password for a bearer token."""
    try:
        token = await account_service.authenticate(credentials.username, credentials.password)
    except AccountError as e:
        raise_for_account_error(
            e,
            {"UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED},
            status.HTTP_503_SERVICE_UNAVAILABLE
        )
    
    return TokenResponse(token=token)


@router.get(
    "",
    response_model=ProfileResponse,
    responses={400: {"model": ErrorResponse}}
)
async def get_profile(
    authorization: Optional[str] = Depends(get_authorization),
    account_service: AccountService = Depends(get_account_service)
):
    """Read the caller's name and username."""
    try:
        profile = await account_service.get_profile(authorization)
    except AccountError as e:
        raise_for_account_error(e, {}, status.HTTP_400_BAD_REQUEST)
    
    return ProfileResponse(**profile)


@router.patch(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}}
)
async def update_profile(
    patch: Dict[str, Any] = Body(...),
    authorization: Optional[str] = Depends(get_authorization),
    account_service: AccountService = Depends(get_account_service)
):
    """
    Update the caller's profile.
    
    Send both ``oldPassword`` and ``password`` to change the password; any
    other fields in that request are ignored.
    """
    try:
        await account_service.update_profile(authorization, patch)
    except AccountError as e:
        raise_for_account_error(
            e,
            {"UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED},
            status.HTTP_400_BAD_REQUEST
        )
    
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
async def delete_account(
    body: DeleteAccountRequest,
    authorization: Optional[str] = Depends(get_authorization),
    account_service: AccountService = Depends(get_account_service)
):
    """Delete the caller's account; requires the current password."""
    try:
        await account_service.delete(authorization, body.password)
    except AccountError as e:
        raise_for_account_error(
            e,
            {"UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED},
            status.HTTP_404_NOT_FOUND
        )
    
    return Response(status_code=status.HTTP_204_NO_CONTENT)
