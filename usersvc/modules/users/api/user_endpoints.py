"""
User Management API Endpoints

REST API endpoints for user CRUD operations. Every handler checks the request
shape, calls the repository and maps the UserResult onto the HTTP response.
"""
import logging
import re
from typing import Dict, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Request, Response
from fastapi import status as http_status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError

from usersvc.modules.users.domain.result import UserResult, UserResultStatus
from usersvc.modules.users.domain.user import INT64_MAX, INT64_MIN, User, UserUpdate
from usersvc.modules.users.repositories.user_repository import UserRepository

logger = logging.getLogger("usersvc.users.api")

router = APIRouter(prefix="/users", tags=["users"])

INVALID_PARAMETERS_MESSAGE = "Invalid parameters."
INVALID_BODY_MESSAGE = "Invalid body."
INVALID_BODY_OR_PARAMETERS_MESSAGE = "Invalid body or parameters."

HTTP_STATUS_BY_RESULT: Dict[UserResultStatus, int] = {
    UserResultStatus.OK: http_status.HTTP_200_OK,
    UserResultStatus.NOT_FOUND: http_status.HTTP_404_NOT_FOUND,
    UserResultStatus.INVALID_DATA: http_status.HTTP_400_BAD_REQUEST,
    UserResultStatus.ERROR: http_status.HTTP_500_INTERNAL_SERVER_ERROR,
    UserResultStatus.CONFLICT_ID: http_status.HTTP_409_CONFLICT,
}

ModelT = TypeVar("ModelT", bound=BaseModel)

USER_ID_PATTERN = re.compile(r"-?[0-9]{1,19}")


def get_user_repository(request: Request) -> UserRepository:
    """FastAPI dependency returning the repository bound to the application."""
    return request.app.state.user_repository


def get_http_status(result_status: UserResultStatus) -> int:
    return HTTP_STATUS_BY_RESULT.get(result_status, http_status.HTTP_200_OK)


def parse_user_id(raw: Optional[str]) -> Optional[int]:
    """Parse the id path parameter; None unless it is an ASCII integer within int64."""
    if not raw or not USER_ID_PATTERN.fullmatch(raw):
        return None
    user_id = int(raw)
    if not INT64_MIN <= user_id <= INT64_MAX:
        return None
    return user_id


def parse_body(body: bytes, model: Type[ModelT]) -> Optional[ModelT]:
    """Deserialize a JSON body into model; None when it does not fit."""
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        logger.debug(f"[user_endpoints.parse_body] rejected body: {e.error_count()} error(s)")
        return None


def bad_request(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=http_status.HTTP_400_BAD_REQUEST)


def build_response(result: UserResult) -> Response:
    """Serialize a repository result: users as JSON, messages as text, nothing as empty."""
    status_code = get_http_status(result.status)
    value = result.value
    if value is None or value == "":
        return Response(status_code=status_code)
    if isinstance(value, str):
        return PlainTextResponse(value, status_code=status_code)
    if isinstance(value, list):
        return JSONResponse([user.to_response() for user in value], status_code=status_code)
    return JSONResponse(value.to_response(), status_code=status_code)


@router.get("")
async def list_users(repository: UserRepository = Depends(get_user_repository)):
    """List all users."""
    logger.debug("[user_endpoints.list_users]")
    result = await repository.get_users()
    return build_response(result)


@router.get("/{user_id}")
async def get_user(user_id: str, repository: UserRepository = Depends(get_user_repository)):
    """Get user details by Id."""
    logger.debug(f"[user_endpoints.get_user] user_id={user_id}")
    parsed_id = parse_user_id(user_id)
    if parsed_id is None:
        return bad_request(INVALID_PARAMETERS_MESSAGE)

    result = await repository.get_user_with_id(parsed_id)
    return build_response(result)


@router.post("")
async def create_user(request: Request, repository: UserRepository = Depends(get_user_repository)):
    """
    Create a new user.

    A body that is present but does not describe a user is passed on as a
    missing user, which the repository reports as invalid data.
    """
    body = await request.body()
    if not body:
        return bad_request(INVALID_BODY_MESSAGE)

    user = parse_body(body, User)
    logger.debug(f"[user_endpoints.create_user] user_id={user.Id if user else None}")
    result = await repository.create_user(user)
    return build_response(result)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    request: Request,
    repository: UserRepository = Depends(get_user_repository)
):
    """Set the supplied fields on an existing user."""
    logger.debug(f"[user_endpoints.update_user] user_id={user_id}")
    body = await request.body()
    parsed_id = parse_user_id(user_id)
    if not body or parsed_id is None:
        return bad_request(INVALID_BODY_OR_PARAMETERS_MESSAGE)

    user = parse_body(body, UserUpdate)
    result = await repository.update_user_with_id(parsed_id, user)
    return build_response(result)


@router.delete("/{user_id}")
async def delete_user(user_id: str, repository: UserRepository = Depends(get_user_repository)):
    """Delete user by Id."""
    logger.debug(f"[user_endpoints.delete_user] user_id={user_id}")
    parsed_id = parse_user_id(user_id)
    if parsed_id is None:
        return bad_request(INVALID_PARAMETERS_MESSAGE)

    result = await repository.delete_user_with_id(parsed_id)
    return build_response(result)
