"""
User Repository

Handles all document store operations for the users collection and turns
their outcomes into UserResult values.
"""
import logging
from typing import Any, Optional

from bson.errors import InvalidDocument
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from usersvc.modules.database import (
    USERS_COLLECTION,
    DatabaseOptions,
    connect_to_db,
    disconnect_from_db,
)
from usersvc.modules.users.domain.result import UserResult, UserResultStatus
from usersvc.modules.users.domain.user import User, UserUpdate

logger = logging.getLogger("usersvc.users.repository")

DATABASE_ERROR_MESSAGE = "Error fetching users from database."
INVALID_DATA_MESSAGE = "Invalid body data."
CONFLICT_ID_MESSAGE = "A user with same Id already exists."

# Driver failures plus BSON encoding failures (e.g. integers beyond int64).
STORE_ERRORS = (PyMongoError, InvalidDocument, OverflowError)


class UserRepository:
    """Repository for user data access."""

    def __init__(self, collection: Any = None):
        self.users = collection
        self._client = None

    @property
    def is_connected(self) -> bool:
        return self.users is not None

    async def connect_with_options(self, options: Optional[DatabaseOptions] = None):
        """Open a client and bind the users collection of options.db."""
        options = options or DatabaseOptions()
        try:
            self._client = connect_to_db(options)
            self.users = self._client[options.db][USERS_COLLECTION]
        except STORE_ERRORS as e:
            logger.error(f"[UserRepository.connect_with_options] ERROR: {e}", exc_info=True)
            self._client = None
            self.users = None

    async def disconnect(self):
        if self._client is None:
            return
        await disconnect_from_db(self._client)
        self._client = None
        self.users = None

    async def get_users(self) -> UserResult:
        """Get all users."""
        if not self.is_connected:
            return UserResult.error(DATABASE_ERROR_MESSAGE)

        try:
            documents = await self.users.find({}).to_list(length=None)
            users = [User.from_document(document) for document in documents]
        except STORE_ERRORS as e:
            logger.error(f"[UserRepository.get_users] ERROR: {e}", exc_info=True)
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        except ValidationError as e:
            logger.error(f"[UserRepository.get_users] malformed user document: {e}")
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        return UserResult.ok(users)

    async def get_user_with_id(self, user_id: int) -> UserResult:
        """Get user by Id."""
        if not self.is_connected:
            return UserResult.error(DATABASE_ERROR_MESSAGE)

        try:
            document = await self.users.find_one({"Id": user_id})
        except STORE_ERRORS as e:
            logger.error(f"[UserRepository.get_user_with_id] ERROR: {e}", exc_info=True)
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        if not document:
            return UserResult.not_found()
        try:
            user = User.from_document(document)
        except ValidationError as e:
            logger.error(f"[UserRepository.get_user_with_id] malformed user document: {e}")
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        return UserResult.ok(user)

    async def create_user(self, user: Optional[User]) -> UserResult:
        """
        Insert a new user unless one with the same Id exists.

        The existence check and the insert are separate operations, so two
        concurrent creates with the same Id can both succeed.
        """
        if not self.is_connected:
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        if user is None:
            return UserResult.invalid_data(INVALID_DATA_MESSAGE)

        existing = await self.get_user_with_id(user.Id)
        if existing.is_ok:
            logger.debug(f"[UserRepository.create_user] Id {user.Id} already exists")
            return UserResult.conflict_id(CONFLICT_ID_MESSAGE)
        if existing.status != UserResultStatus.NOT_FOUND:
            return existing

        try:
            inserted = await self.users.insert_one(user.to_document())
        except STORE_ERRORS as e:
            logger.error(f"[UserRepository.create_user] ERROR: {e}", exc_info=True)
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        if not inserted.acknowledged:
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        return UserResult.ok(user)

    async def update_user_with_id(self, user_id: int, user: Optional[UserUpdate]) -> UserResult:
        """Set the supplied fields on the user with the given Id."""
        if not self.is_connected:
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        if user is None:
            return UserResult.invalid_data(INVALID_DATA_MESSAGE)

        fields = user.to_document()
        if not fields:
            return UserResult.invalid_data(INVALID_DATA_MESSAGE)

        try:
            updated = await self.users.update_one({"Id": user_id}, {"$set": fields})
        except STORE_ERRORS as e:
            logger.error(f"[UserRepository.update_user_with_id] ERROR: {e}", exc_info=True)
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        if updated.matched_count:
            return UserResult.ok(user)
        return UserResult.not_found()

    async def delete_user_with_id(self, user_id: int) -> UserResult:
        """Delete user by Id."""
        if not self.is_connected:
            return UserResult.error(DATABASE_ERROR_MESSAGE)

        try:
            deleted = await self.users.delete_one({"Id": user_id})
        except STORE_ERRORS as e:
            logger.error(f"[UserRepository.delete_user_with_id] ERROR: {e}", exc_info=True)
            return UserResult.error(DATABASE_ERROR_MESSAGE)
        if deleted.deleted_count:
            return UserResult.ok()
        return UserResult.not_found()
