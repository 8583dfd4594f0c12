"""
Repository Result

Tagged outcome handed from the repository to the API layer. The payload type
follows the status, so results are built through the factory classmethods.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .user import User, UserUpdate


class UserResultStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_DATA = "INVALID_DATA"
    CONFLICT_ID = "CONFLICT_ID"


Payload = Union[User, UserUpdate, List[User], str, None]


@dataclass(frozen=True)
class UserResult:
    status: UserResultStatus
    value: Payload = None

    @classmethod
    def ok(cls, value: Union[User, UserUpdate, List[User], None] = None) -> "UserResult":
        return cls(UserResultStatus.OK, value)

    @classmethod
    def error(cls, message: str) -> "UserResult":
        return cls(UserResultStatus.ERROR, message)

    @classmethod
    def not_found(cls) -> "UserResult":
        return cls(UserResultStatus.NOT_FOUND)

    @classmethod
    def invalid_data(cls, message: str) -> "UserResult":
        return cls(UserResultStatus.INVALID_DATA, message)

    @classmethod
    def conflict_id(cls, message: str) -> "UserResult":
        return cls(UserResultStatus.CONFLICT_ID, message)

    @property
    def is_ok(self) -> bool:
        return self.status == UserResultStatus.OK
