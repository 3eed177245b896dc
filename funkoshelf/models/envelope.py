"""Wire envelopes exchanged over one connection, and the Funko payload shapes they carry."""
import re
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from funkoshelf.models.funko import Funko, FunkoGenre, FunkoType

COMMANDS = ("add", "update", "remove", "read", "list")

# User names become directory names in the record store
_USER_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def validate_user(user: str) -> str:
    """Return user unchanged, or raise ValueError if it is not a safe collection name."""
    if not _USER_RE.match(user) or user in (".", ".."):
        raise ValueError(f"invalid user name: {user!r}")
    return user


class ErrorKind(str, Enum):
    """Why a response failed. Kept in-process only; never serialized."""
    PARSE_ERROR = "parse_error"
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    STORAGE_ERROR = "storage_error"
    UNKNOWN_COMMAND = "unknown_command"
    TIMEOUT = "timeout"
    TOO_LARGE = "too_large"


class FunkoBody(BaseModel):
    """Full Funko payload: add requests and the records carried in responses."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    description: str
    type: FunkoType
    genre: FunkoGenre
    franchise: str
    number: int
    exclusive: bool
    special_features: str = Field(alias="specialFeatures")
    market_value: float = Field(alias="marketValue")

    @classmethod
    def from_funko(cls, funko: Funko) -> "FunkoBody":
        return cls.model_validate(asdict(funko))

    def to_funko(self) -> Funko:
        return Funko(**self.model_dump())


class FunkoPatch(BaseModel):
    """Partial Funko payload for update requests. Every field is optional."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[FunkoType] = None
    genre: Optional[FunkoGenre] = None
    franchise: Optional[str] = None
    number: Optional[int] = None
    exclusive: Optional[bool] = None
    special_features: Optional[str] = Field(default=None, alias="specialFeatures")
    market_value: Optional[float] = Field(default=None, alias="marketValue")

    def changes(self) -> Dict[str, Any]:
        """Fields the client explicitly set to a value, keyed by Funko attribute.

        `id` is never included; null counts as not set.
        """
        return {
            k: v
            for k, v in self.model_dump(exclude_unset=True).items()
            if k != "id" and v is not None
        }


class Request(BaseModel):
    """Request envelope: one command for one user's collection.

    `funko` is kept as a raw mapping here; the dispatcher validates it as a
    FunkoBody (add) or FunkoPatch (update).
    """
    type: str
    user: str
    id: Optional[int] = None
    funko: Optional[Dict[str, Any]] = None

    @field_validator("user")
    @classmethod
    def _check_user(cls, v: str) -> str:
        return validate_user(v)

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(exclude_none=True).encode("utf-8")


class Response(BaseModel):
    """Response envelope: exactly one outcome per request."""
    type: str
    success: bool
    funkos: Optional[List[FunkoBody]] = None
    message: Optional[str] = None
    error: Optional[ErrorKind] = Field(default=None, exclude=True)

    @classmethod
    def failure(
        cls,
        type_: str,
        message: str,
        error: ErrorKind,
        funkos: Optional[List[FunkoBody]] = None,
    ) -> "Response":
        return cls(type=type_, success=False, message=message, error=error, funkos=funkos)

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


def parse_error_response(detail: str) -> Response:
    """Failure for a payload that is not a valid envelope. The echoed type is always "add"."""
    return Response.failure(
        "add",
        f"Error: Parse error processing request: {detail}",
        ErrorKind.PARSE_ERROR,
    )
