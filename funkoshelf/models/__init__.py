"""Data models for Funko records and wire envelopes."""
from funkoshelf.models.envelope import (
    ErrorKind,
    FunkoBody,
    FunkoPatch,
    Request,
    Response,
)
from funkoshelf.models.funko import Funko, FunkoGenre, FunkoType

__all__ = [
    "ErrorKind",
    "Funko",
    "FunkoBody",
    "FunkoGenre",
    "FunkoPatch",
    "FunkoType",
    "Request",
    "Response",
]
