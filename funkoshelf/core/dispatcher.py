"""Decode a request payload, run the command against the store, build the response."""
import logging
from typing import Callable, Dict

from pydantic import ValidationError

from funkoshelf.core.merge import merge_funko
from funkoshelf.core.record_store import FunkoStore, StoreError
from funkoshelf.models.envelope import (
    ErrorKind,
    FunkoBody,
    FunkoPatch,
    Request,
    Response,
    parse_error_response,
)

logger = logging.getLogger(__name__)


def _validation_summary(e: ValidationError) -> str:
    """One-line summary of pydantic errors, e.g. "user: Field required; id: ..."."""
    parts = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", ())) or "request"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


class Dispatcher:
    """Routes one decoded request to its handler. One command per connection."""

    def __init__(self, store: FunkoStore) -> None:
        self._store = store
        self._handlers: Dict[str, Callable[[Request], Response]] = {
            "add": self._add,
            "update": self._update,
            "remove": self._remove,
            "read": self._read,
            "list": self._list,
        }

    @property
    def store(self) -> FunkoStore:
        return self._store

    def decode(self, payload: bytes) -> Request:
        """Parse raw bytes into a Request. Raises ValueError on anything malformed."""
        try:
            return Request.model_validate_json(payload)
        except ValidationError as e:
            raise ValueError(_validation_summary(e)) from e

    def dispatch_payload(self, payload: bytes) -> Response:
        """Full request bytes in, response out. Never raises for bad input."""
        try:
            request = self.decode(payload)
        except ValueError as e:
            logger.warning("Could not parse request: %s", e)
            return parse_error_response(str(e))
        return self.dispatch(request)

    def dispatch(self, request: Request) -> Response:
        logger.info("Processing command: %s for user %s", request.type, request.user)
        handler = self._handlers.get(request.type)
        if handler is None:
            return Response.failure(
                request.type,
                "Error: Unknown command type received.",
                ErrorKind.UNKNOWN_COMMAND,
            )
        try:
            return handler(request)
        except StoreError as e:
            logger.error("Storage error on %s for %s: %s", request.type, request.user, e)
            return Response.failure(
                request.type,
                f"Error: Storage error while processing {request.type} request for {request.user}.",
                ErrorKind.STORAGE_ERROR,
                funkos=[] if request.type in ("read", "list") else None,
            )

    def _add(self, request: Request) -> Response:
        if request.funko is None:
            return Response.failure(
                "add", "Error: Funko data missing in add request.", ErrorKind.INVALID
            )
        try:
            body = FunkoBody.model_validate(request.funko)
        except ValidationError as e:
            return Response.failure(
                "add",
                f"Error: Invalid Funko data in add request: {_validation_summary(e)}",
                ErrorKind.INVALID,
            )
        if not self._store.create(request.user, body.to_funko()):
            return Response.failure(
                "add",
                f"Error: Funko with ID {body.id} already exists for {request.user}.",
                ErrorKind.ALREADY_EXISTS,
            )
        return Response(
            type="add",
            success=True,
            message=f"Funko with ID {body.id} added to {request.user} collection.",
        )

    def _update(self, request: Request) -> Response:
        if request.id is None:
            return Response.failure(
                "update", "Error: Funko ID missing in update request.", ErrorKind.INVALID
            )
        if request.funko is None:
            return Response.failure(
                "update", "Error: Funko update data missing in update request.", ErrorKind.INVALID
            )
        try:
            patch = FunkoPatch.model_validate(request.funko)
        except ValidationError as e:
            return Response.failure(
                "update",
                f"Error: Invalid Funko data in update request: {_validation_summary(e)}",
                ErrorKind.INVALID,
            )

        existing = self._store.read(request.user, request.id)
        not_found = Response.failure(
            "update",
            f"Error: Funko with ID {request.id} not found for user {request.user}. Cannot update.",
            ErrorKind.NOT_FOUND,
        )
        if existing is None:
            return not_found
        merged = merge_funko(existing, patch, request.id)
        # Record removed between read and write
        if not self._store.update(request.user, merged):
            return not_found
        return Response(
            type="update",
            success=True,
            message=f"Funko with ID {request.id} updated for {request.user}.",
        )

    def _remove(self, request: Request) -> Response:
        if request.id is None:
            return Response.failure(
                "remove", "Error: Funko ID missing in remove request.", ErrorKind.INVALID
            )
        if not self._store.delete(request.user, request.id):
            return Response.failure(
                "remove",
                f"Error: Funko with ID {request.id} not found for {request.user}.",
                ErrorKind.NOT_FOUND,
            )
        return Response(
            type="remove",
            success=True,
            message=f"Funko with ID {request.id} removed from {request.user} collection.",
        )

    def _read(self, request: Request) -> Response:
        if request.id is None:
            return Response.failure(
                "read", "Error: Funko ID missing in read request.", ErrorKind.INVALID, funkos=[]
            )
        funko = self._store.read(request.user, request.id)
        if funko is None:
            return Response.failure(
                "read",
                f"Error: Funko with ID {request.id} not found for {request.user}.",
                ErrorKind.NOT_FOUND,
                funkos=[],
            )
        return Response(
            type="read",
            success=True,
            funkos=[FunkoBody.from_funko(funko)],
            message=f"Funko with ID {request.id} found.",
        )

    def _list(self, request: Request) -> Response:
        funkos = self._store.list(request.user)
        if funkos:
            message = f"{len(funkos)} Funkos listed for {request.user}."
        else:
            message = f"No Funkos found for {request.user}."
        return Response(
            type="list",
            success=True,
            funkos=[FunkoBody.from_funko(f) for f in funkos],
            message=message,
        )
