"""Funko collection CRUD over HTTP, routed through the same dispatcher as the TCP server."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from funkoshelf.api.state import AppState, get_state
from funkoshelf.models.envelope import ErrorKind, FunkoBody, FunkoPatch, Request, Response

router = APIRouter()

_STATUS_BY_ERROR = {
    ErrorKind.INVALID: 400,
    ErrorKind.PARSE_ERROR: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.STORAGE_ERROR: 500,
}


def _run(state: AppState, type_: str, user: str, id_: Optional[int] = None, funko: Optional[dict] = None) -> Response:
    """Dispatch one command; raise HTTPException for any failure."""
    try:
        request = Request(type=type_, user=user, id=id_, funko=funko)
    except ValidationError:
        raise HTTPException(status_code=400, detail=f"Invalid user name: {user}")
    response = state.dispatcher.dispatch(request)
    if not response.success:
        status = _STATUS_BY_ERROR.get(response.error, 400)
        raise HTTPException(status_code=status, detail=response.message)
    return response


def _funkos_to_list(response: Response) -> list:
    return [f.model_dump(mode="json", by_alias=True) for f in response.funkos or []]


@router.get("/{user}")
def list_funkos(user: str, state: AppState = Depends(get_state)):
    """List a user's Funkos, ascending by id."""
    return _funkos_to_list(_run(state, "list", user))


@router.get("/{user}/{funko_id}")
def read_funko(user: str, funko_id: int, state: AppState = Depends(get_state)):
    """Return one Funko."""
    return _funkos_to_list(_run(state, "read", user, funko_id))[0]


@router.post("/{user}", status_code=201)
def add_funko(user: str, body: FunkoBody, state: AppState = Depends(get_state)):
    """Add a Funko to a user's collection. Fails with 409 if the id is taken."""
    response = _run(state, "add", user, funko=body.model_dump(mode="json", by_alias=True))
    return {"message": response.message, "funko": body.model_dump(mode="json", by_alias=True)}


@router.patch("/{user}/{funko_id}")
def update_funko(
    user: str,
    funko_id: int,
    body: FunkoPatch,
    state: AppState = Depends(get_state),
):
    """Update only the fields present in the body; the id never changes."""
    patch = body.model_dump(mode="json", by_alias=True, exclude_unset=True)
    _run(state, "update", user, funko_id, patch)
    return _funkos_to_list(_run(state, "read", user, funko_id))[0]


@router.delete("/{user}/{funko_id}", status_code=204)
def delete_funko(user: str, funko_id: int, state: AppState = Depends(get_state)):
    """Remove a Funko."""
    _run(state, "remove", user, funko_id)
