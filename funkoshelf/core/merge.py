"""Overlay a partial update onto a stored Funko."""
from dataclasses import replace

from funkoshelf.models.envelope import FunkoPatch
from funkoshelf.models.funko import Funko


def merge_funko(existing: Funko, patch: FunkoPatch, funko_id: int) -> Funko:
    """Return a new Funko: patch fields override, absent fields are kept from existing.

    The id is always funko_id (the request target), whatever the patch says.
    existing is not modified.
    """
    return replace(existing, **patch.changes(), id=funko_id)
