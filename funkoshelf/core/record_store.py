"""Persist Funko records: one JSON file per record under <data_dir>/<user>/<id>.json."""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from funkoshelf.config import DATA_DIR
from funkoshelf.models.envelope import validate_user
from funkoshelf.models.funko import Funko, FunkoGenre, FunkoType

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Record could not be read or written (I/O failure or corrupt file)."""


def _funko_to_dict(f: Funko) -> dict:
    return {
        "id": f.id,
        "name": f.name,
        "description": f.description,
        "type": f.type.value,
        "genre": f.genre.value,
        "franchise": f.franchise,
        "number": f.number,
        "exclusive": f.exclusive,
        "specialFeatures": f.special_features,
        "marketValue": f.market_value,
    }


def _funko_from_dict(item: dict) -> Funko:
    return Funko(
        id=int(item["id"]),
        name=item["name"],
        description=item["description"],
        type=FunkoType(item["type"]),
        genre=FunkoGenre(item["genre"]),
        franchise=item["franchise"],
        number=int(item["number"]),
        exclusive=bool(item["exclusive"]),
        special_features=item["specialFeatures"],
        market_value=item["marketValue"],
    )


class FunkoStore:
    """Durable per-user Funko collections keyed by (user, id)."""

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        self._data_dir = Path(data_dir) if data_dir is not None else DATA_DIR

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def user_dir(self, user: str) -> Path:
        return self._data_dir / validate_user(user)

    def _path(self, user: str, funko_id: int) -> Path:
        return self.user_dir(user) / f"{int(funko_id)}.json"

    def _encode(self, funko: Funko, p: Path) -> bytes:
        try:
            return json.dumps(_funko_to_dict(funko), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            # UnicodeEncodeError (e.g. lone surrogates) is a ValueError
            raise StoreError(f"could not encode {p}: {e}") from e

    def _write_temp(self, directory: Path, data: bytes) -> Path:
        """Write data to a hidden temp file in directory; `*.json` globs never see it."""
        fd, tmp = tempfile.mkstemp(dir=directory, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
        except BaseException:
            os.unlink(tmp)
            raise
        return Path(tmp)

    def create(self, user: str, funko: Funko) -> bool:
        """Write a new record. Returns False if (user, id) already exists.

        The record file only appears once its content is complete, so a
        failed create leaves nothing behind.
        """
        p = self._path(user, funko.id)
        data = self._encode(funko, p)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._write_temp(p.parent, data)
        except OSError as e:
            raise StoreError(f"could not write {p}: {e}") from e
        try:
            # Exclusive: link fails if the name is taken
            os.link(tmp, p)
        except FileExistsError:
            return False
        except OSError as e:
            raise StoreError(f"could not write {p}: {e}") from e
        finally:
            tmp.unlink(missing_ok=True)
        return True

    def read(self, user: str, funko_id: int) -> Optional[Funko]:
        """Return the record, or None if it does not exist."""
        p = self._path(user, funko_id)
        try:
            text = p.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"could not read {p}: {e}") from e
        try:
            return _funko_from_dict(json.loads(text))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise StoreError(f"corrupt record {p}: {e}") from e

    def update(self, user: str, funko: Funko) -> bool:
        """Overwrite an existing record. Returns False if (user, id) does not exist.

        The new content replaces the old file in one rename; on any failure
        the stored record is unchanged.
        """
        p = self._path(user, funko.id)
        if not p.exists():
            return False
        data = self._encode(funko, p)
        tmp = None
        try:
            tmp = self._write_temp(p.parent, data)
            os.replace(tmp, p)
        except OSError as e:
            if tmp is not None:
                tmp.unlink(missing_ok=True)
            raise StoreError(f"could not write {p}: {e}") from e
        return True

    def delete(self, user: str, funko_id: int) -> bool:
        """Remove a record. Returns True if found and removed."""
        p = self._path(user, funko_id)
        try:
            p.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StoreError(f"could not remove {p}: {e}") from e
        return True

    def list(self, user: str) -> List[Funko]:
        """All records for user, ascending by id. Unreadable files are skipped."""
        d = self.user_dir(user)
        if not d.is_dir():
            return []
        out = []
        for p in d.glob("*.json"):
            try:
                out.append(_funko_from_dict(json.loads(p.read_text(encoding="utf-8"))))
            except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable record %s: %s", p, e)
                continue
        out.sort(key=lambda f: f.id)
        return out
