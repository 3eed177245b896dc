"""
Pytest configuration and shared fixtures.

Provides:
- A Funko store rooted in a per-test temporary directory
- A dispatcher bound to that store
- Sample records and their wire payloads
"""

import logging

import pytest

from funkoshelf.core.dispatcher import Dispatcher
from funkoshelf.core.record_store import FunkoStore
from funkoshelf.models.funko import Funko, FunkoGenre, FunkoType

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture
def store(tmp_path):
    """Empty store under tmp_path/data"""
    return FunkoStore(tmp_path / "data")


@pytest.fixture
def dispatcher(store):
    return Dispatcher(store)


@pytest.fixture
def spider_man():
    return Funko(
        id=1,
        name="Spider-Man",
        description="A Spider-Man Funko Pop",
        type=FunkoType.POP,
        genre=FunkoGenre.MOVIES_TV,
        franchise="Marvel",
        number=123,
        exclusive=True,
        special_features="Glow in the dark",
        market_value=29.99,
    )


@pytest.fixture
def spider_man_payload():
    """spider_man as it travels on the wire"""
    return {
        "id": 1,
        "name": "Spider-Man",
        "description": "A Spider-Man Funko Pop",
        "type": "Pop!",
        "genre": "Películas y TV",
        "franchise": "Marvel",
        "number": 123,
        "exclusive": True,
        "specialFeatures": "Glow in the dark",
        "marketValue": 29.99,
    }


@pytest.fixture
def make_payload(spider_man_payload):
    """Factory: spider_man payload with overrides, e.g. make_payload(id=5)"""
    def _make(**overrides):
        payload = dict(spider_man_payload)
        payload.update(overrides)
        return payload
    return _make
