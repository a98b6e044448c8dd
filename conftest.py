from datetime import datetime, timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import MAPS, PLAYERS, ROUNDS
from main import create_app


# ------------------------
# Fixtures
# ------------------------
@pytest.fixture
def db():
    return mongomock.MongoClient()["geoguessr"]


@pytest.fixture
def app(db):
    return create_app(db)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_map(db):
    def _make(name="World", category="Countries"):
        now = datetime(2024, 1, 1)
        return db[MAPS].insert_one(
            {"name": name, "category": category, "createdAt": now, "updatedAt": now}
        ).inserted_id

    return _make


@pytest.fixture
def make_player(db):
    def _make(name="alice"):
        now = datetime(2024, 1, 1)
        return db[PLAYERS].insert_one(
            {"name": name, "createdAt": now, "updatedAt": now}
        ).inserted_id

    return _make


@pytest.fixture
def make_round(db):
    def _make(map_id, player_ids, seconds=60, score=1000):
        start = datetime(2024, 1, 1, 12, 0, 0)
        return db[ROUNDS].insert_one(
            {
                "mapId": map_id,
                "answer": "Paris",
                "latitude": 48.85,
                "longitude": 2.35,
                "streetView": "https://maps.google.com/sv",
                "attempt": 1,
                "round": 1,
                "players": list(player_ids),
                "startTime": start,
                "endTime": start + timedelta(seconds=seconds),
                "score": score,
                "createdAt": start,
                "updatedAt": start,
            }
        ).inserted_id

    return _make
