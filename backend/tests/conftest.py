from __future__ import annotations

from uuid import uuid4

import mongomock
import pytest

from episode_service.models import AnimeInfo
from episode_service.storage.episodes import COLLECTION_NAME, EpisodeStorage


@pytest.fixture()
def anime_factory():
    def build(anime_id: str | None = None, release_year: int = 2010) -> AnimeInfo:
        return AnimeInfo(
            id=anime_id or str(uuid4()),
            title="Test Anime",
            score=10,
            release_year=release_year,
            author="Author",
        )

    return build


@pytest.fixture()
def mongo_collection():
    client = mongomock.MongoClient()
    collection = client[f"episodes_test_{uuid4().hex}"][COLLECTION_NAME]
    yield collection
    client.close()


@pytest.fixture()
def episode_storage(mongo_collection) -> EpisodeStorage:
    return EpisodeStorage(collection=mongo_collection)
