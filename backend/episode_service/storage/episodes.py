"""MongoDB 剧集存储封装，(animeId, orderToWatch) 唯一性由索引保证。"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from episode_service.config import MONGO_DB_NAME
from episode_service.constants import MIN_ORDER_TO_WATCH

COLLECTION_NAME = "episodes"
UNIQUE_KEY_FIELDS = ("animeId", "orderToWatch")


class SchemaViolation(ValueError):
    """必填字段缺失或取值非法，写入前即被拒绝。"""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class ConstraintViolation(Exception):
    """唯一索引冲突；key_value 为冲突的字段与取值。"""

    def __init__(self, key_value: Mapping[str, Any]) -> None:
        self.key_value = dict(key_value)
        super().__init__(f"duplicate key: {self.key_value}")


def _to_storage_datetime(value: datetime) -> datetime:
    # MongoDB 按 UTC 毫秒精度存储
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def _build_document(data: Mapping[str, Any]) -> dict[str, Any]:
    errors: list[str] = []

    anime_id = data.get("anime_id")
    if not isinstance(anime_id, str) or not anime_id.strip():
        errors.append("animeId is required")

    order = data.get("order_to_watch")
    if order is None:
        errors.append("orderToWatch is required")
    elif isinstance(order, bool) or not isinstance(order, int):
        errors.append("orderToWatch must be an integer")
    elif order < MIN_ORDER_TO_WATCH:
        errors.append(f"orderToWatch must be >= {MIN_ORDER_TO_WATCH}")

    release_date = data.get("release_date")
    if release_date is None:
        errors.append("releaseDate is required")
    elif not isinstance(release_date, datetime):
        errors.append("releaseDate must be a datetime")

    title = data.get("title")
    if title is not None and not isinstance(title, str):
        errors.append("title must be a string")

    if errors:
        raise SchemaViolation(errors)

    document: dict[str, Any] = {
        "orderToWatch": order,
        "releaseDate": _to_storage_datetime(release_date),
        "animeId": anime_id,
    }
    if title is not None and title.strip():
        document["title"] = title.strip()
    return document


class EpisodeStorage:
    """封装剧集集合的写入、分页与计数。"""

    def __init__(self, collection: Collection) -> None:
        self.collection = collection
        self._ensure_indexes()

    @classmethod
    def from_uri(cls, uri: str, database_name: str = MONGO_DB_NAME) -> EpisodeStorage:
        client: MongoClient = MongoClient(uri, tz_aware=True)
        return cls(client[database_name][COLLECTION_NAME])

    def _ensure_indexes(self) -> None:
        self.collection.create_index(
            [(field, ASCENDING) for field in UNIQUE_KEY_FIELDS],
            unique=True,
            name="animeId_orderToWatch_unique",
        )
        self.collection.create_index([("animeId", ASCENDING)], name="animeId")

    @staticmethod
    def _conflicting_key(
        exc: DuplicateKeyError, document: Mapping[str, Any]
    ) -> dict[str, Any]:
        key_value = (exc.details or {}).get("keyValue")
        if key_value:
            return dict(key_value)
        return {field: document[field] for field in UNIQUE_KEY_FIELDS}

    async def create_episode(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """写入一条剧集，返回带 _id 的文档。

        Raises:
            SchemaViolation: 必填字段缺失或非法。
            ConstraintViolation: (animeId, orderToWatch) 已存在。
        """
        document = _build_document(data)
        try:
            result = await asyncio.to_thread(self.collection.insert_one, document)
        except DuplicateKeyError as exc:
            raise ConstraintViolation(self._conflicting_key(exc, document)) from exc
        document["_id"] = result.inserted_id
        return document

    def _find_page(self, anime_id: str, offset: int, limit: int) -> list[dict[str, Any]]:
        cursor = (
            self.collection.find({"animeId": anime_id})
            .sort([("releaseDate", DESCENDING), ("orderToWatch", DESCENDING)])
            .skip(offset)
            .limit(limit)
        )
        return list(cursor)

    async def list_episodes(
        self, *, anime_id: str, offset: int, limit: int
    ) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._find_page, anime_id, offset, limit)

    def _aggregate_counts(self, anime_ids: list[str]) -> dict[str, int]:
        pipeline = [
            {"$match": {"animeId": {"$in": anime_ids}}},
            {"$group": {"_id": "$animeId", "counter": {"$sum": 1}}},
        ]
        counted = {row["_id"]: row["counter"] for row in self.collection.aggregate(pipeline)}
        return {anime_id: counted.get(anime_id, 0) for anime_id in anime_ids}

    async def count_by_anime(self, anime_ids: Iterable[str]) -> dict[str, int]:
        unique_ids = list(dict.fromkeys(anime_ids))
        return await asyncio.to_thread(self._aggregate_counts, unique_ids)
