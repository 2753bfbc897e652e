"""剧集服务的领域模型：请求 DTO、公开视图与业务失败结果。"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Annotated, Any, Iterable, List, Mapping, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictStr, field_validator

from episode_service.config import MAX_PAGE_SIZE, MAX_SIZE_ID_LIST
from episode_service.constants import (
    DEFAULT_PAGE_FROM,
    DEFAULT_PAGE_SIZE,
    MIN_ORDER_TO_WATCH,
)

_REQUEST_LOCATIONS = {"body", "query", "path", "header"}
_UUID4_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)


def _check_uuid4(value: str) -> str:
    # 仅接受带连字符的标准写法，原样保留调用方的大小写
    if not _UUID4_PATTERN.fullmatch(value):
        raise ValueError("must be a UUID v4")
    return value


AnimeId = Annotated[StrictStr, AfterValidator(_check_uuid4)]


def as_utc(value: datetime) -> datetime:
    """无时区的时间按 UTC 处理，其余统一换算到 UTC。"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class AnimeInfo(BaseModel):
    """外部动画服务返回的元数据，只读。"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    score: Optional[float] = None
    release_year: int = Field(..., alias="releaseYear")
    author: Optional[str] = None


class EpisodeCreate(BaseModel):
    """创建剧集的请求体。"""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    order_to_watch: int = Field(
        ..., alias="orderToWatch", ge=MIN_ORDER_TO_WATCH, strict=True
    )
    release_date: datetime = Field(..., alias="releaseDate")
    anime_id: AnimeId = Field(..., alias="animeId")

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("release_date")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class EpisodeInfo(BaseModel):
    """对外暴露的剧集视图。"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Optional[str] = None
    order_to_watch: int = Field(..., alias="orderToWatch")
    release_date: str = Field(..., alias="releaseDate")
    anime_id: str = Field(..., alias="animeId")


class EpisodeListQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    anime_id: AnimeId = Field(..., alias="animeId")
    from_: int = Field(DEFAULT_PAGE_FROM, alias="from", ge=0)
    size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


class AnimeIdList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    anime_ids: List[AnimeId] = Field(
        ..., alias="animeIds", min_length=1, max_length=MAX_SIZE_ID_LIST
    )


class ValidationFailure(BaseModel):
    """业务规则校验失败，调用方修正输入即可恢复。"""

    errors: List[str] = Field(..., min_length=1)


class DuplicateFailure(BaseModel):
    """写入时触发唯一约束冲突。"""

    errors: List[str] = Field(..., min_length=1)


def project_episode(record: Mapping[str, Any]) -> EpisodeInfo:
    """存储文档 -> 公开视图：_id 改名为 id，时间序列化为 UTC 字符串。"""
    return EpisodeInfo(
        id=str(record["_id"]),
        title=record.get("title"),
        order_to_watch=record["orderToWatch"],
        release_date=format_timestamp(record["releaseDate"]),
        anime_id=record["animeId"],
    )


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> List[str]:
    """把 pydantic 错误列表压平成 "<field>: <message>" 形式。"""
    messages: List[str] = []
    for error in errors:
        loc = [
            str(part)
            for part in error.get("loc", ())
            if part not in _REQUEST_LOCATIONS
        ]
        field = ".".join(loc)
        message = error.get("msg", "invalid value")
        messages.append(f"{field}: {message}" if field else message)
    return messages
