"""外部动画服务的查询封装，远程故障时回退到静态兜底数据."""
from __future__ import annotations

import asyncio
import logging
from typing import Mapping

import httpx

from episode_service.config import ANIME_API_TIMEOUT_SECONDS, require_anime_api_url
from episode_service.models import AnimeInfo
from episode_service.services.fallback_anime import FALLBACK_ANIME

logger = logging.getLogger(__name__)


class AnimeResolver:
    """按 id 查询动画元数据；404 视为确定不存在，其余故障走兜底。"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        fallback: Mapping[str, AnimeInfo] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or require_anime_api_url()).rstrip("/")
        self.timeout_seconds = (
            ANIME_API_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        )
        self.fallback = FALLBACK_ANIME if fallback is None else fallback
        self.transport = transport

    async def _fetch(self, anime_id: str) -> AnimeInfo | None:
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            transport=self.transport,
        ) as client:
            response = await client.get(f"{self.base_url}/{anime_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return AnimeInfo.model_validate(response.json())

    async def resolve(self, anime_id: str) -> AnimeInfo | None:
        """返回动画元数据，不存在时返回 None；远程异常不会向上抛出."""
        try:
            # 整体超时上限，慢速响应体也不能拖过 timeout_seconds
            return await asyncio.wait_for(self._fetch(anime_id), self.timeout_seconds)
        except (httpx.HTTPError, ValueError, asyncio.TimeoutError) as exc:
            # JSON 解析错误与 pydantic ValidationError 都是 ValueError
            logger.warning(
                "anime api unavailable for %s, using fallback data: %s", anime_id, exc
            )
            return self.fallback.get(anime_id)
