"""剧集业务编排：校验、写入、唯一冲突翻译与批量计数。"""

from __future__ import annotations

import asyncio
from typing import List, Sequence

from episode_service.constants import DUPLICATE_FIELD
from episode_service.logic.episode_validator import EpisodeValidator
from episode_service.models import (
    DuplicateFailure,
    EpisodeCreate,
    EpisodeInfo,
    EpisodeListQuery,
    ValidationFailure,
    project_episode,
)
from episode_service.storage.episodes import ConstraintViolation
from episode_service.storage.ports import EpisodeStoragePort


class EpisodeWorkflow:
    """剧集的业务 orchestrator。

    业务失败以 ValidationFailure / DuplicateFailure 返回，
    其余异常（存储故障等）原样向上抛出。
    """

    def __init__(self, storage: EpisodeStoragePort, validator: EpisodeValidator):
        self.storage = storage
        self.validator = validator

    async def create(
        self, episode: EpisodeCreate
    ) -> EpisodeInfo | ValidationFailure | DuplicateFailure:
        failure = await self.validator.validate_for_create(episode)
        if failure is not None:
            return failure

        # 不做先查后写，唯一性以存储层索引为准
        try:
            record = await self.storage.create_episode(
                episode.model_dump(exclude_none=True)
            )
        except ConstraintViolation as exc:
            return DuplicateFailure(
                errors=[
                    DUPLICATE_FIELD.format(field=field, value=value)
                    for field, value in exc.key_value.items()
                ]
            )
        return project_episode(record)

    async def list_in_anime(
        self, query: EpisodeListQuery
    ) -> List[EpisodeInfo] | ValidationFailure:
        anime = await self.validator.require_anime(query.anime_id)
        if isinstance(anime, ValidationFailure):
            return anime

        records = await self.storage.list_episodes(
            anime_id=query.anime_id, offset=query.from_, limit=query.size
        )
        return [project_episode(record) for record in records]

    async def count_for_many(
        self, anime_ids: Sequence[str]
    ) -> dict[str, int] | ValidationFailure:
        """全部 id 并发校验后汇总失败；任一不存在则整批拒绝。"""
        unique_ids = list(dict.fromkeys(anime_ids))
        checks = await asyncio.gather(
            *(self.validator.require_anime(anime_id) for anime_id in unique_ids),
            return_exceptions=True,
        )
        # 等全部查询结束后再抛出第一个意外异常
        for check in checks:
            if isinstance(check, BaseException):
                raise check
        messages = [
            message
            for check in checks
            if isinstance(check, ValidationFailure)
            for message in check.errors
        ]
        if messages:
            return ValidationFailure(errors=messages)
        return await self.storage.count_by_anime(unique_ids)
