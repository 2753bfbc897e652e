"""剧集创建前的业务规则校验：动画存在性与上映时间区间。"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Protocol

from episode_service.config import MAX_FUTURE_RELEASE_YEARS
from episode_service.constants import (
    ANIME_NOT_FOUND,
    MIN_ORDER_TO_WATCH,
    ORDER_TO_WATCH_TOO_LOW,
    RELEASE_BEFORE_ANIME,
    RELEASE_TOO_FUTURE,
)
from episode_service.models import AnimeInfo, EpisodeCreate, ValidationFailure, as_utc


class AnimeLookup(Protocol):
    async def resolve(self, anime_id: str) -> AnimeInfo | None: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _add_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # 2 月 29 日落到非闰年时顺延到 3 月 1 日
        return moment.replace(year=moment.year + years, month=3, day=1)


class EpisodeValidator:
    """顺序校验，遇到第一个失败即返回。"""

    def __init__(
        self,
        resolver: AnimeLookup,
        max_future_release_years: int = MAX_FUTURE_RELEASE_YEARS,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.resolver = resolver
        self.max_future_release_years = max_future_release_years
        self.clock = clock

    async def require_anime(self, anime_id: str) -> AnimeInfo | ValidationFailure:
        anime = await self.resolver.resolve(anime_id)
        if anime is None:
            return ValidationFailure(errors=[ANIME_NOT_FOUND.format(anime_id=anime_id)])
        return anime

    async def validate_for_create(
        self, episode: EpisodeCreate
    ) -> ValidationFailure | None:
        if episode.order_to_watch < MIN_ORDER_TO_WATCH:
            return ValidationFailure(
                errors=[ORDER_TO_WATCH_TOO_LOW.format(minimum=MIN_ORDER_TO_WATCH)]
            )

        anime = await self.require_anime(episode.anime_id)
        if isinstance(anime, ValidationFailure):
            return anime

        release = as_utc(episode.release_date)
        min_release = datetime(anime.release_year, 1, 1, tzinfo=timezone.utc)
        max_release = _add_years(as_utc(self.clock()), self.max_future_release_years)

        if release < min_release:
            return ValidationFailure(
                errors=[RELEASE_BEFORE_ANIME.format(year=anime.release_year)]
            )
        if release > max_release:
            return ValidationFailure(
                errors=[RELEASE_TOO_FUTURE.format(year=max_release.year)]
            )
        return None
