from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol


class EpisodeStoragePort(Protocol):
    async def create_episode(self, data: Mapping[str, Any]) -> dict[str, Any]: ...

    async def list_episodes(
        self, *, anime_id: str, offset: int, limit: int
    ) -> list[dict[str, Any]]: ...

    async def count_by_anime(self, anime_ids: Iterable[str]) -> dict[str, int]: ...
