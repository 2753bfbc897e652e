"""外部动画服务不可用时使用的静态兜底数据，进程内只读。"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from episode_service.models import AnimeInfo


def _build(entries: list[dict]) -> Mapping[str, AnimeInfo]:
    table = {entry["id"]: AnimeInfo.model_validate(entry) for entry in entries}
    return MappingProxyType(table)


FALLBACK_ANIME: Mapping[str, AnimeInfo] = _build(
    [
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "title": "Fullmetal Alchemist: Brotherhood",
            "score": 9.1,
            "releaseYear": 2009,
            "author": "Hiromu Arakawa",
        },
        {
            "id": "74723c34-d020-4f51-93e1-7505877840a1",
            "title": "Steins;Gate",
            "score": 9.0,
            "releaseYear": 2011,
            "author": "Chiyomaru Shikura",
        },
        {
            "id": "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d",
            "title": "Attack on Titan",
            "score": 8.5,
            "releaseYear": 2013,
            "author": "Hajime Isayama",
        },
        {
            "id": "10ba038e-48da-487b-96e8-8d3b99b6d18a",
            "title": "Spirited Away",
            "score": 8.6,
            "releaseYear": 2001,
            "author": "Hayao Miyazaki",
        },
        {
            "id": "6ec0bd7f-11c0-43da-975e-2a8ad9ebae0b",
            "title": "Cowboy Bebop",
            "score": 8.7,
            "releaseYear": 1998,
            "author": "Shinichirō Watanabe",
        },
        {
            "id": "f47ac10b-58cc-4372-a567-0e02b2c3d479",
            "title": "Death Note",
            "score": 8.6,
            "releaseYear": 2006,
            "author": "Tsugumi Ohba",
        },
        {
            "id": "adca0095-2d93-4781-9b7e-972109e25867",
            "title": "Hunter x Hunter",
            "score": 9.0,
            "releaseYear": 2011,
            "author": "Yoshihiro Togashi",
        },
        {
            "id": "8b3d692a-b7e1-48e0-84eb-489e2730623d",
            "title": "One Piece",
            "score": 8.7,
            "releaseYear": 1999,
            "author": "Eiichiro Oda",
        },
    ]
)
