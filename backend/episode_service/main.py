"""FastAPI 入口，暴露剧集创建、分页查询与批量计数接口。"""

from __future__ import annotations

import logging
from functools import lru_cache
from http import HTTPStatus
from typing import Dict, List

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from episode_service.config import require_mongo_uri
from episode_service.constants import DEFAULT_PAGE_FROM, DEFAULT_PAGE_SIZE
from episode_service.logic.episode_validator import EpisodeValidator
from episode_service.logic.episode_workflow import EpisodeWorkflow
from episode_service.models import (
    AnimeIdList,
    DuplicateFailure,
    EpisodeCreate,
    EpisodeInfo,
    EpisodeListQuery,
    ValidationFailure,
    format_validation_errors,
)
from episode_service.services.anime_resolver import AnimeResolver
from episode_service.storage.episodes import EpisodeStorage

app = FastAPI(title="Episode Service API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger(__name__)


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"errors": format_validation_errors(exc.errors())},
    )


@app.exception_handler(Exception)
async def _unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    logger.error(
        "Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={"message": HTTPStatus.INTERNAL_SERVER_ERROR.phrase},
    )


def _failure_response(failure: ValidationFailure | DuplicateFailure) -> JSONResponse:
    status_code = 409 if isinstance(failure, DuplicateFailure) else 400
    return JSONResponse(status_code=status_code, content=failure.model_dump())


@lru_cache(maxsize=1)
def get_episode_storage() -> EpisodeStorage:
    """EpisodeStorage 单例，避免重复建立连接。"""
    return EpisodeStorage.from_uri(require_mongo_uri())


@lru_cache(maxsize=1)
def get_anime_resolver() -> AnimeResolver:
    """动画服务客户端单例，读取 .env 配置。"""
    return AnimeResolver()


def get_episode_validator(
    resolver: AnimeResolver = Depends(get_anime_resolver),
) -> EpisodeValidator:
    return EpisodeValidator(resolver=resolver)


def get_episode_workflow(
    storage: EpisodeStorage = Depends(get_episode_storage),
    validator: EpisodeValidator = Depends(get_episode_validator),
) -> EpisodeWorkflow:
    return EpisodeWorkflow(storage=storage, validator=validator)


@app.get("/api/health", response_class=PlainTextResponse)
async def health() -> str:
    return "OK"


@app.post(
    "/api/episode",
    status_code=201,
    response_model=EpisodeInfo,
    response_model_exclude_none=True,
)
async def create_episode_endpoint(
    payload: EpisodeCreate,
    workflow: EpisodeWorkflow = Depends(get_episode_workflow),
):
    result = await workflow.create(payload)
    if isinstance(result, (ValidationFailure, DuplicateFailure)):
        return _failure_response(result)
    return result


@app.get(
    "/api/episode",
    response_model=List[EpisodeInfo],
    response_model_exclude_none=True,
)
async def list_episodes_endpoint(
    anime_id: str = Query(..., alias="animeId"),
    from_: int = Query(DEFAULT_PAGE_FROM, alias="from"),
    size: int = Query(DEFAULT_PAGE_SIZE),
    workflow: EpisodeWorkflow = Depends(get_episode_workflow),
):
    try:
        query = EpisodeListQuery.model_validate(
            {"animeId": anime_id, "from": from_, "size": size}
        )
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc

    result = await workflow.list_in_anime(query)
    if isinstance(result, ValidationFailure):
        return _failure_response(result)
    return result


@app.post("/api/episode/_counts", response_model=Dict[str, int])
async def count_episodes_endpoint(
    payload: AnimeIdList,
    workflow: EpisodeWorkflow = Depends(get_episode_workflow),
):
    result = await workflow.count_for_many(payload.anime_ids)
    if isinstance(result, ValidationFailure):
        return _failure_response(result)
    return result
