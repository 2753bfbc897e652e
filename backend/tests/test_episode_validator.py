from datetime import datetime, timezone
from uuid import uuid4

import pytest

from episode_service.logic.episode_validator import EpisodeValidator
from episode_service.models import EpisodeCreate, ValidationFailure

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _episode(release_date: datetime, anime_id: str | None = None) -> EpisodeCreate:
    return EpisodeCreate(
        title="Valid Episode Title",
        order_to_watch=1,
        release_date=release_date,
        anime_id=anime_id or str(uuid4()),
    )


def _validator(resolver, clock=lambda: NOW) -> EpisodeValidator:
    return EpisodeValidator(resolver=resolver, max_future_release_years=10, clock=clock)


@pytest.mark.asyncio
async def test_valid_episode_passes(mocker, anime_factory):
    resolver = mocker.AsyncMock()
    resolver.resolve.return_value = anime_factory(release_year=2010)

    episode = _episode(datetime(2015, 6, 1, tzinfo=timezone.utc))
    result = await _validator(resolver).validate_for_create(episode)

    assert result is None
    resolver.resolve.assert_awaited_once_with(episode.anime_id)


@pytest.mark.asyncio
async def test_missing_anime_fails(mocker):
    resolver = mocker.AsyncMock()
    resolver.resolve.return_value = None
    episode = _episode(datetime(2015, 6, 1, tzinfo=timezone.utc))

    result = await _validator(resolver).validate_for_create(episode)

    assert isinstance(result, ValidationFailure)
    assert result.errors == [f"Anime with id {episode.anime_id} doesn't exist"]


@pytest.mark.asyncio
async def test_release_on_first_day_of_anime_year_is_valid(mocker, anime_factory):
    resolver = mocker.AsyncMock()
    resolver.resolve.return_value = anime_factory(release_year=2010)

    result = await _validator(resolver).validate_for_create(
        _episode(datetime(2010, 1, 1, tzinfo=timezone.utc))
    )

    assert result is None


@pytest.mark.asyncio
async def test_release_before_anime_start_fails(mocker, anime_factory):
    resolver = mocker.AsyncMock()
    resolver.resolve.return_value = anime_factory(release_year=2010)

    result = await _validator(resolver).validate_for_create(
        _episode(datetime(2009, 1, 1, tzinfo=timezone.utc))
    )

    assert result == ValidationFailure(
        errors=["Episode release date cannot be before anime start: 2010"]
    )


@pytest.mark.asyncio
async def test_release_too_far_in_future_fails(mocker, anime_factory):
    resolver = mocker.AsyncMock()
    resolver.resolve.return_value = anime_factory(release_year=2010)

    result = await _validator(resolver).validate_for_create(
        _episode(datetime(2037, 1, 1, tzinfo=timezone.utc))
    )

    assert result == ValidationFailure(
        errors=["Release date is too far in the future (max: 2036)"]
    )


@pytest.mark.asyncio
async def test_release_exactly_at_future_limit_is_valid(mocker, anime_factory):
    resolver = mocker.AsyncMock()
    resolver.resolve.return_value = anime_factory(release_year=2010)

    result = await _validator(resolver).validate_for_create(
        _episode(datetime(2036, 10, 19, 12, 0, tzinfo=timezone.utc))
    )

    assert result is None


@pytest.mark.asyncio
async def test_leap_day_clock_rolls_future_limit_to_march(mocker, anime_factory):
    resolver = mocker.AsyncMock()
    resolver.resolve.return_value = anime_factory(release_year=2010)
    leap_day = datetime(2024, 2, 29, tzinfo=timezone.utc)

    validator = _validator(resolver, clock=lambda: leap_day)
    inside = await validator.validate_for_create(
        _episode(datetime(2034, 3, 1, tzinfo=timezone.utc))
    )
    outside = await validator.validate_for_create(
        _episode(datetime(2034, 3, 1, 0, 0, 1, tzinfo=timezone.utc))
    )

    assert inside is None
    assert outside.errors == ["Release date is too far in the future (max: 2034)"]


@pytest.mark.asyncio
async def test_negative_order_fails_before_lookup(mocker):
    resolver = mocker.AsyncMock()
    episode = EpisodeCreate.model_construct(
        title=None,
        order_to_watch=-1,
        release_date=datetime(2015, 6, 1, tzinfo=timezone.utc),
        anime_id=str(uuid4()),
    )

    result = await _validator(resolver).validate_for_create(episode)

    assert result.errors == ["orderToWatch must not be less than 0"]
    resolver.resolve.assert_not_awaited()


@pytest.mark.asyncio
async def test_require_anime_returns_anime(mocker, anime_factory):
    anime = anime_factory()
    resolver = mocker.AsyncMock()
    resolver.resolve.return_value = anime

    assert await _validator(resolver).require_anime(anime.id) is anime
