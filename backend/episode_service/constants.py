MIN_ORDER_TO_WATCH = 0
DEFAULT_PAGE_FROM = 0
DEFAULT_PAGE_SIZE = 10

ANIME_NOT_FOUND = "Anime with id {anime_id} doesn't exist"
RELEASE_BEFORE_ANIME = "Episode release date cannot be before anime start: {year}"
RELEASE_TOO_FUTURE = "Release date is too far in the future (max: {year})"
ORDER_TO_WATCH_TOO_LOW = "orderToWatch must not be less than {minimum}"
DUPLICATE_FIELD = "Duplicate value for field: {field} ({value})"
