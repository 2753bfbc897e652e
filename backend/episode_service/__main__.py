from __future__ import annotations

import argparse
import logging

import uvicorn

from episode_service.config import APP_HOST, APP_PORT, LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def main() -> int:
    parser = argparse.ArgumentParser(description="Episode service HTTP API")
    parser.add_argument("--host", default=APP_HOST)
    parser.add_argument("--port", type=int, default=APP_PORT)
    parser.add_argument("--log-level", default=LOG_LEVEL)
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT)
    uvicorn.run(
        "episode_service.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
