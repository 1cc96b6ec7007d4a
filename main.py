import argparse

import uvicorn

from api import app
from api.services.session_service import create_runner, set_runner
from core.config import (
    QUESTION_API_BASE_URL,
    QUESTION_SOURCE,
    SERVER_HOST,
    SERVER_PORT,
    SOURCE_REMOTE,
    SOURCE_STATIC,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Study session server")
    parser.add_argument("--host", default=SERVER_HOST)
    parser.add_argument("--port", type=int, default=SERVER_PORT)
    parser.add_argument(
        "--source",
        choices=[SOURCE_REMOTE, SOURCE_STATIC],
        default=QUESTION_SOURCE if QUESTION_SOURCE in (SOURCE_REMOTE, SOURCE_STATIC) else SOURCE_REMOTE,
        help="Where quiz questions come from",
    )
    parser.add_argument(
        "--base-url",
        default=QUESTION_API_BASE_URL,
        help="Base URL of the question generation service",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    set_runner(create_runner(args.source, args.base_url))
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
