"""secret-keeper entrypoint.

Run with:
  python -m secret_keeper
  python -m secret_keeper --create-schema
"""

import argparse

import uvicorn

from secret_keeper.shared.config import get_settings


def main() -> None:
    parser = argparse.ArgumentParser(prog="secret_keeper")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="create the users and auth_sessions tables, then exit",
    )
    args = parser.parse_args()

    settings = get_settings()
    if args.create_schema:
        from secret_keeper.infrastructure.db.engine import create_schema, get_engine

        if not settings.postgres_dsn:
            raise SystemExit("POSTGRES_DSN (or PG_HOST/PG_DATABASE) is required.")
        create_schema(get_engine(settings.postgres_dsn))
        return

    uvicorn.run(
        "secret_keeper.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
