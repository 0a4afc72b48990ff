from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from app.config import build_sqlalchemy_db_url, settings  # noqa: E402
from app.database import Base, build_engine, mask_db_url  # noqa: E402
from app import models  # noqa: F401,E402  # ensure all models are registered


logger = logging.getLogger("create_orm_tables")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create the users/interests/skills tables in the configured DB (EXPLICIT action)."
    )
    parser.add_argument(
        "--db-url",
        default=None,
        help="Target DB URL (defaults to build_sqlalchemy_db_url(settings) from .env/env vars).",
    )
    parser.add_argument(
        "--drop-first",
        action="store_true",
        help="Drop the tables before creating them. Destroys all stored users.",
    )
    parser.add_argument(
        "--i-understand",
        action="store_true",
        help="Required safety flag. Prevents accidental DDL against shared DBs.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    if not args.i_understand:
        logger.error("refusing to run without --i-understand")
        return 2

    url = args.db_url or build_sqlalchemy_db_url(settings)
    engine = build_engine(url)
    if args.drop_first:
        logger.warning("dropping tables on %s", mask_db_url(url))
        Base.metadata.drop_all(bind=engine)
    logger.info("creating tables on %s: %s", mask_db_url(url), ", ".join(sorted(Base.metadata.tables)))
    Base.metadata.create_all(bind=engine)
    logger.info("done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
