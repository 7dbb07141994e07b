"""Utility script to validate persisted notification data and reseed templates."""

from __future__ import annotations

import argparse
import logging

from app.application.use_cases.notifications import DEFAULT_TEMPLATES
from app.config import Settings, get_settings
from app.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from app.infrastructure.record_store import RecordStore, RecordStoreError
from app.infrastructure.repositories import TemplateRepository


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the storage repair."""

    parser = argparse.ArgumentParser(
        description="Remove unreadable notification records and reseed default templates.",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Database URL to repair (defaults to DATABASE_URL / .env)",
    )
    parser.add_argument(
        "--skip-templates",
        action="store_true",
        help="Do not reseed the default notification templates.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every record that is checked.",
    )
    return parser.parse_args()


def main() -> None:
    """Run the storage validation pass with the provided arguments."""

    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    if args.database_url:
        settings = Settings(**{**settings.model_dump(), "database_url": args.database_url})

    engine = create_database_engine(settings)
    try:
        initialize_database(engine)
        store = RecordStore(create_session_factory(engine))
        report = store.repair()
        if not args.skip_templates:
            try:
                TemplateRepository(store, DEFAULT_TEMPLATES).seed_defaults()
            except RecordStoreError as exc:
                raise SystemExit(f"Could not reseed templates: {exc}") from exc
    finally:
        engine.dispose()

    print(
        "Storage repair finished:\n"
        f"  Checked: {report.checked}\n"
        f"  Removed: {', '.join(report.removed) or '-'}"
    )


if __name__ == "__main__":
    main()
