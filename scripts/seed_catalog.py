import argparse
import logging
import os
from pathlib import Path

from boxoffice.infrastructure.db.seed import seed_catalog
from boxoffice.infrastructure.db.session import SessionLocal, engine


def main() -> None:
    parser = argparse.ArgumentParser(description="Load the box office catalog from JSON files.")
    parser.add_argument(
        "--data-dir",
        default=os.getenv("SEED_DATA_DIR", "data"),
        help="directory holding actors.json, venues.json, shows.json, occupiedSeats.json, promo.json",
    )
    parser.add_argument(
        "--if-missing",
        action="store_true",
        help="skip seeding when the tables already exist",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    seeded = seed_catalog(
        engine,
        SessionLocal,
        Path(args.data_dir),
        only_if_missing=args.if_missing,
    )
    print("Seed complete." if seeded else "Tables already exist, seed skipped.")


if __name__ == "__main__":
    main()
