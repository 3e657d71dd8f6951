"""
Create the staffdesk document database (schema and WAL mode) if it does not
exist yet. Safe to re-run.

Usage:
    python3 scripts/init_db.py [--db-path PATH]
"""

import argparse
import asyncio
import logging
import os
import sys

# Ensure project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from staffdesk.logging_config import setup_logging  # noqa: E402
from staffdesk.store import DocumentDatabase  # noqa: E402

logger = logging.getLogger("staffdesk.scripts.init_db")


async def main(db_path: str | None) -> None:
    db = DocumentDatabase(db_path=db_path)
    await db.init()
    await db.close()
    logger.info("Document database ready at %s", db.db_path)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialise the staffdesk document database.")
    parser.add_argument("--db-path", help="database file (defaults to DATA_DIR/staffdesk.db)")
    args = parser.parse_args()
    setup_logging()
    asyncio.run(main(args.db_path))
