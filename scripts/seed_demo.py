"""
Load a small demo data set (clients, shows, staff, availability, bookings)
into the staffdesk document database.

Usage:
    python3 scripts/seed_demo.py            # add demo records
    python3 scripts/seed_demo.py --reset    # delete every document first
"""

import argparse
import asyncio
import os
import sys

# Ensure project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from staffdesk.constants import COLLECTIONS  # noqa: E402
from staffdesk.logging_config import setup_logging  # noqa: E402
from staffdesk.store import DocumentDatabase, DocumentStore  # noqa: E402

CLIENTS = [
    {"name": "Acme Apparel", "company": "Acme Apparel Inc.", "email": "events@acme.example"},
    {"name": "Northwind Denim", "contacts": [{"name": "Dana Cole", "email": "dana@northwind.example"}]},
]

SHOWS = [
    {"name": "Dallas Spring Market", "venue": "Dallas Market Hall", "city": "Dallas",
     "startDate": "2026-03-10", "endDate": "2026-03-13", "status": "upcoming"},
    {"name": "Atlanta Apparel", "venue": "AmericasMart", "city": "Atlanta",
     "startDate": "2026-04-07", "endDate": "2026-04-09", "status": "upcoming"},
]

STAFF = [
    {"name": "Jon Smith", "email": "jon@example.com", "role": "Lead", "skills": ["sales", "setup"], "payRate": 25},
    {"firstName": "Maria", "lastName": "Lopez", "email": "maria@example.com", "role": "Model", "skills": ["modeling"]},
    {"name": "Priya Shah", "email": "priya@example.com", "role": "Brand Ambassador", "skills": ["sales"]},
]


async def main(reset: bool) -> None:
    setup_logging()
    db = DocumentDatabase()
    await db.init()
    store = DocumentStore(db)
    try:
        if reset:
            for collection in sorted(COLLECTIONS):
                docs = await store.get_all(collection, use_cache=False)
                await store.batch_delete(collection, [d["id"] for d in docs])

        clients = await store.batch_create("clients", CLIENTS)
        shows = await store.batch_create("shows", SHOWS)
        staff = await store.batch_create("staff", STAFF)
        dallas, atlanta = shows
        jon, maria, priya = staff

        await store.batch_create("availability", [
            {"staffId": jon["id"], "staffName": "Jon Smith", "showId": dallas["id"],
             "showName": dallas["name"], "availableDates": ["2026-03-10", "2026-03-11", "2026-03-12"]},
            {"staffId": maria["id"], "staffName": "Maria Lopez", "showId": dallas["id"],
             "showName": dallas["name"], "availableDates": ["2026-03-10"]},
            {"staffId": priya["id"], "staffName": "Priya Shah", "showId": atlanta["id"],
             "showName": atlanta["name"], "dates": ["2026-04-07", "2026-04-08"]},
        ])

        await store.batch_create("bookings", [
            {"clientId": clients[0]["id"], "clientName": clients[0]["name"],
             "showId": dallas["id"], "showName": dallas["name"], "status": "confirmed",
             "datesNeeded": [
                 {"date": "2026-03-10", "staffCount": 2, "staffIds": [jon["id"], ""]},
                 {"date": "2026-03-11", "staffCount": 1, "staffIds": [jon["id"]]},
             ]},
            {"clientId": clients[1]["id"], "clientName": "Northwind Denim",
             "showId": atlanta["id"], "showName": atlanta["name"], "status": "pending",
             "datesNeeded": [{"date": "2026-04-07", "staffCount": 1, "staffIds": []}]},
        ])
    finally:
        await db.close()
    print(f"Demo data loaded into: {db.db_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--reset", action="store_true", help="delete every document first")
    args = parser.parse_args()
    asyncio.run(main(args.reset))
