"""Shared fixtures for staffdesk tests."""

import pytest
import pytest_asyncio

from staffdesk.ai.tools import ToolRegistry
from staffdesk.store import DocumentDatabase, DocumentStore


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    """Prevent tests from reading real .env or touching real data."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test_key")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CONTAINER_ENVIRONMENT", "false")


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def db(tmp_path):
    """Fresh document database per test (temp file)."""
    database = DocumentDatabase(db_path=str(tmp_path / "test.db"))
    await database.init()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def store(db):
    return DocumentStore(db, cache_ttl=300)


# Fixed-id records shared by the domain and tool tests
SEED = {
    "clients": [
        ("c1", {"name": "Acme", "company": "Acme Apparel Inc.", "email": "events@acme.example", "phone": "555-0100"}),
        ("c2", {"contacts": [{"name": "Northwind Denim", "email": "dana@northwind.example"}]}),
    ],
    "shows": [
        ("sh1", {"name": "Spring Gala", "venue": "Dallas Market Hall", "startDate": "2025-03-01",
                 "endDate": "2025-03-03", "status": "upcoming"}),
        ("sh2", {"name": "Atlanta Apparel", "venue": "AmericasMart", "date": "2025-04-07", "status": "upcoming"}),
        ("sh3", {"name": "Spring Gala", "venue": "Dallas Market Hall", "startDate": "2025-03-01",
                 "endDate": "2025-03-03", "status": "upcoming", "notes": "duplicate entry"}),
    ],
    "staff": [
        ("s1", {"name": "Jon Smith", "email": "jon@example.com", "role": "Lead",
                "skills": ["sales", "setup"], "payRate": 25, "phone": "555-0001"}),
        ("s2", {"firstName": "Maria", "lastName": "Lopez", "email": "maria@example.com",
                "role": "Model", "skills": ["modeling"],
                "applicationFormData": {"height": "5'9\""}}),
        ("s3", {"name": "Priya Shah", "email": "priya@example.com", "role": "Brand Ambassador",
                "skills": "sales, retail", "shoeSize": "8"}),
    ],
    "availability": [
        ("a1", {"staffId": "s1", "staffName": "Jon Smith", "showId": "sh1", "showName": "Spring Gala",
                "availableDates": ["2025-03-01", "2025-03-02"]}),
        ("a2", {"staffId": "s2", "staffName": "Maria Lopez", "showId": "sh2", "showName": "Atlanta Apparel",
                "dates": ["2025-04-07"]}),
    ],
    "bookings": [
        ("b1", {"clientName": "Acme", "showName": "Spring Gala", "status": "confirmed",
                "createdAt": {"seconds": 1735689600, "nanoseconds": 0},
                "datesNeeded": [
                    {"date": "2025-03-01", "staffCount": 2, "staffIds": ["s1"]},
                    {"date": "2025-03-02", "staffCount": 1, "staffIds": ["s1"]},
                ]}),
        ("b2", {"clientId": "c2", "showId": "sh2", "status": "pending",
                "datesNeeded": {"0": {"date": "2025-04-07", "staffCount": 1, "staffIds": {"0": "s2"}}}}),
    ],
}


@pytest_asyncio.fixture
async def seeded_store(db):
    for collection, docs in SEED.items():
        for doc_id, data in docs:
            await db.insert(collection, data, doc_id=doc_id)
    return DocumentStore(db, cache_ttl=300)


@pytest.fixture
def registry(seeded_store):
    return ToolRegistry(store=seeded_store, suggestion_limit=3)
