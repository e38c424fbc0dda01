import os
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from dotenv import load_dotenv

from .models import (
    OrganizationDoc,
    EmployeeDoc,
    RosterDoc,
    ShiftDoc,
    ActualHoursDoc,
    ComplianceReportDoc,
    AuditLogDoc,
)

load_dotenv()

MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017/compliance_engine")

DOCUMENT_MODELS = [
    OrganizationDoc,
    EmployeeDoc,
    RosterDoc,
    ShiftDoc,
    ActualHoursDoc,
    ComplianceReportDoc,
    AuditLogDoc,
]

_client: AsyncIOMotorClient | None = None


async def init_db(url: str | None = None):
    """Connect to the database named in the URL path and register the documents."""
    global _client

    url = url or MONGODB_URL
    database_name = url.rsplit("/", 1)[-1].split("?")[0]
    if not database_name:
        raise ValueError(f"MongoDB URL has no database name: {url}")

    _client = AsyncIOMotorClient(url)
    database = _client[database_name]
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    return database


async def close_db():
    global _client
    if _client is not None:
        _client.close()
        _client = None
