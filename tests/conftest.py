from datetime import date

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from filastock.core.cache import catalog_cache
from filastock.db.database import configure_sqlite, create_db_and_tables, get_async_session
from filastock.main import app
from filastock.schemas.catalog import BrandCreate, MaterialTypeCreate
from filastock.schemas.inventory import UnitBulkCreate, UnitCreate
from filastock.services import catalog

OWNER_A = "owner-a"
OWNER_B = "owner-b"


@pytest.fixture()
async def engine():
    engine = configure_sqlite(create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool))
    await create_db_and_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture(autouse=True)
def clear_catalog_cache():
    catalog_cache.clear()
    yield
    catalog_cache.clear()


@pytest.fixture()
async def client(session_maker):
    async def _session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.clear()


async def make_catalog(db, owner_id=OWNER_A, brand_name="Polymaker", type_name="PLA"):
    brand = await catalog.create_brand(db, owner_id=owner_id, payload=BrandCreate(name=brand_name))
    mtype = await catalog.create_material_type(db, owner_id=owner_id, payload=MaterialTypeCreate(name=type_name))
    return brand, mtype


def unit_payload(brand, mtype, **overrides) -> UnitCreate:
    data = dict(
        brand_id=brand.id,
        type_id=mtype.id,
        color_name="Red",
        color_code="#FF0000",
        total_weight=1000.0,
        unit_price=20.0,
        acquired_on=date(2026, 1, 15),
    )
    data.update(overrides)
    return UnitCreate(**data)


def bulk_payload(brand, mtype, quantity, **overrides) -> UnitBulkCreate:
    data = unit_payload(brand, mtype).model_dump()
    data.update(quantity=quantity)
    data.update(overrides)
    return UnitBulkCreate(**data)


@pytest.fixture()
async def catalog_a(db_session):
    return await make_catalog(db_session, OWNER_A)
