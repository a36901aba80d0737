"""
Root conftest for the pytest test suite.

Every test runs against a fresh, isolated in-memory SQLite database created
by the autouse `initialize_test_db` fixture.

Key Fixtures:
- `anyio_backend`: Specifies the asyncio backend.
- `initialize_test_db`: (autouse) Creates a fresh DB schema for each test.
- `client`: An httpx AsyncClient bound to the FastAPI application. The
  application lifespan is not run, so `initialize_test_db` owns the database.
- `lot_element`: A lot-tracked element with ten available units in one lot.
- `serial_element`: A serial-tracked element with two serials.
"""

from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from inventario.core.config import build_tortoise_config
from inventario.features.elements.models import Element, Serial
from inventario.features.lots.models import Lot

# Import the app
from inventario.main import app as actual_app


async def add_lot_element(name: str = "Silla Tiffany", quantity: int = 10):
    element = await Element.create(name=name, quantity=quantity, requires_serials=False)
    lot = await Lot.create(element=element, available=quantity)
    return element, lot


async def add_serial_element(name: str = "Proyector", serials=("PX-001", "PX-002")):
    element = await Element.create(name=name, quantity=len(serials), requires_serials=True)
    for number in serials:
        await Serial.create(element=element, serial_number=number)
    return element


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest_asyncio.fixture(scope="function", autouse=True)
async def initialize_test_db() -> AsyncGenerator[None, None]:
    """
    Initializes the database for each test function.

    This async, autouse fixture creates a fresh in-memory database and schema
    for each test and tears it down afterwards.
    """
    await Tortoise.init(config=build_tortoise_config("sqlite://:memory:"))
    await Tortoise.generate_schemas()

    yield

    await Tortoise.close_connections()


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, Any]:
    transport = ASGITransport(app=actual_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def lot_element():
    return await add_lot_element()


@pytest_asyncio.fixture(scope="function")
async def serial_element():
    return await add_serial_element()
