import pytest_asyncio
from inventario.features.categories.models import Category


@pytest_asyncio.fixture
async def category_tree() -> dict:
    """
    Mobiliario
    ├── Sillas
    │   └── Sillas plegables
    └── Mesas
    Iluminación
    """
    mobiliario = await Category.create(name="Mobiliario")
    sillas = await Category.create(name="Sillas", parent=mobiliario)
    plegables = await Category.create(name="Sillas plegables", parent=sillas)
    mesas = await Category.create(name="Mesas", parent=mobiliario)
    iluminacion = await Category.create(name="Iluminación")
    return {
        "mobiliario": mobiliario,
        "sillas": sillas,
        "plegables": plegables,
        "mesas": mesas,
        "iluminacion": iluminacion,
    }
