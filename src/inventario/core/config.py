import os

# In a real deployment, load these from environment variables or a .env file
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://./inventario.sqlite3")
API_PREFIX: str = os.getenv("API_PREFIX", "/api")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_NAMESPACES: list[str] = [
    ns.strip() for ns in os.getenv("LOG_NAMESPACES", "").split(",") if ns.strip()
]
CORS_ORIGINS: list[str] = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]
DEBUG_MODE: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "t")

MODEL_MODULES: list[str] = [
    "inventario.features.categories.models",
    "inventario.features.catalogs.models",
    "inventario.features.elements.models",
    "inventario.features.lots.models",
    "aerich.models",  # For Aerich migrations
]


def build_tortoise_config(db_url: str = DATABASE_URL) -> dict:
    """Tortoise-ORM configuration shared by the API, the CLI, aerich and the tests."""
    return {
        "connections": {"default": db_url},
        "apps": {
            "models": {  # App label, referenced as "models.<Model>" in relations
                "models": MODEL_MODULES,
                "default_connection": "default",
            }
        },
        "use_tz": False,
        "timezone": "UTC",
    }


TORTOISE_ORM = build_tortoise_config()
