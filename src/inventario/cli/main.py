import asyncio
import logging
from typing import Iterable, List, Optional

import typer
from tortoise import Tortoise

from ..common.exceptions import InventoryError
from ..core.config import TORTOISE_ORM
from ..features.categories.schemas import CategoryCreate, CategoryNode
from ..features.categories.service import create_category, get_category_hierarchy
from ..features.elements.models import Element
from ..features.lots.service import list_reasons

logger = logging.getLogger(__name__)

app = typer.Typer(name="inventario-cli", help="CLI for managing inventory data.")


# Shared async context manager for database connection
class DBConnection:
    async def __aenter__(self):
        await Tortoise.init(config=TORTOISE_ORM)
        await Tortoise.generate_schemas(safe=True)  # Generate schema if it doesn't exist
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()


def render_tree(nodes: Iterable[CategoryNode], indent: str = "  ") -> List[str]:
    """Renders a category forest as indented outline lines, one per category."""
    lines: List[str] = []

    def walk(level: Iterable[CategoryNode], depth: int) -> None:
        for node in level:
            lines.append(f"{indent * depth}- {node.nombre} (id {node.id})")
            walk(node.hijos, depth + 1)

    walk(nodes, 0)
    return lines


# Category commands
categories_app = typer.Typer(name="categories", help="Manage the category hierarchy.")
app.add_typer(categories_app)


@categories_app.command("tree")
def category_tree_command():
    """Prints the category hierarchy as an indented outline."""
    asyncio.run(_category_tree())


async def _category_tree():
    async with DBConnection():
        lines = render_tree(await get_category_hierarchy())
        if not lines:
            typer.secho("No categories found.", fg=typer.colors.YELLOW)
            return
        for line in lines:
            typer.echo(line)


@categories_app.command("create")
def create_category_command(
    name: str = typer.Argument(..., help="Name of the new category."),
    parent: Optional[int] = typer.Option(None, "--parent", help="Id of the parent category."),
):
    """Creates a root category, or a subcategory with --parent."""
    asyncio.run(_create_category(name, parent))


async def _create_category(name: str, parent: Optional[int]):
    async with DBConnection():
        try:
            category = await create_category(CategoryCreate(nombre=name, padre_id=parent))
        except InventoryError as e:
            typer.secho(f"Error: {e.message}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        typer.secho(f"Category '{category.nombre}' created with ID: {category.id}", fg=typer.colors.GREEN)


# Lot commands
lots_app = typer.Typer(name="lots", help="Lot state machine reference data.")
app.add_typer(lots_app)


@lots_app.command("reasons")
def list_reasons_command():
    """Prints the catalogue of movement reasons."""
    for reason in list_reasons():
        typer.echo(f"{reason.codigo.value:<20} {reason.nombre:<20} [{reason.categoria}]")


@app.command("test-db-connection")
def test_db_connection_command_sync():
    """Tests the database connection and counts the stored elements."""
    asyncio.run(test_db_connection_command())


async def test_db_connection_command():
    async with DBConnection():
        typer.echo("Successfully connected to the database.")
        element_count = await Element.all().count()
        typer.echo(f"Found {element_count} element(s) in the database.")


if __name__ == "__main__":
    app()
