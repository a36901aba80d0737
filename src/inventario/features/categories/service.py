import logging
from typing import List, Optional

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from ...common.exceptions import ConflictError, NotFoundError, ValidationError
from ..elements.models import Element
from .models import Category
from .schemas import CategoryCreate, CategoryNode, CategoryResponse, CategoryUpdate
from .tree import build_tree

logger = logging.getLogger(__name__)


def _to_category_response(category: Category, parent_name: Optional[str] = None) -> CategoryResponse:
    """Converts a Category model instance to a CategoryResponse schema."""
    return CategoryResponse(
        id=category.id,
        nombre=category.name,
        descripcion=category.description,
        padre_id=category.parent_id,
        padre_nombre=parent_name,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


async def _get_category_or_404(category_id: int, using_db=None) -> Category:
    category = await Category.get_or_none(id=category_id, using_db=using_db)
    if not category:
        raise NotFoundError(f"Categoría {category_id} no encontrada")
    return category


async def list_root_categories() -> List[CategoryResponse]:
    """
    Lists the categories without a parent.

    Returns:
        The root categories ordered by name.
    """
    categories = await Category.filter(parent_id__isnull=True).order_by("name", "id")
    return [_to_category_response(cat) for cat in categories]


async def list_categories() -> List[CategoryResponse]:
    """
    Lists every category, flat, with the name of its parent.

    Returns:
        All categories ordered by name.
    """
    categories = await Category.all().order_by("name", "id")
    names = {cat.id: cat.name for cat in categories}
    return [_to_category_response(cat, names.get(cat.parent_id)) for cat in categories]


async def get_category_hierarchy() -> List[CategoryNode]:
    """
    Returns the whole category forest.

    Returns:
        The root categories with their descendants nested under ``hijos``.
    """
    return build_tree(await list_categories())


async def get_category(category_id: int) -> CategoryResponse:
    category = await _get_category_or_404(category_id)
    parent_name = None
    if category.parent_id is not None:
        await category.fetch_related("parent")
        parent_name = category.parent.name
    return _to_category_response(category, parent_name)


async def list_subcategories(category_id: int) -> List[CategoryResponse]:
    """
    Lists the direct children of a category.

    Args:
        category_id: The id of the parent category.

    Returns:
        The children of the category, ordered by name.
    """
    parent = await _get_category_or_404(category_id)
    children = await Category.filter(parent_id=category_id).order_by("name", "id")
    return [_to_category_response(child, parent.name) for child in children]


async def create_category(category_in: CategoryCreate) -> CategoryResponse:
    """
    Creates a root category, or a subcategory when ``padre_id`` is given.

    The parent must already exist, so a category can never be created below
    one of its own descendants.

    Args:
        category_in: The data for the new category.

    Returns:
        The created category.
    """
    name = category_in.nombre.strip()
    if not name:
        raise ValidationError("El nombre es obligatorio")

    parent = None
    if category_in.padre_id is not None:
        parent = await Category.get_or_none(id=category_in.padre_id)
        if not parent:
            raise NotFoundError(f"Categoría padre {category_in.padre_id} no encontrada")

    category = await Category.create(
        name=name,
        description=category_in.descripcion,
        parent=parent,
    )
    logger.info("Category %s created (parent %s)", category.id, category.parent_id)
    return _to_category_response(category, parent.name if parent else None)


async def _ensure_not_descendant(category_id: int, new_parent_id: int) -> None:
    """Raises ValidationError if ``new_parent_id`` is ``category_id`` or below it."""
    visited = set()
    current: Optional[int] = new_parent_id
    while current is not None and current not in visited:
        if current == category_id:
            raise ValidationError(
                "Una categoría no puede ser subcategoría de sí misma ni de sus descendientes"
            )
        visited.add(current)
        row = await Category.get_or_none(id=current)
        current = row.parent_id if row else None


async def update_category(category_id: int, category_in: CategoryUpdate) -> CategoryResponse:
    """
    Updates a category.

    Moving a category under a new parent checks the ancestry of that parent,
    so the hierarchy stays a forest.

    Args:
        category_id: The id of the category to update.
        category_in: The fields to change.

    Returns:
        The updated category.
    """
    category = await _get_category_or_404(category_id)
    update_data = category_in.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("No hay campos para actualizar")

    if "nombre" in update_data:
        if not update_data["nombre"] or not update_data["nombre"].strip():
            raise ValidationError("El nombre es obligatorio")
        category.name = update_data["nombre"].strip()
    if "descripcion" in update_data:
        category.description = update_data["descripcion"]

    if "padre_id" in update_data:
        new_parent_id = update_data["padre_id"]
        if new_parent_id is None:
            category.parent_id = None
        else:
            parent = await Category.get_or_none(id=new_parent_id)
            if not parent:
                raise NotFoundError(f"Categoría padre {new_parent_id} no encontrada")
            await _ensure_not_descendant(category.id, parent.id)
            category.parent_id = parent.id

    await category.save()
    logger.info("Category %s updated", category.id)
    return await get_category(category.id)


async def collect_subtree_ids(category_id: int, using_db=None) -> List[int]:
    """
    Returns the ids of a category and all of its descendants.

    The list is in depth-first post-order: every category appears after all
    of its descendants, which is the order in which they can be deleted.
    """
    ids: List[int] = []
    children = (
        await Category.filter(parent_id=category_id)
        .using_db(using_db)
        .order_by("id")
        .values_list("id", flat=True)
    )
    for child_id in children:
        ids.extend(await collect_subtree_ids(child_id, using_db=using_db))
    ids.append(category_id)
    return ids


async def _delete_subtree(category_id: int, conn) -> int:
    """Deletes the children of ``category_id`` recursively, then the category itself."""
    deleted = 0
    children = (
        await Category.filter(parent_id=category_id)
        .using_db(conn)
        .order_by("id")
        .values_list("id", flat=True)
    )
    for child_id in children:
        deleted += await _delete_subtree(child_id, conn)
    deleted += await Category.filter(id=category_id).using_db(conn).delete()
    return deleted


async def delete_category(category_id: int) -> int:
    """
    Deletes a category and every transitive descendant.

    The whole subtree is removed in one transaction, children before parents.
    If any element is still attached to a category of the subtree nothing is
    deleted.

    Args:
        category_id: The id of the category to delete.

    Returns:
        The number of categories removed.
    """
    try:
        async with in_transaction() as conn:
            await _get_category_or_404(category_id, using_db=conn)
            subtree = await collect_subtree_ids(category_id, using_db=conn)
            in_use = await Element.filter(category_id__in=subtree).using_db(conn).count()
            if in_use:
                raise ConflictError(
                    f"No se puede eliminar: {in_use} elemento(s) usan esta categoría o sus subcategorías"
                )
            deleted = await _delete_subtree(category_id, conn)
    except IntegrityError as e:
        logger.error(f"Error deleting category {category_id}: {e}", exc_info=True)
        raise ConflictError("No se puede eliminar: hay registros relacionados")

    logger.info("Category %s deleted together with %s descendant(s)", category_id, deleted - 1)
    return deleted
