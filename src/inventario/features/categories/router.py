"""API routes for the category hierarchy."""
from typing import List

from fastapi import APIRouter, status

from ...common.schemas import ApiResponse, DeletedResponse, envelope
from ..elements.schemas import ElementSummary
from ..elements.service import list_category_elements
from .schemas import CategoryCreate, CategoryNode, CategoryResponse, CategoryUpdate
from . import service

router = APIRouter(
    prefix="/categorias",
    tags=["Categorías"],
    responses={404: {"description": "Not found"}},
)


@router.get(
    "",
    response_model=ApiResponse[List[CategoryResponse]],
    summary="List root categories",
)
async def list_root_categories():
    return envelope(await service.list_root_categories())


@router.get(
    "/todas",
    response_model=ApiResponse[List[CategoryResponse]],
    summary="List every category",
)
async def list_categories():
    return envelope(await service.list_categories())


@router.get(
    "/jerarquia",
    response_model=ApiResponse[List[CategoryNode]],
    summary="Get the category tree",
)
async def get_category_hierarchy():
    return envelope(await service.get_category_hierarchy())


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a category or subcategory",
)
async def create_category(category_in: CategoryCreate):
    return envelope(await service.create_category(category_in), "Categoría creada exitosamente")


@router.get(
    "/{category_id}",
    response_model=ApiResponse[CategoryResponse],
    summary="Get a category",
)
async def get_category(category_id: int):
    return envelope(await service.get_category(category_id))


@router.get(
    "/{category_id}/subcategorias",
    response_model=ApiResponse[List[CategoryResponse]],
    summary="List the direct children of a category",
)
async def list_subcategories(category_id: int):
    return envelope(await service.list_subcategories(category_id))


@router.get(
    "/{category_id}/elementos",
    response_model=ApiResponse[List[ElementSummary]],
    summary="List the elements of a category and its descendants",
)
async def list_elements_in_category(category_id: int):
    return envelope(await list_category_elements(category_id))


@router.put(
    "/{category_id}",
    response_model=ApiResponse[CategoryResponse],
    summary="Update a category",
)
async def update_category(category_id: int, category_in: CategoryUpdate):
    return envelope(
        await service.update_category(category_id, category_in),
        "Categoría actualizada exitosamente",
    )


@router.delete(
    "/{category_id}",
    response_model=ApiResponse[DeletedResponse],
    summary="Delete a category and all of its subcategories",
)
async def delete_category(category_id: int):
    deleted = await service.delete_category(category_id)
    return envelope(
        DeletedResponse(id=category_id),
        f"Categoría eliminada junto con {deleted - 1} subcategoría(s)",
    )
