"""Category tree construction.

Categories are stored flat, each row pointing at its parent. These helpers
turn the flat listing into a forest of nested nodes and back.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .schemas import CategoryNode, CategoryResponse

logger = logging.getLogger(__name__)


def build_tree(categories: Sequence[CategoryResponse]) -> List[CategoryNode]:
    """
    Builds a forest from a flat sequence of categories.

    A first pass maps every id to a node with an empty children list; a second
    pass walks the same sequence and appends each node either to its parent's
    children or, when it has no parent, to the list of roots. Children keep the
    order of the input.

    A category whose parent id is not present in the input is left out of the
    tree: it is neither attached as a child nor promoted to a root.

    Args:
        categories: Flat list of categories, as returned by the store.

    Returns:
        The root nodes, each with its descendants nested under ``hijos``.
    """
    nodes = {
        category.id: CategoryNode(**category.model_dump(exclude={"hijos"}), hijos=[])
        for category in categories
    }
    roots: List[CategoryNode] = []

    for category in categories:
        node = nodes[category.id]
        if category.padre_id is None:
            roots.append(node)
            continue
        parent = nodes.get(category.padre_id)
        if parent is None:
            logger.warning(
                "Category %r (id %s) references missing parent %s; left out of the tree",
                category.nombre, category.id, category.padre_id,
            )
            continue
        parent.hijos.append(node)

    return roots


def flatten_tree(nodes: Iterable[CategoryNode]) -> List[CategoryResponse]:
    """Depth-first, pre-order flattening of a forest back into plain categories."""
    result: List[CategoryResponse] = []

    def walk(level: Iterable[CategoryNode]) -> None:
        for node in level:
            result.append(CategoryResponse(**node.model_dump(exclude={"hijos"})))
            if node.hijos:
                walk(node.hijos)

    walk(nodes)
    return result


def find_in_tree(nodes: Iterable[CategoryNode], category_id: int) -> Optional[CategoryNode]:
    """Returns the node with ``category_id`` anywhere in the forest, or None."""
    for node in nodes:
        if node.id == category_id:
            return node
        found = find_in_tree(node.hijos, category_id)
        if found is not None:
            return found
    return None
