import datetime
import logging

from inventario.features.categories.schemas import CategoryResponse
from inventario.features.categories.tree import build_tree, find_in_tree, flatten_tree

NOW = datetime.datetime(2024, 1, 1, 12, 0, 0)


def _category(category_id, name, parent_id=None):
    return CategoryResponse(
        id=category_id, nombre=name, padre_id=parent_id, created_at=NOW, updated_at=NOW
    )


def test_build_tree_empty():
    assert build_tree([]) == []


def test_build_tree_nests_children_under_parents():
    categories = [
        _category(1, "Mobiliario"),
        _category(2, "Sillas", 1),
        _category(3, "Mesas", 1),
        _category(4, "Plegables", 2),
        _category(5, "Iluminación"),
    ]
    roots = build_tree(categories)

    assert [r.id for r in roots] == [1, 5]
    assert [c.id for c in roots[0].hijos] == [2, 3]
    assert [c.id for c in roots[0].hijos[0].hijos] == [4]
    assert roots[1].hijos == []


def test_build_tree_children_keep_input_order():
    categories = [
        _category(1, "Raíz"),
        _category(9, "Zeta", 1),
        _category(3, "Alfa", 1),
        _category(5, "Media", 1),
    ]
    roots = build_tree(categories)
    assert [c.id for c in roots[0].hijos] == [9, 3, 5]


def test_build_tree_child_before_parent_in_input():
    categories = [_category(2, "Hija", 1), _category(1, "Padre")]
    roots = build_tree(categories)
    assert [r.id for r in roots] == [1]
    assert [c.id for c in roots[0].hijos] == [2]


def test_build_tree_drops_node_with_missing_parent(caplog):
    categories = [_category(1, "Raíz"), _category(2, "Huérfana", 99)]
    with caplog.at_level(logging.WARNING, logger="inventario.features.categories.tree"):
        roots = build_tree(categories)

    assert [r.id for r in roots] == [1]
    assert find_in_tree(roots, 2) is None
    assert "missing parent 99" in caplog.text


def test_every_node_appears_once_when_parents_exist():
    categories = [
        _category(1, "A"),
        _category(2, "B", 1),
        _category(3, "C", 2),
        _category(4, "D", 2),
        _category(5, "E"),
        _category(6, "F", 5),
    ]
    flat = flatten_tree(build_tree(categories))
    assert sorted(c.id for c in flat) == [1, 2, 3, 4, 5, 6]
    assert len(flat) == len(categories)


def test_flatten_tree_is_preorder():
    categories = [
        _category(1, "A"),
        _category(2, "B", 1),
        _category(3, "C", 2),
        _category(4, "D", 1),
    ]
    assert [c.id for c in flatten_tree(build_tree(categories))] == [1, 2, 3, 4]


def test_find_in_tree():
    roots = build_tree([_category(1, "A"), _category(2, "B", 1), _category(3, "C", 2)])
    found = find_in_tree(roots, 3)
    assert found is not None
    assert found.nombre == "C"
    assert find_in_tree(roots, 42) is None
