"""Element tree primitives.

All functions are structural recursions over an explicit tree. They never
mutate their input: the returned lists share untouched subtrees and copy
only the nodes along the modified path. There are no parent back-pointers;
reparenting is always remove-then-insert.
"""

from dataclasses import replace
from typing import Any, Iterator, List, Optional, Tuple

from .models import UIElement


def iter_elements(elements: List[UIElement]) -> Iterator[UIElement]:
    """Depth-first, pre-order walk over a forest of elements."""
    for element in elements:
        yield element
        if element.children:
            yield from iter_elements(element.children)


def flatten_elements(elements: List[UIElement]) -> List[UIElement]:
    return list(iter_elements(elements))


def find_element(elements: List[UIElement], element_id: str) -> Optional[UIElement]:
    for element in iter_elements(elements):
        if element.id == element_id:
            return element
    return None


def find_parent_id(elements: List[UIElement], element_id: str) -> Optional[str]:
    """Id of the element whose children contain ``element_id`` (None at root)."""
    for element in elements:
        if element.children:
            if any(child.id == element_id for child in element.children):
                return element.id
            found = find_parent_id(element.children, element_id)
            if found:
                return found
    return None


def contains_element(root: UIElement, element_id: str) -> bool:
    """True if ``element_id`` is ``root`` or one of its descendants."""
    return find_element([root], element_id) is not None


def remove_element(
    elements: List[UIElement], element_id: str
) -> Tuple[List[UIElement], Optional[UIElement]]:
    """Remove an element anywhere in the tree.

    Returns:
        (remaining forest, removed element or None if not found)
    """
    for index, element in enumerate(elements):
        if element.id == element_id:
            return elements[:index] + elements[index + 1:], element

    for index, element in enumerate(elements):
        if element.children:
            children, removed = remove_element(element.children, element_id)
            if removed is not None:
                updated = replace(element, children=children)
                return elements[:index] + [updated] + elements[index + 1:], removed

    return list(elements), None


def insert_element(
    elements: List[UIElement],
    element: UIElement,
    parent_id: Optional[str] = None,
    index: Optional[int] = None,
) -> List[UIElement]:
    """Insert ``element`` at ``index`` in the root list or in a parent's children.

    ``index=None`` appends. An unknown or non-container parent leaves the
    tree unchanged.
    """
    if parent_id is None:
        result = list(elements)
        result.insert(len(result) if index is None else index, element)
        return result

    result = []
    for current in elements:
        if current.children is not None:
            if current.id == parent_id:
                children = list(current.children)
                children.insert(len(children) if index is None else index, element)
                current = replace(current, children=children)
            else:
                current = replace(
                    current, children=insert_element(current.children, element, parent_id, index)
                )
        result.append(current)
    return result


def update_element(elements: List[UIElement], element_id: str, **updates: Any) -> List[UIElement]:
    """Return a tree where the matching element has ``updates`` applied."""
    result = []
    for element in elements:
        if element.id == element_id:
            element = replace(element, **updates)
        elif element.children:
            element = replace(element, children=update_element(element.children, element_id, **updates))
        result.append(element)
    return result


def move_element(elements: List[UIElement], element_id: str, direction: str) -> List[UIElement]:
    """Swap an element with its previous ("up") or next ("down") sibling."""
    ids = [e.id for e in elements]
    if element_id in ids:
        index = ids.index(element_id)
        new_index = index - 1 if direction == "up" else index + 1
        if new_index < 0 or new_index >= len(elements):
            return list(elements)
        result = list(elements)
        result[index], result[new_index] = result[new_index], result[index]
        return result

    return [
        replace(e, children=move_element(e.children, element_id, direction)) if e.children else e
        for e in elements
    ]


def reorder_elements(elements: List[UIElement], active_id: str, over_id: str) -> List[UIElement]:
    """Move ``active_id`` to the position of ``over_id`` when they are siblings."""
    ids = [e.id for e in elements]
    if active_id in ids and over_id in ids:
        result = list(elements)
        moved = result.pop(ids.index(active_id))
        result.insert(ids.index(over_id), moved)
        return result

    return [
        replace(e, children=reorder_elements(e.children, active_id, over_id)) if e.children else e
        for e in elements
    ]
