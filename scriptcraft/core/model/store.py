"""Project store: one owned mutable cell behind a narrow update API.

``reduce(state, action)`` is a pure function; every update produces a new
``StoreState``. ``ProjectStore`` holds the current state and applies
dispatched actions.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional

from .factory import create_element, create_project, is_layout, now_iso
from .models import ClassKind, ElementType, ScriptProject, UIElement
from .tree import (
    contains_element,
    find_element,
    find_parent_id,
    insert_element,
    move_element,
    remove_element,
    reorder_elements,
    update_element,
)

logger = logging.getLogger(__name__)

# Structural fields may only change through the move actions.
_PROTECTED_ELEMENT_FIELDS = frozenset({"id", "type", "children"})


# =========================================================================
# Actions
# =========================================================================

@dataclass(frozen=True)
class NewProject:
    name: Optional[str] = None


@dataclass(frozen=True)
class LoadProject:
    project: ScriptProject


@dataclass(frozen=True)
class SetClassKind:
    class_kind: ClassKind


@dataclass(frozen=True)
class UpdateSettings:
    changes: Dict[str, Any]


@dataclass(frozen=True)
class AddElement:
    element_type: ElementType
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class RemoveElement:
    element_id: str


@dataclass(frozen=True)
class UpdateElement:
    element_id: str
    updates: Dict[str, Any]


@dataclass(frozen=True)
class MoveElement:
    element_id: str
    direction: str  # "up" | "down"


@dataclass(frozen=True)
class SelectElement:
    element_id: Optional[str]


@dataclass(frozen=True)
class MoveIntoParent:
    element_id: str
    parent_id: str


@dataclass(frozen=True)
class MoveOutOfParent:
    element_id: str


@dataclass(frozen=True)
class ReorderElements:
    active_id: str
    over_id: str


@dataclass(frozen=True)
class StoreState:
    project: ScriptProject
    selected_element_id: Optional[str] = None


# =========================================================================
# Reducer
# =========================================================================

def _with_elements(state: StoreState, elements: List[UIElement], **changes: Any) -> StoreState:
    project = replace(state.project, elements=elements, updated_at=now_iso())
    return replace(state, project=project, **changes)


def reduce(state: StoreState, action: Any) -> StoreState:
    """Apply one action and return the next state.

    Actions that reference unknown elements return ``state`` unchanged.
    """
    project = state.project

    if isinstance(action, NewProject):
        return StoreState(project=create_project(action.name))

    if isinstance(action, LoadProject):
        return StoreState(project=action.project)

    if isinstance(action, SetClassKind):
        return replace(state, project=replace(project, class_kind=action.class_kind, updated_at=now_iso()))

    if isinstance(action, UpdateSettings):
        settings = replace(project.settings, **action.changes)
        return replace(state, project=replace(project, settings=settings, updated_at=now_iso()))

    if isinstance(action, AddElement):
        element = create_element(action.element_type)
        if action.parent_id is not None:
            parent = find_element(project.elements, action.parent_id)
            if parent is None or not is_layout(parent.type):
                return state
        elements = insert_element(project.elements, element, action.parent_id)
        return _with_elements(state, elements, selected_element_id=element.id)

    if isinstance(action, RemoveElement):
        elements, removed = remove_element(project.elements, action.element_id)
        if removed is None:
            return state
        selected = state.selected_element_id
        if selected is not None and contains_element(removed, selected):
            selected = None
        return _with_elements(state, elements, selected_element_id=selected)

    if isinstance(action, UpdateElement):
        updates = {k: v for k, v in action.updates.items() if k not in _PROTECTED_ELEMENT_FIELDS}
        if len(updates) != len(action.updates):
            logger.debug(f"Ignoring structural fields in element update: {sorted(set(action.updates) - set(updates))}")
        if not updates or find_element(project.elements, action.element_id) is None:
            return state
        return _with_elements(state, update_element(project.elements, action.element_id, **updates))

    if isinstance(action, MoveElement):
        return _with_elements(state, move_element(project.elements, action.element_id, action.direction))

    if isinstance(action, SelectElement):
        return replace(state, selected_element_id=action.element_id)

    if isinstance(action, MoveIntoParent):
        element = find_element(project.elements, action.element_id)
        parent = find_element(project.elements, action.parent_id)
        if element is None or parent is None or not is_layout(parent.type):
            return state
        # Moving an element into its own subtree would orphan it.
        if contains_element(element, action.parent_id):
            return state
        remaining, removed = remove_element(project.elements, action.element_id)
        return _with_elements(state, insert_element(remaining, removed, action.parent_id))

    if isinstance(action, MoveOutOfParent):
        parent_id = find_parent_id(project.elements, action.element_id)
        if parent_id is None:
            return state
        grandparent_id = find_parent_id(project.elements, parent_id)
        remaining, removed = remove_element(project.elements, action.element_id)
        siblings = remaining if grandparent_id is None else find_element(remaining, grandparent_id).children
        parent_index = [e.id for e in siblings].index(parent_id)
        elements = insert_element(remaining, removed, grandparent_id, parent_index + 1)
        return _with_elements(state, elements)

    if isinstance(action, ReorderElements):
        return _with_elements(state, reorder_elements(project.elements, action.active_id, action.over_id))

    logger.warning(f"Unknown store action: {type(action).__name__}")
    return state


class ProjectStore:
    """Holds the live project and selection.

    Usage:
        store = ProjectStore()
        store.dispatch(AddElement(ElementType.BUTTON))
        store.state.project.elements
    """

    def __init__(self, project: Optional[ScriptProject] = None):
        self._state = StoreState(project=project or create_project())
        self._listeners: List[Callable[[StoreState], None]] = []

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def selected_element(self) -> Optional[UIElement]:
        if self._state.selected_element_id is None:
            return None
        return find_element(self._state.project.elements, self._state.selected_element_id)

    def subscribe(self, listener: Callable[[StoreState], None]) -> Callable[[], None]:
        """Register a listener called after each state change; returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, action: Any) -> StoreState:
        next_state = reduce(self._state, action)
        if next_state is not self._state:
            self._state = next_state
            for listener in list(self._listeners):
                listener(next_state)
        return self._state
