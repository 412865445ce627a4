"""
Show/hide toggles, eg. for revealing the solution to an exercise.

Each toggle element has a binary visibility that starts hidden and flips on
every activation. A `ToggleRegistry` owns the states for one display; the
`Solution` layout item renders a button and a region bound to one element.
"""

import enum
from typing import Any, Optional

from ggstudio.layout import Hiccup, JSRef, LayoutItem, ref


class Visibility(enum.Enum):
    SHOWN = "shown"
    HIDDEN = "hidden"


def flip(visibility: Visibility) -> Visibility:
    return Visibility.HIDDEN if visibility is Visibility.SHOWN else Visibility.SHOWN


class ToggleError(KeyError):
    def __init__(self, element_id: str, message: str):
        self.element_id = element_id
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]


class UnknownElementError(ToggleError):
    def __init__(self, element_id: str):
        super().__init__(element_id, f"No toggle element registered as {element_id!r}")


class DuplicateElementError(ToggleError):
    def __init__(self, element_id: str):
        super().__init__(
            element_id, f"A toggle element is already registered as {element_id!r}"
        )


class ToggleRegistry:
    """Visibility states for the toggle elements of one display session."""

    def __init__(self):
        self._states: dict[str, Visibility] = {}

    def register(
        self, element_id: str, initial_state: Visibility = Visibility.HIDDEN
    ) -> None:
        if not isinstance(element_id, str) or not element_id:
            raise ValueError("element_id must be a non-empty string")
        if element_id in self._states:
            raise DuplicateElementError(element_id)
        self._states[element_id] = Visibility(initial_state)

    def activate(self, element_id: str) -> Visibility:
        """Flip the element's visibility and return the new state."""
        if element_id not in self._states:
            raise UnknownElementError(element_id)
        self._states[element_id] = new_state = flip(self._states[element_id])
        return new_state

    def state(self, element_id: str) -> Visibility:
        if element_id not in self._states:
            raise UnknownElementError(element_id)
        return self._states[element_id]

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._states

    def __len__(self) -> int:
        return len(self._states)


_Toggle = JSRef("Toggle")


class Solution(LayoutItem):
    """
    A button that shows or hides `children`, starting hidden.

    Args:
        element_id: identifies the toggle element within `registry`.
        *children: content to reveal, eg. a chart or a Hiccup tree.
        registry: the ToggleRegistry that owns the element's visibility.
        show_label / hide_label: button text for each state.
    """

    def __init__(
        self,
        element_id: str,
        *children: Any,
        registry: ToggleRegistry,
        initial_state: Visibility = Visibility.HIDDEN,
        show_label: str = "Show solution",
        hide_label: str = "Hide solution",
    ):
        super().__init__()
        registry.register(element_id, initial_state)
        self.element_id = element_id
        self.children = children
        self.registry = registry
        self.labels = {
            Visibility.HIDDEN.value: show_label,
            Visibility.SHOWN.value: hide_label,
        }

    @property
    def visibility(self) -> Visibility:
        return self.registry.state(self.element_id)

    def on_activate(self, widget: Optional[Any], event: Any = None) -> Visibility:
        new_state = self.registry.activate(self.element_id)
        if widget is not None:
            widget.state.update({self.element_id: new_state.value})
        return new_state

    def for_json(self) -> Any:
        return Hiccup(
            _Toggle,
            {
                "state_key": self.element_id,
                "visibility": ref(self.visibility.value, id=self.element_id, sync=True),
                "labels": self.labels,
                "onToggle": self.on_activate,
            },
            *self.children,
        )


def solution(element_id: str, *children: Any, registry: ToggleRegistry, **kwargs) -> Solution:
    return Solution(element_id, *children, registry=registry, **kwargs)
