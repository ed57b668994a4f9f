"""Filter buttons and the active-label state machine."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Callable, List, Optional

import ipywidgets as widgets

from .map_layout import ACTIVE_CLASS, has_class

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class FilterController:
    """
    Manage which label is active and which filter button is marked active.

    Responsibilities:
    - Building one button per label inside the filter container.
    - Keeping exactly one button marked ``active``.
    - Notifying the owner when the active label changes so it can recompute
      the color domain and refresh the map.

    Parameters
    ----------
    labels : sequence of str
        Raw label keys, in display order.
    label_texts : sequence of str
        Display text per label.
    layout_box : ipywidgets.Box
        Container the buttons are appended to.
    on_select : callable, optional
        Called with the new label index after every successful selection.
    """

    def __init__(
        self,
        labels: Sequence[str],
        label_texts: Sequence[str],
        layout_box: widgets.Box,
        on_select: Optional[Callable[[int], None]] = None,
    ) -> None:
        if len(labels) != len(label_texts):
            raise ValueError("labels and label_texts must have the same length.")
        self._labels = tuple(labels)
        self._label_texts = tuple(label_texts)
        self._layout_box = layout_box
        self._on_select = on_select
        self._buttons: List[widgets.Button] = []
        self.current_index = 0

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    @property
    def buttons(self) -> List[widgets.Button]:
        return list(self._buttons)

    @property
    def current_label(self) -> str:
        return self._labels[self.current_index]

    @property
    def current_label_text(self) -> str:
        return self._label_texts[self.current_index]

    def build(self) -> None:
        """Create the filter buttons and mark the current label active."""
        buttons = []
        for i, (label, text) in enumerate(zip(self._labels, self._label_texts)):
            button = widgets.Button(
                description=text,
                tooltip=text,
                layout=widgets.Layout(width="auto"),
            )
            button.add_class("btn")
            button.add_class("btn-filter")
            # data-id / data-label
            setattr(button, "label_index", i)
            setattr(button, "label_key", label)
            buttons.append(button)

        self._buttons = buttons
        self._layout_box.children = tuple(self._layout_box.children) + tuple(buttons)
        if buttons:
            self._mark_active(self.current_index)

    def select_label(self, index: int) -> None:
        """Make ``index`` the active label.

        Raises
        ------
        IndexError
            If ``index`` is outside ``[0, label_count - 1]``.
        """
        index = int(index)
        if not 0 <= index < len(self._labels):
            raise IndexError(
                f"Label index {index} out of range for {len(self._labels)} labels."
            )
        self._mark_active(index)
        old = self.current_index
        self.current_index = index
        logger.debug("select_label: %s -> %s (%s)", old, index, self._labels[index])
        if self._on_select is not None:
            self._on_select(index)

    def active_indices(self) -> List[int]:
        """Indices of buttons currently marked active."""
        return [i for i, button in enumerate(self._buttons) if has_class(button, ACTIVE_CLASS)]

    def _mark_active(self, index: int) -> None:
        for i, button in enumerate(self._buttons):
            if i == index:
                if not has_class(button, ACTIVE_CLASS):
                    button.add_class(ACTIVE_CLASS)
                button.button_style = "primary"
            else:
                if has_class(button, ACTIVE_CLASS):
                    button.remove_class(ACTIVE_CLASS)
                button.button_style = ""


__all__ = ["FilterController"]
