"""Date index navigation: slider, arrow-key steps and the current-date text."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Callable, Optional

import ipywidgets as widgets

from .map_layout import insert_before

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class DateNavigator:
    """
    Wrap the current date index and keep it inside ``[0, date_count - 1]``.

    ``set_index`` (used by the slider) clamps silently; ``step`` (used by the
    keyboard) does nothing at either boundary. Whenever the index actually
    changes the current-date text is updated and ``on_change`` is called.

    Parameters
    ----------
    dates : sequence of str
        The date axis, already sorted.
    date_label : ipywidgets.HTML, optional
        Widget showing the current date.
    on_change : callable, optional
        Called with the new index after each change.
    """

    def __init__(
        self,
        dates: Sequence[str],
        date_label: Optional[widgets.HTML] = None,
        on_change: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._dates = tuple(dates)
        self._date_label = date_label
        self._on_change = on_change
        self.slider: Optional[widgets.IntSlider] = None
        self.index = 0
        self._show_date()

    @property
    def dates(self) -> tuple[str, ...]:
        return self._dates

    @property
    def max_index(self) -> int:
        return max(len(self._dates) - 1, 0)

    @property
    def current_date(self) -> str:
        return self._dates[self.index]

    def build(self, shell: widgets.Box, before: Optional[widgets.Widget] = None) -> widgets.IntSlider:
        """Create the range slider and insert it into ``shell`` ahead of ``before``."""
        self.slider = widgets.IntSlider(
            value=self.index,
            min=0,
            max=self.max_index,
            step=1,
            readout=False,
            continuous_update=False,
            layout=widgets.Layout(width="100%"),
        )
        insert_before(shell, self.slider, before)
        return self.slider

    def set_index(self, index: int) -> bool:
        """Jump to ``index``, clamped into range.

        Returns
        -------
        bool
            ``True`` if the index changed.
        """
        requested = int(index)
        clamped = min(max(requested, 0), self.max_index)
        if clamped != requested:
            logger.debug("set_index: clamped %s to %s", requested, clamped)
        return self._move_to(clamped)

    def step(self, delta: int) -> bool:
        """Move ``delta`` positions; out-of-range moves are ignored.

        Returns
        -------
        bool
            ``True`` if the index changed.
        """
        target = self.index + int(delta)
        if not 0 <= target <= self.max_index:
            logger.debug("step(%+d): at boundary %s, ignored", delta, self.index)
            return False
        return self._move_to(target)

    def _move_to(self, index: int) -> bool:
        if index == self.index:
            self._sync_slider()
            return False
        self.index = index
        self._sync_slider()
        self._show_date()
        if self._on_change is not None:
            self._on_change(index)
        return True

    def _sync_slider(self) -> None:
        # The slider observer re-enters set_index with the same value, which
        # is a no-op.
        if self.slider is not None and self.slider.value != self.index:
            self.slider.value = self.index

    def _show_date(self) -> None:
        if self._date_label is not None and self._dates:
            self._date_label.value = self._dates[self.index]


__all__ = ["DateNavigator"]
