"""Browser pointer bridge for the map tooltip.

Plotly hover callbacks say *which* region is under the pointer but carry no
pointer position, and they fire again only when the hovered region changes.
:class:`PointerDriver` is a hidden ``anywidget`` placed inside the map shell.
Its frontend finds the enclosing shell element, listens for ``mousemove`` and
``mouseleave`` on it and forwards the pointer position to Python:

- ``x``/``y``: position relative to the shell, the box the tooltip is
  absolutely positioned in (so the slider above the map is accounted for),
- ``pageX``/``pageY``: the raw page coordinates.

Moves are coalesced to one message per animation frame.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

import anywidget
import traitlets

from .InputEvent import MOUSEMOVE, MOUSEOUT

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

PointerCallback = Callable[[str, float, float, Any], None]


class PointerDriver(anywidget.AnyWidget):
    """
    Frontend-only pointer tracker for one map shell.

    Each view tracks the shell it is rendered in, so displaying the map twice
    gives each copy its own listener.
    """

    host_class = traitlets.Unicode("choropleth-shell").tag(sync=True)
    enabled = traitlets.Bool(True).tag(sync=True)

    _esm = r"""
    export default {
      render({ model, el }) {
        el.style.display = "none";

        let host = null;
        let frame = null;
        let pending = null;
        let tries = 0;
        let disposed = false;

        function send(type, event) {
          if (!model.get("enabled") || !host) return;
          const rect = host.getBoundingClientRect();
          model.send({
            type,
            x: event.clientX - rect.left,
            y: event.clientY - rect.top,
            pageX: event.pageX,
            pageY: event.pageY,
          });
        }

        function onMove(event) {
          const first = pending === null;
          pending = event;
          if (!first) return;
          requestAnimationFrame(() => {
            const latest = pending;
            pending = null;
            if (latest && !disposed) send("mousemove", latest);
          });
        }

        function onLeave(event) {
          pending = null;
          send("mouseout", event);
        }

        // The view element is attached to the page after render returns.
        function attach() {
          if (disposed) return;
          host = el.closest("." + model.get("host_class"));
          if (!host) {
            if (tries++ < 120) frame = requestAnimationFrame(attach);
            return;
          }
          host.addEventListener("mousemove", onMove, false);
          host.addEventListener("mouseleave", onLeave, false);
        }
        attach();

        return () => {
          disposed = true;
          if (frame !== null) cancelAnimationFrame(frame);
          if (host) {
            host.removeEventListener("mousemove", onMove, false);
            host.removeEventListener("mouseleave", onLeave, false);
          }
        };
      }
    }
    """

    def __init__(self, host_class: Optional[str] = None, **kwargs: Any) -> None:
        if host_class is not None:
            kwargs["host_class"] = str(host_class)
        super().__init__(**kwargs)
        self._pointer_callbacks: List[PointerCallback] = []
        self.on_msg(self._handle_frontend_msg)

    def on_pointer(self, callback: PointerCallback) -> None:
        """Register ``callback(kind, x, y, raw_message)``.

        ``kind`` is ``"mousemove"`` or ``"mouseout"``; ``x``/``y`` are relative
        to the shell.
        """
        self._pointer_callbacks.append(callback)

    def _handle_frontend_msg(self, _widget: Any, content: Any, _buffers: Any) -> None:
        if not isinstance(content, dict) or content.get("type") not in (MOUSEMOVE, MOUSEOUT):
            return
        try:
            x = float(content.get("x"))
            y = float(content.get("y"))
        except (TypeError, ValueError):
            logger.debug("ignoring malformed pointer message: %r", content)
            return
        for callback in list(self._pointer_callbacks):
            callback(content["type"], x, y, content)


__all__ = ["PointerDriver"]
