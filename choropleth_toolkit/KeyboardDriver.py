"""Browser keyboard bridge for the map.

ipywidgets has no key events, so the map uses a hidden ``anywidget`` whose
frontend listens for ``keydown`` on the document, suppresses the default
action of the configured keys and forwards them to Python as custom
messages.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

import anywidget
import traitlets

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class KeyboardDriver(anywidget.AnyWidget):
    """
    Frontend-only keydown listener.

    Only key codes listed in ``key_codes`` are forwarded; their default
    browser action (page scrolling for arrow keys) is prevented. Key presses
    inside text inputs are ignored so typing elsewhere on the page still works.

    The document listener is attached once per model in the frontend's
    ``initialize`` hook, so displaying the map twice does not double-step.
    """

    key_codes = traitlets.List(traitlets.Int(), default_value=[37, 39]).tag(sync=True)
    enabled = traitlets.Bool(True).tag(sync=True)

    _esm = r"""
    function isEditable(target) {
      if (!target) return false;
      const tag = (target.tagName || "").toLowerCase();
      return tag === "input" || tag === "textarea" || target.isContentEditable;
    }

    export default {
      // One document listener per model, however many views are displayed.
      initialize({ model }) {
        function onKeyDown(event) {
          if (!model.get("enabled")) return;
          const codes = model.get("key_codes") || [];
          if (!codes.includes(event.keyCode)) return;
          if (isEditable(event.target)) return;
          event.preventDefault();
          model.send({ type: "keydown", keyCode: event.keyCode });
        }

        const root = document.documentElement;
        root.addEventListener("keydown", onKeyDown, false);

        return () => {
          root.removeEventListener("keydown", onKeyDown, false);
        };
      },

      render({ el }) {
        el.style.display = "none";
      }
    }
    """

    def __init__(self, key_codes: Optional[List[int]] = None, **kwargs: Any) -> None:
        if key_codes is not None:
            kwargs["key_codes"] = [int(code) for code in key_codes]
        super().__init__(**kwargs)
        self._keydown_callbacks: List[Callable[[int, Any], None]] = []
        self.on_msg(self._handle_frontend_msg)

    def on_keydown(self, callback: Callable[[int, Any], None]) -> None:
        """Register ``callback(key_code, raw_message)`` for forwarded key presses."""
        self._keydown_callbacks.append(callback)

    def _handle_frontend_msg(self, _widget: Any, content: Any, _buffers: Any) -> None:
        if not isinstance(content, dict) or content.get("type") != "keydown":
            return
        try:
            key_code = int(content.get("keyCode"))
        except (TypeError, ValueError):
            logger.debug("ignoring malformed keydown message: %r", content)
            return
        for callback in list(self._keydown_callbacks):
            callback(key_code, content)


__all__ = ["KeyboardDriver"]
