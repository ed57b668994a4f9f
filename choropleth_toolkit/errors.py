"""Error taxonomy for the choropleth controller.

Out-of-range slider and keyboard input has no exception type: it is clamped
or ignored where it arrives and only shows up in DEBUG logs.
"""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised at construction when no usable map UI can be built.

    Typical causes are a layout missing one of the required elements or a
    feature collection whose length does not match the dataset.
    """


class MissingDataError(LookupError):
    """Raised when a datum needed for a color or tooltip is not available."""


__all__ = ["ConfigurationError", "MissingDataError"]
