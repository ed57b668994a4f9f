from __future__ import annotations

from choropleth_toolkit.PointerDriver import PointerDriver


def test_default_host_class_is_the_map_shell() -> None:
    assert PointerDriver().host_class == "choropleth-shell"
    assert PointerDriver(host_class="my-shell").host_class == "my-shell"


def test_frontend_moves_reach_callbacks_with_shell_coordinates() -> None:
    driver = PointerDriver()
    received: list[tuple] = []
    driver.on_pointer(lambda kind, x, y, raw: received.append((kind, x, y, raw["pageX"])))

    driver._handle_custom_msg({"type": "mousemove", "x": 12, "y": 34.5, "pageX": 412, "pageY": 934}, [])
    driver._handle_custom_msg({"type": "mouseout", "x": -3, "y": 40, "pageX": 397, "pageY": 940}, [])

    assert received == [("mousemove", 12.0, 34.5, 412), ("mouseout", -3.0, 40.0, 397)]


def test_unrelated_or_malformed_messages_are_ignored() -> None:
    driver = PointerDriver()
    received: list[str] = []
    driver.on_pointer(lambda kind, x, y, raw: received.append(kind))

    driver._handle_custom_msg({"type": "click", "x": 1, "y": 2}, [])
    driver._handle_custom_msg({"type": "mousemove", "x": "left", "y": 2}, [])
    driver._handle_custom_msg({"type": "mousemove"}, [])
    driver._handle_custom_msg("noise", [])

    assert received == []


def test_esm_tracks_the_enclosing_shell_per_view() -> None:
    source = PointerDriver._esm

    assert "el.closest(" in source
    assert 'addEventListener("mousemove"' in source
    assert 'addEventListener("mouseleave"' in source
    assert "getBoundingClientRect" in source
    assert 'removeEventListener("mousemove"' in source
