from __future__ import annotations

from choropleth_toolkit.KeyboardDriver import KeyboardDriver


def test_default_key_codes_are_the_arrow_keys() -> None:
    assert KeyboardDriver().key_codes == [37, 39]


def test_key_codes_can_be_overridden() -> None:
    assert KeyboardDriver(key_codes=[65, 68]).key_codes == [65, 68]


def test_frontend_keydown_messages_reach_callbacks() -> None:
    driver = KeyboardDriver()
    received: list[tuple[int, dict]] = []
    driver.on_keydown(lambda code, raw: received.append((code, raw)))

    driver._handle_custom_msg({"type": "keydown", "keyCode": 39}, [])

    assert received == [(39, {"type": "keydown", "keyCode": 39})]


def test_unrelated_or_malformed_messages_are_ignored() -> None:
    driver = KeyboardDriver()
    received: list[int] = []
    driver.on_keydown(lambda code, raw: received.append(code))

    driver._handle_custom_msg({"type": "keyup", "keyCode": 39}, [])
    driver._handle_custom_msg({"type": "keydown", "keyCode": "left"}, [])
    driver._handle_custom_msg("noise", [])

    assert received == []


def test_esm_listens_on_document_and_prevents_default() -> None:
    source = KeyboardDriver._esm

    assert 'addEventListener("keydown"' in source
    assert "preventDefault" in source
    assert "model.send" in source


def test_document_listener_is_attached_once_per_model() -> None:
    source = KeyboardDriver._esm
    initialize, _, render = source.partition("render(")

    assert "initialize({ model })" in initialize
    assert source.index("initialize") < source.index("addEventListener")
    assert "addEventListener" not in render
