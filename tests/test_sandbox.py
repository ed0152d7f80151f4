import asyncio
import json

import pytest

from studio.application import SandboxChannel
from studio.domain.sandbox import (
    CIRCULAR,
    PERSISTENT_OUTLINE,
    TRANSIENT_OUTLINE,
    UNSERIALIZABLE,
    ClearSelectionMessage,
    ConsoleMessage,
    ConsoleRelay,
    Element,
    ElementPicker,
    ElementSelectedMessage,
    LogLevel,
    LogWindow,
    PreviewHost,
    PreviewTab,
    ToggleSelectorMessage,
    compute_selector,
    parse_message,
    render_args,
    render_value,
)
from studio.domain.shared import Err, Ok


# =============================================================================
# Console relay
# =============================================================================


def test_render_scalars():
    assert render_value(None) == "null"
    assert render_value("plain") == "plain"
    assert render_value(True) == "true"
    assert render_value(42) == "42"


def test_render_containers_as_indented_json():
    assert render_value({"a": [1, 2]}) == json.dumps({"a": [1, 2]}, indent=2)


def test_render_circular_reference():
    data = {"name": "root"}
    data["self"] = data
    assert json.loads(render_value(data)) == {"name": "root", "self": CIRCULAR}


def test_render_unserializable():
    assert render_value({"obj": object()}) == UNSERIALIZABLE


def test_render_functions():
    def handle_click():
        pass

    assert render_value(handle_click) == "[Function: handle_click]"
    assert render_value(lambda: None) == "[Function: anonymous]"


def test_render_exception():
    try:
        raise ValueError("boom")
    except ValueError as e:
        rendered = render_value(e)
    assert rendered.startswith("Error: boom\n")
    assert "ValueError: boom" in rendered


def test_render_args_joins_with_space():
    assert render_args("count:", 3, None) == "count: 3 null"


def test_relay_sends_console_messages():
    sent = []
    relay = ConsoleRelay(sent.append)

    relay.warn("careful", {"x": 1})
    relay.uncaught("x is not defined", "App.tsx", 12)
    relay.unhandled_rejection("timeout")

    assert sent[0].level == "warn"
    assert sent[0].message.startswith("careful {")
    assert sent[1] == ConsoleMessage(level="error", message="Uncaught Error: x is not defined at App.tsx:12")
    assert sent[2].message == "Unhandled Promise Rejection: timeout"


# =============================================================================
# Messages
# =============================================================================


def test_parse_known_messages():
    result = parse_message({"type": "element-selected", "selector": "div#app", "text": "Hi"})
    assert isinstance(result, Ok)
    assert isinstance(result.value, ElementSelectedMessage)


@pytest.mark.parametrize(
    "data",
    [
        {"type": "navigate", "url": "https://example.com"},
        {"type": "element-selected"},
        {"type": "toggle-selector", "enabled": "maybe"},
        "console",
        None,
    ],
)
def test_parse_rejects_malformed(data):
    assert isinstance(parse_message(data), Err)


# =============================================================================
# Element picker
# =============================================================================


def document():
    body = Element("BODY")
    body.append(Element("div", text="first"))
    second = body.append(Element("div"))
    second.append(Element("p", text="intro"))
    span = second.append(Element("span", text="  Buy now  "))
    named = body.append(Element("section", id="hero banner"))
    return body, span, named


def test_selector_uses_nth_of_type():
    _, span, _ = document()
    assert compute_selector(span) == "body > div:nth-of-type(2) > span"


def test_selector_id_shortcut_escapes_spaces():
    _, _, named = document()
    assert compute_selector(named) == "section#hero\\ banner"


def test_picker_disarmed_ignores_hover_and_click():
    picker = ElementPicker(lambda message: None)
    _, span, _ = document()

    picker.hover(span)
    assert span.outline == ""
    assert picker.click(span) is None


def test_picker_hover_click_flow():
    sent = []
    picker = ElementPicker(sent.append)
    body, span, named = document()

    picker.handle(ToggleSelectorMessage(enabled=True))
    assert picker.cursor == "crosshair"

    picker.hover(named)
    assert named.outline == TRANSIENT_OUTLINE
    picker.hover(span)
    assert named.outline == ""
    assert span.outline == TRANSIENT_OUTLINE

    message = picker.click(span)

    assert sent == [message]
    assert message.selector == "body > div:nth-of-type(2) > span"
    assert message.text == "Buy now"
    assert span.outline == PERSISTENT_OUTLINE
    assert picker.armed is False


def test_hover_never_touches_persistent_element():
    picker = ElementPicker(lambda message: None)
    _, span, _ = document()
    picker.handle(ToggleSelectorMessage(enabled=True))
    picker.click(span)

    picker.handle(ToggleSelectorMessage(enabled=True))
    picker.hover(span)
    picker.leave()

    assert span.outline == PERSISTENT_OUTLINE


def test_clear_selection_only_clears_persistent():
    picker = ElementPicker(lambda message: None)
    _, span, named = document()
    picker.handle(ToggleSelectorMessage(enabled=True))
    picker.click(span)
    picker.handle(ToggleSelectorMessage(enabled=True))
    picker.hover(named)

    picker.handle(ClearSelectionMessage())

    assert span.outline == ""
    assert named.outline == TRANSIENT_OUTLINE


def test_disarm_clears_both_highlights():
    picker = ElementPicker(lambda message: None)
    _, span, named = document()
    picker.handle(ToggleSelectorMessage(enabled=True))
    picker.click(span)
    picker.handle(ToggleSelectorMessage(enabled=True))
    picker.hover(named)

    picker.handle(ToggleSelectorMessage(enabled=False))

    assert span.outline == ""
    assert named.outline == ""
    assert picker.cursor == "default"


# =============================================================================
# Host
# =============================================================================


def test_log_window_is_bounded_newest_first():
    host = PreviewHost(window_size=3)
    for i in range(5):
        host.handle(ConsoleMessage(level="log", message=f"line {i}"))

    assert len(host.logs) == 3
    assert [entry.message for entry in host.logs.recent()] == ["line 4", "line 3", "line 2"]
    assert [entry.message for entry in host.logs.recent(1)] == ["line 4"]


def test_unknown_level_becomes_log():
    host = PreviewHost()
    host.handle(ConsoleMessage(level="trace", message="x"))
    assert host.logs.recent()[0].level == LogLevel.LOG


def test_error_switches_to_console_and_is_fixable_once():
    host = PreviewHost()
    host.handle(ConsoleMessage(level="error", message="first"))
    host.select_tab(PreviewTab.PREVIEW)
    host.handle(ConsoleMessage(level="error", message="second"))

    assert host.tab == PreviewTab.CONSOLE
    assert host.fixable_error.message == "first"


def test_tab_changes_are_reported_once():
    seen = []
    host = PreviewHost(tab=PreviewTab.PREVIEW, on_tab_change=seen.append)

    host.handle(ConsoleMessage(level="error", message="first"))
    host.handle(ConsoleMessage(level="error", message="second"))
    host.select_tab(PreviewTab.PREVIEW)

    assert seen == [PreviewTab.CONSOLE, PreviewTab.PREVIEW]


def test_warnings_do_not_switch_tab():
    host = PreviewHost()
    host.handle(ConsoleMessage(level="warn", message="deprecated"))
    assert host.tab == PreviewTab.PREVIEW
    assert host.fixable_error is None


def test_element_selected_stores_descriptor_and_disarms():
    sent = []
    host = PreviewHost(send=sent.append)
    assert host.toggle_picker() is True

    host.handle(ElementSelectedMessage(selector="h1", text="Title"))

    assert host.selected.selector == "h1"
    assert host.picker_armed is False
    assert sent == [ToggleSelectorMessage(enabled=True)]


def test_take_context_consumes_selection_and_resets_error():
    sent = []
    host = PreviewHost(send=sent.append)
    host.handle(ElementSelectedMessage(selector="h1", text="Title"))
    host.handle(ConsoleMessage(level="error", message="bad"))

    selected = host.take_context()

    assert selected.selector == "h1"
    assert host.selected is None
    assert host.fixable_error is None
    assert sent == [ClearSelectionMessage()]


def test_refresh_clears_logs_and_disarms():
    host = PreviewHost()
    host.toggle_picker(True)
    host.handle(ConsoleMessage(message="hello"))

    host.refresh()

    assert len(host.logs) == 0
    assert host.picker_armed is False


def test_log_window_clear():
    window = LogWindow(2)
    window.clear()
    assert window.recent() == []


# =============================================================================
# Channel
# =============================================================================


def test_channel_delivers_and_drops_malformed():
    async def scenario():
        channel = SandboxChannel()
        host = PreviewHost()
        picker = ElementPicker(channel.post_to_host)
        relay = ConsoleRelay(channel.post_to_host)
        host.connect(channel.post_to_surface)
        runner = asyncio.create_task(channel.run(host, picker))

        assert channel.post_to_host({"type": "bogus"}) is False
        relay.error("Uncaught Error: boom")
        host.toggle_picker(True)
        await asyncio.sleep(0.01)

        root = Element("main")
        button = root.append(Element("button", text="Go"))
        picker.click(button)
        await asyncio.sleep(0.01)

        channel.close()
        await asyncio.wait_for(runner, timeout=1)
        return host

    host = asyncio.run(scenario())

    assert [entry.message for entry in host.logs.recent()] == ["Uncaught Error: boom"]
    assert host.selected.selector == "main > button"
    assert host.picker_armed is False
