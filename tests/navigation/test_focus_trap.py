from mes_backend.navigation import FocusTrap, KeyEvent, MemoryDocument
from mes_backend.navigation.dom import SIDEBAR_CLOSE


def test_trap_collects_focusable_children_in_order(controller):
    controller.open_sidebar()

    assert controller.sidebar.trap.focusables == [
        SIDEBAR_CLOSE,
        "sidebar-link-home",
        "sidebar-link-tos",
        "sidebar-link-privacy",
    ]


def test_tab_on_last_wraps_to_first(controller, document):
    controller.open_sidebar()
    document.focus("sidebar-link-privacy")

    event = document.press("Tab")

    assert document.active_element == SIDEBAR_CLOSE
    assert event.default_prevented is True


def test_shift_tab_on_first_wraps_to_last(controller, document):
    controller.open_sidebar()
    document.focus(SIDEBAR_CLOSE)

    event = document.press("Tab", shift=True)

    assert document.active_element == "sidebar-link-privacy"
    assert event.default_prevented is True


def test_tab_in_the_middle_is_left_alone(controller, document):
    controller.open_sidebar()
    document.focus("sidebar-link-tos")

    event = document.press("Tab")

    assert document.active_element == "sidebar-link-tos"
    assert event.default_prevented is False


def test_other_keys_are_ignored(controller, document):
    controller.open_sidebar()
    document.focus("sidebar-link-privacy")

    event = document.press("ArrowDown")

    assert document.active_element == "sidebar-link-privacy"
    assert event.default_prevented is False


def test_closed_sidebar_does_not_trap(controller, document):
    controller.open_sidebar()
    controller.close_sidebar()
    document.focus("sidebar-link-privacy")

    event = document.press("Tab")

    assert document.active_element == "sidebar-link-privacy"
    assert event.default_prevented is False


def test_release_is_idempotent():
    doc = MemoryDocument()
    doc.create_element("panel")
    doc.create_element("first", tag="button", parent="panel")
    doc.create_element("skipped", tag="div", parent="panel", tabindex="-1")
    doc.create_element("last", tag="input", parent="panel")

    trap = FocusTrap(doc, "panel")
    trap.install()
    trap.install()
    assert trap.focusables == ["first", "last"]
    assert doc.listener_count("panel", "keydown") == 1

    trap.release()
    trap.release()

    assert trap.installs == 1
    assert trap.releases == 1
    assert doc.listener_count("panel", "keydown") == 0


def test_empty_container_never_moves_focus():
    doc = MemoryDocument()
    doc.create_element("panel")
    doc.create_element("label", parent="panel")
    trap = FocusTrap(doc, "panel")
    trap.install()

    event = doc.dispatch("panel", KeyEvent.keydown("Tab"))

    assert event.default_prevented is False
    assert doc.active_element is None
