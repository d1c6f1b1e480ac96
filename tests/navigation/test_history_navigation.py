from mes_backend.navigation import MemoryHistory, PageController


def test_back_and_forward_follow_the_url_without_writing_history(controller, document, history):
    controller.init_page()
    document.click("sidebar-link-tos")
    document.click("sidebar-link-privacy")
    assert history.calls == [("push", "#tos"), ("push", "#privacy")]

    history.back()
    assert controller.state.current_section == "tos"
    assert document.title == "Terms of Service - Military Essentials"

    history.back()
    # No hash in the first entry means home.
    assert controller.state.current_section == "home"

    history.forward()
    assert controller.state.current_section == "tos"
    assert history.calls == [("push", "#tos"), ("push", "#privacy")]


def test_unknown_initial_hash_is_replaced_with_home(document, storage, scheduler):
    history = MemoryHistory(document, initial_hash="#gone")
    controller = PageController(document, history, storage, scheduler)

    assert controller.init_page() == "home"
    assert history.calls == [("replace", "#home")]
    assert len(history.entries) == 1


def test_popstate_to_unknown_hash_keeps_current_section(controller, document, history):
    controller.init_page()
    document.click("sidebar-link-privacy")
    history.push("#gone")

    history.back()
    assert controller.state.current_section == "privacy"

    history.forward()
    assert controller.state.current_section == "privacy"


def test_round_trip_hash_after_show_section(controller, history):
    controller.init_page()

    assert controller.show_section("#tos") is True

    assert history.hash == "#tos"
    assert history.calls == [("push", "#tos")]


def test_public_api_navigation_updates_the_url(controller, history):
    controller.init_page()

    controller.public_api()["show_section"]("privacy")

    assert history.hash == "#privacy"


def test_clicking_the_active_section_adds_no_history_entry(controller, document, history):
    controller.init_page()
    assert history.hash == ""

    document.click("sidebar-link-home")

    assert history.calls == []
    assert len(history.entries) == 1


def test_popstate_and_initial_load_never_push(document, storage, scheduler):
    storage.set_item("currentSection", "privacy")
    history = MemoryHistory(document, initial_hash="#tos")
    controller = PageController(document, history, storage, scheduler)

    controller.init_page()
    controller.show_section("home")
    history.back()

    assert controller.state.current_section == "tos"
    assert history.calls == [("push", "#home")]
