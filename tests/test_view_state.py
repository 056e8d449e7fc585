import pytest

from core.view_state import (
    apply_customers,
    begin_reload,
    clear_selection,
    is_filtering,
    new_view_state,
    select_customer,
    selected_customer,
    set_status_filter,
)


def test_latest_reload_wins_over_stale_response():
    """
    Regression test:
    reload A starts, reload B starts, A answers late → A is dropped
    """
    state = new_view_state()

    first = begin_reload(state)
    second = begin_reload(state)

    assert apply_customers(state, [{"id": 2}], second)
    assert not apply_customers(state, [{"id": 1}], first)

    assert state["customers"] == [{"id": 2}]


def test_collection_is_replaced_not_patched():
    state = new_view_state()
    apply_customers(state, [{"id": 1}, {"id": 2}], begin_reload(state))

    incoming = [{"id": 3}]
    apply_customers(state, incoming, begin_reload(state))

    assert state["customers"] == [{"id": 3}]
    assert state["customers"] is not incoming


def test_selection_round_trip():
    state = new_view_state()
    apply_customers(state, [{"id": 1}, {"id": 2}], begin_reload(state))

    select_customer(state, 2)
    assert selected_customer(state) == {"id": 2}

    clear_selection(state)
    assert selected_customer(state) is None


def test_selected_customer_gone_after_reload():
    state = new_view_state()
    apply_customers(state, [{"id": 1}], begin_reload(state))
    select_customer(state, 1)

    apply_customers(state, [{"id": 5}], begin_reload(state))

    assert selected_customer(state) is None


def test_status_filter_validation_and_filtering_flag():
    state = new_view_state()
    assert not is_filtering(state)

    set_status_filter(state, "completed")
    assert is_filtering(state)

    with pytest.raises(ValueError):
        set_status_filter(state, "late")

    set_status_filter(state, "all")
    state["search_term"] = "ravi"
    assert is_filtering(state)
