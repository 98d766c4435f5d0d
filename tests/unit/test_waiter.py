import asyncio

import pytest

from ui_query.core.errors import QueryConfigError, WaitTimeoutError
from ui_query.core.poller import ElementPoller
from ui_query.core.waiter import ElementWaiter
from ui_query.utils.timing import Stopwatch


class Flaky(Exception):
    pass


def _waiter(elem, poller=None, message="timed out"):
    return ElementWaiter(element=elem, poller=poller or ElementPoller.no_wait(), message=message)


def counting(results):
    """Predicate returning (or raising) successive items of `results`, then the last one forever."""
    state = {"n": 0}

    async def predicate(elem):
        idx = min(state["n"], len(results) - 1)
        state["n"] += 1
        outcome = results[idx]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    predicate.state = state
    return predicate


@pytest.mark.asyncio
async def test_condition_passes_on_first_evaluation(make_element):
    pred = counting([True])
    await _waiter(make_element()).condition(pred)
    assert pred.state["n"] == 1


@pytest.mark.asyncio
async def test_no_wait_evaluates_exactly_once(make_element):
    pred = counting([False])
    with Stopwatch() as sw:
        with pytest.raises(WaitTimeoutError, match="never shown"):
            await _waiter(make_element(), message="never shown").condition(pred)
    assert pred.state["n"] == 1
    assert sw.elapsed_ms() < 50


@pytest.mark.asyncio
async def test_fixed_count_bounds_evaluations_and_delay(make_element):
    pred = counting([False])
    with Stopwatch() as sw:
        with pytest.raises(WaitTimeoutError):
            await _waiter(make_element(), ElementPoller.fixed_count(10, 3)).condition(pred)
    assert pred.state["n"] == 4
    assert sw.elapsed_ms() >= 30


@pytest.mark.asyncio
@pytest.mark.parametrize("timeout_ms,interval_ms", [(0, 0), (0, 50), (30, 100)])
async def test_timeout_always_evaluates_once(make_element, timeout_ms, interval_ms):
    pred = counting([False])
    with pytest.raises(WaitTimeoutError):
        await _waiter(make_element()).wait(timeout_ms, interval_ms).condition(pred)
    assert pred.state["n"] == 1


@pytest.mark.asyncio
async def test_timeout_scenario_carries_message_and_respects_deadline(make_element):
    pred = counting([False])
    with Stopwatch() as sw:
        with pytest.raises(WaitTimeoutError) as err:
            await _waiter(make_element(), message="timeout msg").wait(300, 20).condition(pred)
    assert "timeout msg" in str(err.value)
    assert err.value.message == "timeout msg"
    assert 280 <= sw.elapsed_ms() < 600
    assert pred.state["n"] <= 16


@pytest.mark.asyncio
async def test_eventual_success(make_element):
    pred = counting([False, False, True])
    await _waiter(make_element()).wait(2000, 10).condition(pred)
    assert pred.state["n"] == 3


@pytest.mark.asyncio
async def test_conditions_short_circuit_within_a_tick(make_element):
    first = counting([False, False, True])
    second = counting([True])
    await _waiter(make_element(), ElementPoller.fixed_count(1, 5)).conditions([first, second])
    assert first.state["n"] == 3
    assert second.state["n"] == 1


@pytest.mark.asyncio
async def test_conditions_must_hold_on_the_same_tick(make_element):
    # each predicate is true on alternate ticks, never on the same one
    state = {"tick": 0}

    async def first(elem):
        state["tick"] += 1
        return state["tick"] % 2 == 1

    async def second(elem):
        return state["tick"] % 2 == 0

    with pytest.raises(WaitTimeoutError):
        await _waiter(make_element(), ElementPoller.fixed_count(1, 3)).conditions([first, second])


@pytest.mark.asyncio
async def test_tolerant_waiter_recovers_from_transient_errors(make_element):
    pred = counting([Flaky("stale"), Flaky("stale"), True])
    await _waiter(make_element()).wait(2000, 10).condition(pred)
    assert pred.state["n"] == 3


@pytest.mark.asyncio
async def test_intolerant_waiter_fails_on_first_error(make_element):
    pred = counting([Flaky("transport down"), True])
    waiter = _waiter(make_element()).wait(2000, 10).ignore_errors(False)
    with pytest.raises(Flaky, match="transport down"):
        await waiter.condition(pred)
    assert pred.state["n"] == 1


@pytest.mark.asyncio
async def test_error_in_first_predicate_skips_the_rest(make_element):
    first = counting([Flaky("boom"), True])
    second = counting([True])
    await _waiter(make_element(), ElementPoller.fixed_count(1, 3)).conditions([first, second])
    assert first.state["n"] == 2
    assert second.state["n"] == 1


@pytest.mark.asyncio
async def test_sync_predicates_are_accepted(make_element):
    elem = make_element(text="ready")
    await _waiter(elem).condition(lambda e: e is elem)


@pytest.mark.asyncio
async def test_empty_conditions_fail_fast(make_element):
    with pytest.raises(QueryConfigError):
        await _waiter(make_element()).conditions([])


@pytest.mark.asyncio
async def test_wait_can_be_cancelled_from_outside(make_element):
    pred = counting([False])
    waiter = _waiter(make_element()).wait(10_000, 10)
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(waiter.condition(pred), timeout=0.1)


def test_configuration_returns_copies(make_element):
    base = _waiter(make_element())
    tuned = base.wait(1000, 50).ignore_errors(False)
    assert base.poller == ElementPoller.no_wait()
    assert base.tolerate_errors is True
    assert tuned.poller == ElementPoller.timeout_with_interval(1000, 50)
    assert tuned.tolerate_errors is False
    assert tuned.with_poller(ElementPoller.fixed_count(5, 2)).poller.max_attempts == 2


# ---------- named conditions ----------


@pytest.mark.asyncio
async def test_displayed_waits_for_element_to_show(make_element):
    elem = make_element(displayed=False)

    async def reveal():
        await asyncio.sleep(0.03)
        elem.displayed = True

    task = asyncio.get_running_loop().create_task(reveal())
    await _waiter(elem).wait(1000, 10).displayed()
    await task


@pytest.mark.asyncio
async def test_stale_times_out_while_element_is_attached(make_element):
    elem = make_element(present=True)
    with pytest.raises(WaitTimeoutError, match="button to become stale"):
        await _waiter(elem, message="Timed out waiting for button to become stale").wait(30, 10).stale()


@pytest.mark.asyncio
async def test_stale_passes_once_detached(make_element):
    await _waiter(make_element(present=False)).stale()


@pytest.mark.asyncio
async def test_state_conditions(make_element):
    elem = make_element(displayed=False, selected=True, enabled=False)
    w = _waiter(elem)
    await w.not_displayed()
    await w.selected()
    await w.not_enabled()
    await w.not_clickable()
    with pytest.raises(WaitTimeoutError):
        await w.clickable()
    elem.enabled = True
    elem.displayed = True
    elem.selected = False
    await w.enabled()
    await w.clickable()
    await w.not_selected()


@pytest.mark.asyncio
async def test_value_conditions(make_element):
    elem = make_element(
        text="Hello world",
        attributes={"class": "btn btn-primary", "type": "submit"},
        properties={"value": "42", "checked": "false"},
        css={"display": "block"},
    )
    w = _waiter(elem)
    await w.has_class("btn-primary")
    await w.lacks_class("disabled")
    await w.has_text("Hello world")
    await w.lacks_text("Goodbye")
    await w.has_value("42")
    await w.lacks_value("7")
    await w.has_attribute("type", "submit")
    await w.lacks_attribute("type", "button")
    await w.has_attributes({"type": "submit", "class": "btn btn-primary"})
    await w.lacks_attributes([("type", "reset"), ("data-x", "1")])
    await w.has_property("checked", "false")
    await w.lacks_property("indeterminate", "true")
    await w.has_properties([("value", "42"), ("checked", "false")])
    await w.lacks_properties({"value": "0"})
    await w.has_css_property("display", "block")
    await w.lacks_css_property("display", "none")
    await w.has_css_properties({"display": "block"})
    await w.lacks_css_properties({"display": "none", "visibility": "hidden"})
    with pytest.raises(WaitTimeoutError):
        await w.has_attributes({"type": "submit", "class": "missing"})
