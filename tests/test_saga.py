import logging

import pytest

from invoicedesk.core.errors import RecordStoreFailure
from invoicedesk.services.saga import Saga


def _fail(operation):
    def action(ctx):
        raise RecordStoreFailure(operation, "boom")

    return action


def test_saga_runs_steps_in_order_and_collects_results():
    calls = []
    saga = Saga("demo")
    saga.add_step("first", lambda ctx: calls.append("first") or 1)
    saga.add_step("second", lambda ctx: calls.append("second") or ctx["first"] + 1)

    context = saga.run()

    assert calls == ["first", "second"]
    assert context["second"] == 2
    assert saga.completed == ["first", "second"]


def test_saga_compensates_completed_steps_in_reverse():
    undone = []
    saga = Saga("demo")
    saga.add_step("a", lambda ctx: "a", compensation=lambda ctx: undone.append("a"))
    saga.add_step("b", lambda ctx: "b")
    saga.add_step("c", lambda ctx: "c", compensation=lambda ctx: undone.append("c"))
    saga.add_step("d", _fail("d"))

    with pytest.raises(RecordStoreFailure) as exc_info:
        saga.run()

    assert exc_info.value.operation == "d"
    assert undone == ["c", "a"]
    assert saga.compensated == ["c", "a"]


def test_saga_skips_optional_step_failure(caplog):
    saga = Saga("demo")
    saga.add_step("optional", _fail("optional"), compensation=lambda ctx: None, required=False)
    saga.add_step("after", lambda ctx: "ran")

    with caplog.at_level(logging.WARNING, logger="invoicedesk.services.saga"):
        context = saga.run()

    assert context["after"] == "ran"
    assert saga.skipped == ["optional"]
    assert "optional" not in saga.completed
    assert "continuing" in caplog.text


def test_failed_compensation_does_not_mask_original_error(caplog):
    def broken_undo(ctx):
        raise RecordStoreFailure("undo", "also broken")

    saga = Saga("demo")
    saga.add_step("a", lambda ctx: "a", compensation=broken_undo)
    saga.add_step("b", _fail("b"))

    with caplog.at_level(logging.ERROR, logger="invoicedesk.services.saga"):
        with pytest.raises(RecordStoreFailure) as exc_info:
            saga.run()

    assert exc_info.value.operation == "b"
    assert saga.compensated == []
    assert "compensation for a failed" in caplog.text


def test_unexpected_errors_also_trigger_compensation():
    undone = []
    saga = Saga("demo")
    saga.add_step("a", lambda ctx: "a", compensation=lambda ctx: undone.append("a"))
    saga.add_step("b", lambda ctx: 1 / 0)

    with pytest.raises(ZeroDivisionError):
        saga.run()
    assert undone == ["a"]
