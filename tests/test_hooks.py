from dataclasses import replace
from datetime import date

import pytest

from src.timesheet_engine.timesheet_engine.core.exceptions import ValidationError
from src.timesheet_engine.timesheet_engine.hooks import HookChain

from tests.fakes import daily


def test_hooks_run_in_registration_order():
    chain = HookChain()
    seen = []
    chain.register("first", lambda v: seen.append("first"))
    chain.register("second", lambda v: replace(v, overtime_minutes=v.overtime_minutes + 1))
    chain.register("third", lambda v: seen.append(v.overtime_minutes))

    out = chain.run(daily(date(2025, 3, 4), overtime=10))

    assert out.overtime_minutes == 11
    assert seen == ["first", 11]
    assert chain.names() == ("first", "second", "third")


def test_register_rejects_empty_and_duplicate_names():
    chain = HookChain()
    chain.register("audit", lambda v: None)

    with pytest.raises(ValidationError):
        chain.register("audit", lambda v: None)
    with pytest.raises(ValidationError):
        chain.register("  ", lambda v: None)


def test_unregister():
    chain = HookChain()
    chain.register("audit", lambda v: None)

    assert chain.unregister("audit")
    assert not chain.unregister("audit")
    assert chain.names() == ()


def test_hook_errors_propagate():
    chain = HookChain()

    def boom(value):
        raise RuntimeError("hook failed")

    chain.register("boom", boom)

    with pytest.raises(RuntimeError):
        chain.run(daily(date(2025, 3, 4)))
