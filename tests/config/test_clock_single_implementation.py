"""Only one concrete ClockPort lives in the infrastructure layer."""

import inspect
from datetime import UTC

from medassist.application.ports.clock_port import ClockPort
from medassist.config.composition import build_clock
from medassist.infrastructure.time import system_clock


def test_only_one_clock_implementation():
    impls = [
        cls
        for _, cls in inspect.getmembers(system_clock, inspect.isclass)
        if issubclass(cls, ClockPort) and cls is not ClockPort
    ]
    assert len(impls) == 1, f"Expected exactly one ClockPort implementation, found: {impls}"
    assert impls[0].__name__ == "SystemClock"


def test_clock_port_is_abstract():
    with_error = False
    try:
        ClockPort()  # type: ignore[abstract]
    except TypeError:
        with_error = True
    assert with_error, "ClockPort should be abstract and raise TypeError on instantiation"


def test_system_clock_returns_utc():
    now = build_clock().now()
    assert now.tzinfo is not None
    assert now.utcoffset() == UTC.utcoffset(now)
