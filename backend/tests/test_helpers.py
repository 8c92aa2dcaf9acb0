import logging

from nutriplan.errors import ErrorCode, status_for
from nutriplan.utils.numbers import percentage, round_half_up
from nutriplan.utils.timing import format_duration, time_span


def test_round_half_up():
    assert round_half_up(66.5) == 67
    assert round_half_up(2.5) == 3
    assert round_half_up(66.49) == 66


def test_percentage():
    assert percentage(2, 3) == 67
    assert percentage(1, 3) == 33
    assert percentage(0, 0) == 0


def test_format_duration():
    assert format_duration(750) == "750ms"
    assert format_duration(12500) == "12.5s"


def test_time_span_logs(caplog):
    with caplog.at_level(logging.INFO):
        with time_span("unit.test", rows=3):
            pass
    assert any("[TIMING] unit.test" in r.getMessage() and "rows=3" in r.getMessage() for r in caplog.records)


def test_status_for():
    assert status_for(None) == 200
    assert status_for(ErrorCode.INGREDIENT_NOT_FOUND) == 400
    assert status_for(ErrorCode.NO_CASES_FOUND) == 404
    assert status_for(ErrorCode.UNAUTHORIZED) == 401
