import io
import json

import pytest

from secondary_table_controller.lib.network_control import (
    ConsoleResponseSink,
    ResponseCode,
    RouteCommandDispatcher,
)


@pytest.fixture
def dispatcher(controller) -> RouteCommandDispatcher:
    return RouteCommandDispatcher(controller)


def test_add_and_remove_secondary_route(dispatcher, executor, sink):
    words = "route add wlan0 secondary 192.168.1.0 24 192.168.1.1".split()

    assert dispatcher.dispatch(words, sink).success
    assert dispatcher.dispatch(
        "route remove wlan0 secondary 192.168.1.0 24 192.168.1.1".split(), sink
    ).success

    assert executor.lines == [
        "ip route add 192.168.1.0/24 via 192.168.1.1 dev wlan0 table 100",
        "ip route del 192.168.1.0/24 via 192.168.1.1 dev wlan0 table 100",
    ]
    assert [m[0] for m in sink.messages] == [200, 200]


@pytest.mark.parametrize(
    "line",
    [
        "",
        "route",
        "route add wlan0 secondary 192.168.1.0 24",
        "route flush wlan0 secondary 192.168.1.0 24 ::",
        "interface list",
    ],
)
def test_syntax_errors(dispatcher, executor, sink, line):
    result = dispatcher.dispatch(line.split(), sink)

    assert result.code == ResponseCode.COMMAND_SYNTAX_ERROR
    assert result.message.startswith("Usage:")
    assert executor.calls == []
    assert len(sink.messages) == 1


@pytest.mark.parametrize(
    "line",
    [
        "route add wlan0 secondary 192.168.1.0 abc ::",
        "route add wlan0 secondary 192.168.1.0 129 ::",
        "route add wlan0 default 0.0.0.0 0 192.168.1.1",
    ],
)
def test_parameter_errors(dispatcher, executor, line):
    result = dispatcher.dispatch(line.split())

    assert result.code == ResponseCode.COMMAND_PARAMETER_ERROR
    assert executor.calls == []


def test_status(dispatcher, sink):
    dispatcher.dispatch("route add rmnet0 secondary 10.0.0.0 8 ::".split())

    result = dispatcher.dispatch(["route", "status"], sink)

    status = json.loads(result.message)
    assert status["interfaces"] == {"rmnet0": {"rule_count": 1, "table_id": 100}}
    assert sink.messages[0][0] == 200


def test_serve_reads_until_eof(dispatcher, executor):
    stream_in = io.StringIO(
        "# comment\n"
        "route add wlan0 secondary 192.168.1.0 24 192.168.1.1\n"
        "\n"
        "route remove usb0 secondary 192.168.42.0 24 ::\n"
    )
    out = io.StringIO()

    failures = dispatcher.serve(stream_in, ConsoleResponseSink(out))

    assert failures == 1
    assert out.getvalue().splitlines() == [
        "200 Route modified",
        "400 Interface not found (No such device)",
    ]
    assert len(executor.calls) == 1


def test_quoted_interface_with_spaces_is_rejected(dispatcher, executor):
    out = io.StringIO()

    failures = dispatcher.serve(
        io.StringIO("route add 'wlan0 table 254' secondary 10.0.0.0 8 ::\n"),
        ConsoleResponseSink(out),
    )

    assert failures == 1
    assert out.getvalue() == "501 Invalid interface\n"
    assert executor.calls == []
