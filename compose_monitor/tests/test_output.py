import io
import json

import pytest

from compose_monitor.errors import SerializationError
from compose_monitor.output import load_report, output_result, render_report
from compose_monitor.snapshot import ContainerSnapshot, ObservationLog


def _log(*snapshots):
    log = ObservationLog()
    for s in snapshots:
        log.append(s)
    return log


WEB_1 = ContainerSnapshot(
    id="a1b2c3d4e5f6a7b8",
    image="nginx:latest",
    names=("/web",),
    status="Up 1 second",
)
WEB_2 = ContainerSnapshot(
    id="a1b2c3d4e5f6a7b8",
    image="nginx:latest",
    names=("/web",),
    status="Up 2 seconds",
)
API = ContainerSnapshot(
    id="ffff0000",
    image="api:dev",
    names=("/api", "/backend"),
    status="Up 5 seconds",
)


def test_json_field_order_and_indent():
    text = render_report(_log(WEB_1))

    assert text == (
        "[\n"
        "  {\n"
        '    "id": "a1b2c3d4e5f6a7b8",\n'
        '    "image": "nginx:latest",\n'
        '    "names": [\n'
        '      "/web"\n'
        "    ],\n"
        '    "status": "Up 1 second"\n'
        "  }\n"
        "]"
    )


def test_json_preserves_entry_order():
    data = json.loads(render_report(_log(API, WEB_1, WEB_2, API)))
    assert [e["status"] for e in data] == [
        "Up 5 seconds",
        "Up 1 second",
        "Up 2 seconds",
        "Up 5 seconds",
    ]


def test_empty_log_renders_empty_list():
    assert render_report(ObservationLog()) == "[]"
    assert load_report("[]") == []


def test_yaml_keeps_field_order():
    text = render_report(_log(WEB_1), "yaml")
    keys = [line.split(":")[0].strip("- ") for line in text.splitlines() if ":" in line]
    assert keys == ["id", "image", "names", "status"]


@pytest.mark.parametrize("fmt", ["json", "yaml"])
def test_round_trip(fmt):
    log = _log(WEB_1, API, WEB_2)
    parsed = load_report(render_report(log, fmt), fmt)

    assert len(parsed) == len(log)
    assert parsed == list(log)


def test_text_format_one_line_per_entry():
    text = render_report(_log(WEB_1, API), "text")
    lines = text.splitlines()

    assert len(lines) == 2
    assert "a1b2c3d4e5f6" in lines[0]
    assert "/api, /backend" in lines[1]


def test_text_format_empty_log():
    assert render_report(ObservationLog(), "text") == "No matching containers observed."


def test_unknown_format_rejected():
    with pytest.raises(ValueError):
        render_report(ObservationLog(), "xml")


def test_output_result_writes_to_stream():
    buf = io.StringIO()
    output_result(_log(WEB_1), "json", stream=buf)

    assert buf.getvalue().endswith("]\n")
    assert json.loads(buf.getvalue())[0]["id"] == WEB_1.id


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        '{"id": "a"}',
        '["entry"]',
        '[{"id": "a", "image": "x", "status": "Up"}]',
        '[{"id": "a", "image": "x", "names": "/web", "status": "Up"}]',
    ],
)
def test_malformed_report_raises(text):
    with pytest.raises(SerializationError):
        load_report(text)


class BrokenPipeStream:
    def write(self, text):
        raise BrokenPipeError(32, "Broken pipe")

    def flush(self):
        pass


def test_write_failure_raises_serialization_error():
    with pytest.raises(SerializationError) as exc:
        output_result(_log(WEB_1), "json", stream=BrokenPipeStream())

    assert isinstance(exc.value.__cause__, BrokenPipeError)
