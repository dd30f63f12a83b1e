"""Tests for report rendering and the output sink."""

import io
import json

from sockstat.core.assembler import new_snapshot
from sockstat.output.json_sink import JsonSink, render_json
from sockstat.output.report_text import render_performance, render_text


def sample(extended=False):
    snap = new_snapshot("/proc/net/sockstat", extended=extended)
    snap["sockets_used"] = 128
    snap["tcp"].update(in_use=10, memory=100)
    return snap


class TestRenderText:
    """Tests for the plain-text report."""

    def test_base_report(self):
        text = render_text(sample())

        assert text.startswith("Socket Statistics\n")
        assert "Source:    /proc/net/sockstat" in text
        assert "Sockets used: 128" in text
        for title in ("TCP:", "UDP:", "UDPLite:", "RAW:", "FRAG:"):
            assert title in text
        assert "100 pages" in text
        assert "Extended Protocol Information" not in text

    def test_extended_lists_only_active_protocols(self):
        snap = sample(extended=True)
        snap["netlink"]["in_use"] = 3

        text = render_text(snap)

        assert "Extended Protocol Information:" in text
        assert "Netlink:" in text
        assert "Packet:" not in text
        assert "TCP Extended Statistics" not in text

    def test_tcp_ext_block(self):
        snap = sample(extended=True)
        snap["tcp_ext"] = {"TW": 77}

        text = render_text(snap)

        assert "TCP Extended Statistics:" in text
        assert "TW" in text and "77" in text

    def test_performance_block(self):
        text = render_performance({"performance": {
            "execution_time_seconds": 0.01, "peak_memory_mb": 9.5, "python_version": "3.12.1",
        }})

        assert "Execution time: 0.01s" in text
        assert "Peak memory:    9.5 MB" in text


class TestJsonSink:
    """Tests for JsonSink."""

    def test_render_json_round_trips(self):
        snap = sample()

        assert json.loads(render_json(snap)) == snap

    def test_write_to_stream(self):
        stream = io.StringIO()

        JsonSink(stream=stream).write(render_json({"sockets_used": 1}))

        assert json.loads(stream.getvalue()) == {"sockets_used": 1}
        assert stream.getvalue().endswith("\n")

    def test_write_to_file_creates_parents(self, tmp_path):
        path = tmp_path / "reports" / "today" / "sockstat.txt"

        sink = JsonSink(str(path))
        sink.write("first")
        sink.write("second")

        assert path.read_text(encoding="utf-8") == "second\n"
