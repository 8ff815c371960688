import io
import threading
import time

import pytest

from composekit.events import Event, EventStatus, started_event
from composekit.spinner import Spinner
from composekit.writers import (
    MODE_PLAIN,
    MODE_TTY,
    NoopWriter,
    PlainWriter,
    TTYWriter,
    align,
    context_writer,
    line_text,
    new_writer,
    num_done,
    run,
    run_with_status,
    with_context_writer,
)


def _event(status, **kwargs):
    now = time.monotonic()
    values = dict(
        id="id",
        text="Text",
        status=status,
        status_text="Status",
        start_time=now,
        spinner=Spinner(chars=["."]),
    )
    values.update(kwargs)
    return Event(**values)


def test_line_text():
    now = time.monotonic()
    ev = _event(EventStatus.WORKING, start_time=now, end_time=now)
    width = len(f"{ev.id} {ev.text}")

    assert line_text(ev, "", 50, width, True) == (
        "\x1b[37m . id Text Status                            0.0s\n\x1b[0m"
    )
    assert line_text(ev, "", 50, width, False) == (
        " . id Text Status                            0.0s\n"
    )
    ev.status = EventStatus.DONE
    assert line_text(ev, "", 50, width, True) == (
        "\x1b[34m . id Text Status                            0.0s\n\x1b[0m"
    )
    ev.status = EventStatus.ERROR
    assert line_text(ev, "", 50, width, True) == (
        "\x1b[31m . id Text Status                            0.0s\n\x1b[0m"
    )


def test_line_text_single_event():
    ev = _event(EventStatus.DONE)
    width = len(f"{ev.id} {ev.text}")
    assert line_text(ev, "", 50, width, True) == (
        "\x1b[34m . id Text Status                            0.0s\n\x1b[0m"
    )


def test_line_text_truncates_long_status():
    ev = _event(EventStatus.DONE, status_text="x" * 100)
    out = line_text(ev, "", 50, 7, False)
    assert "x" * 21 + "..." in out
    assert "x" * 22 not in out


def test_error_event():
    w = TTYWriter(io.StringIO())
    e = _event(EventStatus.WORKING, status_text="Working")
    w.event(e)
    assert w["id"].end_time is None

    e.status = EventStatus.ERROR
    w.event(e)
    assert w["id"].end_time > time.monotonic() - 10
    assert w["id"].status == EventStatus.ERROR


def test_done_event_is_stopped_on_arrival():
    w = TTYWriter(io.StringIO())
    w.event(started_event("svc"))
    assert w["svc"].spinner.stopped is True
    assert w["svc"].end_time is not None and w["svc"].end_time >= w["svc"].start_time


def test_parent_can_be_set_and_unset_but_not_swapped():
    w = TTYWriter(io.StringIO())
    w.event(Event(id="child", parent_id="p1"))
    w.event(Event(id="child", parent_id="p2"))
    assert w["child"].parent_id == "p1"
    w.event(Event(id="child"))
    assert w["child"].parent_id == ""
    w.event(Event(id="child", parent_id="p2"))
    assert w["child"].parent_id == "p2"


def test_tty_writer_renders_and_prints_tail():
    buf = io.StringIO()
    w = TTYWriter(buf)
    thread = threading.Thread(target=w.start)
    thread.start()
    w.events([started_event("web"), Event(id="db", status_text="Creating")])
    w.tail_msgf("built %s", "image")
    w.stop()
    thread.join(5)
    assert not thread.is_alive()
    out = buf.getvalue()
    assert "[+] Running" in out
    assert "web" in out and "Started" in out
    assert out.endswith("built image\n")


def test_noop_writer_is_default():
    assert context_writer() == NoopWriter()


def test_with_context_writer_sets_and_resets():
    writer = PlainWriter(io.StringIO())
    with with_context_writer(writer) as current:
        assert context_writer() is writer
        assert current is writer
    assert context_writer() == NoopWriter()


def test_plain_writer_lines():
    buf = io.StringIO()
    w = PlainWriter(buf)
    w.events([Event(id="a", text="Container", status_text="Started"), Event(id="b")])
    w.tail_msgf("hello", "world", 3)
    assert buf.getvalue() == "a Container Started\nb  \nhello world 3\n"


def test_plain_writer_start_returns_after_stop():
    w = PlainWriter(io.StringIO())
    thread = threading.Thread(target=w.start)
    thread.start()
    w.stop()
    thread.join(5)
    assert not thread.is_alive()


def test_num_done():
    events = {
        "a": Event(id="a", status=EventStatus.DONE),
        "b": Event(id="b", status=EventStatus.WORKING),
        "c": Event(id="c", status=EventStatus.DONE),
        "d": Event(id="d", status=EventStatus.ERROR),
    }
    assert num_done(events) == 2
    assert num_done(list(events.values())) == 2


def test_align():
    assert align("ab", "1s\n", 10) == "ab     1s\n"
    assert len(align("ab", "1s\n", 10)) == 10


def test_new_writer_plain_mode_writes_lines():
    buf = io.StringIO()
    w = new_writer(buf, MODE_PLAIN)
    w.event(Event(id="x", text="T", status_text="Done"))
    assert buf.getvalue() == "x T Done\n"


def test_new_writer_tty_mode_on_non_terminal_raises():
    with pytest.raises(ValueError):
        new_writer(io.StringIO(), MODE_TTY)


def test_new_writer_auto_on_non_terminal_is_plain():
    buf = io.StringIO()
    w = new_writer(buf, "auto")
    w.tail_msgf("note")
    assert buf.getvalue() == "note\n"


def test_run_with_status_returns_result_and_uses_writer(capsys):
    def work():
        context_writer().event(Event(id="x", text="Text", status_text="Done"))
        return type(context_writer()).__name__

    assert run_with_status(work) == "PlainWriter"
    assert "x Text Done\n" in capsys.readouterr().err
    assert context_writer() == NoopWriter()


def test_run_with_status_propagates_error():
    def boom():
        raise RuntimeError("failed")

    with pytest.raises(RuntimeError, match="failed"):
        run_with_status(boom)


def test_run_calls_function(capsys):
    calls = []
    run(lambda: calls.append(context_writer().tail_msgf("tail")))
    assert calls == [None]
    assert "tail\n" in capsys.readouterr().err