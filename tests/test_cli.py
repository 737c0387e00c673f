import io
import uuid

import pytest

from shmring.cli import item_count, main, render_slots, run
from shmring.ringbuffer import SharedRingBuffer


def _name():
    return "sr" + uuid.uuid4().hex[:12]


@pytest.fixture
def small_buffer():
    with SharedRingBuffer.create(_name(), 64, "i") as buffer:
        yield buffer


def test_render_empty_buffer():
    assert render_slots(0, 0, 5) == "[.____]"


def test_render_wrapped_buffer():
    assert render_slots(1, 3, 5) == "[XH_TX]"
    assert item_count(1, 3, 5) == 3


@pytest.mark.parametrize("head", range(6))
@pytest.mark.parametrize("tail", range(6))
def test_render_invariants(head, tail):
    capacity = 6
    text = render_slots(head, tail, capacity)
    count = item_count(head, tail, capacity)
    assert len(text) == capacity + 2
    assert text[0] == "[" and text[-1] == "]"
    assert 0 <= count < capacity
    assert text.count("X") == max(count - 1, 0)
    assert text.count("H") == (0 if head == tail else 1)
    assert text.count("T") == (0 if head == tail else 1)
    assert text.count(".") == (1 if head == tail else 0)


def test_item_count_matches_buffer(small_buffer):
    for value in range(5):
        small_buffer.enqueue(value)
    small_buffer.read()
    small_buffer.read()
    count = item_count(small_buffer.head, small_buffer.tail, small_buffer.capacity)
    assert count == len(small_buffer) == 3


def test_run_add_and_remove(small_buffer):
    out = io.StringIO()
    run(small_buffer, io.StringIO("1\n5\n1\n7\n2\n2\n2\n4\n"), out)
    text = out.getvalue()
    assert "Added 5" in text
    assert "Added 7" in text
    assert text.index("Read: 5") < text.index("Read: 7")
    assert "Empty!" in text
    assert len(small_buffer) == 0


def test_run_status(small_buffer):
    out = io.StringIO()
    run(small_buffer, io.StringIO("1\n4\n1\n5\n2\n3\n4\n"), out)
    text = out.getvalue()
    head, tail, capacity = small_buffer.head, small_buffer.tail, small_buffer.capacity
    assert f"Head: {head} Tail: {tail} Cap: {capacity}" in text
    assert f"Items: {len(small_buffer)}" in text
    assert render_slots(head, tail, capacity) in text


def test_run_reports_full_buffer(small_buffer):
    commands = "".join(f"1\n{i}\n" for i in range(small_buffer.capacity)) + "4\n"
    out = io.StringIO()
    run(small_buffer, io.StringIO(commands), out)
    text = out.getvalue()
    assert "Buffer is full." in text
    assert len(small_buffer) == small_buffer.capacity - 1


def test_run_stops_at_end_of_input(small_buffer):
    out = io.StringIO()
    run(small_buffer, io.StringIO("1\n3\n"), out)
    assert "Added 3" in out.getvalue()
    assert small_buffer.read() == 3


def test_main_runs_session(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("1\n9\n2\n4\n"))
    assert main(["--name", _name(), "--size", "64"]) == 0
    text = capsys.readouterr().out
    assert "Read: 9" in text
    assert text.rstrip().endswith("Done")


def test_main_fails_when_too_small(capsys):
    assert main(["--name", _name(), "--size", "16"]) == 1
    assert "Failed!" in capsys.readouterr().err