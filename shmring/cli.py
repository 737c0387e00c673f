"""Interactive menu for adding to, removing from and inspecting a shared ring buffer."""

from __future__ import annotations

import argparse
import struct
import sys
from typing import Iterator, Optional, Sequence, TextIO

from shmring.ringbuffer import BufferFullError, RingBufferError, SharedRingBuffer

DEFAULT_NAME = "MyTestBuffer"
DEFAULT_SIZE = 4096

_MENU = "\n1. Add\n2. Remove\n3. Status\n4. Quit\nChoice: "


def item_count(head: int, tail: int, capacity: int) -> int:
    """Number of items held by a buffer with the given indices."""
    return head - tail if head >= tail else capacity - tail + head


def render_slots(head: int, tail: int, capacity: int) -> str:
    """Draw the slots: H head, T tail, X occupied, _ free, . head and tail together."""

    def slot(i: int) -> str:
        if i == head and i == tail:
            return "."
        if i == head:
            return "H"
        if i == tail:
            return "T"
        if (tail < head and tail < i < head) or (tail > head and (i > tail or i < head)):
            return "X"
        return "_"

    return "[" + "".join(slot(i) for i in range(capacity)) + "]"


def _tokens(stream: TextIO) -> Iterator[str]:
    for line in stream:
        yield from line.split()


def run(
    buffer: SharedRingBuffer,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> None:
    """Serve the menu until the user quits or the input ends."""
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    tokens = _tokens(stdin)

    def prompt(text: str) -> Optional[str]:
        stdout.write(text)
        stdout.flush()
        return next(tokens, None)

    def say(text: str) -> None:
        stdout.write(text + "\n")

    while True:
        token = prompt(_MENU)
        if token is None:
            break
        try:
            choice = int(token)
        except ValueError:
            continue

        if choice == 1:
            value_token = prompt("Value: ")
            if value_token is None:
                break
            try:
                value = int(value_token)
            except ValueError:
                say(f"Invalid value: {value_token}")
                continue
            try:
                buffer.enqueue(value)
            except BufferFullError:
                say("Buffer is full.")
                continue
            except struct.error:
                say(f"Value out of range: {value}")
                continue
            say(f"Added {value}")
        elif choice == 2:
            value = buffer.read()
            say("Empty!" if value is None else f"Read: {value}")
        elif choice == 3:
            head, tail, capacity = buffer.head, buffer.tail, buffer.capacity
            say(f"\nHead: {head} Tail: {tail} Cap: {capacity}")
            say(f"Items: {item_count(head, tail, capacity)}")
            say(render_slots(head, tail, capacity))
        elif choice == 4:
            break


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Create the shared buffer, serve the menu on stdin/stdout, then clean up."""
    parser = argparse.ArgumentParser(description="Interact with a shared-memory ring buffer.")
    parser.add_argument("--name", default=DEFAULT_NAME, help="shared memory name")
    parser.add_argument("--size", type=int, default=DEFAULT_SIZE, help="size in bytes")
    args = parser.parse_args(argv)

    print("Creating shared memory...")
    try:
        buffer = SharedRingBuffer.create(args.name, args.size, "i")
    except RingBufferError as exc:
        print(f"Failed! {exc}", file=sys.stderr)
        return 1

    with buffer:
        print(f"Shared memory created: {args.name} of size {args.size}")
        print(f"Success! Queue capacity: {buffer.capacity}")
        run(buffer, sys.stdin, sys.stdout)

    print("Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())