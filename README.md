# shmring

`shmring` is a fixed-size circular queue that lives in a named block of
shared memory. One process creates the block and others open it by name.
A header at the start of the block holds four unsigned 64-bit words: the
head index, the tail index, the capacity and the size of one element. The
slots follow the header.

Elements are fixed-size records described by a `struct` format string
(`"i"` for a C `int`, for example). The capacity is the number of whole
elements that fit in the block after the header. One slot always stays
empty, so a queue with capacity `n` holds at most `n - 1` items.

## Installation

```
pip install .
```

## Library use

```python
from shmring.ringbuffer import SharedRingBuffer, BufferFullError

with SharedRingBuffer.create("MyTestBuffer", 4096, "i") as ring:
    print(ring.capacity)          # number of slots
    ring.enqueue(42)
    ring.enqueue(7)
    print(len(ring))              # 2
    print(ring.read())            # 42
```

To attach from another process, open the block by name with the same
element format:

```python
from shmring.ringbuffer import SharedRingBuffer

consumer = SharedRingBuffer.open("MyTestBuffer", "i")
value = consumer.read()
consumer.close()
```

Formats with several fields take and give tuples: with `"ii"`,
`enqueue((1, 2))` stores a record and `read()` gives back `(1, 2)`.

Behaviour:

- `create(name, size, fmt)` raises `RingBufferError` when `size` leaves
  no room for a single element after the header, when the format is
  invalid, or when the block cannot be created.
- `enqueue(item)` raises `BufferFullError` when there is no free slot.
- `read()` gives back the oldest item and removes it, or `None` when the
  queue is empty.
- `open(name, fmt)` raises `ElementSizeMismatchError` if the block was
  created with an element size that differs from the format given, and
  `RingBufferError` if the block does not exist or its header does not
  fit its size.
- Every error the queue raises is a `RingBufferError`.
- `close()` detaches this handle and may be called more than once.
  `unlink()` removes the block's name. Leaving a `with` block closes the
  handle, and also unlinks the block when this handle created it.
- `head`, `tail` and `capacity` give the current header values; `name`
  and `closed` describe the handle. `len(ring)` is the number of items
  held.

## Interactive tool

The package installs a small interactive console:

```
shmring [--name NAME] [--size SIZE]
```

It creates a queue of integers named `MyTestBuffer` of 4096 bytes (or
the name and size given) and shows a menu:

```
1. Add
2. Remove
3. Status
4. Quit
```

- **Add** asks for a value and enqueues it. A full queue, a value that is
  not an integer or one outside the range of a C `int` gets a message
  instead.
- **Remove** reads the oldest value, or prints `Empty!`.
- **Status** prints head, tail, capacity and item count, followed by a map
  of the slots. In the map, `H` is the head, `T` is the tail, `X` is an
  occupied slot, `_` is a free slot and `.` marks the slot where head and
  tail meet.
- **Quit**, or the end of input, releases the shared memory and exits.

If the block cannot be created, the command prints `Failed!` with the
reason and exits with status 1.

The helpers behind the status view, `item_count(head, tail, capacity)`
and `render_slots(head, tail, capacity)`, live in `shmring.cli`, as does
`run(buffer, stdin, stdout)`, which serves the menu on any pair of text
streams.