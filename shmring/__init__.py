"""A circular queue of fixed-size records kept in named shared memory."""

__version__ = "0.1.0"
__all__ = ["cli", "ringbuffer"]