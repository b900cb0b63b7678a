"""Line-oriented text buffer with incremental syntax classification."""

__all__ = [
    "adapters",
    "buffer",
    "highlight",
    "runtime",
]

__version__ = "0.1.0"
