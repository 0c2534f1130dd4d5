"""Building blocks for partitioned stream processing: signals, promises, backoff, stats, partitioning and fault injection."""

__version__ = "0.1.0"