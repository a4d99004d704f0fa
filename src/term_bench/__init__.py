"""term-bench: terminal emulator throughput benchmark harness.

Generates deterministic synthetic workloads, replays them through a
terminal emulator inside a virtual display, and tracks wall-clock
throughput across runs and revisions.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
