"""Default configuration values for term-bench.

This module centralizes the hard-coded defaults used throughout the
harness so they are easy to discover and override.
"""

# Collaborator commands
DEFAULT_GENERATOR_COMMAND = "vtebench"
DEFAULT_GENERATOR_TERM = "xterm"
DEFAULT_EMULATOR_COMMAND = "alacritty -e {shell} -c 'cat {artifact}'"
DEFAULT_SHELL = "/bin/sh"
DEFAULT_XVFB_COMMAND = "Xvfb"
DEFAULT_HYPERFINE_COMMAND = "hyperfine"
DEFAULT_DOCKER_IMAGE = "undeadleech/vtebench"

# Virtual display
DEFAULT_DISPLAY = ":99"
DEFAULT_COLOR_DEPTH = 24
DEFAULT_SANDBOX_STARTUP_SECONDS = 10.0

# Geometry used when neither the CLI nor the terminal provides one
DEFAULT_TERMINAL_WIDTH = 80
DEFAULT_TERMINAL_HEIGHT = 24

# Timeouts (seconds)
DEFAULT_RUN_TIMEOUT_SECONDS = 300.0
DEFAULT_KILL_GRACE_SECONDS = 2.0

# Measurement
DEFAULT_WARMUP_RUNS = 1
DEFAULT_MEASURED_RUNS = 5
DEFAULT_MAX_ATTEMPTS = 2
MAX_ATTEMPTS_MIN = 1
MAX_ATTEMPTS_MAX = 5

# Storage
DEFAULT_RESULTS_DIR = "results"
DEFAULT_ARTIFACTS_DIR = "benchmarks"
DEFAULT_REGRESSION_THRESHOLD_PERCENT = 0.0

# Benchmarks run by `term-bench suite` when no suite file is given.
# Format: (name, extra args, byte volume)
DEFAULT_SUITE: list[tuple[str, tuple[str, ...], int]] = [
    ("scrolling", (), 50_000_000),
    ("alt-screen-random-write", (), 250_000_000),
    ("scrolling-in-region", ("--lines-from-bottom", "1"), 50_000_000),
    ("scrolling-in-region", ("--lines-from-bottom", "25"), 50_000_000),
    ("unicode-random-write", (), 4_000_000),
]
