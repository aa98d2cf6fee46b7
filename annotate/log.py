"""Centralized logging with dim ANSI output."""

import sys

DIM = "\033[2m"
RESET = "\033[0m"

_verbose = False


def set_verbose(enabled: bool):
    global _verbose
    _verbose = bool(enabled)


def dim(msg: str, end: str = "\n", flush: bool = True):
    """Print a dim (faint) message to stderr. Used for internals."""
    print(f"{DIM}{msg}{RESET}", end=end, file=sys.stderr, flush=flush)


def debug(msg: str):
    """Like dim(), but only when verbose mode is on."""
    if _verbose:
        dim(f"  [annotate] {msg}")
