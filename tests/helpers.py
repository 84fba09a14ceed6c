# tests/helpers.py — v1
"""Plain helpers shared by tests (importable, unlike conftest)."""

from __future__ import annotations


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_words(count: int, prefix: str = "w") -> str:
    """'w1 w2 ... wN'."""
    return " ".join(f"{prefix}{i}" for i in range(1, count + 1))


def make_html(paragraphs: list[str]) -> str:
    return "\n".join(f"<p>{p}</p>" for p in paragraphs)
