from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

SEPARATOR = "From sender@example.com Mon Jan  1 00:00:00 2024"


def build_mbox(bodies: Sequence[str], *, headers: bool = True) -> str:
    """Join email bodies into an mbox archive with separators and headers."""

    chunks: list[str] = []
    for index, body in enumerate(bodies, start=1):
        lines = [SEPARATOR]
        if headers:
            lines.extend(
                [
                    "From: sender@example.com",
                    f"Subject: Message {index}",
                    f"Message-ID: <msg-{index}@example.com>",
                ]
            )
        lines.append("")
        lines.append(body)
        chunks.append("\n".join(lines) + "\n")
    return "\n".join(chunks)


@pytest.fixture
def write_mbox(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing mbox archives below ``tmp_path``."""

    def _write(name: str, bodies: Sequence[str], *, headers: bool = True) -> Path:
        path = tmp_path / name
        path.write_text(build_mbox(bodies, headers=headers), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Drop handlers installed by the CLI so later tests never log to closed streams."""

    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
