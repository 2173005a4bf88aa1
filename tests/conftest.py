"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest


def write_csv(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def csv_writer(tmp_path: Path):
    """Return a helper that writes CSV text into tmp_path."""

    def _write(name: str, text: str) -> Path:
        return write_csv(tmp_path / name, text)

    return _write


@pytest.fixture
def grade_files(csv_writer):
    """Destination, source, and mapping files for a two-student class."""
    dst = csv_writer(
        "canvas.csv",
        "Student,ID,SIS Login ID,Section,Project01-Automated (999)\n"
        '"Smith, Alice",1001,alice@sis,CS 315,\n'
        '"Jones, Bob",1002,bob@sis,CS 315,\n'
        '"Lee, Carol",1003,carol@sis,CS 315,\n',
    )
    src = csv_writer(
        "project01.csv",
        "GitHub ID,Score\n"
        "alice123,95\n"
        "bobcodes,80\n",
    )
    mapping = csv_writer(
        "map.csv",
        "Name,GitHub ID,SIS Login ID\n"
        "Alice,alice123,alice@sis\n"
        "Bob,bobcodes,bob@sis\n"
        "Carol,carol-c,carol@sis\n",
    )
    return dst, src, mapping
