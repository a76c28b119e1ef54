from pathlib import Path
from unittest.mock import MagicMock

import pytest

from autolog.proposal import Proposal, write_locked


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "script.py"
    path.write_text("x = 1\nprint(x)\n", encoding="utf-8")
    return path


@pytest.fixture
def proposal(source_file: Path, tmp_path: Path) -> Proposal:
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()
    return Proposal(
        source_file,
        source_file.read_text(encoding="utf-8"),
        "import logging\nx = 1\nlogging.debug('x=%s', x)\nprint(x)\n",
        session=MagicMock(),
        temp_dir=temp_dir,
    )


def test_write_temp_uses_prefixed_name(proposal: Proposal):
    temp_path = proposal.write_temp()

    assert temp_path.name == "ai_modified_script.py"
    assert temp_path.read_text(encoding="utf-8") == proposal.proposed


def test_diff_shows_added_lines(proposal: Proposal):
    diff = proposal.diff()

    assert "--- script.py (current)" in diff
    assert "+++ script.py (AI proposed)" in diff
    assert "+import logging" in diff
    assert "+logging.debug('x=%s', x)" in diff
    assert "-x = 1" not in diff


def test_apply_writes_source_and_cleans_up(proposal: Proposal, source_file: Path):
    temp_path = proposal.write_temp()

    proposal.apply()

    assert source_file.read_text(encoding="utf-8") == proposal.proposed
    assert not temp_path.exists()
    assert not source_file.with_suffix(".py.tmp").exists()
    proposal.session.clear.assert_called_once()


def test_discard_keeps_source_and_clears_session(proposal: Proposal, source_file: Path):
    temp_path = proposal.write_temp()

    proposal.discard()

    assert source_file.read_text(encoding="utf-8") == "x = 1\nprint(x)\n"
    assert not temp_path.exists()
    proposal.session.clear.assert_called_once()


def test_cannot_apply_after_discard(proposal: Proposal):
    proposal.discard()

    with pytest.raises(RuntimeError):
        proposal.apply()


def test_title_names_the_file(proposal: Proposal):
    assert proposal.title == "Current vs. AI Proposed Changes - script.py"


def test_write_locked_creates_parents(tmp_path: Path):
    target = tmp_path / "nested" / "out.py"

    write_locked(target, "print('hi')\n")

    assert target.read_text(encoding="utf-8") == "print('hi')\n"
