from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"


def _run_cli(args: list[str], cwd: Path, stdin: str | None = None) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    exe = [sys.executable, "-m", "minimax_ttt.cli"]
    return subprocess.run(exe + args, cwd=cwd, capture_output=True, text=True, input=stdin, env=env)


def test_cli_solve(tmp_path: Path):
    r = _run_cli(["solve", "--board", "XX_OO____"], cwd=tmp_path)
    assert r.returncode == 0
    s = r.stdout + r.stderr
    assert "move=2" in s and "score=10" in s and "nodes=" in s


def test_cli_solve_as_human_with_pruning(tmp_path: Path):
    r = _run_cli(["solve", "--board", "OO_XX____", "--player", "O", "--prune"], cwd=tmp_path)
    assert r.returncode == 0
    assert "move=2" in r.stdout + r.stderr


def test_cli_solve_stdin_streams_csv(tmp_path: Path):
    r = _run_cli(["solve", "--stdin"], cwd=tmp_path, stdin="XX_OO____\nnot-a-board\nO___X___O\n")
    assert r.returncode == 0
    lines = r.stdout.strip().splitlines()
    assert lines[0] == "board,player,move,score"
    assert lines[1] == "XX_OO____,X,2,10"
    assert lines[2] == "O___X___O,X,1,0"
    assert "Skipping" in r.stderr


@pytest.mark.parametrize("bad", ["abc", "XX_OO___", "XX_OO___Q", "XXX______"])
def test_cli_error_invalid_boards(tmp_path: Path, bad: str):
    r = _run_cli(["solve", "--board", bad], cwd=tmp_path)
    assert r.returncode == 2


def test_cli_error_decided_board(tmp_path: Path):
    r = _run_cli(["solve", "--board", "XOXXOOOXX"], cwd=tmp_path)
    assert r.returncode == 2
    assert "already decided" in r.stderr


def test_cli_selfplay_is_a_tie(tmp_path: Path):
    r = _run_cli(["selfplay"], cwd=tmp_path)
    assert r.returncode == 0
    assert "outcome=tie" in r.stderr


def test_cli_play_human_never_wins(tmp_path: Path):
    moves = "\n".join(str(i) for i in range(9)) + "\n"
    r = _run_cli(["play", "--first", "machine"], cwd=tmp_path, stdin=moves * 9)
    assert r.returncode == 0
    assert "You win!" not in r.stdout
    assert "You lose." in r.stdout or "Tie Game!" in r.stdout


def test_cli_play_quit(tmp_path: Path):
    r = _run_cli(["play"], cwd=tmp_path, stdin="q\n")
    assert r.returncode == 1
    assert "Game abandoned" in r.stderr


def test_cli_version_and_info(tmp_path: Path):
    r = _run_cli(["--version"], cwd=tmp_path)
    assert r.returncode == 0 and r.stdout.strip()
    r = _run_cli(["--info"], cwd=tmp_path)
    assert r.returncode == 0
    assert "numpy=" in r.stdout
