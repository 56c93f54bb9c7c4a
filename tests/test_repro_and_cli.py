import json
import os
import re
import subprocess
import sys
from pathlib import Path
from typing import Optional

import pytest

from tictactoe.cli import main

SRC = Path(__file__).resolve().parents[1] / "src"


def _run_cli(args: list[str], cwd: Path, stdin: str = "", extra_env: Optional[dict] = None) -> subprocess.CompletedProcess:
    env = {k: v for k, v in os.environ.items() if not k.startswith("TTT_")}
    env.update(extra_env or {})
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    exe = [sys.executable, "-m", "tictactoe.cli"]
    return subprocess.run(exe + args, cwd=cwd, input=stdin, capture_output=True, text=True, env=env)


def test_cli_human_vs_human_game(tmp_path: Path):
    # Bob tries a bad number and an occupied cell before playing 4
    script = "Alice\n\nh\nBob\n\n1\nabc\n1\n4\n2\n5\n3\n"
    r = _run_cli(["play"], cwd=tmp_path, stdin=script)
    assert r.returncode == 0, r.stderr
    assert "Welcome to Tic-Tac-Toe!" in r.stdout
    assert "Invalid input! Please enter a number between 1-9." in r.stdout
    assert "Position already occupied! Choose another spot." in r.stdout
    assert r.stdout.rstrip().endswith("Alice wins!")


def test_cli_duplicate_symbol_exits_1(tmp_path: Path):
    r = _run_cli(["play"], cwd=tmp_path, stdin="Alice\nX\nh\nBob\nx\n")
    assert r.returncode == 1
    assert "Symbol must be different from Alice" in r.stdout


def test_cli_computer_never_loses(tmp_path: Path):
    script = "\n".join(str(i) for i in range(1, 10)) + "\n"
    r = _run_cli(["play", "--name1", "Alice", "--mark1", "o", "--opponent", "computer"], cwd=tmp_path, stdin=script)
    assert r.returncode == 0, r.stderr
    assert "Alice wins!" not in r.stdout
    assert "Computer wins!" in r.stdout or "It's a tie!" in r.stdout


def test_cli_input_closed_exits_1(tmp_path: Path):
    r = _run_cli(["play", "--opponent", "human"], cwd=tmp_path, stdin="Alice\n\nBob\n\n1\n")
    assert r.returncode == 1
    assert "Input closed" in r.stderr


def test_cli_bad_configured_mark_exits_2(tmp_path: Path):
    r = _run_cli(["play", "--name1", "A", "--mark1", "XY", "--opponent", "computer"], cwd=tmp_path)
    assert r.returncode == 2
    assert "Invalid symbol" in r.stderr
    assert "Traceback" not in r.stderr


@pytest.mark.parametrize("extra_env", [
    {"TTT_PLAYER1_MARK": "XY"},
    {"TTT_PLAYER2_MARK": "AB", "TTT_OPPONENT": "human"},
    {"TTT_OPPONENT": "robot"},
])
def test_cli_bad_environment_setup_exits_2(tmp_path: Path, extra_env: dict):
    r = _run_cli(["play"], cwd=tmp_path, stdin="Alice\n\nBob\n\n", extra_env=extra_env)
    assert r.returncode == 2
    assert "[ERROR]" in r.stderr
    assert "Traceback" not in r.stderr


def test_cli_selfplay_is_a_tie(tmp_path: Path):
    r = _run_cli(["selfplay"], cwd=tmp_path)
    assert r.returncode == 0
    assert "It's a tie!" in r.stdout


def test_cli_solve_takes_win(tmp_path: Path):
    r = _run_cli(["solve", "--board", "XX.OO...."], cwd=tmp_path)
    assert r.returncode == 0
    s = r.stdout + r.stderr
    assert "to_move=X" in s and "move=2" in s and "score=10" in s


def test_cli_solve_infers_side_to_move(tmp_path: Path):
    r = _run_cli(["solve", "--board", "X........"], cwd=tmp_path)
    assert r.returncode == 0, r.stderr
    assert "to_move=O" in r.stderr
    assert "move=4" in r.stderr and "score=0" in r.stderr


def _solve_nodes(tmp_path: Path, *args: str, extra_env: Optional[dict] = None) -> int:
    r = _run_cli(["solve", "--board", "X...O....", *args], cwd=tmp_path, extra_env=extra_env)
    assert r.returncode == 0, r.stderr
    return int(re.search(r"nodes=(\d+)", r.stderr).group(1))


def test_cli_solve_honors_search_cache_setting(tmp_path: Path):
    cached = _solve_nodes(tmp_path)
    assert _solve_nodes(tmp_path, extra_env={"TTT_SEARCH_CACHE": "0"}) > cached
    assert _solve_nodes(tmp_path, "--no-cache") > cached


@pytest.mark.parametrize("bad", ["abc", "XXXXXXXXX", "XXXOO....", "XX.OO...A", "XOXOXOXOXO"])
def test_cli_solve_rejects_bad_boards(tmp_path: Path, bad: str):
    r = _run_cli(["solve", "--board", bad], cwd=tmp_path)
    assert r.returncode == 2


def test_cli_solve_stdin_streams_csv(tmp_path: Path):
    r = _run_cli(["solve", "--stdin"], cwd=tmp_path, stdin="XX.OO....\nnot a board\n.........\n")
    assert r.returncode == 0
    lines = r.stdout.strip().splitlines()
    assert lines[0] == "board,to_move,move,score"
    assert lines[1] == "XX.OO....,X,2,10"
    assert lines[2] == ".........,X,0,0"
    assert len(lines) == 3


def test_cli_help_smoke(tmp_path: Path):
    for args in (["--help"], ["play", "--help"], ["solve", "--help"], ["selfplay", "--help"], ["bench", "--help"]):
        r = _run_cli(args, cwd=tmp_path)
        assert r.returncode == 0
        assert r.stdout or r.stderr


def test_main_bench_prints_json(capsys):
    assert main(["bench", "--repeats", "1"]) == 0
    out = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert out["repeats"] == 1
    assert out["score"] == 0
    assert out["nodes"] > 0


def test_main_bad_marks(capsys):
    assert main(["solve", "--board", ".........", "--marks", "XX"]) == 2
    assert main(["selfplay", "--marks", "X"]) == 2
    assert main(["bench", "--repeats", "0"]) == 2
