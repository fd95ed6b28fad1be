from __future__ import annotations

import subprocess
import sys
import unittest
from pathlib import Path

from ascent import cli

REPO_ROOT = Path(__file__).resolve().parents[1]
COMMANDS = ("queue", "day", "agenda", "upgrade", "validate")


class TestCliEntrypointContract(unittest.TestCase):
    def test_module_help_lists_every_command(self) -> None:
        cmd = [sys.executable, "-m", "ascent.cli", "--help"]
        p = subprocess.run(cmd, cwd=str(REPO_ROOT), capture_output=True, text=True)
        self.assertEqual(p.returncode, 0, p.stderr)
        for name in COMMANDS:
            self.assertIn(name, p.stdout)

    def test_every_command_has_a_handler(self) -> None:
        ap = cli.build_parser()
        for name in COMMANDS:
            ns = ap.parse_args(["--state", "unused.json", name])
            self.assertTrue(callable(ns.func), name)

    def test_command_is_required(self) -> None:
        with self.assertRaises(SystemExit):
            cli.build_parser().parse_args([])

    def test_console_script_target(self) -> None:
        text = (REPO_ROOT / "pyproject.toml").read_text(encoding="utf-8")
        self.assertIn('ascent = "ascent.cli:main"', text)
        self.assertTrue(callable(cli.main))


if __name__ == "__main__":
    unittest.main(verbosity=2)
