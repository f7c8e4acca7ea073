"""
tests/integration/test_main.py
==============================
Integration tests for the command-line entry point and batch mode.
"""

import io
import sys
import os
from contextlib import redirect_stdout

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from tests.base import BaseTestCase
from core.storage import PersistentStorage
from main import RetroOS, build_config, main


class TestCommandLine(BaseTestCase):

    def test_version(self):
        output = io.StringIO()
        with redirect_stdout(output):
            self.assertEqual(main(["--version"]), 0)
        self.assertIn("Retro Micro-OS version 1.0.0", output.getvalue())

    def test_help(self):
        output = io.StringIO()
        with redirect_stdout(output):
            self.assertEqual(main(["-h"]), 0)
        self.assertIn("--batch FILE", output.getvalue())

    def test_batch_requires_filename(self):
        with redirect_stdout(io.StringIO()):
            self.assertEqual(main(["--no-persist", "--batch"]), 1)

    def test_build_config_flags(self):
        config = build_config(["--no-persist", "--state-dir", "/tmp/retro-test"])
        self.assertFalse(config.persist)
        self.assertEqual(config.state_dir, "/tmp/retro-test")

    def test_state_dir_requires_value(self):
        with self.assertRaises(ValueError):
            build_config(["--state-dir"])

    def test_log_file_flag(self):
        config = build_config(["--log-file", "/tmp/retro.log"])
        self.assertEqual(config.log_file, "/tmp/retro.log")
        with self.assertRaises(ValueError):
            build_config(["--log-file"])


class TestBatchMode(BaseTestCase):
    """Scripts of shell commands and editor key strings."""

    def run_script(self, text, **config_overrides):
        with self.temporary_state_dir() as tmpdir:
            path = os.path.join(tmpdir, "script.txt")
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
            system = RetroOS(self.create_config(**config_overrides))
            output = io.StringIO()
            with redirect_stdout(output):
                status = system.run_batch(path)
        return system, status, output.getvalue()

    def test_edit_session_in_batch(self):
        script = "\n".join([
            "# create a file",
            "edit notes.txt",
            "ihello world<Esc>",
            ":wq<CR>",
            "",
            "cat notes.txt",
        ])
        system, status, output = self.run_script(script)
        self.assertEqual(status, 0)
        self.assertEqual(system.storage.load("notes.txt"), "hello world")
        self.assertIn("hello world", output)
        self.assertNotIn("\033[?1049h", output)

    def test_failing_last_command(self):
        _, status, output = self.run_script("echo fine\ncat missing.txt\n")
        self.assertEqual(status, 1)
        self.assertIn("cat: missing.txt: No such file", output)

    def test_rm_does_not_prompt(self):
        system, status, _ = self.run_script(
            "edit a.txt\nix<Esc>\n:wq<CR>\nrm a.txt\n"
        )
        self.assertEqual(status, 0)
        self.assertFalse(system.storage.exists("a.txt"))

    def test_missing_script(self):
        system = RetroOS(self.create_config())
        with redirect_stdout(io.StringIO()):
            self.assertEqual(system.run_batch("/nonexistent/script.txt"), 1)

    def test_files_persist_between_runs(self):
        with self.temporary_state_dir() as state_dir:
            script = "edit saved.txt\nikept<Esc>\n:wq<CR>\n"
            _, status, _ = self.run_script(script, persist=True, state_dir=state_dir)
            self.assertEqual(status, 0)
            self.assertEqual(PersistentStorage(state_dir).load("saved.txt"), "kept")

    def test_log_file_receives_editor_events(self):
        with self.temporary_state_dir() as log_dir:
            log_path = os.path.join(log_dir, "retroos.log")
            script = "edit log.txt\nix<Esc>\n:wq<CR>\n"
            system, status, _ = self.run_script(script, log_file=log_path)
            self.assertEqual(status, 0)
            self.assertIsNone(system.log_stream)
            with open(log_path, encoding="utf-8") as f:
                logged = f.read()
        self.assertIn("editor: opened log.txt", logged)
        self.assertIn("editor: wrote log.txt", logged)

    def test_unwritable_log_file(self):
        with self.temporary_state_dir() as log_dir:
            log_path = os.path.join(log_dir, "missing", "retroos.log")
            system = RetroOS(self.create_config(log_file=log_path))
            with redirect_stdout(io.StringIO()) as output:
                self.assertFalse(system.initialize())
        self.assertIn("Error opening log file", output.getvalue())
