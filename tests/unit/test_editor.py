"""
tests/unit/test_editor.py
=========================
Unit tests for :class:`~bin.editor.TextEditor`.

Covers:
- Opening new and existing files
- NORMAL mode motion (h/j/k/l) and its clamping
- INSERT mode editing (typing, Enter, Backspace, Escape)
- COMMAND_LINE mode and the :w, :q, :wq, :q! ex-commands
- Status line helpers
"""

from tests.base import BaseTestCase
from bin.editor import BACKSPACE, ENTER, ESCAPE, EditorMode
from core.errors import EditorStateError, StorageError
from core.storage import FileStorage


class FailingStorage(FileStorage):
    """Storage whose writes always fail."""

    def save(self, name, content):
        raise StorageError("disk full", name)


def keys(text):
    """Printable keys for every character of text."""
    return list(text)


class TestEditorLifecycle(BaseTestCase):
    """open/close and input ownership."""

    def setUp(self):
        super().setUp()
        self.storage = self.create_storage({"notes.txt": "hello\nworld"})
        self.shell = self.create_shell(self.storage)
        self.editor = self.create_editor(self.shell)

    def test_open_new_file(self):
        self.editor.open()
        self.assertTrue(self.editor.active)
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)
        self.assertEqual(self.editor.buffer.lines, [""])
        self.assertCursor(self.editor, 0, 0)
        self.assertFalse(self.shell.input_enabled)

    def test_open_existing_file_loads_content(self):
        self.editor.open("notes.txt")
        self.assertEqual(self.editor.buffer.lines, ["hello", "world"])
        self.assertEqual(self.editor.session.filename, "notes.txt")
        self.assertFalse(self.editor.session.modified)

    def test_open_missing_file_keeps_name(self):
        self.editor.open("new.txt")
        self.assertEqual(self.editor.buffer.lines, [""])
        self.assertEqual(self.editor.session.filename, "new.txt")

    def test_reopen_replaces_session(self):
        self.editor.open()
        self.editor.feed_keys(keys("iabc"))
        self.editor.open("notes.txt")
        self.assertEqual(self.editor.buffer.lines, ["hello", "world"])
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)

    def test_close_restores_shell_input(self):
        closed = []
        self.editor.add_close_listener(closed.append)
        self.editor.open()
        self.editor.close()
        self.assertFalse(self.editor.active)
        self.assertTrue(self.shell.input_enabled)
        self.assertEqual(closed, [self.editor])

    def test_keys_ignored_when_closed(self):
        self.assertFalse(self.editor.handle_key("i"))

    def test_render_listener_called_per_key(self):
        renders = []
        self.editor.add_render_listener(renders.append)
        self.editor.open()
        self.editor.feed_keys(keys("ix"))
        self.assertEqual(len(renders), 3)

    def test_unknown_mode_raises(self):
        self.editor.open()
        self.editor.session.mode = "bogus"
        with self.assertRaises(EditorStateError):
            self.editor.handle_key("x")


class TestNormalMode(BaseTestCase):
    """Cursor motion in NORMAL mode."""

    def setUp(self):
        super().setUp()
        self.editor = self.create_editor(storage=None)
        self.editor.storage.save("doc.txt", "abcdef\nxy\n")
        self.editor.open("doc.txt")

    def test_l_stops_on_last_character(self):
        self.editor.feed_keys(keys("l" * 10))
        self.assertCursor(self.editor, 0, 5)

    def test_h_stops_at_zero(self):
        self.editor.feed_keys(keys("lhhh"))
        self.assertCursor(self.editor, 0, 0)

    def test_j_clamps_column(self):
        self.editor.feed_keys(keys("lllllj"))
        self.assertCursor(self.editor, 1, 1)

    def test_j_onto_empty_line(self):
        self.editor.feed_keys(keys("ljj"))
        self.assertCursor(self.editor, 2, 0)

    def test_j_and_k_stop_at_edges(self):
        self.editor.feed_keys(keys("jjjjj"))
        self.assertCursor(self.editor, 2, 0)
        self.editor.feed_keys(keys("kkkkk"))
        self.assertCursor(self.editor, 0, 0)

    def test_other_keys_do_nothing(self):
        self.editor.feed_keys(keys("xyz") + [ENTER, BACKSPACE, ESCAPE])
        self.assertEqual(self.editor.buffer.lines, ["abcdef", "xy", ""])
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)
        self.assertFalse(self.editor.session.modified)


class TestInsertMode(BaseTestCase):
    """Editing in INSERT mode."""

    def setUp(self):
        super().setUp()
        self.editor = self.create_editor()
        self.editor.open()

    def test_typing_inserts_text(self):
        self.editor.feed_keys(keys("ihello"))
        self.assertEqual(self.editor.buffer.lines, ["hello"])
        self.assertCursor(self.editor, 0, 5)
        self.assertTrue(self.editor.session.modified)
        self.assertEqual(self.editor.title(), "New File [+]")

    def test_escape_moves_cursor_left(self):
        self.editor.feed_keys(keys("ihello") + [ESCAPE])
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)
        self.assertCursor(self.editor, 0, 4)

    def test_escape_at_column_zero(self):
        self.editor.feed_keys(["i", ESCAPE])
        self.assertCursor(self.editor, 0, 0)

    def test_second_escape_is_noop(self):
        self.editor.feed_keys(keys("ihi") + [ESCAPE])
        before = (self.editor.cursor.as_tuple(), list(self.editor.buffer.lines))
        self.editor.handle_key(ESCAPE)
        self.assertEqual((self.editor.cursor.as_tuple(), self.editor.buffer.lines), before)
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)

    def test_each_escape_moves_one_column(self):
        """Escape, i, Escape moves left once per transition."""
        self.editor.feed_keys(keys("iabc") + [ESCAPE])
        self.assertCursor(self.editor, 0, 2)
        self.editor.feed_keys(["i", ESCAPE])
        self.assertCursor(self.editor, 0, 1)
        self.assertEqual(self.editor.buffer.lines, ["abc"])

    def test_enter_splits_line(self):
        self.editor.feed_keys(keys("iabcdef"))
        self.editor.session.cursor.col = 3
        self.editor.handle_key(ENTER)
        self.assertEqual(self.editor.buffer.lines, ["abc", "def"])
        self.assertCursor(self.editor, 1, 0)

    def test_backspace_joins_lines(self):
        self.editor.feed_keys(keys("iab") + [ENTER] + keys("cd"))
        self.editor.session.cursor.col = 0
        self.editor.handle_key(BACKSPACE)
        self.assertEqual(self.editor.buffer.lines, ["abcd"])
        self.assertCursor(self.editor, 0, 2)

    def test_backspace_at_start_is_noop(self):
        self.editor.feed_keys(["i", BACKSPACE])
        self.assertEqual(self.editor.buffer.lines, [""])
        self.assertCursor(self.editor, 0, 0)

    def test_non_printable_keys_ignored(self):
        self.editor.feed_keys(["i", "ArrowUp", "Tab", "\x01"])
        self.assertEqual(self.editor.buffer.lines, [""])


class TestCommandLine(BaseTestCase):
    """COMMAND_LINE mode and ex-commands."""

    def setUp(self):
        super().setUp()
        self.storage = self.create_storage()
        self.shell = self.create_shell(self.storage)
        self.editor = self.create_editor(self.shell)
        self.editor.open()

    def command(self, text):
        self.editor.feed_keys([":"] + keys(text) + [ENTER])

    def test_colon_enters_command_mode(self):
        self.editor.feed_keys(keys(":wq"))
        self.assertEqual(self.editor.mode, EditorMode.COMMAND_LINE)
        self.assertEqual(self.editor.session.command_text, "wq")
        self.assertEqual(self.editor.mode_label(), "")

    def test_escape_leaves_command_mode(self):
        self.editor.feed_keys(keys(":w") + [ESCAPE])
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)
        self.assertEqual(self.editor.session.command_text, "")

    def test_backspace_edits_then_exits(self):
        self.editor.feed_keys(keys(":ab") + [BACKSPACE])
        self.assertEqual(self.editor.session.command_text, "a")
        self.editor.feed_keys([BACKSPACE, BACKSPACE])
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)

    def test_empty_command_returns_to_normal(self):
        self.command("")
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)
        self.assertTrue(self.editor.active)

    def test_write_with_name(self):
        self.editor.feed_keys(keys("ihello") + [ENTER] + keys("world") + [ESCAPE])
        self.command("w test.txt")
        self.assertEqual(self.storage.load("test.txt"), "hello\nworld")
        self.assertEqual(self.editor.session.message, '"test.txt" written, 11 characters')
        self.assertFalse(self.editor.session.message_is_error)
        self.assertFalse(self.editor.session.modified)
        self.assertEqual(self.editor.session.filename, "test.txt")
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)
        self.assertTrue(self.editor.active)

    def test_write_without_name(self):
        self.editor.feed_keys(keys("ix") + [ESCAPE])
        self.command("w")
        self.assertEqual(self.editor.session.message, "No file name. Use :w filename")
        self.assertTrue(self.editor.session.message_is_error)
        self.assertTrue(self.editor.session.modified)
        self.assertEqual(self.storage.list(), [])

    def test_quit_refused_when_modified(self):
        self.editor.feed_keys(keys("ix") + [ESCAPE])
        self.command("q")
        self.assertTrue(self.editor.active)
        self.assertEqual(self.editor.session.message,
                         "No write since last change (use :q! to override)")
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)

    def test_quit_when_clean(self):
        self.command("q")
        self.assertFalse(self.editor.active)
        self.assertTrue(self.shell.input_enabled)

    def test_force_quit_discards(self):
        self.editor.feed_keys(keys("ix") + [ESCAPE])
        self.command("q!")
        self.assertFalse(self.editor.active)
        self.assertEqual(self.storage.list(), [])

    def test_write_quit(self):
        self.editor.feed_keys(keys("ihi") + [ESCAPE])
        self.command("wq out.txt")
        self.assertFalse(self.editor.active)
        self.assertEqual(self.storage.load("out.txt"), "hi")

    def test_write_quit_without_name_stays_open(self):
        self.editor.feed_keys(keys("ihi") + [ESCAPE])
        self.command("wq")
        self.assertTrue(self.editor.active)
        self.assertTrue(self.editor.session.message_is_error)

    def test_unknown_command(self):
        self.command("foo")
        self.assertEqual(self.editor.session.message, "Not an editor command: foo")
        self.assertTrue(self.editor.session.message_is_error)
        self.assertEqual(self.editor.mode, EditorMode.NORMAL)

    def test_colon_clears_previous_message(self):
        self.command("foo")
        self.editor.handle_key(":")
        self.assertEqual(self.editor.session.message, "")

    def test_save_failure_keeps_modified(self):
        shell = self.create_shell(FailingStorage())
        editor = self.create_editor(shell)
        editor.open()
        editor.feed_keys(keys("ix") + [ESCAPE])
        editor.feed_keys([":"] + keys("w a.txt") + [ENTER])
        self.assertTrue(editor.session.modified)
        self.assertEqual(editor.session.message, 'Error saving file "a.txt": disk full')
        self.assertTrue(editor.session.message_is_error)
        self.assertIsNone(editor.session.filename)


class TestStatusHelpers(BaseTestCase):

    def test_labels(self):
        editor = self.create_editor()
        editor.open("file.txt")
        self.assertEqual(editor.title(), "file.txt")
        self.assertEqual(editor.mode_label(), "-- NORMAL --")
        self.assertEqual(editor.position_label(), "1,1")
        editor.feed_keys(keys("iab"))
        self.assertEqual(editor.mode_label(), "-- INSERT --")
        self.assertEqual(editor.position_label(), "1,3")
        self.assertEqual(editor.title(), "file.txt [+]")
