import io
import os
import tempfile
import unittest
from pathlib import Path

from prompt_toolkit.document import Document

from fshell.completion import ShellCompleter
from fshell.processor import CommandProcessor


class TestShellCompleter(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / "docs").mkdir()
        (self.root / "docs" / "guide.txt").touch()
        (self.root / "data.csv").touch()
        (self.root / ".secret").touch()
        self.processor = CommandProcessor(self.root, stdout=io.StringIO())
        self.completer = ShellCompleter(self.processor)

    def tearDown(self):
        self._tmp.cleanup()

    def complete(self, text):
        document = Document(text, len(text))
        return [c.text for c in self.completer.get_completions(document, None)]

    def test_command_names(self):
        self.assertEqual(self.complete("m"), ["mkdir", "mv"])

    def test_command_after_pipe(self):
        self.assertEqual(self.complete("pwd | r"), ["rm", "rmdir"])

    def test_paths_in_cursor(self):
        self.assertEqual(self.complete("cat d"), ["data.csv", "docs/"])

    def test_hidden_only_on_request(self):
        self.assertNotIn(".secret", self.complete("rm "))
        self.assertEqual(self.complete("rm .s"), [".secret"])

    def test_nested_path(self):
        self.assertEqual(self.complete("cat docs/g"), ["docs/guide.txt"])

    def test_missing_directory(self):
        self.assertEqual(self.complete("cat nowhere/x"), [])


if __name__ == '__main__':
    unittest.main()
