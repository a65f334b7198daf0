import unittest
from fshell.parser import CommandParser, Redirection

class TestCommandParser(unittest.TestCase):
    def test_split_pipeline_simple(self):
        self.assertEqual(CommandParser.split_pipeline("ls -a"), ["ls -a"])

    def test_split_pipeline_multiple(self):
        cmd = "pwd |  ls -r|cat file.txt "
        expected = ["pwd", "ls -r", "cat file.txt"]
        self.assertEqual(CommandParser.split_pipeline(cmd), expected)

    def test_split_pipeline_drops_trailing_empty_parts(self):
        self.assertEqual(CommandParser.split_pipeline("ls |"), ["ls"])
        self.assertEqual(CommandParser.split_pipeline("ls | |  "), ["ls"])
        self.assertEqual(CommandParser.split_pipeline("|"), [])

    def test_split_pipeline_keeps_leading_and_inner_empty_parts(self):
        self.assertEqual(CommandParser.split_pipeline("| ls"), ["", "ls"])
        self.assertEqual(CommandParser.split_pipeline("pwd || ls"), ["pwd", "", "ls"])

    def test_split_pipeline_empty_line(self):
        self.assertEqual(CommandParser.split_pipeline(""), [""])

    def test_tokenize_whitespace_runs(self):
        self.assertEqual(CommandParser.tokenize("mv  a.txt\t b.txt"), ["mv", "a.txt", "b.txt"])

    def test_tokenize_no_quoting(self):
        # Quotes are ordinary characters
        self.assertEqual(CommandParser.tokenize('cat "my file"'), ["cat", '"my', 'file"'])

    def test_tokenize_empty(self):
        self.assertEqual(CommandParser.tokenize(""), [""])
        self.assertEqual(CommandParser.tokenize("   "), [""])

    def test_find_redirection_none(self):
        self.assertIsNone(CommandParser.find_redirection(["ls", "-a"]))

    def test_find_redirection_overwrite(self):
        redir = CommandParser.find_redirection(["ls", ">", "out.txt"])
        self.assertEqual(redir, Redirection(">", "out.txt"))
        self.assertFalse(redir.append)
        self.assertEqual(redir.mode, "w")

    def test_find_redirection_append(self):
        redir = CommandParser.find_redirection(["cat", "a.txt", ">>", "log.txt"])
        self.assertEqual(redir.target, "log.txt")
        self.assertTrue(redir.append)
        self.assertEqual(redir.mode, "a")

    def test_find_redirection_first_wins(self):
        redir = CommandParser.find_redirection(["ls", ">>", "one", ">", "two"])
        self.assertEqual(redir, Redirection(">>", "one"))

    def test_find_redirection_at_start(self):
        redir = CommandParser.find_redirection([">", "out.txt"])
        self.assertEqual(redir, Redirection(">", "out.txt"))

    def test_find_redirection_missing_target(self):
        redir = CommandParser.find_redirection(["ls", ">"])
        self.assertEqual(redir.operator, ">")
        self.assertIsNone(redir.target)

    def test_operator_must_be_its_own_token(self):
        self.assertIsNone(CommandParser.find_redirection(["ls", ">out.txt"]))

    def test_parse_command_line(self):
        segments = CommandParser.parse_command_line("pwd | ls -a > out.txt")
        self.assertEqual(len(segments), 2)
        self.assertEqual(segments[0].tokens, ["pwd"])
        self.assertIsNone(segments[0].redirection)
        self.assertEqual(segments[1].command, "ls")
        self.assertEqual(segments[1].args, ["-a", ">", "out.txt"])
        self.assertEqual(segments[1].redirection.target, "out.txt")

    def test_parse_command_line_empty(self):
        segments = CommandParser.parse_command_line("")
        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].command, "")

if __name__ == '__main__':
    unittest.main()
