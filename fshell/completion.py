"""Tab completion for the interactive prompt"""

import os

from prompt_toolkit.completion import Completer, Completion


class ShellCompleter(Completer):
    """Custom completer for fshell commands and file paths"""

    def __init__(self, processor):
        self.processor = processor
        self.command_names = sorted(list(processor.commands.keys()) + ["help", "exit"])

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        # Only the current pipe segment matters
        segment = text.rsplit("|", 1)[-1].lstrip()
        words = segment.split()

        # If we're at the start or only typing the command
        if len(words) == 0 or (len(words) == 1 and not segment.endswith(" ")):
            word = words[0] if words else ""
            for cmd in self.command_names:
                if cmd.startswith(word):
                    yield Completion(cmd, start_position=-len(word))
            return

        # Typing an argument (file path)
        current_word = "" if segment.endswith(" ") else words[-1]

        if "/" in current_word:
            last_slash = current_word.rfind("/")
            dir_part = current_word[: last_slash + 1]
            file_part = current_word[last_slash + 1 :]
            list_path = self.processor.resolve_path(dir_part)
        else:
            dir_part = ""
            file_part = current_word
            list_path = self.processor.current_directory

        try:
            names = sorted(os.listdir(list_path))
        except OSError:
            # Unreadable or missing directory: nothing to offer
            return

        for name in names:
            if not name.startswith(file_part):
                continue
            # Hidden entries only when asked for
            if name.startswith(".") and not file_part.startswith("."):
                continue
            display_name = name + "/" if os.path.isdir(os.path.join(list_path, name)) else name
            yield Completion(
                dir_part + display_name,
                start_position=-len(current_word),
                display=display_name,
            )
