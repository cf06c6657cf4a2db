"""
Chess Stream Trivia - Answer Parser
Maps a chat message to an option index (0 = A). Chat is noisy: anything
that isn't an exact answer command is ignored, never an error.
"""

from trivia.config import EXTENDED_ANSWER_COMMANDS, NUM_ANSWER_OPTIONS


LETTERS = "abcd"

STRICT_COMMANDS = {f"!{letter}": i for i, letter in enumerate(LETTERS)}

EXTENDED_COMMANDS = dict(STRICT_COMMANDS)
for _i, _letter in enumerate(LETTERS):
    EXTENDED_COMMANDS[_letter] = _i
    EXTENDED_COMMANDS[str(_i + 1)] = _i
    EXTENDED_COMMANDS[f"!{_i + 1}"] = _i


class AnswerParser:
    def __init__(self, extended: bool = EXTENDED_ANSWER_COMMANDS):
        self.extended = extended
        self._commands = EXTENDED_COMMANDS if extended else STRICT_COMMANDS

    def parse(self, raw_message, option_count: int = NUM_ANSWER_OPTIONS) -> int | None:
        if not isinstance(raw_message, str):
            return None
        index = self._commands.get(raw_message.strip().lower())
        if index is None or index >= option_count:
            return None
        return index


_default_parser = AnswerParser()


def parse_answer(raw_message, option_count: int = NUM_ANSWER_OPTIONS) -> int | None:
    return _default_parser.parse(raw_message, option_count)


def option_label(index: int) -> str:
    return LETTERS[index].upper()
