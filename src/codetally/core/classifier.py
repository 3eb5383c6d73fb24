# src/codetally/core/classifier.py
from dataclasses import dataclass

from codetally.models import ClassifierState, LineKind


@dataclass(frozen=True)
class LineClassifier:
    """
    Two-state machine (Normal / InBlockComment) over the lines of one file.

    The state object is passed in by the caller and mutated in place, so a
    single ClassifierState must be threaded through every line of a file
    and replaced for the next file.

    Only a line that starts with the block-comment token can open a block.
    A start token after code ("x = 1; /* note", or "*/*" inside a string)
    leaves the line as code and the state untouched.
    """
    single_line_comment: str
    block_comment_start: str
    block_comment_end: str

    def parse_line(self, line: str, state: ClassifierState) -> LineKind:
        trimmed = line.strip()

        # Blank wins over everything, including an open block comment
        if not trimmed:
            return LineKind.BLANK

        if state.in_block_comment:
            if self.block_comment_end in trimmed:
                state.in_block_comment = False
            # Code after the closing token is still counted as comment
            return LineKind.COMMENT

        if trimmed.startswith(self.single_line_comment):
            return LineKind.COMMENT

        if trimmed.startswith(self.block_comment_start):
            # Search past the start token: '"""' opens and closes with the same text
            search_from = len(self.block_comment_start)
            if trimmed.find(self.block_comment_end, search_from) == -1:
                state.in_block_comment = True
            return LineKind.COMMENT

        return LineKind.CODE
