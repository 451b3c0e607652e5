"""
Unified diff mapping.

Recovers, for every file touched by a unified diff, the lines that were
added together with the line number each one occupies in the new version
of the file. Rules are run against a synthetic blob made of the added
lines only; the added-line sequence is then used to translate the
synthetic line numbers they report back to real locations.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional


FILE_HEADER = re.compile(r"^\+\+\+ b/(.+)")
HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)")
DEV_NULL_HEADER = "+++ /dev/null"


@dataclass(frozen=True)
class AddedLine:
    """A line present only in the new version of a file."""
    text: str
    original_line: int


@dataclass
class FileDiff:
    """All lines added to one file, in diff order."""
    path: str
    added_lines: List[AddedLine] = field(default_factory=list)

    @property
    def lines(self) -> List[str]:
        return [added.text for added in self.added_lines]

    @property
    def content(self) -> str:
        return "\n".join(self.lines)

    def original_line(self, synthetic_line: int) -> Optional[int]:
        """
        Map a 1-based line of the synthetic blob to its new-file line.

        Returns None when the line does not correspond to an added line.
        """
        index = synthetic_line - 1
        if 0 <= index < len(self.added_lines):
            return self.added_lines[index].original_line
        return None


@dataclass(frozen=True)
class DiffState:
    """
    State of the diff scanner between two input lines.

    section is the file currently collecting added lines (None outside a
    file section); counter is the new-file line number of the next body
    line (None until the section's first hunk header).
    """
    section: Optional[FileDiff] = None
    counter: Optional[int] = None


class DiffMapper:
    """
    Line-driven state machine over unified diff text.

    Feed lines with step() and collect the touched files with finish().
    Malformed input never raises; it only yields fewer recovered lines.
    """

    def __init__(self):
        self.state = DiffState()
        self._files: Dict[str, FileDiff] = {}

    def step(self, line: str) -> DiffState:
        state = self.state

        if self._is_file_header(line):
            match = FILE_HEADER.match(line)
            section = self._open(match.group(1)) if match else None
            self.state = DiffState(section=section, counter=None)
            return self.state

        hunk = HUNK_HEADER.match(line)
        if hunk:
            self.state = DiffState(section=state.section, counter=int(hunk.group(1)))
            return self.state

        if state.section is None or state.counter is None:
            return state

        if line.startswith("+"):
            state.section.added_lines.append(AddedLine(line[1:], state.counter))
        elif line.startswith("-") or line.startswith("\\"):
            # Removed lines and "\ No newline at end of file" markers
            # do not exist in the new file.
            return state
        self.state = DiffState(section=state.section, counter=state.counter + 1)
        return self.state

    def finish(self) -> List[FileDiff]:
        files = list(self._files.values())
        self.state = DiffState()
        self._files = {}
        return files

    def _is_file_header(self, line: str) -> bool:
        """
        Inside a hunk only "+++ b/<path>" and "+++ /dev/null" start a new
        file; any other "+++" line is an added line beginning with "++".
        """
        if not line.startswith("+++"):
            return False
        if self.state.counter is None:
            return True
        return FILE_HEADER.match(line) is not None or line.startswith(DEV_NULL_HEADER)

    def _open(self, path: str) -> FileDiff:
        # A path seen again continues its earlier sequence
        if path not in self._files:
            self._files[path] = FileDiff(path=path)
        return self._files[path]


def parse_diff(text: str) -> List[FileDiff]:
    """
    Parse unified diff text into the files it adds lines to.

    Files whose "+++ b/" marker was seen are returned even if they have
    no added lines, in order of first appearance.
    """
    mapper = DiffMapper()
    for line in text.split("\n"):
        mapper.step(line)
    return mapper.finish()
