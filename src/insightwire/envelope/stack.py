# src/insightwire/envelope/stack.py
"""Stack trace parsing with a bounded serialized size.

The ingestion service rejects exceptions whose parsed stack serializes to
more than 32 KiB. Frames are parsed from raw stack text, each with an
estimate of its serialized size, and when the total is over the limit a
contiguous block of frames is removed from the middle. The outermost frames
on both ends are the ones worth keeping: the top shows where the error
surfaced, the bottom shows the entry point.

Two frame formats are recognized:
- Python tracebacks: ``File "app/handlers.py", line 42, in handle``
- V8/Gecko stacks: ``at handle (app/handlers.js:42:7)``, ``handle@app.js:42:7``

Lines that match neither (traceback headers, source excerpts, the final
exception line) are skipped.
"""

from __future__ import annotations

import re
import traceback
from typing import Any

from insightwire.contracts.envelope import StackFrame

EXCEPTION_PARSED_STACK_THRESHOLD = 32 * 1024

# len('{"method":"","level":,"assembly":"","fileName":"","line":}')
FRAME_BASE_SIZE = 58

NO_METHOD = "<no_method>"
NO_FILENAME = "<no_filename>"

_PYTHON_FRAME = re.compile(r'^\s*File "(?P<file>[^"]*)", line (?P<line>\d+)(?:, in (?P<method>.*))?$')
_V8_FRAME = re.compile(r"^(?:\s+at)?(?P<method>.*?)(?:@|\s\(|\s)(?P<file>[^(@\n]+):(?P<line>[0-9]+):(?P<column>[0-9]+)\)?$")


def _frame_size(frame: StackFrame) -> int:
    return (
        len(frame.method)
        + len(frame.file_name)
        + len(frame.assembly)
        + FRAME_BASE_SIZE
        + len(str(frame.level))
        + len(str(frame.line))
    )


def parse_frame(line: str, level: int) -> StackFrame | None:
    """Parse one stack line, or return None if it is not a frame."""
    match = _PYTHON_FRAME.match(line) or _V8_FRAME.match(line)
    if match is None:
        return None

    frame = StackFrame(
        level=level,
        method=(match["method"] or "").strip() or NO_METHOD,
        assembly=line.strip(),
        file_name=(match["file"] or "").strip() or NO_FILENAME,
        line=int(match["line"]),
    )
    frame.size_in_bytes = _frame_size(frame)
    return frame


def _remove_middle_frames(frames: list[StackFrame], threshold: int) -> None:
    """Drop a middle block so the kept frames fit within ``threshold``.

    Pointers walk inward from both ends, summing the size of each boundary
    pair. On the first pair that overflows, everything between the last
    accepted pointer pair (inclusive) is deleted. With an odd frame count
    the unpaired middle frame is counted last and overflows the same way.
    Frame levels are kept as parsed so the gap stays visible downstream.
    """
    left = 0
    right = len(frames) - 1
    size = 0
    accepted_left = left
    accepted_right = right

    while left < right:
        size += frames[left].size_in_bytes + frames[right].size_in_bytes
        if size > threshold:
            del frames[accepted_left : accepted_right + 1]
            return

        accepted_left = left
        accepted_right = right
        left += 1
        right -= 1

    if left == right and size + frames[left].size_in_bytes > threshold:
        del frames[accepted_left : accepted_right + 1]


def parse_stack(stack: Any, *, threshold: int = EXCEPTION_PARSED_STACK_THRESHOLD) -> list[StackFrame] | None:
    """Parse raw stack text into ordered frames with a bounded total size.

    Args:
        stack: Raw multi-line stack text. Anything that is not a string
            yields None.
        threshold: Maximum total ``size_in_bytes`` before middle frames are
            removed.

    Returns:
        Frames in original top-to-bottom order with levels from 0, or None
        if ``stack`` is not a string.
    """
    if not isinstance(stack, str):
        return None

    frames: list[StackFrame] = []
    total_size = 0
    for line in stack.splitlines():
        frame = parse_frame(line, level=len(frames))
        if frame is None:
            continue
        total_size += frame.size_in_bytes
        frames.append(frame)

    if total_size > threshold:
        _remove_middle_frames(frames, threshold)
    return frames


def stack_for_exception(exc: BaseException) -> str:
    """Render an exception with its own traceback.

    Chained causes are left out so every parsed frame belongs to ``exc``.
    """
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__, chain=False))
