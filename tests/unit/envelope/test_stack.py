# tests/unit/envelope/test_stack.py
"""Tests for envelope.stack -- stack parsing and size bounding."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from insightwire.envelope.stack import (
    EXCEPTION_PARSED_STACK_THRESHOLD,
    FRAME_BASE_SIZE,
    NO_FILENAME,
    NO_METHOD,
    parse_frame,
    parse_stack,
    stack_for_exception,
)

PYTHON_TRACEBACK = """Traceback (most recent call last):
  File "/srv/app/handlers.py", line 42, in handle
    result = process(order)
  File "/srv/app/orders.py", line 7, in process
    return validate(order)
  File "/srv/app/validation.py", line 113, in validate
    raise ValueError("missing sku")
ValueError: missing sku
"""

V8_STACK = """Error: missing sku
    at handle (/srv/app/handlers.js:42:7)
    at process (/srv/app/orders.js:7:12)
    at Object.<anonymous> (/srv/app/index.js:3:1)
"""


def _deep_stack(depth: int, *, method_width: int = 40) -> str:
    lines = ["Traceback (most recent call last):"]
    for i in range(depth):
        method = f"frame_{i:04d}".ljust(method_width, "x")
        lines.append(f'  File "/srv/app/module_{i:04d}.py", line {i + 1}, in {method}')
        lines.append("    do_work()")
    lines.append("RecursionError: maximum recursion depth exceeded")
    return "\n".join(lines)


def _raise_nested() -> None:
    def inner() -> None:
        raise KeyError("sku")

    inner()


def _lookup_sku() -> None:
    raise KeyError("sku")


def _raise_chained() -> None:
    try:
        _lookup_sku()
    except KeyError as e:
        raise ValueError("missing sku") from e


# =============================================================================
# Parsing
# =============================================================================


class TestParseStack:
    def test_python_traceback_frames_in_order(self) -> None:
        frames = parse_stack(PYTHON_TRACEBACK)
        assert frames is not None
        assert [f.level for f in frames] == [0, 1, 2]
        assert [f.method for f in frames] == ["handle", "process", "validate"]
        assert [f.file_name for f in frames] == [
            "/srv/app/handlers.py",
            "/srv/app/orders.py",
            "/srv/app/validation.py",
        ]
        assert [f.line for f in frames] == [42, 7, 113]

    def test_source_and_message_lines_are_skipped(self) -> None:
        frames = parse_stack(PYTHON_TRACEBACK)
        assert frames is not None
        assert all(f.assembly.startswith("File ") for f in frames)

    def test_v8_stack_frames(self) -> None:
        frames = parse_stack(V8_STACK)
        assert frames is not None
        assert [f.level for f in frames] == [0, 1, 2]
        assert frames[0].method == "handle"
        assert frames[0].file_name == "/srv/app/handlers.js"
        assert frames[0].line == 42
        assert frames[2].method == "Object.<anonymous>"

    def test_gecko_style_frame(self) -> None:
        frame = parse_frame("handle@https://cdn.example.com/app.js:10:5", level=0)
        assert frame is not None
        assert frame.method == "handle"
        assert frame.file_name == "https://cdn.example.com/app.js"
        assert frame.line == 10

    def test_assembly_is_trimmed_raw_line(self) -> None:
        frames = parse_stack(PYTHON_TRACEBACK)
        assert frames is not None
        assert frames[0].assembly == 'File "/srv/app/handlers.py", line 42, in handle'

    def test_non_string_returns_none(self) -> None:
        assert parse_stack(None) is None
        assert parse_stack(12) is None

    def test_no_matching_lines_gives_empty_list(self) -> None:
        assert parse_stack("ValueError: nothing to see") == []
        assert parse_stack("") == []

    def test_windows_line_endings(self) -> None:
        frames = parse_stack(PYTHON_TRACEBACK.replace("\n", "\r\n"))
        assert frames is not None
        assert len(frames) == 3
        assert frames[2].method == "validate"


class TestParseFrame:
    def test_missing_method_uses_placeholder(self) -> None:
        frame = parse_frame('  File "/srv/app/run.py", line 3', level=0)
        assert frame is not None
        assert frame.method == NO_METHOD

    def test_missing_file_uses_placeholder(self) -> None:
        frame = parse_frame('  File "", line 3, in <module>', level=0)
        assert frame is not None
        assert frame.file_name == NO_FILENAME
        assert frame.method == "<module>"

    def test_size_accounting(self) -> None:
        frame = parse_frame('  File "/a.py", line 12, in run', level=3)
        assert frame is not None
        expected = len("run") + len("/a.py") + len('File "/a.py", line 12, in run') + FRAME_BASE_SIZE + 1 + 2
        assert frame.size_in_bytes == expected

    def test_non_frame_returns_none(self) -> None:
        assert parse_frame("    return validate(order)", level=0) is None
        assert parse_frame("Traceback (most recent call last):", level=0) is None


class TestStackForException:
    def test_raised_exception_renders_traceback(self) -> None:
        try:
            _raise_nested()
        except KeyError as e:
            text = stack_for_exception(e)

        frames = parse_stack(text)
        assert frames is not None
        assert [f.method for f in frames][-2:] == ["_raise_nested", "inner"]

    def test_chained_cause_frames_are_excluded(self) -> None:
        try:
            _raise_chained()
        except ValueError as e:
            text = stack_for_exception(e)

        frames = parse_stack(text)
        assert frames is not None
        methods = [f.method for f in frames]
        assert "_lookup_sku" not in methods
        assert methods[-1] == "_raise_chained"
        assert "KeyError" not in text

    def test_unraised_exception_has_no_frames(self) -> None:
        assert parse_stack(stack_for_exception(ValueError("never raised"))) == []


# =============================================================================
# Truncation
# =============================================================================


class TestTruncation:
    def test_small_stack_is_untouched(self) -> None:
        frames = parse_stack(_deep_stack(20))
        assert frames is not None
        assert len(frames) == 20

    def test_oversized_stack_drops_middle_frames(self) -> None:
        frames = parse_stack(_deep_stack(400))
        assert frames is not None
        assert 0 < len(frames) < 400

        levels = [f.level for f in frames]
        assert levels[0] == 0
        assert levels[-1] == 399
        assert levels == sorted(levels)

        # The removed block is contiguous: exactly one gap in the levels
        gaps = [b - a for a, b in zip(levels, levels[1:], strict=False) if b - a != 1]
        assert len(gaps) == 1

    def test_top_and_bottom_are_balanced(self) -> None:
        frames = parse_stack(_deep_stack(400))
        assert frames is not None
        top = [f for f in frames if f.level < 200]
        bottom = [f for f in frames if f.level >= 200]
        assert len(top) == len(bottom)

    def test_kept_frames_fit_threshold(self) -> None:
        frames = parse_stack(_deep_stack(400))
        assert frames is not None
        assert sum(f.size_in_bytes for f in frames) <= EXCEPTION_PARSED_STACK_THRESHOLD

    def test_custom_threshold(self) -> None:
        frames = parse_stack(_deep_stack(10), threshold=500)
        assert frames is not None
        assert len(frames) < 10
        assert sum(f.size_in_bytes for f in frames) <= 500

    def test_middle_frame_of_odd_stack_counts_toward_threshold(self) -> None:
        """Outer pairs fit, but the unpaired middle frame pushes the total over."""
        text = _deep_stack(5)
        full = parse_stack(text, threshold=10**9)
        assert full is not None
        threshold = full[0].size_in_bytes + full[4].size_in_bytes + full[1].size_in_bytes + full[3].size_in_bytes

        frames = parse_stack(text, threshold=threshold)

        assert frames is not None
        assert [f.level for f in frames] == [0, 4]
        assert sum(f.size_in_bytes for f in frames) <= threshold

    def test_single_oversized_frame_is_removed(self) -> None:
        frames = parse_stack(_deep_stack(1), threshold=10)
        assert frames == []

    @given(depth=st.integers(min_value=1, max_value=600), width=st.integers(min_value=1, max_value=200))
    def test_parsed_stack_never_exceeds_threshold(self, depth: int, width: int) -> None:
        """The bound holds for both even and odd frame counts."""
        frames = parse_stack(_deep_stack(depth, method_width=width))
        assert frames is not None
        assert sum(f.size_in_bytes for f in frames) <= EXCEPTION_PARSED_STACK_THRESHOLD
