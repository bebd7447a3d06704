# =============================================================
# Streaming section parser for the API forge.
# -------------------------------------------------------------
# The forge system prompt asks the model to wrap its output in
# bracketed markers:
#
#   [START_CODE:<path>] ... [END_CODE]
#   [START_EXPLANATION] ... [END_EXPLANATION]
#   [START_DOCS]        ... [END_DOCS]
#   [START_DEPLOYMENT]  ... [END_DEPLOYMENT]
#
# Chunks arrive with arbitrary boundaries, so a marker can be split
# across two (or more) chunks. The parser holds back any tail that
# could still grow into a marker and resolves it on the next chunk or
# at finish(). Feeding a response in one piece or one character at a
# time gives the same result.
#
# Policies:
#   - sections never nest; a start marker closes whatever is open
#   - an end marker for a section that is not open is plain text
#   - a malformed [START_CODE: marker is recorded in `errors` and is
#     otherwise plain text
#   - text outside any section is dropped unless keep_narrative=True
#   - finish() force-closes an open section, nothing buffered is lost
# =============================================================

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from stacktutor.log import get_logger

from .errors import MalformedMarkerError
from .markers import (
    ALL_PREFIXES,
    END_MARKERS,
    MARKER_CLOSE,
    MAX_FILE_PATH_LENGTH,
    SECTION_NAMES,
    START_CODE_PREFIX,
    TEXT_START_MARKERS,
)
from .types import GeneratedFile, GenerationResult, ParseMode, ParserState

logger = get_logger("forge.parser")

_TEXT_FIELDS = {
    ParseMode.IN_EXPLANATION: "explanation",
    ParseMode.IN_DOCS: "documentation",
    ParseMode.IN_DEPLOYMENT: "deployment",
}


class SectionParser:
    """Incrementally demultiplexes a marker-delimited generation stream.

    One parser handles exactly one stream. Call `consume_chunk` for each
    chunk in order, then `finish` once the stream ends (or fails).
    """

    def __init__(self, keep_narrative: bool = False):
        self.keep_narrative = keep_narrative
        self.state = ParserState()
        self.result = GenerationResult()
        self.errors: List[MalformedMarkerError] = []
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    # -------------------------
    # Public API
    # -------------------------
    def consume_chunk(self, chunk: str) -> GenerationResult:
        """Process one chunk and return a snapshot of the closed sections so far."""
        if self._finished:
            raise RuntimeError("parser already finished")
        if chunk:
            self._scan(self.state.pending + chunk, final=False)
        return self.result.copy()

    def finish(self) -> GenerationResult:
        """End of stream: resolve held-back text and flush the open section."""
        if not self._finished:
            if self.state.pending:
                self._scan(self.state.pending, final=True)
            if self.state.mode is not ParseMode.NONE:
                logger.info(
                    "stream ended inside %s section, flushing %d buffered chars",
                    SECTION_NAMES[self.state.mode], len(self.state.buffer),
                )
                self._close()
            self._finished = True
        return self.result.copy()

    def active_section(self) -> Optional[Dict[str, Optional[str]]]:
        """The section currently open, with the text buffered for it so far."""
        if self.state.mode is ParseMode.NONE:
            return None
        return {
            "section": SECTION_NAMES[self.state.mode],
            "file_path": self.state.current_file_path or None,
            "text": self.state.buffer,
        }

    # -------------------------
    # Scanning
    # -------------------------
    def _scan(self, text: str, final: bool) -> None:
        self.state.pending = ""
        pos = 0
        while pos < len(text):
            i = text.find("[", pos)
            if i < 0:
                self._emit(text[pos:])
                return
            self._emit(text[pos:i])
            nxt = self._match_marker(text, i, final)
            if nxt is None:
                self.state.pending = text[i:]
                return
            pos = nxt

    def _match_marker(self, text: str, i: int, final: bool) -> Optional[int]:
        """Handle whatever starts at text[i] == "[".

        Returns the position to resume scanning from, or None when the tail
        might still become a marker and must wait for more input.
        """
        for marker, mode in END_MARKERS.items():
            if text.startswith(marker, i):
                if self.state.mode is mode:
                    self._close()
                else:
                    logger.debug("unbalanced %s ignored", marker)
                    self._emit(marker)
                return i + len(marker)

        for marker, mode in TEXT_START_MARKERS.items():
            if text.startswith(marker, i):
                self._open(mode)
                return i + len(marker)

        if text.startswith(START_CODE_PREFIX, i):
            return self._match_start_code(text, i, final)

        if not final:
            tail = text[i:]
            if any(p.startswith(tail) for p in ALL_PREFIXES):
                return None

        self._emit("[")
        return i + 1

    def _match_start_code(self, text: str, i: int, final: bool) -> Optional[int]:
        path_start = i + len(START_CODE_PREFIX)
        close = text.find(MARKER_CLOSE, path_start)
        limit = close if close >= 0 else len(text)

        # only the first MAX_FILE_PATH_LENGTH + 1 chars decide, whatever has arrived so far
        window = min(limit, path_start + MAX_FILE_PATH_LENGTH + 1)
        newline = text.find("\n", path_start, window)
        if newline >= 0:
            return self._malformed(text[i:newline], "newline before closing ']'", path_start)

        if close < 0:
            if limit - path_start > MAX_FILE_PATH_LENGTH:
                return self._malformed(
                    START_CODE_PREFIX + text[path_start:path_start + 40] + "...",
                    "file path too long", path_start,
                )
            if final:
                return self._malformed(text[i:], "missing closing ']'", path_start)
            return None

        path = text[path_start:close]
        if len(path) > MAX_FILE_PATH_LENGTH:
            return self._malformed(
                START_CODE_PREFIX + path[:40] + "...", "file path too long", path_start,
            )
        if not path.strip():
            return self._malformed(text[i:close + 1], "empty file path", path_start)

        self._open(ParseMode.IN_CODE, path)
        return close + 1

    def _malformed(self, marker: str, reason: str, resume: int) -> int:
        err = MalformedMarkerError(marker, reason)
        self.errors.append(err)
        logger.warning("%s", err)
        # the prefix becomes plain text, the rest is scanned normally
        self._emit(START_CODE_PREFIX)
        return resume

    # -------------------------
    # State transitions
    # -------------------------
    def _emit(self, text: str) -> None:
        if not text:
            return
        if self.state.mode is ParseMode.NONE:
            if self.keep_narrative:
                self.result.narrative += text
            return
        self.state.buffer += text

    def _open(self, mode: ParseMode, file_path: str = "") -> None:
        if self.state.mode is not ParseMode.NONE:
            logger.debug(
                "%s section implicitly closed by start of %s",
                SECTION_NAMES[self.state.mode], SECTION_NAMES[mode],
            )
            self._close()
        self.state.mode = mode
        self.state.current_file_path = file_path
        self.state.buffer = ""

    def _close(self) -> None:
        mode = self.state.mode
        content = self.state.buffer.strip()
        if mode is ParseMode.IN_CODE:
            self._add_file(GeneratedFile(file_path=self.state.current_file_path, code=content))
        elif mode in _TEXT_FIELDS and content:
            name = _TEXT_FIELDS[mode]
            current = getattr(self.result, name)
            setattr(self.result, name, f"{current}\n\n{content}" if current else content)
        self.state.reset()

    def _add_file(self, gen_file: GeneratedFile) -> None:
        for idx, existing in enumerate(self.result.files):
            if existing.file_path == gen_file.file_path:
                logger.warning("duplicate file path %r, keeping the later content", gen_file.file_path)
                self.result.files[idx] = gen_file
                return
        self.result.files.append(gen_file)


def parse_stream(chunks: Iterable[str], keep_narrative: bool = False) -> Iterator[GenerationResult]:
    """Yield a snapshot after every chunk, then the finished result."""
    parser = SectionParser(keep_narrative=keep_narrative)
    for chunk in chunks:
        yield parser.consume_chunk(chunk)
    yield parser.finish()


def parse_text(text: str, keep_narrative: bool = False) -> GenerationResult:
    """Parse a complete response in one go."""
    parser = SectionParser(keep_narrative=keep_narrative)
    parser.consume_chunk(text)
    return parser.finish()
