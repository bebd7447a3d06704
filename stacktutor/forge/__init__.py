# API forge package: stream a generated backend and split it into files and docs.

from .errors import ForgeError, MalformedMarkerError, EmptyResultError, UpstreamStreamError
from .history import GenerationHistory, HistoryItem
from .parser import SectionParser, parse_stream, parse_text
from .service import ApiForge, ForgeUpdate, clean_file_path
from .types import GeneratedFile, GenerationConfig, GenerationResult, ParseMode, ParserState

__all__ = [
    "ApiForge", "ForgeUpdate", "clean_file_path",
    "SectionParser", "parse_stream", "parse_text",
    "GeneratedFile", "GenerationConfig", "GenerationResult", "ParseMode", "ParserState",
    "GenerationHistory", "HistoryItem",
    "ForgeError", "MalformedMarkerError", "EmptyResultError", "UpstreamStreamError",
]
