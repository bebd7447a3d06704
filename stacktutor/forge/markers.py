# Marker tokens the forge system prompt asks the model to emit verbatim.
# There is no escaping: a literal marker inside generated content is read as a marker.

from .types import ParseMode

START_CODE_PREFIX = "[START_CODE:"
MARKER_CLOSE = "]"
END_CODE = "[END_CODE]"
START_EXPLANATION = "[START_EXPLANATION]"
END_EXPLANATION = "[END_EXPLANATION]"
START_DOCS = "[START_DOCS]"
END_DOCS = "[END_DOCS]"
START_DEPLOYMENT = "[START_DEPLOYMENT]"
END_DEPLOYMENT = "[END_DEPLOYMENT]"

# bounds on <file_path> so a broken marker cannot hold the stream back forever
MAX_FILE_PATH_LENGTH = 512

# fixed (path-less) start markers -> section they open
TEXT_START_MARKERS = {
    START_EXPLANATION: ParseMode.IN_EXPLANATION,
    START_DOCS: ParseMode.IN_DOCS,
    START_DEPLOYMENT: ParseMode.IN_DEPLOYMENT,
}

END_MARKERS = {
    END_CODE: ParseMode.IN_CODE,
    END_EXPLANATION: ParseMode.IN_EXPLANATION,
    END_DOCS: ParseMode.IN_DOCS,
    END_DEPLOYMENT: ParseMode.IN_DEPLOYMENT,
}

# every literal that can begin at a "[", used to decide whether a tail may still grow into a marker
ALL_PREFIXES = (START_CODE_PREFIX, *TEXT_START_MARKERS, *END_MARKERS)

SECTION_NAMES = {
    ParseMode.IN_CODE: "code",
    ParseMode.IN_EXPLANATION: "explanation",
    ParseMode.IN_DOCS: "documentation",
    ParseMode.IN_DEPLOYMENT: "deployment",
}
