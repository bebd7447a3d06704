# =============================================================
# ApiForge: caller-level contract around the section parser.
# -------------------------------------------------------------
#   - builds the forge prompt and streams it through a model client
#   - feeds every chunk, in order, to a fresh SectionParser
#   - yields a ForgeUpdate after each chunk, then a final one
#   - raises UpstreamStreamError (with the partial result) when the
#     client fails mid-stream, EmptyResultError when no files came back
#
# Cancellation is the caller's job: closing the generator stops the
# model stream and the parse is simply dropped.
# =============================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from stacktutor.generate.types import Message, ModelParams
from stacktutor.log import get_logger

from .errors import EmptyResultError, UpstreamStreamError
from .history import GenerationHistory
from .parser import SectionParser
from .prompts import build_forge_messages, build_refine_messages
from .types import GeneratedFile, GenerationConfig, GenerationResult

logger = get_logger("forge.service")

_PATH_NOISE = "\"'`{} \t"


def clean_file_path(path: str) -> str:
    """Strip quote/brace noise the model sometimes wraps around a path."""
    cleaned = path.strip().strip(_PATH_NOISE)
    return cleaned or path


def clean_paths(result: GenerationResult) -> GenerationResult:
    out = result.copy()
    out.files = [GeneratedFile(file_path=clean_file_path(f.file_path), code=f.code) for f in result.files]
    return out


@dataclass
class ForgeUpdate:
    """One step of a forge stream, as handed to the UI."""
    result: GenerationResult
    active: Optional[Dict[str, Optional[str]]] = None
    done: bool = False
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "done" if self.done else "snapshot",
            "result": self.result.to_dict(),
            "active": self.active,
            "warnings": self.warnings,
        }


class ApiForge:
    def __init__(
        self,
        model_client,
        params: Optional[ModelParams] = None,
        history: Optional[GenerationHistory] = None,
        keep_narrative: bool = False,
    ):
        self.model_client = model_client
        self.params = params or ModelParams(temperature=0.2, max_tokens=8000)
        self.history = history
        self.keep_narrative = keep_narrative

    def generate_stream(self, config: GenerationConfig) -> Iterator[ForgeUpdate]:
        """Validate the request now; the returned iterator does the streaming."""
        if not config.prompt.strip():
            raise ValueError("prompt must not be empty")
        return self._run_generation(config)

    def _run_generation(self, config: GenerationConfig) -> Iterator[ForgeUpdate]:
        messages = build_forge_messages(config)
        parser = SectionParser(keep_narrative=self.keep_narrative)
        logger.info("forge start: %s/%s/%s", config.language, config.framework, config.database)

        chunks = None
        while True:
            # only the model client is wrapped; parser errors propagate as-is
            try:
                if chunks is None:
                    chunks = iter(self.model_client.stream(messages, self.params))
                chunk = next(chunks)
            except StopIteration:
                break
            except Exception as e:
                partial = clean_paths(parser.finish())
                logger.exception("forge stream failed with %d files parsed", len(partial.files))
                raise UpstreamStreamError(partial, f"generation stream failed: {e}") from e

            snapshot = parser.consume_chunk(chunk)
            yield ForgeUpdate(result=clean_paths(snapshot), active=parser.active_section())

        result = clean_paths(parser.finish())
        warnings = [str(err) for err in parser.errors]
        if not result.files:
            logger.warning("forge finished without code files (%d malformed markers)", len(warnings))
            raise EmptyResultError(result)

        if self.history is not None:
            self.history.add(config, result)
        logger.info("forge done: %d files", len(result.files))
        yield ForgeUpdate(result=result, done=True, warnings=warnings)

    def generate(self, config: GenerationConfig) -> GenerationResult:
        """Drain generate_stream and return the final result."""
        final = None
        for update in self.generate_stream(config):
            final = update
        return final.result

    def refine_stream(
        self,
        result: GenerationResult,
        refinement: str,
        chat: Optional[List[Message]] = None,
    ) -> Iterator[str]:
        """Stream a free-text refinement answer for an earlier result."""
        if not refinement.strip():
            raise ValueError("refinement prompt must not be empty")
        messages = build_refine_messages(result.files, refinement, chat or [])
        return self._run_refinement(result, messages)

    def _run_refinement(self, result: GenerationResult, messages: List[Message]) -> Iterator[str]:
        try:
            yield from self.model_client.stream(messages, self.params)
        except Exception as e:
            logger.exception("refinement stream failed")
            raise UpstreamStreamError(result, f"refinement stream failed: {e}") from e
