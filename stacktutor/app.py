# ============================================================
# StackTutor FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - API forge: streamed backend generation split into files/docs
#   - Refinement chat over a generated result
#   - Tutor tools (explain, simplify, review, debug, ...)
#   - JSON tutor tools: quiz, learning path, interview question
#   - Support for Ollama, OpenAI, or Echo clients
# ============================================================

import json
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, StreamingResponse
import requests
from pydantic import BaseModel, Field, field_validator

# --- Local imports ---
from stacktutor.settings import settings
from stacktutor.log import get_logger
from stacktutor.generate import (
    ChatGenerator,
    ChatResponse,
    InterviewQuestion,
    LearningPath,
    Message,
    ModelParams,
    Quiz,
    StructuredOutputError,
    build_model_client,
)
from stacktutor.forge import (
    ApiForge,
    EmptyResultError,
    GeneratedFile,
    GenerationConfig,
    GenerationHistory,
    GenerationResult,
    UpstreamStreamError,
)
from stacktutor.forge.github import GitHubError, GitHubPusher

logger = get_logger("app")

# ------------------------------------------------------------
# 🔧 Model client + services, built from explicit settings
# ------------------------------------------------------------
model_client = build_model_client(settings)
history = GenerationHistory(limit=settings.HISTORY_LIMIT)
forge = ApiForge(
    model_client,
    params=ModelParams(
        temperature=settings.FORGE_TEMPERATURE,
        max_tokens=settings.FORGE_MAX_TOKENS,
        model=settings.FORGE_MODEL,
    ),
    history=history,
    keep_narrative=settings.KEEP_NARRATIVE,
)
chat_gen = ChatGenerator(model_client=model_client)


def get_forge() -> ApiForge:
    return forge


def get_history() -> GenerationHistory:
    return history


def get_chat_gen() -> ChatGenerator:
    return chat_gen


def get_pusher_cls():
    return GitHubPusher

# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title="StackTutor API", version="0.3")

# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
def _not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value

class ChatTurn(BaseModel):
    role: str
    content: str

class FilePayload(BaseModel):
    file_path: str
    code: str

class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    language: str = "nodejs"
    framework: str = "express"
    database: str = "mongodb"

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, v: str) -> str:
        return _not_blank(v)

    def to_config(self) -> GenerationConfig:
        return GenerationConfig(
            prompt=self.prompt, language=self.language, framework=self.framework, database=self.database,
        )

class ResultPayload(BaseModel):
    files: List[FilePayload]
    explanation: str = ""
    documentation: str = ""
    deployment: str = ""
    narrative: str = ""

class GenerateResponse(BaseModel):
    result: ResultPayload
    warnings: List[str] = []

class RefineRequest(BaseModel):
    files: List[FilePayload]
    refinement: str = Field(..., min_length=1)
    chat: Optional[List[ChatTurn]] = None

    @field_validator("refinement")
    @classmethod
    def refinement_not_blank(cls, v: str) -> str:
        return _not_blank(v)

class PushRequest(BaseModel):
    token: str = Field(..., min_length=1)
    repo_url: str
    files: List[FilePayload]
    commit_message: str = "Initial commit from StackTutor API Forge"
    branch: str = "main"

class TutorRequest(BaseModel):
    code: Optional[str] = None
    language: Optional[str] = None
    topic: Optional[str] = None
    exercise: Optional[str] = None
    topics: Optional[List[str]] = None
    question: Optional[str] = None
    explanation: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

class QuizRequest(BaseModel):
    topic_title: str = Field(..., min_length=1)
    topic_content: str = ""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

class LearningPathRequest(BaseModel):
    goal: str = Field(..., min_length=1)
    catalog: Optional[List[str]] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    @field_validator("goal")
    @classmethod
    def goal_not_blank(cls, v: str) -> str:
        return _not_blank(v)

class InterviewQuestionRequest(BaseModel):
    technology: str = Field(..., min_length=1)
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

class ChatPayload(BaseModel):
    text: str
    tool: str
    meta: Dict[str, Any]


def _to_files(items: List[FilePayload]) -> List[GeneratedFile]:
    return [GeneratedFile(file_path=f.file_path, code=f.code) for f in items]

# ------------------------------------------------------------
# ⚠️ Error mapping
# ------------------------------------------------------------
@app.exception_handler(EmptyResultError)
async def empty_result_handler(request: Request, exc: EmptyResultError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "result": exc.result.to_dict()})

@app.exception_handler(UpstreamStreamError)
async def upstream_handler(request: Request, exc: UpstreamStreamError):
    return JSONResponse(status_code=502, content={"detail": str(exc), "partial": exc.partial.to_dict()})

@app.exception_handler(GitHubError)
async def github_handler(request: Request, exc: GitHubError):
    return JSONResponse(status_code=502, content={"detail": str(exc), "status": exc.status})

@app.exception_handler(StructuredOutputError)
async def structured_output_handler(request: Request, exc: StructuredOutputError):
    return JSONResponse(status_code=502, content={"detail": str(exc), "tool": exc.tool})

@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})

# ------------------------------------------------------------
# 🛠️ API forge
# ------------------------------------------------------------
@app.post("/forge/generate", response_model=GenerateResponse)
def forge_generate(req: GenerateRequest, api_forge: ApiForge = Depends(get_forge)):
    final = None
    for update in api_forge.generate_stream(req.to_config()):
        final = update
    return {"result": final.result.to_dict(), "warnings": final.warnings}

@app.post("/forge/generate/stream")
def forge_generate_stream(req: GenerateRequest, api_forge: ApiForge = Depends(get_forge)):
    """NDJSON: one `snapshot` line per chunk, then `done` or `error`."""
    updates = api_forge.generate_stream(req.to_config())

    def lines():
        try:
            for update in updates:
                yield json.dumps(update.to_dict()) + "\n"
        except EmptyResultError as e:
            yield json.dumps({"type": "error", "error": "empty_result", "detail": str(e), "result": e.result.to_dict()}) + "\n"
        except UpstreamStreamError as e:
            yield json.dumps({"type": "error", "error": "upstream", "detail": str(e), "result": e.partial.to_dict()}) + "\n"

    return StreamingResponse(lines(), media_type="application/x-ndjson")

@app.post("/forge/refine/stream")
def forge_refine_stream(req: RefineRequest, api_forge: ApiForge = Depends(get_forge)):
    result = GenerationResult(files=_to_files(req.files))
    chat = [Message(**t.model_dump()) for t in (req.chat or [])]
    answer = api_forge.refine_stream(result, req.refinement, chat)

    def chunks():
        try:
            yield from answer
        except UpstreamStreamError as e:
            yield f"\n\n[error] {e}"

    return StreamingResponse(chunks(), media_type="text/plain")

@app.get("/forge/history")
def list_history(hist: GenerationHistory = Depends(get_history)):
    return {"items": [item.to_dict() for item in hist.list()]}

@app.get("/forge/history/{item_id}")
def get_history_item(item_id: str, hist: GenerationHistory = Depends(get_history)):
    item = hist.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"History item not found: {item_id}")
    return item.to_dict()

@app.delete("/forge/history")
def clear_history(hist: GenerationHistory = Depends(get_history)):
    hist.clear()
    return {"cleared": True}

@app.post("/forge/push")
def forge_push(req: PushRequest, pusher_cls=Depends(get_pusher_cls)):
    try:
        sha = pusher_cls(req.token).push(req.repo_url, _to_files(req.files), req.commit_message, req.branch)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except requests.RequestException as e:
        logger.warning("github push failed: %s", e)
        raise HTTPException(status_code=502, detail=f"GitHub request failed: {e}")
    return {"commit": sha, "branch": req.branch, "files": len(req.files)}

# ------------------------------------------------------------
# 🎓 Tutor tools
# ------------------------------------------------------------
@app.get("/tutor")
def list_tools(gen: ChatGenerator = Depends(get_chat_gen)):
    return {"tools": gen.tools, "structured": gen.structured_tools}

# JSON tools are declared before the generic /tutor/{tool} route
def _structured(tool: str, call, *args, **kw):
    try:
        return call(*args, **kw)
    except ValueError:
        raise
    except Exception as e:
        logger.exception("tutor tool %s failed", tool)
        raise HTTPException(status_code=502, detail=str(e))

@app.post("/tutor/quiz", response_model=Quiz, response_model_by_alias=False)
def tutor_quiz(req: QuizRequest, gen: ChatGenerator = Depends(get_chat_gen)):
    return _structured(
        "quiz", gen.generate_quiz, req.topic_title, req.topic_content,
        temperature=req.temperature, max_tokens=req.max_tokens,
    )

@app.post("/tutor/learning-path", response_model=LearningPath, response_model_by_alias=False)
def tutor_learning_path(req: LearningPathRequest, gen: ChatGenerator = Depends(get_chat_gen)):
    return _structured(
        "learning-path", gen.generate_learning_path, req.goal, req.catalog,
        temperature=req.temperature, max_tokens=req.max_tokens,
    )

@app.post("/tutor/interview-question", response_model=InterviewQuestion, response_model_by_alias=False)
def tutor_interview_question(req: InterviewQuestionRequest, gen: ChatGenerator = Depends(get_chat_gen)):
    return _structured(
        "interview-question", gen.get_interview_question, req.technology,
        temperature=req.temperature, max_tokens=req.max_tokens,
    )

@app.post("/tutor/{tool}", response_model=ChatPayload)
def run_tool(tool: str, req: TutorRequest, gen: ChatGenerator = Depends(get_chat_gen)):
    if tool not in gen.tools:
        raise HTTPException(status_code=404, detail=f"Unknown tutor tool '{tool}'")
    fields = req.model_dump(exclude_none=True, exclude={"temperature", "max_tokens"})
    try:
        out: ChatResponse = gen.run_tool(tool, temperature=req.temperature, max_tokens=req.max_tokens, **fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("tutor tool %s failed", tool)
        raise HTTPException(status_code=502, detail=str(e))
    return ChatPayload(text=out.text, tool=out.tool, meta=out.meta)

# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.app_name,
        "engine": type(model_client).__name__,
    }

@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}

@app.get("/")
def hello():
    return {"message": "StackTutor service running."}
