"""FastAPI backend for Empathy Interview Bot."""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import List, Literal, Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from empathy_bot.analysis import analyze_transcript
from empathy_bot.backends import BaseCompletionBackend, create_backend
from empathy_bot.config import Config
from empathy_bot.errors import EmpathyBotError, InputError, UpstreamError
from empathy_bot.exchange import exchange_turn, split_pending_utterance
from empathy_bot.export import export_filename, render_pdf, render_text
from empathy_bot.logging_setup import configure_logging
from empathy_bot.models import Turn, turns_from_dicts
from empathy_bot.persona import get_persona, portrait_prompt
from empathy_bot.providers import OpenAISpeech, OpenAITranscriber, PortraitGenerator
from empathy_bot.providers.speech import AUDIO_MEDIA_TYPE


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    missing = Config.validate()
    if missing:
        logger.warning(f"Missing configuration: {', '.join(missing)}")
    logger.info(f"Completion backend: {Config.COMPLETION_BACKEND}")
    yield


app = FastAPI(title="Empathy Interview Bot", lifespan=lifespan)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Collaborators, overridable through app.dependency_overrides
@lru_cache(maxsize=1)
def get_backend() -> BaseCompletionBackend:
    try:
        return create_backend(Config.COMPLETION_BACKEND)
    except ValueError as e:
        logger.error(f"Completion backend unavailable: {e}")
        raise UpstreamError(str(e)) from e


def get_transcriber() -> OpenAITranscriber:
    return OpenAITranscriber()


def get_speech() -> OpenAISpeech:
    return OpenAISpeech()


def get_portraits() -> PortraitGenerator:
    return PortraitGenerator()


# Request models
class MessageModel(BaseModel):
    role: Literal["user", "assistant", "trainee", "persona"]
    content: str


def _to_turns(history: List[MessageModel]) -> tuple:
    return turns_from_dicts([m.model_dump() for m in history])


class ChatRequest(BaseModel):
    history: List[MessageModel] = Field(default_factory=list)
    user: str
    persona: Optional[str] = None  # persona id

    @field_validator("user")
    @classmethod
    def user_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Missing user message")
        return v


class AnalyzeRequest(BaseModel):
    history: List[MessageModel]


class TtsRequest(BaseModel):
    text: str = ""
    voice: Optional[str] = None


class PersonaRequest(BaseModel):
    seed: Optional[str] = None
    generate_image: Optional[bool] = None


class ExportRequest(BaseModel):
    history: List[MessageModel]
    persona: Optional[str] = None  # persona id


@app.exception_handler(EmpathyBotError)
async def empathy_error_handler(request: Request, exc: EmpathyBotError):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(status_code=InputError.status_code, content={"error": f"{where}: {message}" if where else message})


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/favicon.ico")
async def favicon():
    """Return empty favicon to prevent 404 errors."""
    return Response(status_code=204)


@app.post("/api/persona")
async def persona_endpoint(
    payload: Optional[PersonaRequest] = None,
    portraits: PortraitGenerator = Depends(get_portraits),
):
    """Establish the session persona and its portrait."""
    payload = payload or PersonaRequest()
    persona = get_persona(payload.seed)

    wants_image = Config.GENERATE_PORTRAIT if payload.generate_image is None else payload.generate_image
    if wants_image:
        portrait = await portraits.generate(portrait_prompt(persona))
    else:
        portrait = portraits.placeholder()

    body = {
        "persona": persona.public_dict(),
        "imageUrl": portrait.url,
        "imageSource": portrait.source,
    }
    if portrait.error:
        body["error"] = portrait.error
    return body


@app.post("/api/chat")
async def chat_endpoint(payload: ChatRequest, backend: BaseCompletionBackend = Depends(get_backend)):
    """Produce the persona's next reply."""
    history = split_pending_utterance(_to_turns(payload.history), payload.user)
    persona = get_persona(payload.persona)
    reply = await exchange_turn(backend, persona, history, payload.user)
    return {"text": reply.text, "empty": reply.text == ""}


@app.post("/api/chat/stt")
async def stt_endpoint(
    file: Optional[UploadFile] = File(None),
    transcriber: OpenAITranscriber = Depends(get_transcriber),
):
    """Transcribe a recorded question. Failures yield empty text."""
    if file is None:
        raise InputError("No file")
    audio = await file.read()
    text = await transcriber.transcribe(audio, file.filename, file.content_type)
    return {"text": text}


@app.post("/api/tts")
async def tts_endpoint(payload: TtsRequest, speech: OpenAISpeech = Depends(get_speech)):
    """Synthesize a persona reply to mp3."""
    audio = await speech.synthesize(payload.text, payload.voice)
    return Response(content=audio, media_type=AUDIO_MEDIA_TYPE)


@app.post("/api/analyze")
async def analyze_endpoint(payload: AnalyzeRequest, backend: BaseCompletionBackend = Depends(get_backend)):
    """Critique the trainee's questioning technique."""
    result = await analyze_transcript(backend, _to_turns(payload.history))
    return result.to_dict()


def _attachment(content, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/api/export/txt")
async def export_txt(payload: ExportRequest):
    persona = get_persona(payload.persona)
    turns: List[Turn] = list(_to_turns(payload.history))
    text = render_text(persona, turns)
    return _attachment(text, "text/plain; charset=utf-8", export_filename(persona, "txt"))


@app.post("/api/export/pdf")
async def export_pdf(payload: ExportRequest):
    persona = get_persona(payload.persona)
    turns: List[Turn] = list(_to_turns(payload.history))
    pdf = render_pdf(persona, turns)
    return _attachment(pdf, "application/pdf", export_filename(persona, "pdf"))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)
