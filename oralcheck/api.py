"""
oralcheck.api - FastAPI application.

Exposes the transcription and question-generation boundaries plus a
server-side transcript analysis endpoint. Every error response is JSON
with an "error" key.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from oralcheck import __version__
from oralcheck.analyze.feedback import build_feedback
from oralcheck.analyze.transcript import SessionContext, analyze_transcript
from oralcheck.config import OralCheckConfig
from oralcheck.results import Outcome
from oralcheck.service import (
    QuestionGenerator,
    Transcriber,
    default_question_generator,
    default_transcriber,
    run_question_generation,
    run_transcription,
)
from oralcheck.transcribe.engine import DEFAULT_FILENAME

logger = logging.getLogger(__name__)


FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]


class AnalyzeRequest(BaseModel):
    transcript: str = ""
    duration_seconds: float | None = Field(default=None, ge=0.0, allow_inf_nan=False)
    pitch_series: list[FiniteFloat] = Field(default_factory=list)
    loudness_series: list[FiniteFloat] = Field(default_factory=list)


def _failure_response(outcome: Outcome[Any], detail_key: str) -> JSONResponse:
    failure = outcome.failure
    return JSONResponse(failure.to_payload(detail_key), status_code=failure.status_code)


async def _read_audio(request: Request) -> tuple[bytes, str]:
    """Read audio from a multipart "file" field or from the raw body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if isinstance(upload, UploadFile):
            return await upload.read(), upload.filename or DEFAULT_FILENAME
        return b"", DEFAULT_FILENAME
    return await request.body(), DEFAULT_FILENAME


def create_app(
    config: OralCheckConfig | None = None,
    transcriber: Transcriber | None = None,
    question_generator: QuestionGenerator | None = None,
    context: SessionContext | None = None,
) -> FastAPI:
    """Build the API application.

    The session context (and so the learned vocabulary) lives as long as
    the application.
    """
    config = config or OralCheckConfig()

    app = FastAPI(
        title="Oralcheck API",
        version=__version__,
        description="Transcribe oral assessments, score transcripts and suggest questions.",
    )
    app.state.config = config
    app.state.context = context or SessionContext.from_config(config)
    app.state.transcriber = transcriber or default_transcriber(config)
    app.state.question_generator = question_generator or default_question_generator(config)

    origins = config.cors_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            {"error": str(exc.detail)},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
        return JSONResponse(
            {"error": "Invalid request", "detail": "; ".join(messages)},
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    @app.post("/api/transcribe")
    async def transcribe(request: Request) -> JSONResponse:
        try:
            audio, filename = await _read_audio(request)
        except Exception as e:
            logger.exception("Could not read audio payload")
            return _failure_response(
                Outcome.internal("Transcription failed", str(e)), detail_key="detail"
            )

        outcome = await run_in_threadpool(
            run_transcription, audio, request.app.state.transcriber, filename
        )
        if not outcome.ok:
            return _failure_response(outcome, detail_key="detail")
        return JSONResponse({"transcript": outcome.value})

    @app.post("/api/questions")
    async def questions(request: Request) -> JSONResponse:
        raw = await request.body()
        try:
            body = json.loads(raw) if raw.strip() else {}
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return _failure_response(
                Outcome.internal("Question generation failed", str(e)), detail_key="details"
            )

        transcript = body.get("transcript") if isinstance(body, dict) else None
        if not isinstance(transcript, str):
            transcript = ""

        outcome = await run_in_threadpool(
            run_question_generation, transcript, request.app.state.question_generator
        )
        if not outcome.ok:
            return _failure_response(outcome, detail_key="details")
        return JSONResponse({"questions": outcome.value})

    @app.post("/api/analyze")
    async def analyze(payload: AnalyzeRequest, request: Request) -> JSONResponse:
        metrics = analyze_transcript(
            payload.transcript,
            request.app.state.context,
            pitch_series=payload.pitch_series,
            loudness_series=payload.loudness_series,
            elapsed_seconds=payload.duration_seconds or 0.0,
        )
        if metrics is None:
            return JSONResponse({"metrics": None, "feedback": None})
        return JSONResponse({"metrics": metrics.to_dict(), "feedback": build_feedback(metrics)})

    return app
