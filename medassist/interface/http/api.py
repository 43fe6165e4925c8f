"""HTTP API for answers and dosage calculations.

Pure delegation to the orchestrator and the dosage service.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from medassist.application.use_cases.answer_medical_query import AnswerMedicalQuery
from medassist.application.use_cases.chat_session import route_query
from medassist.config.composition import build_answer_use_case
from medassist.config.logging_setup import configure_logging
from medassist.config.settings import AppSettings
from medassist.domain.errors import ValidationError
from medassist.domain.models import ConversationTurn
from medassist.domain.services.dosage import DosageRequest, calculate_dosage


class TurnModel(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class AnswerRequestModel(BaseModel):
    """Request model for /v1/answer endpoint."""

    query: str
    history: list[TurnModel] = Field(default_factory=list)


class CitationModel(BaseModel):
    source: str
    page: int | None = None
    chapter: str | None = None
    relevance: float


class AnswerResponseModel(BaseModel):
    """Response model for /v1/answer endpoint."""

    response: str
    citations: list[CitationModel]


class DosageRequestModel(BaseModel):
    drug_name: str
    dose_per_kg: float
    weight_kg: float
    max_dose: float | None = None
    frequency: str


class DosageResponseModel(BaseModel):
    calculated_dose: float
    final_dose: float
    capped: bool
    text: str


def create_app(
    use_case_factory: Callable[[], Any] = build_answer_use_case,
) -> FastAPI:
    """Build the app; the orchestrator is created once at startup.

    Configuration errors raised by the factory abort startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(AppSettings().log_level)
        app.state.answer_use_case = use_case_factory()
        yield

    app = FastAPI(title="MedAssist RAG API", version="1.0.0", lifespan=lifespan)

    @app.post("/v1/answer", response_model=AnswerResponseModel)
    async def answer(req: AnswerRequestModel, request: Request) -> AnswerResponseModel:
        uc: AnswerMedicalQuery | None = getattr(request.app.state, "answer_use_case", None)
        if uc is None:
            raise HTTPException(status_code=503, detail="Service not initialized")
        history = tuple(ConversationTurn(role=t.role, content=t.content) for t in req.history)
        result = await route_query(uc, req.query, history)
        return AnswerResponseModel(
            response=result.response,
            citations=[
                CitationModel(
                    source=c.source, page=c.page, chapter=c.chapter, relevance=c.relevance
                )
                for c in result.citations
            ],
        )

    @app.post("/v1/dosage", response_model=DosageResponseModel)
    async def dosage(req: DosageRequestModel) -> DosageResponseModel:
        try:
            result = calculate_dosage(
                DosageRequest(
                    drug_name=req.drug_name,
                    dose_per_kg=req.dose_per_kg,
                    weight_kg=req.weight_kg,
                    max_dose=req.max_dose,
                    frequency=req.frequency,
                )
            )
        except ValidationError as ex:
            raise HTTPException(status_code=422, detail=str(ex)) from ex
        return DosageResponseModel(
            calculated_dose=result.calculated_dose,
            final_dose=result.final_dose,
            capped=result.capped,
            text=result.text,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "medassist"}

    return app


app = create_app()
