"""
Expense QA — FastAPI app.
POST /api/expenses/query {question, userId|tenantId, searchTerm?, includeResults?}
"""
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from agents.orchestrator import ExpenseQAPipeline, build_pipeline
from utils.config import get_settings
from utils.errors import ExpenseQAError, ValidationError

settings = get_settings()

logging.basicConfig(level=settings.log_level, format="%(name)s | %(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Expense QA API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
    allow_credentials=True,
)


class QueryRequest(BaseModel):
    question: Optional[str] = None
    user_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("userId", "tenantId"))
    search_term: Optional[str] = Field(default=None, validation_alias=AliasChoices("searchTerm", "search_term"))
    include_results: bool = Field(default=False, validation_alias=AliasChoices("includeResults", "include_results"))


_pipeline: Optional[ExpenseQAPipeline] = None


def get_pipeline() -> ExpenseQAPipeline:
    """Pipeline built once per process from settings."""
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline(settings)
    return _pipeline


@app.exception_handler(ExpenseQAError)
def handle_pipeline_error(request: Request, exc: ExpenseQAError):
    if isinstance(exc, ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})
    logger.error("request_failed: path=%s error=%s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Failed to process request", "details": str(exc)})


@app.get("/")
def root():
    return {"status": "ok", "message": "Expense QA API"}


@app.post("/api/expenses/query")
def query_expenses(body: QueryRequest, pipeline: ExpenseQAPipeline = Depends(get_pipeline)):
    """Answer a natural-language question over the caller's expenses."""
    question = (body.question or "").strip()
    user_id = (body.user_id or "").strip()
    if not question or not user_id:
        return JSONResponse(status_code=400, content={"error": "Question and userId are required"})

    result = pipeline.run(
        question,
        user_id,
        search_term=body.search_term,
        include_results=body.include_results,
    )
    if "error" in result:
        return JSONResponse(status_code=500, content=result)
    return result


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api:app", host="0.0.0.0", port=4000)
