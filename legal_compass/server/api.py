"""
API route definitions for the Legal Compass server.

Endpoints are plain functions so FastAPI runs the blocking engine calls in
its threadpool.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ..errors import SessionNotFoundError
from ..retrieval import LegalEngine
from .dependencies import get_engine
from .schemas import (
    CompareRequest,
    CompareResponse,
    ErrorResponse,
    HealthResponse,
    MessageModel,
    QueryRequest,
    QueryResponse,
    SessionCreateResponse,
    SessionHistoryResponse,
    SessionMetadataModel,
    SessionStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"error": "session_not_found", "message": f"Session not found: {session_id}"},
    )


# ============================================================================
# QUERY
# ============================================================================

@router.post(
    "/query",
    response_model=QueryResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Unknown session (strict mode)"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Ask a legal question",
)
def query(request: QueryRequest, engine: LegalEngine = Depends(get_engine)) -> QueryResponse:
    """
    Answer a legal question.

    When `session_id` is given, follow-up questions are reformulated using
    the session history and the exchange is recorded in the session.
    """
    try:
        logger.info(f"Processing query: {request.query[:100]}...")
        answer = engine.query(
            request.query,
            language=request.language,
            arguments_mode=request.arguments_mode,
            analysis_mode=request.analysis_mode,
            session_id=request.session_id,
        )
        return QueryResponse.from_answer(answer, session_id=request.session_id)
    except SessionNotFoundError:
        raise _not_found(request.session_id or "")
    except Exception as e:
        logger.exception(f"Error processing query: {e}")
        raise HTTPException(
            status_code=500,
            detail={"error": "query_error", "message": str(e)},
        )


# ============================================================================
# SESSIONS
# ============================================================================

@router.post("/session/create", response_model=SessionCreateResponse, summary="Create a conversation session")
def create_session(engine: LegalEngine = Depends(get_engine)) -> SessionCreateResponse:
    return SessionCreateResponse(session_id=engine.create_session())


@router.get(
    "/session/{session_id}/history",
    response_model=SessionHistoryResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get conversation history",
)
def get_history(
    session_id: str,
    max_messages: int = Query(default=10, ge=1, le=100),
    engine: LegalEngine = Depends(get_engine),
) -> SessionHistoryResponse:
    info = engine.get_session_info(session_id)
    if info is None:
        raise _not_found(session_id)

    return SessionHistoryResponse(
        session_id=session_id,
        messages=[MessageModel.from_message(m) for m in engine.get_history(session_id, max_messages)],
        metadata=SessionMetadataModel.from_info(info),
    )


@router.post("/session/{session_id}/clear", response_model=SessionStatusResponse, summary="Clear session history")
def clear_session(session_id: str, engine: LegalEngine = Depends(get_engine)) -> SessionStatusResponse:
    engine.clear_session(session_id)
    return SessionStatusResponse(session_id=session_id, status="cleared")


@router.delete("/session/{session_id}", response_model=SessionStatusResponse, summary="Delete a session")
def delete_session(session_id: str, engine: LegalEngine = Depends(get_engine)) -> SessionStatusResponse:
    engine.delete_session(session_id)
    return SessionStatusResponse(session_id=session_id, status="deleted")


# ============================================================================
# COMPARISON
# ============================================================================

@router.post("/compare", response_model=CompareResponse, summary="Compare two legal texts")
def compare(request: CompareRequest, engine: LegalEngine = Depends(get_engine)) -> CompareResponse:
    return CompareResponse.from_comparison(engine.compare_clauses(request.text1, request.text2))


# ============================================================================
# HEALTH
# ============================================================================

@router.get("/health", response_model=HealthResponse, summary="Health check")
def health(engine: LegalEngine = Depends(get_engine)) -> HealthResponse:
    stats = engine.stats()
    return HealthResponse(
        status="healthy",
        llm_available=stats["llm_available"],
        vector_store_available=stats["vector_store_available"],
        sessions=stats["sessions"],
        cache_entries=stats["cache"]["entries"],
    )
