from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional
import json
import logging

from string_analyzer.database import get_db
from string_analyzer.crud.analysis import RecordStore
from string_analyzer.schemas.analysis import (
    InterpretedQuery,
    NaturalLanguageResponse,
    StringListResponse,
    StringResponse,
)
from string_analyzer.services.filters import apply_filters
from string_analyzer.services.query_interpreter import interpret_query

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_FOUND = "Not found: String does not exist."


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """Dependency to provide the record store for this request."""
    return RecordStore(db)


def query_filters(request: Request) -> Dict[str, Any]:
    """Collect query parameters as filters, keeping repeated keys as lists."""
    filters: Dict[str, Any] = {}
    for key, value in request.query_params.multi_items():
        if key not in filters:
            filters[key] = value
        elif isinstance(filters[key], list):
            filters[key].append(value)
        else:
            filters[key] = [filters[key], value]
    return filters


@router.post("/strings", response_model=StringResponse, status_code=status.HTTP_201_CREATED)
async def create_string(request: Request, store: RecordStore = Depends(get_store)):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bad request: Invalid JSON body"
        )

    if not isinstance(body, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bad request: No request body provided"
        )

    value = body.get("value")
    # Empty lists and objects still count as a value, only to be rejected below
    if value is None or (not value and not isinstance(value, (list, dict))):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bad request: Missing value field"
        )

    if not isinstance(value, str):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail='Unprocessable entity: "value" must be a string'
        )

    record = store.add(value)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Conflict: String already exists"
        )
    return record


@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    request: Request,
    query: Optional[str] = Query(None, description="Natural language query, e.g. 'all single word palindromic strings'"),
    store: RecordStore = Depends(get_store)
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    if not query or len(request.query_params.getlist("query")) > 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bad request: Missing or invalid query parameter"
        )

    parsed_filters = interpret_query(query)
    if not parsed_filters:
        logger.info(f"Unable to interpret query: {query!r}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bad request: Unable to parse natural language query"
        )

    results = apply_filters(store.snapshot(), parsed_filters)
    return NaturalLanguageResponse(
        data=results,
        count=len(results),
        interpreted_query=InterpretedQuery(original=query, parsed_filters=parsed_filters)
    )


@router.get("/strings/{string_value}", response_model=StringResponse)
def get_string(string_value: str, store: RecordStore = Depends(get_store)):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    record = store.get(string_value)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return record


@router.delete("/strings/{string_value}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, store: RecordStore = Depends(get_store)):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    if not store.delete(string_value):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return None


@router.get("/strings", response_model=StringListResponse)
def get_all_strings(request: Request, store: RecordStore = Depends(get_store)):
    """
    Get all strings with optional filtering.

    Supported query params: is_palindrome, min_length, max_length,
    word_count, contains_character. Values that cannot be applied are
    ignored rather than rejected.
    """
    filters = query_filters(request)
    results = apply_filters(store.snapshot(), filters)
    return StringListResponse(data=results, count=len(results), filters_applied=filters)
