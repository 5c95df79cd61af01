"""HTTP routes for the Flask API."""

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import BadRequest, InternalServerError, MethodNotAllowed, NotFound

from inflation_backend import __version__
from inflation_backend.config import Settings
from inflation_backend.core.calculator import InvalidArgument, calculate_effect
from inflation_backend.domain.rates import RateTable
from inflation_backend.persistence.database import QueryStore
from inflation_backend.schemas.effect import EffectRequest, EffectResponse
from inflation_backend.schemas.health import InfoResponse, PingResponse
from inflation_backend.schemas.history import DateRangeQuery, HistoryPageQuery, RecentQuery
from inflation_backend.schemas.rates import InstitutionQuery, TreaQuery, TreaResponse

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _store() -> QueryStore:
    return current_app.extensions["query_store"]


def _rate_table() -> RateTable:
    return current_app.extensions["rate_table"]


def _settings() -> Settings:
    return current_app.extensions["settings"]


def _ok(data: Any, status: HTTPStatus = HTTPStatus.OK):
    return jsonify({"success": True, "data": data}), status


def _error(message: str, status: HTTPStatus, **extra: Any):
    body: Dict[str, Any] = {
        "success": False,
        "error": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    body.update(extra)
    return jsonify(body), status


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    messages = [
        f"{'.'.join(str(part) for part in error['loc']) or 'body'}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.info("rejected request to %s: %s", request.path, "; ".join(messages))
    return _error(
        f"Invalid input data: {', '.join(messages)}",
        HTTPStatus.BAD_REQUEST,
        detail=messages,
    )


@api_bp.errorhandler(InvalidArgument)
def _handle_invalid_argument(exc: InvalidArgument):
    return _error(str(exc), HTTPStatus.BAD_REQUEST)


@api_bp.errorhandler(BadRequest)
def _handle_bad_request(exc: BadRequest):
    return _error(exc.description or "Malformed request body", HTTPStatus.BAD_REQUEST)


@api_bp.app_errorhandler(NotFound)
def _handle_not_found(exc: NotFound):
    return _error("Endpoint not found", HTTPStatus.NOT_FOUND, path=request.path, method=request.method)


@api_bp.app_errorhandler(MethodNotAllowed)
def _handle_method_not_allowed(exc: MethodNotAllowed):
    return _error(
        "Method not allowed",
        HTTPStatus.METHOD_NOT_ALLOWED,
        path=request.path,
        method=request.method,
    )


@api_bp.app_errorhandler(InternalServerError)
def _handle_internal_error(exc: InternalServerError):
    logger.exception("unhandled error on %s %s", request.method, request.path, exc_info=exc.original_exception)
    return _error("Internal server error", HTTPStatus.INTERNAL_SERVER_ERROR)


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong", database=_store().ping())
    return _ok(response.model_dump())


@api_bp.get("/info")
def info() -> Any:
    response = InfoResponse(
        name="Inflation effect on savings",
        version=__version__,
        description="Computes how inflation erodes the purchasing power of savings.",
        endpoints={
            "POST /api/v1/inflation/effect": "Calculate the inflation effect on a savings amount",
            "GET /api/v1/inflation/history": "Paginated calculation history",
            "GET /api/v1/inflation/history/recent": "Most recent calculations",
            "GET /api/v1/inflation/history/range": "Calculations within a date range",
            "GET /api/v1/inflation/history/<id>": "A single saved calculation",
            "GET /api/v1/inflation/statistics": "Aggregate history statistics",
            "GET /api/v1/rates/account-types": "Savings account types",
            "GET /api/v1/rates/institutions": "Financial institutions",
            "GET /api/v1/rates/trea": "TREA for an account type and institution",
        },
    )
    return _ok(response.model_dump())


@api_bp.post("/inflation/effect")
def inflation_effect() -> Any:
    """Calculate, persist and return the inflation effect for one request."""
    raw_payload = request.get_json(force=True, silent=False)
    payload = EffectRequest.model_validate(raw_payload)

    looked_up: Optional[float] = None
    if payload.wants_rate_lookup:
        looked_up = _rate_table().trea_for(payload.account_type, payload.institution_id)
        if looked_up is None:
            return _error(
                f"No TREA rate for account type '{payload.account_type}' "
                f"at institution '{payload.institution_id}'",
                HTTPStatus.BAD_REQUEST,
            )

    calculation = payload.to_input(trea_rate=looked_up)
    result = calculate_effect(calculation)
    logger.info(
        "calculated effect: %s at %s%% for %s years",
        calculation.nominal_amount,
        calculation.inflation_rate_percent,
        calculation.years,
    )

    record = _store().save(
        calculation,
        result,
        client_ip=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    response = EffectResponse.from_calculation(calculation, result, query_id=record.id)
    return _ok(response.to_json())


@api_bp.get("/inflation/history")
def history() -> Any:
    settings = _settings()
    args = request.args.to_dict()
    args.setdefault("limit", settings.HISTORY_DEFAULT_LIMIT)
    query = HistoryPageQuery.model_validate(args)

    page = _store().list_page(
        limit=min(query.limit, settings.HISTORY_MAX_LIMIT),
        offset=query.offset,
    )
    return _ok(page.model_dump(mode="json"))


@api_bp.get("/inflation/history/recent")
def recent_history() -> Any:
    query = RecentQuery.model_validate(request.args.to_dict())
    records = _store().recent(limit=query.limit)
    return _ok([record.model_dump(mode="json") for record in records])


@api_bp.get("/inflation/history/range")
def history_range() -> Any:
    query = DateRangeQuery.model_validate(request.args.to_dict())
    records = _store().by_date_range(query.start, query.end)
    return _ok([record.model_dump(mode="json") for record in records])


@api_bp.get("/inflation/history/<int:query_id>")
def history_record(query_id: int) -> Any:
    record = _store().get(query_id)
    if record is None:
        return _error(f"Query {query_id} not found", HTTPStatus.NOT_FOUND)
    return _ok(record.model_dump(mode="json"))


@api_bp.get("/inflation/statistics")
def statistics() -> Any:
    return _ok(_store().statistics().model_dump())


@api_bp.get("/rates/account-types")
def account_types() -> Any:
    return _ok([asdict(account) for account in _rate_table().account_types])


@api_bp.get("/rates/institutions")
def institutions() -> Any:
    query = InstitutionQuery.model_validate(request.args.to_dict())
    return _ok([asdict(inst) for inst in _rate_table().institutions(query.kind)])


@api_bp.get("/rates/trea")
def trea() -> Any:
    query = TreaQuery.model_validate(request.args.to_dict())
    rate = _rate_table().trea_for(query.account_type, query.institution_id)
    if rate is None:
        return _error(
            f"No TREA rate for account type '{query.account_type}' "
            f"at institution '{query.institution_id}'",
            HTTPStatus.NOT_FOUND,
        )
    response = TreaResponse(
        account_type=query.account_type,
        institution_id=query.institution_id,
        trea_rate=rate,
    )
    return _ok(response.model_dump())
