"""
Stats API - enrollment and payment aggregates for the simulacro dashboard
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
import logfire

from database import ConnectionPool, get_pool
from errors import DatabaseError
from models.stats_models import (
    AreaBreakdownEntry,
    AreaBreakdownResponse,
    ErrorResponse,
    StatsResponse,
)

router = APIRouter()

# Payment window counted as "paid": dates inclusive on both ends, amount in soles within (14, 18]
PAYMENT_WINDOW_START = "2025-11-27"
PAYMENT_WINDOW_END = "2025-12-13"
PAYMENT_MIN_AMOUNT = 14
PAYMENT_MAX_AMOUNT = 18

# Enrollment period the area breakdown is scoped to
CURRENT_PERIOD_ID = 1

TOTAL_ENROLLED_SQL = text("SELECT COUNT(*) AS total FROM inscripcion_simulacros")

# Not joined against enrollments: counts every qualifying bank payment
TOTAL_PAID_SQL = text("""
    SELECT COUNT(*) AS total
    FROM banco_pagos
    WHERE fch_pag BETWEEN :start_date AND :end_date
      AND imp_pag > :min_amount
      AND imp_pag <= :max_amount
""")

ENROLLED_BY_AREA_SQL = text("""
    SELECT
        a.denominacion AS area,
        COUNT(DISTINCT ise.nro_documento) AS total_inscritos
    FROM inscripcion_simulacros ise
    INNER JOIN estudiantes e ON ise.nro_documento = e.nro_documento
    INNER JOIN inscripciones i ON e.id = i.estudiantes_id
    INNER JOIN areas a ON i.areas_id = a.id
    WHERE i.periodos_id = :period_id
    GROUP BY a.id, a.denominacion
    ORDER BY a.denominacion
""")

STATS_ERROR = "Error al obtener datos"
AREAS_ERROR = "Error al obtener datos por área"


def _error_response(category: str, endpoint: str, error: DatabaseError) -> JSONResponse:
    logfire.error(
        "Database query failed",
        endpoint=endpoint,
        error_type=type(error).__name__,
        error=str(error),
    )
    body = ErrorResponse(error=category, message=str(error) or type(error).__name__)
    return JSONResponse(status_code=500, content=body.model_dump())


@router.get(
    "/stats",
    response_model=StatsResponse,
    responses={500: {"model": ErrorResponse}},
)
def get_stats(pool: ConnectionPool = Depends(get_pool)):
    """Total simulacro enrollments and the payments made inside the payment window."""
    try:
        with pool.connection() as conn:
            total_enrolled = conn.execute(TOTAL_ENROLLED_SQL).scalar_one()
            total_paid = conn.execute(
                TOTAL_PAID_SQL,
                {
                    "start_date": PAYMENT_WINDOW_START,
                    "end_date": PAYMENT_WINDOW_END,
                    "min_amount": PAYMENT_MIN_AMOUNT,
                    "max_amount": PAYMENT_MAX_AMOUNT,
                },
            ).scalar_one()
    except DatabaseError as e:
        return _error_response(STATS_ERROR, "/api/stats", e)

    return StatsResponse(total_enrolled=int(total_enrolled), total_paid=int(total_paid))


@router.get(
    "/inscritos-por-area",
    response_model=AreaBreakdownResponse,
    responses={500: {"model": ErrorResponse}},
)
def get_enrolled_by_area(pool: ConnectionPool = Depends(get_pool)):
    """Distinct enrolled students per area for the current period, ordered by area name."""
    try:
        with pool.connection() as conn:
            rows = conn.execute(ENROLLED_BY_AREA_SQL, {"period_id": CURRENT_PERIOD_ID}).mappings().all()
    except DatabaseError as e:
        return _error_response(AREAS_ERROR, "/api/inscritos-por-area", e)

    return AreaBreakdownResponse(
        areas=[
            AreaBreakdownEntry(area=row["area"], enrolled_count=int(row["total_inscritos"]))
            for row in rows
        ]
    )
