"""
FastAPI Application
===================
API endpoints cho Fleet Capacity Analysis.

Endpoints:
    - POST /analyze: Phân tích raw samples của một resource
    - POST /regression: Fit linear regression và diagnostics
    - GET /health: Health check

Run:
    uvicorn api.main:app --reload --port 8000
"""

import logging
import math
import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from api.schemas import (
    AnalyzeRequest, AnalyzeResponse, ClassificationSchema,
    LinearModelSchema, RegressionRequest, RegressionResponse,
    HealthResponse
)
from fleet_capacity import __version__
from fleet_capacity.config import CapacityThresholds
from fleet_capacity.errors import CapacityAnalysisError
from fleet_capacity.models.regression import (
    check_regression_input, fit_linear_regression, regression_diagnostics
)
from fleet_capacity.pipeline import analyze_samples

logger = logging.getLogger(__name__)

# =============================================================================
# App Configuration
# =============================================================================

app = FastAPI(
    title="Fleet Capacity Analysis API",
    description="""
    API phân tích capacity cho server groups.

    ## Features
    - **Analysis**: Aggregate, align, regression và phân loại upscale/downscale
    - **Regression**: Fit linear model và tính diagnostics (SSE, SST, SSR, cost)
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _finite(value: float) -> Optional[float]:
    """NaN/inf không serialize được sang JSON → None."""
    return value if value is not None and math.isfinite(value) else None


def _model_schema(model) -> LinearModelSchema:
    return LinearModelSchema(slope=_finite(model.slope), intercept=_finite(model.intercept))


# =============================================================================
# Health Endpoint
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__
    )


# =============================================================================
# Analysis Endpoints
# =============================================================================

@app.post("/analyze", response_model=AnalyzeResponse, tags=["Analysis"])
def analyze(request: AnalyzeRequest):
    """
    Phân tích raw samples của một resource.

    Trả về 422 nếu một metric không có dữ liệu, join rỗng
    hoặc regression degenerate.
    """
    observed_at = request.observed_at or datetime.now(timezone.utc)
    thresholds = CapacityThresholds(
        upscale_threshold=request.upscale_threshold,
        downscale_threshold=request.downscale_threshold
    )

    def samples(points):
        return [(p.timestamp, p.value) for p in points]

    try:
        report = analyze_samples(
            request.resource,
            observed_at,
            timedelta(days=request.window_days),
            samples(request.requests),
            samples(request.cpu_utilization),
            samples(request.cpu_cores),
            samples(request.rds_utilization),
            thresholds=thresholds
        )
    except (CapacityAnalysisError, ValueError) as e:
        logger.info("Analysis of %s rejected: %s", request.resource, e)
        raise HTTPException(status_code=422, detail=str(e))

    classification = report.classification
    return AnalyzeResponse(
        resource=report.resource,
        observed_at=report.observed_at.to_pydatetime(),
        data_points=len(report.aligned),
        ec2_model=_model_schema(report.ec2_model),
        rds_model=_model_schema(report.rds_model),
        centroid=list(report.centroid),
        labels=report.labels,
        classification=ClassificationSchema(
            mean_utilization=classification.mean_utilization,
            std_dev_utilization=classification.std_dev_utilization,
            recommendation=classification.recommendation.value,
            break_even_request_rate=_finite(classification.break_even_request_rate),
            rds_break_even_request_rate=_finite(classification.rds_break_even_request_rate)
        ),
        message=report.message
    )


@app.post("/regression", response_model=RegressionResponse, tags=["Analysis"])
def regression(request: RegressionRequest):
    """Fit linear regression cho (x, y) và trả về diagnostics."""
    try:
        check_regression_input(request.x, request.y)
    except (CapacityAnalysisError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    model = fit_linear_regression(request.x, request.y)
    diagnostics = regression_diagnostics(request.x, request.y, model)

    return RegressionResponse(
        model=_model_schema(model),
        diagnostics={k: _finite(float(v)) for k, v in diagnostics.items()},
        break_even=_finite(model.x_at(CapacityThresholds().saturation))
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
