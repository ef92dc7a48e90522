"""
API Schemas
===========
Pydantic schemas cho FastAPI endpoints.
"""

from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Dict
from datetime import datetime
from enum import Enum


class RecommendationType(str, Enum):
    """Enum cho các scale recommendations."""
    NONE = "none"
    UPSCALE = "upscale"
    DOWNSCALE = "downscale"


# =============================================================================
# Analysis Schemas
# =============================================================================

class SamplePoint(BaseModel):
    """Một raw metric sample."""
    timestamp: datetime
    value: float


class AnalyzeRequest(BaseModel):
    """Request schema cho analyze endpoint."""
    resource: str = Field(description="Tên resource (stack)")
    observed_at: Optional[datetime] = Field(
        default=None,
        description="Observation instant (mặc định: thời điểm hiện tại, UTC)"
    )
    window_days: float = Field(
        default=7.0,
        gt=0,
        le=31,
        description="Độ dài window (ngày), dùng cho label time span"
    )
    requests: List[SamplePoint] = Field(description="Request count samples (Sum)")
    cpu_utilization: List[SamplePoint] = Field(description="EC2 CPU utilization samples (%)")
    cpu_cores: List[SamplePoint] = Field(description="CPU core count samples")
    rds_utilization: List[SamplePoint] = Field(description="RDS CPU utilization samples (%)")
    upscale_threshold: float = Field(default=70.0, ge=0, le=100)
    downscale_threshold: float = Field(default=30.0, ge=0, le=100)

    @model_validator(mode='after')
    def check_thresholds(self) -> 'AnalyzeRequest':
        if self.downscale_threshold > self.upscale_threshold:
            raise ValueError(
                f"downscale_threshold ({self.downscale_threshold}) must not exceed "
                f"upscale_threshold ({self.upscale_threshold})"
            )
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "resource": "sssites.ssorg.prod.web",
                "observed_at": "2024-05-01T12:00:00Z",
                "window_days": 1,
                "requests": [{"timestamp": "2024-05-01T11:58:00Z", "value": 120}],
                "cpu_utilization": [{"timestamp": "2024-05-01T11:58:00Z", "value": 80}],
                "cpu_cores": [{"timestamp": "2024-05-01T11:58:00Z", "value": 2}],
                "rds_utilization": [{"timestamp": "2024-05-01T11:58:00Z", "value": 12}]
            }
        }


class LinearModelSchema(BaseModel):
    """Linear model y = slope * x + intercept."""
    slope: Optional[float]
    intercept: Optional[float]


class ClassificationSchema(BaseModel):
    """Kết quả phân loại."""
    mean_utilization: float
    std_dev_utilization: float
    recommendation: RecommendationType
    break_even_request_rate: Optional[float] = None
    rds_break_even_request_rate: Optional[float] = None


class AnalyzeResponse(BaseModel):
    """Response schema cho analyze endpoint."""
    resource: str
    observed_at: datetime
    data_points: int
    ec2_model: LinearModelSchema
    rds_model: LinearModelSchema
    centroid: List[float]
    labels: List[str]
    classification: ClassificationSchema
    message: Optional[str] = None


# =============================================================================
# Regression Schemas
# =============================================================================

class RegressionRequest(BaseModel):
    """Request cho regression endpoint."""
    x: List[float] = Field(min_length=2, description="Biến độc lập")
    y: List[float] = Field(min_length=2, description="Biến phụ thuộc")

    class Config:
        json_schema_extra = {
            "example": {"x": [0, 1, 2, 3], "y": [1, 3, 5, 7]}
        }


class RegressionResponse(BaseModel):
    """Response cho regression endpoint."""
    model: LinearModelSchema
    diagnostics: Dict[str, Optional[float]]
    break_even: Optional[float] = None


# =============================================================================
# Health Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: datetime
    version: str
