from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.sql import func

from salary_api.database import Base


class Prediction(Base):
    __tablename__ = "predictions"

    id = Column(Integer, primary_key=True, index=True)

    # Inputs, as submitted to /predict
    job_title = Column(String(255), nullable=False)
    experience = Column(Integer, nullable=False)
    department = Column(String(100), nullable=False)
    location = Column(String(100), nullable=False)
    education_level = Column(String(100), nullable=False)
    company_size = Column(String(100), nullable=False)

    # Outputs; null until a model has produced them
    linear_regression_prediction = Column(Float, nullable=True)
    random_forest_prediction = Column(Float, nullable=True)
    confidence = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
