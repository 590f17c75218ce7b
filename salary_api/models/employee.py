# employee.py
from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.sql import func

from salary_api.database import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    job_title = Column(String(255), nullable=False, index=True)
    experience = Column(Integer, nullable=False)
    department = Column(String(100), nullable=False, index=True)
    location = Column(String(100), nullable=False)
    education_level = Column(String(100), nullable=False)
    company_size = Column(String(100), nullable=False)
    actual_salary = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
