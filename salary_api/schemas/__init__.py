# __init__.py
from salary_api.schemas.analytics import StatsResponse
from salary_api.schemas.data_upload import DataUploadOut, UploadResponse
from salary_api.schemas.employee import EmployeeCreate, EmployeeOut, JobAttributes
from salary_api.schemas.model_info import ModelMetricsOut, ModelMetricsResponse, ModelStatusResponse
from salary_api.schemas.options import OptionsResponse
from salary_api.schemas.prediction import PredictionOut, PredictionRequest, PredictionWithImportance, PredictResponse

__all__ = [
	"StatsResponse",
	"DataUploadOut",
	"UploadResponse",
	"EmployeeCreate",
	"EmployeeOut",
	"JobAttributes",
	"ModelMetricsOut",
	"ModelMetricsResponse",
	"ModelStatusResponse",
	"OptionsResponse",
	"PredictionOut",
	"PredictionRequest",
	"PredictionWithImportance",
	"PredictResponse",
]
