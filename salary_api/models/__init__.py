# __init__.py
from salary_api.models.data_upload import DataUpload
from salary_api.models.employee import Employee
from salary_api.models.prediction import Prediction

__all__ = [
	"DataUpload",
	"Employee",
	"Prediction",
]
