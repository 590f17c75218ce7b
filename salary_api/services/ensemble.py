from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Sequence

import joblib
import numpy as np
from sklearn.ensemble import RandomForestRegressor
from sklearn.feature_extraction import DictVectorizer
from sklearn.linear_model import LinearRegression
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from sklearn.model_selection import train_test_split

from salary_api.services.datasets import TrainingRecord
from salary_api.services.salary_predictor import PredictionResult, SalaryInput, clamp, normalize_education, round_half_up


logger = logging.getLogger(__name__)

MIN_PREDICTION = 30_000
MAX_PREDICTION = 2_000_000

MIN_TRAINING_RECORDS = 2
HOLDOUT_MIN_RECORDS = 10
OOB_MIN_RECORDS = 20
QUICK_TRAINING_CAP = 10_000
RETRAIN_TREES = 100

ARTIFACT_NAME = "salary_ensemble.joblib"

# DictVectorizer prefix -> reported category
_CATEGORY_NAMES = {
    "experience": "experience",
    "job_title": "jobTitle",
    "department": "department",
    "location": "location",
    "education_level": "education",
    "company_size": "companySize",
}


class ModelNotReadyError(RuntimeError):
    pass


@dataclass(frozen=True)
class ModelMetrics:
    r2_score: float
    mean_absolute_error: float
    root_mean_square_error: float
    oob_score: float = 0.0


DEFAULT_LINEAR_METRICS = ModelMetrics(0.85, 45_000.0, 65_000.0, 0.82)
DEFAULT_FOREST_METRICS = ModelMetrics(0.92, 35_000.0, 48_000.0, 0.89)


@dataclass
class TrainedModels:
    vectorizer: DictVectorizer
    linear: LinearRegression
    forest: RandomForestRegressor
    linear_metrics: ModelMetrics
    forest_metrics: ModelMetrics
    feature_importance: dict[str, float]
    known_departments: frozenset[str]
    record_count: int
    trained_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def encode_features(data: SalaryInput | TrainingRecord | dict[str, Any]) -> dict[str, Any]:
    if isinstance(data, dict):
        src = data
    elif isinstance(data, TrainingRecord):
        src = data.features()
    else:
        src = data.as_dict()
    return {
        "experience": float(src["experience"]),
        "job_title": str(src["job_title"]),
        "department": str(src["department"]),
        "location": str(src["location"]),
        "education_level": normalize_education(str(src["education_level"])),
        "company_size": str(src["company_size"]),
    }


def quick_tree_count(n_records: int) -> int:
    return int(clamp(math.floor(math.sqrt(n_records) * 0.5), 20, 30))


def advanced_tree_count(n_records: int) -> int:
    return int(clamp(math.floor(math.sqrt(n_records) * 1.5), 100, 150))


def _finite(value: Any, default: float = 0.0) -> float:
    try:
        f = float(value)
    except (TypeError, ValueError):
        return default
    return f if math.isfinite(f) else default


def _score(y_true: np.ndarray, y_pred: np.ndarray, oob: float = 0.0) -> ModelMetrics:
    r2 = _finite(r2_score(y_true, y_pred)) if len(y_true) > 1 else 0.0
    return ModelMetrics(
        r2_score=max(0.0, r2),
        mean_absolute_error=_finite(mean_absolute_error(y_true, y_pred)),
        root_mean_square_error=_finite(math.sqrt(mean_squared_error(y_true, y_pred))),
        oob_score=max(0.0, _finite(oob)),
    )


def _normalize(weights: np.ndarray) -> np.ndarray:
    total = float(np.sum(weights))
    if total <= 0 or not math.isfinite(total):
        return np.zeros_like(weights, dtype=float)
    return weights / total


def _by_category(feature_names: Sequence[str], weights: np.ndarray) -> dict[str, float]:
    out = {name: 0.0 for name in _CATEGORY_NAMES.values()}
    for name, w in zip(feature_names, weights):
        prefix = name.split("=", 1)[0]
        category = _CATEGORY_NAMES.get(prefix)
        if category:
            out[category] += float(w)
    return out


def fit_models(records: Sequence[TrainingRecord], *, n_trees: int, random_state: int = 42) -> TrainedModels:
    if len(records) < MIN_TRAINING_RECORDS:
        raise ValueError(f"at least {MIN_TRAINING_RECORDS} records are required to train, got {len(records)}")

    vectorizer = DictVectorizer(sparse=False)
    X = vectorizer.fit_transform([encode_features(r) for r in records])
    y = np.asarray([r.salary for r in records], dtype=float)

    if len(records) >= HOLDOUT_MIN_RECORDS:
        X_train, X_test, y_train, y_test = train_test_split(X, y, test_size=0.2, random_state=random_state)
    else:
        X_train, X_test, y_train, y_test = X, X, y, y

    linear = LinearRegression()
    linear.fit(X_train, y_train)

    use_oob = len(y_train) >= OOB_MIN_RECORDS
    forest = RandomForestRegressor(
        n_estimators=int(n_trees),
        oob_score=use_oob,
        random_state=random_state,
        n_jobs=-1,
    )
    forest.fit(X_train, y_train)

    linear_metrics = _score(y_test, linear.predict(X_test))
    forest_metrics = _score(
        y_test,
        forest.predict(X_test),
        oob=getattr(forest, "oob_score_", 0.0) if use_oob else 0.0,
    )

    names = list(vectorizer.get_feature_names_out())
    # |coef| scaled by the feature's spread so one-hot and numeric columns compare.
    linear_weights = _normalize(np.abs(linear.coef_) * X_train.std(axis=0))
    forest_weights = _normalize(np.asarray(forest.feature_importances_, dtype=float))
    linear_by_cat = _by_category(names, linear_weights)
    forest_by_cat = _by_category(names, forest_weights)
    importance = {k: round((linear_by_cat[k] + forest_by_cat[k]) / 2, 4) for k in linear_by_cat}

    return TrainedModels(
        vectorizer=vectorizer,
        linear=linear,
        forest=forest,
        linear_metrics=linear_metrics,
        forest_metrics=forest_metrics,
        feature_importance=importance,
        known_departments=frozenset(r.department for r in records),
        record_count=len(records),
    )


class EnsembleRegistry:
    """Holds the trained linear/forest pair and coordinates (re)training.

    Only one training runs at a time. Readers always see either the previous
    or the new model set, never a partial one.
    """

    name = "ensemble"

    def __init__(
        self,
        record_source: Callable[[], list[TrainingRecord]] | None = None,
        *,
        random_state: int = 42,
        model_dir: Path | None = None,
    ) -> None:
        self._record_source = record_source
        self._random_state = random_state
        self._model_dir = Path(model_dir) if model_dir else None
        self._models: TrainedModels | None = None
        self._records: list[TrainingRecord] = []
        self._train_lock = threading.Lock()
        self._is_training = False

    @property
    def is_trained(self) -> bool:
        return self._models is not None

    @property
    def is_training(self) -> bool:
        return self._is_training

    @property
    def total_records(self) -> int:
        models = self._models
        return len(self._records) if self._records else (models.record_count if models else 0)

    def _records_or_source(self, records: Sequence[TrainingRecord] | None) -> list[TrainingRecord]:
        if records is not None:
            return list(records)
        if self._record_source is None:
            return []
        return list(self._record_source())

    def _install(self, models: TrainedModels) -> None:
        self._models = models
        if self._model_dir is not None:
            self.save(self._model_dir)

    def initialize(self, records: Sequence[TrainingRecord] | None = None) -> bool:
        """Quick first training on a capped sample. No-op when already trained
        or when another training is running."""
        if self._models is not None:
            return False
        if not self._train_lock.acquire(blocking=False):
            return False
        self._is_training = True
        started = time.perf_counter()
        try:
            if self._models is not None:
                return False
            all_records = self._records_or_source(records)
            if len(all_records) < MIN_TRAINING_RECORDS:
                logger.warning("No usable training data (%d records); staying on rule-based predictions", len(all_records))
                return False

            sample = all_records
            if len(all_records) >= OOB_MIN_RECORDS:
                k = min(QUICK_TRAINING_CAP, len(all_records) // 2)
                idx = np.random.default_rng(self._random_state).permutation(len(all_records))[:k]
                sample = [all_records[int(i)] for i in idx]

            trees = quick_tree_count(len(sample))
            logger.info("Training ensemble on %d of %d records (%d trees)", len(sample), len(all_records), trees)
            models = fit_models(sample, n_trees=trees, random_state=self._random_state)
            self._records = all_records
            self._install(models)
            logger.info(
                "Ensemble ready in %.0fms: linear r2=%.3f forest r2=%.3f",
                (time.perf_counter() - started) * 1000,
                models.linear_metrics.r2_score,
                models.forest_metrics.r2_score,
            )
            return True
        except ValueError:
            logger.exception("Ensemble training failed; rule-based predictions stay active")
            return False
        finally:
            self._is_training = False
            self._train_lock.release()

    def train_advanced(self) -> bool:
        """Retrain on every known record with a larger forest; keep it only if
        the forest scores better than the current one."""
        with self._train_lock:
            if not self._records:
                logger.info("No training data available for advanced training")
                return False
            self._is_training = True
            try:
                trees = advanced_tree_count(len(self._records))
                logger.info("Advanced training with %d trees on %d records", trees, len(self._records))
                candidate = fit_models(self._records, n_trees=trees, random_state=self._random_state)
                current = self._models
                if current is None or candidate.forest_metrics.r2_score > current.forest_metrics.r2_score:
                    self._install(candidate)
                    logger.info("Advanced forest installed, r2=%.3f", candidate.forest_metrics.r2_score)
                    return True
                logger.info("Current forest is already better; keeping it")
                return False
            finally:
                self._is_training = False

    def retrain(self, records: Sequence[TrainingRecord] | None = None) -> TrainedModels:
        with self._train_lock:
            all_records = self._records_or_source(records)
            self._is_training = True
            try:
                models = fit_models(all_records, n_trees=RETRAIN_TREES, random_state=self._random_state)
                self._records = all_records
                self._install(models)
                logger.info("Retrained ensemble on %d records", len(all_records))
                return models
            finally:
                self._is_training = False

    def predict(self, data: SalaryInput) -> PredictionResult:
        models = self._models
        if models is None:
            raise ModelNotReadyError("ensemble is not trained yet")

        x = models.vectorizer.transform([encode_features(data)])
        linear = clamp(float(models.linear.predict(x)[0]), MIN_PREDICTION, MAX_PREDICTION)
        forest = clamp(float(models.forest.predict(x)[0]), MIN_PREDICTION, MAX_PREDICTION)

        return PredictionResult(
            linear_regression_prediction=float(round_half_up(linear)),
            random_forest_prediction=float(round_half_up(forest)),
            confidence=float(round_half_up(self._confidence(models, linear, forest, data))),
            feature_importance=dict(models.feature_importance),
        )

    @staticmethod
    def _confidence(models: TrainedModels, linear: float, forest: float, data: SalaryInput) -> float:
        mean = (linear + forest) / 2
        agreement = 1 - abs(linear - forest) / max(mean, 1)
        experience_conf = clamp(data.experience / 15, 0, 1)

        domain_conf = 0.5
        if data.department in models.known_departments:
            domain_conf += 0.2
        if normalize_education(data.education_level) in ("Bachelor", "Master"):
            domain_conf += 0.2
        if 1 <= data.experience <= 25:
            domain_conf += 0.1

        model_conf = (models.linear_metrics.r2_score + models.forest_metrics.r2_score) / 2
        total = agreement * 0.4 + experience_conf * 0.2 + domain_conf * 0.2 + model_conf * 0.2
        return clamp(total * 100, 25, 95)

    def metrics(self) -> dict[str, ModelMetrics]:
        models = self._models
        if models is None:
            return {"linear_regression": DEFAULT_LINEAR_METRICS, "random_forest": DEFAULT_FOREST_METRICS}
        # Linear regression has no out-of-bag estimate; its oob_score stays 0.
        return {"linear_regression": models.linear_metrics, "random_forest": models.forest_metrics}

    def status(self) -> dict[str, Any]:
        trained = self.is_trained
        return {
            "is_training": self.is_training,
            "is_initialized": trained,
            "model_type": self.name if trained else "rule-based",
            "total_records": self.total_records,
            "message": (
                f"Ensemble trained on {self.total_records} salary records"
                if trained
                else "Rule-based predictions active; ensemble not trained yet"
            ),
        }

    def save(self, directory: Path) -> Path | None:
        models = self._models
        if models is None:
            return None
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / ARTIFACT_NAME
        joblib.dump(models, path)
        logger.info("Saved ensemble to %s", path)
        return path

    def load(self, directory: Path) -> bool:
        path = Path(directory) / ARTIFACT_NAME
        if not path.exists():
            return False
        models = joblib.load(path)
        if not isinstance(models, TrainedModels):
            logger.warning("Ignoring %s: unexpected artifact type %s", path, type(models).__name__)
            return False
        self._models = models
        logger.info("Loaded ensemble from %s (%d records)", path, models.record_count)
        return True
