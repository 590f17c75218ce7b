# main.py
import asyncio
import contextlib
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from salary_api.api.deps import AppServices
from salary_api.api.routes.analytics import router as analytics_router
from salary_api.api.routes.employees import router as employees_router
from salary_api.api.routes.health import router as health_router
from salary_api.api.routes.models import router as models_router
from salary_api.api.routes.options import router as options_router
from salary_api.api.routes.performance import router as performance_router
from salary_api.api.routes.predictions import router as predictions_router
from salary_api.api.routes.uploads import router as uploads_router
from salary_api.config import Settings, build_sqlalchemy_db_url, settings
from salary_api.database import SessionLocal, init_db
from salary_api.error_handlers import attach_error_handlers
from salary_api.logging_setup import configure_logging
from salary_api.services.cache import TTLCache
from salary_api.services.ensemble import EnsembleRegistry
from salary_api.services.performance_monitor import PerformanceMonitor
from salary_api.services.prediction_service import SalaryPredictionService
from salary_api.services.storage import seed_sample_employees
from salary_api.services.training_data import TrainingDataSource


logger = logging.getLogger(__name__)

NO_CACHE = "no-cache, no-store, must-revalidate"


def build_services(cfg: Settings) -> AppServices:
    monitor = PerformanceMonitor()
    training_source = TrainingDataSource(cfg.datasets_dir, SessionLocal)
    ensemble = EnsembleRegistry(training_source.collect, model_dir=cfg.model_dir)
    prediction_cache = TTLCache(
        cfg.prediction_cache_ttl_seconds,
        max_entries=cfg.prediction_cache_max_entries,
        trim_to=cfg.prediction_cache_trim_to,
    )
    predictor = SalaryPredictionService(
        prediction_cache,
        ensemble,
        monitor,
        lazy_initialization=cfg.model_training_on_startup,
    )
    return AppServices(
        monitor=monitor,
        prediction_cache=prediction_cache,
        analytics_cache=TTLCache(cfg.analytics_cache_ttl_seconds),
        stats_cache=TTLCache(cfg.stats_cache_ttl_seconds),
        ensemble=ensemble,
        training_source=training_source,
        predictor=predictor,
    )


async def _train_in_background(ensemble: EnsembleRegistry, warmup: float, advanced_delay: float) -> None:
    await asyncio.sleep(warmup)
    try:
        if not ensemble.is_trained:
            await asyncio.to_thread(ensemble.initialize)
        if ensemble.is_trained:
            await asyncio.sleep(advanced_delay)
            await asyncio.to_thread(ensemble.train_advanced)
    except Exception:
        logger.exception("Background ensemble training failed; rule-based predictions stay active")


async def _report_periodically(monitor: PerformanceMonitor, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        monitor.log_report()


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()

        # Shared MySQL schemas are managed by scripts/create_orm_tables.py;
        # sqlite databases are created on the fly.
        if build_sqlalchemy_db_url(settings).startswith("sqlite"):
            init_db()
        if settings.seed_sample_data:
            with SessionLocal() as db:
                added = seed_sample_employees(db)
            if added:
                logger.info("Seeded %d sample employees", added)

        services = build_services(settings)
        if settings.model_dir is not None and services.ensemble.load(settings.model_dir):
            logger.info("Ensemble restored from %s", settings.model_dir)
        app.state.services = services

        tasks: list[asyncio.Task] = []
        if settings.model_training_on_startup and not services.ensemble.is_trained:
            tasks.append(
                asyncio.create_task(
                    _train_in_background(
                        services.ensemble,
                        settings.model_warmup_delay_seconds,
                        settings.advanced_training_delay_seconds,
                    )
                )
            )
        if settings.performance_report_interval_seconds > 0:
            tasks.append(
                asyncio.create_task(_report_periodically(services.monitor, settings.performance_report_interval_seconds))
            )

        logger.info("%s started (environment=%s)", settings.app_name, settings.environment)
        yield

        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(GZipMiddleware, minimum_size=1024)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def api_headers_and_timing(request: Request, call_next):
        if not request.url.path.startswith(settings.api_prefix):
            return await call_next(request)
        started = time.perf_counter()
        response = await call_next(request)
        response.headers["Cache-Control"] = NO_CACHE
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
        logger.info(
            "%s %s %s in %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    attach_error_handlers(application)

    application.include_router(health_router, prefix=settings.api_prefix)
    application.include_router(options_router, prefix=settings.api_prefix)
    application.include_router(predictions_router, prefix=settings.api_prefix)
    application.include_router(employees_router, prefix=settings.api_prefix)
    application.include_router(analytics_router, prefix=settings.api_prefix)
    application.include_router(models_router, prefix=settings.api_prefix)
    application.include_router(performance_router, prefix=settings.api_prefix)
    application.include_router(uploads_router, prefix=settings.api_prefix)
    return application


app = create_app()
