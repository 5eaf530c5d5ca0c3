from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .analysis import AnalysisClient
from .catalog import QuestionCatalog
from .completion_client import CompletionClient
from .db import make_engine
from .fallbacks import Fallbacks
from .logging_config import setup_logging
from .recommendations import RecommendationClient
from .settings import settings
from .storage import JsonFileResultStore, SqlResultStore
from .routers import health, questions, assessments, recommendations

logger = logging.getLogger(__name__)


def init_services(app: FastAPI) -> None:
	"""Bootstrap the data files and attach catalog, store and clients to app.state."""
	settings.data_dir.mkdir(parents=True, exist_ok=True)
	catalog = QuestionCatalog(settings.questions_path)
	catalog.initialize()
	if settings.database_url:
		store = SqlResultStore(make_engine(settings.database_url))
	else:
		store = JsonFileResultStore(settings.results_path)
	store.initialize()
	fallbacks = Fallbacks.load(settings.fallbacks_file)
	completion = CompletionClient()
	app.state.catalog = catalog
	app.state.store = store
	app.state.completion_client = completion
	app.state.analysis_client = AnalysisClient(completion, fallbacks)
	app.state.recommendation_client = RecommendationClient(completion, fallbacks)


@asynccontextmanager
async def lifespan(app: FastAPI):
	setup_logging(settings.log_level)
	init_services(app)
	logger.info("HR Maturity Assessment API %s ready", settings.app_version)
	logger.info("Data directory: %s", settings.data_dir.resolve())
	logger.info("Result store: %s", "database" if settings.database_url else settings.results_path)
	logger.info("Lab45 configured: %s", settings.completion_configured)
	yield
	await app.state.completion_client.aclose()
	logger.info("HR Maturity Assessment API shutting down")


app = FastAPI(title="HR Maturity Assessment API", version=settings.app_version, lifespan=lifespan)

app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.cors_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(questions.router, prefix=settings.api_prefix)
app.include_router(assessments.router, prefix=settings.api_prefix)
app.include_router(recommendations.router, prefix=settings.api_prefix)


# Error bodies are {"error": "..."} across the API
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
	return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
	logger.warning("Invalid request body on %s: %s", request.url.path, exc.errors())
	return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
	logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
	return JSONResponse(status_code=500, content={"error": "Internal server error"})


def run() -> None:
	import uvicorn

	uvicorn.run("hr_assessment.main:app", host=settings.host, port=settings.port)
