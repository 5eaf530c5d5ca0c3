import asyncio
import httpx
import pytest
from fastapi.testclient import TestClient

from hr_assessment.analysis import AnalysisClient
from hr_assessment.catalog import QuestionCatalog
from hr_assessment.completion_client import CompletionClient
from hr_assessment.dependencies import (
    get_analysis_client,
    get_catalog,
    get_recommendation_client,
    get_store,
)
from hr_assessment.fallbacks import Fallbacks
from hr_assessment.main import app
from hr_assessment.recommendations import RecommendationClient
from hr_assessment.storage import JsonFileResultStore

LAB45_URL = "https://lab45.test/v1.1/skills/completion/query"


class FakeLab45:
    """Stands in for the completion endpoint; tests swap ``handler`` per case."""

    def __init__(self):
        self.requests = []
        self.handler = lambda request: httpx.Response(503, text="service unavailable")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def reply_json(self, body, status_code=200):
        self.handler = lambda request: httpx.Response(status_code, json=body)

    def reply_content(self, content):
        self.reply_json({"choices": [{"message": {"role": "assistant", "content": content}}]})

    def unreachable(self):
        def _raise(request):
            raise httpx.ConnectError("connection refused", request=request)
        self.handler = _raise


def make_completion_client(lab45, api_key="test-key"):
    return CompletionClient(
        api_key=api_key,
        endpoint=LAB45_URL,
        model="gpt-4",
        timeout=5,
        transport=httpx.MockTransport(lab45),
    )


@pytest.fixture
def lab45():
    return FakeLab45()


@pytest.fixture
def completion_client(lab45):
    client = make_completion_client(lab45)
    yield client
    asyncio.run(client.aclose())


@pytest.fixture
def fallbacks():
    return Fallbacks.load()


@pytest.fixture
def catalog(tmp_path):
    cat = QuestionCatalog(tmp_path / "questions.json")
    cat.initialize()
    return cat


@pytest.fixture
def store(tmp_path):
    s = JsonFileResultStore(tmp_path / "results.json")
    s.initialize()
    return s


@pytest.fixture
def client(catalog, store, completion_client, fallbacks):
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_analysis_client] = lambda: AnalysisClient(completion_client, fallbacks)
    app.dependency_overrides[get_recommendation_client] = lambda: RecommendationClient(completion_client, fallbacks)
    yield TestClient(app)
    app.dependency_overrides.clear()
