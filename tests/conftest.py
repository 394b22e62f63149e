from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from studygen.config import get_settings
from studygen.llm import CaseStudy
from studygen.main import app, get_study_service


@pytest.fixture(autouse=True)
def reset_api_caches() -> Iterator[None]:
    get_settings.cache_clear()
    get_study_service.cache_clear()
    yield
    get_settings.cache_clear()
    get_study_service.cache_clear()
    app.dependency_overrides.clear()


@pytest.fixture
def make_case_study() -> Callable[..., CaseStudy]:
    def _make(title: str = "Logistics Optimization at Acme Corp") -> CaseStudy:
        return CaseStudy(
            title=title,
            company_a_name="Acme Corp",
            company_a_summary="Acme Corp is a regional distributor of industrial parts.",
            company_b_name="RouteWise",
            company_b_summary="RouteWise builds route planning software for fleets.",
            context=["Fuel and labour drove logistics cost up 18% in two years."],
            approach=["Step 1: Map every lane.", "Step 2: Consolidate depots."],
            impact=["Outcome 1: Cost per delivery fell 12%."],
        )

    return _make


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
