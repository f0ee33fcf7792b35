"""
Pytest configuration and fixtures.
"""
import json
import os
from typing import Any, Dict, Generator, List, Optional

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from research_portal.extraction.models import ExtractionResult, parse_extraction
from research_portal.main import app
from research_portal.middleware.rate_limit import limiter
from research_portal.services.oracle import DocumentPart, get_oracle_client


class FakeOracle:
    """Stands in for OracleClient; returns a canned response or raises."""

    def __init__(self, response: str = "", error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, documents, instruction, temperature, json_mode=False) -> str:
        self.calls.append({
            "documents": list(documents),
            "instruction": instruction,
            "temperature": temperature,
            "json_mode": json_mode,
        })
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    """A small but complete income statement as the model returns it."""
    return {
        "metadata": {
            "company_name": "Acme Industries Ltd",
            "currency": "INR",
            "units": "in crores",
            "reporting_periods": ["FY 25", "FY 24"],
            "statement_type": "Consolidated",
            "source_description": "Annual report 2024-25, statement of profit and loss",
        },
        "line_items": [
            {
                "standard_label": "Revenue",
                "original_label": "Revenue from operations",
                "depth": 0,
                "is_total": False,
                "values": {"FY 25": 204813, "FY 24": 163210.5},
                "notes": None,
            },
            {
                "standard_label": "Cost of Materials Consumed",
                "original_label": "Cost of materials consumed",
                "depth": 0,
                "is_total": False,
                "values": {},
                "notes": "Section heading",
            },
            {
                "standard_label": "Opening Inventory",
                "original_label": "Inventories at beginning of the year",
                "depth": 1,
                "is_total": False,
                "values": {"FY 25": 9756.31, "FY 24": 9613.51},
                "notes": None,
            },
            {
                "standard_label": "Change in Inventory",
                "original_label": "",
                "depth": 1,
                "is_total": False,
                "values": {"FY 25": -1500.5, "FY 24": None},
                "notes": "FY 24 value not legible",
            },
            {
                "standard_label": "Cost of Materials Consumed",
                "original_label": "Cost of materials consumed",
                "depth": 0,
                "is_total": True,
                "values": {"FY 25": 82937.43, "FY 24": 70264.61, "FY 23": 61000},
                "notes": None,
            },
        ],
        "analyst_notes": [
            "All line items extracted from the Statement of Profit and Loss.",
            "Negative values represent inventory reductions.",
        ],
    }


@pytest.fixture
def sample_result(sample_payload: Dict[str, Any]) -> ExtractionResult:
    """Parsed sample extraction."""
    return parse_extraction(sample_payload)


@pytest.fixture
def fake_oracle(sample_payload: Dict[str, Any]) -> FakeOracle:
    """Oracle that answers with the sample payload as bare JSON."""
    return FakeOracle(response=json.dumps(sample_payload))


@pytest.fixture
def pdf_document(sample_pdf_content: bytes) -> DocumentPart:
    """An uploaded PDF document."""
    return DocumentPart(filename="annual_report.pdf", content_type="application/pdf", data=sample_pdf_content)


@pytest.fixture
def client(fake_oracle: FakeOracle) -> Generator[TestClient, None, None]:
    """Create a test client with the model call replaced."""
    limiter.enabled = False
    app.dependency_overrides[get_oracle_client] = lambda: fake_oracle

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_pdf_content() -> bytes:
    """Generate simple PDF content for testing."""
    # Minimal valid PDF
    return b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R >>
endobj
4 0 obj
<< /Length 44 >>
stream
BT /F1 12 Tf 100 700 Td (Revenue: 204,813) Tj ET
endstream
endobj
trailer
<< /Size 5 /Root 1 0 R >>
%%EOF"""


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the oracle singleton before and after each test."""
    import research_portal.services.oracle as oracle_module

    oracle_module._oracle_instance = None
    yield
    oracle_module._oracle_instance = None


@pytest.fixture
def make_oracle():
    """Factory for oracles with a custom response or error."""
    return FakeOracle
