import json
from datetime import timedelta

import httpx
import pytest
from fastapi import HTTPException

from app.api.deps import get_gemini_client
from app.main import app
from app.models.attendance import Attendance
from app.services.ai.gemini_client import GeminiClient, GeminiError, strip_code_fences
from app.services.ai.insights_service import AIInsightsService, ATTRITION_FALLBACK, FORECAST_FALLBACK
from app.services.attendance_service import local_today


def gemini_returning(text: str, status_code: int = 200) -> GeminiClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith(":generateContent")
        assert request.url.params["key"] == "test-key"
        return httpx.Response(
            status_code,
            json={"candidates": [{"content": {"parts": [{"text": text}]}}]},
        )

    return GeminiClient(api_key="test-key", model="gemini-test", transport=httpx.MockTransport(handler))


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"score": 10}\n```') == '{"score": 10}'
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'


async def test_generate_json_parses_fenced_answer():
    client = gemini_returning('```json\n{"forecast": "Up", "suggestions": ["a"]}\n```')
    assert await client.generate_json("prompt") == {"forecast": "Up", "suggestions": ["a"]}


async def test_unconfigured_client_raises():
    with pytest.raises(GeminiError):
        await GeminiClient(api_key="").generate_text("prompt")


async def test_http_error_raises_gemini_error():
    with pytest.raises(GeminiError):
        await gemini_returning("{}", status_code=503).generate_text("prompt")


async def test_attrition_risk_uses_model_answer(db_session):
    answer = json.dumps({"score": 72, "reasons": ["Frequent late arrivals", "Low attendance", "Short tenure"]})
    service = AIInsightsService(db_session, gemini_returning(answer))

    result = await service.get_attrition_risk()
    assert result["score"] == 72
    assert len(result["reasons"]) == 3


async def test_attrition_risk_falls_back_on_malformed_json(db_session):
    service = AIInsightsService(db_session, gemini_returning("The risk is moderate."))
    assert await service.get_attrition_risk() == ATTRITION_FALLBACK


async def test_attrition_risk_falls_back_on_wrong_shape(db_session):
    service = AIInsightsService(db_session, gemini_returning('{"risk": "high"}'))
    assert await service.get_attrition_risk() == ATTRITION_FALLBACK


async def test_sales_forecast_falls_back_when_unconfigured(db_session):
    service = AIInsightsService(db_session, GeminiClient(api_key=""))
    assert await service.get_sales_forecast() == FORECAST_FALLBACK


async def test_employee_data_from_records(db_session, make_employee):
    employee = await make_employee(joining_date=local_today() - timedelta(days=400))
    db_session.add(Attendance(
        employee_id=employee.id,
        company_id=employee.company_id,
        attendance_date=local_today(),
        status="present",
        is_late=True,
    ))
    await db_session.commit()

    data = await AIInsightsService(db_session, GeminiClient(api_key="")).build_employee_data(employee.id)
    assert data["lateArrivals"] == 1
    assert data["leavesTaken"] == 0.0
    assert data["tenureMonths"] >= 12


async def test_unknown_employee_is_not_found(db_session):
    import uuid

    with pytest.raises(HTTPException) as exc:
        await AIInsightsService(db_session, GeminiClient(api_key="")).get_attrition_risk(uuid.uuid4())
    assert exc.value.status_code == 404


async def test_ai_endpoints_answer_with_fallback(client):
    app.dependency_overrides[get_gemini_client] = lambda: GeminiClient(api_key="")

    response = await client.get("/api/v1/ai/attrition-risk")
    assert response.status_code == 200
    assert response.json() == ATTRITION_FALLBACK

    response = await client.get("/api/v1/ai/sales-forecast")
    assert response.status_code == 200
    assert response.json() == FORECAST_FALLBACK


async def test_sales_forecast_endpoint_for_company(client, company):
    answer = json.dumps({"forecast": "Upward", "suggestions": ["Follow up open deals", "Bundle offers"]})
    app.dependency_overrides[get_gemini_client] = lambda: gemini_returning(answer)

    response = await client.get("/api/v1/ai/sales-forecast", params={"company_id": str(company.id)})
    assert response.status_code == 200
    assert response.json()["forecast"] == "Upward"
