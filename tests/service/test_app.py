"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from lexiview.service import create_app
from lexiview.session import AnalysisSession

_CARD = """
export enum Tone { Light = "light", Dark = "dark" }

interface CardProps {
  title: string;
  tone: Tone;
  onClose: () => void;
}

export function Card({ title }: CardProps) {
  return <div>{t("card.title")}<FormattedMessage id="card.body" /></div>;
}
"""


@pytest.fixture
def client(project) -> TestClient:
    project.write(
        {
            "src/Card.tsx": _CARD,
            "translations/en.json": '{"card": {"title": "Card"}}',
        }
    )
    app = create_app(lambda: AnalysisSession(project.root))
    return TestClient(app)


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_data_endpoint_returns_cache_and_translations(client: TestClient, project) -> None:
    response = client.get("/api/data")

    assert response.status_code == 200
    body = response.json()
    card = str(project.path("src/Card.tsx"))
    assert body["cache"]["keyToComponents"] == {"card.title": [card], "card.body": [card]}
    assert body["translations"] == {"en": {"card.title": "Card"}, "fr": {}}
    assert project.path(".lexiview/analysis-cache.json").is_file()


def test_component_endpoint(client: TestClient, project) -> None:
    card = str(project.path("src/Card.tsx"))

    response = client.get("/api/component", params={"path": card})

    assert response.status_code == 200
    assert response.json()["component"] == {
        "path": card,
        "name": "Card",
        "propsInterface": "CardProps",
        "translationKeys": ["card.title", "card.body"],
    }
    missing = client.get("/api/component", params={"path": str(project.path("src/Nope.tsx"))})
    assert missing.status_code == 404


def test_component_props_endpoint(client: TestClient, project) -> None:
    response = client.get("/api/component-props", params={"path": str(project.path("src/Card.tsx"))})

    assert response.status_code == 200
    assert response.json() == {
        "props": {
            "title": "Mock Title",
            "tone": "light",
            "onClose": {"kind": "function", "name": "onClose"},
        },
        "metadata": {
            "enums": {
                "tone": {
                    "values": [
                        {"name": "Light", "value": "light"},
                        {"name": "Dark", "value": "dark"},
                    ]
                }
            }
        },
    }
    assert client.get("/api/component-props", params={"path": "/nowhere.tsx"}).status_code == 404


def test_component_props_requires_path(client: TestClient) -> None:
    assert client.get("/api/component-props").status_code == 422


def test_refresh_endpoint_rebuilds(client: TestClient, project) -> None:
    client.get("/api/data")
    project.write({"src/Badge.tsx": 'export const Badge = () => <em>{t("badge.label")}</em>;\n'})

    response = client.post("/api/refresh-cache")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["stats"] == {"components": 2, "translationUsages": 3}
    assert "badge.label" in body["cache"]["keyToComponents"]
