"""Pytest configuration and fixtures."""

import os
from typing import Any

import pytest

from a2ui_bridge.core import Settings, get_settings
from a2ui_bridge.monitoring import NullMetrics
from a2ui_bridge.processor import DataModel, MessageProcessor


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['A2UI_LOG_LEVEL'] = 'DEBUG'
    os.environ['A2UI_ENABLE_METRICS'] = 'false'  # Keep the global registry clean
    get_settings.cache_clear()


# ============================================================================
# Processor Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Settings fixture."""
    return Settings(enable_metrics=False)


@pytest.fixture
def processor(settings):
    """Message processor with metrics disabled."""
    return MessageProcessor(settings=settings, metrics=NullMetrics())


@pytest.fixture
def model():
    """Data model with a filled-in form."""
    data_model = DataModel()
    data_model.merge("form", [
        {"key": "name", "valueString": "Ada"},
        {"key": "age", "valueNumber": 36},
        {"key": "subscribed", "valueBoolean": True},
    ])
    return data_model


# ============================================================================
# Message Fixtures
# ============================================================================

def begin_rendering(root: str = "card", surface_id: str = "@default", **styles: Any) -> dict:
    body: dict[str, Any] = {"surfaceId": surface_id, "root": root}
    if styles:
        body["styles"] = styles
    return {"beginRendering": body}


def text_node(node_id: str, text: str) -> dict:
    return {"id": node_id, "component": {"Text": {"text": {"literalString": text}}}}


def card_node(node_id: str, *children: str) -> dict:
    return {"id": node_id, "component": {"Card": {"children": list(children)}}}


def surface_update(*components: dict, surface_id: str = "@default") -> dict:
    return {"surfaceUpdate": {"surfaceId": surface_id, "components": list(components)}}


def data_model_update(*contents: dict, path: str = "", surface_id: str = "@default") -> dict:
    return {"dataModelUpdate": {"surfaceId": surface_id, "path": path, "contents": list(contents)}}


@pytest.fixture
def card_messages():
    """A Card holding a single Text, on the default surface."""
    return [
        begin_rendering("card"),
        surface_update(card_node("card", "title"), text_node("title", "Hello")),
    ]


@pytest.fixture
def form_messages():
    """A form bound to the data model, with a submit button."""
    return [
        begin_rendering("form", surface_id="form-surface", primaryColor="#3366ff"),
        surface_update(
            {"id": "form", "component": {"Column": {"children": {"explicitList": ["name", "submit"]}}}},
            {
                "id": "name",
                "component": {
                    "TextField": {
                        "label": {"literalString": "Name"},
                        "text": {"path": "form.name"},
                    }
                },
            },
            {
                "id": "submit",
                "component": {
                    "Button": {
                        "label": {"literalString": "Send"},
                        "action": {
                            "name": "submit_form",
                            "context": [{"key": "name", "value": {"path": "form.name"}}],
                        },
                    }
                },
            },
            surface_id="form-surface",
        ),
        data_model_update(
            {"key": "name", "valueString": "Ada"},
            path="form",
            surface_id="form-surface",
        ),
    ]
