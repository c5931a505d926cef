# -*- coding: utf-8 -*-

"""
Shared pytest fixtures for Query Transform Gateway tests.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from qtransform.context import ExecutionContext, GatewayRequest
from qtransform.models import AddDirective, TransformConfig
from qtransform.multimap import QueryParameterMap
from qtransform.policy import TransformQueryParametersPolicy
from qtransform.rendering import PassthroughRenderer


@pytest.fixture
def echo_renderer():
    """Renderer stub returning every string unchanged."""
    return PassthroughRenderer()


@pytest.fixture
def gateway_request():
    """Request carrying a user header and two inbound parameters."""
    return GatewayRequest(
        method="GET",
        path="/orders",
        headers={"x-user": "alice", "x-tenant": "acme"},
        params=QueryParameterMap.from_pairs([("page", "2"), ("debug", "true")]),
    )


@pytest.fixture
def execution_context(gateway_request):
    return ExecutionContext(
        request=gateway_request,
        attributes={"plan": "gold"},
        properties={"env": "prod"},
    )


@pytest.fixture
def gateway_policy():
    """Policy adding a header-derived parameter and stripping 'debug'."""
    config = TransformConfig(
        adds=(
            AddDirective(name="user", value="{{ request.headers['x-user'] }}"),
            AddDirective(name="source", value="gateway"),
        ),
        removes=("debug",),
    )
    return TransformQueryParametersPolicy(config)


@pytest.fixture
def test_client(gateway_policy):
    """TestClient for an app wrapped by the transformation middleware."""
    with TestClient(create_app([gateway_policy])) as client:
        yield client
