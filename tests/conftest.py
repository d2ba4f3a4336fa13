"""Shared fixtures: an in-memory run log and a stubbed requests session."""

import json
import logging
from unittest.mock import MagicMock

import pytest
import requests

from markdown_to_karakeep.karakeep_client import KarakeepClient
from markdown_to_karakeep.run_log import MemoryLogSink, RunContext

BASE_URL = "https://karakeep.example.com/api/v1"


def make_response(status_code, body=b"", reason="", headers=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    response._content = body
    response.headers.update(headers or {})
    return response


@pytest.fixture
def sink():
    return MemoryLogSink()


@pytest.fixture
def context(sink):
    return RunContext(sink=sink)


@pytest.fixture
def session():
    fake = MagicMock(spec=requests.Session)
    fake.headers = {}
    fake.request.return_value = make_response(201, {"id": "bm_1"}, reason="Created")
    return fake


@pytest.fixture
def client(session, context):
    return KarakeepClient(BASE_URL, "secret-key", context=context, session=session)


@pytest.fixture
def quiet_logger():
    logger = logging.getLogger("markdown_to_karakeep.tests")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger
