from unittest import mock

import pytest
import requests

from ec2_metadata_getter.metadata.dummy import DummyProvider
from ec2_metadata_getter.metadata.fields import FIELDS
from ec2_metadata_getter.metadata.metadata import MetadataGetter

ROOT = "http://169.254.169.254/latest"


def endpoint_pages():
    """The canned data laid out as the URLs the real endpoint serves"""
    provider = DummyProvider()
    pages = {ROOT: "meta-data\nuser-data"}
    for path, text in provider._tree.items():
        pages[f"{ROOT}/meta-data/{path}"] = text
    pages[f"{ROOT}/user-data"] = pages.pop(f"{ROOT}/meta-data/{FIELDS['UserData']}")
    return pages


def make_response(url, text=None):
    response = mock.MagicMock()
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    response.url = url
    if text is None:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"404 Client Error: Not Found for url: {url}"
        )
    else:
        response.text = text
    return response


class FakeEndpoint:
    def __init__(self, pages):
        self.pages = pages
        self.urls = []

    def __call__(self, url, timeout=None, **kwargs):
        self.urls.append(url)
        return make_response(url, self.pages.get(url))


@pytest.fixture
def endpoint():
    fake = FakeEndpoint(endpoint_pages())
    with mock.patch(
        "ec2_metadata_getter.metadata.metadata.requests.get", side_effect=fake
    ) as m_get:
        fake.mock = m_get
        yield fake


@pytest.fixture
def offline():
    with mock.patch(
        "ec2_metadata_getter.metadata.metadata.requests.get",
        side_effect=requests.exceptions.ConnectionError("unreachable"),
    ) as m_get:
        yield m_get


@pytest.fixture
def dummy_getter(tmp_path, offline):
    return MetadataGetter(cache_dir=str(tmp_path), dummy=True)


@pytest.fixture
def getter(tmp_path, endpoint):
    return MetadataGetter(cache_dir=str(tmp_path))
