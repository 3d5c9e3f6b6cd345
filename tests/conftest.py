from __future__ import annotations

import pytest

from helpers.fakes import FakeAnnotator, FakeBlobStore, FakeComments


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def comments() -> FakeComments:
    return FakeComments()


@pytest.fixture
def annotator() -> FakeAnnotator:
    return FakeAnnotator()
