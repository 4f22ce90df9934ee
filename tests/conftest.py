from pathlib import Path

import pytest

from api_dashboard.parser.source import SourceCommentStore

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixture_store():
    return SourceCommentStore(FIXTURES)


@pytest.fixture
def src_store():
    return SourceCommentStore(Path(__file__).parent.parent / "src")
