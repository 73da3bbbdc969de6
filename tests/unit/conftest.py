"""テスト共通のフィクスチャ"""

import pytest

from fakes import FORM_HTML, PARIS, FakeProvider
from geocoder_widget.features.widget.page.context import RenderingContext
from geocoder_widget.infrastructure.config.settings import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        google_maps_api_key=None,
        autocomplete_delay=0,
        autocomplete_min_length=1,
        discard_stale_responses=True,
    )


@pytest.fixture
def context() -> RenderingContext:
    return RenderingContext.from_html(FORM_HTML)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider({"Paris": [PARIS]})
