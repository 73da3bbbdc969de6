"""ジオコーディングプロバイダーのテスト"""

import googlemaps
import pytest
from geopy.exc import GeocoderServiceError
from geopy.geocoders import ArcGIS, Nominatim
from geopy.location import Location

from fakes import FakeGoogleClient, google_result
from geocoder_widget.features.geocoding.providers.geopy_geocoder import GeopyGeocoder
from geocoder_widget.features.geocoding.providers.google_maps_geocoder import GoogleMapsGeocoder
from geocoder_widget.features.geocoding.providers.registry import create_provider
from geocoder_widget.infrastructure.config.settings import Settings
from geocoder_widget.shared.exceptions.errors import ConfigurationError, GeocodingError


class FakeGeopyGeocoder:
    def __init__(self, results=None, error=None) -> None:
        self.results = results
        self.error = error
        self.calls = []

    def geocode(self, query, exactly_one=True, **kwargs):
        self.calls.append((query, exactly_one, kwargs))
        if self.error is not None:
            raise self.error
        return self.results


# ---- Google ----


def test_google_returns_all_results_in_order() -> None:
    """API応答の順序どおりにGeoLocationを返す"""
    client = FakeGoogleClient(
        [
            google_result("Paris", "Île-de-France", 48.8566, 2.3522),
            google_result("Paris", "Texas", 33.6609, -95.5555),
        ]
    )
    geocoder = GoogleMapsGeocoder(api_key="AIza-test", client=client)

    locations = geocoder.geocode("Paris")

    assert [(loc.city, loc.region) for loc in locations] == [
        ("Paris", "Île-de-France"),
        ("Paris", "Texas"),
    ]
    assert locations[0].to_tuple() == (48.8566, 2.3522)
    assert locations[0].place_id == "place-paris"


def test_google_passes_region_bias() -> None:
    """地域バイアスが設定されていればregionを渡す"""
    client = FakeGoogleClient([])
    geocoder = GoogleMapsGeocoder(api_key="AIza-test", region="fr", client=client)

    assert geocoder.geocode("Lyon") == []
    assert client.calls == [("Lyon", {"region": "fr"})]


def test_google_skips_result_without_location() -> None:
    """緯度・経度のない結果は除外する"""
    broken = google_result("Nowhere", "Void", 0, 0)
    broken["geometry"] = {}
    client = FakeGoogleClient([broken, google_result("Lyon", "Auvergne-Rhône-Alpes", 45.764, 4.8357)])
    geocoder = GoogleMapsGeocoder(api_key="AIza-test", client=client)

    locations = geocoder.geocode("Lyon")

    assert [loc.city for loc in locations] == ["Lyon"]


def test_google_falls_back_to_postal_town() -> None:
    """localityがなければpostal_townを市区町村として使う"""
    result = google_result("ignored", "England", 51.75, -1.25)
    result["address_components"][0]["types"] = ["postal_town"]
    result["address_components"][0]["long_name"] = "Oxford"
    geocoder = GoogleMapsGeocoder(api_key="AIza-test", client=FakeGoogleClient([result]))

    assert geocoder.geocode("Oxford")[0].city == "Oxford"


@pytest.mark.parametrize(
    "error",
    [
        googlemaps.exceptions.ApiError("REQUEST_DENIED", "The provided API key is invalid."),
        googlemaps.exceptions.TransportError("connection reset"),
        RuntimeError("boom"),
    ],
)
def test_google_errors_become_geocoding_error(error: Exception) -> None:
    """ライブラリの例外はGeocodingErrorに変換する"""
    geocoder = GoogleMapsGeocoder(api_key="AIza-test", client=FakeGoogleClient(error=error))

    with pytest.raises(GeocodingError):
        geocoder.geocode("Paris")


def test_google_empty_address_returns_empty_list() -> None:
    client = FakeGoogleClient([google_result("Paris", "Île-de-France", 48.8566, 2.3522)])
    geocoder = GoogleMapsGeocoder(api_key="AIza-test", client=client)

    assert geocoder.geocode("") == []
    assert client.calls == []


def test_google_client_is_created_lazily() -> None:
    """生成時にはクライアントを作らず、APIキーがなければ検索時に失敗する"""
    geocoder = GoogleMapsGeocoder(api_key=None)

    assert geocoder._client is None
    with pytest.raises(GeocodingError):
        geocoder.geocode("Paris")


# ---- geopy ----


def test_geopy_nominatim_uses_address_details() -> None:
    """Nominatimはaddressdetailsから市区町村と地域を取り出す"""
    raw = {
        "place_id": 12345,
        "address": {"town": "Annecy", "state": "Auvergne-Rhône-Alpes", "country": "France"},
    }
    fake = FakeGeopyGeocoder([Location("Annecy, Haute-Savoie, France", (45.8992, 6.1294), raw)])
    geocoder = GeopyGeocoder("nominatim", user_agent="test-agent", geocoder=fake)

    locations = geocoder.geocode("Annecy")

    assert locations[0].city == "Annecy"
    assert locations[0].region == "Auvergne-Rhône-Alpes"
    assert locations[0].place_id == "12345"
    assert fake.calls == [("Annecy", False, {"addressdetails": True})]


def test_geopy_other_services_split_address() -> None:
    """addressdetailsのないサービスは住所文字列の先頭2要素を使う"""
    fake = FakeGeopyGeocoder(
        [
            Location("Berlin, Brandenburg, Germany", (52.52, 13.405), {}),
            Location("Berlin", (44.47, -71.18), {}),
        ]
    )
    geocoder = GeopyGeocoder("arcgis", geocoder=fake)

    locations = geocoder.geocode("Berlin")

    assert [(loc.city, loc.region) for loc in locations] == [
        ("Berlin", "Brandenburg"),
        ("Berlin", None),
    ]


def test_geopy_no_result_returns_empty_list() -> None:
    geocoder = GeopyGeocoder("arcgis", geocoder=FakeGeopyGeocoder(None))

    assert geocoder.geocode("zzzz") == []


def test_geopy_errors_become_geocoding_error() -> None:
    geocoder = GeopyGeocoder("arcgis", geocoder=FakeGeopyGeocoder(error=GeocoderServiceError("503")))

    with pytest.raises(GeocodingError):
        geocoder.geocode("Berlin")


# ---- レジストリ ----


def test_registry_google_uses_settings_key() -> None:
    settings = Settings(_env_file=None, google_maps_api_key="AIza-from-settings", geocoding_region="fr")

    provider = create_provider("google", settings=settings)

    assert isinstance(provider, GoogleMapsGeocoder)
    assert provider.api_key == "AIza-from-settings"
    assert provider.region == "fr"


def test_registry_explicit_key_wins() -> None:
    settings = Settings(_env_file=None, google_maps_api_key="AIza-from-settings")

    provider = create_provider("google", api_key="AIza-explicit", settings=settings)

    assert provider.api_key == "AIza-explicit"


@pytest.mark.parametrize(
    "engine,service",
    [
        ("openstreetmap", "nominatim"),
        ("bing", "bing"),
        ("mapquest", "openmapquest"),
        ("yandex", "yandex"),
        ("ArcGIS", "arcgis"),
    ],
)
def test_registry_geopy_engines(engine: str, service: str) -> None:
    provider = create_provider(engine, settings=Settings(_env_file=None))

    assert isinstance(provider, GeopyGeocoder)
    assert provider.service == service


@pytest.mark.parametrize("engine,geocoder_cls", [("openstreetmap", Nominatim), ("arcgis", ArcGIS)])
def test_registry_keyless_engine_ignores_api_key(engine: str, geocoder_cls: type) -> None:
    """キー不要のエンジンはページ設定にAPIキーがあっても生成できる"""
    provider = create_provider(engine, api_key="AIza-page-key", settings=Settings(_env_file=None))

    assert isinstance(provider.geocoder, geocoder_cls)


def test_geopy_keyed_service_receives_api_key() -> None:
    geocoder = GeopyGeocoder("bing", api_key="bing-key")

    assert geocoder.geocoder.api_key == "bing-key"


def test_registry_unknown_engine() -> None:
    with pytest.raises(ConfigurationError):
        create_provider("carrier-pigeon", settings=Settings(_env_file=None))
