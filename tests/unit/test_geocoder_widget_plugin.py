"""ジオコーダー フィールドウィジェットのテスト"""

from fakes import FakeProvider
from geocoder_widget.features.widget.behaviors import GeocoderBehavior
from geocoder_widget.features.widget.page.context import RenderingContext
from geocoder_widget.features.widget.plugins.geocoder_widget import (
    GeocoderWidget,
    WidgetSettings,
    merge_page_settings,
)
from geocoder_widget.infrastructure.config.settings import Settings


def make_widget(**overrides) -> GeocoderWidget:
    widget_settings = WidgetSettings(destination_field="field_location", placeholder="Type an address")
    for key, value in overrides.items():
        setattr(widget_settings, key, value)
    settings = Settings(_env_file=None, google_maps_api_key="AIza-test", bing_api_key="bing-key")
    return GeocoderWidget("field_address", widget_settings, settings)


def test_settings_form_lists_only_geofields() -> None:
    widget = make_widget()
    definitions = {
        "field_location": {"type": "field_item:geofield", "label": "Location"},
        "field_body": {"type": "field_item:text_long", "label": "Body"},
        "field_pin": {"type": "field_item:geofield", "label": "Pin"},
    }

    form = widget.settings_form(definitions)

    assert form["destination_field"]["options"] == {"field_location": "Location", "field_pin": "Pin"}
    assert form["destination_field"]["required"] is True
    assert form["destination_field"]["default_value"] == "field_location"
    assert form["placeholder"]["default_value"] == "Type an address"


def test_settings_summary() -> None:
    assert make_widget().settings_summary() == [
        "Destination Geofield: field_location",
        "Placeholder: Type an address",
    ]
    assert make_widget(placeholder="").settings_summary() == ["Destination Geofield: field_location"]


def test_form_element_renders_source_input() -> None:
    element, attached = make_widget().form_element(delta=2, default_value="Lyon")

    assert element.name == "input"
    assert element["id"] == "edit-field-address-2-value"
    assert element["placeholder"] == "Type an address"
    assert element["value"] == "Lyon"
    assert "geocoder-source" in element["class"]
    assert attached == {
        "engine": "google",
        "api_key": "AIza-test",
        "fields": [
            {
                "sourceField": "edit-field-address-2-value",
                "destinationField": "edit-field-location-wrapper",
                "sourceType": "geofield",
            }
        ],
    }


def test_instance_engine_overrides_default() -> None:
    attached = make_widget(geocoder_engine="bing").attached_settings()

    assert attached["engine"] == "bing"
    assert attached["api_key"] == "bing-key"


def test_engine_without_key_omits_api_key() -> None:
    attached = make_widget(geocoder_engine="openstreetmap").attached_settings()

    assert "api_key" not in attached


def test_merge_page_settings_concatenates_fields() -> None:
    first = make_widget().attached_settings(0)
    second = make_widget().attached_settings(1)

    merged = merge_page_settings([first, second])

    assert merged["engine"] == "google"
    assert merged["api_key"] == "AIza-test"
    assert [f["sourceField"] for f in merged["fields"]] == [
        "edit-field-address-0-value",
        "edit-field-address-1-value",
    ]


def test_rendered_form_can_be_attached() -> None:
    """描画した入力欄と設定でビヘイビアがバインドできる"""
    widget = make_widget()
    element, attached = widget.form_element(delta=0)
    context = RenderingContext.from_html(
        '<form><div id="edit-field-location-wrapper">'
        '<input class="geofield-lat" value=""><input class="geofield-lon" value="">'
        "</div></form>"
    )
    context.root.form.insert(0, element)

    outcomes = GeocoderBehavior(widget.settings, provider=FakeProvider()).attach(context, attached)

    assert [outcome.bound for outcome in outcomes] == [True]
