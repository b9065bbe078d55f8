"""Tests for mapping OpenWeather payloads into CurrentConditions / ForecastDay."""

from __future__ import annotations

from datetime import datetime

import pytest

from conftest import current_payload, forecast_entry, forecast_payload
from weather_lookup.errors import ErrorKind, MalformedResponse
from weather_lookup.normalizer import (
    ConditionCategory,
    ForecastDay,
    classify_condition,
    normalize_current,
    normalize_forecast,
)


class TestClassifyCondition:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Clear", ConditionCategory.CLEAR),
            ("Clouds", ConditionCategory.CLOUD),
            ("Rain", ConditionCategory.RAIN),
            ("Thunderstorm", ConditionCategory.THUNDERSTORM),
            ("Snow", ConditionCategory.SNOW),
            ("Mist", ConditionCategory.FOG),
            ("Fog", ConditionCategory.FOG),
        ],
    )
    def test_provider_main_values(self, text: str, expected: ConditionCategory) -> None:
        assert classify_condition(text) == expected

    def test_thunder_wins_over_rain(self) -> None:
        assert classify_condition("thunderstorm with heavy rain") == ConditionCategory.THUNDERSTORM

    def test_case_insensitive(self) -> None:
        assert classify_condition("LIGHT SNOW") == ConditionCategory.SNOW

    def test_unknown_defaults_to_clear(self) -> None:
        assert classify_condition("Haze") == ConditionCategory.CLEAR
        assert classify_condition("") == ConditionCategory.CLEAR

    def test_earlier_keyword_wins(self) -> None:
        assert classify_condition("clearing clouds") == ConditionCategory.CLEAR


class TestNormalizeCurrent:
    def test_maps_fields(self) -> None:
        conditions = normalize_current(current_payload())

        assert conditions.name == "Paris"
        assert conditions.category == ConditionCategory.CLOUD
        assert conditions.description == "scattered clouds"
        assert conditions.temperature == 18.5
        assert conditions.humidity == 60
        assert conditions.wind_speed == 3.2
        assert conditions.icon == "03d"

    def test_whole_number_readings_become_floats(self) -> None:
        conditions = normalize_current(current_payload(temp=21, wind_speed=4))

        assert conditions.temperature == 21.0
        assert isinstance(conditions.temperature, float)
        assert isinstance(conditions.wind_speed, float)

    def test_category_comes_from_primary_condition(self) -> None:
        conditions = normalize_current(
            current_payload(main="Thunderstorm", description="thunderstorm with heavy rain")
        )
        assert conditions.category == ConditionCategory.THUNDERSTORM

    @pytest.mark.parametrize("missing", ["name", "weather", "main", "wind"])
    def test_missing_section(self, missing: str) -> None:
        raw = current_payload()
        del raw[missing]

        with pytest.raises(MalformedResponse) as exc:
            normalize_current(raw)
        assert exc.value.kind == ErrorKind.MALFORMED_RESPONSE

    def test_missing_humidity(self) -> None:
        raw = current_payload()
        del raw["main"]["humidity"]

        with pytest.raises(MalformedResponse):
            normalize_current(raw)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"temp": "18.5"},
            {"temp": None},
            {"humidity": 150},
            {"humidity": "60"},
            {"wind_speed": -1.0},
            {"wind_speed": True},
        ],
    )
    def test_wrong_kinds(self, overrides) -> None:
        with pytest.raises(MalformedResponse):
            normalize_current(current_payload(**overrides))

    def test_empty_weather_array(self) -> None:
        raw = current_payload()
        raw["weather"] = []

        with pytest.raises(MalformedResponse):
            normalize_current(raw)

    def test_not_an_object(self) -> None:
        with pytest.raises(MalformedResponse):
            normalize_current(["Paris"])


class TestNormalizeForecast:
    def test_keeps_only_noon_samples(self) -> None:
        raw = forecast_payload([
            forecast_entry("2025-12-14 09:00:00", temp=10.0),
            forecast_entry("2025-12-14 12:00:00", temp=12.0, icon="01d"),
            forecast_entry("2025-12-14 15:00:00", temp=13.0),
            forecast_entry("2025-12-15 12:00:00", temp=14.0, icon="02d"),
            forecast_entry("2025-12-15 21:00:00", temp=8.0),
        ])

        days = normalize_forecast(raw)

        assert days == [
            ForecastDay(timestamp=datetime(2025, 12, 14, 12), icon="01d", temperature=12.0),
            ForecastDay(timestamp=datetime(2025, 12, 15, 12), icon="02d", temperature=14.0),
        ]

    def test_no_noon_samples_is_empty(self) -> None:
        raw = forecast_payload([
            forecast_entry("2025-12-14 09:00:00"),
            forecast_entry("2025-12-14 15:00:00"),
        ])
        assert normalize_forecast(raw) == []

    def test_empty_list_is_empty(self) -> None:
        assert normalize_forecast(forecast_payload([])) == []

    def test_missing_list(self) -> None:
        with pytest.raises(MalformedResponse):
            normalize_forecast({"cod": "200"})

    def test_entry_without_temperature(self) -> None:
        entry = forecast_entry("2025-12-14 12:00:00")
        del entry["main"]["temp"]

        with pytest.raises(MalformedResponse):
            normalize_forecast(forecast_payload([entry]))

    def test_unparseable_timestamp(self) -> None:
        with pytest.raises(MalformedResponse):
            normalize_forecast(forecast_payload([forecast_entry("tomorrow at noon")]))

    def test_display_helpers(self) -> None:
        day = ForecastDay(timestamp=datetime(2025, 12, 15, 12), icon="10d", temperature=14.0)

        assert day.weekday == "Mon"
        assert day.icon_url == "https://openweathermap.org/img/wn/10d@2x.png"
