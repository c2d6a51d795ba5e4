"""Tests for display labels and colors."""

import pytest

from flightwx.advisory import presentation
from flightwx.advisory.common import Priority
from flightwx.advisory.fog import FogRiskLevel
from flightwx.advisory.recommendation import RecommendedFlightType
from flightwx.weather.models import FlightRules


class TestLookup:

    def test_flight_rules(self):
        assert presentation.label(FlightRules.VFR) == "VFR - Visual Flight Rules"
        assert presentation.color(FlightRules.VFR) == presentation.GREEN
        assert presentation.color(FlightRules.LIFR) == presentation.PURPLE

    def test_recommendation(self):
        assert presentation.label(RecommendedFlightType.NOT_RECOMMENDED) == "Flight not recommended"
        assert presentation.color(RecommendedFlightType.NOT_RECOMMENDED) == presentation.RED

    def test_fog(self):
        assert presentation.label(FogRiskLevel.PRESENT) == "Fog present"

    def test_unknown_enum_falls_back(self):
        assert presentation.label(Priority.HIGH) == "High"
        assert presentation.color(Priority.HIGH) == presentation.GRAY

    @pytest.mark.parametrize("enum_class,table", list(presentation._TABLES.items()))
    def test_tables_cover_every_member(self, enum_class, table):
        assert set(table) == set(enum_class)

    def test_colors_are_hex(self):
        for table in presentation._TABLES.values():
            for _, hex_color in table.values():
                assert hex_color.startswith("#") and len(hex_color) == 7
