"""
Engine configuration.

Module-level constants; network settings can be overridden through the
environment.
"""

import os

# Weather provider
AWC_BASE_URL = os.getenv("FLIGHTWX_AWC_BASE_URL", "https://aviationweather.gov/api/data")
HTTP_TIMEOUT = int(os.getenv("FLIGHTWX_HTTP_TIMEOUT", "15"))
USER_AGENT = os.getenv("FLIGHTWX_USER_AGENT", "flightwx/0.1 (aviation weather decision engine)")

# Geometry
EARTH_RADIUS_M = 6371000.0
METERS_PER_NM = 1852.0

# Unit conversions
HPA_PER_INHG = 33.8639
METERS_PER_SM = 1609.34
STANDARD_ALTIMETER_INHG = 29.92

# Icing
ICING_ANALYSIS_ALTITUDES = [0, 3000, 6000, 9000, 12000, 15000, 18000]
ICING_FORECAST_HOURS = [6, 12, 24]

# Fog
FOG_PROJECTION_HOURS = 24

# Runways
MAX_HOURLY_RUNWAY_PERIODS = 12

# Flight windows
MAX_TAF_WINDOWS = 24
IMMEDIATE_WINDOW_HOURS = 3

# Route
ROUTE_SEGMENT_NM = 10.0

# Altitude recommendation
MIN_RECOMMENDED_ALTITUDE_FT = 3000
DEFAULT_CRUISE_ALTITUDE_FT = 5500
MAX_RECOMMENDED_ALTITUDE_FT = 10000

# Alerts
ALERT_TAF_PERIODS = 6
ALERT_VALIDITY_HOURS = 1
