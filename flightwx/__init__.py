"""
flightwx - aviation weather decision engine.

Turns decoded METAR/TAF/winds-aloft data into flight-rules categories,
runway rankings, icing and fog risk, scored departure windows, route
hazard roll-ups and a headline flight recommendation.
"""

__version__ = "0.1.0"
