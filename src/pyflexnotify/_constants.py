"""Internal constants shared across the library."""

BASE_URL = "https://www.reservauto.net"
ROUTING_BASE_URL = "https://routing.openstreetmap.de/routed-foot"
USER_AGENT = "pyflexnotify/1"

AVAILABLE_VEHICLES_ENDPOINT = "/WCF/LSI/LSIBookingServiceV3.svc/GetAvailableVehicles"

EARTH_RADIUS_M = 6_371_000.0

# Descending alert-radius thresholds, in metres.
RADIUS_LADDER: tuple[int, ...] = (
    10000,
    8000,
    6000,
    5000,
    4000,
    3000,
    2000,
    1500,
    1000,
    900,
    800,
    700,
    600,
    500,
    400,
    300,
    200,
)

PUSH_ICON = "static/images/android-chrome-192x192.png"
DESKTOP_ICON = "static/images/favicon-32x32.png"
