HTTP_TIMEOUT = 5

# API ports differ between firmware revisions; probed in this order.
PORT_OPTIONS = (7345, 9000)
API_SCHEME = "https"

DESCRIPTION_PORT = 8008
DESCRIPTION_PATH = "/ssdp/device-desc.xml"

DISCOVER_TIMEOUT = 3
SSDP_TARGET = ("239.255.255.250", 1900)
SSDP_ST = "urn:dial-multiscreen-org:device:dial:1"
SSDP_MX = 3

VENDOR = "VIZIO"

MENU_BASE = "/menu_native"
STATIC = "static"
DYNAMIC = "dynamic"

APP_PAYLOAD_URL = (
    "http://hometest.buddytv.netdna-cdn.com/appservice/app_availability_prod.json"
)
APP_NAME_URL = "http://hometest.buddytv.netdna-cdn.com/appservice/vizio_apps_prod.json"
