"""Configuration constants for the Ruckus Unleashed web-admin client."""

import os

DEFAULT_HOST = os.environ.get("UNLEASHED_HOST", "unleashed.local")
# Credentials can also be supplied via UNLEASHED_USER / UNLEASHED_PASSWORD env vars
DEFAULT_USER = os.environ.get("UNLEASHED_USER", "admin")
DEFAULT_PASSWORD = os.environ.get("UNLEASHED_PASSWORD", "")

LOGIN_PATH   = "/admin/login.jsp"
CONF_PATH    = "/admin/_conf.jsp"      # configuration envelope (getconf/setconf/…obj)
CMDSTAT_PATH = "/admin/_cmdstat.jsp"   # live statistics and device commands

# The controller expects the form content type even for raw XML bodies.
XML_CONTENT_TYPE = "application/x-www-form-urlencoded"
CSRF_HEADER      = "X-CSRF-Token"
# Label of the login form's submit button; the space is a NO-BREAK SPACE.
LOGIN_BUTTON     = "Log\u00a0in"

REQUEST_TIMEOUT    = 15          # seconds per HTTP request unless the caller overrides
MAX_REDIRECTS      = 10          # master-AP hand-offs followed before giving up
MAX_RESPONSE_BYTES = 10 << 20    # envelope bodies larger than this are rejected
