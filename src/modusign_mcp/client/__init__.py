"""HTTP client for the Modusign API: auth, query encoding, throttle retry."""

from .auth import BasicAuth
from .client import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, ModusignClient, MultipartForm
from .query import build_odata_filter, encode_query_params
from .retry import DEFAULT_THROTTLE, ThrottlePolicy, send_with_throttle

__all__ = [
    "BasicAuth",
    "DEFAULT_THROTTLE",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "ModusignClient",
    "MultipartForm",
    "ThrottlePolicy",
    "build_odata_filter",
    "encode_query_params",
    "send_with_throttle",
]
