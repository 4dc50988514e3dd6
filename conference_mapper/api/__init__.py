"""HTTP surface: conference mapping routes and the dial-in directory."""

from .app import create_app  # noqa: F401
from .phone_list import PhoneNumber, parse_phone_list  # noqa: F401
from .schemas import ConferenceRequest, ConferenceResponse  # noqa: F401
