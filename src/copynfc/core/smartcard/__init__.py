from copynfc.core.smartcard.logging import PROTOCOL, TRACE
from copynfc.core.smartcard.types import APDU, CardError, Response

__all__ = ["APDU", "CardError", "PROTOCOL", "Response", "TRACE"]
