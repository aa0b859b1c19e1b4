"""Storage region codes and base-address resolution."""

from __future__ import annotations

from enum import Enum

DEFAULT_BASE_ADDRESS = "https://storage.bunnycdn.com/"
_REGIONAL_BASE_ADDRESS = "https://{code}.storage.bunnycdn.com/"


class StorageRegion(str, Enum):
    """Known primary storage regions and their endpoint codes."""

    FALKENSTEIN = "de"
    LONDON = "uk"
    NEW_YORK = "ny"
    LOS_ANGELES = "la"
    SINGAPORE = "sg"
    STOCKHOLM = "se"
    SAO_PAULO = "br"
    JOHANNESBURG = "jh"
    SYDNEY = "syd"


def resolve_base_address(region: str | StorageRegion = StorageRegion.FALKENSTEIN) -> str:
    """Return the API base address for one region code.

    Falkenstein (``de``) and the empty code use the unprefixed endpoint. Other
    codes are lowercased into the hostname; unknown codes are not rejected and
    only fail once the transport tries to resolve them.
    """
    code = region.value if isinstance(region, StorageRegion) else region
    code = code.strip().lower()
    if code in ("", StorageRegion.FALKENSTEIN.value):
        return DEFAULT_BASE_ADDRESS
    return _REGIONAL_BASE_ADDRESS.format(code=code)
