import logging
from typing import Any, Protocol, Tuple
from urllib.parse import urlencode

from .config import DEFAULT_CADASTRAL_URL
from .models import (
    PARTIDA_WITHOUT_UNITS,
    AblData,
    Coordinate,
    Failure,
    HorizontalParcel,
    MatrixParcel,
    ParcelShape,
    PropertyUnit,
    Success,
    VerificationOutcome,
    decode_parcel,
    decode_units,
)

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    async def fetch(self, url: str) -> Any: ...


class RecordResolver:
    """Resolves the partida(s) registered at a coordinate.

    A base record is fetched first. Horizontal properties ("propiedad
    horizontal") need a second fetch of the same URL with ``&ph`` appended to
    list their functional units; any other parcel resolves from ``pdamatriz``.
    """

    def __init__(self, fetcher: Fetcher, base_url: str = DEFAULT_CADASTRAL_URL):
        self.fetcher = fetcher
        self.base_url = base_url

    def build_url(self, coord: Coordinate) -> str:
        # The service expects longitude before latitude
        return f"{self.base_url}?{urlencode({'lng': coord.lng, 'lat': coord.lat})}"

    async def _resolve_base(self, coord: Coordinate) -> Tuple[str, ParcelShape]:
        url = self.build_url(coord)
        payload = await self.fetcher.fetch(url)
        return url, decode_parcel(payload)

    async def _fetch_units(self, base_url: str) -> list:
        payload = await self.fetcher.fetch(f"{base_url}&ph")
        return decode_units(payload)

    async def verify(self, coord: Coordinate) -> VerificationOutcome:
        """Check whether a partida exists for the coordinate."""
        logger.info(f"🏢 Verifying property at lat: {coord.lat}, lng: {coord.lng}")
        try:
            url, parcel = await self._resolve_base(coord)

            if isinstance(parcel, HorizontalParcel):
                phs = await self._fetch_units(url)
                if phs:
                    return Success(phs=phs)
                return Failure(message=PARTIDA_WITHOUT_UNITS)

            if isinstance(parcel, MatrixParcel):
                return Success(pdamatriz=parcel.pdamatriz)

            return Failure()
        except Exception as e:
            logger.error(f"Error verifying property at lat: {coord.lat}, lng: {coord.lng}: {e}")
            raise

    async def fetch_data(self, coord: Coordinate) -> AblData:
        """
        Get the partida data for the coordinate.

        Returns:
            The functional units of a horizontal property, the matrix partida
            of a single parcel, or None when there is no record.
        """
        logger.info(f"🏢 Fetching ABL data for lat: {coord.lat}, lng: {coord.lng}")
        try:
            url, parcel = await self._resolve_base(coord)

            if isinstance(parcel, HorizontalParcel):
                phs = await self._fetch_units(url)
                if not phs:
                    return None
                return [PropertyUnit.model_validate(ph) for ph in phs]

            if isinstance(parcel, MatrixParcel):
                return parcel.pdamatriz

            return None
        except Exception as e:
            logger.error(f"Error fetching ABL data at lat: {coord.lat}, lng: {coord.lng}: {e}")
            raise
