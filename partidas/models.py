from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

PARTIDA_EXISTS = "La partida existe"
PARTIDA_MISSING = "La partida no existe"
PARTIDA_WITHOUT_UNITS = "La partida no existe (sin unidades funcionales)"


class Coordinate(BaseModel):
    """A point as received from the caller.

    Values are not range-checked: they are forwarded to the cadastral service
    as-is and any problem surfaces as its error.
    """

    lat: Union[int, float, str]
    lng: Union[int, float, str]


class PropertyUnit(BaseModel):
    """One functional unit of a horizontal property."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    pdahorizontal: Optional[str] = None
    piso: Optional[str] = None
    dpto: Optional[str] = None


# Parcel shapes decoded from the base record


class HorizontalParcel(BaseModel):
    kind: Literal["horizontal"] = "horizontal"


class MatrixParcel(BaseModel):
    kind: Literal["matrix"] = "matrix"
    pdamatriz: Any


class MissingParcel(BaseModel):
    kind: Literal["missing"] = "missing"


ParcelShape = Union[HorizontalParcel, MatrixParcel, MissingParcel]


def decode_parcel(payload: Any) -> ParcelShape:
    """Classify a raw cadastral record.

    The horizontal-property flag wins over ``pdamatriz`` when both are present.
    Anything that is not a JSON object, or carries neither field, is missing.
    """
    if not isinstance(payload, dict):
        return MissingParcel()
    if payload.get("propiedad_horizontal") == "Si":
        return HorizontalParcel()
    if payload.get("pdamatriz"):
        return MatrixParcel(pdamatriz=payload["pdamatriz"])
    return MissingParcel()


def decode_units(payload: Any) -> List[Dict[str, Any]]:
    """Extract the unit entries of a horizontal-property payload ([] if absent).

    Entries that are not JSON objects carry no unit and are dropped.
    """
    if not isinstance(payload, dict):
        return []
    phs = payload.get("phs")
    if not isinstance(phs, list):
        return []
    return [ph for ph in phs if isinstance(ph, dict)]


# Verification outcomes


class Success(BaseModel):
    status: Literal["success"] = "success"
    message: str = PARTIDA_EXISTS
    phs: Optional[List[Any]] = None
    pdamatriz: Optional[Any] = None

    def as_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": self.status, "message": self.message}
        if self.phs is not None:
            body["phs"] = self.phs
        if self.pdamatriz is not None:
            body["pdamatriz"] = self.pdamatriz
        return body


class Failure(BaseModel):
    status: Literal["error"] = "error"
    message: str = PARTIDA_MISSING

    def as_response(self) -> Dict[str, Any]:
        return {"status": self.status, "message": self.message}


VerificationOutcome = Union[Success, Failure]

# A list of units for horizontal properties, the matrix partida otherwise
AblData = Union[List[PropertyUnit], str, None]


class VerificationRequest(Coordinate):
    pass


class AblDataRequest(Coordinate):
    email: str = Field(..., description="Recipient of the notification")


def dump_abl_data(data: AblData) -> Any:
    """JSON-ready form of resolved ABL data."""
    if isinstance(data, list):
        return [unit.model_dump() for unit in data]
    return data
