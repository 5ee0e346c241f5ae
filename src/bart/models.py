"""Pydantic models for the BART real-time ETD response (root.station[].etd[].estimate[])."""
from pydantic import BaseModel, ConfigDict, Field, field_validator

LEAVING = "Leaving"


def parse_minutes(value: str | int) -> int:
    """BART minutes field: "Leaving" means 0, otherwise a non-negative integer string."""
    if isinstance(value, int) and not isinstance(value, bool):
        minutes = value
    else:
        text = str(value).strip()
        if text == LEAVING:
            return 0
        minutes = int(text)
    if minutes < 0:
        raise ValueError(f"negative minutes: {value!r}")
    return minutes


class Estimate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    minutes: int
    color: str
    platform: str | None = None
    direction: str | None = None
    length: str | None = None
    hexcolor: str | None = None
    bikeflag: str | None = None
    delay: str | None = None

    @field_validator("minutes", mode="before")
    @classmethod
    def leaving_is_zero(cls, v):
        return parse_minutes(v)


class Etd(BaseModel):
    model_config = ConfigDict(extra="ignore")

    destination: str
    abbreviation: str | None = None
    limited: str | None = None
    estimate: list[Estimate] = []


class Station(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    abbr: str
    # Omitted when nothing is departing (late night)
    etd: list[Etd] = []


class EtdRoot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    date: str | None = None
    time: str | None = None
    station: list[Station] = []
    message: str | dict | None = None


class EtdResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    payload: EtdRoot = Field(alias="root")
