# notepadzilla/models/settings.py
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..errors import MalformedRecord

FONT_SIZES: Dict[str, str] = {
    "1": "8pt",
    "2": "10pt",
    "3": "12pt",
    "4": "14pt",
    "5": "18pt",
    "6": "24pt",
    "7": "36pt",
}
DEFAULT_FONT_SIZE_PT = "14pt"


class Settings(BaseModel):
    """Editor preferences, stored next to the notes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    dark_mode: bool = False
    font_size: str = Field(default="4", description="Size code 1-7")
    font_family: str = "Arial, sans-serif"

    @property
    def font_size_pt(self) -> str:
        return FONT_SIZES.get(self.font_size, DEFAULT_FONT_SIZE_PT)


def encode_settings(settings: Settings) -> str:
    return settings.model_dump_json(by_alias=True)


def decode_settings(key: str, raw: str) -> Settings:
    try:
        return Settings.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedRecord(key, str(e)) from e
