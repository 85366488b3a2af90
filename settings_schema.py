from typing import Literal

from pydantic import BaseModel, ValidationError


class SettingsSchema(BaseModel):
    language: Literal["en", "de"] = "en"
    default_window: Literal["7", "30", "90", "all"] = "30"


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))


def default_settings() -> dict:
    return SettingsSchema().model_dump()
