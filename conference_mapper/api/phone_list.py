"""Static dial-in phone number directory."""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..mapping.errors import ConfigurationError


class PhoneNumber(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    country_code: str = Field(alias="countryCode")
    toll_free: bool = Field(default=False, alias="tollFree")
    formatted_number: str = Field(alias="formattedNumber")


def parse_phone_list(text: str | None) -> list[PhoneNumber]:
    """
    Parse the JSON phone list passed on the command line or in the environment.

    An absent or blank value yields an empty directory.

    Raises
    ------
    ConfigurationError
        If the text is not a JSON array of phone number objects.
    """
    if text is None or not text.strip():
        return []
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid phone list: {exc}") from exc
    if not isinstance(payload, list):
        raise ConfigurationError("Invalid phone list: expected a JSON array")
    try:
        return [PhoneNumber.model_validate(entry) for entry in payload]
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid phone list: {exc}") from exc
