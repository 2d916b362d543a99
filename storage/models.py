"""University record model."""
from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class University(BaseModel):
    """
    A single university record.

    Accepts the dataset's hyphen/underscore keys ("state-province", "web_pages",
    "alpha_two_code") as well as the camelCase names used in API responses.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    country: str = Field(min_length=1)
    state_province: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("state_province", "state-province", "stateProvince"),
        serialization_alias="stateProvince",
    )
    domains: List[str] = Field(default_factory=list)
    web_pages: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("web_pages", "webPages"),
        serialization_alias="webPages",
    )
    alpha_two_code: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("alpha_two_code", "alphaTwoCode"),
        serialization_alias="alphaTwoCode",
    )

    @field_validator("state_province", "alpha_two_code", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("domains", "web_pages", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_properties(self) -> Dict[str, Any]:
        """Node properties for the store; absent optionals are left out."""
        return self.model_dump(exclude_none=True)
