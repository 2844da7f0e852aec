from typing import Any

from pydantic import AliasGenerator
from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict
from pydantic import ValidatorFunctionWrapHandler
from pydantic import model_validator
from typing_extensions import Self

from scim2_mapper.utils import _normalize_attribute_name
from scim2_mapper.utils import _to_camel


class BaseModel(PydanticBaseModel):
    """Base Model for the pydantic-backed SCIM definitions and messages."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(
            validation_alias=_normalize_attribute_name,
            serialization_alias=_to_camel,
        ),
        validate_assignment=True,
        populate_by_name=True,
        use_attribute_docstrings=True,
        extra="forbid",
    )

    @model_validator(mode="wrap")
    @classmethod
    def normalize_attribute_names(
        cls, value: Any, handler: ValidatorFunctionWrapHandler
    ) -> Self:
        """Normalize payload attribute names.

        :rfc:`RFC7643 §2.1 <7643#section-2.1>` indicate that attribute
        names are case-insensitive, so top-level keys are folded before
        being matched against the field aliases. Nested values are left
        to the nested models.
        """
        if isinstance(value, dict):
            value = {
                _normalize_attribute_name(key) if isinstance(key, str) else key: val
                for key, val in value.items()
            }

        obj = handler(value)
        assert isinstance(obj, cls)
        return obj

    def model_dump(self, *args: Any, **kwargs: Any) -> dict[str, Any]:
        """Dump the model as a SCIM payload.

        Unless told otherwise, values are dumped in JSON mode, by alias,
        and :data:`None` values are left out.
        """
        kwargs.setdefault("by_alias", True)
        kwargs.setdefault("exclude_none", True)
        kwargs.setdefault("mode", "json")
        return super().model_dump(*args, **kwargs)

    def model_dump_json(self, *args: Any, **kwargs: Any) -> str:
        kwargs.setdefault("by_alias", True)
        kwargs.setdefault("exclude_none", True)
        return super().model_dump_json(*args, **kwargs)
