from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Backend speaks camelCase; Python code uses snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_defaults(cls, data):
        """Backend DTOs send null for unset fields; fall back to the declared default."""
        if not isinstance(data, dict):
            return data
        data = cls._from_backend(dict(data))
        for name, info in cls.model_fields.items():
            if info.is_required():
                continue
            for key in (name, to_camel(name)):
                if key in data and data[key] is None:
                    default = info.get_default(call_default_factory=True)
                    if default is not None:
                        data[key] = default
        return data

    @classmethod
    def _from_backend(cls, data: dict) -> dict:
        return data

    def to_wire(self, **kwargs) -> dict:
        return self.model_dump(by_alias=True, mode="json", **kwargs)
