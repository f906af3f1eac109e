from bson import ObjectId
from pydantic_core import core_schema

class PyObjectId(ObjectId):
    """ObjectId that pydantic can validate from str and serialize back to str in JSON."""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return core_schema.no_info_plain_validator_function(
            cls.validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str, when_used="json"),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, _core_schema, handler):
        return {"type": "string", "examples": ["6650c0ffee0ddba11ad0babe"]}

    @classmethod
    def validate(cls, value):
        if isinstance(value, ObjectId):
            return cls(value)
        if isinstance(value, str) and ObjectId.is_valid(value):
            return cls(value)
        raise ValueError(f"Invalid ObjectId: {value!r}")
