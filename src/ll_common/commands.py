"""Base for typed command structs validated at the engine boundary."""

from collections.abc import Callable
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, ValidationError

from src.ll_common.errors import AppError, InvalidInputError


class Command(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # field name -> factory for the coded error raised when that field is invalid
    field_errors: ClassVar[dict[str, Callable[[Any], AppError]]] = {}

    @classmethod
    def parse(cls, **data: Any) -> Self:
        """Build the command, turning pydantic's ValidationError into a coded InvalidInputError."""
        try:
            return cls(**data)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else ""
            factory = cls.field_errors.get(field)
            if factory is not None:
                raise factory(data.get(field)) from exc
            raise InvalidInputError(f"{cls.__name__}.{field}: {first['msg']}") from exc
