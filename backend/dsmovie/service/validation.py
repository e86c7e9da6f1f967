from typing import Any, Iterable, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from dsmovie.domain.dto import FieldMessage
from dsmovie.exceptions.service import ValidationException

M = TypeVar("M", bound=BaseModel)

VALUE_ERROR_PREFIX = "Value error, "


def field_messages(errors: Iterable[dict], skip_loc: Iterable[str] = ()) -> List[FieldMessage]:
    """Turn pydantic error dicts into field messages, dropping the "Value error, " prefix."""
    skip_loc = set(skip_loc)
    messages = []
    for error in errors:
        field_name = ".".join(str(part) for part in error["loc"] if part not in skip_loc) or "__root__"
        message = error["msg"]
        if message.startswith(VALUE_ERROR_PREFIX):
            message = message[len(VALUE_ERROR_PREFIX):]
        messages.append(FieldMessage(field_name=field_name, message=message))
    return messages


def validate_input(model_cls: Type[M], data: Any) -> M:
    """Coerce raw input into ``model_cls`` or raise ValidationException with per-field messages."""
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise ValidationException("Invalid data", errors=field_messages(e.errors())) from e
