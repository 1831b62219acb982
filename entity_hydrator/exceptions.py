import typing


class HydrationError(Exception):
    pass


class UnknownTypeError(HydrationError, LookupError):
    def __init__(self, entity_type: typing.Type) -> None:
        super().__init__(f"No descriptor registered for {entity_type!r}")
        self.entity_type = entity_type


class MissingIdentifierFieldError(HydrationError, TypeError):
    def __init__(self, entity_type: typing.Type, field_name: typing.Optional[str] = None) -> None:
        where = f" (referenced by field {field_name!r})" if field_name else ""
        super().__init__(f"{entity_type!r} has no identifier field{where}")
        self.entity_type = entity_type
        self.field_name = field_name


class TypeMismatchError(HydrationError, TypeError):
    def __init__(self, field_name: str, expected_type: typing.Type, value: typing.Any) -> None:
        super().__init__(f"Can not coerce {value!r} to {expected_type!r} for field {field_name!r}")
        self.field_name = field_name
        self.expected_type = expected_type
        self.value = value


class EntityNotFoundError(HydrationError, LookupError):
    def __init__(self, entity_type: typing.Type, identity: typing.Any) -> None:
        super().__init__(f"{entity_type.__name__} with identity {identity!r} does not exist")
        self.entity_type = entity_type
        self.identity = identity


class MalformedPayloadError(HydrationError, ValueError):
    pass
