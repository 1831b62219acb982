import enum
import typing
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Enum, Float, Integer, Numeric, String, Uuid


mapping = {
    int: Integer,
    str: String(255),
    bool: Boolean,
    uuid.UUID: Uuid,
    float: Float,
    Decimal: Numeric,
    datetime: DateTime,
    date: Date,
}


def convert(arg: typing.Type) -> typing.Any:
    try:
        return mapping[arg]
    except KeyError:
        if isinstance(arg, type) and issubclass(arg, enum.Enum):
            return Enum(arg)
        raise TypeError(f"Unsupported type - {arg}")
