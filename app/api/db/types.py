from enum import Enum
from typing import Type

from sqlalchemy import Column
from sqlalchemy import Enum as SAEnum


def enum_column(enum_cls: Type[Enum], name: str, **kwargs) -> Column:
    """
    Build a column that stores an Enum by its literal value.

    SQLAlchemy persists member names by default; the API contract is the
    value ("InProgress", not "IN_PROGRESS"), so values are stored instead and
    unknown strings are refused at bind time.
    """
    return Column(
        SAEnum(
            enum_cls,
            name=name,
            native_enum=False,
            length=20,
            validate_strings=True,
            values_callable=lambda members: [member.value for member in members],
        ),
        **kwargs,
    )
