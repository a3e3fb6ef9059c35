from typing import Optional

from sqlalchemy import types as sql_types

from ..uri import Uri


class InvalidUriColumnValue(TypeError):
    pass


class URI(sql_types.TypeDecorator):
    """
    Uri type for reading/writing to the ORM.

    Stored as text, an optional length switches the column to a VARCHAR of that length.
    """
    impl = sql_types.Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        length = getattr(self.impl, "length", None)
        if length is not None:
            return dialect.type_descriptor(sql_types.String(length))
        return dialect.type_descriptor(sql_types.Text())

    @property
    def python_type(self):
        return Uri

    def process_bind_param(self, value: Optional[Uri], dialect) -> Optional[str]:
        if value is None:
            return value
        if isinstance(value, Uri):
            return str(value)
        raise InvalidUriColumnValue(
            f"Could not convert {type(value).__name__} value {value!r} to a URI column value, expected None or Uri"
        )

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Uri]:
        if not value:
            return None
        if isinstance(value, Uri):
            return value
        return Uri(value)

    def process_literal_param(self, value, dialect) -> Optional[str]:
        return self.process_bind_param(value, dialect)
