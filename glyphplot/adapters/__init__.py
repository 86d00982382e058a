from .normalize import SetColumn, coerce_numeric_column, coerce_set_column, is_set_column

__all__ = ["SetColumn", "coerce_numeric_column", "coerce_set_column", "is_set_column"]
