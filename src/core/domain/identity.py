"""
Identity — Идентификаторы участников продажи

Участники (покупатели, бенефициары, оператор, активы) идентифицируются
строками. Нулевой идентификатор (пустая строка или ZERO_ADDRESS)
считается отсутствующим и запрещён везде, где идентификатор обязателен.
"""

from typing import Final, Optional

# Нулевой адрес (аналог address(0))
ZERO_ADDRESS: Final[str] = "0x" + "0" * 40


def is_null_identity(identity: Optional[str]) -> bool:
    """
    Проверка, что идентификатор отсутствует.

    Examples:
        >>> is_null_identity(None)
        True
        >>> is_null_identity("0x" + "0" * 40)
        True
        >>> is_null_identity("alice")
        False
    """
    if identity is None:
        return True

    value = identity.strip()
    return value == "" or value.lower() == ZERO_ADDRESS


def validate_identity(identity: Optional[str], name: str) -> str:
    """
    Валидация обязательного идентификатора.

    Raises:
        ValueError: Если идентификатор нулевой
    """
    if is_null_identity(identity):
        raise ValueError(f"{name} must be a non-null identity, got {identity!r}")
    return identity
