from __future__ import annotations

from typing import Callable, Optional, Union

from loguru import logger

from .errors import InputError
from .models import IdPattern

_BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def to_base36(num: int, width: int = 2) -> str:
    if num < 0:
        raise InputError(f"cannot base36-encode a negative number: {num}")
    if num == 0:
        digits = "0"
    else:
        out = []
        while num:
            num, rem = divmod(num, 36)
            out.append(_BASE36_DIGITS[rem])
        digits = "".join(reversed(out))
    return digits.rjust(width, "0")


def _positive_int(cfg: dict, key: str, default: int) -> int:
    raw = cfg.get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError) as e:
        raise InputError(f"pattern_config.{key} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise InputError(f"pattern_config.{key} must be positive, got {value}")
    return value


def _sequential(prefix: str, count: int) -> list[str]:
    return [f"{prefix}{to_base36(i)}" for i in range(count)]


def _grid(prefix: str, count: int, cfg: dict) -> list[str]:
    """
    Walk (section, row, seat) through the configured grid. Once the
    configured sections are full the section index keeps growing instead of
    wrapping, so `sections` only sizes the nominal grid.
    """
    sections = _positive_int(cfg, "sections", 1)
    rows_per_section = _positive_int(cfg, "rows_per_section", 10)
    seats_per_row = _positive_int(cfg, "seats_per_row", 20)
    nominal = sections * rows_per_section * seats_per_row
    if count > nominal:
        logger.debug(f"[PLACE-IDS] grid of {nominal} expanded to {count} identifiers")

    # Row and seat codes are fixed width so the leading section code can grow
    # without two triples ever concatenating to the same string.
    row_width = len(to_base36(rows_per_section - 1))
    seat_width = len(to_base36(seats_per_row - 1))

    out: list[str] = []
    section = row = seat = 0
    for _ in range(count):
        out.append(f"{prefix}{to_base36(section)}{to_base36(row, row_width)}{to_base36(seat, seat_width)}")
        seat += 1
        if seat >= seats_per_row:
            seat = 0
            row += 1
            if row >= rows_per_section:
                row = 0
                section += 1
    return out


def _custom(count: int, cfg: dict) -> list[str]:
    generator: Optional[Callable[[int, dict], str]] = cfg.get("generator")
    if not callable(generator):
        raise InputError("custom pattern requires a callable pattern_config['generator']")
    return [str(generator(i, cfg)) for i in range(count)]


def generate_place_ids(
    prefix: str = "",
    count: int = 100,
    pattern: Union[IdPattern, str] = IdPattern.sequential,
    pattern_config: Optional[dict] = None,
) -> list[str]:
    """
    Produce exactly `count` place identifiers.

    sequential and grid identifiers are unique by construction; custom ones
    are whatever the supplied generator returns.
    """
    if count < 0:
        raise InputError(f"count must not be negative, got {count}")
    try:
        pattern = IdPattern(pattern)
    except ValueError as e:
        raise InputError(f"unknown place id pattern: {pattern!r}") from e
    cfg = dict(pattern_config or {})

    logger.debug(f"[PLACE-IDS] count={count} pattern={pattern.value} prefix={prefix!r}")
    if count == 0:
        return []

    if pattern == IdPattern.sequential:
        return _sequential(prefix, count)
    if pattern == IdPattern.grid:
        return _grid(prefix, count, cfg)
    if pattern == IdPattern.custom:
        return _custom(count, cfg)
    raise InputError(f"unhandled place id pattern: {pattern.value}")
