"""
Aesthetic mappings.

A mapping assigns each aesthetic (x, y, color, ymin, ...) one of three slot states:

- absent: the key is not in the mapping, so the value is inherited from the chart context
- suppressed: the key maps to `SUPPRESS`, so it is never inherited
- set: the key maps to a field name (str) or a `Constant`
"""

from types import MappingProxyType
from typing import Any, Mapping, TypeAlias, Union


class _Suppress:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SUPPRESS"

    def __reduce__(self):
        return (_Suppress, ())


SUPPRESS = _Suppress()


class Constant:
    """A literal aesthetic value, never looked up as a field name."""

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Constant) and other.value == self.value

    def __hash__(self) -> int:
        return hash(("Constant", repr(self.value)))

    def __repr__(self) -> str:
        return f"constant({self.value!r})"


def constant(value: Any) -> Constant:
    """
    Marks `value` as a literal, eg. aes(color=constant("fit")) gives every row the
    same color key (which still appears in the legend), while aes(color="fit") would
    look up a column called "fit".
    """
    return value if isinstance(value, Constant) else Constant(value)


Slot: TypeAlias = Union[str, Constant, _Suppress]
Aes: TypeAlias = Mapping[str, Slot]

ALIASES = {"colour": "color", "shape": "symbol"}


def normalize_name(name: str) -> str:
    return ALIASES.get(name, name)


def check_slot(name: str, value: Any) -> Slot:
    if value is None:
        raise ValueError(
            f"Aesthetic '{name}' is None; use SUPPRESS to stop it being inherited"
        )
    if isinstance(value, (str, Constant, _Suppress)):
        return value
    # bare numbers, booleans etc. can only be literals
    return Constant(value)


def aes(mapping: Mapping[str, Any] | None = None, **kwargs: Any) -> Aes:
    """
    Build an immutable aesthetic mapping.

    Args:
        mapping: optional dict of aesthetic -> slot, merged with kwargs.
        **kwargs: aesthetic -> field name, constant(...) or SUPPRESS.

    Returns:
        A read-only mapping with normalized aesthetic names.
    """
    merged = {**(mapping or {}), **kwargs}
    result: dict[str, Slot] = {}
    given: dict[str, str] = {}
    for k, v in merged.items():
        name = normalize_name(k)
        if name in result:
            raise ValueError(
                f"Aesthetic '{name}' is given twice, as '{given[name]}' and '{k}'"
            )
        result[name] = check_slot(k, v)
        given[name] = k
    return MappingProxyType(result)


EMPTY: Aes = MappingProxyType({})


def as_aes(mapping: Any) -> Aes:
    if mapping is None:
        return EMPTY
    if isinstance(mapping, Mapping):
        return aes(mapping)
    raise TypeError(f"Expected a mapping of aesthetics, got {type(mapping).__name__}")


def merge(base: Aes, override: Aes) -> Aes:
    """
    Context mapping overridden key-by-key by a layer mapping.
    Keys the layer marks SUPPRESS are dropped from the result.
    """
    merged = {**base, **override}
    return MappingProxyType(
        {k: v for k, v in merged.items() if not isinstance(v, _Suppress)}
    )


def fields(mapping: Aes) -> dict[str, str]:
    """The aesthetics in `mapping` that reference a data field."""
    return {k: v for k, v in mapping.items() if isinstance(v, str)}
