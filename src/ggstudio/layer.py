"""
Layers and their resolution against a chart context.

A chart is a context (default data and aesthetic mapping) plus an ordered
sequence of layers. Each layer is resolved into the data, mapping, geometry and
parameters that a renderer needs, with layer entries taking precedence over the
context key by key.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from ggstudio import aes as aesthetics
from ggstudio.aes import Aes
from ggstudio.data import field_names
from ggstudio.geoms import inherits_context, required_aesthetics


class LayerError(ValueError):
    """A layer could not be resolved against its chart context."""


class EmptyGeometryError(LayerError):
    def __init__(self, index: Optional[int] = None):
        self.index = index
        where = "" if index is None else f" (layer {index})"
        super().__init__(f"Layer has no geometry{where}")


class UnresolvedAestheticError(LayerError):
    def __init__(self, geometry: str, missing: Iterable[str]):
        self.geometry = geometry
        self.missing = tuple(missing)
        super().__init__(
            f"Geometry '{geometry}' requires aesthetic(s) {', '.join(self.missing)}, "
            "which are set neither on the layer nor on the chart"
        )


class UnknownFieldError(LayerError):
    def __init__(self, aesthetic: str, field: str, available: Iterable[str]):
        self.aesthetic = aesthetic
        self.field = field
        self.available = tuple(sorted(available))
        super().__init__(
            f"Aesthetic '{aesthetic}' refers to field '{field}', which is not in the data "
            f"(available: {', '.join(self.available)}). "
            "Use constant(...) for a literal value."
        )


def _freeze(options: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(options or {}))


@dataclass(frozen=True)
class ChartContext:
    """Default data and aesthetic mapping shared by every layer of a chart."""

    data: Any = None
    mapping: Aes = field(default_factory=lambda: aesthetics.EMPTY)

    def __post_init__(self):
        object.__setattr__(self, "mapping", aesthetics.as_aes(self.mapping))


@dataclass(frozen=True)
class Layer:
    """
    One visual contribution to a chart.

    Args:
        geometry: how the layer is drawn, eg. "point", "line", "ribbon".
        mapping: aesthetics for this layer. Keys left out are inherited from the
            chart context; keys set to SUPPRESS are not.
        data: a data table for this layer, or None to use the chart's data.
        parameters: options not tied to data, eg. {"size": 3, "color": "steelblue"}.
    """

    geometry: Optional[str] = None
    mapping: Aes = field(default_factory=lambda: aesthetics.EMPTY)
    data: Any = None
    parameters: Mapping[str, Any] = field(default_factory=lambda: _freeze(None))

    def __post_init__(self):
        object.__setattr__(self, "mapping", aesthetics.as_aes(self.mapping))
        object.__setattr__(self, "parameters", _freeze(self.parameters))


@dataclass(frozen=True)
class ResolvedLayer:
    """A layer after inheritance, ready to be handed to a renderer."""

    data: Any
    mapping: Aes
    geometry: str
    parameters: Mapping[str, Any]


def has_geometry(geometry: Any) -> bool:
    return isinstance(geometry, str) and geometry.strip() != ""


def check_fields(mapping: Aes, data: Any) -> None:
    if data is None:
        return
    available = field_names(data)
    for aesthetic, name in aesthetics.fields(mapping).items():
        if name not in available:
            raise UnknownFieldError(aesthetic, name, available)


def resolve(context: ChartContext, layer: Layer) -> ResolvedLayer:
    """
    Resolve `layer` against `context`.

    The effective data is the layer's data if it has any, else the context's.
    The effective mapping is the context mapping overridden by the layer mapping,
    minus any aesthetics the layer suppresses.
    Geometries that do not inherit (reference rules) ignore the context.

    Raises:
        EmptyGeometryError: the layer has no geometry.
        UnresolvedAestheticError: an aesthetic the geometry requires is missing.
        UnknownFieldError: an aesthetic names a field that the data lacks.
    """
    if not has_geometry(layer.geometry):
        raise EmptyGeometryError()

    if not inherits_context(layer.geometry):
        context = ChartContext()

    data = layer.data if layer.data is not None else context.data
    mapping = aesthetics.merge(context.mapping, layer.mapping)

    missing = [
        name
        for name in required_aesthetics(layer.geometry)
        if name not in mapping and name not in layer.parameters
    ]
    if missing:
        raise UnresolvedAestheticError(layer.geometry, missing)

    check_fields(mapping, data)

    return ResolvedLayer(
        data=data,
        mapping=mapping,
        geometry=layer.geometry,
        parameters=layer.parameters,
    )


def compose(
    context: ChartContext, layers: Iterable[Layer]
) -> tuple[ResolvedLayer, ...]:
    """
    Resolve every layer in drawing order (later layers are drawn on top).

    Either every layer resolves or the first error is raised; there is no
    partial result.
    """
    resolved = []
    for i, layer in enumerate(layers):
        if not has_geometry(layer.geometry):
            raise EmptyGeometryError(i)
        resolved.append(resolve(context, layer))
    return tuple(resolved)
