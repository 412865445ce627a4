"""
Geometries and the Observable Plot marks that draw them.

The set of geometries is open: a name that is not registered here has no
required aesthetics and is drawn with the Observable Plot mark of the same name.
"""

from typing import Any, Callable, Optional

from ggstudio.layout import JSRef

ObservablePlot = JSRef("Plot")

# aesthetic/parameter name -> Observable Plot option name
CHANNELS = {
    "color": "stroke",
    "fill": "fill",
    "alpha": "opacity",
    "size": "strokeWidth",
    "linewidth": "strokeWidth",
    "linetype": "strokeDasharray",
    "group": "z",
    "label": "text",
    "symbol": "symbol",
    "x": "x",
    "y": "y",
    "tooltip": "title",
}


class Geom:
    def __init__(
        self,
        name: str,
        mark: str,
        required: tuple[str, ...] = (),
        channels: Optional[dict[str, str]] = None,
        defaults: Optional[dict[str, Any]] = None,
        transform: Optional[Callable[[dict[str, Any]], Any]] = None,
        parameters: Optional[dict[str, Callable[[Any], dict[str, Any]]]] = None,
        inherit: bool = True,
    ):
        self.name = name
        self.mark = mark
        self.required = required
        self.channels = {**CHANNELS, **(channels or {})}
        self.defaults = defaults or {}
        self.transform = transform
        self.parameters = parameters or {}
        # reference rules take neither data nor aesthetics from the chart
        self.inherit = inherit

    def option_name(self, aesthetic: str) -> str:
        return self.channels.get(aesthetic, aesthetic)

    def __repr__(self) -> str:
        return f"<Geom {self.name} -> Plot.{self.mark}>"


def _smooth_method(method):
    if method != "lm":
        raise ValueError(
            f"smooth only supports method='lm' (linear regression), got {method!r}"
        )
    return {}


def _smooth_se(se):
    return {} if se else {"ci": 0}


def _smooth_level(level):
    return {"ci": level}


def _count_by_x(options):
    return ObservablePlot.groupX({"y": "count"}, options)


GEOMS: dict[str, Geom] = {
    g.name: g
    for g in [
        Geom(
            "point",
            "dot",
            required=("x", "y"),
            channels={"color": "fill", "size": "r", "alpha": "fillOpacity"},
        ),
        Geom("line", "line", required=("x", "y"), defaults={"sort": {"channel": "x"}}),
        Geom("path", "line", required=("x", "y")),
        Geom(
            "ribbon",
            "areaY",
            required=("x", "ymin", "ymax"),
            channels={"ymin": "y1", "ymax": "y2", "alpha": "fillOpacity"},
        ),
        Geom(
            "area",
            "areaY",
            required=("x", "y"),
            channels={"alpha": "fillOpacity"},
        ),
        Geom(
            "col",
            "barY",
            required=("x", "y"),
            channels={"alpha": "fillOpacity"},
        ),
        Geom(
            "bar",
            "barY",
            required=("x",),
            channels={"alpha": "fillOpacity"},
            transform=_count_by_x,
        ),
        Geom("text", "text", required=("x", "y", "label"), channels={"color": "fill"}),
        Geom(
            "smooth",
            "linearRegressionY",
            required=("x", "y"),
            parameters={"method": _smooth_method, "se": _smooth_se, "level": _smooth_level},
        ),
        Geom(
            "hline",
            "ruleY",
            required=("yintercept",),
            channels={"yintercept": "y"},
            inherit=False,
        ),
        Geom(
            "vline",
            "ruleX",
            required=("xintercept",),
            channels={"xintercept": "x"},
            inherit=False,
        ),
    ]
}


def get_geom(name: str) -> Geom:
    """The registered geometry called `name`, or a pass-through to Plot.<name>."""
    if name in GEOMS:
        return GEOMS[name]
    return Geom(name, name)


def required_aesthetics(name: str) -> tuple[str, ...]:
    return GEOMS[name].required if name in GEOMS else ()


def inherits_context(name: str) -> bool:
    return GEOMS[name].inherit if name in GEOMS else True

