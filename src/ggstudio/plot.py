# %%
# ruff: noqa: F401
from typing import Any, Optional

from ggstudio.aes import SUPPRESS, aes, constant
from ggstudio.chart import Chart, chart
from ggstudio.layer import (
    ChartContext,
    EmptyGeometryError,
    Layer,
    ResolvedLayer,
    UnknownFieldError,
    UnresolvedAestheticError,
    compose,
    resolve,
)
from ggstudio.layout import Column, Hiccup, JSRef, Row, js, ref
from ggstudio.plot_spec import PlotSpec, constantly
from ggstudio.toggle import Solution, ToggleRegistry, Visibility, solution
from ggstudio.util import configure

# This module is the author-facing API: build charts in the grammar of graphics
# and render them with Observable Plot inside an AnyWidget (or as static HTML).
#
# See:
# - https://observablehq.com/plot/
# - https://github.com/manzt/anywidget
#
# Key features:
# - A chart is default data + aesthetics, plus layers that each pick a geometry
# - Layers inherit the chart's data and aesthetics unless they override them,
#   and can opt out of any inherited aesthetic with SUPPRESS
# - Compose with + to add layers and options; charts are immutable
# - Reveal exercise solutions with show/hide toggles

html = Hiccup
md = JSRef("md")


def layer(
    geometry: str,
    mapping: Optional[dict[str, Any]] = None,
    data: Any = None,
    **parameters: Any,
) -> Layer:
    """
    A layer drawn with any geometry, eg. layer("tickX", aes(x="tip")).

    Unregistered geometry names are passed to the Observable Plot mark of the same name.
    """
    return Layer(geometry=geometry, mapping=mapping, data=data, parameters=parameters)


def point(mapping=None, data=None, **parameters) -> Layer:
    """
    Scatterplot points. Requires x and y.

    Parameters such as size, color and alpha apply to every point, eg.
    point(aes(color="sex"), size=3).
    """
    return layer("point", mapping, data, **parameters)


def line(mapping=None, data=None, **parameters) -> Layer:
    """A line through the data, sorted by x. Requires x and y."""
    return layer("line", mapping, data, **parameters)


def path(mapping=None, data=None, **parameters) -> Layer:
    """A line through the data in row order. Requires x and y."""
    return layer("path", mapping, data, **parameters)


def ribbon(mapping=None, data=None, **parameters) -> Layer:
    """
    A band between ymin and ymax along x, eg. a confidence interval around a fit.
    Requires x, ymin and ymax.
    """
    return layer("ribbon", mapping, data, **parameters)


def area(mapping=None, data=None, **parameters) -> Layer:
    """The area between zero and y. Requires x and y."""
    return layer("area", mapping, data, **parameters)


def col(mapping=None, data=None, **parameters) -> Layer:
    """Bars with heights taken from y. Requires x and y."""
    return layer("col", mapping, data, **parameters)


def bar(mapping=None, data=None, **parameters) -> Layer:
    """Bars with heights counting the rows at each x. Requires x."""
    return layer("bar", mapping, data, **parameters)


def text(mapping=None, data=None, **parameters) -> Layer:
    """Text labels at x, y. Requires x, y and label."""
    return layer("text", mapping, data, **parameters)


def smooth(mapping=None, data=None, method="lm", se=True, **parameters) -> Layer:
    """
    A linear regression line with a confidence band, computed by the renderer.

    Args:
        method: only "lm" is supported.
        se: draw the confidence band.
        level: confidence level of the band, eg. level=0.9.
    """
    return layer("smooth", mapping, data, method=method, se=se, **parameters)


def hline(mapping=None, data=None, **parameters) -> Layer:
    """A full-width horizontal rule, eg. hline(yintercept=0). Ignores the chart's data and aesthetics."""
    return layer("hline", mapping, data, **parameters)


def vline(mapping=None, data=None, **parameters) -> Layer:
    """A full-height vertical rule, eg. vline(xintercept=20). Ignores the chart's data and aesthetics."""
    return layer("vline", mapping, data, **parameters)


# The following convenience dicts can be added directly to a Chart to declare plot options.


def grid(x=True, y=True):
    return {"grid": x and y} if x == y else {"x": {"grid": x}, "y": {"grid": y}}


def title(title):
    return {"title": title}


def subtitle(subtitle):
    return {"subtitle": subtitle}


def caption(caption):
    return {"caption": caption}


def width(width):
    return {"width": width}


def height(height):
    return {"height": height}


def size(size, height=None):
    return {"width": size, "height": height or size}


def labs(x=None, y=None, color=None, fill=None, title=None):
    """Axis, legend and plot titles, eg. labs(x="Total bill ($)", y="Tip ($)")."""
    options: dict[str, Any] = {}
    for scale, label in [("x", x), ("y", y), ("color", color or fill)]:
        if label is not None:
            options[scale] = {"label": label}
    if title is not None:
        options["title"] = title
    return options


def colorLegend():
    return {"color": {"legend": True}}


color_legend = colorLegend


def colorScheme(name):
    # See https://observablehq.com/plot/features/scales#color-scales
    return {"color": {"scheme": name}}


color_scheme = colorScheme


def margin(*args):
    """
    Set margin values for a plot using CSS-style margin shorthand.

    Supported arities:
        margin(all)
        margin(vertical, horizontal)
        margin(top, horizontal, bottom)
        margin(top, right, bottom, left)

    """
    if len(args) == 1:
        return {"margin": args[0]}
    elif len(args) == 2:
        return {
            "marginTop": args[0],
            "marginBottom": args[0],
            "marginLeft": args[1],
            "marginRight": args[1],
        }
    elif len(args) == 3:
        return {
            "marginTop": args[0],
            "marginLeft": args[1],
            "marginRight": args[1],
            "marginBottom": args[2],
        }
    elif len(args) == 4:
        return {
            "marginTop": args[0],
            "marginRight": args[1],
            "marginBottom": args[2],
            "marginLeft": args[3],
        }
    else:
        raise ValueError(f"Invalid number of arguments: {len(args)}")
