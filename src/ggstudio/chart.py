from typing import Any, Optional, Sequence

from ggstudio.aes import Aes, as_aes
from ggstudio.layer import ChartContext, Layer, ResolvedLayer, compose
from ggstudio.layout import LayoutItem
from ggstudio.plot_spec import PlotSpec


def flatten_parts(parts: Sequence[Any]) -> list[Any]:
    return [
        item
        for part in parts
        for item in (flatten_parts(part) if isinstance(part, (list, tuple)) else [part])
    ]


class Chart(LayoutItem):
    """
    A chart in the grammar of graphics: a context (default data and aesthetics)
    plus an ordered list of layers and plot options.

    Charts are immutable and compose with `+`:

        chart(tips, aes(x="total_bill", y="tip")) + point(aes(color="sex"), size=3)

    Layers are drawn in the order they were added. Dicts (eg. title("Tips"))
    are merged into the plot options.
    """

    def __init__(
        self,
        data: Any = None,
        mapping: Optional[Aes] = None,
        *parts: Any,
    ) -> None:
        super().__init__()
        self.context = ChartContext(data=data, mapping=as_aes(mapping))
        self.layers: tuple[Layer, ...] = ()
        self.options: tuple[dict[str, Any], ...] = ()
        self._extend(parts)

    def _extend(self, parts: Sequence[Any]) -> None:
        layers = list(self.layers)
        options = list(self.options)
        for part in flatten_parts(parts):
            if isinstance(part, Layer):
                layers.append(part)
            elif isinstance(part, dict):
                options.append(dict(part))
            else:
                raise TypeError(
                    f"Can only add layers or option dicts to a chart, got {type(part).__name__}"
                )
        self.layers = tuple(layers)
        self.options = tuple(options)

    def __add__(self, *to_add: Any) -> "Chart":
        new_chart = Chart.__new__(Chart)
        LayoutItem.__init__(new_chart)
        new_chart.context = self.context
        new_chart.layers = self.layers
        new_chart.options = self.options
        new_chart._extend(to_add)
        return new_chart

    def resolved(self) -> tuple[ResolvedLayer, ...]:
        """Resolve every layer against this chart's context, in drawing order."""
        return compose(self.context, self.layers)

    def plot_spec(self) -> PlotSpec:
        return PlotSpec.from_layers(self.resolved(), *self.options)

    def for_json(self) -> Any:
        return self.plot_spec().for_json()

    def __repr__(self) -> str:
        geoms = ", ".join(str(layer.geometry) for layer in self.layers)
        return f"<Chart mapping={dict(self.context.mapping)} layers=[{geoms}]>"


def chart(data: Any = None, mapping: Optional[Aes] = None, *parts: Any) -> Chart:
    """Start a chart with default data and aesthetics, eg. chart(tips, aes(x="total_bill"))."""
    return Chart(data, mapping, *parts)
