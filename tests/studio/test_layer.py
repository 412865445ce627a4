# %%
import numpy as np
import pytest

from ggstudio.aes import SUPPRESS, Constant, aes, constant
from ggstudio.datasets import tips
from ggstudio.layer import (
    ChartContext,
    EmptyGeometryError,
    Layer,
    LayerError,
    ResolvedLayer,
    UnknownFieldError,
    UnresolvedAestheticError,
    compose,
    resolve,
)

TIPS = tips()
FIT = [
    {"total_bill": 10.0, "fit": 1.9, "lwr": 1.5, "upr": 2.3},
    {"total_bill": 20.0, "fit": 3.0, "lwr": 2.7, "upr": 3.3},
    {"total_bill": 30.0, "fit": 4.1, "lwr": 3.6, "upr": 4.6},
]


def tips_context(**mapping):
    return ChartContext(data=TIPS, mapping=aes(x="total_bill", y="tip", **mapping))


def test_resolve_point_example():
    layer = Layer("point", mapping=aes(color="sex"), parameters={"size": 3})
    resolved = resolve(tips_context(), layer)
    assert isinstance(resolved, ResolvedLayer)
    assert resolved.data is TIPS
    assert dict(resolved.mapping) == {"x": "total_bill", "y": "tip", "color": "sex"}
    assert resolved.geometry == "point"
    assert dict(resolved.parameters) == {"size": 3}


def test_resolve_is_deterministic():
    context = tips_context()
    layer = Layer("point", mapping=aes(color="sex"), parameters={"size": 3})
    first = resolve(context, layer)
    second = resolve(context, layer)
    assert first == second
    assert repr(first) == repr(second)
    assert list(first.mapping.items()) == list(second.mapping.items())


def test_layer_mapping_takes_precedence():
    context = tips_context(color="sex")
    resolved = resolve(context, Layer("point", mapping=aes(color="smoker", y="size")))
    assert resolved.mapping["color"] == "smoker"
    assert resolved.mapping["y"] == "size"
    assert resolved.mapping["x"] == "total_bill"


def test_omitted_aesthetics_inherit_from_context():
    context = tips_context(color="sex")
    resolved = resolve(context, Layer("line"))
    assert dict(resolved.mapping) == dict(context.mapping)

    resolved = resolve(tips_context(), Layer("line"))
    assert "color" not in resolved.mapping


def test_suppressed_aesthetic_is_not_inherited():
    context = tips_context(color="sex")
    resolved = resolve(context, Layer("line", mapping=aes(color=SUPPRESS)))
    assert "color" not in resolved.mapping
    assert resolved.mapping["x"] == "total_bill"


def test_suppression_is_per_layer():
    context = tips_context(color="sex")
    suppressed, inherited = compose(
        context,
        [Layer("line", mapping=aes(color=SUPPRESS)), Layer("point")],
    )
    assert "color" not in suppressed.mapping
    assert inherited.mapping["color"] == "sex"


def test_layer_data_overrides_context_data():
    context = ChartContext(data=TIPS, mapping=aes(x="total_bill"))
    ribbon = Layer("ribbon", mapping=aes(ymin="lwr", ymax="upr"), data=FIT)
    resolved = resolve(context, ribbon)
    assert resolved.data is FIT
    assert dict(resolved.mapping) == {"x": "total_bill", "ymin": "lwr", "ymax": "upr"}


def test_ribbon_without_ymin_is_unresolved():
    context = ChartContext(data=TIPS, mapping=aes(x="total_bill"))
    with pytest.raises(UnresolvedAestheticError) as excinfo:
        resolve(context, Layer("ribbon", mapping=aes(ymax="upr"), data=FIT))
    assert excinfo.value.geometry == "ribbon"
    assert excinfo.value.missing == ("ymin",)


def test_suppressing_a_required_aesthetic_is_unresolved():
    with pytest.raises(UnresolvedAestheticError):
        resolve(tips_context(), Layer("point", mapping=aes(y=SUPPRESS)))


def test_required_aesthetic_can_be_a_parameter():
    resolved = resolve(ChartContext(), Layer("hline", parameters={"yintercept": 0}))
    assert resolved.parameters["yintercept"] == 0


def test_empty_geometry():
    with pytest.raises(EmptyGeometryError):
        resolve(tips_context(), Layer())
    with pytest.raises(EmptyGeometryError):
        resolve(tips_context(), Layer(""))
    with pytest.raises(EmptyGeometryError):
        resolve(tips_context(), Layer("  "))
    with pytest.raises(EmptyGeometryError):
        resolve(tips_context(), Layer(3))  # type: ignore
    with pytest.raises(EmptyGeometryError) as excinfo:
        compose(tips_context(), [Layer("point"), Layer("\t")])
    assert excinfo.value.index == 1


def test_unknown_geometry_has_no_required_aesthetics():
    resolved = resolve(ChartContext(), Layer("tickX"))
    assert resolved.geometry == "tickX"
    assert dict(resolved.mapping) == {}


def test_unknown_field():
    with pytest.raises(UnknownFieldError) as excinfo:
        resolve(tips_context(), Layer("point", mapping=aes(color="gender")))
    assert excinfo.value.aesthetic == "color"
    assert excinfo.value.field == "gender"
    assert "sex" in excinfo.value.available
    assert isinstance(excinfo.value, LayerError)


def test_constants_are_not_fields():
    resolved = resolve(tips_context(), Layer("point", mapping=aes(color=constant("all"))))
    assert resolved.mapping["color"] == Constant("all")


def test_fields_are_unchecked_without_data():
    resolved = resolve(ChartContext(mapping=aes(x="a", y="b")), Layer("point"))
    assert resolved.data is None


def test_columnar_and_structured_data():
    columns = {"total_bill": [10.0, 20.0], "tip": [1.0, 2.0]}
    assert resolve(ChartContext(columns, aes(x="total_bill", y="tip")), Layer("point"))

    structured = np.array([(10.0, 1.0)], dtype=[("total_bill", "f8"), ("tip", "f8")])
    assert resolve(ChartContext(structured, aes(x="total_bill", y="tip")), Layer("point"))


def test_compose_preserves_order():
    layers = [
        Layer("ribbon", mapping=aes(ymin="lwr", ymax="upr"), data=FIT),
        Layer("point", parameters={"size": 3}),
        Layer("line", mapping=aes(y="fit"), data=FIT),
    ]
    resolved = compose(tips_context(), layers)
    assert isinstance(resolved, tuple)
    assert [r.geometry for r in resolved] == ["ribbon", "point", "line"]
    for layer, r in zip(layers, resolved):
        assert r == resolve(tips_context(), layer)


def test_compose_is_all_or_nothing():
    layers = [Layer("point"), Layer("ribbon", mapping=aes(ymax="upr"), data=FIT)]
    with pytest.raises(UnresolvedAestheticError):
        compose(tips_context(), layers)

    with pytest.raises(EmptyGeometryError) as excinfo:
        compose(tips_context(), [Layer("point"), Layer(None)])
    assert excinfo.value.index == 1


def test_layers_are_immutable():
    layer = Layer("point", mapping={"color": "sex"}, parameters={"size": 3})
    with pytest.raises(AttributeError):
        layer.geometry = "line"  # type: ignore
    with pytest.raises(TypeError):
        layer.mapping["color"] = "smoker"  # type: ignore
    with pytest.raises(TypeError):
        layer.parameters["size"] = 4  # type: ignore


def test_aes_rejects_none_and_normalizes_names():
    with pytest.raises(ValueError):
        aes(color=None)
    assert dict(aes(colour="sex")) == {"color": "sex"}
    assert aes(alpha=0.5)["alpha"] == Constant(0.5)


def test_aes_rejects_aliases_of_the_same_aesthetic():
    with pytest.raises(ValueError, match="given twice"):
        aes(colour="sex", color="smoker")
    with pytest.raises(ValueError):
        aes({"shape": "day"}, symbol="time")


def test_rule_geometries_do_not_inherit_the_context():
    resolved = resolve(tips_context(), Layer("vline", parameters={"xintercept": 20}))
    assert resolved.data is None
    assert dict(resolved.mapping) == {}
    with pytest.raises(UnresolvedAestheticError):
        resolve(ChartContext(mapping=aes(xintercept="total_bill")), Layer("vline"))
