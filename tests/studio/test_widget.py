# %%
import datetime
import json
import math

import numpy as np
import pytest
from PIL import Image

import ggstudio.layout as layout
from ggstudio.layout import Column, Hiccup, JSRef, Row, js, ref
from ggstudio.widget import (
    CollectedState,
    Widget,
    apply_updates,
    normalize_updates,
    to_json,
    to_json_with_initialState,
)


def test_to_json_scalars():
    assert to_json(1) == 1
    assert to_json("a") == "a"
    assert to_json(None) is None
    assert to_json(math.nan) is None
    assert to_json(np.float64(1.5)) == 1.5
    assert to_json(datetime.date(2024, 1, 2)) == {
        "__type__": "datetime",
        "value": "2024-01-02",
    }


def test_to_json_arrays_and_containers():
    assert to_json(np.array([1, 2, 3])) == [1, 2, 3]
    assert to_json({"xs": np.arange(2), "ys": (1, 2)}) == {"xs": [0, 1], "ys": [1, 2]}
    assert sorted(to_json({"b", "a"})) == ["a", "b"]


def test_to_json_generator_warns():
    with pytest.warns(UserWarning, match="exhaustible"):
        assert to_json(x for x in range(3)) == [0, 1, 2]


def test_to_json_unsupported():
    with pytest.raises(TypeError):
        to_json(object())


def test_to_json_callable_without_widget():
    assert to_json(lambda widget, event: None) is None


def test_to_json_callable_registers_callback():
    class FakeWidget:
        callback_registry = {}

    widget = FakeWidget()
    fn = lambda widget, event: None  # noqa: E731
    data = to_json({"onClick": fn}, widget=widget)
    assert data["onClick"]["__type__"] == "callback"
    assert widget.callback_registry[data["onClick"]["id"]] is fn


def test_layout_json():
    d3 = JSRef("d3")
    assert to_json(d3.max) == {"__type__": "js_ref", "path": "d3.max"}
    assert to_json(d3.max([1, 2])) == {
        "__type__": "function",
        "path": "d3.max",
        "args": [[1, 2]],
    }
    assert to_json(js("$state[%1]", "a")) == {
        "__type__": "js_source",
        "value": "$state[%1]",
        "params": ["a"],
        "expression": True,
    }
    row = Row("a", "b") & "c"
    assert row.items == ["a", "b", "c"]
    column = Column("a") | Column("b", gap=2)
    assert column.items == ["a", "b"]
    assert column.options == {"gap": 2}
    assert to_json(Row("a", {"gap": 1}, align="top")) == [
        {"__type__": "js_ref", "path": "Row"},
        {"gap": 1, "align": "top"},
        "a",
    ]
    assert to_json(Hiccup("div", "x")) == ["div", "x"]


def test_refs_collect_initial_state():
    collected = CollectedState()
    data = to_json(
        [ref("hidden", id="a", sync=True), ref(1, id="b")], collected_state=collected
    )
    assert data == [
        {"__type__": "ref", "state_key": "a"},
        {"__type__": "ref", "state_key": "b"},
    ]
    assert collected.initialStateJSON == {"a": "hidden", "b": 1}
    assert collected.syncedKeys == {"a"}


def test_to_json_with_initialState_as_string():
    data = json.loads(to_json_with_initialState(ref(3, id="n"), as_string=True))
    assert data["ast"] == {"__type__": "ref", "state_key": "n"}
    assert data["initialState"] == {"n": 3}
    assert data["display_as"] in ("widget", "html")


def test_updates():
    updates = normalize_updates([{"a": 1}, ["b", "append", 2]])
    assert updates == [["a", "reset", 1], ["b", "append", 2]]
    state = {}
    apply_updates(state, updates)
    assert state == {"a": 1, "b": [2]}
    with pytest.raises(ValueError):
        apply_updates(state, [["a", "splice", 0]])


def test_widget_state_sync():
    widget = Widget(Hiccup(["div", ref("hidden", id="solution1", sync=True)]))
    assert widget.state.solution1 == "hidden"

    seen = []
    widget.state._listeners["solution1"] = [
        lambda w, event: seen.append(event["value"])
    ]
    widget.state.update({"solution1": "shown"})
    assert widget.state.solution1 == "shown"
    assert seen == ["shown"]

    widget.state.accept_js_updates([["solution1", "reset", "hidden"]])
    assert widget.state.get("solution1") == "hidden"
    assert seen == ["shown", "hidden"]


def test_html_display(tmp_path):
    item = Hiccup(["div", ref("hidden", id="solution1", sync=True)])
    bundle, _ = item.display_as("html")._repr_mimebundle_()
    html = bundle["text/html"]
    assert "renderStatic" in html
    assert '"solution1": "hidden"' in html
    with pytest.raises(ValueError):
        item.state

    path = tmp_path / "out" / "chart.html"
    item.save_html(str(path))
    assert path.read_text().startswith("\n    <!DOCTYPE html>")


def test_display_as_validates():
    with pytest.raises(ValueError):
        Hiccup("div").display_as("png")


def test_save_image_crops_to_content(tmp_path, monkeypatch):
    pages = []

    class FakeHtml2Image:
        def __init__(self, output_path, size):
            self.output_path = output_path
            self.size = size

        def screenshot(self, html_str, save_as):
            pages.append(html_str)
            img = Image.new("RGBA", self.size, (0, 0, 0, 0))
            img.paste((255, 0, 0, 255), (10, 20, 40, 60))
            img.save(f"{self.output_path}/{save_as}")

    monkeypatch.setattr(layout, "Html2Image", FakeHtml2Image)
    path = tmp_path / "images" / "chart.png"
    Hiccup("div", "x").save_image(str(path), width=100, height=80)

    assert "renderStatic" in pages[0]
    with Image.open(path) as img:
        assert img.size == (30, 40)
