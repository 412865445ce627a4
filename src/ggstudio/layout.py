import functools
import os
import uuid
from typing import Any, Optional, Sequence

from html2image import Html2Image
from PIL import Image

from ggstudio.util import CONFIG, DISPLAY_MODES, PARENT_PATH
from ggstudio.widget import Widget, to_json_with_initialState


def create_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)


def new_element_id() -> str:
    return f"ggstudio-{uuid.uuid4().hex}"


@functools.cache
def runtime_assets() -> tuple[str, str]:
    """The JS runtime and stylesheet inlined into static pages."""
    return (
        (PARENT_PATH / "js/widget.js").read_text(),
        (PARENT_PATH / "widget.css").read_text(),
    )


def html_snippet(ast: Any, id: Optional[str] = None) -> str:
    """
    A self-contained HTML fragment that renders `ast` without a kernel.

    Widget state (eg. solution visibility) is embedded as initial state and
    lives only in the page: toggles flip locally, callbacks are not sent back.
    """
    id = id or new_element_id()
    data = to_json_with_initialState(ast, as_string=True)
    js_content, css_content = runtime_assets()
    return f"""
    <style>{css_content}</style>
    <div class="ggstudio" id="{id}"></div>
    <script type="application/json" id="{id}-data">{data}</script>
    <script type="module">
        {js_content}
        renderStatic(
            document.getElementById('{id}'),
            JSON.parse(document.getElementById('{id}-data').textContent)
        );
    </script>
    """


def html_page(ast: Any, title: str = "ggstudio") -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <title>{title}</title>
    </head>
    <body>
        {html_snippet(ast)}
    </body>
    </html>
    """


class StaticHTML:
    def __init__(self, ast: Any):
        self.id = new_element_id()
        self.content = html_snippet(ast, self.id)

    def _repr_mimebundle_(self, **kwargs):
        return {"text/html": self.content}, {}


class LayoutItem:
    """
    Anything that can be displayed in a notebook: charts, solution toggles,
    rows and columns of them, or raw Hiccup.

    Subclasses implement `for_json`, returning the AST the JS runtime renders.
    """

    def __init__(self):
        self._html: Optional[StaticHTML] = None
        self._widget: Optional[Widget] = None
        self._display_as: Optional[str] = None

    def display_as(self, display_as: str) -> "LayoutItem":
        if display_as not in DISPLAY_MODES:
            raise ValueError(
                f"display_as must be one of {DISPLAY_MODES}, got {display_as!r}"
            )
        self._display_as = display_as
        return self

    def for_json(self) -> Any:
        raise NotImplementedError("Subclasses must implement for_json method")

    def __and__(self, other: Any) -> "Row":
        return Row(self, other)

    def __or__(self, other: Any) -> "Column":
        return Column(self, other)

    def _repr_mimebundle_(self, **kwargs: Any) -> Any:
        return self.repr()._repr_mimebundle_(**kwargs)

    def html(self) -> StaticHTML:
        if self._html is None:
            self._html = StaticHTML(self.for_json())
        return self._html

    def widget(self) -> Widget:
        if self._widget is None:
            self._widget = Widget(self)
        return self._widget

    def repr(self) -> Widget | StaticHTML:
        if (self._display_as or CONFIG["display_as"]) == "widget":
            return self.widget()
        return self.html()

    def save_html(self, path: str) -> None:
        create_parent_dir(path)
        with open(path, "w") as f:
            f.write(html_page(self.for_json()))
        print(f"HTML saved to {path}")

    def save_image(self, path: str, width: int = 640, height: int = 480) -> None:
        """
        Screenshot the static page in a headless browser (via html2image) and
        crop it to the drawn content. Solutions are captured in their current
        visibility.
        """
        create_parent_dir(path)
        hti = Html2Image(
            output_path=os.path.dirname(os.path.abspath(path)), size=(width, height)
        )
        hti.screenshot(html_str=html_page(self.for_json()), save_as=os.path.basename(path))

        with Image.open(path) as img:
            bbox = img.getbbox()
            cropped = img.crop(bbox) if bbox else img.copy()
        cropped.save(path)
        print(f"Image saved to {path}")

    @property
    def state(self):
        """The live widget state. Static HTML has none."""
        if self._html is not None:
            raise ValueError(
                "Static HTML has no state. Use display_as('widget') or .widget() for a live widget."
            )
        return self.widget().state


class JSCall(LayoutItem):
    """A call to a function in the JS runtime's scope, eg. Plot.dot(data, options)."""

    def __init__(self, path: str, args: Sequence[Any] = ()):
        super().__init__()
        self.path = path
        self.args = args

    def for_json(self) -> dict:
        return {"__type__": "function", "path": self.path, "args": self.args}


class JSRef(LayoutItem):
    """
    A name in the JS runtime's scope (Plot, d3, Toggle...). Attribute access
    extends the path and calling it builds a JSCall.
    """

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self.__name__ = path.split(".")[-1]

    def __call__(self, *args: Any) -> JSCall:
        return JSCall(self.path, args)

    def __getattr__(self, name: str) -> "JSRef":
        if name.startswith("_"):
            raise AttributeError(
                f"'{self.__class__.__name__}' object has no attribute '{name}'"
            )
        return JSRef(f"{self.path}.{name}")

    def for_json(self) -> dict:
        return {"__type__": "js_ref", "path": self.path}


class JSCode(LayoutItem):
    def __init__(self, code: str, params: tuple, expression: bool):
        super().__init__()
        self.code = code
        self.params = params
        self.expression = expression

    def for_json(self) -> dict:
        return {
            "__type__": "js_source",
            "value": self.code,
            "params": self.params,
            "expression": self.expression,
        }


def js(txt: str, *params, expression=True) -> JSCode:
    """
    Raw JavaScript evaluated by the runtime.

    Args:
        txt: source with %1, %2, ... placeholders for `params`.
        expression: evaluate as an expression (True) or a function body.
    """
    return JSCode(txt, params, expression=expression)


class Hiccup(LayoutItem):
    """An HTML-like tree, eg. Hiccup("div", {"class": "note"}, "text")."""

    def __init__(self, *args: Any) -> None:
        super().__init__()
        if len(args) == 0:
            self.child = None
        elif len(args) == 1:
            self.child = args[0]
        else:
            self.child = args

    def for_json(self) -> Any:
        return self.child


class Stack(LayoutItem):
    """
    Children laid out one after another by a JS component. Nested stacks of
    the same kind are flattened and dicts among the children become options.
    """

    component: JSRef

    def __init__(self, *items: Any, **options: Any):
        super().__init__()
        self.items: list[Any] = []
        self.options: dict[str, Any] = {}
        for item in items:
            if isinstance(item, type(self)):
                self.items.extend(item.items)
                self.options.update(item.options)
            elif isinstance(item, dict):
                self.options.update(item)
            else:
                self.items.append(item)
        self.options.update(options)

    def for_json(self) -> Any:
        return Hiccup(self.component, self.options, *self.items)


class Row(Stack):
    "Children side by side, eg. a chart next to its solution."

    component = JSRef("Row")


class Column(Stack):
    "Children stacked vertically."

    component = JSRef("Column")


def unwrap_for_json(x):
    while hasattr(x, "for_json"):
        x = x.for_json()
    return x


class RefObject(LayoutItem):
    """
    A value stored in widget state under `id`. Serializes as a reference to that
    state key, so JS reads the live value and Python can update it with
    `widget.state.update({id: value})`.
    """

    def __init__(self, value, id=None, sync=False):
        super().__init__()
        self.id = str(uuid.uuid1()) if id is None else id
        self.value = value
        self._state_key = self.id
        self._state_sync = sync

    def for_json(self):
        return unwrap_for_json(self.value)


def ref(value: Any, id=None, sync=False) -> RefObject:
    """
    Store `value` in widget state.

    Args:
        value: initial value. A RefObject passed without an id is returned as is.
        id: the state key; generated when omitted.
        sync: send changes made in JS back to Python.
    """
    if id is None and isinstance(value, RefObject):
        return value
    return RefObject(value, id=id, sync=sync)
