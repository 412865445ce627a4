# %% [markdown]
# # The grammar of graphics
#
# A chart is built from a few independent pieces:
#
# - **data**: a table, one row per observation
# - **aesthetics**: which column drives which visual property (x position, y position, color, ...)
# - **geometry**: how each row is drawn (points, lines, a ribbon, ...)
#
# and a chart is a stack of **layers**, each combining those pieces. To follow along, import ggstudio:

# %%
import ggstudio.plot as gg
from ggstudio.datasets import tips

registry = gg.ToggleRegistry()

# %% [markdown]
# We'll use a sample of restaurant bills and the tips left on them:

# %%
tips_data = tips()
tips_data[:3]

# %% [markdown]
# ## Data, aesthetics and geometry
#
# `gg.chart` takes the data and the default aesthetics. On its own it draws nothing; a layer with a
# geometry is needed too:

# %%
gg.chart(tips_data, gg.aes(x="total_bill", y="tip")) + gg.point()

# %% [markdown]
# Aesthetics that belong to a single layer go on that layer. Options that are not tied to the data,
# like the size of every point, are passed as keyword arguments:

# %%
gg.chart(tips_data, gg.aes(x="total_bill", y="tip")) + gg.point(gg.aes(color="sex"), size=3)

# %% [markdown]
# ## Layers
#
# Charts are immutable, and `+` returns a new chart. That makes it easy to keep a base chart around
# and build different views on top of it. Layers are drawn in the order they are added, so later
# layers end up on top.

# %%
base = gg.chart(tips_data, gg.aes(x="total_bill", y="tip")) + gg.labs(
    x="Total bill ($)", y="Tip ($)"
)

base + gg.line(color="lightgray") + gg.point(gg.aes(color="sex"), size=3)

# %% [markdown]
# ### Exercise 1
#
# Move `color="sex"` from the point layer to the chart. What happens to the line?

# %%
gg.solution(
    "solution1",
    gg.md(
        """
The line layer now inherits `color` too, so it is split into one line per group.
To keep a single line, the line layer can opt out of the inherited aesthetic with `SUPPRESS`:
"""
    ),
    gg.chart(tips_data, gg.aes(x="total_bill", y="tip", color="sex"))
    + gg.line(gg.aes(color=gg.SUPPRESS), color="lightgray")
    + gg.point(size=3),
    registry=registry,
)

# %% [markdown]
# ## Layers with their own data
#
# A layer can bring its own data. Here a fitted line and its confidence interval come from a
# separate table (computed by any modeling tool) with columns `fit`, `lwr` and `upr`. Both layers still
# inherit `x` from the chart. The fitted table has no `tip` column, so the ribbon opts out of the
# chart's `y` and the line replaces it.

# %%
fitted = [
    {"total_bill": 10.0, "fit": 1.92, "lwr": 1.49, "upr": 2.35},
    {"total_bill": 15.0, "fit": 2.43, "lwr": 2.13, "upr": 2.73},
    {"total_bill": 20.0, "fit": 2.94, "lwr": 2.71, "upr": 3.17},
    {"total_bill": 25.0, "fit": 3.45, "lwr": 3.15, "upr": 3.75},
    {"total_bill": 30.0, "fit": 3.96, "lwr": 3.51, "upr": 4.41},
    {"total_bill": 35.0, "fit": 4.47, "lwr": 3.85, "upr": 5.09},
]

(
    base
    + gg.ribbon(
        gg.aes(y=gg.SUPPRESS, ymin="lwr", ymax="upr"),
        data=fitted,
        fill="steelblue",
        alpha=0.2,
    )
    + gg.line(gg.aes(y="fit"), data=fitted, color="steelblue")
    + gg.point()
)

# %% [markdown]
# A ribbon needs both `ymin` and `ymax`. Leaving one out is an error rather than a silently missing layer:

# %%
try:
    (base + gg.ribbon(gg.aes(ymax="upr"), data=fitted)).resolved()
except gg.UnresolvedAestheticError as e:
    print(e)

# %% [markdown]
# ### Exercise 2
#
# Draw the same regression without computing it yourself.

# %%
gg.solution(
    "solution2",
    gg.md("`gg.smooth()` fits a linear model in the renderer and draws its confidence band:"),
    base + gg.point() + gg.smooth(level=0.95),
    registry=registry,
)

# %% [markdown]
# ## What the renderer receives
#
# Each layer is resolved against the chart before drawing: its effective data, its merged aesthetics,
# its geometry and its parameters.

# %%
for layer in (base + gg.point(gg.aes(color="sex"), size=3)).resolved():
    print(layer.geometry, dict(layer.mapping), dict(layer.parameters))
