"""Render the math in a small page, leniently and then strictly."""

from mathmark import AggregatedError, RenderContext, compose

page = r"""Newton: $F = \frac{d}{dt}(mv)$, so for constant mass $F = ma$.

$$
\int_0^1 x^2 \, dx = \frac{1}{3}
$$

Prices stay literal: \$5. This one is broken: $x^{2
"""

lenient = RenderContext.from_dict({"enabled": True})
print(compose(page, lenient))

try:
    compose(page, RenderContext.from_dict({"enabled": True, "strict": True}), source_file="page.md")
except AggregatedError as e:
    print("Strict render failed:")
    print(e)
