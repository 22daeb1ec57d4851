"""Generate a standalone HTML snapshot of a laid-out graph for CLI usage."""

import html as html_lib


def _svg_markup(frame):
    nodes = {n["id"]: n for n in frame["nodes"]}
    lines = []
    for link in frame["links"]:
        s, t = nodes[link["source"]], nodes[link["target"]]
        dash = ' stroke-dasharray="4 3"' if link["is_secondary"] else ""
        lines.append(
            f'<line x1="{s["x"]:.1f}" y1="{s["y"]:.1f}" x2="{t["x"]:.1f}" y2="{t["y"]:.1f}" '
            f'class="link {link["kind"]}" stroke-opacity="{link["opacity"]}"{dash}></line>'
        )
    circles = []
    for n in frame["nodes"]:
        title = html_lib.escape(n.get("full_title", n["label"]))
        label = html_lib.escape(n["label"])
        circles.append(
            f'<g class="node {n["type"]}" transform="translate({n["x"]:.1f},{n["y"]:.1f})" '
            f'opacity="{n["opacity"]}"><title>{title}</title>'
            f'<circle r="{n["radius"] * 0.6:.1f}" fill="{n["color"]}"></circle>'
            f'<text x="{n["radius"] * 0.6 + 3:.1f}" y="3">{label}</text></g>'
        )
    return "\n".join(lines + circles)


def generate_html(frame, title="Publication Graph", width=800, height=600):
    """Render an Explorer frame as a standalone HTML page.

    Args:
        frame: dict from Explorer.frame()
        title: page title
        width, height: SVG viewBox size (the layout bounds)

    Returns:
        (html_string, node_count, link_count)
    """
    legend_html = "".join(
        f'<div class="legend-item"><span class="legend-dot" style="background:{item["color"]}">'
        f'</span>{item["label"]} ({item["count"]})</div>'
        for item in frame["legend"]
    )
    if frame["placeholder"]:
        body = f'<text x="{width / 2}" y="{height / 2}" class="placeholder">' \
               f'{html_lib.escape(frame["message"])}</text>'
    else:
        body = _svg_markup(frame)
    safe_title = html_lib.escape(title)

    page = f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{safe_title}</title>
<style>
  body {{ margin: 0; background: #1a1a2e; font-family: -apple-system, sans-serif; }}
  svg {{ width: 100vw; height: 100vh; }}
  .link {{ stroke: #7799BB; stroke-width: 1.5px; }}
  .node circle {{ stroke: #fff; stroke-width: 1.5px; }}
  .node text {{ fill: #ccc; font-size: 10px; }}
  .node.publication text {{ font-size: 11px; }}
  .placeholder {{ fill: #888; font-size: 16px; text-anchor: middle; }}
  #legend {{
    position: absolute; bottom: 12px; left: 12px; color: #aaa;
    font-size: 11px; background: rgba(0,0,0,0.6); padding: 10px;
    border-radius: 6px;
  }}
  .legend-item {{ display: flex; align-items: center; margin: 3px 0; }}
  .legend-dot {{ width: 10px; height: 10px; border-radius: 50%;
    margin-right: 6px; display: inline-block; }}
  #title {{ position: absolute; top: 12px; left: 12px; color: #eee;
    background: rgba(0,0,0,0.6); padding: 10px; border-radius: 6px; }}
</style>
</head>
<body>
<div id="title"><strong>{safe_title}</strong></div>
<div id="legend">
  <div style="margin-bottom:4px"><strong>Types</strong></div>
  {legend_html}
</div>
<svg viewBox="0 0 {width} {height}">
<g>
{body}
</g>
</svg>
</body>
</html>"""
    return page, len(frame["nodes"]), len(frame["links"])
