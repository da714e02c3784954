import math
import plotly.graph_objects as go

from core.profile import EMPTY_LABEL, is_empty_profile

# Bottle geometry, as fractions of the drawing area
BOTTLE_WIDTH_NORM = 0.38
BOTTLE_CAP_HEIGHT_NORM = 0.18
BOTTLENECK_HEIGHT_NORM = 0.16
BOTTLE_BODY_HEIGHT_NORM = 0.42
BOTTLE_CAP_Y_START_NORM = 0.25
BOTTLENECK_Y_START_NORM = BOTTLE_CAP_Y_START_NORM + BOTTLE_CAP_HEIGHT_NORM
BOTTLE_BODY_Y_START_NORM = BOTTLENECK_Y_START_NORM + BOTTLENECK_HEIGHT_NORM
BOTTLENECK_WIDTH_FACTOR = 0.5
BOTTLE_CAP_WIDTH_FACTOR = 0.65
X_CENTER_MAIN_BOTTLE_NORM = 0.50

NOTE_COLORS = ['#FADCD3', '#FBE3CF', '#FCF4DE', '#DEECE8', '#D3E3ED', '#E1D8E1']
ACCORD_COLORS = ['#EBC2CA', '#F3D2C4', '#FBEACF', '#D6E7DF', '#C8DBEC', '#E5DDE5']
SHELL_COLOR = "#f0f0f0"
TEXT_VISIBILITY_THRESHOLD_PX = 10
BOTTLE_OUTLINE_PADDING_PX = 5

SVG_WIDTH = 800
SVG_HEIGHT = 700
MARGIN = {"top": 10, "right": 20, "bottom": 150, "left": 20}
VIZ_WIDTH = SVG_WIDTH - MARGIN["left"] - MARGIN["right"]
VIZ_HEIGHT = SVG_HEIGHT - MARGIN["top"] - MARGIN["bottom"]

VARIANCE_LINES = {
    "divisive": "A divisive note (high rating variance).",
    "consistent": "A consistent favorite (low rating variance).",
}


class OrdinalPalette:
    """Hands out colors by first-seen label, cycling through the palette."""

    def __init__(self, colors):
        self.colors = list(colors)
        self.assigned = {}

    def __call__(self, label):
        if label not in self.assigned:
            self.assigned[label] = self.colors[len(self.assigned) % len(self.colors)]
        return self.assigned[label]


def build_bottle_dimensions(width=VIZ_WIDTH, height=VIZ_HEIGHT):
    center_x = X_CENTER_MAIN_BOTTLE_NORM * width
    cap_w = BOTTLE_WIDTH_NORM * BOTTLE_CAP_WIDTH_FACTOR * width
    neck_w = BOTTLE_WIDTH_NORM * BOTTLENECK_WIDTH_FACTOR * width
    body_w = BOTTLE_WIDTH_NORM * width

    return {
        "cap": {"x": center_x - cap_w / 2, "y": BOTTLE_CAP_Y_START_NORM * height,
                "w": cap_w, "h": BOTTLE_CAP_HEIGHT_NORM * height},
        "neck": {"x": center_x - neck_w / 2, "y": BOTTLENECK_Y_START_NORM * height,
                 "w": neck_w, "h": BOTTLENECK_HEIGHT_NORM * height},
        "body": {"x": center_x - body_w / 2, "y": BOTTLE_BODY_Y_START_NORM * height,
                 "w": body_w, "h": BOTTLE_BODY_HEIGHT_NORM * height},
    }


def stack_segments(customdata, section):
    """Splits a bottle section top-down into one rectangle per share."""
    segments = []
    current_y = section["y"]
    for item in customdata:
        seg_h = item["percentage"] / 100 * section["h"]
        segments.append({**item, "x": section["x"], "y": current_y, "w": section["w"], "h": seg_h})
        current_y += seg_h
    return segments


def segment_text(segment):
    if segment["h"] < TEXT_VISIBILITY_THRESHOLD_PX:
        return ""
    return f"{segment['label']} ({segment['percentage']:.0f}%)"


def layout_accord_bubbles(accords, dims, width=VIZ_WIDTH):
    """Places accord bubbles on an arc around the bottle body."""
    if not accords:
        return []

    body = dims["body"]
    center_x = X_CENTER_MAIN_BOTTLE_NORM * width - 20
    center_y = body["y"] + body["h"] - 200
    orbit_rx = body["w"] / 2 + 100
    orbit_ry = body["h"] / 2 + 200

    max_pct = max(a["percentage"] for a in accords)
    min_r, max_r = 12, width * 0.06

    nodes = []
    for i, accord in enumerate(accords):
        angle = math.pi + (i / len(accords)) * 1.4 * math.pi
        scale = math.sqrt(accord["percentage"] / max_pct) if max_pct > 0 else 0.0
        nodes.append({
            **accord,
            "radius": min_r + scale * (max_r - min_r),
            "cx": center_x + orbit_rx * math.cos(angle),
            "cy": center_y + orbit_ry * math.sin(angle),
        })
    return nodes


def ingredient_hover_lines(item, details=None):
    lines = [
        item["type"],
        f"{item['label']}: {item['percentage']:.1f}% share within category",
    ]
    if not details:
        return lines

    if details.get("brand_affinity", 0) > 0:
        lines.append(f"Used in {details['brand_affinity']:.0f}% of this brand's perfumes.")
    if details.get("percentile") is not None:
        lines.append(f"Rated better than {details['percentile']:.0f}% of other brands.")
    if details.get("variance") in VARIANCE_LINES:
        lines.append(VARIANCE_LINES[details["variance"]])
    return lines


def _hover(item, describe):
    details = describe(item) if describe and item["label"] != EMPTY_LABEL else None
    return "<br>".join(ingredient_hover_lines(item, details))


def _rect_trace(x, y, w, h, fill, hovertext=None, name=""):
    return go.Scatter(
        x=[x, x + w, x + w, x, x],
        y=[y, y, y + h, y + h, y],
        mode="lines",
        fill="toself",
        fillcolor=fill,
        line={"color": "white", "width": 1},
        hoverinfo="text" if hovertext else "skip",
        hovertext=hovertext,
        hoveron="fills",
        name=name,
        showlegend=False,
    )


def build_dna_figure(profile, describe=None, title=None):
    """
    Draws a brand profile as a perfume bottle (top notes in the cap, middle
    notes in the neck, base notes in the body) plus a cloud of accord bubbles.

    `describe(item)` may return the hover statistics of an ingredient.
    """
    dims = build_bottle_dimensions()
    note_colors = OrdinalPalette(NOTE_COLORS)
    accord_colors = OrdinalPalette(ACCORD_COLORS)
    pad = BOTTLE_OUTLINE_PADDING_PX

    fig = go.Figure()
    annotations = []

    for part in dims.values():
        fig.add_trace(_rect_trace(part["x"] - pad, part["y"] - pad,
                                  part["w"] + 2 * pad, part["h"] + 2 * pad, SHELL_COLOR))

    sections = (("top_notes", "cap"), ("middle_notes", "neck"), ("base_notes", "body"))
    for key, part in sections:
        for seg in stack_segments(profile[key]["customdata"], dims[part]):
            fig.add_trace(_rect_trace(seg["x"], seg["y"], seg["w"], seg["h"],
                                      note_colors(seg["label"]),
                                      hovertext=_hover(seg, describe), name=seg["id"]))
            text = segment_text(seg)
            if text:
                annotations.append({"x": seg["x"] + seg["w"] / 2, "y": seg["y"] + seg["h"] / 2,
                                    "text": text, "showarrow": False, "font": {"size": 11}})

    accords = profile["main_accords"]
    if not is_empty_profile(accords):
        nodes = layout_accord_bubbles(accords["customdata"], dims)
        fig.add_trace(go.Scatter(
            x=[n["cx"] for n in nodes],
            y=[n["cy"] for n in nodes],
            mode="markers+text",
            marker={"size": [2 * n["radius"] for n in nodes],
                    "color": [accord_colors(n["label"]) for n in nodes],
                    "line": {"width": 0}},
            text=[f"{n['label']}<br>({n['percentage']:.0f}%)" for n in nodes],
            textfont={"color": "#333"},
            hoverinfo="text",
            hovertext=[_hover(n, describe) for n in nodes],
            showlegend=False,
        ))

    center_x = X_CENTER_MAIN_BOTTLE_NORM * VIZ_WIDTH
    annotations += [
        {"x": center_x, "y": dims["cap"]["y"] - 15, "text": "Top Notes", "showarrow": False},
        {"x": dims["neck"]["x"] - 15, "y": dims["neck"]["y"] + dims["neck"]["h"] / 2,
         "text": "MIDDLE<br>NOTES", "showarrow": False, "xanchor": "right"},
        {"x": center_x, "y": dims["body"]["y"] + dims["body"]["h"] + 20,
         "text": "Base Notes", "showarrow": False},
    ]

    fig.update_layout(
        title=title,
        width=SVG_WIDTH,
        height=SVG_HEIGHT,
        margin={"t": MARGIN["top"] + (40 if title else 0), "r": MARGIN["right"],
                "b": 0, "l": MARGIN["left"]},
        plot_bgcolor="white",
        annotations=annotations,
        xaxis={"visible": False, "range": [0, VIZ_WIDTH]},
        yaxis={"visible": False, "range": [SVG_HEIGHT - MARGIN["top"], 0], "scaleanchor": "x"},
    )
    return fig
