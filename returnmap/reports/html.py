"""Static HTML rendering of a return map using Jinja2 templates.

Produces a single self-contained page: column headers, absolutely
positioned cards, baselines and the legend. Every number on the page is
already computed by the runner; the template only places it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import jinja2

from returnmap.analysis.color_scale import card_color
from returnmap.config import HighlightMode
from returnmap.formatting import fmt_num, fmt_pct, format_value

if TYPE_CHECKING:
    from returnmap.data.models import Asset
    from returnmap.runner import ReturnMap

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "return_map.html"


def _tooltip(asset: Asset, column_label: str, value_text: str, rf_name: str) -> list[tuple[str, str]]:
    v = asset.values
    return [
        ("Coluna", column_label),
        ("Valor", value_text),
        ("Anual. Total", fmt_pct(v.get("annualised_total"))),
        (f"Anual. ({rf_name}+)", fmt_pct(v.get("annualised_excess"))),
        ("Vol.", fmt_pct(v.get("vol"))),
        ("Sharpe", fmt_num(v.get("sharpe"))),
        ("Máx DD", fmt_pct(v.get("max_dd"))),
    ]


def build_context(return_map: ReturnMap) -> dict[str, Any]:
    """Template context for one return map."""
    dataset = return_map.dataset
    layout = return_map.layout
    highlight = return_map.render_input.highlight_mode

    columns: list[dict[str, Any]] = []
    for col in dataset.columns:
        positions = layout.positions.get(col.id, {})
        cards = []
        for asset in dataset.assets:
            value_text = format_value(col.id, asset.values.get(col.id))
            cards.append({
                "asset_id": asset.id,
                "display": asset.display,
                "value": value_text,
                "top": positions.get(asset.id, 0.0),
                "color": card_color(
                    asset, col.id, highlight,
                    return_map.class_colors, return_map.scales,
                ),
                "tooltip": _tooltip(
                    asset, col.label, value_text, dataset.risk_free_name,
                ),
            })
        columns.append({
            "id": col.id,
            "label": col.label,
            "baseline": layout.baselines.get(col.id),
            "cards": cards,
        })

    return {
        "subtitle": dataset.subtitle,
        "columns": columns,
        "height": max(layout.height, 0.0),
        "card_height": return_map.layout_config.card_height,
        "legend": return_map.legend,
        "gradient_legend": highlight is HighlightMode.RETURN,
        "display_mode": layout.mode.value,
        "highlight_mode": highlight.value,
    }


def render_html(return_map: ReturnMap) -> str:
    """Render the return map to an HTML string."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )
    template = env.get_template(TEMPLATE_NAME)
    return template.render(**build_context(return_map))


def write_html(return_map: ReturnMap, output_path: Path) -> Path:
    """Render the return map and write it to *output_path*.

    Returns:
        Path to the written file.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_html(return_map), encoding="utf-8")
    logger.info("HTML return map written to %s", output_path)
    return output_path
