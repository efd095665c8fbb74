"""Export the current slices to a standalone HTML preview."""

from __future__ import annotations

import html
from pathlib import Path
from typing import Sequence

from ..slices.store import SliceResult


def export_preview_html(results: Sequence[SliceResult], out_path: Path, title: str = "Slices") -> Path:
    cards: list[str] = []
    for result in results:
        name = html.escape(result.name)
        label = html.escape(result.label)
        cards.append(
            f"<div class='card'>"
            f"<div class='thumb'><img src='{result.to_data_url()}' alt='{name}'></div>"
            f"<div class='meta'><div class='name'>{name}</div>"
            f"<div class='size'>{label}</div></div>"
            f"</div>"
        )

    html_doc = f"""
<!doctype html>
<html>
<head>
  <meta charset='utf-8'>
  <title>{html.escape(title)}</title>
  <style>
    body {{ font-family: Arial, sans-serif; background: #f6f6f6; margin: 0; padding: 20px; }}
    .grid {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(160px, 1fr)); gap: 12px; }}
    .card {{ background: white; border-radius: 10px; overflow: hidden; box-shadow: 0 2px 8px rgba(0,0,0,0.08); }}
    .thumb {{ width: 100%; aspect-ratio: 1 / 1; background: #eee; display: flex; align-items: center; justify-content: center; }}
    .thumb img {{ max-width: 100%; max-height: 100%; object-fit: contain; }}
    .meta {{ padding: 8px 10px; }}
    .name {{ font-weight: bold; font-size: 12px; color: #444; }}
    .size {{ font-size: 11px; color: #777; margin-top: 4px; }}
  </style>
</head>
<body>
  <h1>{html.escape(title)} ({len(results)})</h1>
  <div class='grid'>
    {''.join(cards)}
  </div>
</body>
</html>
"""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(html_doc, encoding="utf-8")
    return out_path
