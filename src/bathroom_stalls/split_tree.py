"""Interactive tree of how customers split the row of stalls."""
from __future__ import annotations

from typing import Dict, Tuple

import networkx as nx
from pyvis.network import Network

from .simulate import simulate

MAX_TREE_CUSTOMERS = 511

_DEPTH_PALETTE = [
    "#FFB347", "#77DD77", "#AEC6CF", "#F49AC2", "#B39EB5", "#779ECB",
    "#966FD6", "#FFD700", "#FF6961", "#CB99C9", "#84B6F4", "#FDFD96",
]
_LAST_COLOR = "#C23B22"
_UNSPLIT_COLOR = "#555555"

# ---------------------------
# Public API
# ---------------------------

def build_split_graph(stalls: int, customers: int) -> nx.DiGraph:
    """
    Build a directed graph of group splits.

    Each node is a group of free stalls, keyed by ``(start, size)``. A node
    split by a customer gets ``chosen_by`` and an edge to each non-empty half.
    Groups nobody split yet are leaves with ``chosen_by`` set to ``None``.
    """
    if customers > MAX_TREE_CUSTOMERS:
        raise ValueError(
            f"split trees are limited to {MAX_TREE_CUSTOMERS} customers, got {customers}"
        )
    selections = simulate(stalls, customers)

    G = nx.DiGraph()
    G.add_node((1, stalls), start=1, size=stalls, depth=1, chosen_by=None, stall=None, last=False)
    for sel in selections:
        key = (sel.group_start, sel.group_size)
        G.nodes[key].update(
            chosen_by=sel.customer,
            stall=sel.stall,
            last=sel.customer == customers,
        )
        depth = G.nodes[key]["depth"]
        for start, size in ((sel.group_start, sel.left), (sel.stall + 1, sel.right)):
            if size == 0:
                continue
            child = (start, size)
            G.add_node(child, start=start, size=size, depth=depth + 1,
                       chosen_by=None, stall=None, last=False)
            G.add_edge(key, child)
    return G


def generate_split_tree(stalls: int, customers: int) -> str:
    """Return HTML for the split tree of ``customers`` entering ``stalls``."""
    G = build_split_graph(stalls, customers)
    positions = _compute_positions(G)

    net = Network(height="600px", width="100%", directed=True,
                  bgcolor="#111111", font_color="#EEEEEE")
    net.toggle_physics(False)  # positions are fixed
    for key, data in G.nodes(data=True):
        x, y = positions[key]
        net.add_node(
            _node_id(key),
            label=str(data["size"]),
            title=_node_tooltip(data),
            color=_node_color(data),
            x=x,
            y=y,
            physics=False,
            borderWidth=4 if data["last"] else 2,
            shape="box",
        )
    for a, b in G.edges():
        net.add_edge(_node_id(a), _node_id(b), color="#A9A9A9")

    return _inject_legend_html(net.generate_html())

# ---------------------------
# Internals
# ---------------------------

def _node_id(key: Tuple[int, int]) -> str:
    start, size = key
    return f"{start}+{size}"


def _node_color(data: dict) -> str:
    if data["last"]:
        return _LAST_COLOR
    if data["chosen_by"] is None:
        return _UNSPLIT_COLOR
    return _DEPTH_PALETTE[(data["depth"] - 1) % len(_DEPTH_PALETTE)]


def _compute_positions(G: nx.DiGraph, x_step: int = 40, y_step: int = 90) -> Dict[Tuple[int, int], Tuple[int, int]]:
    """Place each group over the stalls it covers, one row per depth."""
    positions: Dict[Tuple[int, int], Tuple[int, int]] = {}
    for key, data in G.nodes(data=True):
        start, size = key
        centre = start + (size - 1) / 2
        positions[key] = (int(centre * x_step), (data["depth"] - 1) * y_step)
    return positions


def _node_tooltip(data: dict) -> str:
    end = data["start"] + data["size"] - 1
    if data["chosen_by"] is None:
        picked = "not split yet"
    else:
        picked = f"customer {data['chosen_by']} took stall {data['stall']}"
    return (
        f"<b>stalls {data['start']}-{end}</b><br>"
        f"Size: {data['size']}<br>"
        f"Depth: {data['depth']}<br>"
        f"{picked}"
    )


def _inject_legend_html(html: str) -> str:
    legend = f"""
    <style>
    .legend-box{{
      position:absolute;right:12px;bottom:12px;
      background:#222;color:#eee;border:1px solid #444;border-radius:8px;
      padding:8px 12px;font-family:system-ui, -apple-system, Segoe UI, Roboto, Arial;font-size:12px;
      z-index:10;
    }}
    .legend-swatch{{display:inline-block;width:12px;height:12px;margin-right:6px;vertical-align:middle;border:1px solid #444;}}
    </style>
    <div class="legend-box">
      <div><span class="legend-swatch" style="background:{_LAST_COLOR}"></span>split by the last customer</div>
      <div><span class="legend-swatch" style="background:{_UNSPLIT_COLOR}"></span>not split yet</div>
      <div style="margin-top:6px;">other colors: depth</div>
      <div>label: free stalls in group</div>
    </div>
    """
    if "</body>" in html:
        return html.replace("</body>", legend + "</body>", 1)
    return html + legend
