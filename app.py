"""Streamlit UI for bathroom_stalls with case file upload and split trees."""
from __future__ import annotations

# Add src to sys.path so bathroom_stalls can be found
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from bathroom_stalls.case_loader import parse_case_line, parse_queries_text
from bathroom_stalls.case_writer import format_results, results_frame
from bathroom_stalls.compare import compare_bytes
from bathroom_stalls.models import Query
from bathroom_stalls.simulate import MAX_SIMULATED_STALLS, occupancy
from bathroom_stalls.solver import StallSolver, describe_last_layer
from bathroom_stalls.split_tree import MAX_TREE_CUSTOMERS, generate_split_tree

# -----------------------------
# Helpers
# -----------------------------

def uploaded_text(uploaded_file) -> str | None:
    """Decode a Streamlit UploadedFile as ASCII text."""
    if uploaded_file is None:
        return None
    uploaded_file.seek(0)
    return uploaded_file.read().decode("ascii")


def layer_table(query: Query) -> pd.DataFrame:
    """Show the last layer breakdown as a two column table."""
    last = describe_last_layer(query)
    rows = [
        ("last layer", last.layer),
        ("customers in earlier layers", last.customers_before),
        ("free stalls entering the layer", last.free_stalls),
        ("groups in the layer", last.groups),
        ("large group size", last.large_size),
        ("large groups", last.large_groups),
        ("small group size", last.small_size),
        ("small groups", last.small_groups),
        ("customers in the layer", last.customers_in_layer),
        ("group split by the last customer", last.chosen_size),
    ]
    return pd.DataFrame(rows, columns=["quantity", "value"])


solver = StallSolver()

# -----------------------------
# Main UI
# -----------------------------

st.title("Bathroom Stalls")

tab_file, tab_single = st.tabs(["Case file", "Single query"])

with tab_file:
    _cases_file = st.file_uploader("Case file", type=["in", "txt"])
    _expected_file = st.file_uploader("Expected output (optional)", type=["txt", "out"])

    if _cases_file is not None:
        try:
            queries = parse_queries_text(uploaded_text(_cases_file))
            results = solver.solve_all(queries)
        except ValueError as e:
            st.error(f"Input validation error: {e}")
            st.stop()

        st.subheader("Results")
        st.dataframe(results_frame(queries, results), use_container_width=True)

        output = format_results(results)
        st.download_button(
            "Download output",
            output.encode("ascii"),
            file_name="output.txt",
        )

        if _expected_file is not None:
            _expected_file.seek(0)
            mismatch = compare_bytes(output.encode("ascii"), _expected_file.read())
            if mismatch is None:
                st.success("Files are identical")
            else:
                st.error(mismatch.describe())

with tab_single:
    # number_input tops out at 64 bits
    case_line = st.text_input("Stalls and customers", value="20 6",
                              help="Two integers separated by a space, as in a case file line.")

    try:
        query = parse_case_line(case_line, 1)
    except ValueError as e:
        st.error(f"Input validation error: {e}")
        st.stop()

    result = solver.solve(query)
    col_max, col_min = st.columns(2)
    col_max.metric("Max adjacent free", result.max_adjacent)
    col_min.metric("Min adjacent free", result.min_adjacent)

    st.subheader("Last layer")
    st.dataframe(layer_table(query), use_container_width=True, hide_index=True)

    if query.stalls <= 200:
        st.subheader("Row after seating")
        st.code(occupancy(query.stalls, query.customers))

    if query.customers <= MAX_TREE_CUSTOMERS and query.stalls <= MAX_SIMULATED_STALLS:
        st.subheader("Split tree")
        components.html(
            generate_split_tree(query.stalls, query.customers),
            height=650,
            scrolling=True,
        )
    else:
        st.info(
            f"Split trees are drawn for up to {MAX_TREE_CUSTOMERS} customers "
            f"and {MAX_SIMULATED_STALLS} stalls."
        )
