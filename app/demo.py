"""
Contribution Minesweeper - Interactive Demo

Run with: streamlit run app/demo.py
"""

import random
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import streamlit as st
from typing import List, Optional, Tuple

from contribsweeper import (
    ActionKind,
    Board,
    CellState,
    GameStatus,
    Outcome,
    apply_actions,
    board_from_contributions,
    create_board,
    generate_mock_contributions,
    normalize_trailing_year,
    place_mines_by_weight,
    place_random_mines,
    restore,
    snapshot,
    solve,
)
from contribsweeper.analysis import LEVELS, format_actions

COLORS = {
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}


def _cell_size(cols: int) -> Tuple[int, str]:
    if cols >= 30:
        return 14, "10px"
    if cols >= 16:
        return 20, "13px"
    return 26, "15px"


def render_board_html(
    board: Board,
    highlight_cell: Optional[Tuple[int, int]] = None,
    show_mines: bool = False,
) -> str:
    """Render the board as an HTML table; payload cells carry a date tooltip."""
    cell_size, font_size = _cell_size(board.cols)
    has_payload = any(c.has_payload for c in board.iter_cells())

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for y in range(board.rows):
        html += "<tr>"
        for x in range(board.cols):
            cell = board.cell(x, y)

            if cell.state is CellState.FLAGGED:
                text, bg, color = "F", "#ffa500", "#ffffff"
            elif cell.state is CellState.REVEALED and cell.is_mine:
                text, bg, color = "M", "#ff0000", "#ffffff"
            elif cell.state is CellState.REVEALED:
                count = cell.adjacent_mine_count
                text = str(count) if count else " "
                bg = "#f0f0f0" if count == 0 else "#ffffff"
                color = COLORS.get(text, "#000000")
            elif show_mines and cell.is_mine:
                text, bg, color = "M", "#ffcccc", "#ff0000"
            elif has_payload and not cell.has_payload:
                text, bg, color = " ", "#e8e8e8", "#e8e8e8"
            else:
                text, bg, color = ".", "#c0c0c0", "#666666"

            border = "2px solid #ff0000" if (x, y) == highlight_cell else "1px solid #999"
            title = ""
            if cell.has_payload:
                title = f' title="{cell.source_date}: {cell.source_weight} contributions"'

            html += f'''<td{title} style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {color};
                font-weight: bold;
                font-size: {font_size};
            ">{text}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def build_board(source: str, seed: int, ratio: float) -> Board:
    """Fresh board for the chosen source: mock contribution year or a difficulty level."""
    rng = random.Random(seed)
    if source == "Contributions (mock year)":
        days = normalize_trailing_year(generate_mock_contributions(rng=rng))
        board = board_from_contributions(days)
        place_mines_by_weight(board, ratio, np.random.default_rng(seed))
        return board

    cols, rows, mines = LEVELS[source.lower()]
    board = create_board(rows, cols)
    place_random_mines(board, mines, rng)
    return board


def _reset_state() -> None:
    st.session_state.result = None
    st.session_state.current_step = 0
    st.session_state.replay_mode = False


def main():
    st.set_page_config(
        page_title="Contribution Minesweeper",
        page_icon="💣",
        layout="wide",
    )

    st.title("Contribution Minesweeper")
    st.markdown("""
    A Minesweeper board laid out like a contribution calendar, solved with
    neighbor rules, subset deduction, exhaustive group enumeration and
    probability-guided guessing.
    """)

    st.sidebar.header("Board")
    source = st.sidebar.selectbox(
        "Source",
        ["Contributions (mock year)", "Beginner", "Intermediate", "Expert"],
    )
    ratio = st.sidebar.slider(
        "Mine ratio", 0.05, 0.3, 0.12, step=0.01,
        help="Share of contribution days holding a mine; quiet days are likelier.",
        disabled=source != "Contributions (mock year)",
    )
    seed = int(st.sidebar.number_input("Seed", min_value=0, value=0, step=1))

    st.sidebar.header("Solver")
    max_group_size = st.sidebar.slider("Max enumerated group size", 4, 16, 12)
    enable_guess = st.sidebar.checkbox("Random guess fallback", value=True)

    if "board" not in st.session_state:
        st.session_state.board = None
        st.session_state.prev_settings = None
        _reset_state()

    current_settings = (source, seed, ratio)
    if st.session_state.prev_settings != current_settings:
        st.session_state.board = build_board(source, seed, ratio)
        st.session_state.prev_settings = current_settings
        _reset_state()

    col1, col2 = st.columns([4, 1])

    with col1:
        st.subheader("Board")

        btn_col1, btn_col2 = st.columns(2)
        with btn_col1:
            if st.button("Regenerate Board", type="primary"):
                st.session_state.board = build_board(source, seed, ratio)
                _reset_state()
                st.rerun()
        with btn_col2:
            if st.button("Solve"):
                # Re-solving always starts from an untouched copy of the layout.
                fresh = restore(snapshot(st.session_state.board))
                result = solve(
                    fresh,
                    enable_guess=enable_guess,
                    max_group_size=max_group_size,
                    rng=random.Random(seed),
                )
                st.session_state.result = result
                st.session_state.current_step = len(result.actions) - 1
                st.rerun()

        result = st.session_state.result
        board = st.session_state.board
        highlight: Optional[Tuple[int, int]] = None

        if result is not None and result.actions:
            st.markdown("---")
            st.session_state.replay_mode = st.checkbox(
                "Step-by-Step Replay Mode", value=st.session_state.replay_mode
            )

            total = len(result.actions)
            if st.session_state.replay_mode and total > 1:
                step = st.slider("Step", 1, total, st.session_state.current_step + 1)
                st.session_state.current_step = step - 1
            else:
                st.session_state.current_step = total - 1

            shown = result.actions[: st.session_state.current_step + 1]
            board = apply_actions(restore(result.snapshot), shown)

            action = shown[-1]
            highlight = (action.x, action.y)
            label = f"**Step {len(shown)}/{total}**: {action.kind.value} ({action.x}, {action.y})"
            if action.kind is ActionKind.FLOOD:
                label += f" opened {action.flood_extra} more"
            if action.outcome is Outcome.BOOM:
                st.error(label + " - hit a mine")
            elif board.status is GameStatus.WON:
                st.success(label + " - board cleared")
            else:
                st.info(label)

        show_mines = result is not None and board.status is not GameStatus.PLAYING
        st.markdown(render_board_html(board, highlight, show_mines), unsafe_allow_html=True)

        st.markdown("""
        <div style="font-size: 12px; margin-top: 10px;">
        <b>Legend:</b>
        <span style="background: #c0c0c0; color: #666666; padding: 2px 6px; margin: 0 4px; font-weight: bold;">.</span> Hidden
        <span style="background: #ffa500; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">F</span> Flagged
        <span style="background: #ffcccc; color: #ff0000; padding: 2px 6px; margin: 0 4px; font-weight: bold;">M</span> Mine
        <span style="background: #ff0000; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">M</span> Hit mine
        </div>
        """, unsafe_allow_html=True)

    with col2:
        st.subheader("Solver Statistics")
        result = st.session_state.result
        if result is None:
            st.info("Run the solver to see statistics.")
            return

        stats = result.stats
        metrics: List[Tuple[str, object]] = [
            ("Result", result.final_status.value.capitalize()),
            ("Turns", result.iterations),
            ("Actions", len(result.actions)),
            ("Guesses (incl. opening)", stats.guesses + 1),
        ]
        for label, value in metrics:
            st.metric(label, value)

        st.markdown("---")
        st.text(f"Basic rules:  {stats.basic_moves}")
        st.text(f"Subset:       {stats.subset_moves}")
        st.text(f"Enumeration:  {stats.enumeration_moves}")
        st.text(f"Skipped groups: {stats.skipped_groups}")

        with st.expander("Action trace"):
            st.code(format_actions(result.actions) or "(empty)")


if __name__ == "__main__":
    main()
