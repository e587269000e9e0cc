"""
UI components and visualization helpers.
"""

from typing import List, Optional

import pandas as pd
import plotly.express as px
import streamlit as st

from config import COLOR_MAP, ONE_DIE_RULE_START, SIDE_COLORS
from models import BoardState, Combination, Side, TournamentState
from advantage import AdvantageManager


def print_rules() -> None:
    """Display the game rules."""
    st.markdown("### How to play")
    st.write("Each player has a row of squares numbered 1..N (N = 9, 10 or 11).")
    st.write("On your turn, roll the dice and either:")
    st.write("- cover squares on your own board that add up to the roll, or")
    st.write("- uncover squares on the opponent's board that add up to the roll.")
    st.write("You keep rolling until no legal move remains.")
    st.write(
        f"Once squares {ONE_DIE_RULE_START}..N are all covered you may roll a single die."
    )
    st.write("Win by covering all your squares (you score the opponent's uncovered total) "
             "or uncovering all of the opponent's (you score your own covered total).")
    st.info(
        "Advantage: the previous round's winning score decides a square (sum of its digits). "
        "If the winner went first, the loser gets it; otherwise the winner does. "
        "It starts covered and cannot be uncovered until the opponent finishes one turn."
    )


def render_board(board: BoardState, side: Side, advantage: Optional[AdvantageManager] = None) -> None:
    """Plot one board with Plotly: one marker per square, colored by state."""
    highlight = 0
    if advantage is not None and advantage.is_applied() and advantage.owner() is side:
        highlight = advantage.square()

    rows = []
    for square in range(1, board.size + 1):
        if square == highlight:
            state = "Advantage"
        elif board.is_covered(square):
            state = "Covered"
        else:
            state = "Uncovered"
        rows.append({"square": square, "row": 0, "state": state, "label": str(square)})

    df = pd.DataFrame(rows)
    fig = px.scatter(
        df,
        x="square",
        y="row",
        color="state",
        text="label",
        color_discrete_map=COLOR_MAP,
        hover_name="label",
    )
    fig.update_traces(
        marker=dict(size=34, symbol="square", line=dict(width=2, color=SIDE_COLORS[side.value])),
        textposition="middle center",
    )
    fig.update_layout(
        title=f"{side.value} board",
        xaxis=dict(dtick=1, range=[0.5, board.size + 0.5], visible=False),
        yaxis=dict(visible=False),
        height=160,
        margin=dict(l=10, r=10, t=30, b=10),
        legend_title_text="",
    )
    st.plotly_chart(fig, use_container_width=True)


def render_combinations(title: str, combos: List[Combination]) -> None:
    """Render the available combinations as a numbered table."""
    st.markdown(f"#### {title}")
    if not combos:
        st.write("*none*")
        return
    df = pd.DataFrame(
        [
            {"#": i, "Squares": ", ".join(str(s) for s in c), "Count": len(c), "Highest": max(c)}
            for i, c in enumerate(combos, start=1)
        ]
    )
    st.dataframe(df, use_container_width=True, hide_index=True)


def render_scoreboard(state: TournamentState) -> None:
    """Cumulative scores and round history."""
    st.markdown("#### Score board")
    col_h, col_c = st.columns(2)
    col_h.metric("Your score", state.score_human)
    col_c.metric("Computer's score", state.score_computer)

    if state.history:
        df = pd.DataFrame(
            [
                {
                    "Round": i,
                    "Winner": r.winner.value,
                    "Win type": r.win_type.value,
                    "Points": r.score,
                    "Winner went first": r.winner_was_first,
                }
                for i, r in enumerate(state.history, start=1)
            ]
        )
        st.dataframe(df, use_container_width=True, hide_index=True)


def render_advantage_status(advantage: AdvantageManager) -> None:
    if advantage.is_applied():
        owner = advantage.owner()
        st.caption(
            f"Advantage: square {advantage.square()} belongs to {owner.value}"
            + (" (protected)" if advantage.is_protected(owner) else "")
        )
    if advantage.pending_for is not None:
        st.caption(
            f"Queued for next round: square {advantage.pending_square} -> {advantage.pending_for.value}"
        )


def render_log(lines: List[str]) -> None:
    """Most recent game messages, newest first."""
    st.markdown("#### Game log")
    if not lines:
        st.write("*Nothing yet*")
        return
    for line in reversed(lines[-20:]):
        st.write(line)


def render_self_play_stats(stats: dict) -> None:
    """Win counts and win types from computer-vs-computer play."""
    rows = [
        {"Side": side, "Win type": win_type, "Rounds": count}
        for (side, win_type), count in sorted(stats["win_types"].items())
    ]
    if rows:
        df = pd.DataFrame(rows)
        fig = px.bar(
            df,
            x="Side",
            y="Rounds",
            color="Win type",
            barmode="stack",
            color_discrete_sequence=["#4daf4a", "#984ea3"],
        )
        fig.update_layout(height=300, margin=dict(l=10, r=10, t=30, b=10))
        st.plotly_chart(fig, use_container_width=True)

    st.write(f"First player won {stats['first_player_wins']} rounds.")
    st.write(f"Average points per round: {stats['avg_score']:.2f}")
    if stats["unfinished"]:
        st.write(f"Rounds stopped without a winner: {stats['unfinished']}")
