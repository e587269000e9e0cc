"""
Main Streamlit application.
"""

import logging

import streamlit as st

from config import BOARD_SIZES, DEFAULT_BOARD_SIZE, SELF_PLAY_ROUNDS
from models import Move, Side
from persistence import MalformedRecordError, format_game, parse_game
from rounds import RoundController
from simulation import simulate_tournament
from strategy import ComputerMoveSource, choose_dice_count, explain_move, recommend_move
from tournament import TournamentController

from ui import (
    print_rules,
    render_advantage_status,
    render_board,
    render_combinations,
    render_log,
    render_scoreboard,
    render_self_play_stats,
)


FIRST_PLAYER_CHOICES = {
    "Roll dice to decide": None,
    "Human goes first": Side.HUMAN,
    "Computer goes first": Side.COMPUTER,
}


class SelectedMove:
    """Move source for the human: replays the move picked on the page."""

    def __init__(self, move: Move):
        self.move = move

    def choose_dice_count(self, own_board) -> int:
        return 2

    def select_move(self, dice_sum, own_board, opp_board, context) -> Move:
        return self.move


def add_log(message: str) -> None:
    st.session_state["log"].append(message)


def start_round(board_size: int, first_choice: str) -> None:
    tournament: TournamentController = st.session_state["tournament"]
    round_ = tournament.new_round(board_size, FIRST_PLAYER_CHOICES[first_choice])
    for human_roll, computer_roll in round_.first_rolls:
        add_log(f"Toss: Human rolled {human_roll}, Computer rolled {computer_roll}")
    add_log(f"New round on {board_size} squares. {round_.first_player.value} plays first.")
    if tournament.advantage.is_applied():
        owner = tournament.advantage.owner()
        add_log(f"Advantage: {owner.value} starts with square {tournament.advantage.square()} covered.")


def dice_inputs(count: int, key: str) -> tuple:
    """Number inputs for `count` dice typed in by hand."""
    cols = st.columns(count)
    return tuple(
        int(col.number_input(f"Die {i}", min_value=1, max_value=6, value=1, step=1, key=f"{key}_die_{i}"))
        for i, col in enumerate(cols, start=1)
    )


def render_setup(tournament: TournamentController) -> None:
    st.subheader("New round")
    col_size, col_first, col_go = st.columns([1, 1, 1])
    with col_size:
        board_size = st.selectbox(
            "Board size", BOARD_SIZES, index=BOARD_SIZES.index(tournament.board_size)
        )
    with col_first:
        first_choice = st.radio("Who goes first?", list(FIRST_PLAYER_CHOICES))
    with col_go:
        if st.button("▶ Start round"):
            start_round(board_size, first_choice)
            st.rerun()

    uploaded = st.file_uploader("…or load a saved game", type=["txt"])
    if uploaded is not None and st.button("📂 Load"):
        try:
            game = parse_game(uploaded.getvalue().decode("utf-8"))
        except (MalformedRecordError, UnicodeDecodeError) as e:
            st.error(f"Unable to load game: {e}")
        else:
            tournament.restore(game)
            add_log(f"Game loaded. Next turn: {game.next_player.value}.")
            st.rerun()


def render_human_turn(round_: RoundController, tournament: TournamentController) -> None:
    st.markdown("### Your turn")

    if round_.dice_sum is None:
        col_two, col_one = st.columns(2)
        with col_two:
            if st.button("🎲 Roll two dice"):
                round_.roll(2)
                add_log(f"You rolled {' + '.join(map(str, round_.dice))} = {round_.dice_sum}")
                st.rerun()
        with col_one:
            if round_.can_roll_one_die() and st.button("🎲 Roll one die"):
                round_.roll(1)
                add_log(f"You rolled {round_.dice_sum} (one die)")
                st.rerun()
        with st.expander("Enter dice manually"):
            count = 2
            if round_.can_roll_one_die():
                count = st.radio("Dice", [2, 1], horizontal=True, key="human_dice_count")
            dice = dice_inputs(count, "human")
            if st.button("Use these dice"):
                round_.roll(dice=dice)
                add_log(f"You entered {' + '.join(map(str, round_.dice))} = {round_.dice_sum}")
                st.rerun()
        return

    st.write(f"Dice: {' + '.join(map(str, round_.dice))} = **{round_.dice_sum}**")
    cover, uncover = round_.legal_moves()

    if not cover and not uncover:
        st.warning("No legal moves for this roll. Your turn ends.")
        if st.button("End turn"):
            add_log("You had no legal move.")
            finish_turn(round_)
            st.rerun()
        return

    col_cover, col_uncover = st.columns(2)
    with col_cover:
        render_combinations("Cover (your board)", cover)
    with col_uncover:
        render_combinations("Uncover (computer's board)", uncover)

    with st.expander("Ask the computer for help"):
        advice = recommend_move(round_.dice_sum, round_.human_board, round_.computer_board, tournament.advantage)
        context = round_.context()
        for line in explain_move(advice, round_.human_board, round_.computer_board, context.opponent_protected):
            st.write(line)

    actions = []
    if cover:
        actions.append("Cover")
    if uncover:
        actions.append("Uncover")
    action = st.radio("Action", actions, horizontal=True)
    combos = cover if action == "Cover" else uncover
    choice = st.selectbox(
        "Combination",
        range(len(combos)),
        format_func=lambda i: ", ".join(str(s) for s in combos[i]),
    )

    if st.button("✅ Apply move"):
        move = Move.cover(combos[choice]) if action == "Cover" else Move.uncover(combos[choice])
        if round_.take_move(SelectedMove(move)):
            add_log(f"You: {move}")
            if round_.board_decided():
                finish_turn(round_)
        else:
            st.error("That move is not allowed.")
        st.rerun()


def log_computer(source: ComputerMoveSource) -> None:
    for line in source.transcript:
        add_log(f"Computer: {line}")


def render_computer_turn(round_: RoundController) -> None:
    st.markdown("### Computer's turn")
    col_auto, col_manual = st.columns(2)
    with col_auto:
        if st.button("🤖 Play computer turn"):
            source = ComputerMoveSource()
            round_.play_turn(source)
            log_computer(source)
            if not source.transcript:
                add_log("Computer had no legal move.")
            if round_.is_over:
                add_log(round_.result.describe())
            st.rerun()

    with col_manual:
        st.caption("Or enter each computer roll by hand")
        count = choose_dice_count(round_.computer_board)
        dice = dice_inputs(count, "computer")
        if st.button("🎲 Computer rolls these dice"):
            source = ComputerMoveSource()
            again = round_.play_roll(source, dice)
            log_computer(source)
            if not source.transcript:
                add_log(f"Computer rolled {sum(dice)} and has no legal move.")
            if not again:
                finish_turn(round_)
            st.rerun()


def finish_turn(round_: RoundController) -> None:
    result = round_.end_turn()
    if result is not None:
        add_log(result.describe())


def render_round_over(round_: RoundController, tournament: TournamentController) -> None:
    st.success(round_.result.describe())
    col_next, col_end = st.columns(2)
    with col_next:
        board_size = st.selectbox(
            "Next board size", BOARD_SIZES, index=BOARD_SIZES.index(tournament.board_size)
        )
        first_choice = st.radio("Who goes first?", list(FIRST_PLAYER_CHOICES), key="next_first")
        if st.button("🔁 Play another round"):
            start_round(board_size, first_choice)
            st.rerun()
    with col_end:
        if st.button("🏁 End tournament"):
            st.session_state["finished"] = True
            st.rerun()


def run_app() -> None:
    """Run the main Streamlit application."""
    st.set_page_config(page_title="Canoga", layout="wide")
    st.title("Canoga")

    if "tournament" not in st.session_state:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
        st.session_state["tournament"] = TournamentController(DEFAULT_BOARD_SIZE)
        st.session_state["log"] = []
        st.session_state["finished"] = False

    tournament: TournamentController = st.session_state["tournament"]
    round_ = tournament.round

    with st.expander("Game rules", expanded=False):
        print_rules()

    if st.session_state["finished"]:
        st.subheader(tournament.summary())
        render_scoreboard(tournament.state)
        if st.button("🔁 New tournament"):
            del st.session_state["tournament"]
            st.rerun()
        return

    if round_ is None:
        render_setup(tournament)
        render_scoreboard(tournament.state)
        return

    board_col, side_col = st.columns([1.6, 1])

    with board_col:
        render_board(round_.computer_board, Side.COMPUTER, tournament.advantage)
        render_board(round_.human_board, Side.HUMAN, tournament.advantage)
        render_advantage_status(tournament.advantage)

        if round_.is_over:
            render_round_over(round_, tournament)
        elif round_.human_turn:
            render_human_turn(round_, tournament)
        else:
            render_computer_turn(round_)

        if not round_.is_over and round_.dice_sum is None:
            st.download_button(
                "💾 Save game",
                data=format_game(tournament.snapshot()),
                file_name="canoga_save.txt",
                mime="text/plain",
            )

    with side_col:
        render_scoreboard(tournament.state)
        render_log(st.session_state["log"])

        with st.expander("Strategy self-play statistics"):
            if st.button("Run self-play"):
                stats = simulate_tournament(SELF_PLAY_ROUNDS, board_size=tournament.board_size)
                render_self_play_stats(stats)
                st.caption(f"Computer vs computer over {SELF_PLAY_ROUNDS} rounds.")


if __name__ == "__main__":
    run_app()
