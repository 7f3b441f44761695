"""Tests for per-game signal extraction."""

from chesscard.game_data import GameRecord, PlayerSide
from chesscard.pgn_features import (
    ResultClass,
    classify_result,
    extract_features,
    extract_opening_labels,
)

from conftest import ITALIAN_PGN, make_game


def test_extracts_counts_from_italian_game() -> None:
    features = extract_features(make_game(pgn=ITALIAN_PGN), "hero")

    assert features.is_white is True
    assert features.result_class is ResultClass.WIN
    assert features.captures == 2
    assert features.checks == 1
    assert features.castles == 1
    assert features.promotions == 0
    assert features.move_number_count == 10
    assert features.opening_labels == ("Italian Game", "e4")


def test_acting_player_is_matched_case_insensitively_as_black() -> None:
    game = make_game(white="Villain", black="HERO", white_result="resigned", black_result="win")

    features = extract_features(game, "hero")

    assert features.is_white is False
    assert features.my_result == "win"
    assert features.opponent_result == "resigned"
    assert features.result_class is ResultClass.WIN
    assert features.opponent_resigned is True


def test_loss_labels_classify_as_loss() -> None:
    for label in ("checkmated", "resigned", "timeout", "abandoned"):
        assert classify_result(label) is ResultClass.LOSS


def test_unknown_and_missing_results_classify_as_draw() -> None:
    assert classify_result("agreed") is ResultClass.DRAW
    assert classify_result("timevsinsufficient") is ResultClass.DRAW
    assert classify_result("") is ResultClass.DRAW

    game = make_game(white_result=None, black_result=None)
    assert extract_features(game, "hero").result_class is ResultClass.DRAW


def test_queenside_castle_counts_once() -> None:
    features = extract_features(make_game(pgn="1. e4 e5 2. O-O-O O-O"), "hero")

    assert features.castles == 2


def test_promotions_require_piece_letter() -> None:
    features = extract_features(make_game(pgn="40. e8=Q a1=N 41. h8=K"), "hero")

    assert features.promotions == 2


def test_missing_pgn_yields_zero_counts() -> None:
    game = GameRecord.from_api({"white": {"username": "Hero", "result": "win"}})

    features = extract_features(game, "hero")

    assert features.captures == 0
    assert features.checks == 0
    assert features.castles == 0
    assert features.move_number_count == 0
    assert features.opening_labels == ()
    assert features.result_class is ResultClass.WIN


def test_malformed_record_does_not_raise() -> None:
    game = GameRecord(pgn=None, white=None, black=PlayerSide(username="Villain"))

    features = extract_features(game, "hero")

    assert features.is_white is False
    assert features.result_class is ResultClass.DRAW
    assert features.captures == 0


def test_first_move_fallback_without_opening_tag() -> None:
    pgn = '[Event "Live Chess"]\n[ECO "D00"]\n\n1. d4 d5 2. Bf4 Nf6'

    assert extract_opening_labels(pgn) == ["d4"]


def test_opening_tag_without_variation_is_kept_whole() -> None:
    pgn = '[Opening "Caro-Kann Defense"]\n\n1.e4 c6'

    assert extract_opening_labels(pgn) == ["Caro-Kann Defense", "e4"]


def test_no_labels_without_tag_or_first_move() -> None:
    assert extract_opening_labels('[Event "Live Chess"]') == []


def test_mistyped_api_fields_degrade_to_empty() -> None:
    game = GameRecord.from_api({
        "pgn": 123,
        "white": {"username": 42, "result": ["win"]},
        "black": "Villain",
    })

    assert game.pgn == ""
    assert game.white == PlayerSide(username="")
    assert game.black == PlayerSide(username="")
    assert GameRecord.from_api(["not", "a", "game"]).pgn == ""


def test_mistyped_record_fields_do_not_raise() -> None:
    game = GameRecord(
        pgn=["1. e4"],
        white=PlayerSide(username=42, result=7),
        black=PlayerSide(username="hero", result=None),
    )

    features = extract_features(game, "hero")

    assert features.is_white is False
    assert features.result_class is ResultClass.DRAW
    assert features.captures == 0
    assert features.move_number_count == 0
    assert features.opening_labels == ()
