import pytest

from draughts.board import initial_position, position_from_squares
from draughts.exceptions import SquareIndexError
from draughts.moves import MoveGenerator, MoveValidator, legal_moves, legal_moves_for_piece
from draughts.types import Color, Direction, Layout, Move

# Helpers


def destinations(result):
    moves, _ = result
    return {m.destination for m in moves}


def all_capture_moves(position):
    gen = MoveGenerator()
    found = []
    for sq in range(32):
        result = gen.legal_moves_for_piece(position, sq)
        if result:
            found.extend(m for m in result[0] if m.is_capture)
    return found


def test_simple_moves_initial_position():
    position = initial_position(Color.RED)
    moves = legal_moves(position)
    assert isinstance(moves, list)
    assert len(moves) == 7
    assert all(not m.is_capture for m in moves)
    assert all(20 <= m.origin <= 23 and 16 <= m.destination <= 19 for m in moves)


def test_outpost_layout_has_no_capture_at_start():
    position = initial_position(Color.RED, Layout.OUTPOST)
    moves = legal_moves(position)
    pairs = {(m.origin, m.destination) for m in moves}
    assert pairs == {(23, 19), (24, 20), (25, 20), (25, 21), (26, 21), (26, 22), (27, 22)}
    assert all(m.captured is None for m in moves)


def test_black_moves_first_when_black_is_local():
    position = initial_position(Color.BLACK)
    moves = legal_moves(position)
    assert moves and all(position.piece_at(m.origin).color == Color.BLACK for m in moves)
    assert all(m.destination < m.origin for m in moves)


def test_man_moves_forward_only():
    position = position_from_squares(red=[21])
    assert legal_moves_for_piece(position, 21) == ([Move(21, 17), Move(21, 18)], False)

    position = position_from_squares(black=[9], side_to_move=Color.BLACK)
    assert destinations(legal_moves_for_piece(position, 9)) == {12, 13}


def test_single_capture_replaces_simple_move():
    position = position_from_squares(red=[21], black=[17])
    result = legal_moves_for_piece(position, 21)
    assert result == ([Move(21, 12, (17,), False)], True)


def test_capture_blocked_by_occupied_landing():
    position = position_from_squares(red=[21], black=[17, 12])
    moves, taking = legal_moves_for_piece(position, 21)
    assert not taking
    assert moves == [Move(21, 18)]


def test_man_cannot_capture_backward():
    position = position_from_squares(red=[17], black=[21])
    moves, taking = legal_moves_for_piece(position, 17)
    assert not taking
    assert {m.destination for m in moves} == {12, 13}


def test_man_double_jump_is_one_move():
    position = position_from_squares(red=[21], black=[17, 9])
    assert legal_moves_for_piece(position, 21) == ([Move(21, 5, (17, 9), False)], True)


def test_king_changes_direction_during_chain():
    position = position_from_squares(red_kings=[21], black=[17, 9])
    moves, taking = legal_moves_for_piece(position, 21)
    assert taking
    assert moves == [Move(21, 5, (17, 9), False)]
    assert len(moves[0].captured) == 2


def test_king_slides_between_captures():
    # after taking 26 the king lands on 21, slides to 17 and takes 12
    position = position_from_squares(red_kings=[30], black=[26, 12])
    assert legal_moves_for_piece(position, 30) == ([Move(30, 8, (26, 12), False)], True)


def test_man_does_not_slide_between_captures():
    position = position_from_squares(red=[30], black=[26, 12])
    assert legal_moves_for_piece(position, 30) == ([Move(30, 21, (26,), False)], True)


def test_king_chain_may_end_on_its_origin():
    position = position_from_squares(red_kings=[13], black=[17, 25, 26, 18])
    moves, taking = legal_moves_for_piece(position, 13)
    assert taking
    assert Move(13, 13, (17, 25, 26, 18), False) in moves


def test_king_moves_backward_and_slides():
    position = position_from_squares(red_kings=[16])
    assert destinations(legal_moves_for_piece(position, 16)) == {12, 9, 5, 2, 20, 25, 29}


def test_king_slide_is_replaced_by_capture_along_it():
    position = position_from_squares(red_kings=[29], black=[22])
    assert legal_moves_for_piece(position, 29) == ([Move(29, 19, (22,), False)], True)


def test_king_slide_kept_when_captures_optional():
    position = position_from_squares(red_kings=[29], black=[22])
    gen = MoveGenerator(captures_mandatory=False)
    moves, taking = gen.legal_moves_for_piece(position, 29)
    assert taking
    assert Move(29, 19, (22,), False) in moves
    assert {m.destination for m in moves if not m.is_capture} == {26, 25, 20, 16}


@pytest.mark.parametrize("square", [0, 8, 16, 24])
def test_left_edge_has_no_leftward_moves(square):
    assert {d.step(square) for d in Direction if d.is_left} == {None}

    # a king only reaches squares along its two rightward diagonals
    expected = set()
    for d in (Direction.UP_RIGHT, Direction.DOWN_RIGHT):
        sq = d.step(square)
        while sq is not None:
            expected.add(sq)
            sq = d.step(sq)
    position = position_from_squares(red_kings=[square])
    assert destinations(legal_moves_for_piece(position, square)) == expected


@pytest.mark.parametrize("square", [7, 15, 23, 31])
def test_right_edge_has_no_rightward_moves(square):
    for d in Direction:
        if d.is_right:
            assert d.step(square) is None


def test_promotion_on_far_row():
    position = position_from_squares(red=[5])
    moves, _ = legal_moves_for_piece(position, 5)
    assert moves == [Move(5, 1, None, True), Move(5, 2, None, True)]

    position = position_from_squares(black=[25], side_to_move=Color.BLACK)
    moves, _ = legal_moves_for_piece(position, 25)
    assert {(m.destination, m.promotes) for m in moves} == {(28, True), (29, True)}


def test_crowned_piece_keeps_jumping_as_king():
    position = position_from_squares(red=[9], black=[5, 6])
    # crowned on 2, then jumps 6 backwards; the crown is kept off the far row
    assert legal_moves_for_piece(position, 9) == ([Move(9, 11, (5, 6), True)], True)
    assert MoveGenerator().legal_moves_for_piece(position, 9) == ([Move(9, 11, (5, 6), True)], True)


def test_crowning_capture_ends_the_move_when_disabled():
    position = position_from_squares(red=[9], black=[5, 6])
    gen = MoveGenerator(continue_after_promotion=False)
    assert gen.legal_moves_for_piece(position, 9) == ([Move(9, 2, (5,), True)], True)


def test_no_moves_is_none_not_error():
    position = position_from_squares(red=[21])
    assert legal_moves_for_piece(position, 0) is None
    blocked = position_from_squares(red=[28], black=[24, 25, 21])
    assert legal_moves_for_piece(blocked, 28) is None


def test_out_of_range_square_raises():
    position = initial_position()
    with pytest.raises(SquareIndexError):
        legal_moves_for_piece(position, 32)
    with pytest.raises(IndexError):
        legal_moves_for_piece(position, -1)


def test_mandatory_capture_across_side():
    position = position_from_squares(red=[21, 30], black=[17])
    moves = legal_moves(position)
    assert moves == [Move(21, 12, (17,), False)]

    optional = MoveGenerator(captures_mandatory=False).legal_moves(position)
    assert Move(21, 12, (17,), False) in optional
    assert any(m.origin == 30 for m in optional)


def test_side_without_pieces_vs_blocked_side():
    assert legal_moves(position_from_squares(black=[5])) is None
    blocked = position_from_squares(red=[28], black=[24, 25, 21])
    assert legal_moves(blocked) == []


def test_moves_for_explicit_color():
    position = position_from_squares(red=[21], black=[9])
    black_moves = legal_moves(position, Color.BLACK)
    assert {m.destination for m in black_moves} == {12, 13}


def test_moves_are_all_captures_or_none():
    positions = [
        initial_position(Color.RED),
        initial_position(Color.BLACK, Layout.OUTPOST),
        position_from_squares(red=[21, 30, 26], black=[17, 9, 14]),
        position_from_squares(red_kings=[29, 8], red=[27], black=[22, 10, 18], black_kings=[4]),
    ]
    for position in positions:
        for color in Color:
            moves = legal_moves(position, color)
            if moves:
                flags = {m.is_capture for m in moves}
                assert len(flags) == 1


def test_no_square_captured_twice():
    position = position_from_squares(red_kings=[29, 8], red=[27], black=[22, 10, 18, 13, 17], black_kings=[4])
    for move in all_capture_moves(position):
        assert len(set(move.captured)) == len(move.captured)
        assert move.origin not in move.captured
        assert move.destination not in move.captured


def test_move_validator_with_generated_move():
    position = initial_position()
    move = legal_moves(position)[0]
    assert MoveValidator.validate(position, move)
    assert not MoveValidator.validate(position, Move(20, 12))
