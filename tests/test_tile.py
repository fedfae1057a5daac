"""Tests for wfc_core.tile and wfc_core.palette."""

import pytest

from wfc_core import DEFAULT_PALETTE, Equivalence, Orientation, Prototype, Tile, TileSelection, make_prototypes, prototype_for

N, E, S, W = Orientation.NORTH, Orientation.EAST, Orientation.SOUTH, Orientation.WEST


class TestOrientation:
    """Tests for rotation and offsets of Orientation."""

    def test_rotate_wraps_both_ways(self):
        """Test rotation is modulo 4, negative amounts included."""
        orientation = N.rotated(-2)
        assert orientation == S
        orientation = orientation.rotated(1)
        assert orientation == W
        assert W.rotated(1) == N
        assert E.rotated(7) == N

    def test_four_quarter_turns_is_identity(self):
        """Test every orientation comes back after 4 turns."""
        for orientation in Orientation.values():
            assert orientation.rotated(4) == orientation

    def test_opposites(self):
        """Test opposite sides."""
        assert N.opposite == S
        assert E.opposite == W
        assert S.opposite == N
        assert W.opposite == E

    @pytest.mark.parametrize("orientation,expected", [
        (Orientation.NORTH, (3, 6)),
        (Orientation.EAST, (4, 5)),
        (Orientation.SOUTH, (3, 4)),
        (Orientation.WEST, (2, 5)),
    ])
    def test_offset(self, orientation, expected):
        """Test the neighbor coordinates in each direction."""
        assert orientation.offset((3, 5)) == expected

    def test_offset_can_leave_the_grid(self):
        """Test offsets are plain arithmetic, bounds are checked by the grids."""
        assert W.offset((0, 0)) == (-1, 0)
        assert S.offset((0, 0)) == (0, -1)

    def test_values_order(self):
        """Test deterministic N, E, S, W iteration."""
        assert Orientation.values() == (N, E, S, W)

    def test_letters(self):
        """Test letter round trip and parsing errors."""
        assert [o.letter for o in Orientation.values()] == ["N", "E", "S", "W"]
        assert Orientation.from_letter("w") == W
        with pytest.raises(ValueError):
            Orientation.from_letter("X")


class TestEquivalence:
    """Tests for rotational symmetry classes."""

    @pytest.mark.parametrize("equivalence,count", [
        (Equivalence.NONE, 4),
        (Equivalence.HALF_TURN, 2),
        (Equivalence.QUARTER_TURN, 1),
    ])
    def test_variant_cardinality(self, equivalence, count):
        """Test the number of distinct tiles over k in 0..3."""
        prototype = Prototype(7, "p", equivalence)
        tiles = {prototype.make_rotated_tile(N, k) for k in range(4)}
        assert len(tiles) == count
        assert equivalence.variant_count == count
        assert prototype.variants() == tiles

    def test_half_turn_folding(self, half):
        """Test N/S fold to N and E/W fold to E."""
        assert half.make_rotated_tile(N, 2) == Tile(1, N)
        assert half.make_rotated_tile(N, 1) == Tile(1, E)
        assert half.make_rotated_tile(N, 3) == Tile(1, E)
        assert half.make_rotated_tile(E, 2) == Tile(1, E)

    def test_quarter_turn_folding(self, quarter):
        """Test every rotation folds to north."""
        for base in Orientation.values():
            for k in range(-3, 5):
                assert quarter.make_rotated_tile(base, k) == Tile(2, N)

    def test_aliased_rotations_hash_equal(self, half):
        """Test tiles obtained by different rotations are interchangeable in sets."""
        tiles = {half.make_rotated_tile(N, 0), half.make_rotated_tile(N, 2), half.make_rotated_tile(S, 0)}
        assert tiles == {Tile(1, N)}

    @pytest.mark.parametrize("value,expected", [
        ("none", Equivalence.NONE),
        ("Half", Equivalence.HALF_TURN),
        ("half turn", Equivalence.HALF_TURN),
        ("QUARTER_TURN", Equivalence.QUARTER_TURN),
        (None, Equivalence.NONE),
        (Equivalence.QUARTER_TURN, Equivalence.QUARTER_TURN),
    ])
    def test_parse(self, value, expected):
        """Test loose parsing of custom property values."""
        assert Equivalence.parse(value) == expected

    def test_parse_rejects_unknown(self):
        """Test an unknown symmetry name is an error."""
        with pytest.raises(ValueError):
            Equivalence.parse("octagonal")


class TestPrototype:
    """Tests for tile creation from prototypes."""

    def test_make_tile_does_not_canonicalise(self, half):
        """Test make_tile keeps the orientation as given."""
        assert half.make_tile(S) == Tile(1, S)

    @pytest.mark.parametrize("equivalence", list(Equivalence))
    def test_rotation_closure(self, equivalence):
        """Test 4 quarter turns bring any canonical tile back to itself."""
        prototype = Prototype(3, "p", equivalence)
        for tile in prototype.variants():
            assert prototype.make_rotated_tile(tile.orientation, 4) == tile
            assert prototype.make_rotated_tile(tile.orientation, 0) == tile

    def test_rotation_composes(self, plain):
        """Test rotating by a then b equals rotating by a + b."""
        for a in range(4):
            for b in range(4):
                once = plain.make_rotated_tile(N, a)
                assert plain.make_rotated_tile(once.orientation, b) == plain.make_rotated_tile(N, a + b)

    def test_tiles_are_immutable(self):
        """Test tiles cannot be modified in place."""
        tile = Tile(0, N)
        with pytest.raises(AttributeError):
            tile.orientation = E  # type: ignore


class TestTileSelection:
    """Tests for the palette selection with accumulated rotation."""

    def test_empty_selection(self):
        """Test no prototype means no tile."""
        assert TileSelection().make_tile() is None

    def test_accumulated_rotation(self, plain):
        """Test scroll-like rotation accumulates and wraps."""
        selection = TileSelection(plain)
        selection.rotate(1)
        assert selection.make_tile() == Tile(0, E)
        selection.rotate(-3)
        assert selection.make_tile() == Tile(0, S)
        selection.rotate(6)
        assert selection.make_tile() == Tile(0, N)

    def test_symmetric_selection_is_canonical(self, half):
        """Test a half-turn prototype rotated twice gives the north tile."""
        assert TileSelection(half, 2).make_tile() == Tile(1, N)


class TestPalette:
    """Tests for the default palette."""

    def test_default_palette(self):
        """Test the default kit is indexed in order."""
        prototypes = make_prototypes()
        assert len(prototypes) == len(DEFAULT_PALETTE) == 25
        assert [p.index for p in prototypes] == list(range(25))
        assert prototypes[3].name == "ground_grass"
        assert prototypes[3].equivalence is Equivalence.QUARTER_TURN

    def test_prototype_for_unknown_index(self):
        """Test a tile pointing outside the palette raises KeyError."""
        prototypes = make_prototypes([("a", "none")])
        assert prototype_for(prototypes, Tile(0, N)).name == "a"
        with pytest.raises(KeyError):
            prototype_for(prototypes, Tile(4, N))
