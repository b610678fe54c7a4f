import pytest

from world.grid import Cell, CoordinateGrid, GeoPoint


def test_cell_for_point_floors_both_axes():
    grid = CoordinateGrid(1e-4)
    assert grid.cell_for_point(GeoPoint(lat=0.00025, lng=0.00005)) == Cell(2, 0)


def test_cell_for_point_negative_coordinates():
    grid = CoordinateGrid(1e-4)
    # floor, not truncation toward zero
    assert grid.cell_for_point(GeoPoint(lat=-0.00005, lng=-0.00015)) == Cell(-1, -2)


def test_cell_key_roundtrip():
    cell = Cell(3, -7)
    assert cell.key == "3,-7"
    assert Cell.from_key("3,-7") == cell
    with pytest.raises(ValueError):
        Cell.from_key("3;-7")


def test_bounds_are_memoized():
    grid = CoordinateGrid(1e-4)
    first = grid.bounds_for_cell(Cell(1, 2))
    second = grid.bounds_for_cell(Cell(1, 2))
    assert first is second
    assert first.south == pytest.approx(1e-4)
    assert first.north == pytest.approx(2e-4)
    assert first.west == pytest.approx(2e-4)
    assert first.east == pytest.approx(3e-4)


def test_bounds_contain_their_center():
    grid = CoordinateGrid(1e-4)
    for cell in (Cell(0, 0), Cell(-3, 5), Cell(12, -9)):
        center = grid.center_of(cell)
        assert grid.bounds_for_cell(cell).contains(center)
        assert grid.cell_for_point(center) == cell


def test_cells_near_is_a_square():
    grid = CoordinateGrid(1e-4)
    origin = GeoPoint(lat=0.00005, lng=0.00005)
    for radius in (0, 1, 3):
        cells = grid.cells_near(origin, radius)
        assert len(cells) == (2 * radius + 1) ** 2
        assert max(abs(c.i) for c in cells) == radius
        assert max(abs(c.j) for c in cells) == radius


def test_cells_near_rejects_negative_radius():
    grid = CoordinateGrid(1e-4)
    with pytest.raises(ValueError):
        grid.cells_near(GeoPoint(lat=0, lng=0), -1)


def test_distance_is_flat_and_scaled():
    grid = CoordinateGrid(1e-4, meters_per_degree=100_000.0)
    a = GeoPoint(lat=0.0, lng=0.0)
    b = GeoPoint(lat=0.0003, lng=0.0004)
    assert grid.distance_m(a, b) == pytest.approx(50.0)


def test_grid_rejects_non_positive_tile_width():
    with pytest.raises(ValueError):
        CoordinateGrid(0)
