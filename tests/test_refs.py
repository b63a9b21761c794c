import pytest

from sheetgrid.refs import (
    CellRefError,
    Formula,
    SharedFormula,
    calculate_bounds,
    col_index_to_letters,
    col_letters_to_index,
    digits_only,
    formula_for_cell,
    get_bounds_from_dimension_ref,
    get_cell_id_from_coords,
    get_cell_id_from_coords_with_fixed,
    get_coords_from_cell_id,
    get_range_from_string,
    letters_only,
    row_index_to_string,
    shift_cell,
)


@pytest.mark.parametrize(
    "letters, index",
    [
        ("A", 0), ("G", 6), ("z", 25), ("AA", 26), ("Az", 51), ("BA", 52),
        ("BZ", 77), ("ZA", 26 * 26), ("ZZ", 26 * 26 + 25),
        ("AAA", 26 * 26 + 26), ("AMI", 1022),
    ],
)
def test_letters_to_numeric(letters, index):
    assert col_letters_to_index(letters) == index


@pytest.mark.parametrize(
    "letters, index",
    [
        ("A", 0), ("G", 6), ("Z", 25), ("AA", 26), ("AZ", 51), ("BA", 52),
        ("BZ", 77), ("ZA", 26 * 26), ("ZB", 26 * 26 + 1),
        ("ZZ", 26 * 26 + 25), ("AAA", 26 * 26 + 26), ("AMI", 1022),
    ],
)
def test_numeric_to_letters(letters, index):
    assert col_index_to_letters(index) == letters


def test_letters_round_trip():
    for index in range(0, 20000, 7):
        assert col_letters_to_index(col_index_to_letters(index)) == index


def test_letters_only():
    assert letters_only("ABC123") == "ABC"
    assert letters_only("abc123") == "ABC"


def test_digits_only():
    assert digits_only("ABC123") == "123"


def test_row_index_to_string():
    assert row_index_to_string(0) == "1"
    assert row_index_to_string(41) == "42"


def test_get_coords_from_cell_id():
    assert get_coords_from_cell_id("A3") == (0, 2)
    assert get_coords_from_cell_id("B3") == (1, 2)


def test_get_coords_without_row_raises():
    with pytest.raises(CellRefError):
        get_coords_from_cell_id("ABC")


def test_get_cell_id_from_coords():
    assert get_cell_id_from_coords(0, 0) == "A1"
    assert get_cell_id_from_coords(2, 2) == "C3"


def test_get_cell_id_with_fixed():
    assert get_cell_id_from_coords_with_fixed(0, 0, True, False) == "$A1"
    assert get_cell_id_from_coords_with_fixed(0, 0, False, True) == "A$1"
    assert get_cell_id_from_coords_with_fixed(2, 2, True, True) == "$C$3"


def test_get_bounds_from_dimension_ref():
    assert get_bounds_from_dimension_ref("A1:B2") == (0, 0, 1, 1)


def test_get_bounds_from_bad_dimension_ref():
    with pytest.raises(CellRefError):
        get_bounds_from_dimension_ref("A1")


def test_calculate_bounds():
    assert calculate_bounds(["A1", "B1", "A2", "B2"]) == (0, 0, 1, 1)


def test_calculate_bounds_offset_and_empty():
    assert calculate_bounds(["C4", "D5"]) == (2, 3, 3, 4)
    assert calculate_bounds([]) == (0, 0, 0, 0)


def test_get_range_from_string():
    assert get_range_from_string("1:3") == (1, 3)


@pytest.mark.parametrize("text", ["3", "1:", ":3", "a:3", "1:b"])
def test_get_range_from_bad_string(text):
    with pytest.raises(CellRefError):
        get_range_from_string(text)


def test_shift_cell():
    assert shift_cell("A1", 1, 1) == "B2"
    assert shift_cell("$A1", 1, 1) == "$A2"
    assert shift_cell("A$1", 1, 1) == "B$1"
    assert shift_cell("$A$1", 1, 1) == "$A$1"


def test_shared_formulas_in_sheet_order():
    shared = {}
    anchor = Formula(content="2*A1", type="shared", ref="A2:C2", si=0)
    follower = Formula(type="shared", si=0)
    assert formula_for_cell("A2", anchor, shared) == "2*A1"
    assert shared[0] == SharedFormula(0, 1, "2*A1")
    assert formula_for_cell("B2", follower, shared) == "2*B1"
    assert formula_for_cell("C2", follower, shared) == "2*C1"


FORMULAS = [
    ("A1", "B2"),
    ("$A1", "$A2"),
    ("A$1", "B$1"),
    ("$A$1", "$A$1"),
    ("A1+B1", "B2+C2"),
    ("$A1+B1", "$A2+C2"),
    ("$A$1+B1", "$A$1+C2"),
    ("A1+$B1", "B2+$B2"),
    ("A1+B$1", "B2+C$1"),
    ("A1+$B$1", "B2+$B$1"),
    ("$A$1+$B$1", "$A$1+$B$1"),
    (
        'IF(C23>=E$12,"Q4",IF(C23>=$D$12,"Q3",IF(C23>=C$12,"Q2","Q1")))',
        'IF(D24>=F$12,"Q4",IF(D24>=$D$12,"Q3",IF(D24>=D$12,"Q2","Q1")))',
    ),
    ("SUM(D44:H44)*IM_A_DEFINED_NAME", "SUM(E45:I45)*IM_A_DEFINED_NAME"),
    (
        "IM_A_DEFINED_NAME+SUM(D44:H44)*IM_A_DEFINED_NAME_ALSO",
        "IM_A_DEFINED_NAME+SUM(E45:I45)*IM_A_DEFINED_NAME_ALSO",
    ),
    ("SUM(D44:H44)*IM_A_DEFINED_NAME+A1", "SUM(E45:I45)*IM_A_DEFINED_NAME+B2"),
    ("AA1", "AB2"),
    ("$AA1", "$AA2"),
    ("AA$1", "AB$1"),
    ("$AA$1", "$AA$1"),
]


def test_shared_formulas_with_absolute_references():
    x, y = get_coords_from_cell_id("C4")
    shared = {i: SharedFormula(x, y, text) for i, (text, _) in enumerate(FORMULAS)}
    for i, (_, expected) in enumerate(FORMULAS):
        formula = Formula(content=FORMULAS[i][0], type="shared", si=i)
        assert formula_for_cell("D5", formula, shared) == expected


def test_formula_for_cell_without_formula():
    assert formula_for_cell("A1", None, {}) == ""


def test_plain_formula_is_trimmed():
    assert formula_for_cell("E1", Formula(content=" 10+20 \n"), {}) == "10+20"