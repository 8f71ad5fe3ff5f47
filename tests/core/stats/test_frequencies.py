import pytest

from statkit.core.exceptions import InvalidDataInputError
from statkit.core.stats import (
    cumulative_frequencies,
    cumulative_relative_frequencies,
    frequencies,
    frequency_dataframe,
    frequency_table,
    frequency_table_by_size,
    relative_frequencies,
)

COLORS = ["red", "blue", "blue", "red", "green", "red", "red"]


@pytest.fixture
def grouped_data():
    return [
        1, 1, 1, 4, 4, 5, 5, 5, 6, 7, 8, 8, 8, 9, 9, 9, 9, 9, 9,
        10, 10, 11, 12, 12, 13, 14, 14, 15, 15, 16, 16, 16, 16, 17, 17, 17, 18, 18,
    ]


def test_frequencies():
    assert frequencies([1, 2, 3, 4, 4]) == {1: 1, 2: 1, 3: 1, 4: 2}
    assert list(frequencies([3, 1, 2, 1])) == [1, 2, 3]
    assert frequencies([]) == {}


def test_frequencies_of_categories():
    assert frequencies(COLORS) == {"blue": 2, "green": 1, "red": 4}


def test_frequencies_truncate_non_discrete_values():
    assert frequencies([1.5, 1.7, 2.2]) == {1: 2, 2: 1}
    assert frequencies(["1", "2", "2"], transform_to_integer=True) == {1: 1, 2: 2}


def test_relative_frequencies():
    assert relative_frequencies(COLORS, 2) == {"blue": 28.57, "green": 14.29, "red": 57.14}
    assert relative_frequencies([3, 4, 3, 1]) == {1: 25.0, 3: 50.0, 4: 25.0}


def test_cumulative_frequencies():
    assert cumulative_frequencies([3, 4, 3, 1]) == {1: 1, 3: 3, 4: 4}
    result = cumulative_relative_frequencies([3, 4, 3, 1])
    assert result[1] == pytest.approx(25.0)
    assert result[3] == pytest.approx(75.0)
    assert result[4] == pytest.approx(100.0)


def test_frequency_table_by_chunks(grouped_data):
    assert frequency_table(grouped_data, 7) == {1: 3, 4: 6, 7: 10, 10: 5, 13: 5, 16: 9}
    assert frequency_table(grouped_data, 3) == {1: 9, 7: 15, 13: 14}


def test_frequency_table_by_size(grouped_data):
    assert frequency_table_by_size(grouped_data, 4) == {1: 5, 5: 8, 9: 11, 13: 9, 17: 5}
    assert frequency_table_by_size(grouped_data, 5) == {1: 8, 6: 13, 11: 8, 16: 9}
    assert frequency_table_by_size(grouped_data, 8) == {1: 13, 9: 20, 17: 5}


def test_frequency_table_keeps_empty_classes():
    assert frequency_table([1, 1, 2, 4]) == {1: 2, 2: 1, 3: 0, 4: 1}


def test_frequency_table_totals(grouped_data):
    for chunks in (1, 2, 5, 7, 20):
        assert sum(frequency_table(grouped_data, chunks).values()) == len(grouped_data)


def test_frequency_table_edge_cases():
    assert frequency_table([]) == {}
    assert frequency_table_by_size([], 3) == {}
    assert frequency_table([5, 5, 5], 4) == {5: 3}
    with pytest.raises(InvalidDataInputError):
        frequency_table([1, 2, 3], 0)
    with pytest.raises(InvalidDataInputError):
        frequency_table_by_size([1, 2, 3], 0)


def test_frequency_dataframe():
    df = frequency_dataframe([3, 4, 3, 1], precision=1)
    assert list(df.columns) == [
        "value",
        "frequency",
        "cumulative_frequency",
        "relative_frequency",
        "cumulative_relative_frequency",
    ]
    assert df["value"].tolist() == [1, 3, 4]
    assert df["frequency"].tolist() == [1, 2, 1]
    assert df["cumulative_frequency"].tolist() == [1, 3, 4]
    assert df["relative_frequency"].tolist() == [25.0, 50.0, 25.0]
    assert df["cumulative_relative_frequency"].tolist() == [25.0, 75.0, 100.0]


def test_frequency_dataframe_empty():
    df = frequency_dataframe([])
    assert df.empty
    assert "frequency" in df.columns
