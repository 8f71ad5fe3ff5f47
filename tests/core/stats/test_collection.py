import pytest

from statkit.core.exceptions import InvalidDataInputError
from statkit.core.stats import Statistics


def test_quartiles_and_median():
    s = Statistics.make([98, 90, 70, 18, 92, 92, 55, 83, 45, 95, 88, 76])
    assert s.count() == 12
    assert s.median() == pytest.approx(85.5)
    assert s.first_quartile() == pytest.approx(58.75)
    assert s.third_quartile() == pytest.approx(92.0)
    assert s.interquartile_range() == pytest.approx(33.25)
    assert len(s.original_array()) == 12

    s = Statistics.make([98, 90, 70, 18, 92, 92, 55, 83, 45, 95, 88])
    assert s.count() == 11
    assert s.median() == 88
    assert s.first_quartile() == pytest.approx(55.0)
    assert s.third_quartile() == pytest.approx(92.0)
    assert s.interquartile_range() == pytest.approx(37.0)


def test_central_tendency_and_range():
    s = Statistics.make([3, 5, 4, 7, 5, 2])
    assert s.count() == 6
    assert s.mean() == pytest.approx(13 / 3)
    assert s.median() == pytest.approx(4.5)
    assert s.mode() == 5
    assert s.min() == 2
    assert s.max() == 7
    assert s.range() == 5
    assert s.first_quartile() == pytest.approx(2.75)
    assert s.third_quartile() == pytest.approx(5.5)

    s = Statistics.make([13, 18, 13, 14, 13, 16, 14, 21, 13])
    assert s.mean() == pytest.approx(15.0)
    assert s.median() == 14
    assert s.mode() == 13
    assert s.range() == 8
    assert s.first_quartile() == pytest.approx(13.0)
    assert s.third_quartile() == pytest.approx(17.0)

    s = Statistics.make([1, 2, 4, 7])
    assert s.mean() == pytest.approx(3.5)
    assert s.median() == pytest.approx(3.0)
    assert s.mode() is None


def test_values_are_sorted_and_original_kept():
    s = Statistics([3, 1, 2])
    assert s.values() == [1, 2, 3]
    assert s.original_array() == [3, 1, 2]
    assert len(s) == 3


def test_strip_zeroes():
    s = Statistics.make([3, 5, 0, 0.1, 4, 7, 5, 2]).strip_zeroes()
    assert s.count() == 7
    assert len(s.original_array()) == 8


def test_empty_collection():
    s = Statistics.make([])
    assert s.count() == 0
    for method in (s.mean, s.min, s.max, s.first_quartile, s.third_quartile, s.stdev, s.pstdev):
        with pytest.raises(InvalidDataInputError):
            method()
    assert s.frequencies() == {}


def test_dispersion():
    assert Statistics.make([1.5, 2.5, 2.5, 2.75, 3.25, 4.75]).pstdev() == pytest.approx(0.986893273527251)
    assert Statistics.make([1, 2, 4, 5, 8]).pstdev(4) == 2.4495
    assert Statistics.make([1]).pstdev() == 0.0
    assert Statistics.make([1, 2, 3, 3]).pstdev(7) == 0.8291562
    assert Statistics.make([1, 2, 2, 4, 6]).stdev() == pytest.approx(2.0)
    assert Statistics.make([1, 2, 4, 5, 8]).stdev(4) == 2.7386
    assert Statistics.make([2.75, 1.75, 1.25, 0.25, 0.5, 1.25, 3.5]).variance() == pytest.approx(1.3720238095238095)
    assert Statistics.make([1, 2, 3, 3]).pvariance() == pytest.approx(0.6875)
    with pytest.raises(InvalidDataInputError):
        Statistics.make([1]).stdev()


def test_shape():
    assert Statistics.make([1, 2, 3, 4, 5]).skewness() == pytest.approx(0.0, abs=1e-10)
    assert Statistics.make([1, 2, 3, 4, 5]).pskewness() == pytest.approx(0.0, abs=1e-10)
    assert Statistics.make(list(range(1, 11))).kurtosis() < 0


def test_other_means():
    assert Statistics.make([54, 24, 36]).geometric_mean(2) == 36
    assert Statistics.make([4, 8, 3, 9, 17]).geometric_mean(2) == 6.81
    assert Statistics.make([40, 60]).harmonic_mean(1) == 48.0
    assert Statistics.make([1, 2, 2, 3, 4, 4, 4, 5]).median_grouped() == pytest.approx(3.5)
    with pytest.raises(InvalidDataInputError):
        Statistics.make([]).geometric_mean()
    with pytest.raises(InvalidDataInputError):
        Statistics.make([]).harmonic_mean()


def test_numeric_values():
    assert Statistics.make([3, 1, 2]).numeric_values() == [1, 2, 3]
    assert Statistics.make(["1", "2.5", "3"]).numeric_values() == ["1", "2.5", "3"]
    assert Statistics.make([]).numeric_values() == []
    with pytest.raises(InvalidDataInputError):
        Statistics.make(["1", "some string", "3"]).numeric_values()


def test_incomparable_values_raise():
    with pytest.raises(InvalidDataInputError):
        Statistics([1, "2", 3])


def test_frequency_views():
    s = Statistics.make([98, 90, 70, 18, 92, 92, 55, 83, 45, 95, 88, 76])
    freq = s.frequencies()
    assert freq[92] == 2
    assert len(freq) == 11

    s = Statistics.make([3, 4, 3, 1])
    assert s.relative_frequencies()[3] == 50
    assert s.cumulative_frequencies()[3] == 3
    assert s.cumulative_relative_frequencies()[3] == pytest.approx(75.0)
    assert len(s.original_array()) == 4
    assert s.frequency_table() == {1: 1, 2: 0, 3: 2, 4: 1}
    assert s.frequency_table_by_size(2) == {1: 1, 3: 3}
    assert s.frequency_dataframe()["frequency"].tolist() == [1, 2, 1]


def test_shape_statistics_reject_identical_floats():
    s = Statistics.make([0.1, 0.1, 0.1])
    with pytest.raises(InvalidDataInputError):
        s.skewness()
    with pytest.raises(InvalidDataInputError):
        s.pskewness()
    with pytest.raises(InvalidDataInputError):
        Statistics.make([0.7] * 6).kurtosis()
