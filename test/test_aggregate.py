import pyarrow as pa
import pytest

from arrowframe import DataFrame

TEST_DATA = pa.record_batch(
    {
        "city": pa.array(
            ["New York", "New York", "Los Angeles", "Los Angeles", "New York"]
        ),
        "shop": pa.array(["Shop A", "Shop B", "Shop A", "Shop A2", "Shop B"]),
        "n_employees": pa.array([10, 15, 8, 12, 20]),
    }
)


@pytest.mark.parametrize("keys", [["city"], ["city", "shop"]])
def test_basic_aggregation(keys):
    result = DataFrame(TEST_DATA).group(keys).sum("n_employees")

    if keys == ["city"]:
        assert result.keys == ["city", "sum"]
        assert result["city"].to_list() == ["New York", "Los Angeles"]
        assert result["sum"].to_list() == [45, 20]
    else:
        assert result.keys == ["city", "shop", "sum"]
        assert result["city"].to_list() == [
            "New York",
            "New York",
            "Los Angeles",
            "Los Angeles",
        ]
        assert result["shop"].to_list() == ["Shop A", "Shop B", "Shop A", "Shop A2"]
        assert result["sum"].to_list() == [10, 35, 8, 12]


@pytest.mark.parametrize("keys", [["city"], ["city", "shop"]])
def test_group_str(keys):
    group = DataFrame(TEST_DATA).group(keys)
    expected_groups = 2 if keys == ["city"] else 4
    assert str(group) == f"Group(keys={keys!r}, groups={expected_groups})"


@pytest.mark.parametrize("keys", [["city"], ["city", "shop"]])
def test_min_aggregation(keys):
    result = DataFrame(TEST_DATA).group(keys).min("n_employees")

    if keys == ["city"]:
        assert result.keys == ["city", "min"]
        assert result["min"].to_list() == [10, 8]
    else:
        assert result.keys == ["city", "shop", "min"]
        assert result["min"].to_list() == [10, 15, 8, 12]


@pytest.mark.parametrize("keys", [["city"], ["city", "shop"]])
def test_max_aggregation(keys):
    result = DataFrame(TEST_DATA).group(keys).max("n_employees")

    if keys == ["city"]:
        assert result.keys == ["city", "max"]
        assert result["max"].to_list() == [20, 12]
    else:
        assert result.keys == ["city", "shop", "max"]
        assert result["max"].to_list() == [10, 20, 8, 12]


@pytest.mark.parametrize("keys", [["city"], ["city", "shop"]])
def test_count_aggregation(keys):
    result = DataFrame(TEST_DATA).group(keys).count("n_employees")

    if keys == ["city"]:
        assert result.keys == ["city", "count"]
        assert result["count"].to_list() == [3, 2]
    else:
        assert result.keys == ["city", "shop", "count"]
        assert result["count"].to_list() == [1, 2, 1, 1]


@pytest.mark.parametrize("keys", [["city"], ["city", "shop"]])
def test_mean_aggregation(keys):
    result = DataFrame(TEST_DATA).group(keys).mean("n_employees")

    if keys == ["city"]:
        assert result.keys == ["city", "mean"]
        assert result["mean"].to_list() == [15.0, 10.0]
    else:
        assert result.keys == ["city", "shop", "mean"]
        assert result["mean"].to_list() == [10.0, 17.5, 8.0, 12.0]
    assert result["mean"].type == "double"


@pytest.mark.parametrize("keys", [["city"], ["city", "shop"]])
def test_count_aggregation_50_rows(keys):
    result = DataFrame(_generate_50rows_test_data()).group(keys).count("n_employees")

    if keys == ["city"]:
        assert result.keys == ["city", "count"]
        assert result["city"].to_list() == [
            "City0",
            "City1",
            "City2",
            "City3",
            "City4",
        ]
        assert result["count"].to_list() == [20, 20, 20, 20, 20]
    else:
        assert result.keys == ["city", "shop", "count"]
        expected_cities = ["City" + str(i) for i in range(5) for _ in range(10)]
        expected_shops = ["Shop" + str(i) for _ in range(5) for i in range(10)]
        expected_counts = [2] * 50
        assert result["city"].to_list() == expected_cities
        assert result["shop"].to_list() == expected_shops
        assert result["count"].to_list() == expected_counts


def test_aggregation_of_chunked_table():
    table = pa.Table.from_batches([TEST_DATA, TEST_DATA])
    result = DataFrame(table).group("city").sum("n_employees")
    assert result.to_dict() == {"city": ["New York", "Los Angeles"], "sum": [90, 40]}


def _generate_50rows_test_data():
    cities = ["City" + str(i) for i in range(5)]
    shops = ["Shop" + str(i) for i in range(10)]
    data = {"city": [], "shop": [], "n_employees": []}
    for city in cities:
        for shop in shops:
            for _ in range(2):  # Ensure each combination appears at least twice
                data["city"].append(city)
                data["shop"].append(shop)
                data["n_employees"].append(10)  # Arbitrary number of employees
    return pa.record_batch(data)
