import pyarrow as pa
import pytest

from arrowframe.compute import partition


def test_partition_single_key():
    groups = partition([pa.array(["b", "a", "b", None, "a"])])
    assert len(groups) == 3
    assert groups.first_indices == [0, 1, 3]
    assert [mask.to_pylist() for mask in groups.masks] == [
        [True, False, True, False, False],
        [False, True, False, False, True],
        [False, False, False, True, False],
    ]


def test_partition_null_key_keeps_first_appearance():
    groups = partition([pa.array([None, 1, None, 2])])
    assert groups.first_indices == [0, 1, 3]


def test_partition_chunked_key():
    groups = partition([pa.chunked_array([[1, 2], [1, 3]])])
    assert groups.first_indices == [0, 1, 3]
    assert groups.masks[0].to_pylist() == [True, False, True, False]


def test_partition_multiple_keys():
    groups = partition(
        [pa.array([1, 1, 2, 1, None]), pa.array(["x", "y", "x", "x", None])]
    )
    assert groups.first_indices == [0, 1, 2, 4]
    assert groups.masks[0].to_pylist() == [True, False, False, True, False]


def test_partition_multiple_keys_with_nan():
    nan = float("nan")
    groups = partition([pa.array([nan, nan, 1.0]), pa.array([1, 1, 1])])
    assert groups.first_indices == [0, 2]


def test_partition_masks_have_no_nulls():
    groups = partition([pa.array([1, None, 1])])
    assert all(mask.null_count == 0 for mask in groups.masks)


def test_partition_without_keys():
    with pytest.raises(ValueError):
        partition([])
