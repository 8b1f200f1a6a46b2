import math

import pyarrow as pa
import pytest

from arrowframe import Vector, VectorArgumentError, VectorTypeError


class TestVectorCreation:
    def test_from_values(self):
        assert Vector(1, 2, 3).to_list() == [1, 2, 3]
        assert Vector([1, 2, 3]).to_list() == [1, 2, 3]

    def test_integers_are_narrowed(self):
        assert Vector([1, 2, 3]).type == "uint8"
        assert Vector([-1, 2, 3]).type == "int8"
        assert Vector([0, 70000]).type == "uint32"

    def test_from_range(self):
        assert Vector(range(3)).to_list() == [0, 1, 2]

    def test_from_arrow(self):
        array = pa.array([1, 2], type=pa.int64())
        vector = Vector(array)
        assert vector.type == "int64"
        assert vector.data is array

    def test_from_chunked_array(self):
        vector = Vector(pa.chunked_array([[1, 2], [3]]))
        assert vector.chunked
        assert vector.n_chunks == 2
        assert vector.size == 3

    def test_from_vector(self):
        vector = Vector([1, 2])
        assert Vector(vector).data is vector.data

    def test_with_type(self):
        assert Vector([1, 2], type=pa.float64()).type == "double"
        assert Vector(pa.array([1, 2]), type=pa.int16()).type == "int16"

    def test_invalid_values(self):
        with pytest.raises(VectorTypeError):
            Vector([1, "a"])

    def test_invalid_cast(self):
        with pytest.raises(VectorTypeError):
            Vector(pa.array(["a"]), type=pa.int64())

    def test_empty(self):
        vector = Vector([])
        assert vector.empty
        assert vector.size == 0

    def test_headless(self):
        assert Vector([1]).key is None


class TestVectorProperties:
    def test_types(self):
        assert Vector([1.5]).is_float
        assert Vector([1.5]).is_numeric
        assert Vector([1]).is_integer
        assert Vector(["a"]).is_string
        assert Vector([True]).is_boolean
        assert not Vector([True]).is_numeric
        assert Vector(pa.array(["a"]).dictionary_encode()).is_dictionary
        assert Vector(pa.array([[1], [2]])).is_list

    def test_nulls_and_nans(self):
        vector = Vector([1.0, None, float("nan"), float("nan")])
        assert vector.n_nulls == 1
        assert vector.n_nils == 1
        assert vector.n_nans == 2
        assert vector.has_nil
        assert Vector([1, 2]).n_nans == 0
        assert not Vector([1, 2]).has_nil

    def test_indices(self):
        assert Vector(["a", "b", "c"]).indices() == [0, 1, 2]

    def test_getitem(self):
        vector = Vector([1, 2, 3])
        assert vector[1] == 2
        assert vector[1:].to_list() == [2, 3]

    def test_iter(self):
        assert list(Vector([1, 2])) == [1, 2]

    def test_repr(self):
        assert repr(Vector([1, 2])) == "<Vector(uint8, size=2) [1, 2]>"
        assert repr(Vector(range(20))).endswith(", ...]>")
        assert str(Vector([1, 2])) == "[1, 2]"


class TestVectorAggregations:
    def test_aggregate_classification(self):
        assert Vector.aggregate("sum")
        assert Vector.aggregate("count_uniq")
        assert not Vector.aggregate("abs")
        assert not Vector.aggregate("not_a_function")

    def test_basic_aggregations(self):
        vector = Vector([1, 2, 3, 4])
        assert vector.sum() == 10
        assert vector.mean() == 2.5
        assert vector.min() == 1
        assert vector.max() == 4
        assert vector.count() == 4
        assert vector.product() == 24
        assert vector.min_max() == {"min": 1, "max": 4}

    def test_statistics(self):
        vector = Vector([1, 2, 3, 4])
        assert vector.variance() == pytest.approx(1.25)
        assert vector.var() == pytest.approx(1.25)
        assert vector.unbiased_variance() == pytest.approx(5 / 3)
        assert vector.stddev() == pytest.approx(math.sqrt(1.25))
        assert vector.sd() == vector.stddev()
        assert vector.quantile(0.5) == pytest.approx(2.5)

    def test_boolean_aggregations(self):
        assert Vector([True, True]).all()
        assert not Vector([True, False]).all()
        assert Vector([True, False]).any()

    def test_count_distinct(self):
        assert Vector([1, 1, 2, None]).count_distinct() == 2
        assert Vector([1, 1, 2]).count_uniq() == 2

    def test_aggregation_of_nulls(self):
        assert Vector(pa.array([None, None], type=pa.int64())).sum() is None

    def test_reduce_keeps_arrow_type(self):
        result = Vector([1, 2]).reduce("sum")
        assert isinstance(result, pa.Scalar)
        assert result.type == pa.uint64()

    def test_reduce_non_aggregation(self):
        with pytest.raises(VectorArgumentError):
            Vector([1, 2]).reduce("abs")


class TestVectorElementWise:
    def test_unary(self):
        assert Vector([-1, 2]).abs().to_list() == [1, 2]
        assert Vector([1.4, 1.6]).round().to_list() == [1.0, 2.0]
        assert Vector([1.5]).floor().to_list() == [1.0]
        assert Vector([1.5]).ceil().to_list() == [2.0]
        assert Vector([4.0]).sqrt().to_list() == [2.0]
        assert Vector([0.0]).exp().to_list() == [1.0]
        assert Vector([0.0]).apply("exp").to_list() == [1.0]
        assert Vector([1, None]).is_null().to_list() == [False, True]
        assert Vector([1, None]).is_valid().to_list() == [True, False]

    def test_is_nan(self):
        assert Vector([1.0, float("nan"), None]).is_nan().to_list() == [
            False,
            True,
            None,
        ]
        assert Vector([1, None]).is_nan().to_list() == [False, None]

    def test_apply_by_name(self):
        assert Vector(["a", "B"]).apply("utf8_upper").to_list() == ["A", "B"]
        assert Vector([1, 2]).apply("add", 1).to_list() == [2, 3]

    def test_apply_unknown_function(self):
        with pytest.raises(VectorArgumentError):
            Vector([1]).apply("not_a_function")

    def test_apply_wrong_operands(self):
        with pytest.raises(VectorArgumentError):
            Vector([1]).apply("add")
        with pytest.raises(VectorArgumentError):
            Vector([1]).apply("abs", 1)

    def test_unsupported_operand(self):
        with pytest.raises(VectorArgumentError):
            Vector([1]).apply("add", object())


class TestVectorOperators:
    def test_arithmetic(self):
        vector = Vector([1, 2, 3])
        assert (vector + 1).to_list() == [2, 3, 4]
        assert (vector - 1).to_list() == [0, 1, 2]
        assert (vector * 2).to_list() == [2, 4, 6]
        assert (vector**2).to_list() == [1, 4, 9]
        assert (vector + vector).to_list() == [2, 4, 6]
        assert (vector + [1, 1, 1]).to_list() == [2, 3, 4]

    def test_true_division(self):
        assert (Vector([1, 2, 3]) / 2).to_list() == [0.5, 1.0, 1.5]
        assert (Vector([1, 2]) / Vector([4, 4])).to_list() == [0.25, 0.5]

    def test_reflected(self):
        vector = Vector([1, 2, 3])
        assert (1 + vector).to_list() == [2, 3, 4]
        assert (10 - vector).to_list() == [9, 8, 7]
        assert (2 * vector).to_list() == [2, 4, 6]
        assert (3 / vector).to_list() == [3.0, 1.5, 1.0]
        assert (2**vector).to_list() == [2, 4, 8]

    def test_coerce(self):
        left, right = Vector([1, 2]).coerce(5)
        assert left.to_list() == [5, 5]
        assert right.to_list() == [1, 2]

    def test_unary_operators(self):
        vector = Vector([-1, 2])
        assert (-vector).to_list() == [1, -2]
        assert (+vector) is vector
        assert abs(vector).to_list() == [1, 2]
        assert (~Vector([True, False])).to_list() == [False, True]

    def test_unsigned_negation_wraps_around(self):
        vector = Vector([1, 2, 255])
        assert vector.type == "uint8"
        negated = -vector
        assert negated.type == "uint8"
        assert negated.to_list() == [255, 254, 1]

    def test_logical(self):
        left = Vector([True, False, None])
        right = Vector([True, True, False])
        assert (left & right).to_list() == [True, False, False]
        assert (left | right).to_list() == [True, True, None]
        assert (left ^ right).to_list() == [False, True, None]

    def test_comparisons(self):
        vector = Vector([1, 2, 3])
        assert (vector > 2).to_list() == [False, False, True]
        assert (vector >= 2).to_list() == [False, True, True]
        assert (vector < 2).to_list() == [True, False, False]
        assert (vector <= 2).to_list() == [True, True, False]
        assert vector.equal(2).to_list() == [False, True, False]
        assert vector.not_equal(2).to_list() == [True, False, True]


class TestVectorHelpers:
    def test_tally(self):
        assert Vector(["a", "b", "a", None]).tally() == {"a": 2, "b": 1, None: 1}

    def test_tally_nan(self):
        tally = Vector([1.0, float("nan"), float("nan")]).tally()
        assert tally[1.0] == 1
        nan_counts = [count for key, count in tally.items() if key != key]
        assert nan_counts == [2]

    def test_value_counts(self):
        counts = Vector(pa.chunked_array([["a", "b"], ["a"]])).value_counts()
        assert counts == {"a": 2, "b": 1}

    def test_map(self):
        assert Vector([1, 2]).map(lambda x: x * 10).to_list() == [10, 20]

    def test_cast(self):
        assert Vector([1, 2]).cast(pa.string()).to_list() == ["1", "2"]

    def test_filter(self):
        vector = Vector([1, 2, 3])
        assert vector.filter([True, False, True]).to_list() == [1, 3]
        assert vector.filter(vector > 1).to_list() == [2, 3]


class TestVectorResolve:
    def test_resolve_to_string(self):
        assert Vector("A").resolve([1, 2]).to_list() == ["1", "2"]

    def test_resolve_upcast(self):
        resolved = Vector(256).resolve([1, 2])
        assert resolved.type == "uint16"
        assert resolved.to_list() == [1, 2]

    def test_resolve_from_vector(self):
        assert Vector(1.5).resolve(Vector([1, 2])).type == "double"

    def test_resolve_numeric_strings(self):
        assert Vector(1).resolve(["1", "2"]).to_list() == [1, 2]

    def test_resolve_invalid(self):
        with pytest.raises(VectorArgumentError):
            Vector(1).resolve(["a"])
        with pytest.raises(VectorArgumentError):
            Vector(1).resolve(1)


class TestVectorPropagate:
    def test_propagate_function(self):
        vector = Vector([1, 2, 3, 4])
        assert vector.propagate("mean").to_list() == [2.5] * 4
        assert vector.propagate("sum").to_list() == [10] * 4

    def test_propagate_keeps_aggregation_type(self):
        assert Vector([1, 2]).propagate("sum").type == "uint64"
        nulls = Vector(pa.array([None, None], type=pa.float64()))
        propagated = nulls.propagate("sum")
        assert propagated.type == "double"
        assert propagated.to_list() == [None, None]

    def test_propagate_block_returning_arrow_scalar(self):
        propagated = Vector([1, 2]).propagate(lambda v: v.reduce("max"))
        assert propagated.type == "uint8"
        assert propagated.to_list() == [2, 2]

    def test_propagate_block(self):
        vector = Vector([1, 2, 3, 4])
        assert vector.propagate(lambda v: v.max()).to_list() == [4] * 4
        assert vector.propagate(block=lambda v: v.max()).to_list() == [4] * 4

    def test_expand_alias(self):
        assert Vector([1, 3]).expand("mean").to_list() == [2.0, 2.0]

    def test_propagate_element_wise(self):
        with pytest.raises(VectorArgumentError):
            Vector([1, 2]).propagate("abs")

    def test_propagate_without_function(self):
        with pytest.raises(VectorArgumentError):
            Vector([1, 2]).propagate()

    def test_propagate_function_and_block(self):
        with pytest.raises(VectorArgumentError):
            Vector([1, 2]).propagate("sum", block=lambda v: v.sum())
