import itertools
import json

import pytest

from timesense.lattice import (
    UNKNOWN_RANK,
    ComplexityClass as C,
    CompoundClass,
    compose,
    dominant,
    maximum,
    multiply,
    rank,
)
from timesense.models import AnalysisResult


# =============================================================================
# Rank
# =============================================================================

def test_rank_follows_declaration_order():
    ranks = [rank(cls) for cls in C]
    assert ranks == sorted(ranks)


def test_linear_and_string_length_share_a_rank():
    assert rank(C.LINEAR) == rank(C.STRING_LENGTH)
    assert dominant(C.LINEAR, C.STRING_LENGTH) == C.LINEAR
    assert dominant(C.STRING_LENGTH, C.LINEAR) == C.STRING_LENGTH


def test_graph_classes_rank_above_cubic():
    assert rank(C.CUBIC) < rank(C.V_PLUS_E) < rank(C.V_TIMES_E) < rank(C.E_LOG_V)
    assert rank(C.E_LOG_V) < rank(C.EXPONENTIAL)
    assert rank(C.LINEARITHMIC) < rank(C.N_LOG_LOG_N) < rank(C.N_SQRT_N)


@pytest.mark.parametrize("better,worse", [
    (C.CONST, C.LOG),
    (C.LOG, C.LINEAR),
    (C.LINEAR, C.LINEARITHMIC),
    (C.LINEARITHMIC, C.QUADRATIC),
    (C.QUADRATIC, C.QUADRATIC_LOG),
    (C.QUADRATIC_LOG, C.CUBIC),
    (C.CUBIC, C.EXPONENTIAL),
    (C.EXPONENTIAL, C.FACTORIAL),
])
def test_rank_orders_common_classes(better, worse):
    assert rank(better) < rank(worse)


def test_compound_ranks_above_every_known_class():
    compound = CompoundClass(left=C.SQRT, right=C.LOG)
    assert rank(compound) == UNKNOWN_RANK
    assert all(rank(cls) < rank(compound) for cls in C)


# =============================================================================
# Dominance
# =============================================================================

def test_dominant_picks_worse():
    assert dominant(C.LINEAR, C.QUADRATIC) == C.QUADRATIC
    assert dominant(C.QUADRATIC, C.LINEAR) == C.QUADRATIC


def test_dominant_keeps_first_on_tie():
    first = CompoundClass(left=C.SQRT, right=C.LOG)
    second = CompoundClass(left=C.LOG, right=C.SQRT)
    assert dominant(first, second) is first


def test_maximum_of_nothing_is_constant():
    assert maximum([]) == C.CONST


def test_maximum_is_order_independent():
    classes = [C.LOG, C.QUADRATIC, C.LINEAR, C.CONST, C.LINEARITHMIC]
    results = {maximum(order) for order in itertools.permutations(classes)}
    assert results == {C.QUADRATIC}


# =============================================================================
# Multiplication
# =============================================================================

@pytest.mark.parametrize("a,b,expected", [
    (C.LINEAR, C.LINEAR, C.QUADRATIC),
    (C.LINEAR, C.LOG, C.LINEARITHMIC),
    (C.LOG, C.LINEAR, C.LINEARITHMIC),
    (C.LINEAR, C.LINEARITHMIC, C.QUADRATIC_LOG),
    (C.LINEARITHMIC, C.LINEAR, C.QUADRATIC_LOG),
    (C.QUADRATIC, C.LINEAR, C.CUBIC),
    (C.LINEAR, C.QUADRATIC, C.CUBIC),
    (C.LOG, C.LOG, C.LOG_SQUARED),
    (C.SQRT, C.LINEAR, C.N_SQRT_N),
    (C.QUADRATIC, C.LOG, C.QUADRATIC_LOG),
])
def test_known_products(a, b, expected):
    assert multiply(a, b) == expected


@pytest.mark.parametrize("cls", list(C))
def test_constant_is_identity(cls):
    assert multiply(C.CONST, cls) == cls
    assert multiply(cls, C.CONST) == cls


def test_unknown_product_is_compound():
    product = multiply(C.SQRT, C.LOG)
    assert isinstance(product, CompoundClass)
    assert product.label == "O(√n × log n)"
    assert str(product) == "O(√n × log n)"


def test_sum_factor_is_bracketed():
    assert multiply(C.LINEAR, C.V_PLUS_E).label == "O(n × (V + E))"
    assert multiply(C.V_PLUS_E, C.LOG).label == "O((V + E) × log n)"
    assert multiply(C.SQRT, multiply(C.LINEAR, C.V_PLUS_E)).label == "O(√n × n × (V + E))"
    assert multiply(C.LINEAR, C.E_LOG_V).label == "O(n × E log V)"


def test_compound_serializes_to_label():
    result = AnalysisResult(overall_time=multiply(C.CUBIC, C.LOG))
    data = json.loads(result.model_dump_json())
    assert data["overall_time"] == "O(n³ × log n)"


def test_compound_python_dump_round_trips():
    compound = multiply(C.SQRT, multiply(C.CUBIC, C.LOG))
    result = AnalysisResult(overall_time=compound)
    assert AnalysisResult.model_validate(result.model_dump()) == result


# =============================================================================
# Composition
# =============================================================================

def test_compose_empty_stack_is_base():
    assert compose([], C.LOG) == C.LOG


def test_compose_three_linear_levels_is_cubic():
    assert compose([C.LINEAR, C.LINEAR], C.LINEAR) == C.CUBIC


def test_compose_sort_in_loop():
    assert compose([C.LINEAR], C.LINEARITHMIC) == C.QUADRATIC_LOG


def test_compose_falls_back_to_compound():
    effective = compose([C.LINEAR, C.LINEAR, C.LINEAR], C.LINEAR)
    assert isinstance(effective, CompoundClass)
    assert effective.label == "O(n × n³)"
