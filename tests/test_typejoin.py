"""Tests for element type joining."""

import numbers
from decimal import Decimal
from fractions import Fraction
from typing import Never

import pytest
from hypothesis import given, strategies as st

from frankentuples.typejoin import common_supertype


class Base:
    pass


class Left(Base):
    pass


class Right(Base):
    pass


class Alpha:
    pass


class Beta:
    pass


class AlphaBeta(Alpha, Beta):
    pass


class BetaAlpha(Beta, Alpha):
    pass


class Gamma(Alpha):
    pass


class TestCommonSupertype:
    @pytest.mark.parametrize(
        "types, expected",
        [
            ((int,), int),
            ((int, int), int),
            ((bool, int), int),
            ((int, bool), int),
            ((int, float), numbers.Real),
            ((float, int), numbers.Real),
            ((float, complex), numbers.Complex),
            ((Fraction, int), numbers.Rational),
            ((Decimal, int), numbers.Number),
            ((str, bytes), object),
            ((int, str), object),
            ((Left, Right), Base),
            ((Left, Base), Base),
            ((AlphaBeta, BetaAlpha), object),
            ((BetaAlpha, AlphaBeta), object),
            ((Gamma, AlphaBeta), Alpha),
            ((AlphaBeta, Gamma), Alpha),
        ],
    )
    def test_join(self, types, expected):
        assert common_supertype(types) is expected

    def test_empty_is_never(self):
        """Joining no types gives the bottom type."""
        assert common_supertype([]) is Never

    def test_accepts_generator(self):
        assert common_supertype(type(v) for v in (1, 2.5)) is numbers.Real

    @given(
        st.lists(
            st.sampled_from([int, bool, float, complex, str, bytes, Left, Right, AlphaBeta, BetaAlpha, Gamma]),
            min_size=1,
        )
    )
    def test_join_is_a_supertype_of_all(self, types):
        """For any non-empty list of types, every type is a subclass of the join."""
        joined = common_supertype(types)
        assert all(issubclass(tp, joined) for tp in types)

    @given(st.lists(st.sampled_from([int, bool, float, str, AlphaBeta, BetaAlpha, Gamma]), min_size=1))
    def test_join_is_order_independent(self, types):
        """For any list of types, reversing the list does not change the join."""
        assert common_supertype(types) is common_supertype(list(reversed(types)))
