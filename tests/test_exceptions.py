"""Tests for class_generics.exceptions module."""

import pytest

from class_generics.exceptions import (
    GenericsError,
    DuplicateParameterError,
    UninitializedParameterError,
    UnevenArgumentsError,
    UnknownParameterError,
    CyclicInheritanceError,
    describe_owner,
)


class TestExceptions:
    """Test exception classes."""

    def test_generics_error(self):
        """Test GenericsError exception and its attributes."""
        with pytest.raises(GenericsError, match="test error") as exc_info:
            raise GenericsError("test error", owner=dict, name='X')

        assert exc_info.value.owner is dict
        assert exc_info.value.name == 'X'
        assert exc_info.value.location is None
        assert issubclass(GenericsError, Exception)

    @pytest.mark.parametrize('error_class', [
        DuplicateParameterError,
        UninitializedParameterError,
        UnevenArgumentsError,
        UnknownParameterError,
        CyclicInheritanceError,
    ])
    def test_hierarchy(self, error_class):
        """Test that every specific error is a GenericsError."""
        assert issubclass(error_class, GenericsError)

        try:
            raise error_class("test")
        except GenericsError:
            pass  # Should catch it

    def test_cyclic_chain(self):
        """Test CyclicInheritanceError keeps the chain as a tuple."""
        error = CyclicInheritanceError("cycle", chain=[int, str, int])
        assert error.chain == (int, str, int)
        assert CyclicInheritanceError("cycle").chain == ()


class TestDescribeOwner:
    """Test describe_owner helper."""

    def test_class(self):
        class Local:
            pass

        assert describe_owner(Local).endswith('TestDescribeOwner.test_class.<locals>.Local')
        assert describe_owner(dict) == 'builtins.dict'

    def test_non_class(self):
        assert describe_owner('abc') == "'abc'"
