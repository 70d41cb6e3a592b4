"""Tests for class_generics.meta module."""

import pytest
from class_generics import (
    GenericParams,
    GenericParamsMeta,
    ParamsConfig,
    configure,
    dump_params,
    has_registry,
    param_names,
    DuplicateParameterError,
    UninitializedParameterError,
    UnevenArgumentsError,
)


class TestParamsConfig:
    """Test ParamsConfig parsing."""

    def test_empty_namespace(self):
        """Test that a body without declarations yields no config."""

        class Plain:
            pass

        assert ParamsConfig.from_namespace(Plain, {}) is None

    def test_mapping_defaults_are_flattened(self):
        class Plain:
            pass

        config = ParamsConfig.from_namespace(
            Plain, {'__default_params__': {'A': 1, 'B': 2}}
        )
        assert config.default_params == ('A', 1, 'B', 2)
        assert config.params == ()
        assert config.inherit_from is None

    def test_single_string_param(self):
        class Plain:
            pass

        config = ParamsConfig.from_namespace(Plain, {'__generic_params__': 'TIMEOUT'})
        assert config.params == ('TIMEOUT',)

    def test_config_is_frozen(self):
        config = ParamsConfig(params=('A',))
        with pytest.raises(Exception):
            config.params = ('B',)


class TestGenericParamsMeta:
    """Test class-body declarations applied by the metaclass."""

    def test_declared_params(self):
        class Session(GenericParams):
            __generic_params__ = ('SESSION_TIMEOUT', 'SESSION_ID_LENGTH')

            def timeout(self):
                return self.SESSION_TIMEOUT()

        assert isinstance(Session, GenericParamsMeta)
        assert param_names(Session) == ('SESSION_TIMEOUT', 'SESSION_ID_LENGTH')
        with pytest.raises(UninitializedParameterError):
            Session().timeout()

        configure(Session, SESSION_TIMEOUT=30)
        assert Session().timeout() == 30

    def test_default_params(self):
        class Session(GenericParams):
            __default_params__ = {'SESSION_TIMEOUT': 30, 'SESSION_ID_LENGTH': 20}

        assert dump_params(Session) == {'SESSION_TIMEOUT': 30, 'SESSION_ID_LENGTH': 20}

    def test_flat_default_params(self):
        class Session(GenericParams):
            __default_params__ = ('SESSION_TIMEOUT', 30)

        assert Session.SESSION_TIMEOUT() == 30

    def test_uneven_flat_defaults(self):
        with pytest.raises(UnevenArgumentsError):

            class Session(GenericParams):
                __default_params__ = ('SESSION_TIMEOUT', 30, 'SESSION_ID_LENGTH')

    def test_params_and_defaults_overlap(self):
        """Test that params then defaults on the same name is a no-duplicate layering."""

        class Session(GenericParams):
            __generic_params__ = ('SESSION_TIMEOUT',)
            __default_params__ = {'SESSION_TIMEOUT': 30}

        assert Session.SESSION_TIMEOUT() == 30

    def test_no_declarations_no_registry(self):
        class Plain(GenericParams):
            pass

        assert not has_registry(Plain)
        assert not has_registry(GenericParams)

    def test_inherit_false_is_no_declaration(self):
        class Plain(GenericParams):
            __inherit_params__ = False

        assert not has_registry(Plain)

    def test_empty_declaration_creates_registry(self):
        class Empty(GenericParams):
            __generic_params__ = ()

        assert has_registry(Empty)
        assert param_names(Empty) == ()

    def test_inherit_true_uses_nearest_base(self):
        class Session(GenericParams):
            __default_params__ = {'SESSION_TIMEOUT': 30, 'SESSION_ID_LENGTH': 20}

        class Intermediate(Session):
            pass

        class SecureSession(Intermediate):
            __inherit_params__ = True
            __default_params__ = {'SESSION_ID_LENGTH': 64}

        assert dump_params(SecureSession) == {'SESSION_TIMEOUT': 30, 'SESSION_ID_LENGTH': 64}

        configure(Session, SESSION_TIMEOUT=5, SESSION_ID_LENGTH=8)
        assert SecureSession.SESSION_TIMEOUT() == 5
        assert SecureSession.SESSION_ID_LENGTH() == 64

    def test_inherit_explicit_class(self):
        class Settings(GenericParams):
            __default_params__ = {'RETRIES': 3}

        class Client(GenericParams):
            __inherit_params__ = Settings

        assert Client.RETRIES() == 3
        configure(Settings, RETRIES=1)
        assert Client.RETRIES() == 1

    def test_inherit_true_without_parameterised_base(self):
        with pytest.raises(TypeError, match="none of its bases"):

            class Orphan(GenericParams):
                __inherit_params__ = True

    def test_inherit_then_redeclare_fails(self):
        class Session(GenericParams):
            __default_params__ = {'SESSION_TIMEOUT': 30}

        with pytest.raises(DuplicateParameterError):

            class Child(Session):
                __inherit_params__ = True
                __generic_params__ = ('SESSION_TIMEOUT',)

    def test_subclass_without_declarations_reads_base(self):
        """Test that plain subclassing shares the base accessor through the MRO."""

        class Session(GenericParams):
            __default_params__ = {'SESSION_TIMEOUT': 30}

        class Child(Session):
            pass

        assert Child.SESSION_TIMEOUT() == 30
        assert not has_registry(Child)
