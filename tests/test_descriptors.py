import logging

import pytest

from dynmodeler.descriptors import Cardinality, ParameterDescriptor, ParameterKind, PortDescriptor
from dynmodeler.errors import ConfigurationError, ModelerError


def test_port_descriptor():
    port = PortDescriptor("Input", "help", ["Model", "PointList"], "Tool.Input",
                          Cardinality.MULTIPLE, True, ["Modified"])
    assert port.node_types == ("Model", "PointList")
    assert port.events == ("Modified",)
    assert port.multiple

    class _Fake:
        type_tag = "Model"

    assert port.accepts(_Fake())
    assert not port.accepts(object())


@pytest.mark.parametrize("kwargs", [
    dict(name="", help="", node_types=("Model",), role="r"),
    dict(name="n", help="", node_types=("Model",), role=""),
    dict(name="n", help="", node_types=(), role="r"),
    dict(name="n", help="", node_types=("Model",), role="r", cardinality="many"),
])
def test_port_descriptor_rejects(kwargs):
    with pytest.raises(ConfigurationError):
        PortDescriptor(**kwargs)


def test_parameter_defaults_are_converted():
    p = ParameterDescriptor("Length", "", "Length", ParameterKind.DOUBLE, 50)
    assert p.default == 50.0
    assert isinstance(p.default, float)
    q = ParameterDescriptor("Sides", "", "Sides", ParameterKind.INT, 8.0)
    assert q.default == 8
    assert isinstance(q.default, int)


@pytest.mark.parametrize("kind, default, choices", [
    (ParameterKind.ENUM, "a", ()),
    (ParameterKind.ENUM, "c", ("a", "b")),
    (ParameterKind.ENUM, "a", ("a", "a")),
    (ParameterKind.DOUBLE, 1.0, ("a",)),
    (ParameterKind.DOUBLE, "wide", ()),
    (ParameterKind.INT, 2.5, ()),
    (ParameterKind.INT, True, ()),
])
def test_parameter_descriptor_rejects(kind, default, choices):
    with pytest.raises(ConfigurationError) as excinfo:
        ParameterDescriptor("Param", "", "Param", kind, default, choices)
    assert excinfo.value.code == "C001"
    assert isinstance(excinfo.value, ModelerError)


def test_coerce(caplog):
    p = ParameterDescriptor("Mode", "", "Mode", ParameterKind.ENUM, "a", ("a", "b"))
    assert p.coerce(None) == "a"
    assert p.coerce("b") == "b"
    with caplog.at_level(logging.WARNING):
        assert p.coerce("z") == "a"
    assert "not a legal value" in caplog.text

    d = ParameterDescriptor("Size", "", "Size", ParameterKind.DOUBLE, 1.0)
    assert d.coerce("2.5") == 2.5
    assert d.coerce("wide") == 1.0

    i = ParameterDescriptor("Count", "", "Count", ParameterKind.INT, 3)
    assert i.coerce("7") == 7
    assert i.coerce(4.0) == 4
    assert i.coerce(4.5) == 3


def test_error_str():
    err = ConfigurationError("bad thing", {"b": 2, "a": 1})
    assert str(err) == "[C001] bad thing (a=1, b=2)"
    assert str(ConfigurationError("plain")) == "[C001] plain"
