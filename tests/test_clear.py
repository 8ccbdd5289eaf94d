import pytest

from mini_inject import Container, UnresolvedBindingError


class A:
    def __init__(self, value):
        self.value = value


def test_clear_removes_bindings_and_instances():
    c = Container()
    c.bind("service", lambda _: {"value": "test"})
    c.bind(A, [c.literal(42)])

    assert c.get("service") == {"value": "test"}
    assert c.get(A).value == 42

    c.clear()

    assert not c.has("service")
    assert not c.has(A)
    with pytest.raises(UnresolvedBindingError):
        c.get("service")
    with pytest.raises(UnresolvedBindingError):
        c.get(A)


def test_clear_recurses_into_sub_modules():
    main, sub1, sub2, nested = Container(), Container(), Container(), Container()
    sub1.sub_module(nested)
    main.sub_module(sub1, sub2)

    main.bind("main", lambda _: "main")
    sub1.bind("sub1", lambda _: "sub1")
    sub2.bind("sub2", lambda _: "sub2")
    nested.bind("nested", lambda _: "nested")

    for key in ("main", "sub1", "sub2", "nested"):
        assert main.has(key)
    assert sub1.has("nested")

    main.clear()

    for key in ("main", "sub1", "sub2", "nested"):
        assert not main.has(key)
    assert not sub1.has("sub1")
    assert not sub1.has("nested")
    assert not sub2.has("sub2")
    assert not nested.has("nested")

    # links survive a clear
    nested.bind("nested", lambda _: "again")
    assert main.get("nested") == "again"


def test_clear_drops_singletons():
    c = Container()
    count = []

    def counter(_):
        count.append(1)
        return {"count": len(count)}

    c.bind("counter", counter)
    first = c.get("counter")
    assert c.get("counter") is first

    c.clear()
    c.bind("counter", counter)
    second = c.get("counter")

    assert second["count"] == 2
    assert second is not first


def test_clear_drops_lazy_references():
    c = Container()

    class ServiceB:
        name = "B"

    class ServiceA:
        def __init__(self, service_b):
            self.service_b = service_b
            self.name = "A"

    c.bind(ServiceA, [ServiceB], late_resolve=True)
    c.bind(ServiceB, lambda _: ServiceB())

    assert c.get(ServiceA).name == "A"
    assert c.get(ServiceB).name == "B"

    c.clear()

    assert not c.has(ServiceA)
    assert not c.has(ServiceB)
    with pytest.raises(UnresolvedBindingError):
        c.get(ServiceA)


def test_clear_empty_container():
    c = Container()
    c.clear()
    c.bind("service", lambda _: "test")
    assert c.get("service") == "test"
