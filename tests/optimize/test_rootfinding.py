import math

import pytest

from jetdiff import Interval
from jetdiff import function as jdf
from jetdiff.optimize import allroot_scalar, krawczyk_scalar, newton


def test_allroot_scalar():
    domain = Interval(-2, 3)
    r = allroot_scalar(lambda x: x**3 - 2 * x, domain, unique=True)
    assert len(r.unique) == 3
    root_max = max(r.unique, key=lambda x: x.sup)
    assert root_max.issuperset(jdf.sqrt(Interval(2)))


def test_allroot_scalar_generations():
    f = lambda x: x**3 - 2 * x  # noqa: E731
    domain = Interval(-2, 3)

    r = allroot_scalar(f, domain, max_iter=1)
    assert r.unknown == [domain]
    assert r.exists == r.unique == []

    r = allroot_scalar(f, domain)
    found = r.exists + r.unique
    roots = (-jdf.sqrt(Interval(2)), Interval(0), jdf.sqrt(Interval(2)))
    assert all(any(not x.isdisjoint(z) for x in found) for z in roots)

    with pytest.raises(ValueError):
        allroot_scalar(f, domain, max_iter=0)


def test_allroot_scalar_without_roots():
    r = allroot_scalar(lambda x: x**2 + 1, Interval(1, 2))
    assert r.exists == r.unique == r.unknown == []


def test_krawczyk_scalar():
    r0, r1 = krawczyk_scalar(lambda x: x**2 - 2, Interval(1, 2))
    assert r0 == "UNIQUE"
    assert math.sqrt(2) in r1

    assert krawczyk_scalar(lambda x: x**2 - 2, Interval(3, 4)) == ("NOTEXISTS", None)

    r0, _ = krawczyk_scalar(lambda x: x**2 - 2, Interval(1, 2), Interval(2, 4))
    assert r0 == "UNIQUE"

    r0, r1 = krawczyk_scalar(lambda x: x**2 - 2, Interval(1, 2), lambda x: 2 * x)
    assert r0 == "UNIQUE" and r1.issubset(Interval(1.2, 1.6))

    with pytest.raises(TypeError):
        krawczyk_scalar(lambda x: x, 1.0)  # type: ignore


def test_newton():
    r = newton(lambda x: x**2 - 2, 1.0)
    assert r.converged
    assert r.root == pytest.approx(math.sqrt(2), rel=1e-14)

    r = newton(lambda x: jdf.cos(x) - x, 0.5)
    assert r.converged
    assert math.cos(r.root) == pytest.approx(r.root)


def test_newton_stationary_point():
    r = newton(lambda x: x**2 + 1, 0.0)
    assert not r.converged
    assert r.iterations == 0

    with pytest.raises(ValueError):
        newton(lambda x: x, 1.0, max_iter=0)
