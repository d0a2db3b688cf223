import pytest

from conftest import build_topology, ryu_switch

from reactive_path.errors import NoPathFound
from reactive_path.model import Link, Path
from reactive_path.selector import (PathSelector, any_path, policy_by_name,
                                    shortest_path)


class StaticTopology(object):
    def __init__(self, paths):
        self.paths = paths
        self.calls = []

    def paths_between(self, a, b):
        self.calls.append((a, b))
        return list(self.paths)


LONG = Path([Link(1, 2, 3, 1), Link(3, 2, 4, 1), Link(4, 2, 2, 1)])
SHORT_B = Path([Link(1, 5, 5, 1), Link(5, 2, 2, 5)])
SHORT_A = Path([Link(1, 2, 3, 1), Link(3, 3, 2, 6)])


def test_any_path_takes_first_candidate():
    topo = StaticTopology([LONG, SHORT_B, SHORT_A])
    assert PathSelector(topo).select_path(1, 2) == LONG
    assert topo.calls == [(1, 2)]


def test_shortest_path_is_deterministic():
    assert shortest_path([LONG, SHORT_B, SHORT_A]) == SHORT_A
    assert shortest_path([SHORT_A, LONG, SHORT_B]) == SHORT_A


def test_empty_candidate_set_raises():
    with pytest.raises(NoPathFound) as info:
        PathSelector(StaticTopology([])).select_path(1, 2)
    assert (info.value.src_device, info.value.dst_device) == (1, 2)


def test_selector_against_real_topology():
    topo = build_topology(
        [ryu_switch(i) for i in (1, 2, 3, 4)],
        [(1, 1, 2, 1), (2, 2, 4, 1), (1, 2, 3, 1), (3, 2, 2, 3)],
    )
    path = PathSelector(topo, shortest_path).select_path(1, 4)
    assert path.devices() == [1, 2, 4]

    assert PathSelector(topo, any_path).select_path(1, 4) in topo.paths_between(1, 4)


def test_policy_by_name():
    assert policy_by_name('any') is any_path
    assert policy_by_name('shortest') is shortest_path
    with pytest.raises(ValueError):
        policy_by_name('cheapest')
