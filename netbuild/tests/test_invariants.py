"""Tests for cascade delete invariants."""

import itertools
import random

import pytest

from netbuild.models.topology import Device, Link, Topology, cascade_delete


def _random_topology(rng: random.Random, device_count: int, link_count: int) -> Topology:
    ids = rng.sample(range(1, 100), device_count)
    return Topology(
        devices=[Device(id=device_id, name=f"D{device_id}") for device_id in ids],
        links=[
            Link(source=rng.choice(ids), target=rng.choice(ids))
            for _ in range(link_count)
        ],
    )


class TestCascadeDelete:
    """cascade_delete removes a device with every incident link."""

    def test_scenario_middle_device(self):
        """Deleting id 3 from 1-3-5 leaves 2 devices and no links."""
        topology = Topology(
            devices=[Device(id=1), Device(id=3), Device(id=5)],
            links=[Link(source=1, target=3), Link(source=3, target=5)],
        )
        result = cascade_delete(topology, 3)

        assert result.device_ids() == [1, 5]
        assert result.links == []

    def test_input_untouched(self):
        topology = Topology(
            devices=[Device(id=1), Device(id=2)],
            links=[Link(source=1, target=2)],
        )
        cascade_delete(topology, 1)

        assert topology.device_ids() == [1, 2]
        assert len(topology.links) == 1

    def test_keeps_order(self):
        topology = Topology(
            devices=[Device(id=i) for i in (9, 4, 7, 2)],
            links=[Link(source=9, target=2), Link(source=4, target=7), Link(source=7, target=2)],
        )
        result = cascade_delete(topology, 4)

        assert result.device_ids() == [9, 7, 2]
        assert result.links == [Link(source=9, target=2), Link(source=7, target=2)]

    def test_self_loop_and_duplicate_links_removed(self):
        topology = Topology(
            devices=[Device(id=1), Device(id=2)],
            links=[
                Link(source=1, target=1),
                Link(source=1, target=2),
                Link(source=2, target=1),
                Link(source=1, target=2),
            ],
        )
        result = cascade_delete(topology, 1)

        assert result.device_ids() == [2]
        assert result.links == []

    def test_unknown_id_changes_nothing(self):
        topology = Topology(
            devices=[Device(id=1), Device(id=2)],
            links=[Link(source=1, target=2)],
        )
        assert cascade_delete(topology, 42) == topology

    @pytest.mark.parametrize("seed", range(20))
    def test_counts_and_no_dangling_reference(self, seed):
        """For every existing id: devices - 1, links - incident, none left."""
        rng = random.Random(seed)
        topology = _random_topology(rng, device_count=rng.randint(1, 8), link_count=rng.randint(0, 15))

        for device_id in topology.device_ids():
            result = cascade_delete(topology, device_id)

            assert len(result.devices) == len(topology.devices) - 1
            assert len(result.links) == len(topology.links) - len(topology.links_touching(device_id))
            assert not any(link.touches(device_id) for link in result.links)

    def test_consistency_is_preserved(self):
        """Deleting from a consistent topology keeps it consistent."""
        devices = [Device(id=i) for i in range(1, 5)]
        links = [Link(source=a, target=b) for a, b in itertools.combinations(range(1, 5), 2)]
        topology = Topology(devices=devices, links=links)

        for device_id in topology.device_ids():
            assert cascade_delete(topology, device_id).is_consistent()
