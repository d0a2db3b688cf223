from reactive_path.model import HostId, Link, Path


def test_host_id_ignores_mac_case():
    assert HostId('00:00:00:00:00:0A') == HostId('00:00:00:00:00:0a')
    assert hash(HostId('00:00:00:00:00:0A')) == hash(HostId('00:00:00:00:00:0a'))
    assert HostId('00:00:00:00:00:01') != HostId('00:00:00:00:00:02')
    assert str(HostId('AA:BB:CC:DD:EE:FF')) == 'aa:bb:cc:dd:ee:ff'


def test_path_devices():
    path = Path([Link(1, 2, 3, 1), Link(3, 2, 2, 2)])
    assert path.links == (Link(1, 2, 3, 1), Link(3, 2, 2, 2))
    assert path.devices() == [1, 3, 2]
    assert Path().devices() == []
