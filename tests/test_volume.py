import struct
from unittest import mock

import pytest

from statusbar import volume
from statusbar.volume import vol_perc


@pytest.fixture
def card(tmp_path):
    path = tmp_path / "mixer"
    path.write_bytes(b"")
    return path


def _fake_ioctl(devmask, level=None, fail_read=False):
    requests = []

    def fake(fd, request, arg):
        requests.append(request)
        if request == volume.SOUND_MIXER_READ_DEVMASK:
            return struct.pack("i", devmask)
        if fail_read:
            raise OSError(5, "Input/output error")
        return struct.pack("i", level)

    return fake, requests


def test_missing_card(tmp_path):
    assert vol_perc(tmp_path / "absent") is None


def test_regular_file_is_not_a_mixer(card):
    assert vol_perc(card) is None


def test_reads_left_channel(card):
    left, right = 75, 40
    fake, requests = _fake_ioctl(devmask=1, level=(right << 8) | left)
    with mock.patch("fcntl.ioctl", side_effect=fake):
        assert vol_perc(card) == str(left)
    assert requests[0] == volume.SOUND_MIXER_READ_DEVMASK
    assert len(requests) == 2


def test_no_master_volume_in_devmask(card):
    fake, requests = _fake_ioctl(devmask=1 << 4, level=50)
    with mock.patch("fcntl.ioctl", side_effect=fake):
        assert vol_perc(card) is None
    assert requests == [volume.SOUND_MIXER_READ_DEVMASK]


def test_failed_level_read(card):
    fake, _ = _fake_ioctl(devmask=1, fail_read=True)
    with mock.patch("fcntl.ioctl", side_effect=fake):
        assert vol_perc(card) is None


def test_device_names_start_with_master():
    assert volume.SOUND_DEVICE_NAMES.index("vol") == 0
    assert volume.SOUND_MIXER_READ_DEVMASK & 0xFF == 0xFE