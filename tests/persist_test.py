from __future__ import annotations

import io
import random
from unittest import mock

import numpy as np
import pytest

from nearcolor import persist
from nearcolor.color_kd import KD
from nearcolor.color_kd import Point


@pytest.fixture
def kd():
    rand = random.Random(0)
    return KD.build(
        Point(
            rand.uniform(0, 100),
            rand.uniform(-128, 127),
            rand.uniform(-128, 127),
            f'#{i:06x} color {i}',
        )
        for i in range(300)
    )


def _npz(**arrays):
    bio = io.BytesIO()
    np.savez(bio, **arrays)
    return bio.getvalue()


def test_round_trip_same_tree(kd):
    loaded = persist.loads(persist.dumps(kd))
    assert loaded.root == kd.root
    assert len(loaded) == len(kd)


def test_round_trip_same_results(kd):
    loaded = persist.loads(persist.dumps(kd))
    rand = random.Random(1)
    for _ in range(50):
        query = Point(
            rand.uniform(0, 100),
            rand.uniform(-128, 127),
            rand.uniform(-128, 127),
            'q',
        )
        assert loaded.nearest(query) == kd.nearest(query)


def test_round_trip_single_point():
    kd = KD.build([Point(1.5, -2.25, 3.125, '#abcdef')])
    loaded = persist.loads(persist.dumps(kd))
    assert list(loaded) == [Point(1.5, -2.25, 3.125, '#abcdef')]


def test_save_load(kd, tmpdir):
    filename = tmpdir.join('cache/nearcolor/kdtree.npz')
    persist.save(kd, str(filename))
    assert filename.exists()
    assert [p.basename for p in filename.dirpath().listdir()] == [
        'kdtree.npz',
    ]
    assert persist.load(str(filename)).root == kd.root


def test_save_overwrites(kd, tmpdir):
    filename = tmpdir.join('kdtree.npz')
    filename.write_binary(b'old')
    persist.save(kd, str(filename))
    assert persist.load(str(filename)).root == kd.root


@pytest.mark.parametrize('data', (b'', b'garbage', b'PK\x03\x04garbage'))
def test_loads_not_a_tree(data):
    with pytest.raises(ValueError) as excinfo:
        persist.loads(data)
    msg, = excinfo.value.args
    assert msg.startswith('not a saved color tree: ')


def test_loads_missing_array():
    data = _npz(version=np.array(1), coords=np.zeros((1, 3)))
    with pytest.raises(ValueError) as excinfo:
        persist.loads(data)
    msg, = excinfo.value.args
    assert msg.startswith('not a saved color tree: ')


def test_loads_wrong_version():
    data = _npz(
        version=np.array(2),
        coords=np.zeros((1, 3)),
        labels=np.array(['#000000']),
    )
    with pytest.raises(ValueError) as excinfo:
        persist.loads(data)
    msg, = excinfo.value.args
    assert msg == 'unsupported tree version: 2'


def test_loads_bad_shape():
    data = _npz(
        version=np.array(1),
        coords=np.zeros((2, 2)),
        labels=np.array(['a', 'b']),
    )
    with pytest.raises(ValueError) as excinfo:
        persist.loads(data)
    msg, = excinfo.value.args
    assert msg == 'bad coordinate shape: (2, 2)'


def test_loads_label_count_mismatch():
    data = _npz(
        version=np.array(1),
        coords=np.zeros((2, 3)),
        labels=np.array(['a']),
    )
    with pytest.raises(ValueError) as excinfo:
        persist.loads(data)
    msg, = excinfo.value.args
    assert msg == '1 labels for 2 coordinates'


def test_loads_npy_array():
    bio = io.BytesIO()
    np.save(bio, np.zeros((2, 3)))
    with pytest.raises(ValueError) as excinfo:
        persist.loads(bio.getvalue())
    msg, = excinfo.value.args
    assert msg == 'not a saved color tree: not an .npz archive'


@pytest.mark.parametrize(
    'version',
    (np.array([1, 2]), np.array('1'), np.array(1.0)),
)
def test_loads_malformed_version(version):
    data = _npz(
        version=version,
        coords=np.zeros((1, 3)),
        labels=np.array(['#000000']),
    )
    with pytest.raises(ValueError) as excinfo:
        persist.loads(data)
    msg, = excinfo.value.args
    assert msg.startswith('unsupported tree version: ')


def test_save_error_leaves_no_temporary_file(kd, tmpdir):
    filename = tmpdir.join('kdtree.npz')
    with mock.patch.object(persist, 'dumps', side_effect=ValueError('boom')):
        with pytest.raises(ValueError) as excinfo:
            persist.save(kd, str(filename))
    msg, = excinfo.value.args
    assert msg == 'boom'
    assert tmpdir.listdir() == []
