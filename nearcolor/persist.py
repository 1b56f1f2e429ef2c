from __future__ import annotations

import io
import os
import tempfile
import zipfile

import numpy as np

from nearcolor.color_kd import KD
from nearcolor.color_kd import Point

VERSION = 1


def dumps(kd: KD) -> bytes:
    points = list(kd)
    coords = np.array([point[:3] for point in points], dtype=np.float64)
    labels = np.array([point.label for point in points], dtype=np.str_)

    bio = io.BytesIO()
    np.savez(bio, version=np.array(VERSION), coords=coords, labels=labels)
    return bio.getvalue()


def loads(data: bytes) -> KD:
    try:
        loaded = np.load(io.BytesIO(data), allow_pickle=False)
    except (EOFError, OSError, ValueError, zipfile.BadZipFile) as e:
        raise ValueError(f'not a saved color tree: {e}') from None

    if not isinstance(loaded, np.lib.npyio.NpzFile):
        raise ValueError('not a saved color tree: not an .npz archive')

    with loaded as npz:
        try:
            version = npz['version']
            coords = npz['coords']
            labels = npz['labels']
        except (KeyError, OSError, ValueError, zipfile.BadZipFile) as e:
            raise ValueError(f'not a saved color tree: {e}') from None

    if (
            version.shape != () or
            version.dtype.kind not in 'iu' or
            int(version) != VERSION
    ):
        raise ValueError(f'unsupported tree version: {version}')
    elif coords.ndim != 2 or coords.shape[1:] != (3,):
        raise ValueError(f'bad coordinate shape: {coords.shape}')
    elif labels.shape != coords.shape[:1]:
        raise ValueError(
            f'{len(labels)} labels for {len(coords)} coordinates',
        )

    points = [
        Point(float(l), float(a), float(b), str(label))
        for (l, a, b), label in zip(coords, labels)  # noqa: E741
    ]
    return KD.from_preorder(points)


def save(kd: KD, filename: str) -> None:
    dirname = os.path.dirname(os.path.abspath(filename))
    os.makedirs(dirname, exist_ok=True)

    fd, tmp = tempfile.mkstemp(dir=dirname, suffix='.tmp')
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(dumps(kd))
        os.replace(tmp, filename)
    except BaseException:
        os.remove(tmp)
        raise


def load(filename: str) -> KD:
    with open(filename, 'rb') as f:
        return loads(f.read())
