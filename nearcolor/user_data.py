from __future__ import annotations

import os.path


def _xdg(*path: str, env: str, default: str) -> str:
    return os.path.join(
        os.environ.get(env) or os.path.expanduser(default),
        'nearcolor', *path,
    )


def xdg_config(*path: str) -> str:
    return _xdg(*path, env='XDG_CONFIG_HOME', default='~/.config')


def xdg_cache(*path: str) -> str:
    return _xdg(*path, env='XDG_CACHE_HOME', default='~/.cache')
