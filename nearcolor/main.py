from __future__ import annotations

import argparse
import os.path
import sys
from typing import Sequence

from nearcolor import catalog
from nearcolor import persist
from nearcolor.color import Color
from nearcolor.color_kd import KD
from nearcolor.color_kd import nearest_brute
from nearcolor.color_kd import Point
from nearcolor.perf import Perf
from nearcolor.perf import perf_log
from nearcolor.user_data import xdg_cache
from nearcolor.user_data import xdg_config


def _swatch(color: Color) -> str:
    return '\x1b[48;2;{r};{g};{b}m  \x1b[49m '.format(**color._asdict())


def _label_swatch(label: str) -> str:
    # labels of trees saved through the api need not start with a color
    try:
        color = Color.parse(label.split()[0])
    except (IndexError, ValueError):
        return ''
    else:
        return _swatch(color)


def _query_point(s: str) -> Point:
    color = Color.parse(s)
    return Point(*color.to_lab(), label=color.hex)


def _catalog_points(filename: str | None) -> list[Point]:
    if filename is None:
        return catalog.load_default()
    else:
        return catalog.load(filename)


def _get_tree(args: argparse.Namespace, perf: Perf) -> KD:
    catalog_filename = args.catalog
    if catalog_filename is None and os.path.isfile(xdg_config('colors.txt')):
        catalog_filename = xdg_config('colors.txt')

    # a one-off catalog does not get cached unless asked to
    tree_filename = args.tree
    if tree_filename is None and args.catalog is None:
        tree_filename = xdg_cache('kdtree.npz')
    if args.no_cache:
        tree_filename = None

    if (
            tree_filename is not None and
            not args.rebuild and
            os.path.isfile(tree_filename)
    ):
        with perf.event('load tree'):
            kd = persist.load(tree_filename)
        print(f'tree loaded from {tree_filename}', file=sys.stderr)
        return kd

    with perf.event('load catalog'):
        points = _catalog_points(catalog_filename)
    with perf.event('build'):
        kd = KD.build(points)

    if tree_filename is not None:
        with perf.event('save tree'):
            persist.save(kd, tree_filename)
        print(f'tree built and saved to {tree_filename}', file=sys.stderr)
    else:
        colors = 'colors' if len(kd) != 1 else 'color'
        print(f'tree built ({len(kd)} {colors})', file=sys.stderr)
    return kd


def _nearest(
        kd: KD,
        colors: Sequence[str],
        *,
        check: bool,
        use_color: bool,
        perf: Perf,
) -> int:
    ret = 0
    for s in colors:
        query = _query_point(s)
        with perf.event(f'query {query.label}'):
            found = kd.nearest(query)

        dist = query.distance(found)
        if use_color:
            prefix = _swatch(Color.parse(s))
            found_s = f'{_label_swatch(found.label)}{found.label}'
        else:
            prefix = ''
            found_s = found.label
        print(f'{prefix}{s} -> {found_s} (distance {dist:.2f})')

        if check:
            expected = nearest_brute(query, kd)
            if query.distance(expected) != dist:
                print(
                    f'{s}: linear scan found {expected.label} '
                    f'(distance {query.distance(expected):.2f})',
                    file=sys.stderr,
                )
                ret = 1
    return ret


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description='find the closest catalog color in CIE L*a*b* space',
    )
    parser.add_argument('colors', metavar='color', nargs='+')
    parser.add_argument(
        '--catalog',
        help='one color per line (default: the xterm 256 color palette)',
    )
    parser.add_argument(
        '--tree',
        help=f'saved tree location (default: {xdg_cache("kdtree.npz")})',
    )
    parser.add_argument(
        '--rebuild', action='store_true',
        help='rebuild the tree from the catalog even if a saved one exists',
    )
    parser.add_argument(
        '--no-cache', action='store_true',
        help='do not read or write a saved tree',
    )
    parser.add_argument(
        '--check', action='store_true',
        help='verify each result against a linear scan of the catalog',
    )
    parser.add_argument(
        '--color', choices=('auto', 'always', 'never'), default='auto',
    )
    parser.add_argument('--perf-log')
    args = parser.parse_args(argv)

    if args.color == 'auto':
        use_color = sys.stdout.isatty()
    else:
        use_color = args.color == 'always'

    with perf_log(args.perf_log) as perf:
        try:
            for s in args.colors:
                Color.parse(s)
            kd = _get_tree(args, perf)
            return _nearest(
                kd, args.colors,
                check=args.check, use_color=use_color, perf=perf,
            )
        except (OSError, ValueError) as e:
            print(f'nearcolor: {e}', file=sys.stderr)
            return 1


if __name__ == '__main__':
    raise SystemExit(main())
