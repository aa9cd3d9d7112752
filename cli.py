#!/usr/bin/env python
"""
cli.py
======

Command‑line interface for the **spatial_smoothing** project.

Examples
--------
# 1) 3x3 box average with replicated edges
python cli.py apply -i input_img/tile.png -o results/tile_mean3.png --filter mean3

# 2) Same kernel, periodic (toroidal) image boundary
python cli.py apply -i input_img/tile.png -o results/tile_wrap.png --filter mean3 --edge periodic

# 3) Custom 3x3 mask given as row‑major weights
python cli.py apply -i input_img/tile.png -o results/tile_custom.png \
    --mask 1 2 1 2 4 2 1 2 1 --size 3 --edge zero_padding

# 4) Sharpen, keep the low 8 bits instead of clipping, write run.txt
python cli.py apply -i input_img/tile.png -o results/tile_sharp.png --filter sharpen --overflow wrap --log

# 5) Show the kernel catalog
python cli.py list-filters
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from edge_solutions import EdgeSolution
from filtering import FilterConfig, operate
from io_utils import read_image_bytes, save_image_bytes, write_run_log
from kernels import get_kernel, list_kernels


def _cmd_apply(args: argparse.Namespace) -> None:
    if args.filter:
        if args.size is not None:
            raise SystemExit("--size only applies to --mask; catalog filters fix their own size.")
        spec = get_kernel(args.filter)
        mask, size, edge = list(spec.mask), spec.size, spec.edge_solution
    else:
        if args.size is None:
            raise SystemExit("--size is required together with --mask.")
        mask, size, edge = args.mask, args.size, EdgeSolution.REPLICATION

    if args.edge:
        edge = EdgeSolution.from_name(args.edge)

    cfg = FilterConfig(
        overflow=args.overflow,
        strict_dimensions=args.strict,
    )

    data = read_image_bytes(args.img)
    out = operate(data, mask, size, edge, cfg=cfg)
    out_path = save_image_bytes(out, Path(args.output))
    print(f"Saved filtered image: {out_path}")

    if args.log:
        param_lines = [
            f"input_img        : {args.img}",
            f"output_img       : {out_path}",
            f"filter           : {args.filter or 'custom'}",
            f"mask             : {' '.join(str(w) for w in mask)}",
            f"size             : {size}",
            f"edge_solution    : {edge}",
            f"overflow         : {cfg.overflow}",
            f"strict_dimensions: {cfg.strict_dimensions}",
        ]
        log_path = write_run_log(param_lines)
        print(f"Run log saved to: {log_path}")


def _cmd_list_filters(args: argparse.Namespace) -> None:
    for spec in list_kernels():
        print(f"{spec.name:<14} {spec.size}x{spec.size}  {str(spec.edge_solution):<13} {spec.description}")


# --------------------------------------------------------------------------- #
# Argument parsing
# --------------------------------------------------------------------------- #
def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spatial_smoothing.cli",
        description="Spatial mask filtering of single‑channel images",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print INFO log records (stage timings, edge statistics).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # apply command
    p_app = subparsers.add_parser("apply", help="Filter one image.")
    p_app.add_argument(
        "-i",
        "--img",
        required=True,
        help="Path to the input image (colour inputs are reduced to luminance).",
    )
    p_app.add_argument(
        "-o",
        "--output",
        required=True,
        help="Output image path.",
    )

    kernel = p_app.add_mutually_exclusive_group(required=True)
    kernel.add_argument(
        "--filter",
        choices=[spec.name for spec in list_kernels()],
        help="Named kernel from the catalog (see list-filters).",
    )
    kernel.add_argument(
        "--mask",
        nargs="+",
        type=int,
        help="Custom kernel weights, row‑major (size*size integers).",
    )
    p_app.add_argument(
        "--size",
        type=int,
        help="Neighborhood size for --mask (odd, e.g. 3, 5, 7).",
    )
    p_app.add_argument(
        "--edge",
        choices=[m.label for m in EdgeSolution],
        help="Edge solution (default: catalog default, or replication for --mask).",
    )
    p_app.add_argument(
        "--overflow",
        choices=("clip", "wrap"),
        default="clip",
        help="Mapping of out‑of‑range results into [0, 255] (default: clip).",
    )
    p_app.add_argument(
        "--strict",
        action="store_true",
        help="Fail when the pixel buffer is not a whole number of rows.",
    )
    p_app.add_argument(
        "--log",
        action="store_true",
        help="Write parameters and stage timings to results/<timestamp>/run.txt.",
    )
    p_app.set_defaults(func=_cmd_apply)

    # list-filters command
    p_ls = subparsers.add_parser("list-filters", help="List catalog kernels.")
    p_ls.set_defaults(func=_cmd_list_filters)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    args.func(args)  # type: ignore[attr-defined]
    sys.exit(0)


if __name__ == "__main__":  # pragma: no cover
    main()
