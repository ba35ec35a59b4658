"""Developer CLI for inspecting plan geometry stored as editor JSON."""

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from floorcore.exceptions import FloorCoreError
from floorcore.geometry import contract
from floorcore.geometry.coordinates import fit_to_content, snap_point_to_grid
from floorcore.geometry.primitives import Point
from floorcore.geometry.units import format_with_unit
from floorcore.logging_config import setup_logging
from floorcore.model.shapes import parse_shapes, walls_of
from floorcore.render.outline import outline_wall_groups
from floorcore.settings import KernelSettings
from floorcore.templates.placement import calculate_bounds, place_template_shapes
from floorcore.walls.connectivity import find_groups
from floorcore.walls.merge import auto_merge_walls


def _load_shapes(path: Path, args, settings: KernelSettings):
    payload = json.loads(path.read_text(encoding="utf-8"))
    records = payload.get("shapes", []) if isinstance(payload, dict) else payload
    shapes = parse_shapes(records, strict=args.strict, wall_defaults=settings.walls)
    logger.info("Loaded {} of {} shapes from {}", len(shapes), len(records), path)
    return shapes


def _cmd_groups(args, settings: KernelSettings) -> dict:
    walls = walls_of(_load_shapes(args.shapes, args, settings))
    groups = find_groups(walls, settings.tolerances.connect_mm)
    return {"groups": [[w.id for w in group] for group in groups]}


def _cmd_outline(args, settings: KernelSettings) -> dict:
    shapes = _load_shapes(args.shapes, args, settings)
    outlines = outline_wall_groups(shapes, args.selected or (), settings.tolerances.connect_mm)
    return {
        "outlines": [
            {
                "wall_ids": o.wall_ids,
                "is_selected": o.is_selected,
                "rings": [[p.to_tuple() for p in ring] for ring in o.rings],
            }
            for o in outlines
        ]
    }


def _cmd_bounds(args, settings: KernelSettings) -> dict:
    bounds = calculate_bounds(_load_shapes(args.shapes, args, settings))
    unit = settings.grid.unit
    return {
        "min_x": bounds.min_x,
        "min_y": bounds.min_y,
        "max_x": bounds.max_x,
        "max_y": bounds.max_y,
        "width": bounds.width,
        "height": bounds.height,
        "size": f"{format_with_unit(bounds.width, unit)} x {format_with_unit(bounds.height, unit)}",
    }


def _cmd_place(args, settings: KernelSettings) -> dict:
    shapes = _load_shapes(args.shapes, args, settings)
    target = snap_point_to_grid(Point(x=args.x, y=args.y), settings.grid.size_mm, settings.grid.snap)
    placed = place_template_shapes(shapes, target, args.plan_id)
    return {"shapes": [s.to_editor_dict() for s in placed]}


def _cmd_fit(args, settings: KernelSettings) -> dict:
    shapes = _load_shapes(args.shapes, args, settings)
    view = fit_to_content(
        shapes,
        args.width,
        args.height,
        min_zoom=settings.view.min_zoom,
        max_zoom=min(settings.view.max_zoom, contract.FIT_MAX_ZOOM),
    )
    if view is None:
        return {"view": None}
    return {"view": view.model_dump(by_alias=True)}


def _cmd_merge(args, settings: KernelSettings) -> dict:
    walls = walls_of(_load_shapes(args.shapes, args, settings))
    new_wall = next((w for w in walls if w.id == args.wall), None)
    if new_wall is None:
        raise FloorCoreError(f"Wall {args.wall} not found", {"wall_id": args.wall})
    result = auto_merge_walls(new_wall, walls, tolerances=settings.tolerances)
    if result is None:
        return {"merged": None, "deletes": []}
    changes = result.to_changes()
    return {"merged": result.merged_wall.to_editor_dict(), "deletes": changes.deletes}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="floorcore", description="Inspect floor-plan geometry (editor JSON shapes)")
    parser.add_argument("--config", type=Path, help="YAML configuration file (default: FLOORCORE_CONFIG)")
    parser.add_argument("--log-level", default=None, help="Override configured log level")
    parser.add_argument("--strict", action="store_true", help="Fail on malformed shapes instead of skipping them")

    sub = parser.add_subparsers(dest="command", required=True)

    groups = sub.add_parser("groups", help="List connected wall groups")
    groups.add_argument("shapes", type=Path, help="JSON file with a list of shapes")
    groups.set_defaults(handler=_cmd_groups)

    outline = sub.add_parser("outline", help="Union outline per wall group")
    outline.add_argument("shapes", type=Path, help="JSON file with a list of shapes")
    outline.add_argument("--selected", nargs="*", help="Selected wall ids")
    outline.set_defaults(handler=_cmd_outline)

    bounds = sub.add_parser("bounds", help="Bounding box of all shapes")
    bounds.add_argument("shapes", type=Path, help="JSON file with a list of shapes")
    bounds.set_defaults(handler=_cmd_bounds)

    place = sub.add_parser("place", help="Place shapes as a template at a position (snapped to the grid)")
    place.add_argument("shapes", type=Path, help="JSON file with template shapes")
    place.add_argument("--x", type=float, required=True, help="Target x in mm")
    place.add_argument("--y", type=float, required=True, help="Target y in mm")
    place.add_argument("--plan-id", required=True, help="Plan id for the placed shapes")
    place.set_defaults(handler=_cmd_place)

    fit = sub.add_parser("fit", help="View state framing all shapes")
    fit.add_argument("shapes", type=Path, help="JSON file with a list of shapes")
    fit.add_argument("--width", type=float, required=True, help="Viewport width in pixels")
    fit.add_argument("--height", type=float, required=True, help="Viewport height in pixels")
    fit.set_defaults(handler=_cmd_fit)

    merge = sub.add_parser("merge", help="Merge a wall with the collinear walls it touches")
    merge.add_argument("shapes", type=Path, help="JSON file with a list of shapes")
    merge.add_argument("--wall", required=True, help="Id of the wall to merge")
    merge.set_defaults(handler=_cmd_merge)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = KernelSettings.load(args.config)
        setup_logging(settings.logging, level=args.log_level)
        result = args.handler(args, settings)
    except FloorCoreError as exc:
        logger.error("{} {}", exc.message, exc.details or "")
        return 1
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Could not read input: {}", exc)
        return 1

    sys.stdout.write(json.dumps(result, indent=2) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
