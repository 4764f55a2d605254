# -*- coding: utf-8 -*-
"""Controller Docs command line entrypoint.

Kept thin:
- bootstrap (paths, logging, settings)
- open the record store selected in settings
- dispatch one subcommand to the service layer

Examples:
  ctrldocs add --campus North --building B1 --number C-01 --limit 130 \
      --channel "LED strip:24:2.5" --channel "Downlight:12:5"
  ctrldocs list
  ctrldocs export <id> --format pdf
  ctrldocs export-batch --campus North --format xlsx
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

from app.bootstrap import bootstrap
from app.deps import ensure_runtime_deps
from app.events import EventBus
from core.calculations.power import WarningLevel, summarize
from core.types import Severity
from ctrldocs.version import __version__
from domain import hierarchy
from services.controller_service import ControllerService
from services.dashboard_service import DashboardService
from services.errors import ControllerDocsError, ExportError
from services.export.projection import channel_rows, fmt_watts, header_block, load_line
from services.presets_service import FixtureService, TemplateService
from storage.repository import RecordStore, open_record_store

log = logging.getLogger(__name__)


@dataclass
class Services:
    controllers: ControllerService
    dashboard: DashboardService
    templates: TemplateService
    fixtures: FixtureService
    settings: dict


def build_services(settings: dict, store: Optional[RecordStore] = None) -> Services:
    store = store or open_record_store(settings)
    bus = EventBus()
    controllers = ControllerService(store, bus)
    return Services(
        controllers=controllers,
        dashboard=DashboardService(controllers),
        templates=TemplateService(store, bus),
        fixtures=FixtureService(store, bus),
        settings=settings,
    )


def channel_arg(value: str) -> dict:
    """'fixture:voltage:current[:parallel]' -> channel fields."""
    parts = value.split(":")
    if len(parts) not in (3, 4):
        raise argparse.ArgumentTypeError(
            f"invalid channel {value!r}; expected fixture:voltage:current[:parallel]"
        )
    fields = {"fixture_type": parts[0], "voltage": parts[1], "current": parts[2]}
    if len(parts) == 4:
        fields["parallel_count"] = parts[3]
    return fields


def _out(line: str = "") -> None:
    print(line)


def _level_tag(level: WarningLevel) -> str:
    return "" if level == WarningLevel.NONE else f"  [{level.label}]"


# -------- commands --------
def cmd_list(svc: Services, args: argparse.Namespace) -> int:
    tree = svc.dashboard.tree()
    if not tree:
        _out("No controllers.")
        return 0
    for campus, buildings in tree.items():
        _out(f"{campus} ({hierarchy.count(buildings)})")
        for building, floors in buildings.items():
            _out(f"  {building} ({hierarchy.count(floors)})")
            for floor, controllers in floors.items():
                _out(f"    {floor} ({len(controllers)})")
                for c in controllers:
                    s = summarize(c)
                    name = c.controller_number or "Doc"
                    zone = f" {c.zone}" if c.zone else ""
                    _out(f"      {c.id}  {name}{zone}  {fmt_watts(s.total_w)}{_level_tag(s.level)}")
    st = svc.dashboard.stats()
    _out()
    _out(f"{st.total_controllers} controller(s), {st.total_channels} channel(s), "
         f"{fmt_watts(st.total_power_w)} total, {st.with_warnings} with warnings")
    return 0


def cmd_show(svc: Services, args: argparse.Namespace) -> int:
    c = svc.controllers.get(args.id)
    s = summarize(c)
    _out(f"Controller {c.id}")
    for label, value in header_block(c):
        _out(f"  {label + ':':<19}{value or '-'}")
    _out()
    for r in channel_rows(c):
        _out(f"  #{r.channel_number:<3} {r.fixture_type or '-':<24} {r.voltage} V x {r.current} A "
             f"x {r.parallel_count} = {fmt_watts(r.power_w)}")
    _out()
    _out(f"  Total: {fmt_watts(s.total_w)}")
    extra = load_line(s)
    if extra:
        _out(f"  {extra}")
    _out(f"  Updated: {c.updated_at}")
    return 0


def cmd_add(svc: Services, args: argparse.Namespace) -> int:
    sheet = svc.controllers.open_sheet()
    if args.template:
        tpl = svc.templates.find_by_name(args.template)
        sheet.apply_template(tpl or svc.templates.get(args.template))

    location = {
        key: value
        for key, value in (
            ("campus", args.campus),
            ("building", args.building),
            ("floor", args.floor),
            ("zone", args.zone),
            ("controller_number", args.number),
        )
        if value is not None
    }
    if location:
        sheet.set_location(**location)
    if args.limit is not None:
        sheet.set_power_limit(args.limit)

    if args.channel:
        sheet.set_channels(args.channel)

    for it in sheet.issues():
        if it.severity != Severity.ERROR:
            _out(f"note: {it.message}")
    stored = svc.controllers.save(sheet)
    s = summarize(stored)
    _out(f"Saved controller {stored.id} ({len(stored.channels)} channel(s), {fmt_watts(s.total_w)})"
         f"{_level_tag(s.level)}")
    return 0


def cmd_delete(svc: Services, args: argparse.Namespace) -> int:
    if not svc.controllers.delete(args.id):
        _out(f"Controller not found: {args.id}")
        return 1
    _out(f"Deleted controller {args.id}")
    return 0


def cmd_delete_section(svc: Services, args: argparse.Namespace) -> int:
    name, selected = svc.dashboard.section(args.campus, args.building, args.floor)
    if not selected:
        _out(f"No controllers in {name}")
        return 1
    if not args.yes:
        _out(f"Would delete {len(selected)} controller(s) in {name}; pass --yes to confirm.")
        return 1
    n = svc.dashboard.delete_section(args.campus, args.building, args.floor)
    _out(f"Deleted {n} controller(s) in {name}")
    return 0


def _export_service(svc: Services, args: argparse.Namespace):
    try:
        ensure_runtime_deps()
    except RuntimeError as e:
        raise ExportError(str(e)) from e
    from services.export_service import ExportService

    return ExportService(svc.settings, folder=args.out)


def cmd_export(svc: Services, args: argparse.Namespace) -> int:
    c = svc.controllers.get(args.id)
    path = _export_service(svc, args).export_controller(c, args.format)
    _out(str(path))
    return 0


def cmd_export_batch(svc: Services, args: argparse.Namespace) -> int:
    if args.campus is None:
        name, selected = "All", svc.dashboard.snapshot()
    else:
        name, selected = svc.dashboard.section(args.campus, args.building, args.floor)
    path = _export_service(svc, args).export_batch(selected, name, args.format)
    _out(str(path))
    return 0


def cmd_fixtures(svc: Services, args: argparse.Namespace) -> int:
    if args.action == "add":
        fx = svc.fixtures.add(args.name, args.voltage, args.current)
        _out(f"Saved fixture {fx.id} ({fx.name}, {fmt_watts(svc.fixtures.power(fx))})")
        return 0
    if args.action == "delete":
        if not svc.fixtures.delete(args.id):
            _out(f"Fixture not found: {args.id}")
            return 1
        _out(f"Deleted fixture {args.id}")
        return 0
    fixtures = svc.fixtures.list()
    if not fixtures:
        _out("No fixture presets.")
    for fx in fixtures:
        _out(f"{fx.id}  {fx.name:<24} {fx.voltage} V  {fx.current} A  {fmt_watts(svc.fixtures.power(fx))}")
    return 0


def cmd_templates(svc: Services, args: argparse.Namespace) -> int:
    if args.action == "create":
        sheet = svc.controllers.open_sheet(args.controller_id)
        tpl = svc.templates.create_from_sheet(
            sheet, args.name, args.description or "", include_location=not args.no_location
        )
        _out(f"Saved template {tpl.id} ({tpl.name}, {len(tpl.channels)} channel(s))")
        return 0
    if args.action == "delete":
        if not svc.templates.delete(args.id):
            _out(f"Template not found: {args.id}")
            return 1
        _out(f"Deleted template {args.id}")
        return 0
    templates = svc.templates.list()
    if not templates:
        _out("No templates.")
    for tpl in templates:
        desc = f"  {tpl.description}" if tpl.description else ""
        _out(f"{tpl.id}  {tpl.name} ({len(tpl.channels)} channel(s)){desc}")
    return 0


# -------- parser --------
def _section_args(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--campus", required=required, help='Campus label (blank campuses: "Unknown Campus")')
    p.add_argument("--building", help="Building label within the campus")
    p.add_argument("--floor", help="Floor label within the building")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="ctrldocs", description="Lighting controller documentation")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on the console")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="Controllers grouped by campus, building and floor")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("show", help="One controller with its channels and load")
    p.add_argument("id")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("add", help="Create a controller")
    p.add_argument("--campus")
    p.add_argument("--building")
    p.add_argument("--floor")
    p.add_argument("--zone")
    p.add_argument("--number", help="Controller number")
    p.add_argument("--limit", help="Power limit in watts")
    p.add_argument("--channel", action="append", type=channel_arg, default=[],
                   metavar="FIXTURE:V:A[:N]", help="Channel; repeat for more")
    p.add_argument("--template", help="Template name or id to start from")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("delete", help="Delete one controller")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("delete-section", help="Delete every controller of a campus, building or floor")
    _section_args(p, required=True)
    p.add_argument("--yes", action="store_true", help="Confirm the deletion")
    p.set_defaults(func=cmd_delete_section)

    p = sub.add_parser("export", help="Export one controller")
    p.add_argument("id")
    p.add_argument("--format", choices=("xlsx", "pdf"), default="pdf")
    p.add_argument("--out", help="Target folder (default: settings export_dir)")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("export-batch", help="Export a section (or everything) into one file")
    _section_args(p, required=False)
    p.add_argument("--format", choices=("xlsx", "pdf"), default="pdf")
    p.add_argument("--out", help="Target folder (default: settings export_dir)")
    p.set_defaults(func=cmd_export_batch)

    p = sub.add_parser("fixtures", help="Fixture presets")
    fx = p.add_subparsers(dest="action", required=True)
    fx.add_parser("list")
    q = fx.add_parser("add")
    q.add_argument("name")
    q.add_argument("voltage")
    q.add_argument("current")
    q = fx.add_parser("delete")
    q.add_argument("id")
    p.set_defaults(func=cmd_fixtures)

    p = sub.add_parser("templates", help="Controller templates")
    tp = p.add_subparsers(dest="action", required=True)
    tp.add_parser("list")
    q = tp.add_parser("create", help="Create a template from a stored controller")
    q.add_argument("controller_id")
    q.add_argument("--name", required=True)
    q.add_argument("--description")
    q.add_argument("--no-location", action="store_true", help="Keep only the channels")
    q = tp.add_parser("delete")
    q.add_argument("id")
    p.set_defaults(func=cmd_templates)

    return ap


def main(argv: Optional[Sequence[str]] = None, *, store: Optional[RecordStore] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.command in ("delete-section", "export-batch"):
        if args.floor is not None and args.building is None:
            parser.error("--floor needs --building")
        if args.building is not None and args.campus is None:
            parser.error("--building needs --campus")
    settings = bootstrap(verbose=args.verbose)
    try:
        svc = build_services(settings, store)
        return args.func(svc, args)
    except ControllerDocsError as e:
        log.error("%s failed: %s", args.command, e)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
