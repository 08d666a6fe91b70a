"""CLI: inspect theme and locale resolution without a GUI."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from prefsync.config import settings
from prefsync.design import available_presets, base_palette, merge_theme, preset_override
from prefsync.i18n import resolve_locale
from prefsync.i18n.audit import audit_catalogs
from prefsync.i18n.catalogs import BUILTIN_CATALOGS
from prefsync.services.style_surface import theme_to_variables


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="prefsync", description="Preference resolution tools")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    theme = sub.add_parser("theme", help="Print the resolved theme as CSS variables")
    mode = theme.add_mutually_exclusive_group()
    mode.add_argument("--dark", dest="dark", action="store_true", default=False)
    mode.add_argument("--light", dest="dark", action="store_false")
    theme.add_argument("--preset", choices=available_presets(), help="Branding preset id")
    theme.add_argument("--override", metavar="FILE.json", help="Partial slot map to layer on top")
    theme.add_argument("--json", action="store_true", help="Emit a JSON object instead of CSS")

    locale = sub.add_parser("locale", help="Print the locale the precedence rule selects")
    locale.add_argument("--override", metavar="CODE", help="User language override")
    locale.add_argument("--culture", metavar="XX-YY", help="Backend culture")
    locale.add_argument("--current", metavar="CODE", default=settings.DEFAULT_LANGUAGE)

    audit = sub.add_parser("audit", help="Check the built-in catalogs for missing or unused keys")
    audit.add_argument("paths", nargs="*", help="Source files or directories scanned for t(\"...\") keys")
    audit.add_argument("--reference", default=settings.DEFAULT_LANGUAGE, help="Reference locale")
    return p


def _load_override(path: str) -> dict:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object of color slots")
    return data


def cmd_theme(args: argparse.Namespace) -> int:
    override: dict = {}
    if args.preset:
        override.update(preset_override(args.preset) or {})
    if args.override:
        try:
            override.update(_load_override(args.override))
        except (OSError, ValueError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
    resolved = merge_theme(base_palette(args.dark), override)
    variables = theme_to_variables(resolved)
    if args.json:
        print(json.dumps(variables, indent=2, sort_keys=True))
        return 0
    print(":root {")
    for name in sorted(variables):
        print(f"  {name}: {variables[name]};")
    print("}")
    return 0


def cmd_locale(args: argparse.Namespace) -> int:
    print(resolve_locale(args.current, user_language=args.override, backend_culture=args.culture))
    return 0


def cmd_audit(args: argparse.Namespace) -> int:
    """Exit 1 when any catalog misses a key; unused keys are only reported."""
    results = audit_catalogs(BUILTIN_CATALOGS, reference=args.reference, paths=args.paths or None)
    missing_total = 0
    for locale in sorted(results):
        result = results[locale]
        missing_total += len(result["missing"])
        for key in result["missing"]:
            print(f"{locale}: missing {key}")
        for key in result["unused"]:
            print(f"{locale}: unused {key}")
    if missing_total:
        print(f"{missing_total} missing key(s)", file=sys.stderr)
        return 1
    print("catalogs OK")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if args.command == "theme":
        return cmd_theme(args)
    if args.command == "audit":
        return cmd_audit(args)
    return cmd_locale(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
