from __future__ import annotations

import sys
from typing import Optional

from hostnamer.config import Settings, get_settings
from hostnamer.engine.audit import AuditLogger
from hostnamer.engine.catalog import CatalogError, normalize_name
from hostnamer.engine.conformance import HostnameValidator
from hostnamer.engine.generator import CATEGORIES, HostnameGenerator, ValidationError, resolve_category
from hostnamer.engine.store import FileSnapshotStore
from hostnamer.models import NamingScheme
from hostnamer.scheme_loader import SchemeError, load_scheme


def usage() -> None:
    print("Commands:")
    print("  python -m hostnamer.main generate <vendor> <type> <sector> <location> [count]")
    print("  python -m hostnamer.main next <sector>")
    print("  python -m hostnamer.main decode <hostname>")
    print("  python -m hostnamer.main validate <hostname> [<hostname> ...]")
    print("  python -m hostnamer.main duplicates <hostname> <hostname> [...]")
    print("  python -m hostnamer.main suggest <hostname>")
    print("  python -m hostnamer.main add <vendor|type|sector|location> <name> <code>")
    print("  python -m hostnamer.main remove <vendor|type|sector|location> <name>")
    print("  python -m hostnamer.main list [<vendor|type|sector|location>]")
    print("  python -m hostnamer.main sectors")
    print("")
    print("Examples:")
    print("  python -m hostnamer.main generate Condor laptop ti fabrica 3")
    print("  python -m hostnamer.main decode CNL-1L011-001")


def build_generator(settings: Settings) -> HostnameGenerator:
    scheme = load_scheme(settings.scheme_path) if settings.scheme_path else NamingScheme()
    store = FileSnapshotStore(settings.state_path)
    generator = HostnameGenerator(scheme=scheme, store=store, audit=AuditLogger(settings.audit_path))
    if store.last_error:
        print(f"⚠️ Ignoring unreadable state file {store.path} ({store.last_error}); using defaults.")
    return generator


def cmd_generate(gen: HostnameGenerator, vendor: str, type_: str, sector: str, location: str, count: str) -> int:
    try:
        n = int(count)
    except ValueError:
        print(f"❌ Count must be an integer, got '{count}'")
        return 2

    try:
        batch = gen.generate(vendor, type_, sector, location, n)
    except (ValidationError, OSError) as e:
        print(f"❌ {e}")
        return 1

    for item in batch:
        print(item.hostname)
    print(f"✅ Generated {len(batch)} hostname(s) for sector '{batch[0].sector}'")
    return 0


def cmd_next(gen: HostnameGenerator, sector: str) -> int:
    print(gen.get_next_available(sector))
    return 0


def cmd_decode(gen: HostnameGenerator, hostname: str) -> int:
    decoded = gen.decode(hostname)
    if decoded is None:
        print(f"❌ Not a {gen.scheme.prefix} hostname: {hostname}")
        return 1

    print(decoded.hostname)
    for category in CATEGORIES:
        name = getattr(decoded, category)
        print(f"  {category}: {name if name is not None else '?'} ({decoded.codes[category]})")
    print(f"  number: {decoded.number}")
    return 0


def cmd_validate(validator: HostnameValidator, hostnames: list[str]) -> int:
    exit_code = 0
    for checked in validator.validate_multiple(hostnames):
        report = checked.report
        if report.is_valid:
            print(f"✅ {checked.hostname}")
        else:
            print(f"❌ {checked.hostname}")
            exit_code = 1
        for e in report.errors:
            print(f"  - error: {e}")
        for w in report.warnings:
            print(f"  - warning: {w}")
        for s in report.suggestions:
            print(f"  - suggestion: {s}")
    return exit_code


def cmd_duplicates(validator: HostnameValidator, hostnames: list[str]) -> int:
    findings = validator.check_duplicates(hostnames)
    if not findings:
        print("✅ No duplicates")
        return 0

    for f in findings:
        print(f"❌ [{f.index}] {f.hostname}: {f.message} (first seen at {f.first_index})")
    return 1


def cmd_suggest(validator: HostnameValidator, hostname: str) -> int:
    suggestions = validator.generate_suggestions(hostname)
    if not suggestions:
        print(f"✅ No suggestions for {hostname}")
        return 0
    for s in suggestions:
        print(f"  - {s}")
    return 0


def cmd_add(gen: HostnameGenerator, category: str, name: str, code: str) -> int:
    key = resolve_category(category)
    if key is None:
        print(f"Unknown category: {category}. Known: {', '.join(CATEGORIES)}")
        return 2

    adders = {
        "vendor": gen.add_vendor,
        "type": gen.add_type,
        "sector": gen.add_sector,
        "location": gen.add_location,
    }
    try:
        adders[key](name, code)
    except (CatalogError, OSError) as e:
        print(f"❌ {e}")
        return 1

    print(f"✅ Added {key} '{normalize_name(name)}' with code {code}")
    return 0


def cmd_remove(gen: HostnameGenerator, category: str, name: str) -> int:
    if resolve_category(category) is None:
        print(f"Unknown category: {category}. Known: {', '.join(CATEGORIES)}")
        return 2

    try:
        removed = gen.remove_item(category, name)
    except OSError as e:
        print(f"❌ {e}")
        return 1

    if removed:
        print(f"✅ Removed {category} '{name}'")
        return 0
    print(f"❌ Not found: {category} '{name}'")
    return 1


def cmd_list(gen: HostnameGenerator, category: Optional[str]) -> int:
    if category is not None and resolve_category(category) is None:
        print(f"Unknown category: {category}. Known: {', '.join(CATEGORIES)}")
        return 2

    selected = [resolve_category(category)] if category else list(CATEGORIES)
    for key in selected:
        print(f"{key}:")
        for name, code in gen.catalog(key).items():
            print(f"  {name}: {code}")
    return 0


def cmd_sectors(gen: HostnameGenerator) -> int:
    summary = gen.sector_summary()
    if not summary:
        print("No hostnames allocated yet")
        return 0

    for sector in summary.values():
        print(f"{sector.name} ({sector.code or '?'}): {sector.count} hostname(s)")
        for h in sector.hostnames:
            print(f"  - {h}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        usage()
        return 2

    cmd, rest = args[0], args[1:]
    validator = HostnameValidator()

    if cmd == "validate":
        if not rest:
            usage()
            return 2
        return cmd_validate(validator, rest)

    if cmd == "duplicates":
        if not rest:
            usage()
            return 2
        return cmd_duplicates(validator, rest)

    if cmd == "suggest":
        if len(rest) != 1:
            usage()
            return 2
        return cmd_suggest(validator, rest[0])

    if cmd not in ("generate", "next", "decode", "add", "remove", "list", "sectors"):
        usage()
        return 2

    try:
        gen = build_generator(get_settings())
    except (SchemeError, CatalogError) as e:
        print(f"❌ {e}")
        return 1

    if cmd == "generate":
        # generate Condor laptop ti fabrica 3
        if len(rest) not in (4, 5):
            usage()
            return 2
        count = rest[4] if len(rest) == 5 else "1"
        return cmd_generate(gen, rest[0], rest[1], rest[2], rest[3], count)

    if cmd == "next":
        if len(rest) != 1:
            usage()
            return 2
        return cmd_next(gen, rest[0])

    if cmd == "decode":
        if len(rest) != 1:
            usage()
            return 2
        return cmd_decode(gen, rest[0])

    if cmd == "add":
        if len(rest) != 3:
            usage()
            return 2
        return cmd_add(gen, rest[0], rest[1], rest[2])

    if cmd == "remove":
        if len(rest) != 2:
            usage()
            return 2
        return cmd_remove(gen, rest[0], rest[1])

    if cmd == "list":
        if len(rest) > 1:
            usage()
            return 2
        return cmd_list(gen, rest[0] if rest else None)

    return cmd_sectors(gen)


if __name__ == "__main__":
    raise SystemExit(main())
