"""Group resolver: assigns view files to CSS source groups and stubs sources."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Mapping

from twstrata.errors import ConfigurationError, StubCreationError
from twstrata.groups.directives import DirectiveExtractor, normalize_extension
from twstrata.model.group import SourceGroupMap

logger = logging.getLogger(__name__)

DEFAULT_STUB_IMPORT = '@import "tailwindcss" source(none);'


def group_name_from_reference(reference: str) -> str:
    """Reduce a directive capture such as ``../tw/checkout.css`` to ``checkout``.

    Returns an empty string when nothing usable is left: bare directory
    references such as ``.`` or ``../`` and hidden names.
    """
    name = reference.strip().replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(".css"):
        name = name[: -len(".css")]
    if name.startswith("."):
        return ""
    return name


def _normalize_view(view: Path | str) -> Path:
    return Path(view).resolve()


def _scan_view(
    view: Path, extractors: Mapping[str, DirectiveExtractor]
) -> tuple[Path, str | None] | None:
    """Return ``(view, reference)`` or None when the file has to be skipped."""
    ext = normalize_extension(view.suffix)
    extractor = extractors.get(ext)
    if extractor is None:
        logger.warning("Unsupported file type: %s (%s)", ext or "<none>", view)
        return None
    try:
        text = view.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Error reading file %s: %s", view, exc)
        return None
    return view, extractor.extract(text)


def resolve_groups(
    view_files: Iterable[Path | str],
    extractors: Mapping[str, DirectiveExtractor],
    default_group: str,
    *,
    critical_group: str,
    known_groups: Iterable[str] = (),
    max_workers: int | None = None,
) -> SourceGroupMap:
    """Build the SourceGroupMap for one build.

    Every view lands in exactly one group: the one its directive names, or
    *default_group* when there is no directive or it names no usable group. Views
    keep their input order inside each group. Files are read concurrently;
    the map itself is only written from the calling thread.
    """
    group_map = SourceGroupMap(global_name=default_group, critical_name=critical_group)
    group_map.ensure(default_group)
    group_map.ensure(critical_group)
    for name in known_groups:
        group_map.ensure(name)

    views: list[Path] = []
    seen: set[Path] = set()
    for view in view_files:
        normalized = _normalize_view(view)
        if normalized not in seen:
            seen.add(normalized)
            views.append(normalized)

    if views:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            scanned = list(pool.map(lambda v: _scan_view(v, extractors), views))
    else:
        scanned = []

    for entry in scanned:
        if entry is None:
            continue
        view, reference = entry
        name = group_name_from_reference(reference) if reference else ""
        if reference and not name:
            logger.warning(
                "Ignoring @useCSS reference %r in %s; using group %s",
                reference,
                view,
                default_group,
            )
        group_map.add_view(name or default_group, view)

    logger.debug(
        "Resolved %d view(s) into %d group(s)", len(views), len(group_map)
    )
    return group_map


def discover_source_groups(source_dir: Path) -> list[str]:
    """Names of the ``*.css`` files directly inside *source_dir*.

    The suffix match is case-sensitive and dot-files are ignored. A missing
    directory has no groups.
    """
    source_dir = Path(source_dir)
    if not source_dir.exists():
        return []
    if not source_dir.is_dir():
        raise ConfigurationError(f"Source path is not a directory: {source_dir}")
    try:
        entries = sorted(source_dir.iterdir())
    except OSError as exc:
        raise ConfigurationError(
            f"Error reading source directory: {source_dir}", cause=exc
        ) from exc
    return [
        entry.stem
        for entry in entries
        if entry.suffix == ".css" and not entry.name.startswith(".") and entry.is_file()
    ]


def stub_content(
    group: str, *, global_group: str, critical_group: str, stub_import: str
) -> str:
    """Default body for a freshly created source CSS file."""
    lines = [stub_import]
    if group == global_group:
        lines.append(f'@reference "./{critical_group}.css";')
    elif group != critical_group:
        lines.append(f'@reference "./{global_group}.css";')
    return "\n".join(lines) + "\n"


def ensure_source_stub(
    path: Path,
    group: str,
    *,
    global_group: str,
    critical_group: str,
    stub_import: str = DEFAULT_STUB_IMPORT,
) -> bool:
    """Create *path* with a stub body unless it already exists.

    Returns True when the file was created. Existing files are never touched.
    """
    path = Path(path)
    if path.exists():
        return False
    content = stub_content(
        group,
        global_group=global_group,
        critical_group=critical_group,
        stub_import=stub_import,
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StubCreationError(
            f"Error creating source directory: {path.parent}", path=str(path), cause=exc
        ) from exc
    try:
        with path.open("x", encoding="utf-8") as fh:
            fh.write(content)
    except FileExistsError:
        return False
    except OSError as exc:
        raise StubCreationError(
            f"Error creating source file: {path}", path=str(path), cause=exc
        ) from exc
    logger.warning("File %s does not exist. Created a new one.", path)
    return True


def ensure_source_stubs(
    group_map: SourceGroupMap,
    source_dir: Path,
    *,
    stub_import: str = DEFAULT_STUB_IMPORT,
) -> list[Path]:
    """Make sure every group in *group_map* has a source file; return new ones."""
    created: list[Path] = []
    for group in group_map:
        path = Path(source_dir) / group.source_filename
        if ensure_source_stub(
            path,
            group.name,
            global_group=group_map.global_name,
            critical_group=group_map.critical_name,
            stub_import=stub_import,
        ):
            created.append(path)
    return created
