from __future__ import annotations

from ._gate import require_arch_checks_enabled
from ._utils import is_test_file, iter_python_files, matches_prefix, package_root, parse_imports


def test_library_layers_do_not_import_cli_modules() -> None:
    require_arch_checks_enabled()

    root = package_root()
    offenders: list[str] = []

    for layer in ("version", "git", "resolve", "release", "core"):
        for file_path in iter_python_files(root / layer):
            rel = file_path.relative_to(root)
            for item in parse_imports(file_path):
                if matches_prefix(item.module, "branchtag.cli"):
                    offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, "library -> cli dependency violations:\n" + "\n".join(offenders)


def test_version_codec_is_pure() -> None:
    require_arch_checks_enabled()

    root = package_root()
    allowed = ("branchtag.core.result", "branchtag.version")
    offenders: list[str] = []

    for file_path in iter_python_files(root / "version"):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if not matches_prefix(item.module, "branchtag"):
                continue
            if any(matches_prefix(item.module, prefix) for prefix in allowed):
                continue
            offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, "version codec dependency violations:\n" + "\n".join(offenders)


def test_direct_rich_imports_are_limited_to_console() -> None:
    require_arch_checks_enabled()

    root = package_root()
    offenders: list[str] = []
    for file_path in iter_python_files(root):
        if is_test_file(root, file_path):
            continue
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if not matches_prefix(item.module, "rich"):
                continue
            if rel.as_posix() == "output/console.py":
                continue
            offenders.append(f"{rel}:{item.line}: direct rich import '{item.module}'")

    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)
