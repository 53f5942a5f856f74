"""Minimal go.mod reader covering the require directive."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path

from ackgen.errors import GoModParseError

_KNOWN_DIRECTIVES = {
    "module",
    "go",
    "toolchain",
    "godebug",
    "require",
    "replace",
    "exclude",
    "retract",
    "tool",
    "ignore",
}


@dataclass(frozen=True, slots=True)
class Requirement:
    path: str
    version: str
    indirect: bool = False


@dataclass(slots=True)
class GoMod:
    module: str = ""
    go_version: str = ""
    require: list[Requirement] = field(default_factory=list)

    def required_version(self, module_path: str) -> str | None:
        for item in self.require:
            if item.path == module_path:
                return item.version
        return None


def _split_comment(line: str) -> tuple[str, str]:
    code, sep, comment = line.partition("//")
    return code.strip(), comment.strip() if sep else ""


def _tokens(code: str, lineno: int) -> list[str]:
    try:
        return shlex.split(code.replace("`", '"'), posix=True)
    except ValueError as exc:
        raise GoModParseError(f"line {lineno}: {exc}", line=lineno) from exc


def _requirement(tokens: list[str], comment: str, lineno: int) -> Requirement:
    if len(tokens) != 2:
        raise GoModParseError(
            f"line {lineno}: usage: require module/path v1.2.3", line=lineno
        )
    path, version = tokens
    if not version.startswith("v"):
        raise GoModParseError(
            f"line {lineno}: invalid version {version!r} for {path}", line=lineno
        )
    return Requirement(path=path, version=version, indirect=comment == "indirect")


def parse_go_mod(text: str) -> GoMod:
    mod = GoMod()
    block: str | None = None
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        code, comment = _split_comment(raw_line)
        if not code:
            continue
        if block is not None:
            if code == ")":
                block = None
                continue
            if block == "require":
                mod.require.append(_requirement(_tokens(code, lineno), comment, lineno))
            continue

        tokens = _tokens(code, lineno)
        verb, args = tokens[0], tokens[1:]
        # "(" is a token of its own, so "require(" opens a block too
        if verb.endswith("(") and verb != "(":
            verb, args = verb[:-1], ["(", *args]
        if verb not in _KNOWN_DIRECTIVES:
            raise GoModParseError(f"line {lineno}: unknown directive: {verb}", line=lineno)
        if args == ["("]:
            block = verb
            continue
        if verb == "module" and args:
            mod.module = args[0]
        elif verb == "go" and args:
            mod.go_version = args[0]
        elif verb == "require":
            mod.require.append(_requirement(args, comment, lineno))
    if block is not None:
        raise GoModParseError(f"unterminated {block} block", line=0)
    return mod


def read_go_mod(path: Path) -> GoMod:
    return parse_go_mod(path.read_text(encoding="utf-8"))
