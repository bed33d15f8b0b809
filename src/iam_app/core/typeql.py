"""TypeQL query templates and literal quoting."""

from __future__ import annotations

from pathlib import Path

from iam_app.core.errors import SchemaFileError


def string_literal(value: str) -> str:
    """Render *value* as a double-quoted TypeQL string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def read_query_file(path: Path | str) -> str:
    """Read a ``.tql`` file as one query string, submitted verbatim."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaFileError(f"Failed to open {path}: {exc.strerror or exc}", cause=exc).with_context(
            path=str(path)
        ) from exc
    if not text.strip():
        raise SchemaFileError(f"{path} is empty").with_context(path=str(path))
    return text


# ------------------------------------------------------------------ #
# Canned queries
# ------------------------------------------------------------------ #

COUNT_USERS = "match $u isa user; get $u; count;"

FETCH_USERS = "match $u isa user; fetch $u: full-name, email;"


def insert_user(name: str, email: str) -> str:
    return (
        "insert $p isa person, has full-name $fn, has email $e; "
        f"$fn == {string_literal(name)}; $e == {string_literal(email)};"
    )


def match_user_by_name(name: str) -> str:
    return f"match $u isa user, has full-name {string_literal(name)}; get;"


def files_viewable_by(name: str) -> str:
    return f"""
        match
        $fn == {string_literal(name)};
        $u isa user, has full-name $fn;
        $p($u, $pa) isa permission;
        $o isa object, has path $fp;
        $pa($o, $va) isa access;
        $va isa action, has name "view_file";
        get $fp; sort $fp asc;
    """


def update_path(old_path: str, new_path: str) -> str:
    return f"""
        match
        $f isa file, has path $old_path;
        $old_path == {string_literal(old_path)};
        delete
        $f has $old_path;
        insert
        $f has path $new_path;
        $new_path == {string_literal(new_path)};
    """


def match_file(path: str) -> str:
    return f"match $f isa file, has path {string_literal(path)}; get;"


def delete_file(path: str) -> str:
    return f"match $f isa file, has path {string_literal(path)}; delete $f isa file;"
