"""
Diff reporting

``diff_result_to_dict`` gives downstream tooling a stable, JSON-ready view of
a ``DiffResult``; ``render_diff`` prints it as rich tables.
"""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .diff_result import DiffResult, DiffType, ModifiedEntity

_TYPE_STYLES = {
    DiffType.ADDED: "green",
    DiffType.DROPPED: "red",
    DiffType.MODIFIED: "yellow",
    DiffType.RENAMED: "blue",
}

_DETAIL_WIDTH = 80


def _record(diff: Any) -> dict[str, Any]:
    record: dict[str, Any] = {"type": diff.type.value, "name": diff.name}
    if diff.change_detail:
        record["changeDetail"] = diff.change_detail
    return record


def _modified_entity_to_dict(modified: ModifiedEntity) -> dict[str, Any]:
    relationships = []
    for diff in modified.relationship_diffs:
        record = _record(diff)
        record["requiresDropAdd"] = diff.requires_drop_add
        relationships.append(record)
    return {
        "entity": modified.entity_name,
        "table": modified.new_entity.table_name,
        "columns": [_record(d) for d in modified.column_diffs],
        "indexes": [_record(d) for d in modified.index_diffs],
        "constraints": [_record(d) for d in modified.constraint_diffs],
        "relationships": relationships,
        "warnings": list(modified.warnings),
    }


def diff_result_to_dict(result: DiffResult) -> dict[str, Any]:
    """JSON-ready structure of a diff result"""
    return {
        "summary": {
            "addedTables": len(result.added_tables),
            "droppedTables": len(result.dropped_tables),
            "renamedTables": len(result.renamed_tables),
            "modifiedTables": len(result.modified_tables),
            "sequenceChanges": len(result.sequence_diffs),
            "tableGeneratorChanges": len(result.table_generator_diffs),
            "warnings": len(result.warnings),
        },
        "addedTables": [
            {"entity": e.entity_name, "table": e.table_name} for e in result.added_tables
        ],
        "droppedTables": [
            {"entity": e.entity_name, "table": e.table_name} for e in result.dropped_tables
        ],
        "renamedTables": [
            {
                "oldEntity": r.old_entity.entity_name,
                "newEntity": r.new_entity.entity_name,
                "changeDetail": r.change_detail,
            }
            for r in result.renamed_tables
        ],
        "modifiedTables": [_modified_entity_to_dict(m) for m in result.modified_tables],
        "sequences": [_record(d) for d in result.sequence_diffs],
        "tableGenerators": [_record(d) for d in result.table_generator_diffs],
        "warnings": result.all_warnings(),
        "isEmpty": result.is_empty(),
    }


def _styled_type(diff_type: DiffType) -> str:
    style = _TYPE_STYLES[diff_type]
    return f"[{style}]{diff_type.value}[/{style}]"


def _detail(text: str | None) -> str:
    if not text:
        return ""
    if len(text) > _DETAIL_WIDTH:
        text = text[:_DETAIL_WIDTH] + "..."
    return escape(text)


def _new_table(title: str, first_column: str, show_details: bool) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column(first_column, style="cyan")
    table.add_column("Change")
    table.add_column("Name", style="green")
    if show_details:
        table.add_column("Details", style="yellow")
    return table


def _render_tables(result: DiffResult, console: Console, show_details: bool) -> None:
    if not (result.added_tables or result.dropped_tables or result.renamed_tables):
        return
    table = _new_table("Tables", "Entity", show_details)
    for entity in result.added_tables:
        row = [
            escape(entity.entity_name),
            _styled_type(DiffType.ADDED),
            escape(entity.table_name),
        ]
        if show_details:
            row.append("")
        table.add_row(*row)
    for renamed in result.renamed_tables:
        row = [
            escape(f"{renamed.old_entity.entity_name} → {renamed.new_entity.entity_name}"),
            _styled_type(DiffType.RENAMED),
            escape(renamed.new_entity.table_name),
        ]
        if show_details:
            row.append(_detail(renamed.change_detail))
        table.add_row(*row)
    for entity in result.dropped_tables:
        row = [
            escape(entity.entity_name),
            _styled_type(DiffType.DROPPED),
            escape(entity.table_name),
        ]
        if show_details:
            row.append("")
        table.add_row(*row)
    console.print(table)


def _render_component(
    title: str,
    attribute: str,
    result: DiffResult,
    console: Console,
    show_details: bool,
) -> None:
    rows = [(m.entity_name, d) for m in result.modified_tables for d in getattr(m, attribute)]
    if not rows:
        return
    table = _new_table(title, "Entity", show_details)
    for entity_name, diff in rows:
        row = [escape(entity_name), _styled_type(diff.type), escape(diff.name)]
        if show_details:
            row.append(_detail(diff.change_detail))
        table.add_row(*row)
    console.print(table)


def _render_flat(title: str, diffs: list, console: Console, show_details: bool) -> None:
    if not diffs:
        return
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Change")
    table.add_column("Name", style="green")
    if show_details:
        table.add_column("Details", style="yellow")
    for diff in diffs:
        row = [_styled_type(diff.type), escape(diff.name)]
        if show_details:
            row.append(_detail(diff.change_detail))
        table.add_row(*row)
    console.print(table)


def render_diff(result: DiffResult, console: Console, show_details: bool = False) -> None:
    """Print a diff result as rich tables followed by its warnings"""
    if result.is_empty():
        console.print("[yellow]No changes detected between snapshots[/yellow]")
        return

    summary = diff_result_to_dict(result)["summary"]
    console.print("[bold]Schema diff[/bold]")
    console.print(
        f"  Tables: {summary['addedTables']} added, {summary['droppedTables']} dropped, "
        f"{summary['renamedTables']} renamed, {summary['modifiedTables']} modified"
    )
    console.print()

    _render_tables(result, console, show_details)
    _render_component("Columns", "column_diffs", result, console, show_details)
    _render_component("Indexes", "index_diffs", result, console, show_details)
    _render_component("Constraints", "constraint_diffs", result, console, show_details)
    _render_component("Relationships", "relationship_diffs", result, console, show_details)
    _render_flat("Sequences", result.sequence_diffs, console, show_details)
    _render_flat("Table Generators", result.table_generator_diffs, console, show_details)

    warnings = result.all_warnings()
    if warnings:
        console.print()
        console.print(f"[bold yellow]⚠ {len(warnings)} warning(s)[/bold yellow]")
        for warning in warnings:
            console.print(f"  [yellow]•[/yellow] {escape(warning)}")
