"""Shared formatting functions for MCP responses.

Two output shapes are used by the handlers: a detail block (heading followed
by ``**Label:** value`` lines or ``- **Label:** value`` bullets) and a
markdown table for list views. Table cells go through ``sanitize_table_cell``.
"""
from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional, Union


DateInput = Union[str, date, datetime, None]


def format_date(value: DateInput) -> str:
    """Return the UTC calendar date (YYYY-MM-DD) of a timestamp, or "" if absent.

    Raises:
        ValueError: if a string input is not an ISO 8601 timestamp
    """
    if not value:
        return ""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value.isoformat()
    else:
        parsed = datetime.fromisoformat(str(value))

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def sanitize_table_cell(text: Any, max_length: int = 50) -> str:
    """Escape pipes, collapse newlines, then truncate to ``max_length``.

    Truncation applies to the escaped string, so an escaped pipe counts as
    two characters and may be cut in half.
    """
    if not text:
        return ""
    return str(text).replace("|", "\\|").replace("\n", " ")[:max_length]


def escape_wiql_string(value: str) -> str:
    """Double single quotes for interpolation into a WIQL string literal."""
    return value.replace("'", "''")


def display_name(identity: Optional[dict], default: str = "") -> str:
    """Pull ``displayName`` out of an identity reference."""
    if isinstance(identity, dict):
        return identity.get("displayName") or default
    return default


# ============================================================================
# Markdown builders
# ============================================================================

def format_table(headers: list[str], rows: Iterable[Iterable[Any]]) -> str:
    """Render a markdown table; cell values are inserted as given."""
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "---|" * len(headers),
    ]
    for row in rows:
        lines.append("| " + " | ".join(str(cell) for cell in row) + " |")
    return "\n".join(lines) + "\n"


def format_fields(pairs: Iterable[tuple[str, Any]], bullet: bool = False) -> str:
    """Render ``**Label:** value`` lines, optionally as a bullet list."""
    prefix = "- " if bullet else ""
    return "".join(f"{prefix}**{label}:** {value}\n" for label, value in pairs)


def format_section(title: str, pairs: Iterable[tuple[str, Any]]) -> str:
    """Render a ``##`` heading followed by a bulleted field list."""
    return f"## {title}\n" + format_fields(pairs, bullet=True) + "\n"


def format_found(heading: str, count: int, noun: str, suffix: str = "") -> str:
    """Render the ``# Heading`` / ``Found N things:`` preamble used by list views."""
    return f"# {heading}\n\nFound {count} {noun}{suffix}:\n\n"


# ============================================================================
# Work items
# ============================================================================

def format_work_item_fields(work_item: dict, fields: Optional[dict] = None) -> str:
    """Format a work item as a markdown document with placeholders for missing fields."""
    f = work_item.get("fields") or fields or {}
    url = (work_item.get("_links") or {}).get("html", {}).get("href") or "N/A"

    details = format_fields([
        ("Type", f.get("System.WorkItemType") or "N/A"),
        ("Title", f.get("System.Title") or "N/A"),
        ("State", f.get("System.State") or "N/A"),
        ("Assigned To", display_name(f.get("System.AssignedTo"), "Unassigned")),
        ("Priority", f.get("Microsoft.VSTS.Common.Priority") or "N/A"),
        ("Created By", display_name(f.get("System.CreatedBy"), "N/A")),
        ("Created Date", format_date(f.get("System.CreatedDate"))),
        ("Changed Date", format_date(f.get("System.ChangedDate"))),
    ])

    return f"""# Work Item {work_item.get('id')}

{details}
## Description
{f.get('System.Description') or 'No description'}

## Tags
{f.get('System.Tags') or 'None'}

## URL
{url}"""


def format_work_item_table(work_items: list[dict], title_length: int = 50) -> str:
    """Table of ID, type, title, state and assignee for batch/query results."""
    rows = []
    for wi in work_items:
        f = wi.get("fields") or {}
        rows.append([
            wi.get("id"),
            f.get("System.WorkItemType") or "",
            sanitize_table_cell(f.get("System.Title"), title_length),
            f.get("System.State") or "",
            display_name(f.get("System.AssignedTo"), "Unassigned"),
        ])
    return format_table(["ID", "Type", "Title", "State", "Assigned To"], rows)


def format_iteration(iteration: dict, include_time_frame: bool = False) -> str:
    """Format one iteration as a ``##`` section."""
    pairs = [
        ("ID", iteration.get("id")),
        ("Path", iteration.get("path")),
    ]
    attributes = iteration.get("attributes")
    if attributes:
        pairs.append(("Start Date", format_date(attributes.get("startDate"))))
        pairs.append(("Finish Date", format_date(attributes.get("finishDate"))))
        if include_time_frame:
            pairs.append(("Time Frame", attributes.get("timeFrame")))
    return format_section(str(iteration.get("name")), pairs)
