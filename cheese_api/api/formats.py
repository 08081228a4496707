"""Response format negotiation and JSON/HTML/CSV rendering."""

import csv
import html
import io
import re
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse, Response

JSON = "application/json"
HTML = "text/html"
CSV = "text/csv"

SUPPORTED_FORMATS = (JSON, HTML, CSV)

_NESTED_PROPERTY = re.compile(r"^properties\[([^\]]+)\]\[\]$")


def negotiate_format(request: Request) -> str:
    """Pick the response media type from the Accept header.

    Media ranges are tried in the order the client sent them; quality values
    are not weighed. A missing header or a wildcard gets JSON.
    """
    accept = request.headers.get("accept", "")
    if not accept.strip():
        return JSON

    for media_range in accept.split(","):
        media_type = media_range.split(";", 1)[0].strip().lower()
        if media_type in SUPPORTED_FORMATS:
            return media_type
        if media_type in ("*/*", "application/*"):
            return JSON
        if media_type == "text/*":
            return HTML

    raise HTTPException(
        status_code=status.HTTP_406_NOT_ACCEPTABLE,
        detail=f"Requested format is not supported. Supported MIME types are: {', '.join(SUPPORTED_FORMATS)}",
    )


def flatten(row: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested dicts into dotted keys, e.g. owner.email."""
    flat: dict[str, Any] = {}
    for key, value in row.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten(value, f"{name}."))
        elif isinstance(value, list):
            flat[name] = ",".join(str(v) for v in value)
        else:
            flat[name] = value
    return flat


def _columns(rows: list[dict[str, Any]]) -> list[str]:
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def to_csv(rows: list[dict[str, Any]]) -> str:
    """Render rows as CSV with a header row."""
    flat_rows = [flatten(row) for row in rows]
    columns = _columns(flat_rows)

    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(columns)
    for row in flat_rows:
        writer.writerow(["" if row.get(col) is None else row.get(col) for col in columns])
    return buf.getvalue()


def to_html(rows: list[dict[str, Any]], title: str) -> str:
    """Render rows as a self-contained HTML table."""
    flat_rows = [flatten(row) for row in rows]
    columns = _columns(flat_rows)

    head = "".join(f"<th>{html.escape(col)}</th>" for col in columns)
    body = []
    for row in flat_rows:
        cells = "".join(
            f"<td>{html.escape('' if row.get(col) is None else str(row.get(col)))}</td>"
            for col in columns
        )
        body.append(f"    <tr>{cells}</tr>")

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        f"<head><meta charset=\"utf-8\"><title>{html.escape(title)}</title></head>\n"
        "<body>\n"
        f"<h1>{html.escape(title)}</h1>\n"
        "<table>\n"
        f"  <thead><tr>{head}</tr></thead>\n"
        "  <tbody>\n" + "\n".join(body) + "\n  </tbody>\n"
        "</table>\n"
        "</body>\n"
        "</html>\n"
    )


def render(
    data: dict[str, Any] | list[dict[str, Any]],
    media_type: str,
    title: str,
    headers: dict[str, str] | None = None,
) -> Response:
    """Render a single resource or a collection in the negotiated format."""
    if media_type == CSV:
        rows = data if isinstance(data, list) else [data]
        return Response(content=to_csv(rows), media_type=CSV, headers=headers)
    if media_type == HTML:
        rows = data if isinstance(data, list) else [data]
        return HTMLResponse(content=to_html(rows, title), headers=headers)
    return JSONResponse(content=jsonable_encoder(data), headers=headers)


def parse_properties(request: Request) -> dict[str, set[str] | None]:
    """Read the property selection from the query string.

    ``properties[]=title`` selects a whole property and
    ``properties[owner][]=email`` selects sub-properties of a nested one.
    """
    selection: dict[str, set[str] | None] = {}
    for key, value in request.query_params.multi_items():
        if key == "properties[]":
            selection[value] = None
            continue
        match = _NESTED_PROPERTY.match(key)
        if match:
            nested = selection.setdefault(match.group(1), set())
            if nested is not None:
                nested.add(value)
    return selection


def select_properties(
    data: dict[str, Any], selection: dict[str, set[str] | None]
) -> dict[str, Any]:
    """Keep only the selected properties; an empty selection keeps everything.

    Sub-property selections only narrow embedded objects; a property that is
    rendered as a plain value (an IRI in collection views) is kept whole.
    """
    if not selection:
        return data

    selected = {}
    for key, value in data.items():
        if key not in selection:
            continue
        fields = selection[key]
        if fields is not None and isinstance(value, dict):
            value = {sub: sub_value for sub, sub_value in value.items() if sub in fields}
        selected[key] = value
    return selected
