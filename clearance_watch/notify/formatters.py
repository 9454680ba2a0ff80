# clearance_watch/notify/formatters.py

"""Message bodies for difference notifications."""

from html import escape

from clearance_watch.models.record import Record

_HEADER_ROW = (
    "<th>Item</th><th>Price</th><th>Prev Price</th>"
    "<th>Orig Price</th><th>Ignore</th>"
)


def format_price(value: float | None) -> str:
    """Render a price as ``$1,299.99``, or an em dash when unknown."""
    if value is None:
        return "—"
    return f"${value:,.2f}"


def mute_link(mute_link_base: str, item_id: str) -> str:
    """Build the one-click ignore URL for an item."""
    return mute_link_base + item_id


def render_html_table(
    differences: list[Record], mute_link_base: str,
) -> str:
    """Render differences as the HTML table sent by email.

    One row per difference: thumbnail and linked name, the new price
    in bold, the previous and original prices, and an Ignore link
    that mutes the item.
    """
    rows: list[str] = []
    for item in differences:
        ignore_url = mute_link(mute_link_base, item.item_id)
        rows.append(
            "<tr>"
            f'<td><img width="120px" src="{escape(item.image)}"/>'
            '<br clear="all"/>'
            f'<a href="{escape(item.url)}">{escape(item.name)}</a></td>'
            f"<td><b>{format_price(item.price)}</b></td>"
            f"<td>{format_price(item.old_price)}</td>"
            f"<td>{format_price(item.original_price)}</td>"
            f'<td><a href="{escape(ignore_url)}">Ignore</a></td>'
            "</tr>"
        )
    return (
        "<table border='1' style=\"border-collapse:collapse;\">"
        + _HEADER_ROW
        + "".join(rows)
        + "</table>"
    )


def render_plain_text(differences: list[Record]) -> str:
    """Plain-text alternative for mail clients without HTML."""
    lines: list[str] = []
    for item in differences:
        tag = "NEW" if item.old_price is None else "DROP"
        lines.append(
            f"[{tag}] {item.name}: {format_price(item.price)}"
            f" (prev {format_price(item.old_price)},"
            f" orig {format_price(item.original_price)})"
            f"\n  {item.url}"
        )
    return "\n".join(lines)
