# repair_cafe/utils/email_templates.py
"""
Paired plain-text/HTML bodies for every outgoing email.

Each builder returns a `RenderedEmail`; nothing here talks to the database
or the mail transport.
"""

from datetime import date, time
from html import escape
from typing import List, NamedTuple, Optional
from urllib.parse import quote_plus

from repair_cafe.core.config import settings

TEAM_SIGNATURE = "- Repair Commons Team"

OUTCOME_LABELS = {
    "fixed": "Fixed!",
    "partially_fixed": "Partially Fixed",
    "not_repairable": "Not Repairable",
    "needs_parts": "Needs Parts",
    "referred": "Referred Elsewhere",
}


class RenderedEmail(NamedTuple):
    subject: str
    text: str
    html: str


def outcome_label(outcome: Optional[str]) -> str:
    return OUTCOME_LABELS.get(outcome or "", "Completed")


def format_event_date(value: date) -> str:
    # e.g. "Saturday, March 14, 2026"
    return f"{value.strftime('%A, %B')} {value.day}, {value.year}"


def format_time_range(start: time, end: time) -> str:
    return f"{start.strftime('%H:%M')} - {end.strftime('%H:%M')}"


def _wrap_html(title: str, body: str) -> str:
    return f"""
<div style="font-family: sans-serif; max-width: 520px; margin: 0 auto; padding: 24px;">
  <h2 style="color: #15803d; margin-bottom: 8px;">{escape(title)}</h2>
  {body}
  <p style="color: #6b7280; font-size: 14px; margin-top: 24px;">{TEAM_SIGNATURE}</p>
</div>
""".strip()


def _detail_box(rows: List[tuple]) -> str:
    lines = "".join(
        f'<p style="margin: 4px 0;"><strong>{escape(label)}:</strong> {escape(str(value))}</p>'
        for label, value in rows
        if value
    )
    return (
        '<div style="background: #f3f4f6; border-radius: 8px; padding: 16px; margin: 20px 0;">'
        f"{lines}</div>"
    )


def registration_confirmation(
    *,
    name: str,
    event_title: str,
    event_date: date,
    start_time: time,
    end_time: time,
    venue_name: Optional[str],
    venue_address: Optional[str],
    items: List[str],
    status: str,
    manage_url: str,
) -> RenderedEmail:
    waitlisted = status == "waitlisted"
    state = "on the waitlist" if waitlisted else "registered"
    subject = f"Confirmation: {event_title} - {'Waitlisted' if waitlisted else 'Registered'}"
    when = format_event_date(event_date)
    hours = format_time_range(start_time, end_time)
    venue_name = venue_name or "TBA"
    venue_address = venue_address or ""
    directions = (
        f"https://www.google.com/maps/search/?api=1&query={quote_plus(venue_address)}"
    )

    items_text = "\n".join(f"- {i}" for i in items) if items else "- No items registered"
    text = f"""Hi {name},

You're {state} for {event_title}!

EVENT DETAILS:
Date: {when}
Time: {hours}
Venue: {venue_name}
Address: {venue_address}

ITEMS REGISTERED:
{items_text}

VENUE DIRECTIONS:
{directions}

MANAGE REGISTRATION:
{manage_url}

{TEAM_SIGNATURE}"""

    items_html = (
        "".join(f"<li>{escape(i)}</li>" for i in items)
        if items
        else "<li>No items registered</li>"
    )
    html = _wrap_html(
        "Repair Commons",
        f"""<p>Hi {escape(name)},</p>
  <p>You're <strong>{state}</strong> for <strong>{escape(event_title)}</strong>!</p>
  {_detail_box([("Date", when), ("Time", hours), ("Venue", venue_name), ("Address", venue_address)])}
  <ul>{items_html}</ul>
  <p><a href="{escape(directions)}">Get Directions</a> | <a href="{escape(manage_url)}">Manage Registration</a></p>""",
    )
    return RenderedEmail(subject, text, html)


def item_in_progress(
    *, name: str, item_name: str, problem: str, event_title: str, event_date: date
) -> RenderedEmail:
    when = format_event_date(event_date)
    subject = f'Your item "{item_name}" is being repaired!'
    text = f"""Hi {name},

Great news! A fixer has started working on your item at the Repair Cafe.

Item: {item_name}
Problem: {problem}
Event: {event_title}
Date: {when}

The fixer will let you know when your item is ready for pickup.

{TEAM_SIGNATURE}"""
    html = _wrap_html(
        "Your item is being repaired!",
        f"""<p>Hi {escape(name)},</p>
  <p>Great news! A fixer has started working on your item at the Repair Cafe.</p>
  {_detail_box([("Item", item_name), ("Problem", problem), ("Event", event_title), ("Date", when)])}
  <p>The fixer will let you know when your item is ready for pickup.</p>""",
    )
    return RenderedEmail(subject, text, html)


def item_completed(
    *,
    name: str,
    item_name: str,
    outcome: Optional[str],
    outcome_notes: Optional[str],
    repair_method: Optional[str],
    parts_used: Optional[str],
    event_title: str,
    event_date: date,
) -> RenderedEmail:
    label = outcome_label(outcome)
    when = format_event_date(event_date)
    subject = f'Repair complete for "{item_name}" - {label}'
    extra = [
        ("Notes", outcome_notes),
        ("Repair method", repair_method),
        ("Parts used", parts_used),
    ]
    extra_text = "\n".join(f"{k}: {v}" for k, v in extra if v)
    text = f"""Hi {name},

Your item has been looked at! Here's the update:

Item: {item_name}
Outcome: {label}
{extra_text}

Event: {event_title}
Date: {when}

Please pick up your item at the event. Thank you for participating in the Repair Cafe!

{TEAM_SIGNATURE}"""
    html = _wrap_html(
        "Repair Complete!",
        f"""<p>Hi {escape(name)},</p>
  <p>Your item has been looked at! Here's the update:</p>
  {_detail_box([("Item", item_name), ("Outcome", label)] + extra)}
  <p><strong>Event:</strong> {escape(event_title)}<br><strong>Date:</strong> {when}</p>
  <p>Please pick up your item at the event. Thank you for participating in the Repair Cafe!</p>""",
    )
    return RenderedEmail(subject, text, html)


def event_reminder(
    *,
    name: str,
    event_title: str,
    event_date: date,
    start_time: time,
    end_time: time,
    venue_name: Optional[str],
    venue_address: Optional[str],
    items: List[str],
    days_until: int,
) -> RenderedEmail:
    when = format_event_date(event_date)
    hours = format_time_range(start_time, end_time)
    lead = "tomorrow" if days_until == 1 else f"in {days_until} days"
    subject = f"Reminder: {event_title} is {lead}"
    items_text = "\n".join(f"- {i}" for i in items) if items else "- No items registered"
    text = f"""Hi {name},

This is a reminder that {event_title} is {lead}.

Date: {when}
Time: {hours}
Venue: {venue_name or 'TBA'}
Address: {venue_address or ''}

Your items:
{items_text}

Please bring your items and any parts or accessories that might help.

{TEAM_SIGNATURE}"""
    items_html = (
        "".join(f"<li>{escape(i)}</li>" for i in items)
        if items
        else "<li>No items registered</li>"
    )
    html = _wrap_html(
        f"See you {lead}!",
        f"""<p>Hi {escape(name)},</p>
  <p>This is a reminder that <strong>{escape(event_title)}</strong> is {lead}.</p>
  {_detail_box([("Date", when), ("Time", hours), ("Venue", venue_name or "TBA"), ("Address", venue_address)])}
  <ul>{items_html}</ul>
  <p>Please bring your items and any parts or accessories that might help.</p>""",
    )
    return RenderedEmail(subject, text, html)


def magic_link(*, name: str, url: str) -> RenderedEmail:
    minutes = settings.MAGIC_LINK_TTL_MINUTES
    subject = "Your Repair Commons sign-in link"
    text = f"""Hi {name},

Click the link below to sign in. It expires in {minutes} minutes and can only be used once.

{url}

If you didn't request this, you can ignore this email.

{TEAM_SIGNATURE}"""
    html = _wrap_html(
        "Sign in to Repair Commons",
        f"""<p>Hi {escape(name)},</p>
  <p>Click the button below to sign in. It expires in {minutes} minutes and can only be used once.</p>
  <p><a href="{escape(url)}" style="display: inline-block; background: #16a34a; color: white; padding: 12px 24px; border-radius: 8px; text-decoration: none;">Sign in</a></p>
  <p style="font-size: 12px; color: #6b7280;">If you didn't request this, you can ignore this email.</p>""",
    )
    return RenderedEmail(subject, text, html)


def item_comment(
    *, name: str, item_name: str, commenter_name: str, comment: str, items_url: str
) -> RenderedEmail:
    subject = f"New comment on your item: {item_name}"
    text = f"""Hi {name},

{commenter_name} commented on your item "{item_name}":

"{comment}"

View and reply: {items_url}

{TEAM_SIGNATURE}"""
    html = _wrap_html(
        "Repair Commons",
        f"""<p>Hi {escape(name)},</p>
  <p><strong>{escape(commenter_name)}</strong> commented on your item "<strong>{escape(item_name)}</strong>":</p>
  <blockquote style="border-left: 4px solid #16a34a; padding-left: 16px; margin: 16px 0; color: #374151; font-style: italic;">"{escape(comment)}"</blockquote>
  <p><a href="{escape(items_url)}">View on Website</a></p>""",
    )
    return RenderedEmail(subject, text, html)
