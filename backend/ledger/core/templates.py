"""
Template rendering utilities and the htmx transport for fragments
"""
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from ledger.components.contracts import (Fragment, MultiRegionResponse,
                                         Notification)
from ledger.utils.formatting import format_value

# Get templates directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
TEMPLATES_DIR = BASE_DIR / "frontend" / "templates"

jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)
jinja_env.filters["share"] = format_value

# FastAPI templates instance for full pages, sharing the filters above
templates = Jinja2Templates(env=jinja_env)


def render_fragment(fragment: Fragment) -> str:
    """Serialize one fragment; the empty fragment renders as an empty string"""
    if fragment.is_empty:
        return ""
    template = jinja_env.get_template(fragment.template)
    return template.render(region_id=fragment.region_id, **fragment.context)


def render_multi_region(response: MultiRegionResponse) -> str:
    """Primary payload followed by one hx-swap-oob wrapper per out-of-band region"""
    parts = [render_fragment(response.primary)]
    for payload in response.out_of_band:
        parts.append(
            Markup('<div id="{}" hx-swap-oob="true">{}</div>').format(
                payload.region_id, Markup(render_fragment(payload.fragment))
            )
        )
    return "\n".join(str(p) for p in parts)


def trigger_header(notifications: Iterable[Notification]) -> Optional[str]:
    """
    HX-Trigger value for the client's notification listeners

    One event per kind: several messages of the same kind are joined in order
    into one toast text.
    """
    events: Dict[str, List[str]] = {}
    for notification in notifications:
        events.setdefault(notification.kind, []).append(notification.message)
    if not events:
        return None
    return json.dumps({kind: " ".join(messages) for kind, messages in events.items()})


def htmx_response(
    payload: Union[Fragment, MultiRegionResponse, str],
    notifications: Iterable[Notification] = (),
    status_code: int = 200,
) -> HTMLResponse:
    """Build the HTTP response for a fragment, a multi-region response or raw HTML"""
    notifications = list(notifications)
    if isinstance(payload, MultiRegionResponse):
        content = render_multi_region(payload)
        notifications = list(payload.notifications) + notifications
    elif isinstance(payload, Fragment):
        content = render_fragment(payload)
    else:
        content = payload

    response = HTMLResponse(content=content, status_code=status_code)
    header = trigger_header(notifications)
    if header:
        response.headers["HX-Trigger"] = header
    return response


def notify_only(notification: Notification) -> HTMLResponse:
    """Empty body plus a notification; used for resolution errors"""
    return htmx_response("", [notification])


def error_html(message: str) -> str:
    return f'<div class="inline-error">{escape(message)}</div>'
