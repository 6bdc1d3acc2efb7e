"""Token image renderer: payload -> scannable QR code as a PNG data URL."""
from __future__ import annotations

import base64
import io
import json

import qrcode


def render_payload(payload: dict) -> str:
    img = qrcode.make(json.dumps(payload, separators=(",", ":"), sort_keys=True))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    encoded = base64.b64encode(buf.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{encoded}"
