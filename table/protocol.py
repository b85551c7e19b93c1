from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Dict

PROTOCOL_VERSION = 1


def envelope(msg_type: str, payload: Dict[str, object]) -> str:
    body: Dict[str, object] = {"type": msg_type, "v": PROTOCOL_VERSION, "ts": datetime.now(timezone.utc).isoformat()}
    body.update(payload)
    return json.dumps(body)


def decode(raw: str) -> Dict[str, object]:
    try:
        message = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return message if isinstance(message, dict) else {}
