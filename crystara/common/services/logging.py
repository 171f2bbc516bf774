import json
import sys
from datetime import datetime, timezone


MASKED_FIELDS = {"signature", "razorpay_signature", "key_secret", "token", "authorization"}


def _mask(value) -> str:
    text = str(value or "")
    if len(text) <= 6:
        return "***"
    return text[:4] + "***"


def log_event(level: str, event: str, **fields) -> None:
    payload = {
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "level": level.lower(),
        "event": event,
    }
    for key, value in (fields or {}).items():
        payload[key] = _mask(value) if key.lower() in MASKED_FIELDS else value
    try:
        sys.stdout.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
    except Exception:
        # best-effort logging
        pass
