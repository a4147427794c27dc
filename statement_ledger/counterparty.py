"""Best-effort extraction of the other party's name from a description."""

import re

DEFAULT_COUNTERPARTY = "Kaspi Bank"

_FIXED_LABELS = (
    ("на kaspi депозит", "Kaspi Депозит"),
    ("с kaspi депозита", "Kaspi Депозит"),
    ("в kaspi банкомате", "Kaspi Банкомат"),
    ("в kaspi терминале", "Kaspi Терминал"),
    ("отбасы банк. пополнение депозита", "Отбасы Банк"),
    ("с карты другого банка", "Другая карта"),
)

# Sole proprietor / LLP markers and outlet words followed by a name
_ENTITY_RE = re.compile(
    r"(?<!\w)(?:ип|тоо|too|тoo|магазин|кафе|ресторан)\s+[\w\s.\"«»'-]*\w\.?",
    re.IGNORECASE,
)
# "Иван И.", "Гульмира Маратовна"
_PERSON_RE = re.compile(r"[А-ЯЁA-Z][а-яёa-z]+\s+[А-ЯЁA-Z][а-яёa-z]*\.?")
_LEADING_TOKEN_RE = re.compile(r"^([\w\-.]+)(?:\s|$)")


def extract_counterparty(description: str, operation: str = "") -> str:
    """Return a display-safe counterparty name, never empty."""
    description = (description or "").strip()
    operation = (operation or "").strip()
    text = f"{description} {operation}".lower()

    for phrase, label in _FIXED_LABELS:
        if phrase in text:
            return label

    # Bank statements prefix the details with the operation label ("Покупка ...")
    subject = description
    if operation and description.lower().startswith(operation.lower()):
        subject = description[len(operation):].strip() or description

    match = _ENTITY_RE.search(subject)
    if match:
        return " ".join(match.group(0).split())

    match = _PERSON_RE.search(subject)
    if match:
        return match.group(0).strip()

    match = _LEADING_TOKEN_RE.match(subject)
    if match:
        return match.group(1)

    return description or operation or DEFAULT_COUNTERPARTY
