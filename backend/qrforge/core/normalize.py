import re

SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

# example.com, sub.example.co.uk:8080/path?q=1#frag
BARE_DOMAIN_RE = re.compile(
    r"^(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z]{2,}"
    r"(?::\d{1,5})?"
    r"(?:[/?#]\S*)?$",
    re.IGNORECASE,
)


def normalize_payload(text: str) -> str:
    """Turn bare domains into https URLs so scanners open them as links."""
    text = (text or "").strip()
    if not text or SCHEME_RE.match(text):
        return text
    if BARE_DOMAIN_RE.match(text):
        return f"https://{text}"
    return text
