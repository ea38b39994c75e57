import re, html

def sanitize_text(s:str)->str:
    s = html.unescape(s or "")
    return re.sub(r"\s+"," ", s).strip()

def text_or(s, placeholder:str)->str:
    """Sanitized text, or the placeholder when the field is absent or blank."""
    cleaned = sanitize_text(s) if s is not None else ""
    # blank is treated as missing: an empty <title/> never reaches a card as ""
    return cleaned or placeholder
