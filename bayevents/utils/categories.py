ELECTRONIC_PATTERNS = [
    "electronic",
    "house", "techno", "trance", "disco",
    "dj", "djs", "rave", "edm",
    "bass", "dubstep", "drum & bass", "drum and bass", "dnb", "jungle",
    "ambient", "breaks", "garage", "hardstyle",
]

LIVE_PATTERNS = [
    "live music", "live band", "band", "bands",
    "punk", "rock", "metal", "hardcore", "indie", "emo", "ska",
    "jazz", "folk", "blues", "country", "soul", "funk",
    "concert", "acoustic", "singer", "songwriter",
]


def _has_word(text_lower, pattern):
    # Word-ish boundary so "dj" doesn't hit "adjacent" and "rock" doesn't hit "rockridge"
    start = text_lower.find(pattern)
    while start != -1:
        end = start + len(pattern)
        before_ok = start == 0 or not text_lower[start - 1].isalnum()
        after_ok = end == len(text_lower) or not text_lower[end].isalnum()
        if before_ok and after_ok:
            return True
        start = text_lower.find(pattern, start + 1)
    return False


def detect_category(text):
    """
    Classify an event as "electronic" or "live" from its title and details.
    Electronic wins when both match. Returns None if uncertain.
    """
    if not text:
        return None
    text_lower = text.lower()

    if any(_has_word(text_lower, pattern) for pattern in ELECTRONIC_PATTERNS):
        return "electronic"

    if any(_has_word(text_lower, pattern) for pattern in LIVE_PATTERNS):
        return "live"

    return None
