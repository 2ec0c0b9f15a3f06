def dedupe_records(records, key):
    """
    Keep the first record for each key, preserving order.
    Records whose key is falsy are kept as-is.
    """
    seen = set()
    kept = []
    for record in records:
        k = key(record)
        if k:
            if k in seen:
                continue
            seen.add(k)
        kept.append(record)
    return kept


def dedupe_events(events):
    """
    Collapse duplicate events from one source's run (first seen wins).
    Keys include the source, so listings from different sites never collapse.
    """
    return dedupe_records(events, lambda event: event.dedup_key)
