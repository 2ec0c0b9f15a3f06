from bayevents import config
from bayevents.sources.dice import fetch_dice
from bayevents.sources.foopee import fetch_foopee
from bayevents.sources.nineteenhz import fetch_nineteenhz
from bayevents.sources.partiful import fetch_partiful
from bayevents.sources.posh import fetch_posh

SCRAPERS = {
    "nineteenhz": fetch_nineteenhz,
    "foopee": fetch_foopee,
    "partiful": fetch_partiful,
    "dice": fetch_dice,
    "poshvip": fetch_posh,
}


def get_scrapers(names=None):
    """
    Build the source registry: name -> callable(today) returning events.
    Unknown names are ignored.
    """
    names = names if names is not None else config.ENABLED_SOURCES
    return {name: SCRAPERS[name] for name in names if name in SCRAPERS}
