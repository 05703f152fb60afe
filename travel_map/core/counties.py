"""County Names — reconciliation between every spelling a county has ever been stored as.

Invariants:
    - Short Chinese name (e.g. 臺北) is the canonical form written by this service
    - Legacy rows store English names (e.g. Taipei City); both must keep matching
    - 台 and 臺 are interchangeable on input; catalogue names always use 臺
    - Hsinchu City/County share 新竹 and Chiayi City/County share 嘉義
    - Pure module: no IO, no framework imports

Design Decisions:
    - One catalogue tuple drives every lookup table (no hand-maintained reverse maps)
    - The SVG map labels each shape with its English name, so english_name doubles
      as the map label
    - Unknown slugs fall back to 臺北 with a warning: county pages must always render
"""

import logging
from dataclasses import dataclass
from urllib.parse import unquote

logger = logging.getLogger(__name__)

DEFAULT_SHORT_NAME = "臺北"


@dataclass(frozen=True)
class County:
    full_name: str
    english_name: str
    short_name: str
    slug: str


COUNTIES: tuple[County, ...] = (
    County("臺北市", "Taipei City", "臺北", "taipei"),
    County("新北市", "New Taipei City", "新北", "new-taipei"),
    County("桃園市", "Taoyuan City", "桃園", "taoyuan"),
    County("臺中市", "Taichung City", "臺中", "taichung"),
    County("臺南市", "Tainan City", "臺南", "tainan"),
    County("高雄市", "Kaohsiung City", "高雄", "kaohsiung"),
    County("基隆市", "Keelung City", "基隆", "keelung"),
    County("新竹市", "Hsinchu City", "新竹", "hsinchu"),
    County("嘉義市", "Chiayi City", "嘉義", "chiayi"),
    County("新竹縣", "Hsinchu County", "新竹", "hsinchu"),
    County("苗栗縣", "Miaoli County", "苗栗", "miaoli"),
    County("彰化縣", "Changhua County", "彰化", "changhua"),
    County("南投縣", "Nantou County", "南投", "nantou"),
    County("雲林縣", "Yunlin County", "雲林", "yunlin"),
    County("嘉義縣", "Chiayi County", "嘉義", "chiayi"),
    County("屏東縣", "Pingtung County", "屏東", "pingtung"),
    County("宜蘭縣", "Yilan County", "宜蘭", "yilan"),
    County("花蓮縣", "Hualien County", "花蓮", "hualien"),
    County("臺東縣", "Taitung County", "臺東", "taitung"),
    County("澎湖縣", "Penghu County", "澎湖", "penghu"),
    County("金門縣", "Kinmen County", "金門", "kinmen"),
    County("連江縣", "Lienchiang County", "連江", "lienchiang"),
)


def _build_lookup() -> dict[str, str]:
    lookup: dict[str, str] = {}
    for county in COUNTIES:
        for alias in (
            county.short_name, county.full_name,
            county.english_name, county.english_name.lower(), county.slug,
        ):
            lookup[alias] = county.short_name
    return lookup


_LOOKUP = _build_lookup()
_SHORT_TO_SLUG = {c.short_name: c.slug for c in COUNTIES}
_SLUG_TO_SHORT = {c.slug: c.short_name for c in COUNTIES}


def normalize_tai(text: str) -> str:
    """Fold the common 台 form into the official 臺."""
    return text.replace("台", "臺")


def to_short_name(name: str | None) -> str | None:
    """Resolve any known spelling of a county to its short Chinese name."""
    if not name:
        return None
    cleaned = normalize_tai(unquote(name).strip())
    return _LOOKUP.get(cleaned) or _LOOKUP.get(cleaned.lower())


def is_known_county(name: str | None) -> bool:
    return to_short_name(name) is not None


def stored_names_for(short_name: str) -> list[str]:
    """Every spelling a row for this county may carry in the county column."""
    names = [short_name]
    for county in COUNTIES:
        if county.short_name != short_name:
            continue
        for alias in (county.full_name, county.english_name):
            if alias not in names:
                names.append(alias)
    return names


def map_labels_for(short_name: str) -> list[str]:
    """SVG map shape names that render this county."""
    return [c.english_name for c in COUNTIES if c.short_name == short_name]


def county_to_slug(short_name: str) -> str:
    return _SHORT_TO_SLUG.get(short_name, short_name.lower())


def slug_to_county(slug: str) -> str:
    """URL slug to short name. Unknown slugs fall back to 臺北."""
    decoded = unquote(slug).strip().lower()
    if decoded in _SLUG_TO_SHORT:
        return _SLUG_TO_SHORT[decoded]
    dashed = "-".join(decoded.split())
    if dashed in _SLUG_TO_SHORT:
        return _SLUG_TO_SHORT[dashed]
    logger.warning(
        f"Unknown county slug: {slug}, using default: {DEFAULT_SHORT_NAME}",
    )
    return DEFAULT_SHORT_NAME


def list_counties() -> list[dict]:
    """Catalogue of distinct short names in display order, with their aliases."""
    catalogue: list[dict] = []
    seen: set[str] = set()
    for county in COUNTIES:
        if county.short_name in seen:
            continue
        seen.add(county.short_name)
        catalogue.append({
            "name": county.short_name,
            "slug": county.slug,
            "full_names": [
                c.full_name for c in COUNTIES if c.short_name == county.short_name
            ],
            "map_labels": map_labels_for(county.short_name),
        })
    return catalogue


def county_search_terms(term: str) -> list[str]:
    """County spellings a free-text query should match, in discovery order.

    Covers exact Chinese and English names in both directions, 台/臺
    variants, and partial matches against either language. Every hit also
    contributes its short name so rows written in the canonical form match.
    """
    term = term.strip()
    if not term:
        return []
    terms: list[str] = [term]

    def add(*names: str) -> None:
        for name in names:
            if name not in terms:
                terms.append(name)

    variants = {term, term.replace("台", "臺"), term.replace("臺", "台")}
    lowered = term.lower()
    folded = normalize_tai(term)

    for county in COUNTIES:
        if county.full_name in variants:
            add(county.english_name, county.short_name)
        if county.english_name == term:
            add(county.full_name, county.short_name)

    for county in COUNTIES:
        if folded in county.full_name:
            add(county.full_name, county.english_name, county.short_name)

    for county in COUNTIES:
        if lowered in county.english_name.lower():
            add(county.english_name, county.full_name, county.short_name)

    return terms
