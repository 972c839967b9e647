"""
GSV (satellites in view) sentence decoder.

Sentence layout:

    $--GSV,<total_msgs>,<msg_num>,<sats_in_view>,{<id>,<elev>,<azim>,<snr>}...*<checksum>

Only the repeating satellite groups are decoded. The checksum is dropped without
verification, and numeric fields that fail to parse fall back to zero so that
one damaged field does not discard the rest of the sentence.
"""
import re
from typing import List, Optional

from core.data_models import SatelliteRecord

GSV_ID_PATTERN = re.compile(r"\$[A-Z]{2}GSV")

# ASCII-only numeric grammar; no whitespace, underscores or non-ASCII digits
FLOAT_PATTERN = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:inf|infinity|nan)",
    re.ASCII | re.IGNORECASE,
)
UINT_PATTERN = re.compile(r"\+?\d+", re.ASCII)

FIRST_SATELLITE_FIELD = 4
FIELDS_PER_SATELLITE = 4


def _sentence_fields(line: str) -> List[str]:
    body = line.strip().split("*", 1)[0]
    return body.split(",")


def is_gsv_sentence(line: str) -> bool:
    """Return True if the sentence identifier is `$` + talker + `GSV`."""
    return GSV_ID_PATTERN.fullmatch(_sentence_fields(line)[0]) is not None


def talker_id(line: str) -> Optional[str]:
    """Two-letter talker of a GSV sentence (e.g. 'GP', 'GL'), or None."""
    if not is_gsv_sentence(line):
        return None
    return line.strip()[1:3]


def _parse_float(field: str) -> float:
    if FLOAT_PATTERN.fullmatch(field) is None:
        return 0.0
    return float(field)


def _parse_strength(field: str) -> int:
    if UINT_PATTERN.fullmatch(field) is None:
        return 0
    value = int(field)
    return value if 0 <= value <= 255 else 0


def decode_gsv(line: str) -> List[SatelliteRecord]:
    """
    Decode the satellite groups of one GSV sentence.

    Args:
        line: One complete NMEA line.

    Returns:
        Satellite records in sentence order. Empty for non-GSV lines and for
        GSV lines without a complete group; a trailing group with fewer than
        four fields is ignored.
    """
    fields = _sentence_fields(line)
    if GSV_ID_PATTERN.fullmatch(fields[0]) is None:
        return []

    records = []
    i = FIRST_SATELLITE_FIELD
    while i + FIELDS_PER_SATELLITE <= len(fields):
        sat_id, elev, azim, snr = fields[i:i + FIELDS_PER_SATELLITE]
        records.append(
            SatelliteRecord(
                id=sat_id,
                elevation=_parse_float(elev),
                azimuth=_parse_float(azim),
                strength=_parse_strength(snr),
            )
        )
        i += FIELDS_PER_SATELLITE
    return records
