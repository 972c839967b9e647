import dataclasses

import pytest

from core.data_models import SatelliteRecord
from core.gsv_decoder import decode_gsv, is_gsv_sentence, talker_id


def test_two_complete_groups():
    records = decode_gsv("$GPGSV,3,1,11,01,05,030,20,02,10,040,25")

    assert records == [
        SatelliteRecord(id="01", elevation=5.0, azimuth=30.0, strength=20),
        SatelliteRecord(id="02", elevation=10.0, azimuth=40.0, strength=25),
    ]


def test_partial_trailing_group_is_dropped():
    records = decode_gsv("$GPGSV,3,1,11,01,05,030,20,02,10,040")

    assert [r.id for r in records] == ["01"]


def test_non_numeric_elevation_falls_back_to_zero():
    records = decode_gsv("$GPGSV,1,1,01,07,xx,120,33")

    assert records == [SatelliteRecord(id="07", elevation=0.0, azimuth=120.0, strength=33)]


@pytest.mark.parametrize("snr", ["", "abc", "-1", "256", "20.5"])
def test_bad_strength_falls_back_to_zero(snr):
    records = decode_gsv(f"$GPGSV,1,1,01,07,45,120,{snr}")

    assert records[0].strength == 0
    assert records[0].elevation == 45.0


def test_checksum_is_ignored():
    records = decode_gsv("$GPGSV,1,1,02,05,60,090,41,12,15,300,28*7F\r\n")

    assert [r.strength for r in records] == [41, 28]


def test_corrupted_checksum_still_decodes():
    records = decode_gsv("$GPGSV,1,1,01,05,60,090,41*ZZ")

    assert records == [SatelliteRecord(id="05", elevation=60.0, azimuth=90.0, strength=41)]


def test_empty_snr_at_end_of_sentence():
    records = decode_gsv("$GPGSV,2,2,05,31,12,210,*4A")

    assert records == [SatelliteRecord(id="31", elevation=12.0, azimuth=210.0, strength=0)]


@pytest.mark.parametrize("talker", ["GP", "GL", "GA", "GB", "GN"])
def test_any_talker_is_accepted(talker):
    line = f"${talker}GSV,1,1,01,65,30,100,40"

    assert is_gsv_sentence(line)
    assert talker_id(line) == talker
    assert len(decode_gsv(line)) == 1


@pytest.mark.parametrize(
    "line",
    [
        "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47",
        "GPGSV,1,1,01,05,60,090,41",
        "$GPGSVX,1,1,01,05,60,090,41",
        "$GSV,1,1,01,05,60,090,41",
        "",
    ],
)
def test_non_gsv_lines_yield_nothing(line):
    assert not is_gsv_sentence(line)
    assert talker_id(line) is None
    assert decode_gsv(line) == []


def test_header_only_sentence_has_no_records():
    assert decode_gsv("$GPGSV,1,1,00") == []
    assert decode_gsv("$GPGSV") == []


def test_records_are_immutable():
    record = decode_gsv("$GPGSV,1,1,01,05,60,090,41")[0]

    with pytest.raises(dataclasses.FrozenInstanceError):
        record.strength = 10


def test_fields_python_would_coerce_are_rejected():
    records = decode_gsv("$GPGSV,1,1,01,07,4_5, 120,2_0")

    assert records == [SatelliteRecord(id="07", elevation=0.0, azimuth=0.0, strength=0)]


def test_non_ascii_digits_are_rejected():
    records = decode_gsv("$GPGSV,1,1,01,07,４５,１２０,٣٣")

    assert records == [SatelliteRecord(id="07", elevation=0.0, azimuth=0.0, strength=0)]


@pytest.mark.parametrize(
    "elev, expected",
    [("45", 45.0), ("+45", 45.0), ("-3", -3.0), ("45.", 45.0), (".5", 0.5), ("4.5e1", 45.0)],
)
def test_plain_decimal_forms_are_accepted(elev, expected):
    assert decode_gsv(f"$GPGSV,1,1,01,07,{elev},120,+33")[0] == SatelliteRecord(
        id="07", elevation=expected, azimuth=120.0, strength=33
    )
