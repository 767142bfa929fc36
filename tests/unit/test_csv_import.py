"""Unit tests for CSV profile parsing"""

import pytest
from cibil_analyzer.api.v1.upload import parse_profiles_csv
from cibil_analyzer.domain.exceptions import InvalidProfileError

HEADER = "fullName,paymentHistory,creditUtilization,creditAge,creditMix,hardInquiries\n"


def test_parse_valid_rows():
    content = (HEADER + "Asha Rao,100,30,5,good,0\nRavi Kumar,60,80,1.5,poor,5\n").encode()

    profiles = parse_profiles_csv(content)

    assert len(profiles) == 2
    assert profiles[0].owner_label == "Asha Rao"
    assert profiles[1].credit_age_years == 1.5
    assert profiles[1].hard_inquiries == 5
    assert profiles[1].credit_mix == "poor"


def test_parse_accepts_name_column_and_bom():
    content = "\ufeffname,paymentHistory,creditUtilization,creditAge,creditMix,hardInquiries\nAsha,95,10,7,average,1\n"

    profiles = parse_profiles_csv(content.encode("utf-8"))

    assert profiles[0].owner_label == "Asha"
    assert profiles[0].credit_mix == "average"


def test_parse_rejects_missing_columns():
    with pytest.raises(InvalidProfileError, match="missing columns: fullName, hardInquiries"):
        parse_profiles_csv(b"paymentHistory,creditUtilization,creditAge,creditMix\n1,2,3,good\n")


def test_parse_reports_bad_row_number():
    content = (HEADER + "Asha,100,30,5,good,0\nRavi,abc,30,5,good,0\n").encode()

    with pytest.raises(InvalidProfileError, match="Row 2: paymentHistory"):
        parse_profiles_csv(content)


def test_parse_rejects_out_of_range_values():
    content = (HEADER + "Asha,100,130,5,good,0\n").encode()

    with pytest.raises(InvalidProfileError, match="Row 1: creditUtilization"):
        parse_profiles_csv(content)


def test_parse_rejects_unknown_credit_mix():
    content = (HEADER + "Asha,100,30,5,excellent,0\n").encode()

    with pytest.raises(InvalidProfileError, match="creditMix"):
        parse_profiles_csv(content)


def test_parse_rejects_header_only_file():
    with pytest.raises(InvalidProfileError, match="no data rows"):
        parse_profiles_csv(HEADER.encode())


def test_parse_rejects_non_utf8():
    with pytest.raises(InvalidProfileError, match="UTF-8"):
        parse_profiles_csv(b"\xff\xfe\x00bad")
