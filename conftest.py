"""Pytest configuration — makes the project root importable and keeps tests offline."""

import copy
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent))


SAMPLE_PAYLOAD = {
    "now": "2024-08-29T12:55:00+05:30",
    "now_2": "29 Aug @ 12:55",
    "listedItemDetails": [
        {
            "court_no": 1,
            "item_no": "13",
            "court_message": "Sequence would be Item Nos. 10 to 14, thereafter 30 onwards",
            "item_status": "HEARING",
            "court_name": "<b>Court No. 1</b>",
            "registration_number_display": "SLP(C) No. 1234/2024",
            "petitioner_name": "  ACME LTD ",
            "respondent_name": " UNION OF INDIA  ",
        },
        {
            "court_no": "2",
            "item_no": None,
            "court_message": "",
            "item_status": "",
            "court_name": "Court No. 2",
        },
        {
            "court_no": "21",
            "item_no": "4",
            "court_message": "Items 1, 2, 4 and 7",
            "item_status": "",
            "court_name": "Registrar Court",
        },
        {
            "court_no": 22,
            "item_no": "x",
            "court_message": "",
            "item_status": "COURT NOT IN SESSION",
            "court_name": "<i>Registrar Court 2</i>",
        },
    ],
}


@pytest.fixture
def upstream_payload():
    """A fresh copy of the sample cause-list payload."""
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture(autouse=True)
def _no_upstream_calls():
    """Serve the sample payload instead of reaching the real cause-list feed."""
    with patch(
        "noticeboard.upstream.fetch_json",
        side_effect=lambda *args, **kwargs: copy.deepcopy(SAMPLE_PAYLOAD),
    ):
        yield
