import json

from storefront.checkout.metadata import METADATA_VALUE_LIMIT, extract_cart, make_metadata


def _event(metadata):
    return {"type": "payment_intent.succeeded", "data": {"object": {"id": "pi_1", "metadata": metadata}}}


def test_make_metadata_compact_json():
    meta = make_metadata({"A": 2, "B": 1})
    assert meta == {"cart": '[{"id":"A","quantity":2},{"id":"B","quantity":1}]'}


def test_make_metadata_omits_oversized_cart():
    quantities = {f"product-{i:04d}": 1 for i in range(40)}
    assert len(json.dumps(quantities)) > METADATA_VALUE_LIMIT
    assert make_metadata(quantities) == {}


def test_extract_cart_reads_metadata():
    event = _event(make_metadata({"A": 2}))
    assert extract_cart(event) == {"A": 2}


def test_extract_cart_missing_or_unreadable():
    assert extract_cart(_event({})) is None
    assert extract_cart(_event({"cart": "not json"})) is None
    assert extract_cart(_event({"cart": '[{"id":"A","quantity":0}]'})) is None
    assert extract_cart({}) is None
