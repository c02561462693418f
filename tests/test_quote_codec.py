import json

import pytest

from custom_components.quote_sync.quotes import Quote, QuoteFormatError, export_document, import_document


def test_export_is_pretty_printed_array():
    document = export_document([Quote("Carpe diem.", "Latin"), Quote("Ça ira.", "French")])

    assert document.startswith("[\n  {\n    \"text\": \"Carpe diem.\"")
    assert "Ça ira." in document
    assert json.loads(document) == [
        {"text": "Carpe diem.", "category": "Latin"},
        {"text": "Ça ira.", "category": "French"},
    ]


def test_export_of_empty_collection():
    assert export_document([]) == "[]"


def test_exported_document_imports_back_unchanged():
    quotes = [Quote("One", "A"), Quote(" spaced ", "B"), Quote("Three", "A")]

    assert import_document(export_document(quotes)) == quotes


def test_import_skips_malformed_entries():
    document = json.dumps(
        [
            {"text": "Kept", "category": "Wisdom"},
            {"text": "Missing category"},
            {"text": "", "category": "Wisdom"},
            "just a string",
            {"text": "Also kept", "category": "Humor", "author": "anon"},
        ]
    )

    assert import_document(document) == [Quote("Kept", "Wisdom"), Quote("Also kept", "Humor")]


def test_import_accepts_utf8_bytes():
    document = json.dumps([{"text": "Überall", "category": "German"}], ensure_ascii=False).encode()

    assert import_document(document) == [Quote("Überall", "German")]


@pytest.mark.parametrize(
    ("document", "reason"),
    [
        ("{not json", "invalid_json"),
        ('{"text": "a", "category": "b"}', "not_a_list"),
        ("[]", "no_valid_quotes"),
        ('[{"text": "a"}]', "no_valid_quotes"),
        (b"\xff\xfe", "invalid_encoding"),
    ],
)
def test_import_rejects_unusable_documents(document, reason):
    with pytest.raises(QuoteFormatError) as err:
        import_document(document)

    assert err.value.reason == reason
