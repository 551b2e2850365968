import pytest

from src.agents.pdf_agent import PDFAgent
from src.models.gateway_schema import PDFOutput


def _invoice(total, model_flag=None):
    return {
        "extracted_text": "INVOICE ...",
        "is_invoice": True,
        "is_policy": False,
        "invoice_details": {
            "total_amount": total,
            "line_items": [{"description": "Consulting", "amount": total}],
        },
        "flagged": model_flag,
    }


def _policy(gdpr, fda):
    return {
        "extracted_text": "Data protection policy",
        "is_invoice": False,
        "is_policy": True,
        "policy_details": {"mentions_gdpr": gdpr, "mentions_fda": fda},
    }


@pytest.mark.parametrize(
    "total, model_flag, expected",
    [
        (10001, False, True),
        (10000, True, False),
        (250.0, None, False),
    ],
)
def test_invoice_flag_is_recomputed(gateway, total, model_flag, expected):
    gateway.script(PDFOutput, _invoice(total, model_flag))

    result = PDFAgent(gateway).extract("INVOICE ...", "invoice.pdf")

    assert result.is_invoice is True
    assert result.invoice_details.total_amount == total
    assert result.flagged is expected


@pytest.mark.parametrize(
    "gdpr, fda, expected",
    [
        (True, False, True),
        (False, True, True),
        (False, False, False),
        (None, None, False),
    ],
)
def test_policy_flag_follows_regulation_mentions(gateway, gdpr, fda, expected):
    gateway.script(PDFOutput, _policy(gdpr, fda))

    result = PDFAgent(gateway).extract("Data protection policy")

    assert result.is_policy is True
    assert result.flagged is expected


def test_regulation_mentions_ignored_when_not_a_policy(gateway):
    payload = _policy(True, True)
    payload["is_policy"] = False
    gateway.script(PDFOutput, payload)

    assert PDFAgent(gateway).extract("text").flagged is False


def test_large_total_ignored_when_not_an_invoice(gateway):
    payload = _invoice(50000)
    payload["is_invoice"] = False
    gateway.script(PDFOutput, payload)

    assert PDFAgent(gateway).extract("text").flagged is False


def test_sparse_gateway_output_gets_defaults(gateway):
    gateway.script(PDFOutput, {"invoice_details": {"line_items": [{"description": "Widget"}]}, "flagged": True})

    result = PDFAgent(gateway).extract("text")

    assert result.extracted_text == ""
    assert result.is_invoice is False
    assert result.is_policy is False
    assert result.invoice_details.total_amount is None
    assert result.invoice_details.line_items[0].amount == 0.0
    assert result.policy_details is None
    assert result.flagged is False


def test_prompt_receives_content_and_file_name(gateway):
    gateway.script(PDFOutput, {})

    PDFAgent(gateway).extract("Policy text", "policy.pdf")

    assert gateway.called_with(PDFOutput) == [{"pdf_content": "Policy text", "source_name": "policy.pdf"}]
