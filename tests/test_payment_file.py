"""Tests for pain.001.001.03 payment file generation."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from lxml import etree

from creditsepa.domain.entities import (
    Account,
    DebtorConfig,
    PaymentCandidate,
    PaymentFileSettings,
)
from creditsepa.domain.errors import ValidationError
from creditsepa.domain.payment_file import (
    PAIN_001_NAMESPACE,
    PaymentFileBuilder,
    default_filename,
    end_to_end_id,
    format_amount,
    summarize,
)

NS = {"p": PAIN_001_NAMESPACE}
NOW = datetime(2024, 3, 15, 14, 30, 5, tzinfo=timezone(timedelta(hours=1)))
DEBTOR = DebtorConfig(name="Beispiel GmbH", iban="DE02120300000000202051", bic="BYLADEM1001")


def candidate(voucher="GS-1001", name="Acme Corp", amount="123.45", iban="DE12500105170648489890", bic=""):
    return PaymentCandidate(
        voucher_number=voucher,
        contact_name=name,
        amount=Decimal(amount),
        account=Account(iban=iban, bic=bic),
    )


@pytest.fixture
def builder():
    return PaymentFileBuilder(PaymentFileSettings(currency="EUR"))


def build(builder, candidates, offset=0):
    return etree.fromstring(builder.build(candidates, DEBTOR, offset, now=NOW))


def text(root, path):
    return root.find(path, NS).text


def test_single_candidate_scenario(builder):
    """One credit note of 123.45 without BIC."""
    root = build(builder, [candidate()])

    assert text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:NbOfTxs") == "1"
    assert text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:CtrlSum") == "123.45"
    assert text(root, "p:CstmrCdtTrfInitn/p:PmtInf/p:NbOfTxs") == "1"
    assert text(root, "p:CstmrCdtTrfInitn/p:PmtInf/p:CtrlSum") == "123.45"
    tx = root.find("p:CstmrCdtTrfInitn/p:PmtInf/p:CdtTrfTxInf", NS)
    assert text(tx, "p:CdtrAgt/p:FinInstnId/p:BIC") == "NOTPROVIDED"
    assert text(tx, "p:CdtrAcct/p:Id/p:IBAN") == "DE12500105170648489890"
    assert text(tx, "p:Amt/p:InstdAmt") == "123.45"
    assert tx.find("p:Amt/p:InstdAmt", NS).get("Ccy") == "EUR"


def test_empty_batch_is_rejected(builder):
    """There is no SEPA file without transactions."""
    with pytest.raises(ValidationError):
        builder.build([], DEBTOR)


def test_document_namespace_and_declaration(builder):
    """Output is UTF-8 XML in the pain.001.001.03 namespace."""
    document = builder.build([candidate()], DEBTOR, now=NOW)

    assert document.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")
    root = etree.fromstring(document)
    assert root.tag == f"{{{PAIN_001_NAMESPACE}}}Document"


def test_control_sum_is_exact(builder):
    """CtrlSum is the exact decimal sum, identical at both levels."""
    amounts = ["0.10", "0.20", "1234567.89", "5", "99.9"]
    candidates = [candidate(voucher=f"GS-{i}", amount=a) for i, a in enumerate(amounts)]

    root = build(builder, candidates)

    expected = "1234673.09"
    assert text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:CtrlSum") == expected
    assert text(root, "p:CstmrCdtTrfInitn/p:PmtInf/p:CtrlSum") == expected
    assert text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:NbOfTxs") == "5"
    assert len(root.findall("p:CstmrCdtTrfInitn/p:PmtInf/p:CdtTrfTxInf", NS)) == 5
    instructed = [e.text for e in root.iterfind(".//p:InstdAmt", NS)]
    assert instructed == ["0.10", "0.20", "1234567.89", "5.00", "99.90"]


def test_identifiers_and_dates(builder):
    """Ids, creation time and execution date derive from the timestamp."""
    root = build(builder, [candidate()], offset=3)

    assert text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:MsgId") == "CN-20240315-143005"
    assert text(root, "p:CstmrCdtTrfInitn/p:PmtInf/p:PmtInfId") == "PMT-20240315-143005"
    assert text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:CreDtTm") == "2024-03-15T14:30:05+01:00"
    assert text(root, "p:CstmrCdtTrfInitn/p:PmtInf/p:ReqdExctnDt") == "2024-03-18"


def test_creation_time_is_timezone_qualified_by_default(builder):
    """Without an explicit time the local time with offset is used."""
    root = etree.fromstring(builder.build([candidate()], DEBTOR))

    created = datetime.fromisoformat(text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:CreDtTm"))
    assert created.tzinfo is not None


def test_debtor_block(builder):
    """Debtor name, account and agent come from the configuration."""
    root = build(builder, [candidate()])
    pmt_inf = root.find("p:CstmrCdtTrfInitn/p:PmtInf", NS)

    assert text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:InitgPty/p:Nm") == "Beispiel GmbH"
    assert text(pmt_inf, "p:Dbtr/p:Nm") == "Beispiel GmbH"
    assert text(pmt_inf, "p:DbtrAcct/p:Id/p:IBAN") == "DE02120300000000202051"
    assert text(pmt_inf, "p:DbtrAgt/p:FinInstnId/p:BIC") == "BYLADEM1001"
    assert text(pmt_inf, "p:PmtMtd") == "TRF"
    assert text(pmt_inf, "p:BtchBookg") == "true"
    assert text(pmt_inf, "p:PmtTpInf/p:SvcLvl/p:Cd") == "SEPA"
    assert text(pmt_inf, "p:ChrgBr") == "SLEV"


def test_element_order(builder):
    """Elements follow the schema sequence."""
    root = build(builder, [candidate(bic="COBADEFFXXX")])

    def local_names(element):
        return [etree.QName(child).localname for child in element]

    initiation = root.find("p:CstmrCdtTrfInitn", NS)
    assert local_names(initiation) == ["GrpHdr", "PmtInf"]
    assert local_names(initiation.find("p:GrpHdr", NS)) == [
        "MsgId", "CreDtTm", "NbOfTxs", "CtrlSum", "InitgPty",
    ]
    assert local_names(initiation.find("p:PmtInf", NS)) == [
        "PmtInfId", "PmtMtd", "BtchBookg", "NbOfTxs", "CtrlSum", "PmtTpInf",
        "ReqdExctnDt", "Dbtr", "DbtrAcct", "DbtrAgt", "ChrgBr", "CdtTrfTxInf",
    ]
    assert local_names(initiation.find("p:PmtInf/p:CdtTrfTxInf", NS)) == [
        "PmtId", "Amt", "CdtrAgt", "Cdtr", "CdtrAcct", "RmtInf",
    ]


def test_end_to_end_id_and_remittance(builder):
    """EndToEndId drops whitespace and is cut to 35 characters."""
    voucher = "GS 2024 " + "X" * 40
    root = build(builder, [candidate(voucher=voucher)])
    tx = root.find("p:CstmrCdtTrfInitn/p:PmtInf/p:CdtTrfTxInf", NS)

    e2e = text(tx, "p:PmtId/p:EndToEndId")
    assert e2e == ("GS2024" + "X" * 40)[:35]
    assert len(e2e) == 35
    assert text(tx, "p:RmtInf/p:Ustrd") == f"Rechnungskorrektur {voucher}"


@pytest.mark.parametrize("voucher", ["GS-1", " GS\t- 2 ", "A" * 80, ""])
def test_end_to_end_id_bounds(voucher):
    """End-to-end ids never contain whitespace or exceed 35 characters."""
    e2e = end_to_end_id(voucher)

    assert len(e2e) <= 35
    assert not any(ch.isspace() for ch in e2e)


def test_untrusted_text_is_escaped(builder):
    """Markup characters in names and vouchers survive a parser round trip."""
    name = 'Tom & Jerry <"Cartoons"> \'Ltd\''
    voucher = "GS<1>&2"
    document = builder.build(
        [candidate(name=name, voucher=voucher)],
        DebtorConfig(name="A & B <GmbH>", iban="DE02120300000000202051"),
        now=NOW,
    )

    root = etree.fromstring(document)
    tx = root.find("p:CstmrCdtTrfInitn/p:PmtInf/p:CdtTrfTxInf", NS)
    assert text(tx, "p:Cdtr/p:Nm") == name
    assert text(tx, "p:PmtId/p:EndToEndId") == voucher
    assert text(tx, "p:RmtInf/p:Ustrd") == f"Rechnungskorrektur {voucher}"
    assert text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:InitgPty/p:Nm") == "A & B <GmbH>"
    assert b"Tom &amp; Jerry &lt;" in document


def test_missing_debtor_bic_uses_sentinel(builder):
    """An unknown debtor BIC is written as NOTPROVIDED."""
    document = builder.build(
        [candidate()], DebtorConfig(name="Beispiel GmbH", iban="DE02120300000000202051"), now=NOW
    )

    root = etree.fromstring(document)
    assert text(root, "p:CstmrCdtTrfInitn/p:PmtInf/p:DbtrAgt/p:FinInstnId/p:BIC") == "NOTPROVIDED"


def test_currency_and_label_are_configurable():
    """Currency code and remittance label come from the settings."""
    builder = PaymentFileBuilder(PaymentFileSettings(currency="CHF", remittance_label="Credit note"))

    root = build(builder, [candidate(voucher="CN-7")])

    assert root.find(".//p:InstdAmt", NS).get("Ccy") == "CHF"
    assert text(root, ".//p:RmtInf/p:Ustrd") == "Credit note CN-7"


def test_remittance_text_is_bounded(builder):
    """Unstructured remittance text is cut to 140 characters."""
    assert len(builder.remittance_text("V" * 200)) == 140


@pytest.mark.parametrize(
    "bad, message",
    [
        (candidate(amount="0"), "positive"),
        (candidate(amount="-1.00"), "positive"),
        (candidate(amount="1.005"), "two decimal places"),
        (candidate(iban=""), "no IBAN"),
    ],
)
def test_invalid_candidates_are_rejected(builder, bad, message):
    """Invalid candidates fail the whole file."""
    with pytest.raises(ValidationError) as excinfo:
        builder.build([candidate(voucher="GS-OK"), bad], DEBTOR, now=NOW)

    assert message in str(excinfo.value)


def test_offset_is_applied_as_given(builder):
    """The builder adds any offset to the creation date."""
    root = build(builder, [candidate()], offset=-1)

    assert text(root, ".//p:ReqdExctnDt") == "2024-03-14"


def test_control_characters_are_replaced(builder):
    """Text XML 1.0 cannot carry does not break the file."""
    document = builder.build(
        [candidate(name="Acme\x0bCorp\x00", voucher="GS-\x0010\x0b01")],
        DebtorConfig(name="Beispiel\x07GmbH", iban="DE02120300000000202051"),
        now=NOW,
    )

    root = etree.fromstring(document)
    tx = root.find("p:CstmrCdtTrfInitn/p:PmtInf/p:CdtTrfTxInf", NS)
    assert text(tx, "p:Cdtr/p:Nm") == "Acme Corp "
    assert text(tx, "p:PmtId/p:EndToEndId") == "GS-1001"
    assert text(tx, "p:RmtInf/p:Ustrd") == "Rechnungskorrektur GS- 10 01"
    assert text(root, "p:CstmrCdtTrfInitn/p:GrpHdr/p:InitgPty/p:Nm") == "Beispiel GmbH"


def test_helpers():
    """Formatting helpers used by the CLI."""
    assert format_amount(Decimal("5")) == "5.00"
    assert format_amount(Decimal("1234.5")) == "1234.50"
    assert summarize([candidate(amount="1.10"), candidate(amount="2.20")]) == (2, Decimal("3.30"))
    assert default_filename(NOW) == "sepa_creditnotes_20240315_143005.xml"
