from uuid import uuid4

import pytest

from src.app.services.checkin_qr_codec import CheckinQrCodec
from src.domain.errors import InvalidCode


@pytest.fixture
def codec():
    return CheckinQrCodec("test-qr-secret")


def test_issued_code_resolves_to_guest(codec, guest, wedding_id):
    payload = codec.issue(guest)

    assert payload["qr_content"] == "dmc-checkin:" + payload["token"]
    assert codec.resolve(payload["qr_content"], wedding_id) == guest.id
    # Scanners that strip the prefix still resolve
    assert codec.resolve(payload["token"], wedding_id) == guest.id


def test_code_issued_for_another_wedding_is_tenant_mismatch(codec, guest):
    payload = codec.issue(guest)

    with pytest.raises(InvalidCode) as exc:
        codec.resolve(payload["qr_content"], uuid4())

    assert exc.value.reason == InvalidCode.TENANT_MISMATCH
    assert exc.value.code == "INVALID_CODE"


@pytest.mark.parametrize("raw", [None, "", "   ", "dmc-checkin:", "dmc-checkin:not-a-jwe", "hello"])
def test_malformed_codes_are_rejected(codec, wedding_id, raw):
    with pytest.raises(InvalidCode) as exc:
        codec.resolve(raw, wedding_id)

    assert exc.value.reason == InvalidCode.MALFORMED


def test_code_encrypted_with_another_key_is_malformed(guest, wedding_id):
    payload = CheckinQrCodec("other-secret").issue(guest)

    with pytest.raises(InvalidCode) as exc:
        CheckinQrCodec("test-qr-secret").resolve(payload["qr_content"], wedding_id)

    assert exc.value.reason == InvalidCode.MALFORMED


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        CheckinQrCodec("")
