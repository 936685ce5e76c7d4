import pytest

from src.app.utils.masking import mask_destination, mask_email, mask_phone, mask_sensitive_data
from src.domain.entities import VerificationType


@pytest.mark.parametrize(
    "email,expected",
    [
        ("johndoe@example.com", "jo***oe@example.com"),
        ("abcd@example.com", "a***@example.com"),
        ("a@example.com", "a***@example.com"),
        ("not-an-email", "***"),
    ],
)
def test_mask_email(email, expected):
    assert mask_email(email) == expected


@pytest.mark.parametrize(
    "phone,expected",
    [("+911234567890", "+911******90"), ("123456", "******")],
)
def test_mask_phone(phone, expected):
    assert mask_phone(phone) == expected


def test_mask_destination_picks_by_type():
    assert mask_destination("+911234567890", VerificationType.PHONE) == "+911******90"
    assert mask_destination("johndoe@example.com", VerificationType.PASSWORD_RESET) == (
        "jo***oe@example.com"
    )


def test_mask_sensitive_data_hides_codes_and_tokens():
    text = "Your verification code is 123456. token=" + "f" * 40

    masked = mask_sensitive_data(text)

    assert "123456" not in masked
    assert "verification code is ******" in masked
    assert "f" * 40 not in masked
    assert masked.endswith("ffff" + "*" * 32 + "ffff")
