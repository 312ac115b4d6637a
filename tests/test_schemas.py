"""
Per-field validation rules on the request schemas.
"""
from datetime import date

import pytest
from pydantic import ValidationError

from talent_portal.schemas.schemas import ProfileUpdate, RegisterRequest, age_on
from talent_portal.utils.sanitize import sanitize_payload, sanitize_text

from tests.conftest import registration


def _error_fields(exc: ValidationError) -> set:
    return {str(error["loc"][0]) for error in exc.errors()}


def test_register_request_document_uses_stored_keys():
    doc = RegisterRequest.model_validate(registration()).to_document()

    assert doc["firstName"] == "A"
    assert doc["expectedCTC"] == 1500000
    assert doc["noticePeriod"] == "Yes"
    assert doc["dob"] == "1990-05-15"
    assert "password" not in doc


def test_name_is_collapsed_and_capitalised():
    doc = RegisterRequest.model_validate(registration(name="  mary   ann o'neil ")).to_document()
    assert doc["name"] == "Mary Ann O'Neil"


@pytest.mark.parametrize("first_name", ["R2D2", "x" * 51, "Ann<b>"])
def test_invalid_first_name(first_name):
    with pytest.raises(ValidationError) as excinfo:
        RegisterRequest.model_validate(registration(firstName=first_name))
    assert "firstName" in _error_fields(excinfo.value)


def test_password_is_not_sanitised():
    request = RegisterRequest.model_validate(registration(password="Ab1!  onclick=x"))
    assert request.password == "Ab1!  onclick=x"


def test_password_without_special_character_rejected():
    with pytest.raises(ValidationError) as excinfo:
        RegisterRequest.model_validate(registration(password="Password123"))
    assert "password" in _error_fields(excinfo.value)


def test_age_bounds():
    assert age_on(date(2000, 6, 15), date(2018, 6, 14)) == 17
    assert age_on(date(2000, 6, 15), date(2018, 6, 15)) == 18

    with pytest.raises(ValidationError) as excinfo:
        ProfileUpdate.model_validate({"dob": date.today().isoformat()})
    assert "dob" in _error_fields(excinfo.value)


@pytest.mark.parametrize("value,ok", [(5, True), (5.5, True), (5.55, False), (51, False), (-1, False)])
def test_total_experience(value, ok):
    if ok:
        assert ProfileUpdate.model_validate({"totalExperience": value}).total_experience == value
    else:
        with pytest.raises(ValidationError):
            ProfileUpdate.model_validate({"totalExperience": value})


@pytest.mark.parametrize(
    "phone,ok",
    [("+91 98765 43210", True), ("(555) 123-4567", True), ("12345", False), ("call me", False)],
)
def test_phone(phone, ok):
    if ok:
        assert ProfileUpdate.model_validate({"phone": phone}).phone == phone
    else:
        with pytest.raises(ValidationError):
            ProfileUpdate.model_validate({"phone": phone})


def test_urls():
    update = ProfileUpdate.model_validate({"resumeUrl": "https://cv.example.com/me.pdf", "avatar": ""})
    assert update.resume_url == "https://cv.example.com/me.pdf"
    assert update.avatar is None

    with pytest.raises(ValidationError) as excinfo:
        ProfileUpdate.model_validate({"avatar": "javascript:alert(1)"})
    assert "avatar" in _error_fields(excinfo.value)


def test_compensation_range_and_notice_days():
    with pytest.raises(ValidationError) as excinfo:
        ProfileUpdate.model_validate({"currentCTC": 10_000_001, "noticePeriodDays": 400})
    assert _error_fields(excinfo.value) == {"currentCTC", "noticePeriodDays"}


def test_skills_are_trimmed_and_bounded():
    assert ProfileUpdate.model_validate({"skills": ["  Go "]}).skills == ["Go"]
    with pytest.raises(ValidationError):
        ProfileUpdate.model_validate({"skills": ["   "]})
    with pytest.raises(ValidationError):
        ProfileUpdate.model_validate({"skills": ["x" * 31]})


def test_profile_update_only_dumps_sent_fields():
    update = ProfileUpdate.model_validate({"bio": "hi", "email": "x@y.com", "unknown": 1})
    assert update.to_document() == {"bio": "hi"}


def test_sanitize_text():
    assert sanitize_text("  <script>x()</script>hello  ") == "hello"
    assert sanitize_text('<a onclick="x">link</a>') == '<a "x">link</a>'
    assert sanitize_text("JavaScript:void(0)") == "void(0)"


def test_sanitize_payload_leaves_password_alone():
    cleaned = sanitize_payload({"email": " a@b.com ", "password": "  Ab1!  pass ", "skills": ["x"]})
    assert cleaned == {"email": "a@b.com", "password": "  Ab1!  pass ", "skills": ["x"]}
    assert sanitize_payload(["not", "a", "dict"]) == ["not", "a", "dict"]


@pytest.mark.parametrize(
    "password",
    ["Abcd123!" + "a" * 70 + "ORIGINAL", "Abcd123!" + "é" * 40],
)
def test_password_longer_than_72_bytes_rejected(password):
    with pytest.raises(ValidationError) as excinfo:
        RegisterRequest.model_validate(registration(password=password))
    assert "password" in _error_fields(excinfo.value)
