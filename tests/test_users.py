import pytest

from apiusers.users import User, ValidationError, new_user

BIO = "This is a test user biography with more than 20 characters"


def test_new_user_trims_fields():
    user = new_user("  Test ", "\tUser\n", "  " + BIO + "  ")
    assert user.first_name == "Test"
    assert user.last_name == "User"
    assert user.biography == BIO
    assert user.id == ""


@pytest.mark.parametrize("first_name", ["T", "T" * 21])
def test_first_name_length_rejected(first_name):
    with pytest.raises(ValidationError) as info:
        new_user(first_name, "User", BIO)
    assert str(info.value) == "first_name deve ter entre 2 e 20 caracteres"


@pytest.mark.parametrize("last_name", ["U", "U" * 21])
def test_last_name_length_rejected(last_name):
    with pytest.raises(ValidationError) as info:
        new_user("Test", last_name, BIO)
    assert str(info.value) == "last_name deve ter entre 2 e 20 caracteres"


@pytest.mark.parametrize("biography", ["b" * 19, "b" * 451])
def test_biography_length_rejected(biography):
    with pytest.raises(ValidationError) as info:
        new_user("Test", "User", biography)
    assert str(info.value) == "biography deve ter entre 20 e 450 caracteres"


def test_boundary_lengths_accepted():
    user = new_user("ab", "c" * 20, "b" * 450)
    assert user.first_name == "ab"
    assert user.last_name == "c" * 20
    assert user.biography == "b" * 450


def test_short_name_padded_by_whitespace_is_rejected():
    with pytest.raises(ValidationError):
        new_user(" T ", "User", BIO)


def test_length_counts_encoded_bytes():
    user = new_user("é", "User", BIO)
    assert user.first_name == "é"
    with pytest.raises(ValidationError):
        new_user("é" * 11, "User", BIO)


def test_validation_error_is_value_error():
    user = User(first_name="", last_name="User", biography=BIO)
    with pytest.raises(ValueError):
        user.validate()


def test_validate_checks_first_name_before_others():
    user = User(first_name="", last_name="", biography="")
    with pytest.raises(ValidationError) as info:
        user.validate()
    assert str(info.value).startswith("first_name")


def test_to_dict():
    user = User(first_name="Test", last_name="User", biography=BIO, id="abc")
    assert user.to_dict() == {
        "id": "abc",
        "first_name": "Test",
        "last_name": "User",
        "biography": BIO,
    }