from blueprint.utils.errors import (
    EmptyActionGroup,
    ErrorCode,
    MalformedBodyText,
    make_error,
)


def test_error_templates_provide_message_and_recovery() -> None:
    for code in ErrorCode:
        payload = make_error(code)
        assert payload["code"] == code.value
        assert payload["message"]
        assert payload["recovery"]


def test_make_error_overrides() -> None:
    payload = make_error(ErrorCode.MALFORMED_BODY_TEXT, "custom", recovery=["retry"])
    assert payload == {
        "code": "MALFORMED_BODY_TEXT",
        "message": "custom",
        "recovery": ["retry"],
    }


def test_malformed_body_message_truncates_long_text() -> None:
    exc = MalformedBodyText("x" * 100, "Expecting value")
    assert "Expecting value" in str(exc)
    assert "..." in str(exc)
    assert exc.code is ErrorCode.MALFORMED_BODY_TEXT


def test_empty_action_group_names_the_action() -> None:
    exc = EmptyActionGroup("Users", "show")
    assert "show" in str(exc) and "Users" in str(exc)
    assert exc.code is ErrorCode.EMPTY_ACTION_GROUP
