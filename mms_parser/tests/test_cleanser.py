import pytest

from mms_parser.cleanser import Cleanser, Field, RegexSubstitution
from mms_parser.errors import ValidationFailure
from mms_parser.models import CanonicalMessage, ParsedMessage


def _message(cls=CanonicalMessage):
    return cls(
        header_from="<foo@example.com>",
        header_to="<bar@example.com>",
        header_subject="<Hi>",
        header_datetime="<today>",
        body_text="<body>\n",
    )


def test_no_configuration_is_a_no_op(logger):
    message = _message()
    Cleanser(logger).cleanse(message)
    assert message == _message()


def test_strip_characters_applies_to_all_five_fields(logger):
    message = Cleanser(logger, strip_characters="<>").cleanse(_message())
    assert message.header_from == "foo@example.com"
    assert message.header_to == "bar@example.com"
    assert message.header_subject == "Hi"
    assert message.header_datetime == "today"
    assert message.body_text == "body\n"


def test_strip_removes_characters_anywhere_not_just_ends(logger):
    message = CanonicalMessage(header_from="a-b-c@x", body_text="-x-")
    Cleanser(logger, strip_characters="-").cleanse(message)
    assert message.header_from == "abc@x"
    assert message.body_text == "x"


def test_strip_runs_before_cleanse_map(logger):
    seen = []

    def record(value):
        seen.append(value)
        return value.upper()

    message = Cleanser(logger, strip_characters="<>", cleanse_map={"header_subject": record}).cleanse(_message())
    assert seen == ["Hi"]
    assert message.header_subject == "HI"
    # Unmapped fields are only stripped
    assert message.header_to == "bar@example.com"


def test_trailing_newline_transform_is_idempotent(logger):
    cleanser = Cleanser(logger, cleanse_map={Field.BODY_TEXT: RegexSubstitution(r"\n$", "")})
    message = CanonicalMessage(header_from="a@b", body_text="hi\n")
    cleanser.cleanse(message)
    assert message.body_text == "hi"
    cleanser.cleanse(message)
    assert message.body_text == "hi"


def test_parsed_messages_are_cleansed_independently(logger):
    cleanser = Cleanser(logger, strip_characters="<>")
    parsed = cleanser.cleanse(_message(ParsedMessage))
    assert parsed.header_subject == "Hi"


def test_absent_fields_are_skipped(logger):
    message = CanonicalMessage(header_from="a@b")
    Cleanser(logger, strip_characters="a", cleanse_map={"body_text": str.upper}).cleanse(message)
    assert message.header_from == "@b"
    assert message.body_text is None


def test_unknown_field_is_rejected(logger):
    with pytest.raises(ValueError, match="Unknown cleanse_map field"):
        Cleanser(logger, cleanse_map={"header_cc": str.strip})


def test_non_callable_transform_is_rejected(logger):
    with pytest.raises(ValueError, match="must be callable"):
        Cleanser(logger, cleanse_map={"body_text": "not a function"})


def test_failing_transform_is_a_validation_failure(logger):
    def explode(value):
        raise RuntimeError("boom")

    with pytest.raises(ValidationFailure, match="boom"):
        Cleanser(logger, cleanse_map={"body_text": explode}).cleanse(CanonicalMessage(header_from="a", body_text="x"))
