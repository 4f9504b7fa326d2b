import base64

import pytest

from bridge.runtime.config import DEFAULT_TEXT_CONTENT_TYPES
from bridge.runtime.core.exceptions import EncodingError
from bridge.runtime.core.format_detector import SchemaVariant
from bridge.runtime.core.request_decoder import decode_body
from bridge.runtime.core.response_encoder import BodyCodec, ResponseEncoderRegistry
from bridge.runtime.models.canonical import CanonicalResponse

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02"


@pytest.fixture
def encoder():
    return ResponseEncoderRegistry(DEFAULT_TEXT_CONTENT_TYPES)


def _cookie_response():
    return CanonicalResponse(
        status_code=200,
        headers=[
            ("Content-Type", "text/plain"),
            ("Set-Cookie", "a=1; Path=/"),
            ("Set-Cookie", "b=2; HttpOnly"),
            ("Set-Cookie", "c=3; Expires=Wed, 21 Oct 2015 07:28:00 GMT"),
        ],
        body=b"ok",
    )


class TestBinaryDecision:
    def test_png_is_base64(self, encoder):
        response = CanonicalResponse(
            status_code=200, headers=[("Content-Type", "image/png")], body=PNG_BYTES
        )
        for variant in SchemaVariant:
            payload = encoder.encode(response, variant)
            assert payload["isBase64Encoded"] is True
            assert base64.b64decode(payload["body"]) == PNG_BYTES

    @pytest.mark.parametrize(
        "content_type",
        [
            "text/html; charset=utf-8",
            "TEXT/PLAIN",
            "application/json",
            "Application/JSON; charset=UTF-8",
            "application/javascript",
            "application/problem+json",
            "image/svg+xml",
        ],
    )
    def test_text_types_are_plain(self, encoder, content_type):
        response = CanonicalResponse(
            status_code=200, headers=[("content-type", content_type)], body=b"<p>hi</p>"
        )
        payload = encoder.encode(response, SchemaVariant.HTTP_API_V2)
        assert payload["isBase64Encoded"] is False
        assert payload["body"] == "<p>hi</p>"

    def test_text_type_with_invalid_utf8_falls_back_to_base64(self, encoder):
        body = b"caf\xe9"
        response = CanonicalResponse(
            status_code=200, headers=[("Content-Type", "text/plain")], body=body
        )
        payload = encoder.encode(response, SchemaVariant.REST_API_V1)
        assert payload["isBase64Encoded"] is True
        assert base64.b64decode(payload["body"]) == body

    def test_missing_content_type_is_base64(self, encoder):
        response = CanonicalResponse(status_code=200, body=b"mystery")
        payload = encoder.encode(response, SchemaVariant.REST_API_V1)
        assert payload["isBase64Encoded"] is True

    def test_empty_body_is_empty_text(self, encoder):
        response = CanonicalResponse(status_code=204)
        payload = encoder.encode(response, SchemaVariant.HTTP_API_V2)
        assert payload["body"] == ""
        assert payload["isBase64Encoded"] is False

    def test_custom_allow_list(self):
        codec = BodyCodec(["application/x-custom"])
        assert codec.encode(b"abc", "application/x-custom") == ("abc", False)
        assert codec.encode(b"abc", "text/plain") == ("YWJj", True)

    @pytest.mark.parametrize(
        "body",
        [b"", b"plain ascii", "ünïcødé".encode("utf-8"), bytes(range(256)), PNG_BYTES],
    )
    def test_body_round_trips_through_decoder(self, body):
        codec = BodyCodec(DEFAULT_TEXT_CONTENT_TYPES)
        for content_type in ("text/plain", "image/png"):
            text, is_base64 = codec.encode(body, content_type)
            assert decode_body(text, is_base64) == body


class TestRestApiV1Encoder:
    def test_required_fields_always_present(self, encoder):
        payload = encoder.encode(CanonicalResponse(status_code=404), SchemaVariant.REST_API_V1)
        assert set(payload) == {
            "statusCode",
            "headers",
            "multiValueHeaders",
            "body",
            "isBase64Encoded",
        }
        assert payload["statusCode"] == 404

    def test_set_cookies_only_in_multi_value_headers(self, encoder):
        payload = encoder.encode(_cookie_response(), SchemaVariant.REST_API_V1)

        assert payload["multiValueHeaders"]["Set-Cookie"] == [
            "a=1; Path=/",
            "b=2; HttpOnly",
            "c=3; Expires=Wed, 21 Oct 2015 07:28:00 GMT",
        ]
        assert "Set-Cookie" not in payload["headers"]
        assert payload["headers"]["Content-Type"] == "text/plain"

    def test_single_value_map_keeps_last_value(self, encoder):
        response = CanonicalResponse(
            status_code=200,
            headers=[("X-Trace", "one"), ("x-trace", "two"), ("Content-Type", "text/plain")],
            body=b"",
        )
        payload = encoder.encode(response, SchemaVariant.REST_API_V1)

        assert payload["headers"]["X-Trace"] == "two"
        assert payload["multiValueHeaders"]["X-Trace"] == ["one", "two"]
        assert "x-trace" not in payload["headers"]


class TestHttpApiV2Encoder:
    def test_three_set_cookies_become_cookie_array(self, encoder):
        payload = encoder.encode(_cookie_response(), SchemaVariant.HTTP_API_V2)

        assert payload["cookies"] == [
            "a=1; Path=/",
            "b=2; HttpOnly",
            "c=3; Expires=Wed, 21 Oct 2015 07:28:00 GMT",
        ]
        assert not any(name.lower() == "set-cookie" for name in payload["headers"])

    def test_duplicate_headers_are_comma_joined(self, encoder):
        response = CanonicalResponse(
            status_code=200,
            headers=[("Vary", "Accept"), ("vary", "Origin"), ("Content-Type", "text/plain")],
            body=b"x",
        )
        payload = encoder.encode(response, SchemaVariant.HTTP_API_V2)

        assert payload["headers"]["Vary"] == "Accept,Origin"

    def test_required_fields_always_present(self, encoder):
        payload = encoder.encode(CanonicalResponse(status_code=200), SchemaVariant.HTTP_API_V2)
        assert set(payload) == {"statusCode", "headers", "cookies", "body", "isBase64Encoded"}
        assert payload["cookies"] == []


class TestEncodingErrors:
    @pytest.mark.parametrize("variant", list(SchemaVariant))
    def test_header_value_with_newline(self, encoder, variant):
        response = CanonicalResponse(status_code=200, headers=[("X-Bad", "a\r\nInjected: 1")])
        with pytest.raises(EncodingError):
            encoder.encode(response, variant)

    @pytest.mark.parametrize("variant", list(SchemaVariant))
    @pytest.mark.parametrize("name", ["Bad Name", "X-Test\n", "X-Test\r\n", ""])
    def test_invalid_header_name(self, encoder, variant, name):
        response = CanonicalResponse(status_code=200, headers=[(name, "v")])
        with pytest.raises(EncodingError):
            encoder.encode(response, variant)

    @pytest.mark.parametrize("status_code", [0, 99, 600, -1])
    def test_out_of_range_status(self, encoder, status_code):
        with pytest.raises(EncodingError):
            encoder.encode(CanonicalResponse(status_code=status_code), SchemaVariant.HTTP_API_V2)

    def test_tab_in_header_value_is_allowed(self, encoder):
        response = CanonicalResponse(status_code=200, headers=[("X-Tab", "a\tb")])
        payload = encoder.encode(response, SchemaVariant.HTTP_API_V2)
        assert payload["headers"]["X-Tab"] == "a\tb"
